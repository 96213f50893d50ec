"""Tests for task directive parsing."""

import pytest

from dayboard.core.task_block import (
    TaskBlock,
    append_directive,
    event_triage,
    format_task_block,
    html_to_text,
    parse_task_block,
)


class TestParseTaskBlock:
    def test_full_block(self):
        block = parse_task_block("@@task 2d\n@title Buy gift\n@due 1d")
        assert block == TaskBlock(days_before=2, title="Buy gift", days_before_due=1)

    def test_marker_only(self):
        assert parse_task_block("Bring snacks\n\n@@task 3d") == TaskBlock(days_before=3)

    def test_case_insensitive(self):
        block = parse_task_block("@@TASK 4D\n@Title Pack bags")
        assert block.days_before == 4
        assert block.title == "Pack bags"

    def test_zero_days(self):
        assert parse_task_block("@@task 0d").days_before == 0

    def test_first_marker_wins(self):
        assert parse_task_block("@@task 2d\n@@task 5d").days_before == 2

    def test_marker_without_unit_is_not_a_directive(self):
        assert parse_task_block("@@task 2") is None

    def test_bare_description(self):
        assert parse_task_block("Quarterly planning with the team") is None

    def test_empty_description(self):
        assert parse_task_block("") is None
        assert parse_task_block(None) is None

    def test_ignore_without_task(self):
        assert parse_task_block("Standup\n@@ignore") is None

    def test_ignore_overrides_task(self):
        assert parse_task_block("@@task 2d\n@@ignore") is None

    def test_title_and_due_without_marker(self):
        assert parse_task_block("@title Something\n@due 1d") is None

    def test_blank_title_is_none(self):
        assert parse_task_block("@@task 1d\n@title   \n").title is None

    def test_title_on_next_line(self):
        assert parse_task_block("@@task 1d\n@title\nCall mom").title == "Call mom"

    def test_title_in_separate_paragraph(self):
        block = parse_task_block("<p>@@task 2d</p><p>@title</p><p>Book table</p>")
        assert block.title == "Book table"

    def test_html_description(self):
        block = parse_task_block("<p>Dinner</p><p>@@task 2d</p><p>@title Book table</p>")
        assert block == TaskBlock(days_before=2, title="Book table")

    def test_html_line_breaks(self):
        block = parse_task_block("@@task 1d<br/>@title Call mom<br>@due 0d")
        assert block == TaskBlock(days_before=1, title="Call mom", days_before_due=0)

    def test_html_entities_in_title(self):
        block = parse_task_block("@@task 1d<br>@title Fish &amp; chips")
        assert block.title == "Fish & chips"

    def test_marker_inside_style_is_ignored(self):
        assert parse_task_block("<style>.x { } @@task 9d</style>@@task 1d").days_before == 1

    def test_marker_inside_script_only(self):
        assert parse_task_block("<script>var s = '@@task 9d';</script>Lunch") is None


class TestHtmlToText:
    def test_list_items(self):
        text = html_to_text("<ul><li>one</li><li>two</li></ul>")
        assert text == "  *  one\n  *  two\n\n"

    def test_div_and_unknown_tags(self):
        assert html_to_text("<div><b>bold</b></div><span>x</span>") == "bold\nx"

    def test_plain_text_unchanged(self):
        assert html_to_text("@@task 2d\n@due 1d") == "@@task 2d\n@due 1d"


class TestEventTriage:
    def test_pending(self):
        assert event_triage("Team sync") == "pending"
        assert event_triage(None) == "pending"

    def test_task(self):
        assert event_triage("<p>@@task 1d</p>") == "task"

    def test_ignored(self):
        assert event_triage("notes\n@@ignore") == "ignored"


class TestFormatTaskBlock:
    def test_marker_only(self):
        assert format_task_block(3) == "@@task 3d"

    def test_all_parts(self):
        assert format_task_block(2, "Buy gift", 1) == "@@task 2d\n@title Buy gift\n@due 1d"

    def test_parses_back(self):
        assert parse_task_block(format_task_block(5, " Renew passport ", 2)) == TaskBlock(5, "Renew passport", 2)

    def test_negative_days_rejected(self):
        with pytest.raises(ValueError):
            format_task_block(-1)
        with pytest.raises(ValueError):
            format_task_block(1, days_before_due=-2)


class TestAppendDirective:
    def test_empty_description(self):
        assert append_directive("", "@@task 1d") == "@@task 1d"

    def test_task_block_separated_by_blank_line(self):
        assert append_directive("Agenda", "@@task 1d") == "Agenda\n\n@@task 1d"

    def test_ignore_on_next_line(self):
        assert append_directive("Agenda", "@@ignore") == "Agenda\n@@ignore"
