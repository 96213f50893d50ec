"""Tests for core task logic."""

from datetime import date, timedelta

import pytest

from dayboard.core.tasks import (
    Task,
    filter_by_date,
    filter_overdue,
    incomplete_in_order,
    sort_for_display,
)


@pytest.fixture
def sample_tasks(today):
    """Sample tasks across three days."""
    return [
        Task(id="1", title="Today top", allocated_date=today, order=3000),
        Task(id="2", title="Today done", allocated_date=today, order=9000, completed=True),
        Task(id="3", title="Today bottom", allocated_date=today, order=500),
        Task(id="4", title="Yesterday open", allocated_date=today - timedelta(days=1), order=1000),
        Task(id="5", title="Yesterday done", allocated_date=today - timedelta(days=1), order=2000, completed=True),
        Task(id="6", title="Tomorrow", allocated_date=today + timedelta(days=1), order=1000),
    ]


class TestTask:
    def test_owned_when_linked_to_event(self, today):
        task = Task(id="1", title="x", allocated_date=today, google_calendar_id="evt")
        assert task.is_owned is True

    def test_manual_task_not_owned(self, today):
        assert Task(id="1", title="x", allocated_date=today).is_owned is False

    def test_days_until_due(self, today):
        task = Task(id="1", title="x", allocated_date=today, due_date=today + timedelta(days=3))
        assert task.days_until_due(as_of=today) == 3
        assert Task(id="2", title="y", allocated_date=today).days_until_due(as_of=today) is None

    def test_from_row(self):
        row = {
            "id": "abc",
            "title": "Call",
            "description": None,
            "allocated_date": "2025-01-15",
            "due_date": "2025-01-17",
            "completed": 1,
            "order": 1500,
            "carry_over": 2,
            "google_calendar_id": "",
        }
        task = Task.from_row(row)
        assert task.allocated_date == date(2025, 1, 15)
        assert task.due_date == date(2025, 1, 17)
        assert task.completed is True
        assert task.order == 1500.0
        assert task.carry_over == 2
        assert task.description == ""


class TestSorting:
    def test_sort_for_display(self, sample_tasks, today):
        day = filter_by_date(sample_tasks, today)
        assert [t.id for t in sort_for_display(day)] == ["1", "3", "2"]

    def test_incomplete_in_order(self, sample_tasks, today):
        day = filter_by_date(sample_tasks, today)
        assert [t.id for t in incomplete_in_order(day)] == ["1", "3"]


class TestFilters:
    def test_filter_overdue(self, sample_tasks, today):
        assert [t.id for t in filter_overdue(sample_tasks, as_of=today)] == ["4"]

    def test_filter_by_date(self, sample_tasks, today):
        assert [t.id for t in filter_by_date(sample_tasks, today + timedelta(days=1))] == ["6"]
