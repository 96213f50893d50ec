"""Task directives embedded in calendar event descriptions.

A description carries a directive when it contains a block like:

    @@task 3d
    @title Buy a present
    @due 1d

`@@task Nd` allocates the task N days before the event, `@title` overrides
the event summary and `@due Nd` sets a due date N days before the event.
`@@ignore` marks an event as deliberately skipped.
"""

import re
from dataclasses import dataclass

TASK_MARKER = "@@task"
IGNORE_MARKER = "@@ignore"

# Applied in order. Everything a rule does not mention is dropped by _ANY_TAG.
_HTML_RULES: list[tuple[re.Pattern, str]] = [
    (re.compile(r"<style\b[\s\S]*?</style\s*>", re.IGNORECASE), ""),
    (re.compile(r"<script\b[\s\S]*?</script\s*>", re.IGNORECASE), ""),
    (re.compile(r"</div\s*>", re.IGNORECASE), "\n"),
    (re.compile(r"</li\s*>", re.IGNORECASE), "\n"),
    (re.compile(r"<li\b[^>]*>", re.IGNORECASE), "  *  "),
    (re.compile(r"</ul\s*>", re.IGNORECASE), "\n"),
    (re.compile(r"</p\s*>", re.IGNORECASE), "\n"),
    (re.compile(r"<br\s*/?>", re.IGNORECASE), "\n"),
]
_ANY_TAG = re.compile(r"<[^>]+>")

_ENTITIES = {
    "&nbsp;": " ",
    "&lt;": "<",
    "&gt;": ">",
    "&quot;": '"',
    "&#39;": "'",
    "&amp;": "&",
}

_TASK_RE = re.compile(r"@@task\s+(\d+)d", re.IGNORECASE)
# \s+ lets the title start on the line after the attribute
_TITLE_RE = re.compile(r"@title\s+(.+?)[ \t]*(?:\n|$)", re.IGNORECASE)
_DUE_RE = re.compile(r"@due\s+(\d+)d", re.IGNORECASE)
_IGNORE_RE = re.compile(re.escape(IGNORE_MARKER), re.IGNORECASE)


@dataclass(frozen=True)
class TaskBlock:
    """A parsed task directive."""

    days_before: int
    title: str | None = None
    days_before_due: int | None = None


def html_to_text(html: str) -> str:
    """Convert an event description to plain text."""
    text = html
    for pattern, replacement in _HTML_RULES:
        text = pattern.sub(replacement, text)
    text = _ANY_TAG.sub("", text)
    # &amp; last so "&amp;lt;" stays "&lt;"
    for entity, char in _ENTITIES.items():
        text = text.replace(entity, char)
    return text


def parse_task_block(raw_description: str | None) -> TaskBlock | None:
    """
    Extract the task directive from an event description.

    Returns None when the description has no `@@task Nd` marker or is
    marked `@@ignore`. When several `@@task` markers exist the first wins.
    """
    if not raw_description:
        return None

    description = html_to_text(raw_description)

    if _IGNORE_RE.search(description):
        return None

    task_match = _TASK_RE.search(description)
    if not task_match:
        return None

    title_match = _TITLE_RE.search(description)
    title = title_match.group(1).strip() if title_match else None

    due_match = _DUE_RE.search(description)

    return TaskBlock(
        days_before=int(task_match.group(1)),
        title=title or None,
        days_before_due=int(due_match.group(1)) if due_match else None,
    )


def event_triage(raw_description: str | None) -> str:
    """Classify an event: "ignored", "task" or "pending" (not triaged yet)."""
    text = html_to_text(raw_description or "")
    if _IGNORE_RE.search(text):
        return "ignored"
    if _TASK_RE.search(text):
        return "task"
    return "pending"


def format_task_block(
    days_before: int,
    title: str | None = None,
    days_before_due: int | None = None,
) -> str:
    """Render a directive block that parse_task_block reads back."""
    if days_before < 0:
        raise ValueError("days_before must be non-negative")
    lines = [f"{TASK_MARKER} {days_before}d"]
    if title and title.strip():
        lines.append(f"@title {title.strip()}")
    if days_before_due is not None:
        if days_before_due < 0:
            raise ValueError("days_before_due must be non-negative")
        lines.append(f"@due {days_before_due}d")
    return "\n".join(lines)


def append_directive(description: str | None, block: str) -> str:
    """Append a directive (task block or ignore marker) to a description."""
    if not description:
        return block
    separator = "\n" if block == IGNORE_MARKER else "\n\n"
    return f"{description}{separator}{block}"
