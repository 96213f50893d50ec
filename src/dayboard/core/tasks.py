"""Pure task domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date


@dataclass
class Task:
    """A task allocated to one day of the board."""

    id: str
    title: str
    allocated_date: date
    order: float = 0.0
    description: str = ""
    due_date: date | None = None
    completed: bool = False
    carry_over: int = 0
    google_calendar_id: str = ""

    @property
    def is_owned(self) -> bool:
        """Derived from a calendar event and managed by the reconciler."""
        return bool(self.google_calendar_id)

    def days_until_due(self, as_of: date | None = None) -> int | None:
        """Days until due date (negative if overdue)."""
        if not self.due_date:
            return None
        as_of = as_of or date.today()
        return (self.due_date - as_of).days

    @classmethod
    def from_row(cls, row) -> "Task":
        """Create Task from a storage row mapping."""
        due = row["due_date"]
        return cls(
            id=str(row["id"]),
            title=row["title"],
            description=row["description"] or "",
            allocated_date=date.fromisoformat(row["allocated_date"]),
            due_date=date.fromisoformat(due) if due else None,
            completed=bool(row["completed"]),
            order=float(row["order"]),
            carry_over=int(row["carry_over"] or 0),
            google_calendar_id=row["google_calendar_id"] or "",
        )


def sort_for_display(tasks: list[Task]) -> list[Task]:
    """
    Incomplete tasks first, then completed ones; each by order descending.

    Pure function - no I/O.
    """
    return sorted(tasks, key=lambda t: (t.completed, -t.order))


def incomplete_in_order(tasks: list[Task]) -> list[Task]:
    """Incomplete tasks of a partition, top of the column first."""
    return [t for t in sort_for_display(tasks) if not t.completed]


def filter_overdue(tasks: list[Task], as_of: date | None = None) -> list[Task]:
    """Filter to incomplete tasks allocated before the given day."""
    as_of = as_of or date.today()
    return [t for t in tasks if not t.completed and t.allocated_date < as_of]


def filter_by_date(tasks: list[Task], allocated_date: date) -> list[Task]:
    """Filter tasks to one day partition."""
    return [t for t in tasks if t.allocated_date == allocated_date]
