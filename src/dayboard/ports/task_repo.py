"""Task repository interface."""

from datetime import date
from typing import Protocol

from dayboard.core.tasks import Task


class TaskRepository(Protocol):
    """Interface for persisting tasks in any backend."""

    def get(self, task_id: str) -> Task:
        """Fetch one task. Raises TaskNotFoundError if missing."""
        ...

    def create(
        self,
        title: str,
        allocated_date: date,
        description: str = "",
        due_date: date | None = None,
        completed: bool = False,
        google_calendar_id: str = "",
    ) -> Task:
        """Insert a task at the top of its day and return it."""
        ...

    def update(self, task_id: str, **fields) -> Task:
        """Write the given fields of one task and return the result."""
        ...

    def delete(self, task_id: str) -> None:
        """Delete one task."""
        ...

    def list_for_date(self, allocated_date: date) -> list[Task]:
        """All tasks on a day, ascending by order."""
        ...

    def list_overdue(self, before: date) -> list[Task]:
        """Incomplete tasks allocated before a day, ascending by order."""
        ...

    def list_owned(self) -> list[Task]:
        """Tasks derived from calendar events."""
        ...

    def find_by_calendar_id(self, google_calendar_id: str) -> Task | None:
        """The task owned by a calendar event, if any."""
        ...

    def max_order(self, allocated_date: date) -> float | None:
        """Highest order on a day, or None for an empty day."""
        ...
