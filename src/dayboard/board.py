"""Board operations shared by the CLI and the scheduler.

Every user-facing change to a task goes through here so ordering rules are
applied in one place.
"""

import logging
from datetime import date

from .core.ordering import needs_renumber, plan_move, sequence_orders
from .core.tasks import Task, sort_for_display
from .ports.task_repo import TaskRepository

logger = logging.getLogger(__name__)


class Board:
    """Day columns of tasks backed by a TaskRepository."""

    def __init__(self, store: TaskRepository):
        self.store = store

    def add_task(
        self,
        title: str,
        allocated_date: date,
        description: str = "",
        due_date: date | None = None,
    ) -> Task:
        """Create a task at the top of its day."""
        task = self.store.create(
            title=title.strip(),
            allocated_date=allocated_date,
            description=description,
            due_date=due_date,
        )
        logger.info(f'Added task "{task.title}" on {allocated_date}')
        return task

    def day(self, allocated_date: date) -> list[Task]:
        """Tasks on a day in display order."""
        return sort_for_display(self.store.list_for_date(allocated_date))

    def renumber_day(self, allocated_date: date) -> int:
        """Respace a day's orders to 1000, 2000, ... keeping their relative order."""
        tasks = sorted(self.store.list_for_date(allocated_date), key=lambda t: (t.order, t.id))
        written = 0
        for task, order in zip(tasks, sequence_orders(len(tasks))):
            if task.order != order:
                self.store.update(task.id, order=order)
                written += 1
        if written:
            logger.info(f"Renumbered {written} tasks on {allocated_date}")
        return written

    def move_task(
        self,
        task_id: str,
        destination_date: date,
        position: int | None = None,
        onto_id: str | None = None,
    ) -> Task | None:
        """
        Drop a task into a day column.

        Args:
            task_id: Task being moved.
            destination_date: Day it is dropped on.
            position: Index among the day's incomplete tasks to insert before;
                None drops it at the end of the incomplete tasks.
            onto_id: Task the drop landed on, instead of a position.

        Returns:
            The updated task, or None when the move changes nothing.
        """
        task = self.store.get(task_id)
        destination = self.store.list_for_date(destination_date)

        if needs_renumber([t.order for t in destination if not t.completed]):
            self.renumber_day(destination_date)
            task = self.store.get(task_id)
            destination = self.store.list_for_date(destination_date)

        onto = self.store.get(onto_id) if onto_id else None
        plan = plan_move(task, destination_date, destination, position=position, onto=onto)
        if plan is None:
            logger.debug(f"Move of {task_id} to {destination_date} is a no-op")
            return None

        if plan.allocated_date is None:
            return self.store.update(task_id, order=plan.order)
        return self.store.update(task_id, order=plan.order, allocated_date=plan.allocated_date)

    def set_completed(self, task_id: str, completed: bool = True) -> Task:
        return self.store.update(task_id, completed=completed)

    def rename(self, task_id: str, title: str) -> Task:
        """Retitle a task. Calendar-owned titles are reset on the next sync."""
        if not title.strip():
            raise ValueError("title is required")
        task = self.store.get(task_id)
        if task.is_owned:
            logger.warning(f"Task {task_id} is managed by calendar event {task.google_calendar_id}")
        return self.store.update(task_id, title=title.strip())

    def delete_task(self, task_id: str) -> None:
        self.store.delete(task_id)
        logger.info(f"Deleted task {task_id}")
