"""Day rollover planning - pure, no I/O dependencies."""

from dataclasses import dataclass, field
from datetime import date

from .ordering import sequence_orders
from .tasks import Task, filter_overdue


@dataclass
class TaskChange:
    """Fields to write for one task. Only changed fields are present."""

    task_id: str
    fields: dict = field(default_factory=dict)


@dataclass
class RolloverPlan:
    """Writes needed to roll the board over to a new day."""

    today: date
    renumbered: list[TaskChange] = field(default_factory=list)
    carried: list[TaskChange] = field(default_factory=list)

    @property
    def changes(self) -> list[TaskChange]:
        return self.renumbered + self.carried

    def is_empty(self) -> bool:
        return not self.renumbered and not self.carried


def plan_rollover(today: date, today_tasks: list[Task], earlier_tasks: list[Task]) -> RolloverPlan:
    """
    Renumber today's tasks and append the overdue incomplete ones after them.

    Today's tasks get 1000, 2000, ... in ascending order of their current
    order; carried tasks continue the sequence in their own prior order, move
    to `today` and have carry_over incremented. With nothing to carry the
    plan is empty, so orders set by moves during the day survive later runs.
    Tasks whose stored order already matches are left out.

    Pure function - no I/O.
    """
    plan = RolloverPlan(today=today)

    moving = sorted(
        filter_overdue(earlier_tasks, as_of=today),
        key=lambda t: (t.order, t.allocated_date, t.id),
    )
    if not moving:
        return plan

    staying = sorted(
        (t for t in today_tasks if t.allocated_date == today),
        key=lambda t: (t.order, t.id),
    )

    orders = sequence_orders(len(staying) + len(moving))

    for task, order in zip(staying, orders):
        if task.order != order:
            plan.renumbered.append(TaskChange(task.id, {"order": order}))

    for task, order in zip(moving, orders[len(staying):]):
        plan.carried.append(
            TaskChange(
                task.id,
                {
                    "order": order,
                    "allocated_date": today,
                    "carry_over": task.carry_over + 1,
                },
            )
        )

    return plan
