"""Day rollover: carry unfinished tasks into today."""

import logging
from datetime import datetime
from typing import Callable

from dayboard.core.rollover import RolloverPlan, plan_rollover
from dayboard.ports.task_repo import TaskRepository

from .base import ScheduledJob

logger = logging.getLogger(__name__)


class DayRolloverCarrier(ScheduledJob):
    """
    Moves overdue incomplete tasks onto today, renumbering today's orders
    when it carries any.

    Only tasks allocated strictly before today are carried, so running this
    again later the same day writes nothing.
    """

    name = "day_rollover"

    def __init__(
        self,
        store: TaskRepository,
        timezone: str = "America/Toronto",
        clock: Callable[[], datetime] | None = None,
    ):
        super().__init__(timezone, clock)
        self.store = store

    def run(self) -> RolloverPlan:
        today = self.now().date()

        plan = plan_rollover(
            today,
            self.store.list_for_date(today),
            self.store.list_overdue(today),
        )

        for change in plan.renumbered:
            self.store.update(change.task_id, **change.fields)

        for change in plan.carried:
            self.store.update(change.task_id, **change.fields)
            logger.info(
                f"Carried task {change.task_id} to {today} "
                f"(order {change.fields['order']:.0f}, carry_over {change.fields['carry_over']})"
            )

        if plan.is_empty():
            logger.debug(f"Nothing to roll over for {today}")
        else:
            logger.info(
                f"Rollover for {today}: renumbered {len(plan.renumbered)}, carried {len(plan.carried)}"
            )
        return plan
