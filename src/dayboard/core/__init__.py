"""Functional core - pure business logic with no I/O."""

from .tasks import Task, sort_for_display, incomplete_in_order, filter_overdue
from .ordering import MovePlan, allocate_order, creation_order, needs_renumber, plan_move
from .rollover import RolloverPlan, TaskChange, plan_rollover
from .task_block import TaskBlock, parse_task_block, event_triage, format_task_block
from .calendar import CalendarEvent, DerivedTask, derive_task

__all__ = [
    # Tasks
    "Task",
    "sort_for_display",
    "incomplete_in_order",
    "filter_overdue",
    # Ordering
    "MovePlan",
    "allocate_order",
    "creation_order",
    "needs_renumber",
    "plan_move",
    # Rollover
    "RolloverPlan",
    "TaskChange",
    "plan_rollover",
    # Task blocks
    "TaskBlock",
    "parse_task_block",
    "event_triage",
    "format_task_block",
    # Calendar
    "CalendarEvent",
    "DerivedTask",
    "derive_task",
]
