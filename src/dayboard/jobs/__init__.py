"""Scheduled jobs - each owns its dependencies, injected at construction."""

from .base import ScheduledJob
from .rollover import DayRolloverCarrier
from .reconcile import CalendarReconciler, ReconcileResult
from .token_refresh import AccessTokenRefresher

__all__ = [
    "ScheduledJob",
    "DayRolloverCarrier",
    "CalendarReconciler",
    "ReconcileResult",
    "AccessTokenRefresher",
]
