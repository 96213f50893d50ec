"""Ports - interfaces/protocols for external dependencies."""

from .task_repo import TaskRepository
from .calendar_repo import CalendarRepository
from .settings_store import SettingsStore

__all__ = [
    "TaskRepository",
    "CalendarRepository",
    "SettingsStore",
]
