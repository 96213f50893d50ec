"""Adapters - I/O implementations of ports."""

from .sqlite_store import SQLiteTaskStore, SQLiteSettingsStore
from .google_calendar import GoogleCalendarAdapter

__all__ = [
    "SQLiteTaskStore",
    "SQLiteSettingsStore",
    "GoogleCalendarAdapter",
]
