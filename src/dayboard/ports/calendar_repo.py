"""Calendar repository interface."""

from datetime import datetime
from typing import Protocol

from dayboard.core.calendar import CalendarEvent


class CalendarRepository(Protocol):
    """Interface for reading and annotating calendar events."""

    def fetch_events(self, calendar_id: str, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        """Fetch events starting in a window. Raises CalendarFetchError."""
        ...

    def update_description(self, calendar_id: str, event_id: str, description: str) -> None:
        """Replace an event's description."""
        ...
