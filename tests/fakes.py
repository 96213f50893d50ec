"""Test doubles for ports."""

from datetime import date, datetime, time
from zoneinfo import ZoneInfo

from dayboard.core.calendar import CalendarEvent
from dayboard.exceptions import CalendarFetchError, CalendarNotFoundError

TZ = ZoneInfo("America/Toronto")


def make_event(
    event_id: str,
    day: date,
    description: str = "",
    summary: str = "Event",
    status: str = "confirmed",
) -> CalendarEvent:
    start = datetime.combine(day, time(10, 0), tzinfo=TZ)
    return CalendarEvent(
        id=event_id,
        summary=summary,
        description=description,
        start=start,
        end=datetime.combine(day, time(11, 0), tzinfo=TZ),
        status=status,
    )


class FakeCalendar:
    """In-memory CalendarRepository keyed by calendar id."""

    def __init__(
        self,
        events: dict[str, list[CalendarEvent]] | None = None,
        failing: set[str] | None = None,
        missing: set[str] | None = None,
    ):
        self.events = events or {}
        self.failing = failing or set()
        self.missing = missing or set()
        self.calls: list[tuple[str, datetime, datetime]] = []
        self.descriptions: dict[str, str] = {}

    def fetch_events(self, calendar_id: str, time_min: datetime, time_max: datetime) -> list[CalendarEvent]:
        self.calls.append((calendar_id, time_min, time_max))
        if calendar_id in self.missing:
            raise CalendarNotFoundError(calendar_id, "HTTP 404")
        if calendar_id in self.failing:
            raise CalendarFetchError(calendar_id, "timed out")
        return list(self.events.get(calendar_id, []))

    def update_description(self, calendar_id: str, event_id: str, description: str) -> None:
        self.descriptions[event_id] = description
