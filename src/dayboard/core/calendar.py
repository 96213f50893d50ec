"""Pure calendar domain logic - no I/O dependencies."""

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

from .task_block import TaskBlock


@dataclass
class CalendarEvent:
    """A calendar event as fetched from the API. Never persisted."""

    id: str
    summary: str
    description: str
    start: datetime
    end: datetime | None
    status: str = "confirmed"
    all_day: bool = False
    html_link: str = ""

    @property
    def is_cancelled(self) -> bool:
        return self.status == "cancelled"

    def start_day(self, tz: ZoneInfo | None = None) -> date:
        """The calendar day the event starts on, seen from `tz`."""
        if self.all_day or tz is None or self.start.tzinfo is None:
            return self.start.date()
        return self.start.astimezone(tz).date()

    @classmethod
    def from_api(cls, data: dict, timezone: str = "America/Toronto") -> "CalendarEvent | None":
        """Create CalendarEvent from a Google Calendar API item.

        Returns None for items without a usable start.
        """
        start_raw = data.get("start", {})
        end_raw = data.get("end", {})

        if "date" in start_raw:
            # All-day event: attach timezone so it compares with timed events
            tz = ZoneInfo(timezone)
            start = datetime.fromisoformat(start_raw["date"]).replace(tzinfo=tz)
            end = datetime.fromisoformat(end_raw["date"]).replace(tzinfo=tz) if "date" in end_raw else None
            all_day = True
        elif "dateTime" in start_raw:
            start = datetime.fromisoformat(start_raw["dateTime"])
            end = datetime.fromisoformat(end_raw["dateTime"]) if "dateTime" in end_raw else None
            all_day = False
        else:
            return None

        return cls(
            id=data["id"],
            summary=data.get("summary") or "Untitled",
            description=data.get("description") or "",
            start=start,
            end=end,
            status=data.get("status", "confirmed"),
            all_day=all_day,
            html_link=data.get("htmlLink", ""),
        )


@dataclass(frozen=True)
class DerivedTask:
    """What an event's task should look like."""

    title: str
    allocated_date: date
    due_date: date | None


def allocated_date_for(event_day: date, days_before: int, today: date) -> date:
    """N days before the event, clamped so it never lands in the past."""
    return max(today, event_day - timedelta(days=days_before))


def due_date_for(event_day: date, days_before_due: int | None) -> date | None:
    """N days before the event, or no due date."""
    if days_before_due is None:
        return None
    return event_day - timedelta(days=days_before_due)


def derive_task(
    event: CalendarEvent,
    block: TaskBlock,
    today: date,
    tz: ZoneInfo | None = None,
) -> DerivedTask:
    """
    Compute the task an event's directive asks for.

    Pure function - no I/O.
    """
    event_day = event.start_day(tz)
    return DerivedTask(
        title=block.title or event.summary,
        allocated_date=allocated_date_for(event_day, block.days_before, today),
        due_date=due_date_for(event_day, block.days_before_due),
    )


def sort_events_by_start(events: list[CalendarEvent]) -> list[CalendarEvent]:
    """Sort events by start time."""
    return sorted(events, key=lambda e: e.start)
