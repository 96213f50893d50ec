"""Calendar reconciliation: keep calendar-derived tasks in step with events."""

import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta
from typing import Callable

from dayboard.config import ACCESS_TOKEN, CALENDAR_IDS, DAYS_IN_ADVANCE
from dayboard.core.calendar import CalendarEvent, derive_task
from dayboard.core.task_block import parse_task_block
from dayboard.exceptions import CalendarFetchError, CalendarNotFoundError
from dayboard.ports.calendar_repo import CalendarRepository
from dayboard.ports.settings_store import SettingsStore
from dayboard.ports.task_repo import TaskRepository

from .base import ScheduledJob

logger = logging.getLogger(__name__)


@dataclass
class ReconcileResult:
    """What one reconciliation run did."""

    created: list[str] = field(default_factory=list)
    updated: list[str] = field(default_factory=list)
    deleted: list[str] = field(default_factory=list)
    failed_calendars: list[str] = field(default_factory=list)
    missing_calendars: list[str] = field(default_factory=list)
    skipped: bool = False

    @property
    def writes(self) -> int:
        return len(self.created) + len(self.updated) + len(self.deleted)


def parse_calendar_ids(value: str | None) -> list[str]:
    """Split the newline-delimited calendar list; empty means the primary calendar."""
    ids = [line.strip() for line in (value or "").splitlines() if line.strip()]
    return ids or ["primary"]


class CalendarReconciler(ScheduledJob):
    """
    Upserts and deletes calendar-derived tasks to match the calendar.

    A task is owned by an event when its google_calendar_id is the event id.
    Only title, allocated_date and due_date of an owned task are ever
    written; its order and completed flag belong to the user.
    """

    name = "calendar_reconcile"

    def __init__(
        self,
        store: TaskRepository,
        settings: SettingsStore,
        calendar_factory: Callable[[str], CalendarRepository],
        timezone: str = "America/Toronto",
        default_days_in_advance: int = 30,
        clock: Callable[[], datetime] | None = None,
    ):
        super().__init__(timezone, clock)
        self.store = store
        self.settings = settings
        self.calendar_factory = calendar_factory
        self.default_days_in_advance = default_days_in_advance

    def _days_in_advance(self) -> int:
        raw = self.settings.get(DAYS_IN_ADVANCE)
        if raw is None:
            return self.default_days_in_advance
        try:
            return max(0, int(raw))
        except ValueError:
            logger.warning(f"Invalid days_in_advance setting {raw!r}, using {self.default_days_in_advance}")
            return self.default_days_in_advance

    def run(self) -> ReconcileResult:
        result = ReconcileResult()

        access_token = self.settings.get(ACCESS_TOKEN)
        if not access_token:
            logger.info("No access token found, skipping calendar sync")
            result.skipped = True
            return result

        now = self.now()
        time_max = now + timedelta(days=self._days_in_advance())
        calendar = self.calendar_factory(access_token)

        live: dict[str, CalendarEvent] = {}
        for calendar_id in parse_calendar_ids(self.settings.get(CALENDAR_IDS)):
            try:
                events = calendar.fetch_events(calendar_id, now, time_max)
            except CalendarNotFoundError as e:
                # Gone for good: its tasks are swept like those of deleted events
                logger.warning(f"{e}; remove it from {CALENDAR_IDS}")
                result.missing_calendars.append(calendar_id)
                continue
            except CalendarFetchError as e:
                logger.warning(f"{e}; skipping this calendar")
                result.failed_calendars.append(calendar_id)
                continue
            for event in events:
                if not event.is_cancelled:
                    live.setdefault(event.id, event)

        if result.failed_calendars:
            # Transient failures: those calendars' events are unknown, so absence proves nothing
            logger.warning("Not deleting tasks of missing events: some calendars could not be fetched")
        else:
            self._delete_orphans(live, result)

        today = now.date()
        for event in live.values():
            self._sync_event(event, today, result)

        logger.info(
            f"Calendar sync done: {len(result.created)} created, {len(result.updated)} updated, "
            f"{len(result.deleted)} deleted, {len(result.failed_calendars)} calendars failed, "
            f"{len(result.missing_calendars)} calendars missing"
        )
        return result

    def _delete_orphans(self, live: dict[str, CalendarEvent], result: ReconcileResult) -> None:
        for task in self.store.list_owned():
            if task.google_calendar_id not in live:
                logger.info(f'Deleting task "{task.title}" - calendar event no longer exists')
                self.store.delete(task.id)
                result.deleted.append(task.id)

    def _sync_event(self, event: CalendarEvent, today: date, result: ReconcileResult) -> None:
        block = parse_task_block(event.description)
        existing = self.store.find_by_calendar_id(event.id)

        if block is None:
            if existing is not None:
                logger.info(f'Deleting task "{existing.title}" - no task block in event')
                self.store.delete(existing.id)
                result.deleted.append(existing.id)
            return

        derived = derive_task(event, block, today, self.tz)

        if existing is None:
            due = f", due: {derived.due_date}" if derived.due_date else ""
            logger.info(f'Creating new task "{derived.title}" for {derived.allocated_date}{due}')
            task = self.store.create(
                title=derived.title,
                allocated_date=derived.allocated_date,
                due_date=derived.due_date,
                completed=False,
                google_calendar_id=event.id,
            )
            result.created.append(task.id)
            return

        # order is kept, so it may tie with a task already on the new day
        changes = {}
        if existing.allocated_date != derived.allocated_date:
            changes["allocated_date"] = derived.allocated_date
        if existing.title != derived.title:
            changes["title"] = derived.title
        if existing.due_date != derived.due_date:
            changes["due_date"] = derived.due_date

        if changes:
            logger.info(
                f'Updating task "{derived.title}" - allocated_date: {existing.allocated_date} -> '
                f"{derived.allocated_date}, title: {existing.title} -> {derived.title}, "
                f"due_date: {existing.due_date} -> {derived.due_date}"
            )
            self.store.update(existing.id, **changes)
            result.updated.append(existing.id)
