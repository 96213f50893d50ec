"""Wiring of the scheduled jobs."""

import logging
from dataclasses import dataclass

from apscheduler.schedulers.blocking import BlockingScheduler
from apscheduler.triggers.cron import CronTrigger

from .adapters.google_calendar import GoogleCalendarAdapter
from .adapters.sqlite_store import SQLiteSettingsStore, SQLiteTaskStore
from .config import Config, load_config
from .jobs import AccessTokenRefresher, CalendarReconciler, DayRolloverCarrier

logger = logging.getLogger(__name__)


@dataclass
class Jobs:
    """The jobs and the stores they share."""

    store: SQLiteTaskStore
    settings: SQLiteSettingsStore
    rollover: DayRolloverCarrier
    reconciler: CalendarReconciler
    token_refresher: AccessTokenRefresher


def build_jobs(config: Config) -> Jobs:
    """Construct every job with its dependencies."""
    store = SQLiteTaskStore(config.db_path)
    settings = SQLiteSettingsStore(config.db_path)

    def calendar_factory(access_token: str) -> GoogleCalendarAdapter:
        return GoogleCalendarAdapter(access_token, timezone=config.timezone, timeout=config.http_timeout)

    return Jobs(
        store=store,
        settings=settings,
        rollover=DayRolloverCarrier(store, timezone=config.timezone),
        reconciler=CalendarReconciler(
            store,
            settings,
            calendar_factory,
            timezone=config.timezone,
            default_days_in_advance=config.default_days_in_advance,
        ),
        token_refresher=AccessTokenRefresher(settings, timezone=config.timezone),
    )


def setup_scheduler(jobs: Jobs, config: Config | None = None, scheduler=None):
    """Register the jobs on a scheduler (a BlockingScheduler by default)."""
    if config is None:
        config = load_config()

    if scheduler is None:
        scheduler = BlockingScheduler(timezone=config.timezone)

    entries = [
        (jobs.token_refresher, config.token_refresh_schedule),
        (jobs.rollover, config.rollover_schedule),
        (jobs.reconciler, config.reconcile_schedule),
    ]
    for job, crontab in entries:
        try:
            trigger = CronTrigger.from_crontab(crontab, timezone=config.timezone)
        except ValueError:
            logger.warning(f"Invalid schedule for {job.name}: {crontab!r}")
            continue
        # One instance per job; missed runs collapse into one
        scheduler.add_job(job, trigger, id=job.name, name=job.name, max_instances=1, coalesce=True)
        logger.info(f"Scheduled {job.name} at '{crontab}'")

    return scheduler


def run_scheduler(config: Config | None = None) -> None:
    """Run the jobs until interrupted."""
    if config is None:
        config = load_config()

    jobs = build_jobs(config)
    scheduler = setup_scheduler(jobs, config)

    # Catch up once at startup so a fresh process does not wait an hour.
    # A failure is logged like a scheduled run's and retried on schedule.
    for job in (jobs.token_refresher, jobs.rollover, jobs.reconciler):
        try:
            job()
        except Exception:
            logger.exception(f"Startup run of {job.name} failed")

    logger.info("Starting dayboard scheduler...")
    try:
        scheduler.start()
    except (KeyboardInterrupt, SystemExit):
        logger.info("Scheduler stopped")
