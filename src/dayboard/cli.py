"""dayboard CLI - day-ordered task board synced with Google Calendar."""

import json
import sys
from datetime import date, datetime, timedelta
from zoneinfo import ZoneInfo

import click

from .adapters.google_calendar import GoogleCalendarAdapter
from .board import Board
from .config import ACCESS_TOKEN, CALENDAR_IDS, DAYS_IN_ADVANCE, Config, load_config
from .core.task_block import IGNORE_MARKER, append_directive, event_triage, format_task_block
from .core.tasks import Task
from .exceptions import AuthenticationError, CalendarFetchError, TaskNotFoundError
from .jobs.reconcile import parse_calendar_ids
from .logging_setup import setup_logging
from .scheduler import build_jobs, run_scheduler

DATE = click.DateTime(formats=["%Y-%m-%d"])


def _today(config: Config) -> date:
    return datetime.now(ZoneInfo(config.timezone)).date()


def _task_dict(task: Task) -> dict:
    return {
        "id": task.id,
        "title": task.title,
        "allocated_date": task.allocated_date.isoformat(),
        "due_date": task.due_date.isoformat() if task.due_date else None,
        "completed": task.completed,
        "order": task.order,
        "carry_over": task.carry_over,
        "google_calendar_id": task.google_calendar_id or None,
    }


def _format_task(task: Task) -> str:
    check = "x" if task.completed else " "
    extras = []
    if task.due_date:
        extras.append(f"due {task.due_date}")
    if task.carry_over:
        extras.append(f"carried {task.carry_over}x")
    if task.is_owned:
        extras.append("calendar")
    suffix = f" ({', '.join(extras)})" if extras else ""
    return f"[{check}] {task.title}{suffix}  <{task.id}>"


@click.group()
@click.version_option(package_name="dayboard")
@click.pass_context
def main(ctx):
    """dayboard - day-ordered task board."""
    config = load_config()
    setup_logging(config.log_level)
    ctx.obj = config


def _board(config: Config) -> Board:
    return Board(build_jobs(config).store)


@main.command()
@click.argument("title")
@click.option("--date", "on", type=DATE, help="Day to allocate (default: today)")
@click.option("--due", type=DATE, help="Due date")
@click.option("--description", default="", help="Free-text description")
@click.pass_obj
def add(config: Config, title: str, on: datetime | None, due: datetime | None, description: str):
    """Add a task at the top of a day."""
    allocated = on.date() if on else _today(config)
    try:
        task = _board(config).add_task(title, allocated, description, due.date() if due else None)
    except ValueError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo(f"Added {task.id} on {task.allocated_date}")


@main.command()
@click.argument("on", type=DATE, required=False)
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def day(config: Config, on: datetime | None, as_json: bool):
    """Show a day's tasks in board order."""
    target = on.date() if on else _today(config)
    tasks = _board(config).day(target)

    if as_json:
        click.echo(json.dumps([_task_dict(t) for t in tasks], indent=2))
        return

    click.echo(f"### {target.strftime('%A, %B %d')}")
    if not tasks:
        click.echo("No tasks.")
        return
    for task in tasks:
        click.echo(f"  {_format_task(task)}")


@main.command()
@click.argument("task_id")
@click.argument("destination", type=DATE)
@click.option("--position", type=click.IntRange(min=0), help="Index among incomplete tasks to insert before")
@click.option("--onto", "onto_id", help="Id of the task the drop lands on")
@click.pass_obj
def move(config: Config, task_id: str, destination: datetime, position: int | None, onto_id: str | None):
    """Move a task within or across days (default: end of incomplete tasks)."""
    try:
        task = _board(config).move_task(task_id, destination.date(), position=position, onto_id=onto_id)
    except (TaskNotFoundError, ValueError) as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)

    if task is None:
        click.echo("Nothing to do.")
    else:
        click.echo(f"Moved {task.id} to {task.allocated_date} (order {task.order:g})")


def _set_completed(config: Config, task_id: str, completed: bool) -> None:
    try:
        task = _board(config).set_completed(task_id, completed)
    except TaskNotFoundError:
        click.echo(f"Error: no task {task_id}", err=True)
        sys.exit(1)
    click.echo(_format_task(task))


@main.command()
@click.argument("task_id")
@click.pass_obj
def done(config: Config, task_id: str):
    """Mark a task completed."""
    _set_completed(config, task_id, True)


@main.command()
@click.argument("task_id")
@click.pass_obj
def undo(config: Config, task_id: str):
    """Mark a task incomplete."""
    _set_completed(config, task_id, False)


@main.command()
@click.argument("task_id")
@click.pass_obj
def rm(config: Config, task_id: str):
    """Delete a task."""
    try:
        _board(config).delete_task(task_id)
    except TaskNotFoundError:
        click.echo(f"Error: no task {task_id}", err=True)
        sys.exit(1)
    click.echo(f"Deleted {task_id}")


@main.command()
@click.pass_obj
def rollover(config: Config):
    """Carry unfinished tasks into today now."""
    plan = build_jobs(config).rollover()
    if plan is None:
        click.echo("Rollover already running.")
        return
    click.echo(f"Renumbered {len(plan.renumbered)}, carried {len(plan.carried)} into {plan.today}.")


@main.command()
@click.pass_obj
def sync(config: Config):
    """Reconcile calendar-derived tasks now."""
    result = build_jobs(config).reconciler()
    if result is None:
        click.echo("Sync already running.")
        return
    if result.skipped:
        click.echo("No access token configured. Run 'dayboard settings set access_token ...'.", err=True)
        return
    click.echo(
        f"Created {len(result.created)}, updated {len(result.updated)}, deleted {len(result.deleted)}."
    )
    for calendar_id in result.failed_calendars:
        click.echo(f"Warning: could not fetch {calendar_id}", err=True)
    for calendar_id in result.missing_calendars:
        click.echo(f"Warning: calendar {calendar_id} no longer exists; remove it from {CALENDAR_IDS}", err=True)


@main.command("refresh-token")
@click.pass_obj
def refresh_token(config: Config):
    """Refresh the Google access token now."""
    try:
        build_jobs(config).token_refresher.refresh()
    except AuthenticationError as e:
        click.echo(f"Error: {e}", err=True)
        sys.exit(1)
    click.echo("Access token refreshed.")


@main.group()
def settings():
    """Read and write stored settings."""
    pass


@settings.command("get")
@click.argument("key", required=False)
@click.pass_obj
def settings_get(config: Config, key: str | None):
    """Show one setting, or all of them."""
    store = build_jobs(config).settings
    if key:
        value = store.get(key)
        if value is None:
            click.echo(f"{key} is not set", err=True)
            sys.exit(1)
        click.echo(value)
        return
    for name, value in store.all().items():
        # Secrets are only shown when asked for by name
        shown = "********" if name in ("access_token", "refresh_token", "client_secret") else value
        click.echo(f"{name}={shown}")


@settings.command("set")
@click.argument("key")
@click.argument("value")
@click.pass_obj
def settings_set(config: Config, key: str, value: str):
    """Store a setting. Use '\\n' to separate calendar ids."""
    build_jobs(config).settings.set(key, value.replace("\\n", "\n"))
    click.echo(f"Set {key}")


def _calendar(config: Config) -> tuple[GoogleCalendarAdapter, list[str]]:
    store = build_jobs(config).settings
    token = store.get(ACCESS_TOKEN)
    if not token:
        click.echo("Error: no access token configured.", err=True)
        sys.exit(1)
    adapter = GoogleCalendarAdapter(token, timezone=config.timezone, timeout=config.http_timeout)
    return adapter, parse_calendar_ids(store.get(CALENDAR_IDS))


@main.command()
@click.option("--days", type=int, help="Days ahead (default: days_in_advance setting)")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def events(config: Config, days: int | None, as_json: bool):
    """List upcoming events and whether they carry a task directive."""
    adapter, calendar_ids = _calendar(config)
    if days is None:
        raw = build_jobs(config).settings.get(DAYS_IN_ADVANCE)
        days = int(raw) if raw and raw.isdigit() else config.default_days_in_advance

    now = datetime.now(ZoneInfo(config.timezone))
    found = []
    for calendar_id in calendar_ids:
        try:
            found.extend((calendar_id, e) for e in adapter.fetch_events(calendar_id, now, now + timedelta(days=days)))
        except CalendarFetchError as e:
            click.echo(f"Warning: {e}", err=True)

    found.sort(key=lambda pair: pair[1].start)

    if as_json:
        click.echo(
            json.dumps(
                [
                    {
                        "calendar_id": calendar_id,
                        "id": e.id,
                        "summary": e.summary,
                        "start": e.start.isoformat(),
                        "triage": event_triage(e.description),
                    }
                    for calendar_id, e in found
                ],
                indent=2,
            )
        )
        return

    if not found:
        click.echo("No upcoming events.")
        return
    for calendar_id, event in found:
        click.echo(f"{event.start:%Y-%m-%d %H:%M}  [{event_triage(event.description):7}] {event.summary}  <{calendar_id} {event.id}>")


@main.command("plan-event")
@click.argument("calendar_id")
@click.argument("event_id")
@click.argument("days_before", type=click.IntRange(min=0))
@click.option("--title", help="Task title instead of the event summary")
@click.option("--due", "days_before_due", type=click.IntRange(min=0), help="Due N days before the event")
@click.pass_obj
def plan_event(config: Config, calendar_id: str, event_id: str, days_before: int, title: str | None, days_before_due: int | None):
    """Add a task directive to an event's description."""
    adapter, _ = _calendar(config)
    event = adapter.get_event(calendar_id, event_id)
    if event is None:
        click.echo("Error: event has no start time.", err=True)
        sys.exit(1)
    if event_triage(event.description) != "pending":
        click.echo("Event already triaged.", err=True)
        return
    block = format_task_block(days_before, title, days_before_due)
    adapter.update_description(calendar_id, event_id, append_directive(event.description, block))
    click.echo(f"Planned {event.summary!r}; run 'dayboard sync' to create the task.")


@main.command("ignore-event")
@click.argument("calendar_id")
@click.argument("event_id")
@click.pass_obj
def ignore_event(config: Config, calendar_id: str, event_id: str):
    """Mark an event as not needing a task."""
    adapter, _ = _calendar(config)
    event = adapter.get_event(calendar_id, event_id)
    if event is None:
        click.echo("Error: event has no start time.", err=True)
        sys.exit(1)
    if event_triage(event.description) == "ignored":
        click.echo("Event already ignored.")
        return
    adapter.update_description(calendar_id, event_id, append_directive(event.description, IGNORE_MARKER))
    click.echo(f"Ignored {event.summary!r}.")


@main.command()
@click.pass_obj
def serve(config: Config):
    """Run rollover, sync and token refresh on their schedules."""
    run_scheduler(config)
