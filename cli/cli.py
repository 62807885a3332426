"""Developer CLI for previewing schedules.

Loads a day's calendar events from a JSON file and runs the same engine
the application uses, printing the projected sessions. Nothing is written
to any calendar.
"""

import json
from datetime import datetime, time, timedelta
from pathlib import Path

import typer
from loguru import logger
from pydantic import TypeAdapter, ValidationError
from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from timeboxer.calendar.availability import compute_availability
from timeboxer.calendar.events import (
    CalendarEvent,
    busy_intervals_from_events,
    count_existing_sessions,
    has_planning_session,
)
from timeboxer.config.settings import settings
from timeboxer.core.logger import setup_logger
from timeboxer.scheduling.engine import generate_schedule
from timeboxer.scheduling.errors import SchedulingConfigError
from timeboxer.scheduling.presets import Preset, get_preset, list_presets
from timeboxer.scheduling.titles import parse_task_list
from timeboxer.scheduling.types import SchedulingConfig, ScheduleStatus

console = Console()

app = typer.Typer(
    name="timeboxer",
    help="Timeboxer CLI - preview session schedules against calendar events",
    add_completion=False,
)

DEFAULT_PRESET = "standard_workday"

_STATUS_STYLES: dict[ScheduleStatus, str] = {
    ScheduleStatus.COMPLETE: "green",
    ScheduleStatus.PARTIAL: "yellow",
    ScheduleStatus.TRUNCATED: "yellow",
    ScheduleStatus.EMPTY: "red",
}

_events_adapter = TypeAdapter(list[CalendarEvent])


@app.callback()
def main(
    log_level: str = typer.Option(settings.log_level, "--log-level", help="Logging level"),
    log_file: Path | None = typer.Option(None, "--log-file", dir_okay=False, help="Also write logs to this rotating file"),
) -> None:
    """Configure logging before any command runs."""
    setup_logger(level=log_level, log_file=log_file)


def _load_events(events_file: Path | None) -> list[CalendarEvent]:
    if events_file is None:
        return []
    try:
        return _events_adapter.validate_json(events_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        console.print(f"[red]Error:[/red] {events_file} is not a valid event list:\n{e}")
        raise typer.Exit(1) from e


def _load_tasks(tasks_file: Path | None) -> tuple[str, ...] | None:
    if tasks_file is None:
        return None
    return parse_task_list(tasks_file.read_text(encoding="utf-8"))


def _with_tasks(config: SchedulingConfig, work_tasks: tuple[str, ...] | None, side_tasks: tuple[str, ...] | None) -> SchedulingConfig:
    update = {}
    if work_tasks is not None:
        update["work"] = config.work.model_copy(update={"task_titles": work_tasks})
    if side_tasks is not None:
        update["side"] = config.side.model_copy(update={"task_titles": side_tasks})
    return config.model_copy(update=update) if update else config


def _session_calendars(config: SchedulingConfig, excluded: list[str]) -> set[str]:
    """Calendars sessions are written to; only these hold existing sessions."""
    calendars = {config.work.calendar, config.side.calendar}
    if config.extra.enabled:
        calendars.add(config.extra.calendar)
    return calendars - set(excluded)


def _resolve_preset(key: str) -> Preset:
    try:
        return get_preset(key)
    except KeyError as e:
        raise typer.BadParameter(str(e.args[0]), param_hint="--preset") from e


def _parse_day(value: str) -> datetime:
    try:
        return datetime.strptime(value, "%Y-%m-%d")
    except ValueError as e:
        raise typer.BadParameter(f"expected YYYY-MM-DD, got '{value}'", param_hint="--date") from e


def _parse_clock(day_start: datetime, value: str | None, default_hour: int, hint: str) -> datetime:
    if value is None:
        return datetime.combine(day_start.date(), time(hour=default_hour))
    try:
        parsed = datetime.strptime(value, "%H:%M").time()
    except ValueError as e:
        raise typer.BadParameter(f"expected HH:MM, got '{value}'", param_hint=hint) from e
    return datetime.combine(day_start.date(), parsed)


@app.command()
def presets() -> None:
    """List the built-in presets."""
    table = Table(title="Built-in presets")
    table.add_column("Key", style="cyan")
    table.add_column("Name")
    table.add_column("Work", justify="right")
    table.add_column("Side", justify="right")
    table.add_column("Pattern")
    table.add_column("Starts", justify="right")

    for preset in list_presets():
        config = preset.config
        table.add_row(
            preset.key,
            preset.name,
            f"{config.work.count} x {config.work.duration_minutes}m",
            f"{config.side.count} x {config.side.duration_minutes}m",
            config.pattern.value,
            f"{preset.default_start_hour:02d}:00",
        )
    console.print(table)


@app.command()
def preview(
    date: str = typer.Option(..., "--date", "-d", help="Day to schedule (YYYY-MM-DD)"),
    events_file: Path | None = typer.Option(None, "--events", "-e", exists=True, dir_okay=False, help="JSON list of calendar events"),
    start: str | None = typer.Option(None, "--start", "-s", help="Earliest start (HH:MM); defaults to the preset's start hour"),
    preset_key: str = typer.Option(DEFAULT_PRESET, "--preset", "-p", help="Built-in preset key"),
    no_planning: bool = typer.Option(False, "--no-planning", help="Skip the planning session"),
    exclude_calendar: list[str] = typer.Option([], "--exclude-calendar", help="Calendar whose events never block time"),
    work_tasks_file: Path | None = typer.Option(None, "--work-tasks", exists=True, dir_okay=False, help="Text file of Work titles, one per line"),
    side_tasks_file: Path | None = typer.Option(None, "--side-tasks", exists=True, dir_okay=False, help="Text file of Side titles, one per line"),
    as_json: bool = typer.Option(False, "--json", help="Print the result as JSON"),
) -> None:
    """Project a day's sessions around existing calendar events."""
    preset = _resolve_preset(preset_key)
    day_start = _parse_day(date)
    start_time = _parse_clock(day_start, start, preset.default_start_hour, "--start")
    events = _load_events(events_file)
    config = _with_tasks(preset.config, _load_tasks(work_tasks_file), _load_tasks(side_tasks_file))

    busy = busy_intervals_from_events(events, excluded_calendars=exclude_calendar)
    existing = count_existing_sessions(events, calendars=_session_calendars(config, exclude_calendar))
    include_planning = not no_planning and not has_planning_session(events, config.planning.title)
    logger.info(f"Previewing {date} with preset={preset.key}, busy={len(busy)}, existing={existing.total}")

    try:
        result = generate_schedule(
            day_start,
            start_time,
            busy,
            config,
            include_planning=include_planning,
            existing=existing,
        )
    except SchedulingConfigError as e:
        console.print(f"[red]Error:[/red] {e.code}: {'; '.join(e.details)}")
        raise typer.Exit(1) from e

    if as_json:
        typer.echo(json.dumps(result.model_dump(mode="json"), indent=2, ensure_ascii=False))
        return

    table = Table(title=f"Projected sessions for {date}")
    table.add_column("#", justify="right")
    table.add_column("Category")
    table.add_column("Title")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Calendar")
    for index, session in enumerate(result.sessions, start=1):
        table.add_row(
            str(index),
            session.category.value,
            session.title,
            f"{session.start:%H:%M}",
            f"{session.end:%H:%M}",
            session.calendar,
        )
    console.print(table)
    console.print(Panel(result.message, title=result.status.value, border_style=_STATUS_STYLES[result.status]))


@app.command()
def availability(
    date: str = typer.Option(..., "--date", "-d", help="Day to inspect (YYYY-MM-DD)"),
    events_file: Path | None = typer.Option(None, "--events", "-e", exists=True, dir_okay=False, help="JSON list of calendar events"),
    start: str | None = typer.Option(None, "--start", "-s", help="Window start (HH:MM)"),
    end: str | None = typer.Option(None, "--end", help="Window end (HH:MM); defaults to the day boundary"),
    preset_key: str = typer.Option(DEFAULT_PRESET, "--preset", "-p", help="Built-in preset key"),
) -> None:
    """Print the advisory free-time summary for a day."""
    preset = _resolve_preset(preset_key)
    config = preset.config
    day_start = _parse_day(date)
    window_start = _parse_clock(day_start, start, preset.default_start_hour, "--start")
    if end is None:
        window_end = day_start + timedelta(hours=config.day_boundary_hour)
    else:
        window_end = _parse_clock(day_start, end, 0, "--end")

    busy = busy_intervals_from_events(_load_events(events_file))
    summary = compute_availability(
        (window_start, window_end),
        busy,
        config.conflict_buffer_minutes,
        config.work.duration_minutes,
        config.side.duration_minutes,
        config.work.rest_minutes,
        side_rest_minutes=config.side.rest_minutes,
    )

    table = Table(title=f"Free time on {date}")
    table.add_column("Start")
    table.add_column("End")
    table.add_column("Minutes", justify="right")
    for gap in summary.gaps:
        table.add_row(f"{gap.start:%H:%M}", f"{gap.end:%H:%M}", str(gap.duration_minutes))
    console.print(table)
    console.print(
        f"Available: [bold]{summary.formatted_available_time}[/bold], "
        f"longest gap {summary.longest_gap_minutes}m, "
        f"up to {summary.possible_work_sessions} work / {summary.possible_side_sessions} side sessions"
    )
