"""Scheduling Engine - Greedy Time-Cursor Placement.

Walks a time cursor forward through the day, placing Planning, Extra and
Work/Side sessions in priority order and stepping over busy intervals.
The engine is a pure function of its inputs: every call builds its own
run state and returns a fresh ScheduleResult.

Per-iteration priority:
1. Planning, if requested and not yet placed
2. Extra, if enabled, quota open and enough regular sessions since the last one
3. Next entry of the order sequence whose quota is still open
4. Any of Work, Side, Extra with open quota, in that order
5. Stop

Termination is guaranteed by the day boundary and the attempt cap.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import datetime, timedelta

from loguru import logger

from timeboxer.calendar.availability import find_conflict
from timeboxer.config.settings import settings
from timeboxer.scheduling.logging import log_schedule_outcome
from timeboxer.scheduling.order import generate_order
from timeboxer.scheduling.rounding import ceil_to_interval, round_up
from timeboxer.scheduling.titles import build_title_pools, resolve_title
from timeboxer.scheduling.types import (
    BusyInterval,
    ExistingSessions,
    ScheduledSession,
    ScheduleResult,
    ScheduleStatus,
    SchedulingConfig,
    SessionCategory,
)
from timeboxer.scheduling.validate import validate_schedule_inputs

WORK = SessionCategory.WORK
SIDE = SessionCategory.SIDE
EXTRA = SessionCategory.EXTRA
PLANNING = SessionCategory.PLANNING

QUOTA_CATEGORIES: tuple[SessionCategory, ...] = (WORK, SIDE, EXTRA)


@dataclass
class _RunState:
    """Mutable state of a single run. Never outlives generate_schedule."""

    cursor: datetime
    planning_needed: bool
    counts: dict[SessionCategory, int]
    placed: dict[SessionCategory, int] = field(default_factory=lambda: dict.fromkeys(SessionCategory, 0))
    sequence_index: int = 0
    regular_since_extra: int = 0
    attempts: int = 0
    truncated: bool = False

    def has_open_quota(self, category: SessionCategory, config: SchedulingConfig) -> bool:
        return self.counts[category] < config.quota_for(category)


def _seed_cursor(start_time: datetime, day_start: datetime, interval_minutes: int) -> datetime:
    """First candidate start: start_time rounded up, never before the (rounded) day start."""
    cursor = round_up(start_time, interval_minutes)
    if cursor < day_start:
        cursor = ceil_to_interval(day_start, interval_minutes)
    return cursor


def _extra_due(state: _RunState, config: SchedulingConfig) -> bool:
    return state.has_open_quota(EXTRA, config) and state.regular_since_extra >= config.extra.inject_after_every


def _next_unit(
    state: _RunState,
    order: Sequence[SessionCategory],
    config: SchedulingConfig,
) -> tuple[SessionCategory, bool] | None:
    """Choose the next unit to attempt.

    Returns:
        (category, taken_from_sequence), or None when every quota is met
    """
    if state.planning_needed:
        return PLANNING, False

    if _extra_due(state, config):
        return EXTRA, False

    while state.sequence_index < len(order):
        proposed = order[state.sequence_index]
        if state.has_open_quota(proposed, config):
            return proposed, True
        # Satisfied entries are skipped at no time cost
        state.sequence_index += 1

    for category in QUOTA_CATEGORIES:
        if state.has_open_quota(category, config):
            return category, False

    return None


def _place(
    state: _RunState,
    category: SessionCategory,
    config: SchedulingConfig,
    pools: dict[SessionCategory, tuple[str, ...]],
    sessions: list[ScheduledSession],
) -> ScheduledSession:
    start = state.cursor
    end = start + timedelta(minutes=config.duration_for(category))
    session = ScheduledSession(
        category=category,
        title=resolve_title(category, config, pools, state.placed[category]),
        start=start,
        end=end,
        calendar=config.calendar_for(category),
        notes=category.hashtag,
    )
    sessions.append(session)

    state.placed[category] += 1
    if category is PLANNING:
        state.planning_needed = False
    else:
        state.counts[category] += 1

    if category.is_regular:
        state.regular_since_extra += 1
    elif category is EXTRA:
        state.regular_since_extra = 0

    rest = timedelta(minutes=config.rest_for(category))
    state.cursor = ceil_to_interval(end + rest, config.rounding_interval_minutes)

    logger.debug(
        f"Placed {category.value} '{session.title}' {start:%H:%M}-{end:%H:%M}, cursor -> {state.cursor:%H:%M}"
    )
    return session


def _substitute_for(
    state: _RunState,
    category: SessionCategory,
    config: SchedulingConfig,
    busy_intervals: Sequence[BusyInterval],
    day_end: datetime,
) -> SessionCategory | None:
    """Find the other regular category if it fits at the current cursor."""
    if not config.flexible_side_scheduling or not category.is_regular:
        return None

    alternative = SIDE if category is WORK else WORK
    if not state.has_open_quota(alternative, config):
        return None

    end = state.cursor + timedelta(minutes=config.duration_for(alternative))
    if end > day_end:
        return None
    if find_conflict(state.cursor, end, busy_intervals, config.conflict_buffer_minutes) is not None:
        return None
    return alternative


def _quotas_met(state: _RunState, config: SchedulingConfig) -> bool:
    if state.planning_needed:
        return False
    return not any(state.has_open_quota(category, config) for category in QUOTA_CATEGORIES)


def _classify(
    state: _RunState,
    config: SchedulingConfig,
    sessions: list[ScheduledSession],
    existing: ExistingSessions | None,
) -> tuple[ScheduleStatus, str]:
    count = len(sessions)
    if _quotas_met(state, config):
        status = ScheduleStatus.COMPLETE
        if count:
            message = f"Successfully projected {count} sessions."
        elif existing is not None and existing.total > 0:
            message = "Daily quota met by existing sessions."
        else:
            message = "Nothing to schedule."
    elif count == 0:
        status = ScheduleStatus.EMPTY
        message = "No suitable time slots found."
    elif state.truncated:
        status = ScheduleStatus.TRUNCATED
        message = f"Projected {count} sessions. Cannot fit remaining sessions before end of day."
    else:
        status = ScheduleStatus.PARTIAL
        message = f"Projected {count} sessions. Quota not met."

    if existing is not None and existing.total > 0:
        message += f" (Found {existing.total} existing sessions)"
    return status, message


def generate_schedule(
    day_start: datetime,
    start_time: datetime,
    busy_intervals: Sequence[BusyInterval],
    config: SchedulingConfig,
    include_planning: bool = True,
    existing: ExistingSessions | None = None,
    existing_titles: Sequence[str] | frozenset[str] | None = None,
) -> ScheduleResult:
    """Place the day's sessions around busy intervals.

    Args:
        day_start: Start of the day (midnight); the day boundary is measured from here
        start_time: Earliest moment a session may start, rounded up to the
            rounding interval
        busy_intervals: Immovable intervals to avoid (never mutated)
        config: Run parameters
        include_planning: Whether a Planning session is wanted for this run
            (ignored when planning is disabled in config)
        existing: Sessions already on the calendar that count toward quotas
        existing_titles: Titles already on the calendar, removed from task lists

    Returns:
        ScheduleResult with placed sessions, status and human-readable message

    Raises:
        SchedulingConfigError: If inputs violate a precondition
    """
    day_end = validate_schedule_inputs(day_start, start_time, busy_intervals, config)

    order = generate_order(
        config.pattern,
        config.work.count,
        config.side.count,
        work_per_cycle=config.work_per_cycle,
        side_per_cycle=config.side_per_cycle,
        side_first=config.side_first,
    )

    seeded = existing or ExistingSessions()
    titles = set(existing_titles or ()) | set(seeded.titles)
    pools = build_title_pools(config, titles)

    state = _RunState(
        cursor=_seed_cursor(start_time, day_start, config.rounding_interval_minutes),
        planning_needed=include_planning and config.planning.enabled,
        counts={WORK: seeded.work, SIDE: seeded.side, EXTRA: seeded.extra, PLANNING: 0},
        regular_since_extra=max(0, seeded.work + seeded.side - seeded.extra * config.extra.inject_after_every),
    )
    sessions: list[ScheduledSession] = []

    while state.attempts < config.max_attempts:
        choice = _next_unit(state, order, config)
        if choice is None:
            break
        category, from_sequence = choice

        if state.cursor >= day_end:
            logger.debug("Cursor reached end of day")
            state.truncated = True
            break

        state.attempts += 1
        potential_end = state.cursor + timedelta(minutes=config.duration_for(category))
        if potential_end > day_end:
            logger.debug(f"{category.value} ending {potential_end:%H:%M} would cross the day boundary")
            state.truncated = True
            break

        conflict_end = find_conflict(state.cursor, potential_end, busy_intervals, config.conflict_buffer_minutes)
        if conflict_end is None:
            _place(state, category, config, pools, sessions)
            if from_sequence:
                state.sequence_index += 1
            continue

        alternative = _substitute_for(state, category, config, busy_intervals, day_end)
        if alternative is not None:
            logger.debug(f"{category.value} conflicts at {state.cursor:%H:%M}; substituting {alternative.value}")
            # Intended unit stays pending: sequence index is not advanced
            _place(state, alternative, config, pools, sessions)
            continue

        state.cursor = ceil_to_interval(conflict_end, config.rounding_interval_minutes)
        logger.debug(f"{category.value} conflicts; cursor -> {state.cursor:%H:%M}")
    else:
        if not _quotas_met(state, config):
            logger.warning(f"Attempt cap of {config.max_attempts} reached with quotas unmet")

    status, message = _classify(state, config, sessions, existing)
    result = ScheduleResult(
        sessions=sessions,
        message=message,
        status=status,
        attempts=state.attempts,
        counts={category: state.placed[category] for category in SessionCategory},
    )
    log_schedule_outcome(result, {"day_start": day_start.isoformat(), "pattern": config.pattern.value})
    return result


def project_single_session(
    category: SessionCategory,
    start_time: datetime,
    day_start: datetime,
    busy_intervals: Sequence[BusyInterval],
    config: SchedulingConfig,
) -> ScheduledSession | None:
    """Find the first free slot for a single session of category.

    Steps from the rounded start time to the end of each conflicting busy
    interval until a slot fits, the day ends, or the attempt cap is reached.
    """
    day_end = validate_schedule_inputs(day_start, start_time, busy_intervals, config)
    duration = timedelta(minutes=config.duration_for(category))
    cursor = _seed_cursor(start_time, day_start, config.rounding_interval_minutes)

    for _ in range(settings.single_session_max_attempts):
        if cursor >= day_end or cursor + duration > day_end:
            return None

        conflict_end = find_conflict(cursor, cursor + duration, busy_intervals, config.conflict_buffer_minutes)
        if conflict_end is not None:
            cursor = ceil_to_interval(conflict_end, config.rounding_interval_minutes)
            continue

        return ScheduledSession(
            category=category,
            title=config.generic_title_for(category),
            start=cursor,
            end=cursor + duration,
            calendar=config.calendar_for(category),
            notes=category.hashtag,
        )

    return None
