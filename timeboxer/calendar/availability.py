"""Free-time gap calculation against busy calendar intervals.

Pure functions over a time window and a list of busy intervals, each
padded by a symmetric buffer before any overlap test. The availability
summary is advisory: the scheduling engine runs its own live conflict
checks and may place fewer sessions than the summary suggests.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from datetime import datetime, timedelta

from timeboxer.scheduling.types import AvailabilitySummary, BusyInterval, TimeGap, TimeInterval

Window = TimeInterval | tuple[datetime, datetime]


def _window_bounds(window: Window) -> tuple[datetime, datetime]:
    if isinstance(window, TimeInterval):
        return window.start, window.end
    start, end = window
    return start, end


def _ranges_overlap(start1: datetime, end1: datetime, start2: datetime, end2: datetime) -> bool:
    """Half-open overlap test: start1 < end2 AND end1 > start2."""
    return start1 < end2 and end1 > start2


def find_conflict(
    start: datetime,
    end: datetime,
    busy_intervals: Iterable[BusyInterval],
    buffer_minutes: int,
) -> datetime | None:
    """Find the first busy interval overlapping [start, end) after buffering.

    Args:
        start: Proposed session start
        end: Proposed session end
        busy_intervals: Busy intervals, checked in the given order
        buffer_minutes: Padding applied to both sides of each busy interval

    Returns:
        The buffer-expanded end of the first conflicting interval, or None
    """
    for busy in busy_intervals:
        expanded_start, expanded_end = busy.expanded(buffer_minutes)
        if _ranges_overlap(start, end, expanded_start, expanded_end):
            return expanded_end
    return None


def can_fit(
    duration: int,
    at: datetime,
    window: Window,
    busy_intervals: Iterable[BusyInterval],
    buffer_minutes: int,
) -> bool:
    """Check whether a session of duration minutes can start at `at`.

    The session must end within the window and must not overlap any
    buffer-expanded busy interval.
    """
    _, window_end = _window_bounds(window)
    session_end = at + timedelta(minutes=duration)
    if session_end > window_end:
        return False
    return find_conflict(at, session_end, busy_intervals, buffer_minutes) is None


def compute_gaps(
    window: Window,
    busy_intervals: Sequence[BusyInterval],
    buffer_minutes: int,
) -> list[TimeGap]:
    """Sweep the window and return the disjoint free gaps between busy intervals."""
    window_start, window_end = _window_bounds(window)
    if window_end <= window_start:
        return []

    gaps: list[TimeGap] = []
    cursor = window_start

    for busy in sorted(busy_intervals, key=lambda b: b.start):
        expanded_start, expanded_end = busy.expanded(buffer_minutes)

        if cursor < expanded_start and cursor < window_end:
            gap_end = min(expanded_start, window_end)
            gaps.append(TimeGap(start=cursor, end=gap_end))

        # Cursor never moves backward
        cursor = max(cursor, expanded_end)

    if cursor < window_end:
        gaps.append(TimeGap(start=cursor, end=window_end))

    return gaps


def compute_availability(
    window: Window,
    busy_intervals: Sequence[BusyInterval],
    buffer_minutes: int,
    work_duration: int,
    side_duration: int,
    rest_minutes: int,
    side_rest_minutes: int | None = None,
) -> AvailabilitySummary:
    """Summarize free time in a window and naive per-gap session fit counts.

    Fit counts use integer division of each gap by (duration + rest) and are
    not constrained by ordering or quotas.

    Args:
        window: Time window, as a TimeInterval or a (start, end) pair
        busy_intervals: Busy intervals in any order
        buffer_minutes: Padding applied around each busy interval
        work_duration: Work session length in minutes
        side_duration: Side session length in minutes
        rest_minutes: Rest after a work session (and after a side session
            when side_rest_minutes is not given)
        side_rest_minutes: Optional rest after a side session

    Returns:
        AvailabilitySummary for the window
    """
    gaps = compute_gaps(window, busy_intervals, buffer_minutes)

    total_minutes = sum(gap.duration_minutes for gap in gaps)
    longest_gap = max((gap.duration_minutes for gap in gaps), default=0)

    work_with_rest = max(1, work_duration + rest_minutes)
    side_rest = rest_minutes if side_rest_minutes is None else side_rest_minutes
    side_with_rest = max(1, side_duration + side_rest)

    possible_work = sum(gap.duration_minutes // work_with_rest for gap in gaps)
    possible_side = sum(gap.duration_minutes // side_with_rest for gap in gaps)

    return AvailabilitySummary(
        total_available_minutes=total_minutes,
        gaps=gaps,
        possible_work_sessions=possible_work,
        possible_side_sessions=possible_side,
        max_possible_sessions=max(possible_work, possible_side),
        longest_gap_minutes=longest_gap,
    )
