"""Calendar event helpers for the boundary with the calendar collaborator.

The collaborator owns all calendar I/O; these helpers turn the events it
reads into busy intervals and existing-session counts, using the category
hashtags that the engine writes into session notes.
"""

from __future__ import annotations

from collections.abc import Iterable
from datetime import datetime, timedelta

from pydantic import BaseModel, ConfigDict, Field

from timeboxer.scheduling.types import BusyInterval, ExistingSessions, ScheduledSession, SessionCategory

# Events at least this long are treated as all-day and never block time
NEAR_ALL_DAY_HOURS = 23

# First matching tag wins when counting existing sessions
COUNTED_TAGS: tuple[SessionCategory, ...] = (SessionCategory.WORK, SessionCategory.SIDE, SessionCategory.EXTRA)


class CalendarEvent(BaseModel):
    """An event as read from a calendar."""

    model_config = ConfigDict(frozen=True)

    id: str = ""
    title: str = ""
    start: datetime
    end: datetime
    calendar: str = ""
    notes: str | None = None
    is_all_day: bool = Field(default=False)

    @property
    def is_near_all_day(self) -> bool:
        return self.is_all_day or (self.end - self.start) >= timedelta(hours=NEAR_ALL_DAY_HOURS)


def category_from_notes(notes: str | None) -> SessionCategory | None:
    """Return the counted session category tagged in notes, if any."""
    lowered = (notes or "").lower()
    for category in COUNTED_TAGS:
        if category.hashtag in lowered:
            return category
    return None


def busy_intervals_from_events(
    events: Iterable[CalendarEvent],
    excluded_calendars: Iterable[str] = (),
) -> list[BusyInterval]:
    """Convert timed events into busy intervals.

    All-day and near-all-day events, zero-length events and events on
    excluded calendars are dropped.
    """
    excluded = set(excluded_calendars)
    return [
        BusyInterval(start=event.start, end=event.end, calendar=event.calendar, title=event.title or "Busy")
        for event in events
        if not event.is_near_all_day and event.calendar not in excluded and event.end > event.start
    ]


def count_existing_sessions(
    events: Iterable[CalendarEvent],
    calendars: Iterable[str] | None = None,
) -> ExistingSessions:
    """Count sessions already on the calendar by the hashtag in their notes.

    Args:
        events: Events of the day
        calendars: Optional calendar names to restrict counting to

    Returns:
        ExistingSessions with per-category counts and the titles seen
    """
    allowed = set(calendars) if calendars is not None else None
    counts = dict.fromkeys(COUNTED_TAGS, 0)
    titles: set[str] = set()

    for event in events:
        if event.is_all_day:
            continue
        if allowed is not None and event.calendar not in allowed:
            continue
        if event.title:
            titles.add(event.title)
        category = category_from_notes(event.notes)
        if category is not None:
            counts[category] += 1

    return ExistingSessions(
        work=counts[SessionCategory.WORK],
        side=counts[SessionCategory.SIDE],
        extra=counts[SessionCategory.EXTRA],
        titles=frozenset(titles),
    )


def has_planning_session(events: Iterable[CalendarEvent], planning_title: str = "Planning") -> bool:
    """Check whether the day already has a planning session."""
    tag = SessionCategory.PLANNING.hashtag
    return any(event.title == planning_title or tag in (event.notes or "").lower() for event in events)


def event_from_session(session: ScheduledSession) -> CalendarEvent:
    """Shape a scheduled session as the event the collaborator should create."""
    return CalendarEvent(
        title=session.title,
        start=session.start,
        end=session.end,
        calendar=session.calendar,
        notes=session.notes,
    )
