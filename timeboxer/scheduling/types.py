"""Scheduling data model.

Every value here is immutable for the duration of one scheduling run.
Durations, rests and buffers are whole minutes; timestamps are datetimes.
"""

from __future__ import annotations

from datetime import datetime, timedelta
from enum import StrEnum

from pydantic import BaseModel, ConfigDict, Field, model_validator

from timeboxer.config.settings import settings


class SessionCategory(StrEnum):
    WORK = "work"
    SIDE = "side"
    PLANNING = "planning"
    EXTRA = "extra"

    @property
    def is_regular(self) -> bool:
        """Work and Side are regular sessions; Planning and Extra are not."""
        return self in {SessionCategory.WORK, SessionCategory.SIDE}

    @property
    def hashtag(self) -> str:
        """Tag written into event notes so existing sessions can be recounted."""
        return _HASHTAGS[self]


_HASHTAGS: dict[SessionCategory, str] = {
    SessionCategory.WORK: "#work",
    SessionCategory.SIDE: "#side",
    SessionCategory.EXTRA: "#deep",
    SessionCategory.PLANNING: "#plan",
}


class SchedulePattern(StrEnum):
    ALTERNATING = "alternating"
    ALTERNATING_REVERSE = "alternating_reverse"
    ALL_WORK_FIRST = "all_work_first"
    ALL_SIDE_FIRST = "all_side_first"
    CUSTOM_RATIO = "custom_ratio"
    SIDES_FIRST_AND_LAST = "sides_first_and_last"


class ScheduleStatus(StrEnum):
    COMPLETE = "complete"
    PARTIAL = "partial"
    EMPTY = "empty"
    TRUNCATED = "truncated"


class TimeInterval(BaseModel):
    """Half-open time range [start, end)."""

    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @model_validator(mode="after")
    def _check_order(self) -> TimeInterval:
        if self.end <= self.start:
            raise ValueError(f"interval end {self.end.isoformat()} must be after start {self.start.isoformat()}")
        return self

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    def expanded(self, buffer_minutes: int) -> tuple[datetime, datetime]:
        """Return (start, end) padded by buffer_minutes on both sides."""
        pad = timedelta(minutes=buffer_minutes)
        return self.start - pad, self.end + pad


class BusyInterval(TimeInterval):
    """Immovable, externally owned occupied range (a calendar event)."""

    calendar: str = Field(default="", description="Identifier of the owning calendar")
    title: str = Field(default="Busy")


class CategoryQuota(BaseModel):
    """Target count and parameters for Work or Side sessions."""

    model_config = ConfigDict(frozen=True)

    count: int = Field(ge=0)
    duration_minutes: int = Field(gt=0)
    rest_minutes: int = Field(default=20, ge=0)
    title: str = Field(description="Generic title used once task_titles runs out")
    calendar: str = Field(description="Destination calendar")
    task_titles: tuple[str, ...] = Field(default=(), description="Ordered free-text titles, consumed in order")


class ExtraQuota(BaseModel):
    """Optional periodic injection of an extra session."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = False
    count: int = Field(default=1, ge=0)
    duration_minutes: int = Field(default=15, gt=0)
    rest_minutes: int = Field(default=20, ge=0)
    inject_after_every: int = Field(default=3, ge=1)
    title: str = "Extra Session"
    calendar: str = "Work"
    task_titles: tuple[str, ...] = ()


class PlanningSpec(BaseModel):
    """At most one leading planning session."""

    model_config = ConfigDict(frozen=True)

    enabled: bool = True
    duration_minutes: int = Field(default=15, gt=0)
    rest_minutes: int | None = Field(default=None, ge=0, description="Defaults to half the work rest, minimum 5")
    title: str = "Planning"


def _default_work() -> CategoryQuota:
    return CategoryQuota(count=5, duration_minutes=40, rest_minutes=20, title="Work Session", calendar="Work")


def _default_side() -> CategoryQuota:
    return CategoryQuota(count=2, duration_minutes=30, rest_minutes=15, title="Side Session", calendar="Side Tasks")


class SchedulingConfig(BaseModel):
    """Full parameters of one scheduling run."""

    model_config = ConfigDict(frozen=True)

    work: CategoryQuota = Field(default_factory=_default_work)
    side: CategoryQuota = Field(default_factory=_default_side)
    extra: ExtraQuota = Field(default_factory=ExtraQuota)
    planning: PlanningSpec = Field(default_factory=PlanningSpec)

    pattern: SchedulePattern = SchedulePattern.ALTERNATING
    work_per_cycle: int = Field(default=2, ge=1)
    side_per_cycle: int = Field(default=1, ge=1)
    side_first: bool = False
    flexible_side_scheduling: bool = True

    conflict_buffer_minutes: int = Field(default_factory=lambda: settings.conflict_buffer_minutes, ge=0)
    rounding_interval_minutes: int = Field(default_factory=lambda: settings.rounding_interval_minutes, ge=1, le=60)
    day_boundary_hour: int = Field(default_factory=lambda: settings.day_boundary_hour, ge=1, le=48)
    max_attempts: int = Field(default_factory=lambda: settings.max_attempts, ge=1)

    @model_validator(mode="after")
    def _check_rounding(self) -> SchedulingConfig:
        if 60 % self.rounding_interval_minutes != 0:
            raise ValueError(f"rounding_interval_minutes must divide 60, got {self.rounding_interval_minutes}")
        return self

    def quota_for(self, category: SessionCategory) -> int:
        match category:
            case SessionCategory.WORK:
                return self.work.count
            case SessionCategory.SIDE:
                return self.side.count
            case SessionCategory.EXTRA:
                return self.extra.count if self.extra.enabled else 0
            case SessionCategory.PLANNING:
                return 1 if self.planning.enabled else 0

    def duration_for(self, category: SessionCategory) -> int:
        match category:
            case SessionCategory.WORK:
                return self.work.duration_minutes
            case SessionCategory.SIDE:
                return self.side.duration_minutes
            case SessionCategory.EXTRA:
                return self.extra.duration_minutes
            case SessionCategory.PLANNING:
                return self.planning.duration_minutes

    def rest_for(self, category: SessionCategory) -> int:
        match category:
            case SessionCategory.WORK:
                return self.work.rest_minutes
            case SessionCategory.SIDE:
                return self.side.rest_minutes
            case SessionCategory.EXTRA:
                return self.extra.rest_minutes
            case SessionCategory.PLANNING:
                if self.planning.rest_minutes is not None:
                    return self.planning.rest_minutes
                return max(5, self.work.rest_minutes // 2)

    def calendar_for(self, category: SessionCategory) -> str:
        match category:
            case SessionCategory.WORK | SessionCategory.PLANNING:
                return self.work.calendar
            case SessionCategory.SIDE:
                return self.side.calendar
            case SessionCategory.EXTRA:
                return self.extra.calendar

    def generic_title_for(self, category: SessionCategory) -> str:
        match category:
            case SessionCategory.WORK:
                return self.work.title
            case SessionCategory.SIDE:
                return self.side.title
            case SessionCategory.EXTRA:
                return self.extra.title
            case SessionCategory.PLANNING:
                return self.planning.title

    def task_titles_for(self, category: SessionCategory) -> tuple[str, ...]:
        match category:
            case SessionCategory.WORK:
                return self.work.task_titles
            case SessionCategory.SIDE:
                return self.side.task_titles
            case SessionCategory.EXTRA:
                return self.extra.task_titles
            case SessionCategory.PLANNING:
                return ()


class ScheduledSession(BaseModel):
    """One placed session, ready for the calendar collaborator to materialize."""

    model_config = ConfigDict(frozen=True)

    category: SessionCategory
    title: str
    start: datetime
    end: datetime
    calendar: str
    notes: str | None = None

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)

    @property
    def hashtag(self) -> str:
        return self.category.hashtag


class ExistingSessions(BaseModel):
    """Sessions of the day already present on the calendar."""

    model_config = ConfigDict(frozen=True)

    work: int = Field(default=0, ge=0)
    side: int = Field(default=0, ge=0)
    extra: int = Field(default=0, ge=0)
    titles: frozenset[str] = frozenset()

    @property
    def total(self) -> int:
        return self.work + self.side + self.extra


class ScheduleResult(BaseModel):
    """Outcome of one engine run: placed sessions plus a status classification."""

    model_config = ConfigDict(frozen=True)

    sessions: list[ScheduledSession]
    message: str
    status: ScheduleStatus
    attempts: int = 0
    counts: dict[SessionCategory, int] = Field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.status == ScheduleStatus.COMPLETE


class TimeGap(BaseModel):
    model_config = ConfigDict(frozen=True)

    start: datetime
    end: datetime

    @property
    def duration_minutes(self) -> int:
        return int((self.end - self.start).total_seconds() // 60)


class AvailabilitySummary(BaseModel):
    """Advisory estimate of free time.

    Fit counts ignore ordering and quotas, so they may overstate what the
    engine will actually place.
    """

    model_config = ConfigDict(frozen=True)

    total_available_minutes: int
    gaps: list[TimeGap]
    possible_work_sessions: int
    possible_side_sessions: int
    max_possible_sessions: int
    longest_gap_minutes: int

    @property
    def total_available_hours(self) -> float:
        return self.total_available_minutes / 60.0

    @property
    def formatted_available_time(self) -> str:
        hours, mins = divmod(self.total_available_minutes, 60)
        if hours > 0:
            return f"{hours}h {mins}m"
        return f"{mins}m"
