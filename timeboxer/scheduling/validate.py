"""Entry-point validation for scheduling runs."""

from collections.abc import Sequence
from datetime import datetime, timedelta

from timeboxer.scheduling.errors import SchedulingConfigError
from timeboxer.scheduling.logging import log_scheduling_config_failure
from timeboxer.scheduling.types import BusyInterval, SchedulingConfig


def _is_aware(moment: datetime) -> bool:
    return moment.tzinfo is not None and moment.utcoffset() is not None


def validate_schedule_inputs(
    day_start: datetime,
    start_time: datetime,
    busy_intervals: Sequence[BusyInterval],
    config: SchedulingConfig,
) -> datetime:
    """Validate one run's inputs and return the day end.

    Model-level constraints (non-negative counts, positive durations) are
    already enforced when the config is built; this checks the cross-field
    preconditions that only make sense for a concrete run.

    Raises:
        SchedulingConfigError: If the day window is empty, timezones are mixed,
            or a busy interval is degenerate
    """
    day_end = day_start + timedelta(hours=config.day_boundary_hour)

    try:
        if day_end <= day_start:
            raise SchedulingConfigError("INVALID_DAY_WINDOW", [f"day end {day_end.isoformat()} is not after day start"])

        moments = [day_start, start_time]
        for busy in busy_intervals:
            moments.extend((busy.start, busy.end))
        if len({_is_aware(m) for m in moments}) > 1:
            raise SchedulingConfigError(
                "MIXED_TIMEZONES",
                ["day_start, start_time and busy intervals must all be naive or all be timezone-aware"],
            )

        # Intervals built with model_construct skip the model validator
        degenerate = [f"{b.title}: {b.start.isoformat()} -> {b.end.isoformat()}" for b in busy_intervals if b.end <= b.start]
        if degenerate:
            raise SchedulingConfigError("INVALID_BUSY_INTERVAL", degenerate)
    except SchedulingConfigError as err:
        log_scheduling_config_failure(
            err,
            day_start=day_start,
            day_end=day_end,
            pattern=config.pattern,
            context={"start_time": start_time.isoformat(), "busy_count": len(busy_intervals)},
        )
        raise

    return day_end
