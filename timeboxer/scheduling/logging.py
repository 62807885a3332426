"""Scheduling observability helpers.

Call log_scheduling_config_failure before re-raising SchedulingConfigError.
"""

from datetime import datetime

from loguru import logger

from timeboxer.scheduling.errors import SchedulingConfigError
from timeboxer.scheduling.types import SchedulePattern, ScheduleResult


def log_scheduling_config_failure(
    err: SchedulingConfigError,
    *,
    day_start: datetime,
    day_end: datetime,
    pattern: SchedulePattern,
    context: dict[str, str | int | float | bool | None] | None = None,
) -> None:
    """Log a rejected scheduling run with its day window and pattern.

    Args:
        err: The SchedulingConfigError that occurred
        day_start: Start of the requested day
        day_end: Day boundary derived from the config
        pattern: Ordering pattern of the rejected run
        context: Additional context dictionary for logging
    """
    logger.bind(
        code=err.code,
        window=f"{day_start.isoformat()}/{day_end.isoformat()}",
        pattern=pattern.value,
        **(context or {}),
    ).error(f"SCHEDULING_INPUT_REJECTED {err.code}: {'; '.join(err.details)}")


def log_schedule_outcome(result: ScheduleResult, context: dict[str, str | int | float | bool | None]) -> None:
    """Log the classification of a finished scheduling run."""
    logger.bind(
        status=result.status.value,
        sessions=len(result.sessions),
        attempts=result.attempts,
        **context,
    ).info(f"Schedule {result.status.value}: {result.message}")
