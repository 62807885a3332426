"""Scheduling input error types.

Scheduling shortfalls (quota not met, day boundary reached) are ordinary
outcomes reported through ScheduleStatus. Only malformed input raises.

Error codes:
- INVALID_DAY_WINDOW: day boundary does not lie after the day start
- MIXED_TIMEZONES: naive and timezone-aware datetimes mixed in one run
- INVALID_BUSY_INTERVAL: a busy interval ends at or before its start (only
  reachable for intervals created without validation, e.g. model_construct)
- INVALID_ORDER_COUNTS: negative counts or empty cycles given to the order generator
"""


class SchedulingConfigError(ValueError):
    """Raised when scheduling inputs violate a precondition.

    Attributes:
        code: Error code (e.g., "INVALID_DAY_WINDOW", "MIXED_TIMEZONES")
        details: List of error detail strings
    """

    def __init__(self, code: str, details: list[str]):
        self.code = code
        self.details = details
        super().__init__(f"{code}: {details}")
