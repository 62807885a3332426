"""Clock-minute rounding for the scheduling cursor."""

from datetime import datetime, timedelta


def round_up(moment: datetime, interval_minutes: int) -> datetime:
    """Round moment up to the next interval boundary.

    If the clock minute is already on a boundary only the seconds are
    dropped, so the result can be earlier than moment by less than a minute.
    """
    truncated = moment.replace(second=0, microsecond=0)
    remainder = truncated.minute % interval_minutes
    if remainder == 0:
        return truncated
    return truncated + timedelta(minutes=interval_minutes - remainder)


def ceil_to_interval(moment: datetime, interval_minutes: int) -> datetime:
    """Like round_up, but never returns a value earlier than moment."""
    rounded = round_up(moment, interval_minutes)
    if rounded < moment:
        rounded += timedelta(minutes=interval_minutes)
    return rounded


def is_aligned(moment: datetime, interval_minutes: int) -> bool:
    return moment.second == 0 and moment.microsecond == 0 and moment.minute % interval_minutes == 0
