"""Session Order Generator - Preferred Interleaving.

Produces the abstract Work/Side sequence the engine walks left to right.
Time is ignored entirely here; the engine may skip entries whose quota
is already met without reordering the rest.
"""

from __future__ import annotations

from timeboxer.scheduling.errors import SchedulingConfigError
from timeboxer.scheduling.types import SchedulePattern, SessionCategory

WORK = SessionCategory.WORK
SIDE = SessionCategory.SIDE


def _alternate(work_count: int, side_count: int, *, side_first: bool) -> list[SessionCategory]:
    first, second = (SIDE, WORK) if side_first else (WORK, SIDE)
    remaining = {WORK: work_count, SIDE: side_count}
    order: list[SessionCategory] = []
    while remaining[first] > 0 and remaining[second] > 0:
        order.extend((first, second))
        remaining[first] -= 1
        remaining[second] -= 1
    order.extend([first] * remaining[first])
    order.extend([second] * remaining[second])
    return order


def _custom_ratio(
    work_count: int,
    side_count: int,
    work_per_cycle: int,
    side_per_cycle: int,
    *,
    side_first: bool,
) -> list[SessionCategory]:
    blocks = [(SIDE, side_per_cycle), (WORK, work_per_cycle)] if side_first else [(WORK, work_per_cycle), (SIDE, side_per_cycle)]
    remaining = {WORK: work_count, SIDE: side_count}
    order: list[SessionCategory] = []
    while remaining[WORK] > 0 or remaining[SIDE] > 0:
        for category, per_cycle in blocks:
            take = min(per_cycle, remaining[category])
            order.extend([category] * take)
            remaining[category] -= take
    return order


def _sides_first_and_last(work_count: int, side_count: int, side_per_cycle: int) -> list[SessionCategory]:
    leading = max(0, min(side_per_cycle, side_count))
    trailing = side_count - leading
    return [SIDE] * leading + [WORK] * work_count + [SIDE] * trailing


def generate_order(
    pattern: SchedulePattern,
    work_count: int,
    side_count: int,
    work_per_cycle: int = 1,
    side_per_cycle: int = 1,
    side_first: bool = False,
) -> tuple[SessionCategory, ...]:
    """Generate the preferred Work/Side ordering for a pattern.

    Args:
        pattern: Ordering pattern
        work_count: Number of Work sessions to order
        side_count: Number of Side sessions to order
        work_per_cycle: Work sessions per cycle (custom ratio, alternating reverse)
        side_per_cycle: Side sessions per cycle (custom ratio), or leading Side
            sessions (sides first and last)
        side_first: Start cycles with Side (alternating and custom ratio)

    Returns:
        Tuple of exactly work_count + side_count Work/Side tags

    Raises:
        SchedulingConfigError: If counts are negative or a custom cycle is empty
    """
    if work_count < 0 or side_count < 0:
        raise SchedulingConfigError(
            "INVALID_ORDER_COUNTS",
            [f"counts must be non-negative, got work={work_count} side={side_count}"],
        )

    match pattern:
        case SchedulePattern.ALTERNATING:
            order = _alternate(work_count, side_count, side_first=side_first)
        case SchedulePattern.ALTERNATING_REVERSE:
            # One Side, then up to work_per_cycle Work, repeated
            order = _custom_ratio(work_count, side_count, max(1, work_per_cycle), 1, side_first=True)
        case SchedulePattern.ALL_WORK_FIRST:
            order = [WORK] * work_count + [SIDE] * side_count
        case SchedulePattern.ALL_SIDE_FIRST:
            order = [SIDE] * side_count + [WORK] * work_count
        case SchedulePattern.CUSTOM_RATIO:
            if work_per_cycle < 1 or side_per_cycle < 1:
                raise SchedulingConfigError(
                    "INVALID_ORDER_COUNTS",
                    [f"cycle sizes must be at least 1, got work={work_per_cycle} side={side_per_cycle}"],
                )
            order = _custom_ratio(work_count, side_count, work_per_cycle, side_per_cycle, side_first=side_first)
        case SchedulePattern.SIDES_FIRST_AND_LAST:
            order = _sides_first_and_last(work_count, side_count, side_per_cycle)

    return tuple(order)
