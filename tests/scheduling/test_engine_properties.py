"""Invariant checks for the scheduling engine over randomized days.

Each seed builds a reproducible day of busy intervals and a config, runs the
engine and checks the placement invariants that must hold for any input.
"""

import random
from datetime import datetime, timedelta

import pytest

from factories import DAY, build_config
from timeboxer.scheduling.engine import generate_schedule
from timeboxer.scheduling.rounding import is_aligned
from timeboxer.scheduling.types import (
    BusyInterval,
    ExtraQuota,
    PlanningSpec,
    ScheduleResult,
    SchedulePattern,
    SchedulingConfig,
    ScheduleStatus,
    SessionCategory,
)

SEEDS = range(60)


def _random_busy(rng: random.Random) -> list[BusyInterval]:
    intervals = []
    for index in range(rng.randint(0, 7)):
        start = DAY + timedelta(minutes=rng.randint(6 * 60, 21 * 60))
        end = start + timedelta(minutes=rng.randint(5, 150))
        intervals.append(BusyInterval(start=start, end=end, calendar="Calendar", title=f"Event {index}"))
    return intervals


def _random_config(rng: random.Random) -> SchedulingConfig:
    return build_config(
        work_count=rng.randint(0, 6),
        work_duration=rng.choice([25, 30, 40, 45, 50, 90]),
        work_rest=rng.randint(0, 30),
        side_count=rng.randint(0, 4),
        side_duration=rng.choice([15, 20, 30, 45]),
        side_rest=rng.randint(0, 25),
        pattern=rng.choice(list(SchedulePattern)),
        work_per_cycle=rng.randint(1, 3),
        side_per_cycle=rng.randint(1, 3),
        side_first=rng.random() < 0.5,
        flexible=rng.random() < 0.7,
        planning=PlanningSpec(enabled=rng.random() < 0.5, duration_minutes=rng.choice([10, 15, 20])),
        extra=ExtraQuota(
            enabled=rng.random() < 0.5,
            count=rng.randint(0, 3),
            duration_minutes=rng.choice([10, 15, 25]),
            rest_minutes=rng.randint(0, 20),
            inject_after_every=rng.randint(1, 4),
        ),
        buffer=rng.choice([0, 5, 10, 15]),
        rounding=rng.choice([1, 5, 10, 15, 30]),
        day_boundary_hour=rng.choice([18, 20, 24]),
    )


def _random_run(seed: int) -> tuple[datetime, list[BusyInterval], SchedulingConfig, ScheduleResult]:
    rng = random.Random(seed)
    busy = _random_busy(rng)
    config = _random_config(rng)
    start = DAY + timedelta(minutes=rng.randint(6 * 60, 12 * 60), seconds=rng.randint(0, 59))
    result = generate_schedule(DAY, start, busy, config)
    return start, busy, config, result


@pytest.mark.parametrize("seed", SEEDS)
def test_sessions_respect_rest_and_never_overlap(seed):
    _, _, config, result = _random_run(seed)
    for previous, current in zip(result.sessions, result.sessions[1:]):
        assert current.start >= previous.end + timedelta(minutes=config.rest_for(previous.category))


@pytest.mark.parametrize("seed", SEEDS)
def test_sessions_avoid_buffered_busy_intervals(seed):
    _, busy, config, result = _random_run(seed)
    for session in result.sessions:
        for interval in busy:
            expanded_start, expanded_end = interval.expanded(config.conflict_buffer_minutes)
            assert session.end <= expanded_start or session.start >= expanded_end


@pytest.mark.parametrize("seed", SEEDS)
def test_sessions_aligned_and_inside_day(seed):
    start, _, config, result = _random_run(seed)
    day_end = DAY + timedelta(hours=config.day_boundary_hour)
    earliest = start.replace(second=0, microsecond=0)
    for session in result.sessions:
        assert is_aligned(session.start, config.rounding_interval_minutes)
        assert session.start >= earliest
        assert session.end <= day_end
        assert session.duration_minutes == config.duration_for(session.category)


@pytest.mark.parametrize("seed", SEEDS)
def test_counts_bounded_by_quotas(seed):
    _, _, config, result = _random_run(seed)
    placed = {category: 0 for category in SessionCategory}
    for session in result.sessions:
        placed[session.category] += 1

    assert placed == result.counts
    for category in SessionCategory:
        assert placed[category] <= config.quota_for(category)
    assert result.attempts <= config.max_attempts

    met = all(placed[category] == config.quota_for(category) for category in SessionCategory)
    assert (result.status is ScheduleStatus.COMPLETE) == met
    if result.status is ScheduleStatus.EMPTY:
        assert result.sessions == []


@pytest.mark.parametrize("seed", SEEDS)
def test_planning_leads_when_placed(seed):
    _, _, _, result = _random_run(seed)
    planning = [i for i, s in enumerate(result.sessions) if s.category is SessionCategory.PLANNING]
    assert planning in ([], [0])


@pytest.mark.parametrize("seed", SEEDS)
def test_extra_cadence_before_last_regular_session(seed):
    _, _, config, result = _random_run(seed)
    categories = [s.category for s in result.sessions]
    regular_positions = [i for i, c in enumerate(categories) if c.is_regular]
    if not regular_positions:
        return

    last_regular = regular_positions[-1]
    since_extra = 0
    for category in categories[:last_regular]:
        if category.is_regular:
            since_extra += 1
        elif category is SessionCategory.EXTRA:
            assert since_extra >= config.extra.inject_after_every
            since_extra = 0


@pytest.mark.parametrize("seed", range(10))
def test_deterministic_for_identical_inputs(seed):
    _, _, _, first = _random_run(seed)
    _, _, _, second = _random_run(seed)
    assert first == second
