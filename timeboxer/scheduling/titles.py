"""Session title resolution from ordered task lists."""

from collections.abc import Iterable

from timeboxer.scheduling.types import SchedulingConfig, SessionCategory


def parse_task_list(text: str) -> tuple[str, ...]:
    """Split a free-text task list into titles, one per non-blank line."""
    return tuple(line.strip() for line in text.splitlines() if line.strip())


def build_title_pools(
    config: SchedulingConfig,
    existing_titles: Iterable[str] | None = None,
) -> dict[SessionCategory, tuple[str, ...]]:
    """Build per-category title pools, dropping titles already on the calendar."""
    taken = set(existing_titles or ())
    return {
        category: tuple(title for title in config.task_titles_for(category) if title not in taken)
        for category in SessionCategory
    }


def resolve_title(
    category: SessionCategory,
    config: SchedulingConfig,
    pools: dict[SessionCategory, tuple[str, ...]],
    placed: int,
) -> str:
    """Pick the title for the next session of a category.

    Titles are consumed in list order, indexed by how many sessions of the
    category this run has placed; past the end the generic title is used.
    """
    pool = pools.get(category, ())
    if placed < len(pool):
        return pool[placed]
    return config.generic_title_for(category)
