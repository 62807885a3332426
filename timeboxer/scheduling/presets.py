"""Built-in scheduling presets.

Preset storage belongs to the settings collaborator; this module only
defines the presets shipped out of the box.
"""

from pydantic import BaseModel, ConfigDict, Field

from timeboxer.scheduling.types import CategoryQuota, PlanningSpec, SchedulePattern, SchedulingConfig


class Preset(BaseModel):
    model_config = ConfigDict(frozen=True)

    key: str
    name: str
    icon: str = "calendar"
    default_start_hour: int = Field(default=8, ge=0, le=23)
    config: SchedulingConfig


def default_side_rest(rest_minutes: int) -> int:
    """Side rest defaults to three quarters of the work rest, at least 5 minutes."""
    return max(5, int(rest_minutes * 0.75))


def _preset(
    key: str,
    name: str,
    icon: str,
    *,
    work_count: int = 5,
    side_count: int = 2,
    work_title: str = "Work Session",
    side_title: str = "Side Session",
    work_duration: int = 40,
    side_duration: int = 30,
    rest: int = 20,
    planning: bool = True,
    pattern: SchedulePattern = SchedulePattern.ALTERNATING,
    work_calendar: str = "Work",
    side_calendar: str = "Side Tasks",
    default_start_hour: int = 8,
) -> Preset:
    config = SchedulingConfig(
        work=CategoryQuota(
            count=work_count,
            duration_minutes=work_duration,
            rest_minutes=rest,
            title=work_title,
            calendar=work_calendar,
        ),
        side=CategoryQuota(
            count=side_count,
            duration_minutes=side_duration,
            rest_minutes=default_side_rest(rest),
            title=side_title,
            calendar=side_calendar,
        ),
        planning=PlanningSpec(enabled=planning),
        pattern=pattern,
    )
    return Preset(key=key, name=name, icon=icon, default_start_hour=default_start_hour, config=config)


BUILTIN_PRESETS: dict[str, Preset] = {
    preset.key: preset
    for preset in (
        _preset("standard_workday", "Standard Workday", "briefcase.fill"),
        _preset(
            "focus_day",
            "Focus Day",
            "brain.head.profile",
            work_count=7,
            side_count=1,
            work_duration=50,
            rest=10,
            pattern=SchedulePattern.ALL_WORK_FIRST,
        ),
        _preset(
            "weekend",
            "Weekend",
            "sun.max.fill",
            work_count=2,
            side_count=4,
            work_title="Weekend Work",
            side_title="Weekend Side",
            work_duration=30,
            side_duration=45,
            planning=False,
            pattern=SchedulePattern.ALL_SIDE_FIRST,
            work_calendar="Weekend Work",
            side_calendar="Weekend Side",
            default_start_hour=10,
        ),
        _preset(
            "light_day",
            "Light Day",
            "leaf.fill",
            work_count=3,
            side_count=2,
            work_duration=30,
            rest=30,
        ),
    )
}


def list_presets() -> list[Preset]:
    return list(BUILTIN_PRESETS.values())


def get_preset(key: str) -> Preset:
    """Look up a built-in preset by key.

    Raises:
        KeyError: If no preset has this key
    """
    try:
        return BUILTIN_PRESETS[key]
    except KeyError:
        raise KeyError(f"Unknown preset '{key}'. Available: {', '.join(BUILTIN_PRESETS)}") from None
