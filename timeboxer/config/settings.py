from loguru import logger
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    conflict_buffer_minutes: int = Field(
        default=10,
        ge=0,
        validation_alias="TIMEBOXER_CONFLICT_BUFFER_MINUTES",
        description="Padding applied on both sides of every busy interval",
    )
    rounding_interval_minutes: int = Field(
        default=5,
        ge=1,
        le=60,
        validation_alias="TIMEBOXER_ROUNDING_INTERVAL_MINUTES",
        description="Granularity session starts are snapped up to",
    )
    day_boundary_hour: int = Field(
        default=24,
        ge=1,
        le=48,
        validation_alias="TIMEBOXER_DAY_BOUNDARY_HOUR",
        description="Hour after day start past which no session may end",
    )
    max_attempts: int = Field(
        default=500,
        ge=1,
        validation_alias="TIMEBOXER_MAX_ATTEMPTS",
        description="Hard cap on scheduling loop iterations",
    )
    single_session_max_attempts: int = Field(
        default=100,
        ge=1,
        validation_alias="TIMEBOXER_SINGLE_SESSION_MAX_ATTEMPTS",
    )
    log_level: str = Field(default="INFO", validation_alias="TIMEBOXER_LOG_LEVEL")
    log_file: str | None = Field(
        default=None,
        validation_alias="TIMEBOXER_LOG_FILE",
        description="Rotating log file for the CLI; console only when unset",
    )

    @field_validator("log_level")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        """Validate that log level is one of the standard logging levels."""
        valid_levels = {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}
        upper_value = value.upper()
        if upper_value not in valid_levels:
            logger.warning(f"Invalid TIMEBOXER_LOG_LEVEL '{value}'. Valid levels are: {', '.join(sorted(valid_levels))}. Defaulting to INFO.")
            return "INFO"
        return upper_value

    @field_validator("rounding_interval_minutes")
    @classmethod
    def validate_rounding_interval(cls, value: int) -> int:
        """Rounding must tile an hour so aligned starts stay aligned across hours."""
        if 60 % value != 0:
            raise ValueError(f"rounding interval must divide 60, got {value}")
        return value

    model_config = SettingsConfigDict(
        env_file=".env",
        env_prefix="TIMEBOXER_",
        extra="ignore",
        populate_by_name=True,
    )


settings = Settings()
