# backend/app/core/config.py
import logging
import os
from typing import Literal

from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import pytz

from .constants import (
    MAX_AVAILABILITY_DAYS_AHEAD,
    MAX_BOOKING_DAYS_AHEAD,
    MAX_SESSION_DURATION,
    MIN_SESSION_DURATION,
    SLOT_STEP_MINUTES,
)

logger = logging.getLogger(__name__)


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


class Settings(BaseSettings):
    environment: Literal["development", "test", "production"] = Field(
        default="development", description="Deployment environment"
    )
    database_url: str = Field(
        default="sqlite:///./tutoring.db",
        description="SQLAlchemy URL for the session store",
    )
    database_echo: bool = Field(default=False, description="Echo SQL statements")

    # Wall-clock reference used for "today" checks on booking requests
    default_timezone: str = Field(default="America/New_York")

    # Scheduling policy
    slot_step_minutes: int = Field(default=SLOT_STEP_MINUTES, gt=0)
    min_session_duration: int = Field(default=MIN_SESSION_DURATION, gt=0)
    max_session_duration: int = Field(default=MAX_SESSION_DURATION, gt=0)
    max_booking_days_ahead: int = Field(default=MAX_BOOKING_DAYS_AHEAD, ge=0)
    max_availability_days_ahead: int = Field(default=MAX_AVAILABILITY_DAYS_AHEAD, ge=0)

    slow_operation_seconds: float = Field(
        default=1.0, description="Service operations slower than this are logged"
    )

    model_config = SettingsConfigDict(
        env_file=".env" if not os.getenv("CI") else None,
        case_sensitive=False,
        extra="ignore",
    )

    @field_validator("default_timezone")
    @classmethod
    def _validate_timezone(cls, value: str) -> str:
        if value not in pytz.all_timezones_set:
            raise ValueError(f"Unknown timezone: {value}")
        return value

    @model_validator(mode="after")
    def _validate_duration_bounds(self) -> "Settings":
        if self.min_session_duration > self.max_session_duration:
            raise ValueError("min_session_duration cannot exceed max_session_duration")
        return self

    @property
    def is_sqlite(self) -> bool:
        return self.database_url.startswith("sqlite")


settings = Settings()
logger.debug(
    f"[CONFIG] Scheduling policy: step={settings.slot_step_minutes} "
    f"min={settings.min_session_duration} max={settings.max_session_duration} "
    f"tz={settings.default_timezone}"
)
