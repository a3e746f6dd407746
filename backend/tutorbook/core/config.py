# backend/tutorbook/core/config.py
from decimal import Decimal
import logging
import os
from pathlib import Path
from typing import Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

_BACKEND_ROOT = Path(__file__).resolve().parents[2]


def is_running_tests() -> bool:
    """
    Detect if code is running under pytest.

    PYTEST_CURRENT_TEST is set automatically by pytest during test runs, and is
    not expected to be present in production environments.
    """
    return os.getenv("PYTEST_CURRENT_TEST") is not None


class Settings(BaseSettings):
    """Runtime configuration, loaded from the environment and backend/.env."""

    model_config = SettingsConfigDict(
        env_file=str(_BACKEND_ROOT / ".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    environment: str = Field(default="development", description="Deployment environment name")
    is_testing: bool = Field(default=False, description="Set by the test harness")
    log_level: str = Field(default="INFO")

    # Database
    database_url: str = Field(
        default="sqlite+pysqlite:///./tutorbook.db",
        description="SQLAlchemy URL for the primary database",
    )
    test_database_url: str = Field(
        default="sqlite+pysqlite:///:memory:",
        description="SQLAlchemy URL used when is_testing is set",
    )
    database_echo: bool = False

    # Distributed booking lock
    redis_url: Optional[str] = Field(
        default=None,
        description="Redis URL for the per-tutor booking lock; unset keeps the lock in-process",
    )
    lock_namespace: str = Field(default="tutorbook")
    booking_lock_ttl_seconds: int = Field(default=30, ge=1)
    booking_lock_wait_seconds: float = Field(default=5.0, ge=0)

    # Booking rules
    booking_horizon_days: int = Field(
        default=30, ge=0, description="How many days ahead a session can be booked"
    )
    platform_timezone: str = Field(
        default="UTC", description="Time zone that defines the platform's 'today'"
    )
    default_hourly_rate: Decimal = Field(
        default=Decimal("25.00"), description="Rate applied when a tutor has none set"
    )
    min_session_minutes: int = Field(default=15, ge=1)
    max_session_minutes: int = Field(default=720, ge=1)

    @field_validator("platform_timezone")
    @classmethod
    def _validate_timezone(cls, v: str) -> str:
        import pytz

        try:
            pytz.timezone(v)
        except pytz.UnknownTimeZoneError as exc:
            raise ValueError(f"Unknown platform_timezone: {v}") from exc
        return v

    @field_validator("redis_url")
    @classmethod
    def _blank_redis_is_none(cls, v: Optional[str]) -> Optional[str]:
        if v is not None and not v.strip():
            return None
        return v

    def get_database_url(self) -> str:
        """Return the URL for the active database (test database under pytest)."""
        if self.is_testing:
            return self.test_database_url
        return self.database_url


settings = Settings()
