# backend/tutorbook/core/calendar.py
"""
Calendar helpers for the booking engine.

Dates handled here are calendar dates, not instants. The weekday of a
date is computed arithmetically from the date itself, so the result never
depends on the server locale or on the time zone of whoever asks.
"""

from datetime import date, datetime, time, timedelta
from typing import Optional, Tuple

import pytz

from tutorbook.core.config import settings
from tutorbook.core.constants import DAYS_OF_WEEK, MINUTES_PER_DAY


def weekday_label(target_date: date) -> str:
    """Return the Mon..Sun label for a calendar date."""
    return DAYS_OF_WEEK[target_date.weekday()]


def is_weekday_label(value: str) -> bool:
    return value in DAYS_OF_WEEK


def platform_today(now: Optional[datetime] = None) -> date:
    """
    Get today's date in the platform time zone.

    Args:
        now: Aware datetime to evaluate instead of the current instant (tests)

    Returns:
        The calendar date at that instant in settings.platform_timezone
    """
    tz = pytz.timezone(settings.platform_timezone)
    if now is None:
        return datetime.now(tz).date()
    if now.tzinfo is None:
        now = pytz.UTC.localize(now)
    return now.astimezone(tz).date()


def booking_window(today: date, horizon_days: Optional[int] = None) -> Tuple[date, date]:
    """Return the inclusive (earliest, latest) bookable dates."""
    days = settings.booking_horizon_days if horizon_days is None else horizon_days
    return today, today + timedelta(days=days)


def minutes_of_day(value: time) -> int:
    return value.hour * 60 + value.minute


def time_from_minutes(minutes: int) -> time:
    """Convert minutes since midnight to a time; 1440 and above are rejected."""
    if minutes < 0 or minutes >= MINUTES_PER_DAY:
        raise ValueError(f"{minutes} minutes is outside a single day")
    return time(hour=minutes // 60, minute=minutes % 60)


def combine(target_date: date, value: time) -> datetime:
    """Wall-clock timestamp for a time of day on a calendar date (naive)."""
    return datetime.combine(target_date, value.replace(second=0, microsecond=0, tzinfo=None))


def format_hhmm(value: time) -> str:
    return value.strftime("%H:%M")


def parse_hhmm(value: str) -> time:
    """Parse an HH:MM string into a minute-precision time."""
    parsed = datetime.strptime(value.strip(), "%H:%M")
    return parsed.time()
