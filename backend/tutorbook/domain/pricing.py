"""Session pricing."""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from tutorbook.core.constants import PRICE_QUANTUM
from tutorbook.core.exceptions import InvalidDuration

Number = Union[Decimal, int, float, str]

_QUANTUM = Decimal(PRICE_QUANTUM)
_MINUTES_PER_HOUR = Decimal(60)


def to_decimal(value: Number) -> Decimal:
    if isinstance(value, Decimal):
        return value
    # str() first so 0.1 stays 0.1 instead of its binary expansion
    return Decimal(str(value))


def price(hourly_rate: Number, duration_minutes: int) -> Decimal:
    """
    Price a session: hourly_rate * duration / 60, rounded half-up to cents.

    >>> price(25, 90)
    Decimal('37.50')
    >>> price(40, 30)
    Decimal('20.00')
    """
    rate = to_decimal(hourly_rate)
    if rate < 0:
        raise ValueError(f"Hourly rate cannot be negative: {rate}")
    if duration_minutes <= 0:
        raise InvalidDuration(
            "Duration must be a positive number of minutes",
            duration_minutes=duration_minutes,
        )
    raw = rate * Decimal(duration_minutes) / _MINUTES_PER_HOUR
    return raw.quantize(_QUANTUM, rounding=ROUND_HALF_UP)
