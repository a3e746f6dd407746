"""Value types produced by the booking engine."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, time
from decimal import Decimal
from typing import TYPE_CHECKING

from tutorbook.core.calendar import combine

if TYPE_CHECKING:
    from tutorbook.models.session import TutoringSession


@dataclass(frozen=True)
class BookableWindow:
    """A concrete, date-specific start a student may book. Never persisted."""

    date: date
    start_time: time
    end_time: time
    source_rule_id: str

    @property
    def start_at(self) -> datetime:
        return combine(self.date, self.start_time)

    @property
    def end_at(self) -> datetime:
        return combine(self.date, self.end_time)


@dataclass(frozen=True)
class PricedBooking:
    """A newly booked session together with its computed price."""

    session: "TutoringSession"
    price: Decimal
