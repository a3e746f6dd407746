"""
Booking validation.

BookingValidator decides whether a booking request can be accepted against
a tutor's rules and ledger, and which window it lands in. It never trusts a
client-supplied window: availability is always re-derived with resolve().

It is pure. Persisting the session and pricing it is the job of
BookingService, which calls validate() while holding the tutor's lock.
"""

from __future__ import annotations

from datetime import date, time
import logging
from typing import Any, Iterable, Optional, Protocol

from tutorbook.core.calendar import booking_window, format_hhmm, minutes_of_day
from tutorbook.core.constants import MINUTES_PER_DAY
from tutorbook.core.exceptions import (
    InvalidDuration,
    InvalidSubject,
    OutOfRangeDate,
    SlotUnavailable,
)
from tutorbook.domain.booking_types import BookableWindow
from tutorbook.domain.slot_resolver import RuleLike, SessionLike, check_duration, resolve

logger = logging.getLogger(__name__)


class BookingRequestLike(Protocol):
    tutor_id: str
    date: date
    start_time: time
    duration_minutes: int
    subject_id: Optional[str]
    topic_id: Optional[str]


class BookingValidator:
    """
    Validate a booking request against re-derived availability.

    Args:
        today: The platform's current calendar date
        horizon_days: How many days past today a session may be booked (inclusive)
    """

    def __init__(self, today: date, horizon_days: int):
        self.today = today
        self.horizon_days = horizon_days

    def check_date(self, target_date: date) -> None:
        earliest, latest = booking_window(self.today, self.horizon_days)
        if target_date < earliest or target_date > latest:
            raise OutOfRangeDate(
                requested=target_date.isoformat(),
                earliest=earliest.isoformat(),
                latest=latest.isoformat(),
            )

    @staticmethod
    def check_subject(subject_id: Optional[str], topic_id: Optional[str], subject: Any) -> None:
        """
        Args:
            subject_id: Requested subject id (may be missing)
            topic_id: Requested topic id (optional)
            subject: The stored subject for subject_id, or None if unknown
        """
        if not subject_id:
            raise InvalidSubject("A subject is required")
        if subject is None:
            raise InvalidSubject("Unknown subject", subject_id=subject_id)
        if topic_id:
            topic_ids = {t.id for t in getattr(subject, "topics", [])}
            if topic_id not in topic_ids:
                raise InvalidSubject(
                    "Topic does not belong to the subject",
                    subject_id=subject_id,
                    topic_id=topic_id,
                )

    @staticmethod
    def check_session_length(start_time: time, duration_minutes: int) -> None:
        check_duration(duration_minutes)
        if minutes_of_day(start_time) + duration_minutes > MINUTES_PER_DAY:
            raise InvalidDuration(
                "Sessions cannot cross midnight",
                start_time=format_hhmm(start_time),
                duration_minutes=duration_minutes,
            )

    def validate(
        self,
        request: BookingRequestLike,
        rules: Iterable[RuleLike],
        sessions: Iterable[SessionLike],
        subject: Any,
    ) -> BookableWindow:
        """
        Validate a request and return the window it books.

        Raises:
            OutOfRangeDate: date before today or past the horizon
            InvalidSubject: subject missing/unknown, or topic not in subject
            InvalidDuration: non-positive duration, or one crossing midnight
            SlotUnavailable: no re-derived window starts at the requested time
        """
        # 1. Date range
        self.check_date(request.date)

        # 2. Subject
        self.check_subject(request.subject_id, request.topic_id, subject)

        # 3. Duration
        self.check_session_length(request.start_time, request.duration_minutes)

        # 4. Re-derive availability server-side
        windows = resolve(rules, sessions, request.date, request.duration_minutes)

        # 5. The requested start must match a surviving window
        wanted = request.start_time.replace(second=0, microsecond=0)
        for window in windows:
            if window.start_time == wanted:
                return window

        logger.info(
            "Requested slot is not bookable",
            extra={
                "tutor_id": request.tutor_id,
                "date": request.date.isoformat(),
                "start_time": format_hhmm(wanted),
                "duration_minutes": request.duration_minutes,
                "windows_available": len(windows),
            },
        )
        raise SlotUnavailable(
            details={
                "date": request.date.isoformat(),
                "start_time": format_hhmm(wanted),
                "duration_minutes": request.duration_minutes,
            }
        )
