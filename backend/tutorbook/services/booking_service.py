# backend/tutorbook/services/booking_service.py
"""
Booking Service for TutorBook

Exposes the two booking engine operations:

- get_available_windows: resolve a tutor's bookable windows on a date
- create_booking: validate a request against re-derived availability,
  append the session to the ledger and price it

create_booking runs its check-then-insert-then-commit sequence under the
tutor's booking lock, and the ledger insert re-checks overlap inside the
same transaction. Nothing here retries; every rejection goes back to the
caller.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
import logging
from typing import TYPE_CHECKING, Callable, List, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..core.booking_lock import tutor_booking_lock
from ..core.calendar import combine, platform_today
from ..core.config import settings
from ..core.exceptions import (
    ConflictException,
    DomainException,
    InvalidDuration,
    SlotUnavailable,
    TutorNotFound,
)
from ..domain.booking_types import BookableWindow, PricedBooking
from ..domain.booking_validator import BookingRequestLike, BookingValidator
from ..domain.pricing import price
from ..domain.slot_resolver import resolve
from ..models.session import SessionStatus, TutoringSession
from ..monitoring.prometheus_metrics import prometheus_metrics
from ..repositories.factory import RepositoryFactory
from ..repositories.session_repository import is_overlap_violation
from .base import BaseService

if TYPE_CHECKING:
    from ..repositories.session_repository import SessionRepository
    from ..repositories.subject_repository import SubjectRepository
    from ..repositories.tutor_profile_repository import TutorProfileRepository

logger = logging.getLogger(__name__)

SLOT_TAKEN_MESSAGE = "That time slot was just booked, please choose another"
LOCK_BUSY_MESSAGE = "Another booking for this tutor is in progress, please try again"


class BookingService(BaseService):
    """Service layer for availability lookup and booking creation."""

    def __init__(
        self,
        db: Session,
        tutor_repository: Optional["TutorProfileRepository"] = None,
        session_repository: Optional["SessionRepository"] = None,
        subject_repository: Optional["SubjectRepository"] = None,
        today_provider: Optional[Callable[[], date]] = None,
    ):
        """
        Initialize booking service.

        Args:
            db: Database session
            tutor_repository: Optional TutorProfileRepository instance
            session_repository: Optional SessionRepository instance
            subject_repository: Optional SubjectRepository instance
            today_provider: Returns the platform's current date (defaults to platform_today)
        """
        super().__init__(db)
        self.tutor_repository = tutor_repository or RepositoryFactory.create_tutor_profile_repository(db)
        self.session_repository = session_repository or RepositoryFactory.create_session_repository(db)
        self.subject_repository = subject_repository or RepositoryFactory.create_subject_repository(db)
        self.today_provider = today_provider or platform_today

    def _require_tutor(self, tutor_id: str) -> None:
        if not self.tutor_repository.exists(id=tutor_id):
            raise TutorNotFound(tutor_id)

    def _validator(self) -> BookingValidator:
        return BookingValidator(
            today=self.today_provider(),
            horizon_days=settings.booking_horizon_days,
        )

    @BaseService.measure_operation("get_available_windows")
    def get_available_windows(
        self, tutor_id: str, target_date: date, duration_minutes: int
    ) -> List[BookableWindow]:
        """
        Get the windows a student can book on a date.

        Args:
            tutor_id: The tutor
            target_date: Calendar date
            duration_minutes: Requested session length

        Returns:
            Bookable windows ordered by start time

        Raises:
            TutorNotFound: unknown tutor
            InvalidDuration: duration outside the configured session bounds
        """
        self._require_tutor(tutor_id)
        self._check_duration_bounds(duration_minutes)

        rules = self.tutor_repository.get_availability_rules(tutor_id)
        sessions = self.session_repository.get_sessions_on_date(tutor_id, target_date)
        return resolve(rules, sessions, target_date, duration_minutes)

    @BaseService.measure_operation("create_booking")
    def create_booking(self, request: BookingRequestLike, student_id: str) -> PricedBooking:
        """
        Create a booked session for a student.

        Args:
            request: Tutor, date, start time, duration, subject/topic, notes
            student_id: The caller booking the session

        Returns:
            The persisted session and its price

        Raises:
            TutorNotFound: unknown tutor
            OutOfRangeDate: date before today or past the booking horizon
            InvalidSubject: subject missing/unknown or topic mismatch
            InvalidDuration: bad duration or one crossing midnight
            SlotUnavailable: start not bookable, lost a race, or lock busy
        """
        try:
            priced = self._create_booking(request, student_id)
        except DomainException as exc:
            prometheus_metrics.record_booking_outcome(exc.code.lower())
            raise
        prometheus_metrics.record_booking_outcome("created")
        return priced

    def _create_booking(self, request: BookingRequestLike, student_id: str) -> PricedBooking:
        # 1. Tutor must exist
        self._require_tutor(request.tutor_id)

        # 2. Checks that don't depend on the ledger run before taking the lock
        validator = self._validator()
        validator.check_date(request.date)
        subject = (
            self.subject_repository.get_with_topics(request.subject_id)
            if request.subject_id
            else None
        )
        validator.check_subject(request.subject_id, request.topic_id, subject)
        validator.check_session_length(request.start_time, request.duration_minutes)
        self._check_duration_bounds(request.duration_minutes)

        # 3. Serialize per tutor across re-check, insert and commit
        with tutor_booking_lock(request.tutor_id) as acquired:
            if not acquired:
                raise SlotUnavailable(
                    LOCK_BUSY_MESSAGE,
                    details={"tutor_id": request.tutor_id, "reason": "lock_timeout"},
                )
            try:
                with self.session_repository.transaction():
                    # 4. Re-derive availability from the current ledger
                    rules = self.tutor_repository.get_availability_rules(request.tutor_id)
                    sessions = self.session_repository.get_sessions_on_date(
                        request.tutor_id, request.date
                    )
                    window = validator.validate(request, rules, sessions, subject)

                    # 5. Price and append
                    amount = price(self._hourly_rate(request.tutor_id), request.duration_minutes)
                    session = TutoringSession(
                        tutor_id=request.tutor_id,
                        student_id=student_id,
                        subject_id=request.subject_id,
                        topic_id=request.topic_id,
                        start_at=combine(window.date, window.start_time),
                        end_at=combine(window.date, window.end_time),
                        status=SessionStatus.BOOKED.value,
                        price=amount,
                        notes=getattr(request, "notes", None),
                    )
                    self.session_repository.insert_session(session)
            except SlotUnavailable:
                raise
            except ConflictException as exc:
                raise SlotUnavailable(SLOT_TAKEN_MESSAGE, details=dict(exc.details)) from exc
            except IntegrityError as exc:
                if is_overlap_violation(exc):
                    raise SlotUnavailable(
                        SLOT_TAKEN_MESSAGE, details={"tutor_id": request.tutor_id}
                    ) from exc
                raise

        self.log_operation(
            "create_booking",
            session_id=session.id,
            tutor_id=request.tutor_id,
            student_id=student_id,
            start_at=str(session.start_at),
            price=str(amount),
        )
        return PricedBooking(session=session, price=amount)

    @staticmethod
    def _check_duration_bounds(duration_minutes: int) -> None:
        low, high = settings.min_session_minutes, settings.max_session_minutes
        if not low <= duration_minutes <= high:
            raise InvalidDuration(
                f"Duration must be between {low} and {high} minutes",
                duration_minutes=duration_minutes,
            )

    def _hourly_rate(self, tutor_id: str) -> Decimal:
        rate = self.tutor_repository.get_hourly_rate(tutor_id)
        if rate is None:
            return Decimal(settings.default_hourly_rate)
        return rate
