# backend/tutorbook/repositories/session_repository.py
"""
Session ledger repository.

Reads return sessions of every status; callers (the slot resolver) decide
which statuses block availability. insert_session is the only write path
for new sessions and re-checks overlap inside the caller's transaction.
"""

from datetime import date, datetime, timedelta
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import ConflictException, RepositoryException
from ..models.session import NO_OVERLAP_CONSTRAINT, SessionStatus, TutoringSession
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


def is_overlap_violation(exc: IntegrityError) -> bool:
    """True when an IntegrityError comes from the per-tutor exclusion constraint."""
    orig = getattr(exc, "orig", None)
    diag = getattr(orig, "diag", None)
    constraint_name = ""
    if diag is not None:
        constraint_name = getattr(diag, "constraint_name", "") or ""
    if constraint_name:
        return bool(constraint_name == NO_OVERLAP_CONSTRAINT)
    return NO_OVERLAP_CONSTRAINT in str(orig if orig is not None else exc)


class SessionRepository(BaseRepository[TutoringSession]):
    def __init__(self, db: Session):
        super().__init__(db, TutoringSession)

    def get_sessions(
        self,
        tutor_id: str,
        start: Optional[datetime] = None,
        end: Optional[datetime] = None,
    ) -> List[TutoringSession]:
        """
        Get a tutor's sessions, all statuses included.

        Args:
            tutor_id: The tutor
            start: Only sessions ending after this instant
            end: Only sessions starting before this instant

        Returns:
            Sessions ordered by start_at
        """
        try:
            query = self.db.query(TutoringSession).filter(TutoringSession.tutor_id == tutor_id)
            if start is not None:
                query = query.filter(TutoringSession.end_at > start)
            if end is not None:
                query = query.filter(TutoringSession.start_at < end)
            return cast(List[TutoringSession], query.order_by(TutoringSession.start_at).all())
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting sessions for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to get sessions: {str(e)}")

    def get_sessions_on_date(self, tutor_id: str, target_date: date) -> List[TutoringSession]:
        """Sessions that intersect the calendar day of target_date."""
        day_start = datetime.combine(target_date, datetime.min.time())
        return self.get_sessions(tutor_id, start=day_start, end=day_start + timedelta(days=1))

    def find_overlapping(
        self, tutor_id: str, start_at: datetime, end_at: datetime
    ) -> List[TutoringSession]:
        """Non-canceled sessions for the tutor that overlap [start_at, end_at)."""
        try:
            return cast(
                List[TutoringSession],
                self.db.query(TutoringSession)
                .filter(
                    TutoringSession.tutor_id == tutor_id,
                    TutoringSession.status != SessionStatus.CANCELED.value,
                    TutoringSession.start_at < end_at,
                    TutoringSession.end_at > start_at,
                )
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error checking overlap for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to check overlapping sessions: {str(e)}")

    def insert_session(self, session: TutoringSession) -> TutoringSession:
        """
        Append a session to the ledger.

        Does not commit. Raises ConflictException when a non-canceled session
        already overlaps, either found by the re-check here or reported by the
        database exclusion constraint on flush.
        """
        if session.status != SessionStatus.CANCELED.value:
            existing = self.find_overlapping(
                str(session.tutor_id), cast(datetime, session.start_at), cast(datetime, session.end_at)
            )
            if existing:
                logger.warning(
                    "Session insert rejected: overlap with existing session",
                    extra={
                        "tutor_id": session.tutor_id,
                        "start_at": str(session.start_at),
                        "end_at": str(session.end_at),
                        "conflicting_session_ids": [s.id for s in existing],
                    },
                )
                raise ConflictException(
                    message="Tutor already has a session in this time range",
                    code="SESSION_OVERLAP",
                    details={"conflicting_session_ids": [s.id for s in existing]},
                )

        try:
            self.db.add(session)
            self.db.flush()
            return session
        except IntegrityError as exc:
            if is_overlap_violation(exc):
                raise ConflictException(
                    message="Tutor already has a session in this time range",
                    code="SESSION_OVERLAP",
                    details={"constraint": NO_OVERLAP_CONSTRAINT},
                ) from exc
            self.logger.error("Integrity error inserting session: %s", exc)
            raise RepositoryException(f"Integrity constraint violated: {exc}") from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Error inserting session: {str(e)}")
            raise RepositoryException(f"Failed to insert session: {str(e)}")

    def list_for_tutor(
        self, tutor_id: str, status: Optional[str] = None, limit: int = 100
    ) -> List[TutoringSession]:
        """Tutor's sessions, newest first, optionally filtered by status."""
        try:
            query = self.db.query(TutoringSession).filter(TutoringSession.tutor_id == tutor_id)
            if status:
                query = query.filter(TutoringSession.status == status)
            return cast(
                List[TutoringSession],
                query.order_by(TutoringSession.start_at.desc()).limit(limit).all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error listing sessions for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to list sessions: {str(e)}")
