# backend/tutorbook/models/session.py
"""
Tutoring session model: the session ledger.

Every booking produces one row here. Rows are never deleted; a canceled
session stays for history but no longer blocks the tutor's availability.

start_at/end_at are wall-clock timestamps in the platform calendar (naive,
minute precision). For a single tutor, sessions whose status is not
'canceled' never overlap. The service layer enforces this under a
per-tutor lock, and on PostgreSQL the sessions_no_overlap_per_tutor
exclusion constraint enforces it in the database as well.
"""

from datetime import datetime, timezone
from enum import Enum
import logging
from typing import Any, Optional

from sqlalchemy import (
    DDL,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Numeric,
    String,
    Text,
    event,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base

logger = logging.getLogger(__name__)

NO_OVERLAP_CONSTRAINT = "sessions_no_overlap_per_tutor"


class SessionStatus(str, Enum):
    """Session lifecycle statuses."""

    BOOKED = "booked"  # Default - created by a successful booking
    COMPLETED = "completed"
    CANCELED = "canceled"  # Retained, excluded from conflict checks
    NO_SHOW = "no_show"


class TutoringSession(Base):
    __tablename__ = "sessions"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))

    tutor_id = Column(String(26), ForeignKey("tutor_profiles.id"), nullable=False)
    # Students are owned by the external user service
    student_id = Column(String(26), nullable=False, index=True)
    subject_id = Column(String(26), ForeignKey("subjects.id"), nullable=False)
    topic_id = Column(String(26), ForeignKey("topics.id"), nullable=True)

    start_at = Column(DateTime(timezone=False), nullable=False)
    end_at = Column(DateTime(timezone=False), nullable=False)

    status = Column(String(20), nullable=False, default=SessionStatus.BOOKED.value, index=True)
    price = Column(Numeric(10, 2), nullable=False)
    notes = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
    completed_at = Column(DateTime(timezone=True), nullable=True)
    canceled_at = Column(DateTime(timezone=True), nullable=True)

    tutor = relationship("TutorProfile", back_populates="sessions")
    subject = relationship("Subject")
    topic = relationship("Topic")

    __table_args__ = (
        CheckConstraint(
            "status IN ('booked', 'completed', 'canceled', 'no_show')",
            name="ck_sessions_status",
        ),
        CheckConstraint("start_at < end_at", name="ck_sessions_time_order"),
        CheckConstraint("price >= 0", name="ck_sessions_price_non_negative"),
    )

    def __init__(self, **kwargs: Any) -> None:
        """Initialize as booked by default."""
        super().__init__(**kwargs)
        if not self.status:
            self.status = SessionStatus.BOOKED.value
        logger.info(f"Creating session for student {self.student_id} with tutor {self.tutor_id}")

    def __repr__(self) -> str:
        return (
            f"<TutoringSession {self.id}: tutor={self.tutor_id}, student={self.student_id}, "
            f"{self.start_at}-{self.end_at}, status={self.status}>"
        )

    @property
    def blocks_availability(self) -> bool:
        return self.status != SessionStatus.CANCELED.value

    @property
    def duration_minutes(self) -> int:
        return int((self.end_at - self.start_at).total_seconds() // 60)

    def cancel(self) -> None:
        """Cancel this session."""
        self.status = SessionStatus.CANCELED.value
        self.canceled_at = datetime.now(timezone.utc)
        logger.info(f"Session {self.id} canceled")

    def complete(self, notes: Optional[str] = None) -> None:
        """Mark session as completed, appending any completion notes."""
        self.status = SessionStatus.COMPLETED.value
        self.completed_at = datetime.now(timezone.utc)
        if notes:
            self.notes = f"{self.notes}\n\n{notes}" if self.notes else notes
        logger.info(f"Session {self.id} marked as completed")

    def mark_no_show(self) -> None:
        """Mark session as no-show."""
        self.status = SessionStatus.NO_SHOW.value
        logger.info(f"Session {self.id} marked as no-show")


# Same constraint as migration 001, for create_all() on PostgreSQL
NO_OVERLAP_DDL = (
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist"),
    DDL(
        f"ALTER TABLE sessions ADD CONSTRAINT {NO_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist (tutor_id WITH =, tsrange(start_at, end_at, '[)') WITH &&) "
        "WHERE (status <> 'canceled')"
    ),
)
for _ddl in NO_OVERLAP_DDL:
    event.listen(TutoringSession.__table__, "after_create", _ddl.execute_if(dialect="postgresql"))
