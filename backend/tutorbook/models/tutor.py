# backend/tutorbook/models/tutor.py
"""
Tutor profile model.

Only the parts of the profile the booking engine reads live here: the
hourly rate and the weekly availability rules. Everything else about a
tutor is owned by the profile service.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import CheckConstraint, Column, DateTime, Numeric, String
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
import ulid

from ..database import Base


class TutorProfile(Base):
    __tablename__ = "tutor_profiles"

    id = Column(String(26), primary_key=True, index=True, default=lambda: str(ulid.ULID()))
    display_name = Column(String(120), nullable=False)
    # NULL means the tutor never set a rate; pricing falls back to the default
    hourly_rate = Column(Numeric(10, 2), nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    availability_rules = relationship(
        "AvailabilityRule",
        back_populates="tutor",
        cascade="all, delete-orphan",
        order_by="AvailabilityRule.start_time",
    )
    sessions = relationship("TutoringSession", back_populates="tutor")

    __table_args__ = (
        CheckConstraint("hourly_rate IS NULL OR hourly_rate >= 0", name="ck_tutor_rate_non_negative"),
    )

    @property
    def rate(self) -> Optional[Decimal]:
        return Decimal(str(self.hourly_rate)) if self.hourly_rate is not None else None

    def __repr__(self) -> str:
        return f"<TutorProfile {self.id}: {self.display_name} rate={self.hourly_rate}>"
