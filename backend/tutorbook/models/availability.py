# backend/tutorbook/models/availability.py
"""
Recurring weekly availability rules.

A rule says "this tutor is bookable every <day> from <start> to <end>".
Rules for the same day may overlap; nothing here deduplicates them.
"""

from typing import Any

from sqlalchemy import Boolean, CheckConstraint, Column, ForeignKey, Index, String, Time
from sqlalchemy.orm import relationship
import ulid

from ..core.constants import DAYS_OF_WEEK
from ..database import Base


class AvailabilityRule(Base):
    __tablename__ = "availability_rules"

    id = Column(String(26), primary_key=True, default=lambda: str(ulid.ULID()))
    tutor_id = Column(
        String(26),
        ForeignKey("tutor_profiles.id", ondelete="CASCADE"),
        nullable=False,
    )
    day_of_week = Column(String(3), nullable=False)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)

    tutor = relationship("TutorProfile", back_populates="availability_rules")

    __table_args__ = (
        CheckConstraint(
            "day_of_week IN ({})".format(", ".join(f"'{d}'" for d in DAYS_OF_WEEK)),
            name="ck_availability_rules_day_of_week",
        ),
        CheckConstraint("start_time < end_time", name="ck_availability_rules_time_order"),
    )

    def __init__(self, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        if self.is_active is None:
            self.is_active = True

    def __repr__(self) -> str:
        state = "active" if self.is_active else "inactive"
        return (
            f"<AvailabilityRule {self.id}: tutor={self.tutor_id} "
            f"{self.day_of_week} {self.start_time}-{self.end_time} {state}>"
        )


Index("ix_availability_rules_tutor_day", AvailabilityRule.tutor_id, AvailabilityRule.day_of_week)
