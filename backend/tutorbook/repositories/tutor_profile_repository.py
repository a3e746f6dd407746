# backend/tutorbook/repositories/tutor_profile_repository.py
"""
Tutor profile repository: the read model the booking engine consumes
for a tutor's availability rules and hourly rate.
"""

from decimal import Decimal
import logging
from typing import List, Optional, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import AvailabilityRule
from ..models.tutor import TutorProfile
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class TutorProfileRepository(BaseRepository[TutorProfile]):
    def __init__(self, db: Session):
        super().__init__(db, TutorProfile)

    def get_availability_rules(self, tutor_id: str) -> List[AvailabilityRule]:
        """
        Get every availability rule for a tutor, active or not.

        Returns:
            Rules ordered by day label then start time
        """
        try:
            return cast(
                List[AvailabilityRule],
                self.db.query(AvailabilityRule)
                .filter(AvailabilityRule.tutor_id == tutor_id)
                .order_by(AvailabilityRule.day_of_week, AvailabilityRule.start_time)
                .all(),
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting availability rules for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to get availability rules: {str(e)}")

    def get_hourly_rate(self, tutor_id: str) -> Optional[Decimal]:
        """Return the tutor's hourly rate, or None when not set or the tutor is unknown."""
        try:
            rate = (
                self.db.query(TutorProfile.hourly_rate)
                .filter(TutorProfile.id == tutor_id)
                .scalar()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting hourly rate for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to get hourly rate: {str(e)}")
        if rate is None:
            return None
        return rate if isinstance(rate, Decimal) else Decimal(str(rate))
