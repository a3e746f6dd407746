# backend/tutorbook/repositories/availability_rule_repository.py
"""Write side of the availability rule store."""

import logging
from typing import Any, Dict, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.availability import AvailabilityRule
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityRuleRepository(BaseRepository[AvailabilityRule]):
    def __init__(self, db: Session):
        super().__init__(db, AvailabilityRule)

    def delete_for_tutor(self, tutor_id: str) -> int:
        try:
            deleted = (
                self.db.query(AvailabilityRule)
                .filter(AvailabilityRule.tutor_id == tutor_id)
                .delete(synchronize_session="fetch")
            )
            self.db.flush()
            return int(deleted)
        except SQLAlchemyError as e:
            self.logger.error(f"Error deleting rules for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete availability rules: {str(e)}")

    def replace_for_tutor(
        self, tutor_id: str, rules: Sequence[Dict[str, Any]]
    ) -> List[AvailabilityRule]:
        """
        Replace a tutor's whole rule set.

        Does not commit. Each entry carries day_of_week, start_time,
        end_time and optionally is_active.
        """
        removed = self.delete_for_tutor(tutor_id)
        try:
            created = [AvailabilityRule(tutor_id=tutor_id, **data) for data in rules]
            self.db.add_all(created)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error inserting rules for tutor {tutor_id}: {str(e)}")
            raise RepositoryException(f"Failed to replace availability rules: {str(e)}")

        logger.info(
            "Replaced availability rules",
            extra={
                "tutor_id": tutor_id,
                "rules_removed": removed,
                "rules_created": len(created),
            },
        )
        return created
