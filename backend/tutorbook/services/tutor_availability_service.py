# backend/tutorbook/services/tutor_availability_service.py
"""
Tutor availability rule management.

The tutor edits their weekly availability as a whole: PUT replaces the
complete rule set in one transaction. Sessions already booked are never
touched by a rule change.
"""

import logging
from typing import Any, List, Optional, Sequence

from sqlalchemy.orm import Session

from ..core.calendar import format_hhmm, is_weekday_label
from ..core.exceptions import ForbiddenException, TutorNotFound, ValidationException
from ..models.availability import AvailabilityRule
from ..repositories.availability_rule_repository import AvailabilityRuleRepository
from ..repositories.factory import RepositoryFactory
from ..repositories.tutor_profile_repository import TutorProfileRepository
from .base import BaseService

logger = logging.getLogger(__name__)


class TutorAvailabilityService(BaseService):
    def __init__(
        self,
        db: Session,
        tutor_repository: Optional[TutorProfileRepository] = None,
        rule_repository: Optional[AvailabilityRuleRepository] = None,
    ):
        super().__init__(db)
        self.tutor_repository = tutor_repository or RepositoryFactory.create_tutor_profile_repository(db)
        self.rule_repository = rule_repository or RepositoryFactory.create_availability_rule_repository(db)

    def _require_tutor(self, tutor_id: str) -> None:
        if not self.tutor_repository.exists(id=tutor_id):
            raise TutorNotFound(tutor_id)

    @BaseService.measure_operation("get_availability_rules")
    def get_rules(self, tutor_id: str) -> List[AvailabilityRule]:
        self._require_tutor(tutor_id)
        return self.tutor_repository.get_availability_rules(tutor_id)

    @staticmethod
    def _validate_rules(rules: Sequence[Any]) -> None:
        for index, rule in enumerate(rules):
            if not is_weekday_label(rule.day_of_week):
                raise ValidationException(
                    f"Unknown day of week: {rule.day_of_week}",
                    code="INVALID_AVAILABILITY_RULE",
                    details={"index": index, "day_of_week": rule.day_of_week},
                )
            if rule.start_time >= rule.end_time:
                raise ValidationException(
                    "Availability start time must be before end time",
                    code="INVALID_AVAILABILITY_RULE",
                    details={
                        "index": index,
                        "start_time": format_hhmm(rule.start_time),
                        "end_time": format_hhmm(rule.end_time),
                    },
                )

    @BaseService.measure_operation("replace_availability_rules")
    def replace_rules(
        self, tutor_id: str, rules: Sequence[Any], actor_id: str
    ) -> List[AvailabilityRule]:
        """
        Replace a tutor's whole weekly rule set.

        Args:
            tutor_id: Tutor whose rules are replaced
            rules: New rules (day_of_week, start_time, end_time, is_active)
            actor_id: Caller; must be the tutor

        Returns:
            The stored rules
        """
        if actor_id != tutor_id:
            raise ForbiddenException(
                "You can only edit your own availability",
                code="AVAILABILITY_FORBIDDEN",
                details={"tutor_id": tutor_id},
            )
        self._require_tutor(tutor_id)
        self._validate_rules(rules)

        payload = [
            {
                "day_of_week": rule.day_of_week,
                "start_time": rule.start_time.replace(second=0, microsecond=0),
                "end_time": rule.end_time.replace(second=0, microsecond=0),
                "is_active": bool(rule.is_active),
            }
            for rule in rules
        ]
        with self.transaction():
            created = self.rule_repository.replace_for_tutor(tutor_id, payload)

        self.log_operation("replace_availability_rules", tutor_id=tutor_id, rules=len(created))
        return created
