# backend/tutorbook/repositories/factory.py
"""
Repository Factory for TutorBook.

Centralizes creation of repository instances so services and tests build
them the same way.
"""

from typing import TYPE_CHECKING

from sqlalchemy.orm import Session

# Avoid circular imports
if TYPE_CHECKING:
    from .availability_rule_repository import AvailabilityRuleRepository
    from .session_repository import SessionRepository
    from .subject_repository import SubjectRepository
    from .tutor_profile_repository import TutorProfileRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_tutor_profile_repository(db: Session) -> "TutorProfileRepository":
        """Create repository for tutor profile reads (rules, hourly rate)."""
        from .tutor_profile_repository import TutorProfileRepository

        return TutorProfileRepository(db)

    @staticmethod
    def create_availability_rule_repository(db: Session) -> "AvailabilityRuleRepository":
        """Create repository for availability rule writes."""
        from .availability_rule_repository import AvailabilityRuleRepository

        return AvailabilityRuleRepository(db)

    @staticmethod
    def create_session_repository(db: Session) -> "SessionRepository":
        """Create repository for the session ledger."""
        from .session_repository import SessionRepository

        return SessionRepository(db)

    @staticmethod
    def create_subject_repository(db: Session) -> "SubjectRepository":
        """Create repository for subject/topic lookups."""
        from .subject_repository import SubjectRepository

        return SubjectRepository(db)
