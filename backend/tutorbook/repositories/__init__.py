# backend/tutorbook/repositories/__init__.py
"""
Repository layer for TutorBook.

Usage:
    from tutorbook.repositories import RepositoryFactory

    # In a service:
    sessions = RepositoryFactory.create_session_repository(db)
    ledger = sessions.get_sessions(tutor_id)
"""

from .availability_rule_repository import AvailabilityRuleRepository
from .base_repository import BaseRepository
from .factory import RepositoryFactory
from .session_repository import SessionRepository
from .subject_repository import SubjectRepository
from .tutor_profile_repository import TutorProfileRepository

__all__ = [
    "AvailabilityRuleRepository",
    "BaseRepository",
    "RepositoryFactory",
    "SessionRepository",
    "SubjectRepository",
    "TutorProfileRepository",
]
