"""
Database models for the TutorBook platform.

- TutorProfile: hourly rate and ownership of availability rules
- AvailabilityRule: recurring weekly availability windows
- Subject / Topic: subject catalog used by booking requests
- TutoringSession: the session ledger
"""

from .availability import AvailabilityRule
from .session import NO_OVERLAP_CONSTRAINT, SessionStatus, TutoringSession
from .subject import Subject, Topic
from .tutor import TutorProfile

__all__ = [
    "AvailabilityRule",
    "NO_OVERLAP_CONSTRAINT",
    "SessionStatus",
    "Subject",
    "Topic",
    "TutorProfile",
    "TutoringSession",
]
