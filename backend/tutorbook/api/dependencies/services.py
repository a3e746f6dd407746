# backend/tutorbook/api/dependencies/services.py
"""
Service layer dependencies for dependency injection.

This module provides factory functions that create service instances
with their required dependencies properly injected.
"""

from fastapi import Depends
from sqlalchemy.orm import Session

from ...services.booking_service import BookingService
from ...services.session_lifecycle_service import SessionLifecycleService
from ...services.subject_service import SubjectService
from ...services.tutor_availability_service import TutorAvailabilityService
from .database import get_db


def get_booking_service(db: Session = Depends(get_db)) -> BookingService:
    """
    Get booking service instance.

    Args:
        db: Database session

    Returns:
        BookingService instance
    """
    return BookingService(db)


def get_session_lifecycle_service(db: Session = Depends(get_db)) -> SessionLifecycleService:
    return SessionLifecycleService(db)


def get_tutor_availability_service(db: Session = Depends(get_db)) -> TutorAvailabilityService:
    return TutorAvailabilityService(db)


def get_subject_service(db: Session = Depends(get_db)) -> SubjectService:
    return SubjectService(db)
