# backend/tutorbook/routes/v1/__init__.py
"""
API v1 Routes

Versioned API endpoints under /api/v1.
"""

from . import bookings, health, sessions, subjects, tutors

__all__ = [
    "bookings",
    "health",
    "sessions",
    "subjects",
    "tutors",
]
