"""Pydantic schemas for the TutorBook API (camelCase on the wire)."""

from .availability import (
    AvailabilityRuleIn,
    AvailabilityRuleResponse,
    AvailabilityRuleSetIn,
    BookableWindowResponse,
)
from .booking import BookingRequest, PricedBookingResponse
from .main_responses import HealthResponse
from .session import SessionCompleteIn, SessionResponse
from .subject import SubjectResponse, TopicResponse

__all__ = [
    "AvailabilityRuleIn",
    "AvailabilityRuleResponse",
    "AvailabilityRuleSetIn",
    "BookableWindowResponse",
    "BookingRequest",
    "HealthResponse",
    "PricedBookingResponse",
    "SessionCompleteIn",
    "SessionResponse",
    "SubjectResponse",
    "TopicResponse",
]
