# backend/tutorbook/routes/v1/tutors.py
"""
Tutor routes - API v1

Versioned tutor endpoints under /api/v1/tutors.

Endpoints:
    GET /{tutor_id}/availability          → Bookable windows on a date
    GET /{tutor_id}/availability-rules    → Weekly availability rules
    PUT /{tutor_id}/availability-rules    → Replace weekly availability rules
    GET /{tutor_id}/sessions              → The tutor's sessions, newest first
"""

import asyncio
from datetime import date
import logging
from typing import List, Literal, Optional

from fastapi import APIRouter, Body, Depends, Query

from ...api.dependencies.auth import get_current_user_id
from ...api.dependencies.services import (
    get_booking_service,
    get_session_lifecycle_service,
    get_tutor_availability_service,
)
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...schemas.availability import (
    AvailabilityRuleResponse,
    AvailabilityRuleSetIn,
    BookableWindowResponse,
)
from ...schemas.session import SessionResponse
from ...services.booking_service import BookingService
from ...services.session_lifecycle_service import SessionLifecycleService
from ...services.tutor_availability_service import TutorAvailabilityService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["tutors-v1"])

SessionStatusFilter = Literal["booked", "completed", "canceled", "no_show"]


@router.get(
    "/{tutor_id}/availability",
    response_model=List[BookableWindowResponse],
    responses={
        400: {"description": "Invalid duration"},
        404: {"description": "Tutor not found"},
    },
)
async def get_tutor_availability(
    tutor_id: str,
    target_date: date = Query(..., alias="date", description="Calendar date, YYYY-MM-DD"),
    duration: int = Query(60, description="Session length in minutes"),
    booking_service: BookingService = Depends(get_booking_service),
) -> List[BookableWindowResponse]:
    """
    List the start times a student can book on a date.

    Each entry is one bookable start and the end it implies for the
    requested duration.
    """
    try:
        windows = await asyncio.to_thread(
            booking_service.get_available_windows, tutor_id, target_date, duration
        )
        return [BookableWindowResponse.model_validate(w) for w in windows]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{tutor_id}/availability-rules", response_model=List[AvailabilityRuleResponse])
async def get_availability_rules(
    tutor_id: str,
    service: TutorAvailabilityService = Depends(get_tutor_availability_service),
) -> List[AvailabilityRuleResponse]:
    try:
        rules = await asyncio.to_thread(service.get_rules, tutor_id)
        return [AvailabilityRuleResponse.model_validate(r) for r in rules]
    except DomainException as e:
        handle_domain_exception(e)


@router.put(
    "/{tutor_id}/availability-rules",
    response_model=List[AvailabilityRuleResponse],
    responses={
        400: {"description": "A rule has start time at or after end time"},
        403: {"description": "Caller is not this tutor"},
        404: {"description": "Tutor not found"},
    },
)
async def replace_availability_rules(
    tutor_id: str,
    payload: AvailabilityRuleSetIn = Body(...),
    current_user_id: str = Depends(get_current_user_id),
    service: TutorAvailabilityService = Depends(get_tutor_availability_service),
) -> List[AvailabilityRuleResponse]:
    """Replace the tutor's complete weekly rule set."""
    try:
        rules = await asyncio.to_thread(
            service.replace_rules, tutor_id, payload.rules, current_user_id
        )
        return [AvailabilityRuleResponse.model_validate(r) for r in rules]
    except DomainException as e:
        handle_domain_exception(e)


@router.get("/{tutor_id}/sessions", response_model=List[SessionResponse])
async def list_tutor_sessions(
    tutor_id: str,
    status: Optional[SessionStatusFilter] = Query(None),
    current_user_id: str = Depends(get_current_user_id),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> List[SessionResponse]:
    try:
        sessions = await asyncio.to_thread(
            service.list_for_tutor, tutor_id, current_user_id, status
        )
        return [SessionResponse.model_validate(s) for s in sessions]
    except DomainException as e:
        handle_domain_exception(e)
