# backend/tutorbook/routes/v1/sessions.py
"""
Session lifecycle routes - API v1

    POST /api/v1/sessions/{session_id}/cancel    → booked → canceled
    POST /api/v1/sessions/{session_id}/complete  → booked → completed (optional notes)
    POST /api/v1/sessions/{session_id}/no-show   → booked → no_show
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Body, Depends

from ...api.dependencies.auth import get_current_user_id
from ...api.dependencies.services import get_session_lifecycle_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...schemas.session import SessionCompleteIn, SessionResponse
from ...services.session_lifecycle_service import SessionLifecycleService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["sessions-v1"])

_TRANSITION_RESPONSES = {
    403: {"description": "Caller may not change this session"},
    404: {"description": "Session not found"},
    422: {"description": "Session is not booked"},
}


@router.post("/{session_id}/cancel", response_model=SessionResponse, responses=_TRANSITION_RESPONSES)
async def cancel_session(
    session_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionResponse:
    """Cancel a booked session. The time becomes bookable again immediately."""
    try:
        session = await asyncio.to_thread(service.cancel, session_id, current_user_id)
        return SessionResponse.model_validate(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.post(
    "/{session_id}/complete", response_model=SessionResponse, responses=_TRANSITION_RESPONSES
)
async def complete_session(
    session_id: str,
    payload: Optional[SessionCompleteIn] = Body(None),
    current_user_id: str = Depends(get_current_user_id),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionResponse:
    """Complete a booked session, optionally recording the tutor's notes."""
    notes = payload.notes if payload else None
    try:
        session = await asyncio.to_thread(service.complete, session_id, current_user_id, notes)
        return SessionResponse.model_validate(session)
    except DomainException as e:
        handle_domain_exception(e)


@router.post("/{session_id}/no-show", response_model=SessionResponse, responses=_TRANSITION_RESPONSES)
async def mark_session_no_show(
    session_id: str,
    current_user_id: str = Depends(get_current_user_id),
    service: SessionLifecycleService = Depends(get_session_lifecycle_service),
) -> SessionResponse:
    try:
        session = await asyncio.to_thread(service.mark_no_show, session_id, current_user_id)
        return SessionResponse.model_validate(session)
    except DomainException as e:
        handle_domain_exception(e)
