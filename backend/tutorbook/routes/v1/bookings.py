# backend/tutorbook/routes/v1/bookings.py
"""
Booking routes - API v1

    POST /api/v1/bookings → Create a booked, priced session
"""

import asyncio
import logging

from fastapi import APIRouter, Body, Depends, status

from ...api.dependencies.auth import get_current_user_id
from ...api.dependencies.services import get_booking_service
from ...core.exceptions import DomainException
from ...errors import handle_domain_exception
from ...schemas.booking import BookingRequest, PricedBookingResponse
from ...schemas.session import SessionResponse
from ...services.booking_service import BookingService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["bookings-v1"])


@router.post(
    "",
    response_model=PricedBookingResponse,
    status_code=status.HTTP_201_CREATED,
    responses={
        400: {"description": "Invalid subject or duration"},
        401: {"description": "Caller not identified"},
        404: {"description": "Tutor not found"},
        409: {"description": "Time slot not available"},
        422: {"description": "Date outside the booking window"},
    },
)
async def create_booking(
    booking_data: BookingRequest = Body(...),
    current_user_id: str = Depends(get_current_user_id),
    booking_service: BookingService = Depends(get_booking_service),
) -> PricedBookingResponse:
    """
    Book a session.

    Availability is re-derived server-side; a start that is no longer
    bookable returns 409 and the client should re-fetch availability.
    """
    try:
        priced = await asyncio.to_thread(
            booking_service.create_booking, booking_data, current_user_id
        )
        return PricedBookingResponse(
            session=SessionResponse.model_validate(priced.session),
            price=priced.price,
        )
    except DomainException as e:
        handle_domain_exception(e)
