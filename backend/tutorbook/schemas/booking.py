"""Booking request/response schemas."""

import datetime as dt
from typing import Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_NOTES_LENGTH
from ._strict_base import CamelModel, Money, StrictRequestModel, coerce_hhmm
from .session import SessionResponse


class BookingRequest(StrictRequestModel):
    """
    Book one session.

    The client names the start it picked from the availability listing;
    the server re-derives availability and never trusts a client window.
    """

    tutor_id: str = Field(..., description="Tutor to book")
    date: dt.date = Field(..., description="Calendar date, YYYY-MM-DD")
    start_time: dt.time = Field(..., description="Start time, HH:MM")
    duration_minutes: int = Field(..., description="Session length in minutes")
    subject_id: Optional[str] = Field(None, description="Subject being taught")
    topic_id: Optional[str] = Field(None, description="Optional topic within the subject")
    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("date", mode="before")
    @classmethod
    def _enforce_date_only(cls, v: object) -> object:
        if isinstance(v, str) and ("T" in v or " " in v.strip()):
            raise ValueError("date must be a calendar date (YYYY-MM-DD)")
        return v

    @field_validator("start_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return coerce_hhmm(v)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        stripped = v.strip()
        return stripped or None


class PricedBookingResponse(CamelModel):
    session: SessionResponse
    price: Money
