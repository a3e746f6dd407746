"""Session ledger request/response schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field, field_validator

from ..core.constants import MAX_NOTES_LENGTH
from ._strict_base import CamelModel, Money, StrictRequestModel


class SessionCompleteIn(StrictRequestModel):
    """Optional tutor notes recorded when a session is completed."""

    notes: Optional[str] = Field(None, max_length=MAX_NOTES_LENGTH)

    @field_validator("notes")
    @classmethod
    def clean_notes(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        stripped = v.strip()
        return stripped or None


class SessionResponse(CamelModel):
    id: str
    tutor_id: str
    student_id: str
    subject_id: str
    topic_id: Optional[str] = None
    start_at: datetime = Field(..., description="Wall-clock start in the platform calendar")
    end_at: datetime
    status: str
    price: Money
    notes: Optional[str] = None
    completed_at: Optional[datetime] = None
    canceled_at: Optional[datetime] = None
