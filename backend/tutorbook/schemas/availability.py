"""Availability rule and bookable window schemas."""

from datetime import time
from typing import List, Literal

from pydantic import Field, field_serializer, field_validator

from ._strict_base import CamelModel, StrictRequestModel, coerce_hhmm

DayOfWeek = Literal["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]


class AvailabilityRuleIn(StrictRequestModel):
    day_of_week: DayOfWeek
    start_time: time = Field(..., description="HH:MM")
    end_time: time = Field(..., description="HH:MM")
    is_active: bool = True

    @field_validator("start_time", "end_time", mode="before")
    @classmethod
    def parse_time_string(cls, v: object) -> object:
        return coerce_hhmm(v)


class AvailabilityRuleSetIn(StrictRequestModel):
    """Full replacement for a tutor's weekly rules."""

    rules: List[AvailabilityRuleIn] = Field(default_factory=list)


class AvailabilityRuleResponse(CamelModel):
    id: str
    tutor_id: str
    day_of_week: str
    start_time: time
    end_time: time
    is_active: bool

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> str:
        return value.strftime("%H:%M")


class BookableWindowResponse(CamelModel):
    """One bookable start on the requested date."""

    start_time: time
    end_time: time

    @field_serializer("start_time", "end_time")
    def _hhmm(self, value: time) -> str:
        return value.strftime("%H:%M")
