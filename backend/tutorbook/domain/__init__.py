"""Booking engine core: slot resolution, booking validation, pricing."""

from .booking_types import BookableWindow, PricedBooking
from .booking_validator import BookingValidator
from .pricing import price
from .slot_resolver import resolve

__all__ = ["BookableWindow", "BookingValidator", "PricedBooking", "price", "resolve"]
