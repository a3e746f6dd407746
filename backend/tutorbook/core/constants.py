"""Application-wide constants for the TutorBook platform."""

from __future__ import annotations

BRAND_NAME = "TutorBook"

API_TITLE = f"{BRAND_NAME} Booking API"
API_DESCRIPTION = (
    "Tutor availability and booking engine: bookable windows derived from "
    "weekly availability rules, and conflict-free session booking."
)
API_VERSION = "1.0.0"

# Day of week labels, indexed by date.weekday() (Monday == 0)
DAYS_OF_WEEK = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

MINUTES_PER_DAY = 24 * 60

# Currency precision for persisted prices
PRICE_QUANTUM = "0.01"

# Text constraints
MAX_NOTES_LENGTH = 1000

# Paths excluded from request timing / metrics
METRICS_PATH = "/metrics/prometheus"
HEALTH_PATH = "/health"
