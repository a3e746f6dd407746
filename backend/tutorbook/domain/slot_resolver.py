"""
Slot resolution: which windows on a date can be booked for a duration.

resolve() is a pure function over plain rule/session records. It reads
nothing from the database and mutates nothing, so any number of readers can
call it concurrently.

Exclusion is atomic: one non-canceled session anywhere inside a rule's
window removes the whole window; the window is never split around the
conflict. Each surviving window offers exactly one start, the rule's own
start time.
"""

from __future__ import annotations

from datetime import date, datetime
import logging
from typing import Any, Iterable, List, Protocol

from tutorbook.core.calendar import (
    combine,
    format_hhmm,
    minutes_of_day,
    time_from_minutes,
    weekday_label,
)
from tutorbook.core.constants import MINUTES_PER_DAY
from tutorbook.core.exceptions import DataIntegrityError, InvalidDuration
from tutorbook.domain.booking_types import BookableWindow

logger = logging.getLogger(__name__)

CANCELED = "canceled"


class RuleLike(Protocol):
    id: Any
    day_of_week: Any
    start_time: Any
    end_time: Any
    is_active: Any


class SessionLike(Protocol):
    id: Any
    start_at: Any
    end_at: Any
    status: Any


def _status_value(status: Any) -> str:
    return str(getattr(status, "value", status))


def check_duration(duration_minutes: int) -> None:
    """Reject durations that are not positive or cannot fit inside one day."""
    if duration_minutes <= 0:
        raise InvalidDuration(
            "Duration must be a positive number of minutes",
            duration_minutes=duration_minutes,
        )
    if duration_minutes >= MINUTES_PER_DAY:
        raise InvalidDuration(
            "Sessions cannot cross midnight",
            duration_minutes=duration_minutes,
        )


def _check_rule(rule: RuleLike) -> None:
    if rule.start_time >= rule.end_time:
        raise DataIntegrityError(
            "Availability rule has start_time >= end_time",
            rule_id=str(rule.id),
            start_time=str(rule.start_time),
            end_time=str(rule.end_time),
        )


def _check_session(session: SessionLike) -> None:
    if session.start_at >= session.end_at:
        raise DataIntegrityError(
            "Session has start_at >= end_at",
            session_id=str(session.id),
            start_at=str(session.start_at),
            end_at=str(session.end_at),
        )


def _check_end_of_day(rule: RuleLike, duration_minutes: int) -> None:
    if minutes_of_day(rule.start_time) + duration_minutes > MINUTES_PER_DAY:
        raise InvalidDuration(
            "Sessions cannot cross midnight",
            rule_id=str(rule.id),
            start_time=format_hhmm(rule.start_time),
            duration_minutes=duration_minutes,
        )


def overlaps(
    window_start: datetime, window_end: datetime, busy_start: datetime, busy_end: datetime
) -> bool:
    """
    Half-open interval overlap.

    True when the window starts inside the busy interval, ends inside it, or
    fully contains it. Touching endpoints do not overlap.
    """
    return window_start < busy_end and window_end > busy_start


def resolve(
    rules: Iterable[RuleLike],
    sessions: Iterable[SessionLike],
    target_date: date,
    duration_minutes: int,
) -> List[BookableWindow]:
    """
    Compute the bookable windows for one tutor on a date.

    Args:
        rules: The tutor's availability rules (any day, any state)
        sessions: The tutor's sessions (any status)
        target_date: Calendar date to resolve
        duration_minutes: Requested session length

    Returns:
        Windows ordered by start time, then by source rule id

    Raises:
        InvalidDuration: duration is not positive, or would run a selected
            rule past midnight
        DataIntegrityError: a selected rule or a session is malformed
    """
    check_duration(duration_minutes)

    label = weekday_label(target_date)
    selected = [r for r in rules if r.day_of_week == label and bool(r.is_active)]
    for rule in selected:
        _check_rule(rule)
        _check_end_of_day(rule, duration_minutes)

    busy = []
    for session in sessions:
        _check_session(session)
        if _status_value(session.status) != CANCELED:
            busy.append((session.start_at, session.end_at))

    windows: List[BookableWindow] = []
    for rule in selected:
        window_start = combine(target_date, rule.start_time)
        window_end = combine(target_date, rule.end_time)

        if any(overlaps(window_start, window_end, s, e) for s, e in busy):
            continue

        start_minutes = minutes_of_day(rule.start_time)
        end_minutes = start_minutes + duration_minutes
        if end_minutes > minutes_of_day(rule.end_time):
            continue

        windows.append(
            BookableWindow(
                date=target_date,
                start_time=rule.start_time.replace(second=0, microsecond=0),
                end_time=time_from_minutes(end_minutes),
                source_rule_id=str(rule.id),
            )
        )

    windows.sort(key=lambda w: (w.start_time, w.source_rule_id))
    logger.debug(
        "Resolved bookable windows",
        extra={
            "date": target_date.isoformat(),
            "duration_minutes": duration_minutes,
            "rules_selected": len(selected),
            "windows": len(windows),
        },
    )
    return windows
