# backend/tutorbook/core/exceptions.py
"""
Domain-specific exceptions for the TutorBook platform.

These exceptions provide clear, business-focused error messages
that can be caught and handled appropriately at the API layer.

Booking errors (OutOfRangeDate, InvalidSubject, InvalidDuration,
SlotUnavailable, TutorNotFound) are recoverable by the caller: the caller
re-fetches availability and tries again. DataIntegrityError is fatal.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ) -> None:
        self.message = message
        self.code = code or self.__class__.__name__
        self.details = details or {}
        super().__init__(self.message)

    def to_http_exception(self) -> HTTPException:
        return HTTPException(
            status_code=self.status_code,
            detail={
                "message": self.message,
                "code": self.code,
                "details": self.details,
            },
        )


class ValidationException(DomainException):
    """Raised when business validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a requested resource is not found."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when there's a conflict with existing data."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a business rule is violated."""

    status_code = HTTP_422_UNPROCESSABLE


class UnauthorizedException(DomainException):
    """Raised when the caller is not identified."""

    status_code = status.HTTP_401_UNAUTHORIZED


class ForbiddenException(DomainException):
    """Raised when the caller may not act on the resource."""

    status_code = status.HTTP_403_FORBIDDEN


class ServiceException(DomainException):
    """Raised when a service operation fails for infrastructure reasons."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR


# Booking errors


class OutOfRangeDate(BusinessRuleException):
    """Requested date is in the past or beyond the booking horizon."""

    def __init__(self, requested: str, earliest: str, latest: str):
        super().__init__(
            message=f"Sessions can only be booked between {earliest} and {latest}",
            code="OUT_OF_RANGE_DATE",
            details={"date": requested, "earliest": earliest, "latest": latest},
        )


class InvalidSubject(ValidationException):
    """Subject is missing, unknown, or the topic does not belong to it."""

    def __init__(self, message: str = "A valid subject is required", **details: Any):
        super().__init__(message=message, code="INVALID_SUBJECT", details=details)


class InvalidDuration(ValidationException):
    """Duration is non-positive or would run the session past midnight."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message=message, code="INVALID_DURATION", details=details)


class SlotUnavailable(ConflictException):
    """The requested start time is not (or no longer) bookable."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "That time slot was just booked, please choose another",
            code="SLOT_UNAVAILABLE",
            details=details or {},
        )


class TutorNotFound(NotFoundException):
    """No tutor profile exists for the id."""

    def __init__(self, tutor_id: str):
        super().__init__(
            message="Tutor not found",
            code="TUTOR_NOT_FOUND",
            details={"tutor_id": tutor_id},
        )


class SessionNotFound(NotFoundException):
    def __init__(self, session_id: str):
        super().__init__(
            message="Session not found",
            code="SESSION_NOT_FOUND",
            details={"session_id": session_id},
        )


class InvalidSessionTransition(BusinessRuleException):
    """A lifecycle transition was requested from a non-booked session."""

    def __init__(self, session_id: str, current: str, target: str):
        super().__init__(
            message=f"Cannot move session from {current} to {target}",
            code="INVALID_SESSION_TRANSITION",
            details={"session_id": session_id, "current_status": current, "target_status": target},
        )


class DataIntegrityError(DomainException):
    """
    Stored data violates an engine invariant.

    Raised, never repaired: a rule with start_time >= end_time or a
    session with start_at >= end_at means the store is corrupt.
    """

    def __init__(self, message: str, **details: Any):
        super().__init__(message=message, code="DATA_INTEGRITY_ERROR", details=details)


class RepositoryException(Exception):
    """
    Exception raised for repository layer errors.

    This exception is used when data access operations fail,
    such as database connection issues, query failures, or
    constraint violations.
    """
