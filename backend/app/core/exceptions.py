# backend/app/core/exceptions.py
"""
Domain-specific exceptions for the scheduling subsystem.

Scheduling conflicts are returned as typed results by the validator; the
exceptions here cover caller bugs (malformed input), request-level rule
violations and data access failures. Each converts to an HTTPException so
request handlers can translate them without knowing the hierarchy.
"""

from typing import Any, Dict, Optional

from fastapi import HTTPException, status

from .constants import ERROR_TUTOR_NOT_FOUND

HTTP_422_UNPROCESSABLE: int = getattr(status, "HTTP_422_UNPROCESSABLE_CONTENT", 422)


class DomainException(Exception):
    """Base for scheduling errors that carry a code and an HTTP status."""

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
    """Raised when request validation fails."""

    status_code = status.HTTP_400_BAD_REQUEST


class NotFoundException(DomainException):
    """Raised when a tutor, session or template does not exist."""

    status_code = status.HTTP_404_NOT_FOUND


class ConflictException(DomainException):
    """Raised when a write would clash with stored sessions."""

    status_code = status.HTTP_409_CONFLICT


class BusinessRuleException(DomainException):
    """Raised when a scheduling rule forbids the requested change."""

    status_code = HTTP_422_UNPROCESSABLE


# Specific scheduling exceptions


class InvalidTimeFormatException(ValidationException):
    """Raised when a time-of-day value is not a zero-padded 24-hour HH:MM string."""

    def __init__(self, value: Any):
        super().__init__(
            message=f"Invalid time format: {value!r} (expected HH:MM)",
            code="INVALID_TIME_FORMAT",
            details={"value": str(value)},
        )


class InvalidStatusTransitionException(BusinessRuleException):
    """Raised when a session status change is not allowed by the lifecycle."""

    def __init__(self, current: str, target: str):
        super().__init__(
            message=f"Cannot change status from {current} to {target}",
            code="INVALID_STATUS_TRANSITION",
            details={"current_status": current, "target_status": target},
        )


class BookingConflictException(ConflictException):
    """Raised when a booking conflicts with existing sessions."""

    def __init__(
        self,
        message: Optional[str] = None,
        *,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message or "This time slot conflicts with an existing session",
            code="BOOKING_CONFLICT",
            details=details or {},
        )


class TutorNotFoundException(NotFoundException):
    """Raised when a tutor has no availability template on record."""

    def __init__(self, tutor_id: str):
        super().__init__(
            message=ERROR_TUTOR_NOT_FOUND,
            code="TUTOR_NOT_FOUND",
            details={"tutor_id": tutor_id},
        )


class RepositoryException(Exception):
    """
    Data access failure below the service layer.

    Wraps SQLAlchemy errors (lost connections, bad queries, constraint
    violations) so services never see driver exceptions.
    """
