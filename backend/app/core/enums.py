# backend/app/core/enums.py
"""
Core enums for the scheduling subsystem.

All enums inherit from (str, Enum) so values serialize as the plain
strings stored on session records and returned to API callers.
"""

from enum import Enum


class SessionStatus(str, Enum):
    """
    Tutoring session lifecycle statuses.

    Only PENDING, APPROVED and IN_PROGRESS reserve a time slot; see
    app.services.session_lifecycle for the transition table.
    """

    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"
    NO_SHOW = "no-show"


class Weekday(str, Enum):
    """Days of the week as keyed in a weekly availability template."""

    MONDAY = "monday"
    TUESDAY = "tuesday"
    WEDNESDAY = "wednesday"
    THURSDAY = "thursday"
    FRIDAY = "friday"
    SATURDAY = "saturday"
    SUNDAY = "sunday"

    @classmethod
    def from_index(cls, index: int) -> "Weekday":
        """Map date.weekday() (Monday == 0) to a Weekday."""
        return list(cls)[index]


class UnavailableReason(str, Enum):
    """
    Why a proposed slot cannot be booked.

    These are expected business outcomes returned inside a result object,
    never raised.
    """

    INVALID_RANGE = "invalid-range"
    MIN_DURATION = "min-duration"
    MAX_DURATION = "max-duration"
    DAY_UNAVAILABLE = "day-unavailable"
    OUTSIDE_HOURS = "outside-hours"
    OVERLAP = "overlap"
