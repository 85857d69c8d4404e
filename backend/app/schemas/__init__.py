# backend/app/schemas/__init__.py
"""
Pydantic schemas for the scheduling subsystem.

Time-of-day fields use zero-padded "HH:MM" strings at this boundary.
"""

from .scheduling import (
    BookedInterval,
    ConflictResult,
    DatedSlot,
    DayAvailability,
    ProposedSlot,
    SlotAvailability,
    TimeInterval,
    TimeRange,
    WeeklyAvailabilityTemplate,
)
from .session_analytics import BusyHour, TutorSessionStats

__all__ = [
    "BookedInterval",
    "BusyHour",
    "ConflictResult",
    "DatedSlot",
    "DayAvailability",
    "ProposedSlot",
    "SlotAvailability",
    "TimeInterval",
    "TimeRange",
    "TutorSessionStats",
    "WeeklyAvailabilityTemplate",
]
