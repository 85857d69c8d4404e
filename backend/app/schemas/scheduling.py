# backend/app/schemas/scheduling.py
"""
Scheduling schemas for the tutoring marketplace.

Time-of-day values cross this boundary as zero-padded 24-hour "HH:MM"
strings. Every model exposes minute offsets so comparisons never rely on
string ordering.
"""

import datetime
from typing import Any, Dict, Optional

from pydantic import Field, field_validator, model_validator

from ..core.enums import SessionStatus, UnavailableReason, Weekday
from ..core.exceptions import InvalidTimeFormatException
from ..services.session_lifecycle import is_occupying
from ..utils.time_utils import parse_time_str
from ._strict_base import FrozenModel

DateType = datetime.date


def _check_time(value: str, *, allow_end_of_day: bool = False) -> str:
    try:
        parse_time_str(value, allow_end_of_day=allow_end_of_day)
    except InvalidTimeFormatException as e:
        raise ValueError(e.message) from e
    return value


class TimeRange(FrozenModel):
    """Base for anything carrying a [start_time, end_time) pair of HH:MM strings."""

    start_time: str
    end_time: str

    @field_validator("start_time")
    @classmethod
    def _validate_start_time(cls, v: str) -> str:
        return _check_time(v)

    @field_validator("end_time")
    @classmethod
    def _validate_end_time(cls, v: str) -> str:
        # "24:00" closes a window at midnight
        return _check_time(v, allow_end_of_day=True)

    @property
    def start_minutes(self) -> int:
        return parse_time_str(self.start_time)

    @property
    def end_minutes(self) -> int:
        return parse_time_str(self.end_time, allow_end_of_day=True)

    @property
    def duration_minutes(self) -> int:
        return self.end_minutes - self.start_minutes


class TimeInterval(TimeRange):
    """A [start_time, end_time) window within one day."""


class DayAvailability(FrozenModel):
    """One day of a weekly template: an optional window plus an on/off flag."""

    start: Optional[str] = None
    end: Optional[str] = None
    available: bool = False

    @field_validator("start")
    @classmethod
    def _validate_start(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            _check_time(v)
        return v

    @field_validator("end")
    @classmethod
    def _validate_end(cls, v: Optional[str]) -> Optional[str]:
        if v is not None:
            _check_time(v, allow_end_of_day=True)
        return v

    @property
    def window(self) -> Optional[TimeInterval]:
        """
        The bookable window for the day, or None when the day is closed.

        A day flagged available but missing either bound, or with
        start >= end, has no bookable window.
        """
        if not self.available or self.start is None or self.end is None:
            return None
        if parse_time_str(self.start) >= parse_time_str(self.end, allow_end_of_day=True):
            return None
        return TimeInterval(start_time=self.start, end_time=self.end)


class WeeklyAvailabilityTemplate(FrozenModel):
    """A tutor's recurring weekly open hours, keyed by lowercase day name."""

    monday: DayAvailability = Field(default_factory=DayAvailability)
    tuesday: DayAvailability = Field(default_factory=DayAvailability)
    wednesday: DayAvailability = Field(default_factory=DayAvailability)
    thursday: DayAvailability = Field(default_factory=DayAvailability)
    friday: DayAvailability = Field(default_factory=DayAvailability)
    saturday: DayAvailability = Field(default_factory=DayAvailability)
    sunday: DayAvailability = Field(default_factory=DayAvailability)

    def for_weekday(self, weekday: Weekday) -> DayAvailability:
        return getattr(self, Weekday(weekday).value)

    def for_date(self, on_date: DateType) -> DayAvailability:
        return self.for_weekday(Weekday.from_index(on_date.weekday()))


class BookedInterval(TimeRange):
    """An existing session's time claim, as read from session records."""

    session_id: Optional[str] = None
    tutor_id: str
    student_id: Optional[str] = None
    session_date: DateType
    status: SessionStatus

    @property
    def occupies_slot(self) -> bool:
        return is_occupying(self.status)

    def to_summary(self) -> Dict[str, Any]:
        return {
            "session_id": self.session_id,
            "session_date": self.session_date.isoformat(),
            "start_time": self.start_time,
            "end_time": self.end_time,
            "status": self.status.value,
        }


class ProposedSlot(TimeRange):
    """A candidate booking on a specific date; never persisted directly."""

    session_date: DateType

    @model_validator(mode="after")
    def _validate_order(self) -> "ProposedSlot":
        if self.end_minutes <= self.start_minutes:
            raise ValueError("End time must be after start time")
        return self


class DatedSlot(TimeRange):
    """A free slot found by a multi-day search."""

    session_date: DateType


class SlotAvailability(FrozenModel):
    """Tagged result of a bookability check: available, or unavailable with a reason."""

    available: bool
    reason: Optional[UnavailableReason] = None
    conflicting: Optional[BookedInterval] = None

    @classmethod
    def ok(cls) -> "SlotAvailability":
        return cls(available=True)

    @classmethod
    def unavailable(
        cls, reason: UnavailableReason, conflicting: Optional[BookedInterval] = None
    ) -> "SlotAvailability":
        return cls(available=False, reason=reason, conflicting=conflicting)


class ConflictResult(FrozenModel):
    """Outcome of a double-booking check across tutor and student."""

    has_conflict: bool
    conflicting: Optional[BookedInterval] = None

    @classmethod
    def none(cls) -> "ConflictResult":
        return cls(has_conflict=False)

    @classmethod
    def found(cls, interval: BookedInterval) -> "ConflictResult":
        return cls(has_conflict=True, conflicting=interval)
