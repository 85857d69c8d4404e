# backend/app/services/slot_validator.py
"""
Slot validation for tutoring sessions.

Pure decision logic over time intervals:
- Duration policy (minimum/maximum session length)
- Weekly availability window containment
- Overlap against sessions that still occupy their slot
- Free-slot enumeration for a day
- Double-booking checks across a tutor and a student

Nothing here touches the database. Callers load the tutor's template and
the existing intervals, then call these functions; identical inputs always
produce identical results.
"""

from datetime import date
import logging
from typing import Iterable, Iterator, List, Optional

from ..core.constants import MAX_SESSION_DURATION, MIN_SESSION_DURATION, SLOT_STEP_MINUTES
from ..core.enums import UnavailableReason
from ..schemas.scheduling import (
    BookedInterval,
    ConflictResult,
    ProposedSlot,
    SlotAvailability,
    TimeInterval,
    WeeklyAvailabilityTemplate,
)
from ..utils.time_utils import minutes_to_time_str, parse_time_str

logger = logging.getLogger(__name__)


def intervals_overlap(start_a: int, end_a: int, start_b: int, end_b: int) -> bool:
    """
    Strict overlap test on half-open [start, end) minute ranges.

    Touching intervals (end_a == start_b) do not overlap.
    """
    return start_a < end_b and end_a > start_b


def validate_duration(
    start_minutes: int,
    end_minutes: int,
    *,
    min_duration: int = MIN_SESSION_DURATION,
    max_duration: int = MAX_SESSION_DURATION,
) -> Optional[UnavailableReason]:
    """
    Check ordering and session-length policy.

    Returns:
        None when the range is acceptable, otherwise the rejection reason.
    """
    if end_minutes <= start_minutes:
        return UnavailableReason.INVALID_RANGE
    length = end_minutes - start_minutes
    if length < min_duration:
        return UnavailableReason.MIN_DURATION
    if length > max_duration:
        return UnavailableReason.MAX_DURATION
    return None


def _occupying_on(
    intervals: Iterable[BookedInterval],
    session_date: date,
    exclude_session_id: Optional[str] = None,
) -> List[BookedInterval]:
    selected = [
        interval
        for interval in intervals
        if interval.session_date == session_date
        and interval.occupies_slot
        and (exclude_session_id is None or interval.session_id != exclude_session_id)
    ]
    selected.sort(key=lambda interval: (interval.start_minutes, interval.end_minutes))
    return selected


def _first_overlap(
    intervals: List[BookedInterval], start_minutes: int, end_minutes: int
) -> Optional[BookedInterval]:
    for interval in intervals:
        if intervals_overlap(
            interval.start_minutes, interval.end_minutes, start_minutes, end_minutes
        ):
            return interval
    return None


def find_conflict(
    existing_intervals: Iterable[BookedInterval],
    session_date: date,
    start_time: str,
    end_time: str,
    exclude_session_id: Optional[str] = None,
) -> Optional[BookedInterval]:
    """
    Find the earliest occupying interval on session_date that overlaps the range.

    Args:
        existing_intervals: Intervals to scan (any dates and statuses)
        session_date: Date of the proposed range
        start_time: Start as HH:MM
        end_time: End as HH:MM
        exclude_session_id: Session to ignore, e.g. the one being moved

    Returns:
        The colliding interval, or None
    """
    start_minutes = parse_time_str(start_time)
    end_minutes = parse_time_str(end_time, allow_end_of_day=True)
    candidates = _occupying_on(existing_intervals, session_date, exclude_session_id)
    return _first_overlap(candidates, start_minutes, end_minutes)


def is_slot_available(
    template: WeeklyAvailabilityTemplate,
    existing_intervals: Iterable[BookedInterval],
    session_date: date,
    start_time: str,
    end_time: str,
    *,
    min_duration: int = MIN_SESSION_DURATION,
    max_duration: int = MAX_SESSION_DURATION,
) -> SlotAvailability:
    """
    Decide whether [start_time, end_time) on session_date can be booked.

    Checks run in order: range ordering, duration policy, day availability,
    window containment, then overlap with occupying intervals. Business
    rejections come back as SlotAvailability.unavailable(reason); only a
    malformed HH:MM value raises (InvalidTimeFormatException).
    """
    start_minutes = parse_time_str(start_time)
    end_minutes = parse_time_str(end_time, allow_end_of_day=True)

    reason = validate_duration(
        start_minutes, end_minutes, min_duration=min_duration, max_duration=max_duration
    )
    if reason is not None:
        return SlotAvailability.unavailable(reason)

    window = template.for_date(session_date).window
    if window is None:
        return SlotAvailability.unavailable(UnavailableReason.DAY_UNAVAILABLE)

    if start_minutes < window.start_minutes or end_minutes > window.end_minutes:
        return SlotAvailability.unavailable(UnavailableReason.OUTSIDE_HOURS)

    conflict = _first_overlap(
        _occupying_on(existing_intervals, session_date), start_minutes, end_minutes
    )
    if conflict is not None:
        return SlotAvailability.unavailable(UnavailableReason.OVERLAP, conflicting=conflict)

    return SlotAvailability.ok()


class FreeSlots:
    """
    Lazy, restartable sequence of free [start, end) windows for one day.

    Each iteration starts a fresh scan from the window start, stepping by
    step_minutes. A candidate that would run past the window end is dropped,
    and every yielded candidate passes is_slot_available.
    """

    def __init__(
        self,
        template: WeeklyAvailabilityTemplate,
        existing_intervals: Iterable[BookedInterval],
        session_date: date,
        slot_duration_minutes: int,
        *,
        step_minutes: int = SLOT_STEP_MINUTES,
        min_duration: int = MIN_SESSION_DURATION,
        max_duration: int = MAX_SESSION_DURATION,
    ) -> None:
        if step_minutes <= 0:
            raise ValueError(f"step_minutes must be positive: {step_minutes}")
        self.template = template
        self.session_date = session_date
        self.slot_duration_minutes = slot_duration_minutes
        self.step_minutes = step_minutes
        self.min_duration = min_duration
        self.max_duration = max_duration
        # Materialized once so a one-shot iterable does not break restarts
        self._occupied = _occupying_on(existing_intervals, session_date)

    def __iter__(self) -> Iterator[TimeInterval]:
        window = self.template.for_date(self.session_date).window
        if window is None:
            return
        duration = self.slot_duration_minutes
        if validate_duration(
            0, duration, min_duration=self.min_duration, max_duration=self.max_duration
        ):
            return

        current = window.start_minutes
        while current + duration <= window.end_minutes:
            if _first_overlap(self._occupied, current, current + duration) is None:
                yield TimeInterval(
                    start_time=minutes_to_time_str(current),
                    end_time=minutes_to_time_str(current + duration),
                )
            current += self.step_minutes

    def __repr__(self) -> str:
        return (
            f"<FreeSlots {self.session_date.isoformat()} "
            f"duration={self.slot_duration_minutes} step={self.step_minutes}>"
        )


def enumerate_free_slots(
    template: WeeklyAvailabilityTemplate,
    existing_intervals: Iterable[BookedInterval],
    session_date: date,
    slot_duration_minutes: int,
    *,
    step_minutes: int = SLOT_STEP_MINUTES,
    min_duration: int = MIN_SESSION_DURATION,
    max_duration: int = MAX_SESSION_DURATION,
) -> FreeSlots:
    """
    Enumerate bookable windows of exactly slot_duration_minutes on session_date.

    Windows come out in ascending start order. A closed day, or a duration
    outside policy, yields an empty sequence rather than an error.
    """
    return FreeSlots(
        template,
        existing_intervals,
        session_date,
        slot_duration_minutes,
        step_minutes=step_minutes,
        min_duration=min_duration,
        max_duration=max_duration,
    )


def detect_rescheduling_conflict(
    tutor_id: str,
    student_id: str,
    proposed: ProposedSlot,
    existing_intervals: Iterable[BookedInterval],
    exclude_session_id: Optional[str] = None,
) -> ConflictResult:
    """
    Check a proposed slot against both the tutor's and the student's sessions.

    Neither party may be double-booked, whether teaching or learning. The
    session being moved is excluded by id.

    Args:
        tutor_id: Tutor of the session
        student_id: Student of the session
        proposed: Target date and time range
        existing_intervals: Candidate intervals for either party
        exclude_session_id: Session being rescheduled

    Returns:
        ConflictResult carrying the colliding interval, if any
    """
    party_ids = {tutor_id, student_id}
    relevant = [
        interval
        for interval in existing_intervals
        if interval.tutor_id in party_ids or interval.student_id in party_ids
    ]
    conflict = _first_overlap(
        _occupying_on(relevant, proposed.session_date, exclude_session_id),
        proposed.start_minutes,
        proposed.end_minutes,
    )
    if conflict is None:
        return ConflictResult.none()

    logger.info(
        f"Rescheduling conflict for tutor={tutor_id} student={student_id} on "
        f"{proposed.session_date} {proposed.start_time}-{proposed.end_time} "
        f"with session {conflict.session_id}"
    )
    return ConflictResult.found(conflict)
