# backend/app/services/conflict_checker.py
"""
Conflict Checker Service for the tutoring marketplace

Handles all session-slot validation that needs stored data:
- Checking a proposed slot against the tutor's weekly template and sessions
- Listing free slots for a day, or across a date range
- Rescheduling conflicts across both tutor and student
- Request-level rules for new session requests (booking horizon, past times)

The decisions themselves live in slot_validator; this service loads the
tutor's template and occupying sessions, then delegates. It does not
serialize concurrent bookings: the caller must hold a per-(tutor, date)
guard across read, validate and write.
"""

from datetime import date, datetime, timedelta
import logging
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from ..core import constants
from ..core.config import settings
from ..core.enums import SessionStatus, UnavailableReason
from ..core.exceptions import (
    BookingConflictException,
    BusinessRuleException,
    NotFoundException,
    TutorNotFoundException,
    ValidationException,
)
from ..core.timezone_utils import get_now
from ..models.tutoring_session import TutoringSession
from ..repositories import RepositoryFactory, SessionRepository
from ..schemas.scheduling import (
    BookedInterval,
    ConflictResult,
    DatedSlot,
    ProposedSlot,
    SlotAvailability,
    TimeInterval,
    WeeklyAvailabilityTemplate,
)
from ..utils.time_utils import time_to_minutes
from . import session_lifecycle, slot_validator
from .availability_service import AvailabilityService
from .base import BaseService

logger = logging.getLogger(__name__)

_UNAVAILABLE_MESSAGES: Dict[UnavailableReason, str] = {
    UnavailableReason.INVALID_RANGE: constants.ERROR_INVALID_TIME_RANGE,
    UnavailableReason.MIN_DURATION: "Session must be at least {min} minutes long",
    UnavailableReason.MAX_DURATION: "Session cannot be longer than {max} minutes",
    UnavailableReason.DAY_UNAVAILABLE: "Tutor is not available on this day",
    UnavailableReason.OUTSIDE_HOURS: "Tutor is only available from {start} to {end} on this day",
    UnavailableReason.OVERLAP: constants.ERROR_TUTOR_CONFLICT,
}


def to_booked_interval(session: TutoringSession) -> BookedInterval:
    """Project a stored session onto the validator's interval type."""
    return BookedInterval(
        session_id=session.id,
        tutor_id=session.tutor_id,
        student_id=session.student_id,
        session_date=session.session_date,
        start_time=session.start_time,
        end_time=session.end_time,
        status=SessionStatus(session.status),
    )


def past_start_error(proposed: ProposedSlot, now: datetime) -> Optional[str]:
    """Message for a slot whose date or start time has already passed, else None."""
    today = now.date()
    if proposed.session_date < today:
        return constants.ERROR_PAST_DATE
    if proposed.session_date == today and proposed.start_minutes <= time_to_minutes(now.time()):
        return constants.ERROR_PAST_TIME
    return None


class ConflictChecker(BaseService):
    """
    Service for checking session conflicts and tutor availability.

    Centralizes conflict detection so session creation, rescheduling and
    the public availability lookup all apply the same rules.
    """

    def __init__(
        self,
        db: Session,
        repository: Optional[SessionRepository] = None,
        availability_service: Optional[AvailabilityService] = None,
    ):
        """
        Initialize conflict checker service.

        Args:
            db: Database session
            repository: Optional SessionRepository instance
            availability_service: Optional AvailabilityService instance
        """
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_session_repository(db)
        self.availability_service = availability_service or AvailabilityService(db)

    def _load_template(self, tutor_id: str) -> WeeklyAvailabilityTemplate:
        template = self.availability_service.get_weekly_template(tutor_id)
        if template is None:
            raise TutorNotFoundException(tutor_id)
        return template

    def _tutor_intervals(self, tutor_id: str, session_date: date) -> List[BookedInterval]:
        sessions = self.repository.get_occupying_sessions_for_tutor(tutor_id, session_date)
        return [to_booked_interval(s) for s in sessions]

    @BaseService.measure_operation("check_slot_availability")
    def check_slot_availability(
        self, tutor_id: str, session_date: date, start_time: str, end_time: str
    ) -> SlotAvailability:
        """
        Check whether a tutor can take a session in [start_time, end_time).

        Args:
            tutor_id: The tutor to check
            session_date: Date of the session
            start_time: Start as HH:MM
            end_time: End as HH:MM

        Returns:
            SlotAvailability result

        Raises:
            TutorNotFoundException: If the tutor has no availability template
        """
        template = self._load_template(tutor_id)
        result = slot_validator.is_slot_available(
            template,
            self._tutor_intervals(tutor_id, session_date),
            session_date,
            start_time,
            end_time,
            min_duration=settings.min_session_duration,
            max_duration=settings.max_session_duration,
        )
        if result.reason == UnavailableReason.OVERLAP:
            self.logger.warning(
                f"Slot conflict for tutor {tutor_id} on {session_date} "
                f"{start_time}-{end_time} with session {result.conflicting.session_id}"
            )
        return result

    def _free_slots_for_date(
        self,
        tutor_id: str,
        template: WeeklyAvailabilityTemplate,
        target_date: date,
        duration_minutes: int,
    ) -> List[TimeInterval]:
        slots = slot_validator.enumerate_free_slots(
            template,
            self._tutor_intervals(tutor_id, target_date),
            target_date,
            duration_minutes,
            step_minutes=settings.slot_step_minutes,
            min_duration=settings.min_session_duration,
            max_duration=settings.max_session_duration,
        )
        now = get_now()
        if target_date != now.date():
            return list(slots)
        # Starts that have already passed today cannot be booked
        elapsed = time_to_minutes(now.time())
        return [slot for slot in slots if slot.start_minutes > elapsed]

    @BaseService.measure_operation("get_available_slots")
    def get_available_slots(
        self,
        tutor_id: str,
        target_date: date,
        duration_minutes: int = constants.DEFAULT_SLOT_DURATION,
    ) -> List[TimeInterval]:
        """
        List free slots of a given length for a tutor on one date.

        Args:
            tutor_id: The tutor
            target_date: Date to search; today up to the availability horizon
            duration_minutes: Slot length

        Returns:
            Free slots in ascending start order

        Raises:
            ValidationException: If the date is in the past or too far ahead
            TutorNotFoundException: If the tutor has no availability template
        """
        today = get_now().date()
        if target_date < today:
            raise ValidationException(
                constants.ERROR_AVAILABILITY_PAST_DATE,
                code="DATE_IN_PAST",
                details={"date": target_date.isoformat()},
            )
        if target_date > today + timedelta(days=settings.max_availability_days_ahead):
            raise ValidationException(
                constants.ERROR_AVAILABILITY_TOO_FAR.format(
                    days=settings.max_availability_days_ahead
                ),
                code="DATE_TOO_FAR",
                details={"date": target_date.isoformat()},
            )

        template = self._load_template(tutor_id)
        return self._free_slots_for_date(tutor_id, template, target_date, duration_minutes)

    @BaseService.measure_operation("find_optimal_time_slots")
    def find_optimal_time_slots(
        self,
        tutor_id: str,
        start_date: date,
        end_date: date,
        duration_minutes: int = constants.DEFAULT_SLOT_DURATION,
        max_results: int = constants.DEFAULT_MAX_RESULTS,
    ) -> List[DatedSlot]:
        """
        Collect free slots across a date range, earliest first.

        Stops as soon as max_results slots have been found.
        """
        template = self._load_template(tutor_id)
        found: List[DatedSlot] = []
        current = start_date
        while current <= end_date and len(found) < max_results:
            for slot in self._free_slots_for_date(tutor_id, template, current, duration_minutes):
                found.append(
                    DatedSlot(
                        session_date=current,
                        start_time=slot.start_time,
                        end_time=slot.end_time,
                    )
                )
                if len(found) >= max_results:
                    break
            current += timedelta(days=1)
        return found

    @BaseService.measure_operation("detect_rescheduling_conflict")
    def detect_rescheduling_conflict(
        self,
        tutor_id: str,
        student_id: str,
        proposed: ProposedSlot,
        exclude_session_id: Optional[str] = None,
    ) -> ConflictResult:
        """
        Check a proposed slot against the tutor's and the student's sessions.

        Args:
            tutor_id: Tutor of the session
            student_id: Student of the session
            proposed: New date and time range
            exclude_session_id: The session being moved, if any

        Returns:
            ConflictResult carrying the colliding session, if any
        """
        sessions = self.repository.get_occupying_sessions_for_participants(
            tutor_id, student_id, proposed.session_date, exclude_session_id
        )
        return slot_validator.detect_rescheduling_conflict(
            tutor_id,
            student_id,
            proposed,
            [to_booked_interval(s) for s in sessions],
            exclude_session_id=exclude_session_id,
        )

    @BaseService.measure_operation("check_reschedule")
    def check_reschedule(self, session_id: str, proposed: ProposedSlot) -> ConflictResult:
        """
        Check whether an existing session can move to a proposed slot.

        Only pending or approved sessions can move, and only to a start that
        is still in the future.

        Raises:
            NotFoundException: If the session does not exist
            BusinessRuleException: If the session is no longer reschedulable
            ValidationException: If the proposed start has already passed
        """
        session = self.repository.get_by_id(session_id)
        if session is None:
            raise NotFoundException(
                "Session not found", code="SESSION_NOT_FOUND", details={"session_id": session_id}
            )
        if not session_lifecycle.is_reschedulable(session.status):
            raise BusinessRuleException(
                constants.ERROR_NOT_RESCHEDULABLE,
                code="SESSION_NOT_RESCHEDULABLE",
                details={"session_id": session.id, "status": session.status},
            )
        past_error = past_start_error(proposed, get_now())
        if past_error:
            raise ValidationException(
                past_error,
                code="RESCHEDULE_IN_PAST",
                details={"session_date": proposed.session_date.isoformat()},
            )
        return self.detect_rescheduling_conflict(
            session.tutor_id, session.student_id, proposed, exclude_session_id=session.id
        )

    def _describe(
        self, result: SlotAvailability, template: WeeklyAvailabilityTemplate, on: date
    ) -> str:
        message = _UNAVAILABLE_MESSAGES[result.reason]
        window = template.for_date(on).window
        return message.format(
            min=settings.min_session_duration,
            max=settings.max_session_duration,
            start=window.start_time if window else "",
            end=window.end_time if window else "",
        )

    @BaseService.measure_operation("validate_booking_request")
    def validate_booking_request(
        self, tutor_id: str, student_id: str, proposed: ProposedSlot
    ) -> Dict[str, Any]:
        """
        Validate a new session request end to end.

        Checks:
        - Date is today or later, and within the booking horizon
        - Start time has not already passed when booking for today
        - Duration policy, tutor's day and hours, tutor's existing sessions
        - The student's existing sessions

        Returns:
            {"valid": bool, "errors": [...], "reason": UnavailableReason | None,
             "conflicting": BookedInterval | None}
        """
        errors: List[str] = []
        reason: Optional[UnavailableReason] = None
        conflicting: Optional[BookedInterval] = None

        now = get_now()
        today = now.date()
        past_error = past_start_error(proposed, now)
        if past_error:
            errors.append(past_error)
        elif proposed.session_date > today + timedelta(days=settings.max_booking_days_ahead):
            errors.append(
                constants.ERROR_TOO_FAR_FUTURE.format(days=settings.max_booking_days_ahead)
            )

        template = self._load_template(tutor_id)
        availability = slot_validator.is_slot_available(
            template,
            self._tutor_intervals(tutor_id, proposed.session_date),
            proposed.session_date,
            proposed.start_time,
            proposed.end_time,
            min_duration=settings.min_session_duration,
            max_duration=settings.max_session_duration,
        )
        if not availability.available:
            reason = availability.reason
            conflicting = availability.conflicting
            errors.append(self._describe(availability, template, proposed.session_date))
        else:
            conflict = self.detect_rescheduling_conflict(tutor_id, student_id, proposed)
            if conflict.has_conflict:
                reason = UnavailableReason.OVERLAP
                conflicting = conflict.conflicting
                errors.append(constants.ERROR_PARTICIPANT_CONFLICT)

        if errors:
            self.logger.info(
                f"Rejected session request tutor={tutor_id} student={student_id} "
                f"on {proposed.session_date} {proposed.start_time}-{proposed.end_time}: {errors}"
            )

        return {
            "valid": not errors,
            "errors": errors,
            "reason": reason,
            "conflicting": conflicting,
        }

    def ensure_bookable(self, tutor_id: str, student_id: str, proposed: ProposedSlot) -> None:
        """
        Raise instead of returning a result, for callers about to commit.

        Raises:
            BookingConflictException: If the slot overlaps an existing session
            ValidationException: For any other rejection
        """
        result = self.validate_booking_request(tutor_id, student_id, proposed)
        if result["valid"]:
            return
        details = {"errors": result["errors"]}
        if result["conflicting"] is not None:
            details["conflicting_session"] = result["conflicting"].to_summary()
        if result["reason"] == UnavailableReason.OVERLAP:
            raise BookingConflictException(result["errors"][-1], details=details)
        raise ValidationException(result["errors"][0], code="SLOT_UNAVAILABLE", details=details)
