# backend/tests/unit/test_slot_validator.py
"""
Unit tests for the pure slot validation logic.

No database: templates and intervals are built in memory.
"""

from datetime import date

import pytest
from tests.utils.scheduling_builders import interval

from app.core.enums import SessionStatus, UnavailableReason
from app.core.exceptions import InvalidTimeFormatException
from app.schemas.scheduling import (
    DayAvailability,
    ProposedSlot,
    TimeInterval,
    WeeklyAvailabilityTemplate,
)
from app.services.slot_validator import (
    FreeSlots,
    detect_rescheduling_conflict,
    enumerate_free_slots,
    find_conflict,
    intervals_overlap,
    is_slot_available,
    validate_duration,
)
from app.utils.time_utils import parse_time_str

MONDAY = date(2026, 1, 5)
TUESDAY = date(2026, 1, 6)
SUNDAY = date(2026, 1, 4)


@pytest.fixture
def template() -> WeeklyAvailabilityTemplate:
    return WeeklyAvailabilityTemplate(
        monday=DayAvailability(start="09:00", end="17:00", available=True),
        tuesday=DayAvailability(start="09:00", end="12:00", available=True),
        sunday=DayAvailability(start="09:00", end="17:00", available=False),
    )


def _windows(slots) -> list:
    return [(slot.start_time, slot.end_time) for slot in slots]


class TestIntervalsOverlap:
    def test_overlapping(self):
        assert intervals_overlap(600, 660, 630, 690)
        assert intervals_overlap(630, 690, 600, 660)

    def test_containment(self):
        assert intervals_overlap(540, 1020, 600, 660)
        assert intervals_overlap(600, 660, 540, 1020)

    def test_adjacent_is_not_overlap(self):
        assert not intervals_overlap(600, 660, 660, 720)
        assert not intervals_overlap(660, 720, 600, 660)

    def test_disjoint(self):
        assert not intervals_overlap(540, 600, 720, 780)


class TestValidateDuration:
    def test_accepts_policy_bounds(self):
        assert validate_duration(540, 570) is None
        assert validate_duration(540, 780) is None

    def test_too_short(self):
        assert validate_duration(540, 560) == UnavailableReason.MIN_DURATION

    def test_too_long(self):
        assert validate_duration(540, 781) == UnavailableReason.MAX_DURATION

    @pytest.mark.parametrize("start,end", [(600, 600), (660, 600)])
    def test_invalid_ordering(self, start, end):
        assert validate_duration(start, end) == UnavailableReason.INVALID_RANGE

    def test_custom_policy(self):
        assert validate_duration(540, 555, min_duration=15) is None
        assert validate_duration(540, 660, max_duration=90) == UnavailableReason.MAX_DURATION


class TestIsSlotAvailable:
    def test_free_slot_within_hours(self, template):
        booked = [interval("14:00", "15:00", session_date=MONDAY)]
        result = is_slot_available(template, booked, MONDAY, "13:00", "14:00")
        assert result.available
        assert result.reason is None
        assert result.conflicting is None

    def test_overlap_reports_colliding_interval(self, template):
        booked = [interval("14:00", "15:00", session_date=MONDAY, session_id="s-1")]
        result = is_slot_available(template, booked, MONDAY, "13:30", "14:30")
        assert not result.available
        assert result.reason == UnavailableReason.OVERLAP
        assert result.conflicting.session_id == "s-1"

    def test_adjacent_booking_is_not_a_conflict(self, template):
        booked = [interval("14:00", "15:00", session_date=MONDAY)]
        assert is_slot_available(template, booked, MONDAY, "15:00", "16:00").available
        assert is_slot_available(template, booked, MONDAY, "13:00", "14:00").available

    def test_day_flagged_unavailable(self, template):
        result = is_slot_available(template, [], SUNDAY, "10:00", "11:00")
        assert result.reason == UnavailableReason.DAY_UNAVAILABLE

    def test_day_without_entry_is_unavailable(self, template):
        saturday = date(2026, 1, 10)
        result = is_slot_available(template, [], saturday, "10:00", "11:00")
        assert result.reason == UnavailableReason.DAY_UNAVAILABLE

    def test_available_day_missing_window_is_unavailable(self):
        template = WeeklyAvailabilityTemplate(monday=DayAvailability(start="09:00", available=True))
        result = is_slot_available(template, [], MONDAY, "10:00", "11:00")
        assert result.reason == UnavailableReason.DAY_UNAVAILABLE

    @pytest.mark.parametrize(
        "start,end",
        [("08:30", "09:30"), ("16:30", "17:30"), ("07:00", "08:00"), ("17:00", "18:00")],
    )
    def test_outside_hours(self, template, start, end):
        result = is_slot_available(template, [], MONDAY, start, end)
        assert result.reason == UnavailableReason.OUTSIDE_HOURS

    def test_window_edges_are_bookable(self, template):
        assert is_slot_available(template, [], MONDAY, "09:00", "10:00").available
        assert is_slot_available(template, [], MONDAY, "16:00", "17:00").available

    @pytest.mark.parametrize(
        "start,end", [("10:00", "10:00"), ("11:00", "10:00"), ("16:30", "09:00")]
    )
    def test_invalid_ordering_never_available(self, template, start, end):
        result = is_slot_available(template, [], MONDAY, start, end)
        assert not result.available
        assert result.reason == UnavailableReason.INVALID_RANGE

    def test_too_short_regardless_of_availability(self, template):
        result = is_slot_available(template, [], SUNDAY, "10:00", "10:20")
        assert result.reason == UnavailableReason.MIN_DURATION

    def test_too_long(self, template):
        result = is_slot_available(template, [], MONDAY, "09:00", "13:30")
        assert result.reason == UnavailableReason.MAX_DURATION

    def test_duration_checked_before_overlap(self, template):
        booked = [interval("10:00", "11:00", session_date=MONDAY)]
        result = is_slot_available(template, booked, MONDAY, "10:00", "10:15")
        assert result.reason == UnavailableReason.MIN_DURATION

    @pytest.mark.parametrize(
        "status",
        [
            SessionStatus.COMPLETED,
            SessionStatus.CANCELLED,
            SessionStatus.REJECTED,
            SessionStatus.NO_SHOW,
        ],
    )
    def test_released_statuses_do_not_block(self, template, status):
        booked = [interval("14:00", "15:00", session_date=MONDAY, status=status)]
        assert is_slot_available(template, booked, MONDAY, "14:00", "15:00").available

    @pytest.mark.parametrize(
        "status", [SessionStatus.PENDING, SessionStatus.APPROVED, SessionStatus.IN_PROGRESS]
    )
    def test_occupying_statuses_block(self, template, status):
        booked = [interval("14:00", "15:00", session_date=MONDAY, status=status)]
        result = is_slot_available(template, booked, MONDAY, "14:00", "15:00")
        assert result.reason == UnavailableReason.OVERLAP

    def test_bookings_on_other_dates_are_ignored(self, template):
        booked = [interval("14:00", "15:00", session_date=TUESDAY)]
        assert is_slot_available(template, booked, MONDAY, "14:00", "15:00").available

    def test_reports_earliest_conflict(self, template):
        booked = [
            interval("11:00", "12:00", session_date=MONDAY, session_id="late"),
            interval("10:00", "10:30", session_date=MONDAY, session_id="early"),
        ]
        result = is_slot_available(template, booked, MONDAY, "10:00", "12:00")
        assert result.conflicting.session_id == "early"

    def test_is_idempotent(self, template):
        booked = [interval("14:00", "15:00", session_date=MONDAY)]
        first = is_slot_available(template, booked, MONDAY, "13:30", "14:30")
        second = is_slot_available(template, booked, MONDAY, "13:30", "14:30")
        assert first == second

    def test_malformed_time_fails_fast(self, template):
        with pytest.raises(InvalidTimeFormatException):
            is_slot_available(template, [], MONDAY, "9:00", "10:00")
        with pytest.raises(InvalidTimeFormatException):
            is_slot_available(template, [], MONDAY, "09:00", "25:00")

    def test_window_ending_at_midnight(self):
        template = WeeklyAvailabilityTemplate(
            monday=DayAvailability(start="20:00", end="24:00", available=True)
        )
        assert is_slot_available(template, [], MONDAY, "23:00", "24:00").available


class TestEnumerateFreeSlots:
    def test_skips_overlapping_candidates(self, template):
        booked = [interval("10:00", "11:00", session_date=TUESDAY)]
        slots = enumerate_free_slots(template, booked, TUESDAY, 60)
        assert _windows(slots) == [("09:00", "10:00"), ("11:00", "12:00")]

    def test_steps_on_half_hours(self, template):
        slots = enumerate_free_slots(template, [], TUESDAY, 60)
        assert _windows(slots) == [
            ("09:00", "10:00"),
            ("09:30", "10:30"),
            ("10:00", "11:00"),
            ("10:30", "11:30"),
            ("11:00", "12:00"),
        ]

    def test_partial_last_window_is_dropped(self):
        template = WeeklyAvailabilityTemplate(
            monday=DayAvailability(start="09:00", end="11:15", available=True)
        )
        slots = enumerate_free_slots(template, [], MONDAY, 60)
        assert _windows(slots) == [("09:00", "10:00"), ("09:30", "10:30"), ("10:00", "11:00")]

    def test_unavailable_day_is_empty(self, template):
        assert list(enumerate_free_slots(template, [], SUNDAY, 60)) == []

    @pytest.mark.parametrize("duration", [20, 0, -30, 300])
    def test_duration_outside_policy_is_empty(self, template, duration):
        assert list(enumerate_free_slots(template, [], MONDAY, duration)) == []

    def test_is_restartable(self, template):
        booked = iter([interval("10:00", "11:00", session_date=TUESDAY)])
        slots = enumerate_free_slots(template, booked, TUESDAY, 60)
        assert isinstance(slots, FreeSlots)
        assert list(slots) == list(slots)
        assert len(list(slots)) == 2

    def test_is_lazy(self, template):
        slots = iter(enumerate_free_slots(template, [], MONDAY, 30))
        assert next(slots) == TimeInterval(start_time="09:00", end_time="09:30")
        assert next(slots) == TimeInterval(start_time="09:30", end_time="10:00")

    def test_ascending_and_exact_length(self, template):
        booked = [
            interval("09:30", "10:00", session_date=MONDAY),
            interval("13:00", "14:30", session_date=MONDAY, status=SessionStatus.PENDING),
        ]
        slots = list(enumerate_free_slots(template, booked, MONDAY, 90))
        starts = [slot.start_minutes for slot in slots]
        assert starts == sorted(starts)
        assert all(slot.duration_minutes == 90 for slot in slots)

    def test_results_never_intersect_bookings(self, template):
        booked = [
            interval("09:30", "10:00", session_date=MONDAY),
            interval("11:00", "12:30", session_date=MONDAY),
            interval("15:45", "16:15", session_date=MONDAY),
        ]
        for duration in (30, 45, 60, 120):
            for slot in enumerate_free_slots(template, booked, MONDAY, duration):
                check = is_slot_available(template, booked, MONDAY, slot.start_time, slot.end_time)
                assert check.available, (duration, slot)
                assert find_conflict(booked, MONDAY, slot.start_time, slot.end_time) is None

    def test_custom_step(self, template):
        slots = enumerate_free_slots(template, [], TUESDAY, 60, step_minutes=60)
        assert _windows(slots) == [("09:00", "10:00"), ("10:00", "11:00"), ("11:00", "12:00")]

    def test_non_positive_step_rejected(self, template):
        with pytest.raises(ValueError):
            enumerate_free_slots(template, [], TUESDAY, 60, step_minutes=0)


class TestFindConflict:
    def test_excluded_session_is_ignored(self):
        booked = [interval("10:00", "11:00", session_date=MONDAY, session_id="moving")]
        assert find_conflict(booked, MONDAY, "10:30", "11:30") is not None
        assert find_conflict(booked, MONDAY, "10:30", "11:30", exclude_session_id="moving") is None


class TestDetectReschedulingConflict:
    def _proposed(self, start: str, end: str, on: date = MONDAY) -> ProposedSlot:
        return ProposedSlot(session_date=on, start_time=start, end_time=end)

    def test_no_conflict(self):
        booked = [interval("10:00", "11:00", session_date=MONDAY, tutor_id="t1", student_id="s9")]
        result = detect_rescheduling_conflict("t1", "s1", self._proposed("11:00", "12:00"), booked)
        assert not result.has_conflict
        assert result.conflicting is None

    def test_tutor_double_booked(self):
        booked = [
            interval(
                "10:00", "11:00", session_date=MONDAY, tutor_id="t1", student_id="s9", session_id="x"
            )
        ]
        result = detect_rescheduling_conflict("t1", "s1", self._proposed("10:30", "11:30"), booked)
        assert result.has_conflict
        assert result.conflicting.session_id == "x"

    def test_conflict_is_logged(self, caplog):
        booked = [
            interval(
                "10:00", "11:00", session_date=MONDAY, tutor_id="t1", student_id="s9", session_id="x"
            )
        ]
        with caplog.at_level("INFO", logger="app.services.slot_validator"):
            detect_rescheduling_conflict("t1", "s1", self._proposed("10:30", "11:30"), booked)

        (record,) = caplog.records
        assert record.getMessage() == (
            "Rescheduling conflict for tutor=t1 student=s1 on 2026-01-05 10:30-11:30 "
            "with session x"
        )

    def test_student_double_booked_with_another_tutor(self):
        booked = [
            interval(
                "10:00", "11:00", session_date=MONDAY, tutor_id="t2", student_id="s1", session_id="y"
            )
        ]
        result = detect_rescheduling_conflict("t1", "s1", self._proposed("10:00", "11:00"), booked)
        assert result.has_conflict
        assert result.conflicting.session_id == "y"

    def test_student_who_also_teaches(self):
        # s1 teaches a lesson of their own at that time
        booked = [
            interval(
                "10:00", "11:00", session_date=MONDAY, tutor_id="s1", student_id="s5", session_id="z"
            )
        ]
        result = detect_rescheduling_conflict("t1", "s1", self._proposed("10:30", "11:00"), booked)
        assert result.conflicting.session_id == "z"

    def test_unrelated_people_are_ignored(self):
        booked = [interval("10:00", "11:00", session_date=MONDAY, tutor_id="t2", student_id="s2")]
        result = detect_rescheduling_conflict("t1", "s1", self._proposed("10:00", "11:00"), booked)
        assert not result.has_conflict

    def test_moving_session_excludes_itself(self):
        booked = [
            interval(
                "10:00", "11:00", session_date=MONDAY, tutor_id="t1", student_id="s1", session_id="me"
            )
        ]
        proposed = self._proposed("10:30", "11:30")
        assert detect_rescheduling_conflict("t1", "s1", proposed, booked).has_conflict
        result = detect_rescheduling_conflict(
            "t1", "s1", proposed, booked, exclude_session_id="me"
        )
        assert not result.has_conflict

    def test_cancelled_sessions_do_not_conflict(self):
        booked = [
            interval(
                "10:00",
                "11:00",
                session_date=MONDAY,
                tutor_id="t1",
                student_id="s1",
                status=SessionStatus.CANCELLED,
            )
        ]
        result = detect_rescheduling_conflict("t1", "s1", self._proposed("10:00", "11:00"), booked)
        assert not result.has_conflict

    def test_other_dates_do_not_conflict(self):
        booked = [interval("10:00", "11:00", session_date=TUESDAY, tutor_id="t1")]
        result = detect_rescheduling_conflict("t1", "s1", self._proposed("10:00", "11:00"), booked)
        assert not result.has_conflict


def test_minutes_not_strings_drive_comparisons():
    # "9:00"-style values are rejected at the boundary, so ordering is numeric
    assert parse_time_str("09:00") < parse_time_str("10:00")
    template = WeeklyAvailabilityTemplate(
        monday=DayAvailability(start="00:00", end="24:00", available=True)
    )
    assert is_slot_available(template, [], MONDAY, "00:00", "04:00").available
