"""Scheduling policy constants for the tutoring marketplace."""

from __future__ import annotations

# Session duration policy
MIN_SESSION_DURATION = 30  # minutes
MAX_SESSION_DURATION = 240  # minutes (4 hours)

# Free-slot enumeration granularity
SLOT_STEP_MINUTES = 30
DEFAULT_SLOT_DURATION = 60  # minutes

# Booking horizons
MAX_BOOKING_DAYS_AHEAD = 92  # session requests, about 3 months
MAX_AVAILABILITY_DAYS_AHEAD = 61  # availability lookups, about 2 months

# Multi-day search
DEFAULT_MAX_RESULTS = 10

# Busy-hours analytics window
DEFAULT_BUSY_HOURS_DAYS = 30

MINUTES_PER_DAY = 24 * 60

# Error messages
ERROR_TUTOR_NOT_FOUND = "Tutor not found"
ERROR_INVALID_TIME_RANGE = "End time must be after start time"
ERROR_PAST_DATE = "Session date must be today or in the future"
ERROR_PAST_TIME = "Session start time must be in the future"
ERROR_NOT_RESCHEDULABLE = "Can only reschedule pending or approved sessions"
ERROR_TOO_FAR_FUTURE = "Session date cannot be more than {days} days in the future"
ERROR_AVAILABILITY_PAST_DATE = "Date must be today or in the future"
ERROR_AVAILABILITY_TOO_FAR = "Date cannot be more than {days} days in the future"
ERROR_TUTOR_CONFLICT = "Time slot conflicts with an existing session for the tutor"
ERROR_PARTICIPANT_CONFLICT = "Time slot conflicts with another session for the tutor or student"
