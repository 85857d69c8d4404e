"""
Database models for the scheduling subsystem.

- TutorAvailability: weekly availability template rows
- TutoringSession: session records whose status decides slot occupancy
"""

from .tutor_availability import TutorAvailability
from .tutoring_session import TutoringSession

__all__ = [
    "TutorAvailability",
    "TutoringSession",
]
