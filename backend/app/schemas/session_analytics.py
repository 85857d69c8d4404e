"""Response shapes for tutor session analytics."""

from decimal import Decimal
from typing import Dict

from pydantic import Field

from ._strict_base import StrictModel


class BusyHour(StrictModel):
    hour: int = Field(..., ge=0, le=23)
    session_count: int = Field(..., ge=0)
    label: str


class TutorSessionStats(StrictModel):
    """Outcome counts for a tutor's sessions over a period."""

    total_sessions: int = 0
    completed_sessions: int = 0
    cancelled_sessions: int = 0
    no_show_sessions: int = 0
    total_hours: Decimal = Decimal("0")
    completion_rate: Decimal = Field(
        default=Decimal("0"), description="Completed share of all sessions, in percent"
    )
    subject_distribution: Dict[str, int] = Field(default_factory=dict)
