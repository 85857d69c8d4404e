"""Session analytics for tutors: busy hours and outcome statistics."""

from __future__ import annotations

from collections import Counter
from datetime import date, timedelta
from decimal import Decimal
from typing import List, Optional

from sqlalchemy.orm import Session

from ..core.constants import DEFAULT_BUSY_HOURS_DAYS
from ..core.enums import SessionStatus
from ..core.timezone_utils import get_today
from ..repositories import RepositoryFactory, SessionRepository
from ..schemas.session_analytics import BusyHour, TutorSessionStats
from ..utils.time_utils import parse_time_str
from .base import BaseService

_DELIVERED_STATUSES = [SessionStatus.COMPLETED, SessionStatus.IN_PROGRESS]


class SessionAnalyticsService(BaseService):
    def __init__(self, db: Session, repository: Optional[SessionRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_session_repository(db)

    @BaseService.measure_operation("get_tutor_busy_hours")
    def get_tutor_busy_hours(
        self, tutor_id: str, days: int = DEFAULT_BUSY_HOURS_DAYS
    ) -> List[BusyHour]:
        """
        Count a tutor's recent delivered sessions per hour of day.

        A session counts toward every hour it touches, so one ending mid-hour
        also counts in that final partial hour.

        Returns:
            24 entries, hour 0 first
        """
        since = get_today() - timedelta(days=days)
        sessions = self.repository.get_tutor_sessions_since(tutor_id, since, _DELIVERED_STATUSES)

        counts = [0] * 24
        for session in sessions:
            first_hour = parse_time_str(session.start_time) // 60
            last_hour = (parse_time_str(session.end_time, allow_end_of_day=True) - 1) // 60
            for hour in range(first_hour, min(last_hour, 23) + 1):
                counts[hour] += 1

        return [
            BusyHour(hour=hour, session_count=counts[hour], label=f"{hour:02d}:00")
            for hour in range(24)
        ]

    @BaseService.measure_operation("get_tutor_session_stats")
    def get_tutor_session_stats(
        self,
        tutor_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> TutorSessionStats:
        """
        Summarize a tutor's sessions, optionally within an inclusive date range.

        Hours count completed sessions only. The completion rate is rounded to
        one decimal place.
        """
        sessions = self.repository.get_tutor_sessions_between(tutor_id, start_date, end_date)
        statuses = Counter(SessionStatus(s.status) for s in sessions)
        completed_minutes = sum(
            s.duration_minutes for s in sessions if s.status == SessionStatus.COMPLETED.value
        )

        total = len(sessions)
        completed = statuses[SessionStatus.COMPLETED]
        completion_rate = Decimal("0")
        if total:
            completion_rate = (Decimal(completed) / Decimal(total) * Decimal("100")).quantize(
                Decimal("0.1")
            )

        stats = TutorSessionStats(
            total_sessions=total,
            completed_sessions=completed,
            cancelled_sessions=statuses[SessionStatus.CANCELLED],
            no_show_sessions=statuses[SessionStatus.NO_SHOW],
            total_hours=(Decimal(completed_minutes) / Decimal(60)).quantize(Decimal("0.01")),
            completion_rate=completion_rate,
            subject_distribution=dict(Counter(s.subject for s in sessions if s.subject)),
        )
        self.logger.debug(f"Session stats for tutor {tutor_id}: {total} sessions")
        return stats
