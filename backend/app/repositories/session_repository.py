# backend/app/repositories/session_repository.py
"""
Session Repository

Read access to tutoring session records for conflict detection and
scheduling analytics. Only sessions in an occupying status are returned
for conflict checks; the status set comes from the lifecycle module.
"""

from datetime import date
import logging
from typing import Iterable, List, Optional

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.enums import SessionStatus
from ..core.exceptions import RepositoryException
from ..models.tutoring_session import TutoringSession
from ..services.session_lifecycle import OCCUPYING_STATUSES
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)

_OCCUPYING_VALUES = sorted(status.value for status in OCCUPYING_STATUSES)


class SessionRepository(BaseRepository[TutoringSession]):
    """Repository for tutoring session queries."""

    def __init__(self, db: Session):
        """Initialize with TutoringSession model as primary."""
        super().__init__(db, TutoringSession)

    def get_occupying_sessions_for_tutor(
        self, tutor_id: str, session_date: date, exclude_session_id: Optional[str] = None
    ) -> List[TutoringSession]:
        """
        Get the tutor's slot-holding sessions on a date.

        Args:
            tutor_id: The tutor to check
            session_date: The date to check
            exclude_session_id: Optional session to leave out (rescheduling)

        Returns:
            Sessions ordered by start time
        """
        try:
            query = self.db.query(TutoringSession).filter(
                TutoringSession.tutor_id == tutor_id,
                TutoringSession.session_date == session_date,
                TutoringSession.status.in_(_OCCUPYING_VALUES),
            )
            if exclude_session_id:
                query = query.filter(TutoringSession.id != exclude_session_id)
            return query.order_by(TutoringSession.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting tutor sessions for conflict check: {str(e)}")
            raise RepositoryException(f"Failed to get tutor sessions: {str(e)}")

    def get_occupying_sessions_for_participants(
        self,
        tutor_id: str,
        student_id: str,
        session_date: date,
        exclude_session_id: Optional[str] = None,
    ) -> List[TutoringSession]:
        """
        Get slot-holding sessions on a date where either person takes part.

        The tutor and student ids are each matched against both roles, since
        nobody can teach and learn at the same time.
        """
        party_ids = [tutor_id, student_id]
        try:
            query = self.db.query(TutoringSession).filter(
                or_(
                    TutoringSession.tutor_id.in_(party_ids),
                    TutoringSession.student_id.in_(party_ids),
                ),
                TutoringSession.session_date == session_date,
                TutoringSession.status.in_(_OCCUPYING_VALUES),
            )
            if exclude_session_id:
                query = query.filter(TutoringSession.id != exclude_session_id)
            return query.order_by(TutoringSession.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting participant sessions: {str(e)}")
            raise RepositoryException(f"Failed to get participant sessions: {str(e)}")

    def get_tutor_sessions_since(
        self, tutor_id: str, since: date, statuses: Iterable[SessionStatus]
    ) -> List[TutoringSession]:
        """Get a tutor's sessions on or after a date in the given statuses."""
        try:
            return (
                self.db.query(TutoringSession)
                .filter(
                    TutoringSession.tutor_id == tutor_id,
                    TutoringSession.session_date >= since,
                    TutoringSession.status.in_([SessionStatus(s).value for s in statuses]),
                )
                .order_by(TutoringSession.session_date, TutoringSession.start_time)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting tutor session history: {str(e)}")
            raise RepositoryException(f"Failed to get tutor sessions: {str(e)}")

    def get_tutor_sessions_between(
        self,
        tutor_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
    ) -> List[TutoringSession]:
        """
        Get all of a tutor's sessions, optionally limited to a date range.

        Both bounds are inclusive; either may be omitted.
        """
        try:
            query = self.db.query(TutoringSession).filter(TutoringSession.tutor_id == tutor_id)
            if start_date is not None:
                query = query.filter(TutoringSession.session_date >= start_date)
            if end_date is not None:
                query = query.filter(TutoringSession.session_date <= end_date)
            return query.order_by(TutoringSession.session_date, TutoringSession.start_time).all()
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting tutor sessions for stats: {str(e)}")
            raise RepositoryException(f"Failed to get tutor sessions: {str(e)}")
