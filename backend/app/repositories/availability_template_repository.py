# backend/app/repositories/availability_template_repository.py
"""
Availability Template Repository

Stores each tutor's weekly template as one TutorAvailability row per day.
"""

import logging
from typing import Dict, List

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException
from ..models.tutor_availability import TutorAvailability
from .base_repository import BaseRepository

logger = logging.getLogger(__name__)


class AvailabilityTemplateRepository(BaseRepository[TutorAvailability]):
    """Repository for weekly availability templates."""

    def __init__(self, db: Session):
        super().__init__(db, TutorAvailability)

    def get_days_for_tutor(self, tutor_id: str) -> List[TutorAvailability]:
        """All template rows for a tutor (at most seven)."""
        try:
            return (
                self.db.query(TutorAvailability)
                .filter(TutorAvailability.tutor_id == tutor_id)
                .all()
            )
        except SQLAlchemyError as e:
            self.logger.error(f"Error getting availability template: {str(e)}")
            raise RepositoryException(f"Failed to get availability template: {str(e)}")

    def replace_days_for_tutor(
        self, tutor_id: str, days: Dict[str, Dict[str, object]]
    ) -> List[TutorAvailability]:
        """
        Overwrite a tutor's template rows.

        Args:
            tutor_id: The tutor
            days: Mapping of lowercase day name to column values
                (start_time, end_time, available)

        Returns:
            The freshly created rows
        """
        try:
            self.db.query(TutorAvailability).filter(
                TutorAvailability.tutor_id == tutor_id
            ).delete(synchronize_session=False)
            self.db.flush()
        except SQLAlchemyError as e:
            self.logger.error(f"Error clearing availability template: {str(e)}")
            raise RepositoryException(f"Failed to clear availability template: {str(e)}")

        return [
            self.create(tutor_id=tutor_id, day_of_week=day, **values)
            for day, values in days.items()
        ]
