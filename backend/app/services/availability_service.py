# backend/app/services/availability_service.py
"""
Availability Service

Reads and replaces a tutor's weekly availability template. The template
is only ever overwritten as a whole; the conflict checker reads it to
decide which hours are bookable.
"""

import logging
from typing import Dict, List, Optional

from sqlalchemy.orm import Session

from ..core.enums import Weekday
from ..models.tutor_availability import TutorAvailability
from ..repositories import AvailabilityTemplateRepository, RepositoryFactory
from ..schemas.scheduling import DayAvailability, WeeklyAvailabilityTemplate
from .base import BaseService

logger = logging.getLogger(__name__)


def template_from_rows(rows: List[TutorAvailability]) -> WeeklyAvailabilityTemplate:
    """Build a template from stored rows; days without a row are closed."""
    days: Dict[str, DayAvailability] = {}
    for row in rows:
        day = Weekday(row.day_of_week).value
        days[day] = DayAvailability(
            start=row.start_time, end=row.end_time, available=bool(row.available)
        )
    return WeeklyAvailabilityTemplate(**days)


class AvailabilityService(BaseService):
    """Service for tutor weekly availability templates."""

    def __init__(self, db: Session, repository: Optional[AvailabilityTemplateRepository] = None):
        super().__init__(db)
        self.repository = repository or RepositoryFactory.create_availability_template_repository(
            db
        )

    @BaseService.measure_operation("get_weekly_template")
    def get_weekly_template(self, tutor_id: str) -> Optional[WeeklyAvailabilityTemplate]:
        """
        Load a tutor's template.

        Returns:
            The template, or None when the tutor has never saved one
        """
        rows = self.repository.get_days_for_tutor(tutor_id)
        if not rows:
            return None
        return template_from_rows(rows)

    @BaseService.measure_operation("save_weekly_template")
    def save_weekly_template(
        self, tutor_id: str, template: WeeklyAvailabilityTemplate
    ) -> WeeklyAvailabilityTemplate:
        """Replace the tutor's template with the given one and commit."""
        days: Dict[str, Dict[str, object]] = {}
        for weekday in Weekday:
            day = template.for_weekday(weekday)
            days[weekday.value] = {
                "start_time": day.start,
                "end_time": day.end,
                "available": day.available,
            }

        with self.transaction():
            rows = self.repository.replace_days_for_tutor(tutor_id, days)

        open_days = [weekday.value for weekday in Weekday if template.for_weekday(weekday).window]
        self.logger.info(f"Saved availability template for tutor {tutor_id}: open on {open_days}")
        return template_from_rows(rows)
