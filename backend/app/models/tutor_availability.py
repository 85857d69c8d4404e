# backend/app/models/tutor_availability.py
"""
Weekly availability template rows.

One row per tutor and weekday. The tutor's template is replaced wholesale
on update; no history is kept.
"""

from sqlalchemy import Boolean, Column, DateTime, String, UniqueConstraint
from sqlalchemy.sql import func

from ..core.ulid_helper import generate_ulid
from ..database import Base


class TutorAvailability(Base):
    """A tutor's open hours for one day of the week"""

    __tablename__ = "tutor_availability"

    id = Column(String(26), primary_key=True, default=generate_ulid)
    tutor_id = Column(String(26), nullable=False, index=True)
    day_of_week = Column(String(10), nullable=False)
    start_time = Column(String(5), nullable=True)
    end_time = Column(String(5), nullable=True)
    available = Column(Boolean, nullable=False, default=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())

    __table_args__ = (
        UniqueConstraint("tutor_id", "day_of_week", name="unique_tutor_day_availability"),
    )

    def __repr__(self) -> str:
        window = f"{self.start_time}-{self.end_time}" if self.available else "closed"
        return f"<TutorAvailability {self.tutor_id} {self.day_of_week} {window}>"
