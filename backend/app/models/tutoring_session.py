# backend/app/models/tutoring_session.py
"""
Tutoring session model.

A session record is created when a student's request is accepted into the
system and is never deleted; only its status moves along the lifecycle in
app.services.session_lifecycle. Times are stored as zero-padded "HH:MM"
wall-clock strings on the session date.
"""

import logging

from sqlalchemy import CheckConstraint, Column, Date, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import func

from ..core.enums import SessionStatus
from ..core.ulid_helper import generate_ulid
from ..database import Base

logger = logging.getLogger(__name__)


class TutoringSession(Base):
    """A booked (or requested) lesson between one tutor and one student."""

    __tablename__ = "tutoring_sessions"

    id = Column(String(26), primary_key=True, index=True, default=generate_ulid)

    tutor_id = Column(String(26), nullable=False)
    student_id = Column(String(26), nullable=False)
    subject = Column(String(100), nullable=True)

    session_date = Column(Date, nullable=False)
    start_time = Column(String(5), nullable=False)
    end_time = Column(String(5), nullable=False)
    duration_minutes = Column(Integer, nullable=False)

    status = Column(String(20), nullable=False, default=SessionStatus.PENDING.value, index=True)
    description = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    __table_args__ = (
        CheckConstraint("start_time < end_time", name="ck_tutoring_sessions_time_order"),
        CheckConstraint("duration_minutes > 0", name="ck_tutoring_sessions_duration_positive"),
        Index("idx_tutoring_sessions_tutor_date", "tutor_id", "session_date"),
        Index("idx_tutoring_sessions_student_date", "student_id", "session_date"),
    )

    def __repr__(self) -> str:
        return (
            f"<TutoringSession {self.id} {self.session_date} "
            f"{self.start_time}-{self.end_time} {self.status}>"
        )
