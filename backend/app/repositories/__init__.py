# backend/app/repositories/__init__.py
"""
Repository layer for the scheduling subsystem.

Key Components:
- BaseRepository: Generic data access shared by all repositories
- RepositoryFactory: Factory for creating repository instances
- SessionRepository: Session reads for conflict detection and analytics
- AvailabilityTemplateRepository: Weekly availability template storage

Usage:
    from app.repositories import RepositoryFactory

    repository = RepositoryFactory.create_session_repository(db)
    sessions = repository.get_occupying_sessions_for_tutor(tutor_id, session_date)
"""

from .availability_template_repository import AvailabilityTemplateRepository
from .base_repository import BaseRepository
from .factory import RepositoryFactory
from .session_repository import SessionRepository

__all__ = [
    "AvailabilityTemplateRepository",
    "BaseRepository",
    "RepositoryFactory",
    "SessionRepository",
]
