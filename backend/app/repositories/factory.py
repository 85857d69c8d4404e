# backend/app/repositories/factory.py
"""
Repository Factory

Provides centralized creation of repository instances,
ensuring consistent initialization and dependency injection.
"""

from sqlalchemy.orm import Session

from .availability_template_repository import AvailabilityTemplateRepository
from .session_repository import SessionRepository


class RepositoryFactory:
    """Factory class for creating repository instances."""

    @staticmethod
    def create_session_repository(db: Session) -> SessionRepository:
        """Create repository for tutoring session queries."""
        return SessionRepository(db)

    @staticmethod
    def create_availability_template_repository(db: Session) -> AvailabilityTemplateRepository:
        """Create repository for weekly availability templates."""
        return AvailabilityTemplateRepository(db)
