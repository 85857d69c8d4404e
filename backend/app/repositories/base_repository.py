# backend/app/repositories/base_repository.py
"""
Base Repository for scheduling records.

Repositories own queries; services own business rules and commit. Nothing
here commits: writes are flushed so generated ULIDs are visible to the
caller inside its transaction.
"""

import logging
from typing import Generic, Optional, Type, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.exceptions import RepositoryException

# Any declarative model with a string "id" primary key
ModelT = TypeVar("ModelT")

logger = logging.getLogger(__name__)


class BaseRepository(Generic[ModelT]):
    """
    Shared lookups and inserts for one model class.

    Subclasses add the scheduling queries; every SQLAlchemy failure leaves
    this layer as a RepositoryException.
    """

    def __init__(self, db: Session, model: Type[ModelT]):
        self.db = db
        self.model = model
        self.logger = logging.getLogger(f"{__name__}.{model.__name__}")

    @property
    def model_name(self) -> str:
        return self.model.__name__

    def get_by_id(self, id: str) -> Optional[ModelT]:
        """Fetch one record by primary key, or None."""
        try:
            return self.db.get(self.model, id)
        except SQLAlchemyError as e:
            self.logger.error(f"Lookup of {self.model_name} {id} failed: {str(e)}")
            raise RepositoryException(f"Failed to load {self.model_name} {id}: {str(e)}")

    def create(self, **fields) -> ModelT:
        """
        Add a record and flush it.

        The session is rolled back on failure, so a caller's open
        transaction does not stay half-written.
        """
        record = self.model(**fields)
        try:
            self.db.add(record)
            self.db.flush()
        except IntegrityError as exc:
            self.logger.error(f"Constraint rejected new {self.model_name}: {exc}", exc_info=True)
            self.db.rollback()
            raise RepositoryException(
                f"{self.model_name} violates a table constraint: {exc.orig}"
            ) from exc
        except SQLAlchemyError as e:
            self.logger.error(f"Insert of {self.model_name} failed: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Failed to create {self.model_name}: {str(e)}")
        return record
