# backend/app/services/base.py
"""
Service base class for the scheduling subsystem.

Every service gets the caller's SQLAlchemy session, a class-named logger,
a commit/rollback context manager for writes and a timing decorator for
its public operations.
"""

from contextlib import contextmanager
from functools import wraps
import logging
import time
from typing import Any, Callable, Dict, Iterator, TypeVar, cast

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.exceptions import RepositoryException

logger = logging.getLogger(__name__)

F = TypeVar("F", bound=Callable[..., Any])


class BaseService:
    """
    Base for services that read or write scheduling data.

    The session is owned by the caller; services only commit inside
    transaction() blocks.
    """

    def __init__(self, db: Session):
        self.db = db
        self.logger = logging.getLogger(self.__class__.__name__)
        self._metrics: Dict[str, Dict[str, float]] = {}

    @contextmanager
    def transaction(self) -> Iterator[Session]:
        """
        Commit on clean exit, roll back otherwise.

        Usage:
            with self.transaction():
                self.repository.replace_days_for_tutor(tutor_id, days)

        Raises:
            RepositoryException: If SQLAlchemy fails inside the block or on commit
        """
        try:
            yield self.db
            self.db.commit()
            self.logger.debug("Committed scheduling transaction")
        except SQLAlchemyError as e:
            self.logger.error(f"Rolling back after database error: {str(e)}")
            self.db.rollback()
            raise RepositoryException(f"Database operation failed: {str(e)}")
        except Exception as e:
            self.logger.error(f"Rolling back after {type(e).__name__}: {str(e)}")
            self.db.rollback()
            raise

    @staticmethod
    def measure_operation(operation_name: str) -> Callable[[F], F]:
        """
        Time a service method and count its failures.

        Calls slower than settings.slow_operation_seconds are logged at
        WARNING.

        Usage:
            @BaseService.measure_operation("check_slot_availability")
            def check_slot_availability(self, ...):
                ...
        """

        def decorator(func: F) -> F:
            @wraps(func)
            def wrapper(self, *args, **kwargs):
                started = time.perf_counter()
                succeeded = False
                try:
                    outcome = func(self, *args, **kwargs)
                    succeeded = True
                    return outcome
                finally:
                    elapsed = time.perf_counter() - started
                    self._record_metric(operation_name, elapsed, succeeded)
                    if elapsed > settings.slow_operation_seconds:
                        self.logger.warning(
                            f"Slow operation detected: {operation_name} took {elapsed:.2f}s"
                        )

            return cast(F, wrapper)

        return decorator

    def _record_metric(self, operation_name: str, elapsed: float, succeeded: bool) -> None:
        entry = self._metrics.setdefault(
            operation_name, {"count": 0, "total_time": 0.0, "failure_count": 0}
        )
        entry["count"] += 1
        entry["total_time"] += elapsed
        if not succeeded:
            entry["failure_count"] += 1

    def get_metrics(self) -> Dict[str, Dict[str, float]]:
        """Per-operation call count, mean duration in seconds and failure count."""
        summary: Dict[str, Dict[str, float]] = {}
        for name, entry in self._metrics.items():
            count = entry["count"]
            summary[name] = {
                "count": count,
                "avg_time": entry["total_time"] / count if count else 0.0,
                "failure_count": entry["failure_count"],
            }
        return summary
