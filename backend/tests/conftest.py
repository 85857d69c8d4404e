# backend/tests/conftest.py
"""
Pytest configuration for the scheduling subsystem.

Database tests run against a shared in-memory SQLite engine. Each test gets
a session joined to an outer transaction that is rolled back afterwards,
so service-level commits only release a savepoint.
"""

import os

# Set before any app imports so settings never touch a real database
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("ENVIRONMENT", "test")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool
from tests.utils.scheduling_builders import TUTOR_ID

# Import models so Base.metadata is populated for create_all.
import app.models  # noqa: F401
from app.database import Base
from app.schemas.scheduling import DayAvailability, WeeklyAvailabilityTemplate
from app.services.availability_service import AvailabilityService


@pytest.fixture(scope="session")
def _engine():
    engine = create_engine(
        "sqlite+pysqlite:///:memory:",
        future=True,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(engine)
    yield engine
    Base.metadata.drop_all(engine)
    engine.dispose()


@pytest.fixture
def db(_engine) -> Session:
    """Transactional session rolled back after each test."""
    connection = _engine.connect()
    transaction = connection.begin()
    session = Session(
        bind=connection,
        join_transaction_mode="create_savepoint",
        expire_on_commit=False,
    )
    try:
        yield session
    finally:
        session.close()
        transaction.rollback()
        connection.close()


@pytest.fixture
def weekday_template() -> WeeklyAvailabilityTemplate:
    """Monday-Friday 09:00-17:00, weekends closed."""
    workday = DayAvailability(start="09:00", end="17:00", available=True)
    return WeeklyAvailabilityTemplate(
        monday=workday,
        tuesday=workday,
        wednesday=workday,
        thursday=workday,
        friday=workday,
        sunday=DayAvailability(start="10:00", end="14:00", available=False),
    )


@pytest.fixture
def test_tutor(db, weekday_template) -> str:
    """A tutor with the weekday template saved."""
    AvailabilityService(db).save_weekly_template(TUTOR_ID, weekday_template)
    return TUTOR_ID
