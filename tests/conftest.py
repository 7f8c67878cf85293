"""Pytest fixtures and configuration for fluidplan tests."""

import pytest
from datetime import datetime, timedelta
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker, Session
from sqlalchemy.pool import StaticPool
import uuid

from fluidplan.database.database import Base
from fluidplan.database import models  # noqa: F401  (registers tables)
from fluidplan.database.repository import TaskRepository
from fluidplan.database.settings_repository import AutoScheduleSettingsRepository
from fluidplan.models.interval import TimeInterval
from fluidplan.models.placement import AutoPlaced, Locked, Unscheduled
from fluidplan.models.settings import AutoScheduleSettings
from fluidplan.models.task import Task, TaskStatus


# Use in-memory SQLite database for tests
TEST_DATABASE_URL = "sqlite:///:memory:"

# Monday
MONDAY = datetime(2026, 3, 2)


@pytest.fixture(scope="function")
def db_session():
    """Create a database session for testing.

    Uses an in-memory SQLite database that is created fresh for each test.
    """
    engine = create_engine(
        TEST_DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=False
    )

    Base.metadata.create_all(bind=engine)

    TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)
    session = TestingSessionLocal()

    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def task_repository(db_session: Session):
    """Create a TaskRepository instance for testing."""
    return TaskRepository(db_session)


@pytest.fixture
def settings_repository(db_session: Session):
    """Create an AutoScheduleSettingsRepository instance for testing."""
    return AutoScheduleSettingsRepository(db_session)


@pytest.fixture
def test_user_id():
    """Test user ID for multi-user testing."""
    return "test-user-123"


@pytest.fixture
def monday():
    """Midnight at the start of Monday 2026-03-02."""
    return MONDAY


@pytest.fixture
def settings():
    """Mon-Fri 9-17 policy with no buffer and no energy windows."""
    return AutoScheduleSettings(
        work_days=[1, 2, 3, 4, 5],
        work_hour_start=9,
        work_hour_end=17,
        buffer_minutes=0,
        max_consecutive_hours=3,
        min_break_duration=10,
        enforce_breaks=True,
    )


@pytest.fixture
def sample_task_base(test_user_id):
    """Base task data for creating test tasks.

    Returns a dict with default task attributes that can be overridden.
    """
    now = datetime(2026, 3, 1, 12, 0, 0)
    return {
        "id": str(uuid.uuid4()),
        "user_id": test_user_id,
        "title": "Test Task",
        "status": TaskStatus.TODO,
        "duration": 60,
        "priority": None,
        "energy_level": None,
        "preferred_time": None,
        "due_date": None,
        "start_date": None,
        "is_recurring": False,
        "recurrence_rule": None,
        "is_auto_scheduled": True,
        "placement": Unscheduled(),
        "created_at": now,
        "updated_at": now,
    }


@pytest.fixture
def sample_task(sample_task_base):
    """Create a sample Task object for testing."""
    return Task(**sample_task_base)


@pytest.fixture
def make_task(sample_task_base):
    """Factory for tasks built on sample_task_base."""
    def _make(**overrides):
        return Task(**{**sample_task_base, "id": str(uuid.uuid4()), **overrides})
    return _make


@pytest.fixture
def placed_task(make_task):
    """Factory for auto-placed tasks: placed_task(start, minutes, **overrides)."""
    def _placed(start: datetime, minutes: int, **overrides):
        interval = TimeInterval(start=start, end=start + timedelta(minutes=minutes))
        return make_task(duration=minutes, placement=AutoPlaced(interval=interval, score=0.5), **overrides)
    return _placed


@pytest.fixture
def locked_task(make_task):
    """Factory for locked tasks: locked_task(start, minutes, **overrides)."""
    def _locked(start: datetime, minutes: int, **overrides):
        interval = TimeInterval(start=start, end=start + timedelta(minutes=minutes))
        return make_task(duration=minutes, placement=Locked(interval=interval), **overrides)
    return _locked
