"""SQLAlchemy database models for fluidplan."""

from datetime import datetime
from typing import Type, TypeVar, Union
import uuid
from sqlalchemy import Column, String, Integer, Float, Boolean, DateTime, JSON

from fluidplan.database.database import Base
from fluidplan.models.constants import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_DURATION_MINUTES,
    DEFAULT_MAX_CONSECUTIVE_HOURS,
    DEFAULT_MIN_BREAK_DURATION,
    DEFAULT_WORK_DAYS,
    DEFAULT_WORK_HOUR_END,
    DEFAULT_WORK_HOUR_START,
)
from fluidplan.models.interval import TimeInterval
from fluidplan.models.placement import AutoPlaced, Locked, Unscheduled
from fluidplan.models.task import EnergyLevel, Priority, TaskStatus, TimePreference

T = TypeVar('T')


def enum_to_value(enum_obj: Union[str, T, None]) -> Union[str, None]:
    """Convert enum to string value (handles both enum and string).

    Args:
        enum_obj: Enum instance, string value, or None

    Returns:
        String value of the enum, the string itself, or None
    """
    if enum_obj is None:
        return None
    if hasattr(enum_obj, 'value'):
        return enum_obj.value
    return str(enum_obj)


def value_to_enum(value: str, enum_class: Type[T], default: T) -> T:
    """Convert string to enum with fallback to default.

    Args:
        value: String value to convert
        enum_class: Enum class to convert to
        default: Default enum value if conversion fails

    Returns:
        Enum instance, or default if conversion fails
    """
    if not value:
        return default
    try:
        return enum_class(value.lower())
    except (ValueError, AttributeError):
        return default


class TaskDB(Base):
    """Database model for Task."""

    __tablename__ = "tasks"

    # Primary key
    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))

    # User association
    user_id = Column(String, nullable=False, index=True)

    # Basic fields
    title = Column(String, nullable=False)
    status = Column(String, nullable=False, default=TaskStatus.TODO.value)

    # Timestamps
    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Scheduling inputs
    duration = Column(Integer, nullable=False, default=DEFAULT_DURATION_MINUTES)
    priority = Column(String, nullable=True)
    energy_level = Column(String, nullable=True)
    preferred_time = Column(String, nullable=True)
    due_date = Column(DateTime, nullable=True)
    start_date = Column(DateTime, nullable=True)

    # Recurrence (carried through, not used for placement)
    is_recurring = Column(Boolean, nullable=False, default=False)
    recurrence_rule = Column(String, nullable=True)

    # Scheduling outputs
    is_auto_scheduled = Column(Boolean, nullable=False, default=False, index=True)
    schedule_locked = Column(Boolean, nullable=False, default=False, index=True)
    scheduled_start = Column(DateTime, nullable=True)
    scheduled_end = Column(DateTime, nullable=True)
    schedule_score = Column(Float, nullable=True)
    last_scheduled = Column(DateTime, nullable=True)

    def to_pydantic(self):
        """Convert database model to Pydantic model."""
        from fluidplan.models.task import Task

        return Task(
            id=self.id,
            user_id=self.user_id,
            title=self.title,
            status=value_to_enum(self.status, TaskStatus, TaskStatus.TODO),
            created_at=self.created_at,
            updated_at=self.updated_at,
            duration=self.duration if self.duration is not None else DEFAULT_DURATION_MINUTES,
            priority=value_to_enum(self.priority, Priority, None),
            energy_level=value_to_enum(self.energy_level, EnergyLevel, None),
            preferred_time=value_to_enum(self.preferred_time, TimePreference, None),
            due_date=self.due_date,
            start_date=self.start_date,
            is_recurring=bool(self.is_recurring),
            recurrence_rule=self.recurrence_rule,
            is_auto_scheduled=bool(self.is_auto_scheduled),
            placement=self._placement(),
            last_scheduled=self.last_scheduled,
        )

    def _placement(self):
        if self.scheduled_start is None or self.scheduled_end is None:
            return Unscheduled()
        interval = TimeInterval(start=self.scheduled_start, end=self.scheduled_end)
        if self.schedule_locked:
            return Locked(interval=interval)
        return AutoPlaced(interval=interval, score=self.schedule_score or 0.0)

    def apply_placement(self, task) -> None:
        """Copy the task's scheduling fields onto this row."""
        self.scheduled_start = task.scheduled_start
        self.scheduled_end = task.scheduled_end
        self.schedule_score = task.schedule_score
        self.last_scheduled = task.last_scheduled

    @classmethod
    def from_pydantic(cls, task):
        """Create database model from Pydantic model."""
        return cls(
            id=task.id,
            user_id=task.user_id,
            title=task.title,
            status=enum_to_value(task.status),
            created_at=task.created_at,
            updated_at=task.updated_at,
            duration=task.duration,
            priority=enum_to_value(task.priority),
            energy_level=enum_to_value(task.energy_level),
            preferred_time=enum_to_value(task.preferred_time),
            due_date=task.due_date,
            start_date=task.start_date,
            is_recurring=task.is_recurring,
            recurrence_rule=task.recurrence_rule,
            is_auto_scheduled=task.is_auto_scheduled,
            schedule_locked=task.schedule_locked,
            scheduled_start=task.scheduled_start,
            scheduled_end=task.scheduled_end,
            schedule_score=task.schedule_score,
            last_scheduled=task.last_scheduled,
        )


class AutoScheduleSettingsDB(Base):
    """Database model for per-user auto-schedule settings."""

    __tablename__ = "auto_schedule_settings"

    id = Column(String, primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String, nullable=False, unique=True, index=True)

    work_days = Column(JSON, nullable=False, default=lambda: list(DEFAULT_WORK_DAYS))
    work_hour_start = Column(Integer, nullable=False, default=DEFAULT_WORK_HOUR_START)
    work_hour_end = Column(Integer, nullable=False, default=DEFAULT_WORK_HOUR_END)
    buffer_minutes = Column(Integer, nullable=False, default=DEFAULT_BUFFER_MINUTES)

    high_energy_start = Column(Integer, nullable=True)
    high_energy_end = Column(Integer, nullable=True)
    medium_energy_start = Column(Integer, nullable=True)
    medium_energy_end = Column(Integer, nullable=True)
    low_energy_start = Column(Integer, nullable=True)
    low_energy_end = Column(Integer, nullable=True)

    enforce_breaks = Column(Boolean, nullable=False, default=True)
    min_break_duration = Column(Integer, nullable=False, default=DEFAULT_MIN_BREAK_DURATION)
    max_consecutive_hours = Column(Float, nullable=False, default=DEFAULT_MAX_CONSECUTIVE_HOURS)
    enable_suggestions = Column(Boolean, nullable=False, default=True)

    created_at = Column(DateTime, nullable=False, default=datetime.utcnow)
    updated_at = Column(DateTime, nullable=False, default=datetime.utcnow, onupdate=datetime.utcnow)

    _POLICY_FIELDS = (
        "work_days",
        "work_hour_start",
        "work_hour_end",
        "buffer_minutes",
        "high_energy_start",
        "high_energy_end",
        "medium_energy_start",
        "medium_energy_end",
        "low_energy_start",
        "low_energy_end",
        "enforce_breaks",
        "min_break_duration",
        "max_consecutive_hours",
        "enable_suggestions",
    )

    def to_pydantic(self):
        """Convert database model to Pydantic model (validates the policy)."""
        from fluidplan.models.settings import AutoScheduleSettings

        values = {name: getattr(self, name) for name in self._POLICY_FIELDS}
        return AutoScheduleSettings(user_id=self.user_id, **values)

    def apply(self, settings) -> None:
        """Copy policy fields from a Pydantic settings model onto this row."""
        for name in self._POLICY_FIELDS:
            setattr(self, name, getattr(settings, name))
