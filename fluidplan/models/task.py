"""Task data model for fluidplan."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from fluidplan.models.constants import DEFAULT_DURATION_MINUTES
from fluidplan.models.interval import TimeInterval
from fluidplan.models.placement import AutoPlaced, Locked, Placement, Unscheduled


class TaskStatus(str, Enum):
    """Task status enumeration."""
    TODO = "todo"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class Priority(str, Enum):
    """Task priority enumeration."""
    NONE = "none"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class EnergyLevel(str, Enum):
    """Energy a task demands."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TimePreference(str, Enum):
    """Preferred time of day for a task."""
    MORNING = "morning"
    AFTERNOON = "afternoon"
    EVENING = "evening"


# Statuses that take a task out of the scheduling pool
UNSCHEDULABLE_STATUSES = (TaskStatus.COMPLETED, TaskStatus.IN_PROGRESS)


class Task(BaseModel):
    """Canonical Task model."""

    id: str = Field(..., description="Unique task identifier (UUID v4)")
    user_id: str = Field(..., description="User ID who owns this task")
    title: str = Field(..., description="Task title")
    status: TaskStatus = Field(TaskStatus.TODO, description="Task status")
    duration: int = Field(DEFAULT_DURATION_MINUTES, description="Duration in minutes")
    priority: Optional[Priority] = Field(None, description="Task priority")
    energy_level: Optional[EnergyLevel] = Field(None, description="Energy the task demands")
    preferred_time: Optional[TimePreference] = Field(None, description="Preferred time of day")
    due_date: Optional[datetime] = Field(None, description="Latest allowed end of the task")
    start_date: Optional[datetime] = Field(None, description="Do not schedule before this moment")
    is_recurring: bool = Field(False, description="Whether the task recurs")
    recurrence_rule: Optional[str] = Field(None, description="RRULE string for recurring tasks")
    is_auto_scheduled: bool = Field(False, description="Whether the engine may place this task")
    placement: Placement = Field(default_factory=Unscheduled, description="Where the task sits on the timeline")
    last_scheduled: Optional[datetime] = Field(None, description="When the engine last placed this task")
    created_at: datetime = Field(default_factory=datetime.utcnow, description="Task creation timestamp")
    updated_at: datetime = Field(default_factory=datetime.utcnow, description="Task last update timestamp")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True

    @property
    def scheduled_interval(self) -> Optional[TimeInterval]:
        if isinstance(self.placement, (Locked, AutoPlaced)):
            return self.placement.interval
        return None

    @property
    def scheduled_start(self) -> Optional[datetime]:
        interval = self.scheduled_interval
        return interval.start if interval else None

    @property
    def scheduled_end(self) -> Optional[datetime]:
        interval = self.scheduled_interval
        return interval.end if interval else None

    @property
    def schedule_score(self) -> Optional[float]:
        if isinstance(self.placement, AutoPlaced):
            return self.placement.score
        return None

    @property
    def schedule_locked(self) -> bool:
        return isinstance(self.placement, Locked)

    @property
    def is_schedulable(self) -> bool:
        """Auto-scheduled, not locked, and not completed or in progress."""
        return (
            self.is_auto_scheduled
            and not self.schedule_locked
            and self.status not in UNSCHEDULABLE_STATUSES
        )

    def with_placement(self, placement) -> "Task":
        """Return a copy carrying `placement`.

        Raises:
            ValueError: if the task is locked and `placement` differs from the lock
        """
        if self.schedule_locked and placement != self.placement:
            raise ValueError(f"Task {self.id} is schedule-locked; its placement cannot be changed")
        return self.model_copy(update={"placement": placement})

    def cleared(self) -> "Task":
        """Return a copy with no placement (locked tasks are returned as-is)."""
        if self.schedule_locked:
            return self
        return self.model_copy(update={"placement": Unscheduled()})
