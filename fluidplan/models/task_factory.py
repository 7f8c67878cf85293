"""Task creation factory for fluidplan.

This module centralizes task creation logic to ensure consistent default
values across the application.
"""

import uuid
from datetime import datetime
from typing import Any, Dict, Optional

from fluidplan.models.constants import DEFAULT_DURATION_MINUTES
from fluidplan.models.interval import TimeInterval
from fluidplan.models.placement import Locked, Unscheduled
from fluidplan.models.task import Task, TaskStatus


def create_task_defaults() -> Dict[str, Any]:
    """Get default task values as a dictionary.

    Returns:
        Dictionary with default task field values using constants
    """
    return {
        "status": TaskStatus.TODO,
        "duration": DEFAULT_DURATION_MINUTES,
        "priority": None,
        "energy_level": None,
        "preferred_time": None,
        "due_date": None,
        "start_date": None,
        "is_recurring": False,
        "recurrence_rule": None,
        "is_auto_scheduled": True,
    }


def create_task_base(
    user_id: str,
    title: str,
    duration: Optional[int] = None,
    priority: Optional[Any] = None,
    energy_level: Optional[Any] = None,
    preferred_time: Optional[Any] = None,
    due_date: Optional[datetime] = None,
    start_date: Optional[datetime] = None,
    is_recurring: Optional[bool] = None,
    recurrence_rule: Optional[str] = None,
    is_auto_scheduled: Optional[bool] = None,
    locked_interval: Optional[TimeInterval] = None,
) -> Task:
    """Create a task with defaults, allowing overrides.

    Args:
        user_id: User ID who owns this task (required)
        title: Task title (required)
        duration: Duration in minutes (defaults to constant)
        priority: Task priority
        energy_level: Energy the task demands
        preferred_time: Preferred time of day
        due_date: Latest allowed end of the task
        start_date: Do not schedule before this moment
        is_recurring: Whether the task recurs
        recurrence_rule: RRULE string for recurring tasks
        is_auto_scheduled: Whether the engine may place this task (defaults to True)
        locked_interval: If given, the task is created locked to this interval

    Returns:
        Task object with defaults applied
    """
    now = datetime.utcnow()
    defaults = create_task_defaults()

    overrides = {
        "duration": duration,
        "priority": priority,
        "energy_level": energy_level,
        "preferred_time": preferred_time,
        "due_date": due_date,
        "start_date": start_date,
        "is_recurring": is_recurring,
        "recurrence_rule": recurrence_rule,
        "is_auto_scheduled": is_auto_scheduled,
    }
    fields = {key: (value if value is not None else defaults[key]) for key, value in overrides.items()}

    placement = Locked(interval=locked_interval) if locked_interval is not None else Unscheduled()

    return Task(
        id=str(uuid.uuid4()),
        user_id=user_id,
        title=title,
        status=defaults["status"],
        placement=placement,
        created_at=now,
        updated_at=now,
        **fields,
    )
