"""Placement ordering for fluidplan.

Sorts tasks so that urgent, high-priority, short tasks are placed first,
giving later tasks the best remaining chance of a good slot.
"""

from datetime import datetime
from typing import List

from fluidplan.models.task import Priority, Task


_PRIORITY_RANK = {
    Priority.NONE: 0,
    Priority.LOW: 1,
    Priority.MEDIUM: 2,
    Priority.HIGH: 3,
}


def priority_rank(task: Task) -> int:
    """Ordinal rank of a task's priority (higher = more important)."""
    if task.priority is None:
        return 0
    return _PRIORITY_RANK[Priority(task.priority)]


def rank_for_placement(tasks: List[Task]) -> List[Task]:
    """Order tasks for placement.

    Tasks are sorted:
    1. By due date, earliest first (tasks without a due date go last)
    2. By priority, highest first
    3. By duration, shortest first

    The sort is stable, so ties keep their input order. This function is
    deterministic - same inputs always produce same outputs.
    """
    return sorted(tasks, key=_placement_sort_key)


def _placement_sort_key(task: Task) -> tuple:
    if task.due_date:
        due_key = (0, task.due_date)
    else:
        due_key = (1, datetime.max)
    return (due_key, -priority_rank(task), task.duration)
