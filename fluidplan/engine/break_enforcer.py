"""Break enforcement for fluidplan.

Reshapes a placed schedule so it satisfies the break policy by pushing tasks
later. A single forward sweep over the auto-placed tasks accumulates an
offset; every task after an inserted break moves by the running total.
Tasks never move earlier and their relative order never changes.

Locked tasks are left out of the sweep entirely. Shifted tasks are not
re-checked against calendar busy time or work hours; callers that care must
check the result (see ``services.task_scheduling``).
"""

import logging
from datetime import timedelta
from typing import Dict, List

from fluidplan.engine.breaks import scheduled_in_order
from fluidplan.models.constants import LONG_BREAK_MULTIPLIER
from fluidplan.models.placement import AutoPlaced
from fluidplan.models.settings import AutoScheduleSettings
from fluidplan.models.task import Task

logger = logging.getLogger(__name__)


def enforce_breaks_in_schedule(tasks: List[Task], settings: AutoScheduleSettings) -> List[Task]:
    """Insert breaks into a schedule by shifting tasks forward.

    After each task, a break is required when:
    (a) the gap to the next task is shorter than ``min_break_duration`` (tasks
        that already overlap are left alone), or
    (b) the running work block has reached ``max_consecutive_hours``, in which
        case the break must be at least twice ``min_break_duration`` and the
        block restarts.
    The offset grows by whatever the larger requirement lacks.

    Args:
        tasks: Tasks with placements (others pass through unchanged)
        settings: Break policy

    Returns:
        New task list in input order with adjusted placements
    """
    logger.info(f"Enforcing breaks in schedule for {len(tasks)} tasks")

    if not settings.enforce_breaks:
        return list(tasks)

    chain = [t for t in scheduled_in_order(tasks) if not t.schedule_locked]
    if not chain:
        return list(tasks)

    min_break = settings.min_break_duration
    long_break = min_break * LONG_BREAK_MULTIPLIER
    block_limit = settings.max_consecutive_minutes

    offset_minutes = 0.0
    block_minutes = 0
    adjusted: Dict[str, Task] = {}

    for index, task in enumerate(chain):
        shifted = _shift(task, offset_minutes)
        adjusted[task.id] = shifted
        block_minutes += task.duration

        if index == len(chain) - 1:
            break

        following = chain[index + 1]
        next_start = following.scheduled_start + timedelta(minutes=offset_minutes)
        gap = (next_start - shifted.scheduled_end).total_seconds() / 60

        required = min_break if 0 <= gap < min_break else 0
        if block_minutes >= block_limit:
            required = max(required, long_break)
            block_minutes = 0
        elif gap >= min_break:
            # Natural break already ends the block.
            block_minutes = 0

        if required > gap:
            offset_minutes += required - gap

    logger.info(f"Enforced breaks, total offset: {offset_minutes:g} minutes")
    return [adjusted.get(task.id, task) for task in tasks]


def _shift(task: Task, offset_minutes: float) -> Task:
    if offset_minutes <= 0:
        return task
    placement = task.placement
    return task.with_placement(
        AutoPlaced(interval=placement.interval.shifted_by(offset_minutes), score=placement.score)
    )
