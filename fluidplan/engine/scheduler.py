"""Scheduling algorithm for fluidplan.

Places auto-scheduled tasks into free time one at a time. For each task the
engine scans forward day by day, generates candidate start times on a fixed
grid within work hours, drops candidates that break a hard constraint, and
keeps the highest-scoring survivor. The first day with any valid candidate
wins; later days are not examined.

This is a greedy heuristic, not an optimal solver.
"""

import logging
from datetime import date, datetime, timedelta
from typing import Dict, Iterable, List, Optional

from fluidplan.config import get_granularity_minutes, get_lookahead_days
from fluidplan.engine.ranking import rank_for_placement
from fluidplan.engine.scoring import score_slot
from fluidplan.models.interval import TimeInterval
from fluidplan.models.placement import AutoPlaced
from fluidplan.models.settings import AutoScheduleSettings
from fluidplan.models.task import Task

logger = logging.getLogger(__name__)


class SchedulingResult:
    """Result of scheduling operation."""

    def __init__(self):
        self.tasks: List[Task] = []
        self.placed: List[Task] = []
        self.unplaced: List[Task] = []
        self.start_time: Optional[datetime] = None


def schedule_multiple_tasks(
    tasks: List[Task],
    locked_tasks: List[Task],
    settings: AutoScheduleSettings,
    busy_intervals: Optional[Iterable[TimeInterval]] = None,
    now: Optional[datetime] = None,
    granularity_minutes: Optional[int] = None,
    lookahead_days: Optional[int] = None,
) -> SchedulingResult:
    """Place every schedulable task in `tasks`.

    Locked tasks (from either list) and `busy_intervals` are treated as
    immovable busy time. Tasks that are not schedulable are returned
    unchanged. A task with no valid slot is left unscheduled and reported in
    `unplaced`; it does not stop the rest of the batch.

    Args:
        tasks: Tasks to place (and any others, which pass through)
        locked_tasks: Tasks whose locked intervals must be avoided
        settings: Scheduling policy for the user
        busy_intervals: Calendar commitments to avoid
        now: Earliest moment to schedule from (defaults to now)
        granularity_minutes: Spacing of candidate start times
        lookahead_days: Search horizon for tasks without a due date

    Returns:
        SchedulingResult with all tasks (input order), placed and unplaced tasks

    Raises:
        ValueError: if settings are missing or a schedulable task has a non-positive duration
    """
    if settings is None:
        raise ValueError("Auto-schedule settings are required to schedule tasks")

    result = SchedulingResult()

    if now is None:
        now = datetime.utcnow()
    if granularity_minutes is None:
        granularity_minutes = get_granularity_minutes()
    if lookahead_days is None:
        lookahead_days = get_lookahead_days()
    if granularity_minutes <= 0:
        raise ValueError(f"granularity_minutes must be positive, got {granularity_minutes}")

    result.start_time = now

    candidates = [task for task in tasks if task.is_schedulable]
    for task in candidates:
        if task.duration <= 0:
            raise ValueError(f"Task {task.id} has invalid duration {task.duration}; must be positive")

    occupied: List[TimeInterval] = list(busy_intervals or [])
    for task in list(locked_tasks) + list(tasks):
        if task.schedule_locked:
            occupied.append(task.scheduled_interval)

    logger.info(
        f"Scheduling {len(candidates)} tasks around {len(occupied)} busy intervals "
        f"(granularity {granularity_minutes} min)"
    )

    updated: Dict[str, Task] = {}
    for task in rank_for_placement(candidates):
        cleared = task.cleared()
        found = find_best_slot(cleared, settings, occupied, now, granularity_minutes, lookahead_days)

        if found is None:
            logger.warning(f"No valid slot for task {task.id}: {task.title[:50]}")
            result.unplaced.append(cleared)
            updated[task.id] = cleared
            continue

        interval, score = found
        placed = cleared.with_placement(AutoPlaced(interval=interval, score=score)).model_copy(
            update={"last_scheduled": now}
        )
        occupied.append(interval)
        result.placed.append(placed)
        updated[task.id] = placed
        logger.debug(f"Placed task {task.id} at {interval.start.isoformat()} (score {score})")

    result.tasks = [updated.get(task.id, task) for task in tasks]

    logger.info(f"Placed {len(result.placed)} tasks, {len(result.unplaced)} left unplaced")
    return result


def find_best_slot(
    task: Task,
    settings: AutoScheduleSettings,
    occupied: List[TimeInterval],
    now: datetime,
    granularity_minutes: int,
    lookahead_days: int,
) -> Optional[tuple]:
    """Find the best (interval, score) for `task`, or None if nothing fits.

    Days are searched in order; the first day with at least one valid
    candidate is used. Within that day the highest score wins and ties go to
    the earliest start.
    """
    earliest = now
    if task.start_date and task.start_date > earliest:
        earliest = task.start_date

    if task.due_date is not None:
        if task.due_date <= earliest:
            return None
        last_day = task.due_date.date()
    else:
        last_day = earliest.date() + timedelta(days=lookahead_days)

    day = earliest.date()
    while day <= last_day:
        if settings.is_work_day(day):
            best = _best_slot_on_day(task, settings, occupied, day, earliest, granularity_minutes)
            if best is not None:
                return best
        day += timedelta(days=1)

    return None


def _best_slot_on_day(
    task: Task,
    settings: AutoScheduleSettings,
    occupied: List[TimeInterval],
    day: date,
    earliest: datetime,
    granularity_minutes: int,
) -> Optional[tuple]:
    work = settings.work_window(day)
    duration = timedelta(minutes=task.duration)
    step = timedelta(minutes=granularity_minutes)

    # Only busy time near this day can conflict.
    nearby = [
        busy.expanded_by(settings.buffer_minutes)
        for busy in occupied
        if busy.end > work.start - timedelta(minutes=settings.buffer_minutes)
        and busy.start < work.end + timedelta(minutes=settings.buffer_minutes)
    ]

    best_interval: Optional[TimeInterval] = None
    best_score = float("-inf")

    start = work.start
    while start + duration <= work.end:
        if start >= earliest:
            candidate = TimeInterval(start=start, end=start + duration)
            if _is_valid(candidate, task, nearby):
                score = score_slot(start, task, settings)
                if score > best_score:
                    best_interval, best_score = candidate, score
        start += step

    if best_interval is None:
        return None
    return best_interval, best_score


def _is_valid(candidate: TimeInterval, task: Task, padded_busy: List[TimeInterval]) -> bool:
    if task.due_date is not None and candidate.end > task.due_date:
        return False
    return not any(candidate.overlaps(busy) for busy in padded_busy)

