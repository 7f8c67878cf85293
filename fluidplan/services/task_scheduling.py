"""Task scheduling service for fluidplan.

Runs a full "reschedule all" for one user: resolve settings, fetch candidate
and locked tasks, place tasks, optionally enforce breaks, audit the result,
then clear stale placements and persist the new ones.

A run reads, clears and rewrites the user's task rows, so two runs for the
same user must not interleave. Each run holds a per-user lock for its whole
duration; runs for different users proceed independently.
"""

import logging
import threading
import weakref
from datetime import datetime
from typing import Iterable, List, Optional

from sqlalchemy.orm import Session

from fluidplan.database.repository import TaskRepository
from fluidplan.database.settings_repository import AutoScheduleSettingsRepository
from fluidplan.engine.break_enforcer import enforce_breaks_in_schedule
from fluidplan.engine.breaks import (
    get_break_compliance_score,
    suggest_breaks,
    validate_schedule_breaks,
)
from fluidplan.engine.scheduler import schedule_multiple_tasks
from fluidplan.models.breaks import BreakSuggestion, BreakViolation
from fluidplan.models.interval import TimeInterval
from fluidplan.models.settings import AutoScheduleSettings
from fluidplan.models.task import Task

logger = logging.getLogger(__name__)

# Entries vanish once no run holds the lock.
_user_locks: "weakref.WeakValueDictionary[str, threading.Lock]" = weakref.WeakValueDictionary()
_user_locks_guard = threading.Lock()


def _get_user_lock(user_id: str) -> threading.Lock:
    """Get or create the lock serializing reschedule runs for a user."""
    with _user_locks_guard:
        lock = _user_locks.get(user_id)
        if lock is None:
            lock = threading.Lock()
            _user_locks[user_id] = lock
        return lock


class RescheduleResult:
    """Result of a full reschedule run.

    The three conflict lists hold ids of auto-placed tasks that break
    enforcement pushed onto busy time, past their due date, or outside
    work hours. They are reported, not repaired.
    """

    def __init__(self):
        self.tasks: List[Task] = []
        self.unplaced: List[Task] = []
        self.violations: List[BreakViolation] = []
        self.suggestions: List[BreakSuggestion] = []
        self.compliance_score: int = 100
        self.busy_conflicts: List[str] = []
        self.due_date_overruns: List[str] = []
        self.work_hour_overruns: List[str] = []


def reschedule_tasks(
    tasks_to_schedule: List[Task],
    locked_tasks: List[Task],
    settings: AutoScheduleSettings,
    busy_intervals: Optional[Iterable[TimeInterval]] = None,
    now: Optional[datetime] = None,
) -> RescheduleResult:
    """In-memory reschedule pipeline (no persistence).

    Args:
        tasks_to_schedule: Candidate tasks; their placements are cleared first
        locked_tasks: Tasks whose locked intervals stay fixed
        settings: Scheduling policy for the user
        busy_intervals: Calendar commitments to avoid
        now: Earliest moment to schedule from

    Returns:
        RescheduleResult with scheduled tasks first, then locked tasks
    """
    busy = list(busy_intervals or [])
    cleared = [task.cleared() for task in tasks_to_schedule]

    scheduling = schedule_multiple_tasks(cleared, locked_tasks, settings, busy, now=now)
    timeline = scheduling.tasks + list(locked_tasks)

    if settings.enforce_breaks:
        timeline = enforce_breaks_in_schedule(timeline, settings)

    result = RescheduleResult()
    result.tasks = timeline
    unplaced_ids = {task.id for task in scheduling.unplaced}
    result.unplaced = [task for task in timeline if task.id in unplaced_ids]
    result.violations = validate_schedule_breaks(timeline, settings)
    result.suggestions = suggest_breaks(timeline, settings)
    result.compliance_score = get_break_compliance_score(timeline, settings)
    result.busy_conflicts = find_busy_conflicts(timeline, busy)
    result.due_date_overruns = find_due_date_overruns(timeline)
    result.work_hour_overruns = find_work_hour_overruns(timeline, settings)

    if result.busy_conflicts:
        logger.warning(
            f"Break enforcement moved {len(result.busy_conflicts)} tasks onto busy calendar time: "
            f"{', '.join(result.busy_conflicts)}"
        )
    if result.due_date_overruns:
        logger.warning(
            f"Break enforcement moved {len(result.due_date_overruns)} tasks past their due date: "
            f"{', '.join(result.due_date_overruns)}"
        )
    if result.work_hour_overruns:
        logger.warning(
            f"Break enforcement moved {len(result.work_hour_overruns)} tasks outside work hours: "
            f"{', '.join(result.work_hour_overruns)}"
        )
    return result


def _auto_placed(tasks: List[Task]) -> List[Task]:
    return [task for task in tasks if task.scheduled_interval is not None and not task.schedule_locked]


def find_busy_conflicts(tasks: List[Task], busy_intervals: List[TimeInterval]) -> List[str]:
    """IDs of auto-placed tasks that overlap a busy interval."""
    return [
        task.id
        for task in _auto_placed(tasks)
        if any(task.scheduled_interval.overlaps(busy) for busy in busy_intervals)
    ]


def find_due_date_overruns(tasks: List[Task]) -> List[str]:
    """IDs of auto-placed tasks that end after their due date."""
    return [
        task.id
        for task in _auto_placed(tasks)
        if task.due_date is not None and task.scheduled_end > task.due_date
    ]


def find_work_hour_overruns(tasks: List[Task], settings: AutoScheduleSettings) -> List[str]:
    """IDs of auto-placed tasks not fully inside a work day's hours."""
    overruns = []
    for task in _auto_placed(tasks):
        day = task.scheduled_start.date()
        window = settings.work_window(day)
        inside = (
            settings.is_work_day(day)
            and window.start <= task.scheduled_start
            and task.scheduled_end <= window.end
        )
        if not inside:
            overruns.append(task.id)
    return overruns


class TaskSchedulingService:
    """Reschedules all of a user's auto-scheduled tasks against storage."""

    def __init__(self, db: Session):
        self.task_repository = TaskRepository(db)
        self.settings_repository = AutoScheduleSettingsRepository(db)

    def schedule_all_tasks_for_user(
        self,
        user_id: str,
        busy_intervals: Optional[Iterable[TimeInterval]] = None,
        now: Optional[datetime] = None,
    ) -> RescheduleResult:
        """Reschedule and persist every auto-scheduled task for `user_id`.

        Storage is only written once the new schedule has been computed, so
        a run that fails leaves the stored placements as they were.

        Args:
            user_id: Owner of the tasks
            busy_intervals: Calendar commitments, already expanded and normalized
            now: Earliest moment to schedule from (defaults to now)

        Returns:
            RescheduleResult for the run
        """
        if now is None:
            now = datetime.utcnow()

        with _get_user_lock(user_id):
            try:
                logger.info(f"Starting task scheduling for user {user_id}")

                settings = self.settings_repository.get_or_create(user_id)
                tasks_to_schedule = self.task_repository.get_schedulable(user_id)
                locked_tasks = self.task_repository.get_locked(user_id)

                logger.info(
                    f"Found {len(tasks_to_schedule)} tasks to schedule and "
                    f"{len(locked_tasks)} locked tasks for user {user_id}"
                )

                result = reschedule_tasks(tasks_to_schedule, locked_tasks, settings, busy_intervals, now=now)

                self.task_repository.clear_schedules(user_id, [task.id for task in tasks_to_schedule])
                self.task_repository.save_schedules(result.tasks)

                logger.info(
                    f"Task scheduling completed for user {user_id}: "
                    f"{len(tasks_to_schedule) - len(result.unplaced)} placed, "
                    f"{len(result.unplaced)} unplaced, compliance {result.compliance_score}"
                )
                return result
            except Exception as e:
                logger.error(f"Error scheduling tasks for user {user_id}: {type(e).__name__}: {str(e)}")
                raise
