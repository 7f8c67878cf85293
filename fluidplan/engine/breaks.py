"""Break protection audit for fluidplan.

Checks a placed schedule against the user's break policy and reports
violations and suggested breaks. Violations are always returned as data;
an out-of-compliance schedule is a valid outcome, not an error.
"""

import logging
import math
from datetime import date, datetime
from itertools import groupby
from typing import List, Optional

from fluidplan.models.breaks import (
    BreakSuggestion,
    BreakSuggestionType,
    BreakViolation,
    BreakViolationType,
    Severity,
)
from fluidplan.models.constants import (
    HIGH_SEVERITY_BLOCK_RATIO,
    HIGH_SEVERITY_GAP_MINUTES,
    LONG_BREAK_MULTIPLIER,
    LUNCH_MIN_GAP_MINUTES,
    LUNCH_SUGGESTED_DURATION,
    LUNCH_SUGGESTED_TIME,
    LUNCH_WINDOW_END,
    LUNCH_WINDOW_START,
)
from fluidplan.models.settings import AutoScheduleSettings
from fluidplan.models.task import Task

logger = logging.getLogger(__name__)

_SEVERITY_WEIGHTS = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
}

_PRIORITY_ORDER = {
    Severity.HIGH: 0,
    Severity.MEDIUM: 1,
    Severity.LOW: 2,
}


def scheduled_in_order(tasks: List[Task]) -> List[Task]:
    """Tasks with both start and end set, sorted by start (stable)."""
    scheduled = [t for t in tasks if t.scheduled_start is not None and t.scheduled_end is not None]
    return sorted(scheduled, key=lambda t: t.scheduled_start)


def round_half_up(value: float) -> int:
    """Round to the nearest integer with halves going up (62.5 -> 63)."""
    return int(math.floor(value + 0.5))


def _gap_minutes(previous: Task, following: Task) -> float:
    return (following.scheduled_start - previous.scheduled_end).total_seconds() / 60


def validate_schedule_breaks(tasks: List[Task], settings: AutoScheduleSettings) -> List[BreakViolation]:
    """Find break-policy violations in a placed schedule.

    Three rules are checked, and their findings are returned in this order
    without deduplication (a task may appear in several violations):

    1. insufficient_break: adjacent tasks separated by less than
       ``min_break_duration`` (overlaps are ignored).
    2. too_long_continuous: a work block (tasks chained by gaps shorter than
       ``min_break_duration``) whose summed duration exceeds
       ``max_consecutive_hours``.
    3. no_lunch_break: two or more tasks starting between 11:30 and 13:30 on
       a day with no 30-minute gap among them.

    Args:
        tasks: Tasks to audit; unscheduled ones are ignored
        settings: Break policy

    Returns:
        List of violations (empty for an empty schedule)
    """
    logger.info(f"Validating schedule breaks for {len(tasks)} tasks")

    scheduled = scheduled_in_order(tasks)
    if not scheduled:
        return []

    violations: List[BreakViolation] = []
    violations.extend(_insufficient_breaks(scheduled, settings))
    violations.extend(_continuous_work_blocks(scheduled, settings))
    violations.extend(_missing_lunch_breaks(scheduled))

    logger.info(f"Found {len(violations)} break violations")
    return violations


def _insufficient_breaks(scheduled: List[Task], settings: AutoScheduleSettings) -> List[BreakViolation]:
    violations = []
    for current, following in zip(scheduled, scheduled[1:]):
        gap = _gap_minutes(current, following)
        if 0 <= gap < settings.min_break_duration:
            violations.append(BreakViolation(
                type=BreakViolationType.INSUFFICIENT_BREAK,
                task_ids=[current.id, following.id],
                start_time=current.scheduled_end,
                end_time=following.scheduled_start,
                description=(
                    f"Only {round_half_up(gap)} minutes between tasks "
                    f"(minimum: {settings.min_break_duration} minutes)"
                ),
                severity=Severity.HIGH if gap < HIGH_SEVERITY_GAP_MINUTES else Severity.MEDIUM,
                suggested_fix=f"Add {settings.min_break_duration - round_half_up(gap)} more minutes between tasks",
            ))
    return violations


def _continuous_work_blocks(scheduled: List[Task], settings: AutoScheduleSettings) -> List[BreakViolation]:
    violations = []
    block: List[Task] = [scheduled[0]]
    block_minutes = scheduled[0].duration

    for previous, current in zip(scheduled, scheduled[1:]):
        if _gap_minutes(previous, current) < settings.min_break_duration:
            block.append(current)
            block_minutes += current.duration
            continue

        violation = _check_block(block, block_minutes, settings)
        if violation:
            violations.append(violation)
        block = [current]
        block_minutes = current.duration

    violation = _check_block(block, block_minutes, settings)
    if violation:
        violations.append(violation)
    return violations


def _check_block(block: List[Task], block_minutes: int, settings: AutoScheduleSettings) -> Optional[BreakViolation]:
    limit = settings.max_consecutive_minutes
    if block_minutes <= limit:
        return None

    return BreakViolation(
        type=BreakViolationType.TOO_LONG_CONTINUOUS,
        task_ids=[t.id for t in block],
        start_time=block[0].scheduled_start,
        end_time=block[-1].scheduled_end,
        description=(
            f"Continuous work for {round_half_up(block_minutes / 60)} hours without adequate break "
            f"(maximum: {settings.max_consecutive_hours:g} hours)"
        ),
        severity=Severity.HIGH if block_minutes > limit * HIGH_SEVERITY_BLOCK_RATIO else Severity.MEDIUM,
        suggested_fix=(
            f"Add a {settings.min_break_duration}-minute break after "
            f"{settings.max_consecutive_hours:g} hours of work"
        ),
    )


def _starts_in_lunch_window(task: Task) -> bool:
    return LUNCH_WINDOW_START <= task.scheduled_start.time() <= LUNCH_WINDOW_END


def _missing_lunch_breaks(scheduled: List[Task]) -> List[BreakViolation]:
    # One task alone in the window is never a violation.
    violations = []
    lunch_tasks = [t for t in scheduled if _starts_in_lunch_window(t)]

    for _, day_tasks in groupby(lunch_tasks, key=lambda t: t.scheduled_start.date()):
        day_tasks = list(day_tasks)
        if len(day_tasks) < 2:
            continue
        has_lunch_break = any(
            _gap_minutes(previous, following) >= LUNCH_MIN_GAP_MINUTES
            for previous, following in zip(day_tasks, day_tasks[1:])
        )
        if has_lunch_break:
            continue

        violations.append(BreakViolation(
            type=BreakViolationType.NO_LUNCH_BREAK,
            task_ids=[t.id for t in day_tasks],
            start_time=day_tasks[0].scheduled_start,
            end_time=day_tasks[-1].scheduled_end,
            description="No lunch break detected during typical lunch hours (11:30am-1:30pm)",
            severity=Severity.MEDIUM,
            suggested_fix="Add a 30-60 minute lunch break between 12pm-1pm",
        ))
    return violations


def suggest_breaks(
    tasks: List[Task],
    settings: AutoScheduleSettings,
    day: Optional[date] = None,
) -> List[BreakSuggestion]:
    """Turn the violations in a schedule into suggested breaks.

    Args:
        tasks: Placed tasks
        settings: Break policy
        day: If given, only tasks starting on this day are considered

    Returns:
        Suggestions ordered by priority (high first), then by time
    """
    if not settings.enforce_breaks or not settings.enable_suggestions:
        return []

    if day is not None:
        tasks = [t for t in tasks if t.scheduled_start is not None and t.scheduled_start.date() == day]

    suggestions: List[BreakSuggestion] = []
    for violation in validate_schedule_breaks(tasks, settings):
        suggestions.append(_suggestion_for(violation, settings))

    suggestions.sort(key=lambda s: (_PRIORITY_ORDER[Severity(s.priority)], s.suggested_time))
    return suggestions


def _suggestion_for(violation: BreakViolation, settings: AutoScheduleSettings) -> BreakSuggestion:
    priority = Severity.HIGH if violation.severity == Severity.HIGH else Severity.MEDIUM

    if violation.type == BreakViolationType.INSUFFICIENT_BREAK:
        return BreakSuggestion(
            type=BreakSuggestionType.SHORT_BREAK,
            suggested_time=violation.start_time,
            duration=settings.min_break_duration,
            reason=violation.description,
            priority=priority,
        )

    if violation.type == BreakViolationType.TOO_LONG_CONTINUOUS:
        midpoint = violation.start_time + (violation.end_time - violation.start_time) / 2
        return BreakSuggestion(
            type=BreakSuggestionType.LONG_BREAK,
            suggested_time=midpoint,
            duration=settings.min_break_duration * LONG_BREAK_MULTIPLIER,
            reason=violation.description,
            priority=priority,
        )

    return BreakSuggestion(
        type=BreakSuggestionType.LUNCH,
        suggested_time=datetime.combine(violation.start_time.date(), LUNCH_SUGGESTED_TIME),
        duration=LUNCH_SUGGESTED_DURATION,
        reason=violation.description,
        priority=Severity.HIGH,
    )


def can_schedule_without_violation(
    new_task: Task,
    existing_tasks: List[Task],
    settings: AutoScheduleSettings,
) -> bool:
    """True if adding `new_task` introduces no violation that involves it."""
    if not settings.enforce_breaks:
        return True

    violations = validate_schedule_breaks(list(existing_tasks) + [new_task], settings)
    return not any(new_task.id in v.task_ids for v in violations)


def get_break_compliance_score(tasks: List[Task], settings: AutoScheduleSettings) -> int:
    """Summarize break compliance as an integer from 0 to 100.

    Each violation costs its severity weight (low=1, medium=2, high=3);
    the total is normalized against three points per task.
    """
    if not settings.enforce_breaks or not tasks:
        return 100

    violations = validate_schedule_breaks(tasks, settings)
    total_penalty = sum(_SEVERITY_WEIGHTS[Severity(v.severity)] for v in violations)
    max_penalty = len(tasks) * 3

    score = max(0.0, 100 * (1 - total_penalty / max_penalty))
    return round_half_up(score)

