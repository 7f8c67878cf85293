"""Scheduling engine for fluidplan."""

from fluidplan.engine.ranking import rank_for_placement
from fluidplan.engine.scoring import score_slot
from fluidplan.engine.scheduler import schedule_multiple_tasks, SchedulingResult
from fluidplan.engine.breaks import (
    validate_schedule_breaks,
    suggest_breaks,
    can_schedule_without_violation,
    get_break_compliance_score,
)
from fluidplan.engine.break_enforcer import enforce_breaks_in_schedule

__all__ = [
    "rank_for_placement",
    "score_slot",
    "schedule_multiple_tasks",
    "SchedulingResult",
    "validate_schedule_breaks",
    "suggest_breaks",
    "can_schedule_without_violation",
    "get_break_compliance_score",
    "enforce_breaks_in_schedule",
]
