"""Data models for fluidplan."""

from fluidplan.models.interval import TimeInterval
from fluidplan.models.placement import AutoPlaced, Locked, Placement, Unscheduled
from fluidplan.models.task import Task, TaskStatus, Priority, EnergyLevel, TimePreference
from fluidplan.models.settings import AutoScheduleSettings
from fluidplan.models.breaks import (
    BreakSuggestion,
    BreakSuggestionType,
    BreakViolation,
    BreakViolationType,
    Severity,
)

__all__ = [
    "TimeInterval",
    "Placement",
    "Unscheduled",
    "Locked",
    "AutoPlaced",
    "Task",
    "TaskStatus",
    "Priority",
    "EnergyLevel",
    "TimePreference",
    "AutoScheduleSettings",
    "BreakViolation",
    "BreakViolationType",
    "BreakSuggestion",
    "BreakSuggestionType",
    "Severity",
]
