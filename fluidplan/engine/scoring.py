"""Interval scoring for fluidplan.

Scores a candidate start time for a task against the user's settings.
Pure and deterministic: identical inputs always give identical scores.
Hard constraints (work hours, due dates, conflicts) are checked by the
scheduler before a candidate is scored.
"""

import math
from datetime import datetime, timedelta

from fluidplan.engine.ranking import priority_rank
from fluidplan.models.constants import (
    DEADLINE_DECAY_DAYS,
    DEADLINE_WEIGHT,
    ENERGY_WEIGHT,
    EVENING_START_HOUR,
    MORNING_END_HOUR,
    NEUTRAL_SCORE,
    PRIORITY_WEIGHT,
    TIME_PREFERENCE_WEIGHT,
)
from fluidplan.models.settings import AutoScheduleSettings
from fluidplan.models.task import EnergyLevel, Task, TimePreference


_MAX_PRIORITY_RANK = 3


def score_slot(start: datetime, task: Task, settings: AutoScheduleSettings) -> float:
    """Score placing `task` at `start` (higher is better, range 0..1).

    Weighted mean of energy fit, time-of-day preference, deadline proximity
    and priority.
    """
    weighted = (
        ENERGY_WEIGHT * energy_fit(start, task, settings)
        + TIME_PREFERENCE_WEIGHT * time_preference_fit(start, task)
        + DEADLINE_WEIGHT * deadline_proximity(start, task)
        + PRIORITY_WEIGHT * priority_score(task)
    )
    total_weight = ENERGY_WEIGHT + TIME_PREFERENCE_WEIGHT + DEADLINE_WEIGHT + PRIORITY_WEIGHT
    return round(weighted / total_weight, 4)


def _hour_of_day(moment: datetime) -> float:
    return moment.hour + moment.minute / 60 + moment.second / 3600


def energy_fit(start: datetime, task: Task, settings: AutoScheduleSettings) -> float:
    """How well the slot suits the task's energy level.

    Uses the configured energy window when there is one: 1.0 inside it,
    decaying to 0 with distance. Otherwise falls back to the position in the
    work day: high-energy tasks prefer early, low-energy late, medium midday.
    """
    if task.energy_level is None:
        return NEUTRAL_SCORE

    hour = _hour_of_day(start)
    span = settings.work_hour_end - settings.work_hour_start
    window = settings.energy_window(task.energy_level)

    if window is not None:
        window_start, window_end = window
        if window_start <= hour < window_end:
            return 1.0
        distance = window_start - hour if hour < window_start else hour - window_end
        return max(0.0, 1.0 - distance / span) * NEUTRAL_SCORE

    position = min(1.0, max(0.0, (hour - settings.work_hour_start) / span))
    if task.energy_level == EnergyLevel.HIGH:
        return 1.0 - position
    if task.energy_level == EnergyLevel.LOW:
        return position
    return 1.0 - abs(position - 0.5) * 2


def time_preference_fit(start: datetime, task: Task) -> float:
    """1.0 when the slot falls in the preferred part of the day, else 0."""
    if task.preferred_time is None:
        return NEUTRAL_SCORE

    if start.hour < MORNING_END_HOUR:
        slot_period = TimePreference.MORNING
    elif start.hour < EVENING_START_HOUR:
        slot_period = TimePreference.AFTERNOON
    else:
        slot_period = TimePreference.EVENING

    return 1.0 if task.preferred_time == slot_period else 0.0


def deadline_proximity(start: datetime, task: Task) -> float:
    """Urgency pressure: grows towards 1.0 as slack before the due date shrinks."""
    if task.due_date is None:
        return NEUTRAL_SCORE

    end = start + timedelta(minutes=task.duration)
    slack = task.due_date - end
    if slack < timedelta(0):
        # Past the due date; the scheduler never offers such slots.
        return 0.0

    slack_days = slack.total_seconds() / 86400
    return math.exp(-slack_days / DEADLINE_DECAY_DAYS)


def priority_score(task: Task) -> float:
    return priority_rank(task) / _MAX_PRIORITY_RANK
