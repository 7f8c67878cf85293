"""Auto-schedule settings (scheduling policy) for fluidplan."""

from datetime import date, datetime, time, timedelta
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator, model_validator

from fluidplan.models.constants import (
    DEFAULT_BUFFER_MINUTES,
    DEFAULT_MAX_CONSECUTIVE_HOURS,
    DEFAULT_MIN_BREAK_DURATION,
    DEFAULT_WORK_DAYS,
    DEFAULT_WORK_HOUR_END,
    DEFAULT_WORK_HOUR_START,
)
from fluidplan.models.interval import TimeInterval
from fluidplan.models.task import EnergyLevel


def weekday_ordinal(day: date) -> int:
    """Weekday ordinal with Sunday=0 ... Saturday=6."""
    return day.isoweekday() % 7


class AutoScheduleSettings(BaseModel):
    """Resolved scheduling policy for one user.

    Read-only to the scheduling core; passed explicitly to every engine call.
    """

    user_id: Optional[str] = Field(None, description="Owner of these settings")
    work_days: List[int] = Field(
        default_factory=lambda: list(DEFAULT_WORK_DAYS),
        description="Working weekdays (Sunday=0 ... Saturday=6)",
    )
    work_hour_start: int = Field(DEFAULT_WORK_HOUR_START, ge=0, le=23, description="Work day start hour")
    work_hour_end: int = Field(DEFAULT_WORK_HOUR_END, ge=1, le=24, description="Work day end hour (exclusive)")
    buffer_minutes: int = Field(DEFAULT_BUFFER_MINUTES, ge=0, description="Minimum gap around placed tasks")
    max_consecutive_hours: float = Field(
        DEFAULT_MAX_CONSECUTIVE_HOURS, gt=0, description="Longest allowed continuous work block"
    )
    min_break_duration: int = Field(DEFAULT_MIN_BREAK_DURATION, ge=0, description="Shortest gap that counts as a break")
    enforce_breaks: bool = Field(True, description="Whether break policy is enforced and audited")
    enable_suggestions: bool = Field(True, description="Whether break suggestions are produced")

    high_energy_start: Optional[int] = Field(None, ge=0, le=24)
    high_energy_end: Optional[int] = Field(None, ge=0, le=24)
    medium_energy_start: Optional[int] = Field(None, ge=0, le=24)
    medium_energy_end: Optional[int] = Field(None, ge=0, le=24)
    low_energy_start: Optional[int] = Field(None, ge=0, le=24)
    low_energy_end: Optional[int] = Field(None, ge=0, le=24)

    @field_validator("work_days")
    @classmethod
    def _validate_work_days(cls, v):
        for day in v:
            if day < 0 or day > 6:
                raise ValueError(f"work_days entries must be between 0 and 6, got {day}")
        return sorted(set(v))

    @model_validator(mode="after")
    def _validate_windows(self):
        if self.work_hour_start >= self.work_hour_end:
            raise ValueError(
                f"work_hour_start ({self.work_hour_start}) must be before work_hour_end ({self.work_hour_end})"
            )
        for level in EnergyLevel:
            window = self.energy_window(level)
            if window is not None and window[0] >= window[1]:
                raise ValueError(f"{level.value} energy window start must be before its end")
        return self

    @property
    def max_consecutive_minutes(self) -> float:
        return self.max_consecutive_hours * 60

    def is_work_day(self, day: date) -> bool:
        return weekday_ordinal(day) in self.work_days

    def work_window(self, day: date) -> TimeInterval:
        """Working hours on `day` as an interval (end hour 24 means midnight)."""
        day_start = datetime.combine(day, time(0, 0))
        return TimeInterval(
            start=day_start + timedelta(hours=self.work_hour_start),
            end=day_start + timedelta(hours=self.work_hour_end),
        )

    def energy_window(self, level) -> Optional[Tuple[int, int]]:
        """Configured (start_hour, end_hour) for an energy level, if both ends are set."""
        prefix = EnergyLevel(level).value
        start = getattr(self, f"{prefix}_energy_start")
        end = getattr(self, f"{prefix}_energy_end")
        if start is None or end is None:
            return None
        return (start, end)
