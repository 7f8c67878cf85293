"""Immutable time interval value type for fluidplan."""

from datetime import datetime, timedelta
from typing import Union

from pydantic import BaseModel, Field, model_validator


class TimeInterval(BaseModel):
    """Half-open ``[start, end)`` interval.

    All datetimes are expected in one caller-normalized zone; no time-zone
    conversion happens here.
    """

    start: datetime = Field(..., description="Interval start (inclusive)")
    end: datetime = Field(..., description="Interval end (exclusive)")

    class Config:
        """Pydantic configuration."""
        frozen = True

    @model_validator(mode="after")
    def _validate_order(self):
        if self.end <= self.start:
            raise ValueError(f"Interval end ({self.end}) must be after start ({self.start})")
        return self

    @classmethod
    def from_minutes(cls, start: datetime, minutes: int) -> "TimeInterval":
        return cls(start=start, end=start + timedelta(minutes=minutes))

    @property
    def duration_minutes(self) -> float:
        return (self.end - self.start).total_seconds() / 60

    def overlaps(self, other: "TimeInterval") -> bool:
        """True if the two intervals share any instant."""
        return self.start < other.end and other.start < self.end

    def gap_to(self, other: "TimeInterval") -> float:
        """Minutes from the end of this interval to the start of `other`.

        Negative when `other` starts before this interval ends.
        """
        return (other.start - self.end).total_seconds() / 60

    def shifted_by(self, offset: Union[int, float, timedelta]) -> "TimeInterval":
        """Return a copy moved by `offset` (minutes or timedelta)."""
        if not isinstance(offset, timedelta):
            offset = timedelta(minutes=offset)
        return TimeInterval(start=self.start + offset, end=self.end + offset)

    def expanded_by(self, minutes: Union[int, float]) -> "TimeInterval":
        """Return a copy widened by `minutes` on both sides."""
        pad = timedelta(minutes=minutes)
        return TimeInterval(start=self.start - pad, end=self.end + pad)

    def contains(self, moment: datetime) -> bool:
        return self.start <= moment < self.end
