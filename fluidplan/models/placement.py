"""Placement of a task on the timeline.

A task is either unscheduled, locked to a fixed interval by the user, or
placed by the engine with the score it achieved.
"""

from typing import Annotated, Literal, Union

from pydantic import BaseModel, Field

from fluidplan.models.interval import TimeInterval


class Unscheduled(BaseModel):
    """No interval assigned."""

    kind: Literal["unscheduled"] = "unscheduled"

    class Config:
        """Pydantic configuration."""
        frozen = True


class Locked(BaseModel):
    """Fixed interval owned by the user; the engine never rewrites it."""

    kind: Literal["locked"] = "locked"
    interval: TimeInterval = Field(..., description="Immovable interval")

    class Config:
        """Pydantic configuration."""
        frozen = True


class AutoPlaced(BaseModel):
    """Interval chosen by the scheduling engine."""

    kind: Literal["auto"] = "auto"
    interval: TimeInterval = Field(..., description="Placed interval")
    score: float = Field(..., description="Score achieved at placement time")

    class Config:
        """Pydantic configuration."""
        frozen = True


Placement = Annotated[Union[Unscheduled, Locked, AutoPlaced], Field(discriminator="kind")]
