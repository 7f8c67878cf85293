"""Break audit findings and suggestions for fluidplan.

Both are reports produced fresh on every call; nothing here is persisted.
"""

from datetime import datetime
from enum import Enum
from typing import List

from pydantic import BaseModel, Field


class BreakViolationType(str, Enum):
    """Classes of break-policy violation."""
    INSUFFICIENT_BREAK = "insufficient_break"
    TOO_LONG_CONTINUOUS = "too_long_continuous"
    NO_LUNCH_BREAK = "no_lunch_break"


class Severity(str, Enum):
    """Severity (and suggestion priority) levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class BreakSuggestionType(str, Enum):
    """Kinds of suggested break."""
    SHORT_BREAK = "short_break"
    LONG_BREAK = "long_break"
    LUNCH = "lunch"


class BreakViolation(BaseModel):
    """A place where the schedule breaks the break policy."""

    type: BreakViolationType = Field(..., description="Violation class")
    task_ids: List[str] = Field(default_factory=list, description="Tasks implicated (by id)")
    start_time: datetime = Field(..., description="Start of the offending interval")
    end_time: datetime = Field(..., description="End of the offending interval")
    description: str = Field(..., description="Human-readable description")
    severity: Severity = Field(..., description="How bad the violation is")
    suggested_fix: str = Field(..., description="Suggested remediation")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True


class BreakSuggestion(BaseModel):
    """A break the user could take to repair a violation."""

    type: BreakSuggestionType = Field(..., description="Kind of break")
    suggested_time: datetime = Field(..., description="When to take the break")
    duration: int = Field(..., description="Break length in minutes")
    reason: str = Field(..., description="Why the break is suggested")
    priority: Severity = Field(..., description="Suggestion priority")

    class Config:
        """Pydantic configuration."""
        use_enum_values = True
