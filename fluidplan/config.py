"""Runtime configuration for fluidplan.

Values are read from the environment (optionally via a `.env` file).
"""

import os
from dotenv import load_dotenv

from fluidplan.models.constants import (
    DEFAULT_GRANULARITY_MINUTES,
    DEFAULT_LOOKAHEAD_DAYS,
)

load_dotenv()


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}")
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def get_granularity_minutes() -> int:
    """Spacing between candidate start times considered by the engine."""
    return _int_from_env("FLUIDPLAN_GRANULARITY_MIN", DEFAULT_GRANULARITY_MINUTES)


def get_lookahead_days() -> int:
    """How many days ahead to search for tasks without a due date."""
    return _int_from_env("FLUIDPLAN_LOOKAHEAD_DAYS", DEFAULT_LOOKAHEAD_DAYS)
