"""Repository for per-user auto-schedule settings."""

import logging
from typing import Optional
from sqlalchemy.orm import Session

from fluidplan.models.constants import (
    DEFAULT_HIGH_ENERGY_WINDOW,
    DEFAULT_LOW_ENERGY_WINDOW,
    DEFAULT_MEDIUM_ENERGY_WINDOW,
)
from fluidplan.models.settings import AutoScheduleSettings
from fluidplan.database.models import AutoScheduleSettingsDB

logger = logging.getLogger(__name__)


def default_settings(user_id: str) -> AutoScheduleSettings:
    """Settings a user gets on first access."""
    return AutoScheduleSettings(
        user_id=user_id,
        high_energy_start=DEFAULT_HIGH_ENERGY_WINDOW[0],
        high_energy_end=DEFAULT_HIGH_ENERGY_WINDOW[1],
        medium_energy_start=DEFAULT_MEDIUM_ENERGY_WINDOW[0],
        medium_energy_end=DEFAULT_MEDIUM_ENERGY_WINDOW[1],
        low_energy_start=DEFAULT_LOW_ENERGY_WINDOW[0],
        low_energy_end=DEFAULT_LOW_ENERGY_WINDOW[1],
    )


class AutoScheduleSettingsRepository:
    """Repository for AutoScheduleSettings database operations."""

    def __init__(self, db: Session):
        self.db = db

    def get(self, user_id: str) -> Optional[AutoScheduleSettings]:
        """Get settings for a user, or None if they were never created."""
        row = self.db.query(AutoScheduleSettingsDB).filter(
            AutoScheduleSettingsDB.user_id == user_id,
        ).first()
        return row.to_pydantic() if row else None

    def get_or_create(self, user_id: str) -> AutoScheduleSettings:
        """Get settings for a user, creating defaults on first access."""
        existing = self.get(user_id)
        if existing is not None:
            return existing

        settings = default_settings(user_id)
        try:
            row = AutoScheduleSettingsDB(user_id=user_id)
            row.apply(settings)
            self.db.add(row)
            self.db.commit()
            self.db.refresh(row)
            logger.info(f"Created default auto-schedule settings for user {user_id}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to create settings for user {user_id}: {type(e).__name__}: {str(e)}")
            raise

    def update(self, settings: AutoScheduleSettings) -> AutoScheduleSettings:
        """Replace a user's settings (settings.user_id must be set)."""
        if not settings.user_id:
            raise ValueError("Settings must carry a user_id to be saved")

        row = self.db.query(AutoScheduleSettingsDB).filter(
            AutoScheduleSettingsDB.user_id == settings.user_id,
        ).first()
        if not row:
            raise ValueError(f"Settings for user {settings.user_id} not found")

        try:
            row.apply(settings)
            self.db.commit()
            self.db.refresh(row)
            logger.debug(f"Updated auto-schedule settings for user {settings.user_id}")
            return row.to_pydantic()
        except Exception as e:
            self.db.rollback()
            logger.error(f"Failed to update settings for user {settings.user_id}: {type(e).__name__}: {str(e)}")
            raise
