"""Tests for AutoScheduleSettings validation and helpers."""

import pytest
from datetime import date, datetime
from pydantic import ValidationError

from fluidplan.models.settings import AutoScheduleSettings, weekday_ordinal
from fluidplan.models.task import EnergyLevel


class TestSettingsValidation:
    """Policy fields are validated on construction."""

    def test_defaults(self):
        settings = AutoScheduleSettings()
        assert settings.work_days == [1, 2, 3, 4, 5]
        assert settings.work_hour_start == 9
        assert settings.work_hour_end == 17
        assert settings.buffer_minutes == 15
        assert settings.max_consecutive_hours == 3
        assert settings.min_break_duration == 10
        assert settings.enforce_breaks is True

    def test_start_must_precede_end(self):
        with pytest.raises(ValidationError):
            AutoScheduleSettings(work_hour_start=17, work_hour_end=9)
        with pytest.raises(ValidationError):
            AutoScheduleSettings(work_hour_start=9, work_hour_end=9)

    def test_rejects_negative_values(self):
        with pytest.raises(ValidationError):
            AutoScheduleSettings(min_break_duration=-1)
        with pytest.raises(ValidationError):
            AutoScheduleSettings(buffer_minutes=-5)
        with pytest.raises(ValidationError):
            AutoScheduleSettings(max_consecutive_hours=0)

    def test_work_days_are_deduplicated_and_sorted(self):
        settings = AutoScheduleSettings(work_days=[5, 1, 3, 1])
        assert settings.work_days == [1, 3, 5]

    def test_work_days_out_of_range(self):
        with pytest.raises(ValidationError):
            AutoScheduleSettings(work_days=[1, 7])

    def test_energy_window_must_be_ordered(self):
        with pytest.raises(ValidationError):
            AutoScheduleSettings(high_energy_start=12, high_energy_end=9)


class TestSettingsHelpers:
    """Day and window helpers."""

    def test_weekday_ordinal_sunday_is_zero(self):
        assert weekday_ordinal(date(2026, 3, 1)) == 0  # Sunday
        assert weekday_ordinal(date(2026, 3, 2)) == 1  # Monday
        assert weekday_ordinal(date(2026, 3, 7)) == 6  # Saturday

    def test_is_work_day(self, settings):
        assert settings.is_work_day(date(2026, 3, 2))
        assert not settings.is_work_day(date(2026, 3, 7))
        assert not settings.is_work_day(date(2026, 3, 8))

    def test_work_window(self, settings):
        window = settings.work_window(date(2026, 3, 2))
        assert window.start == datetime(2026, 3, 2, 9, 0)
        assert window.end == datetime(2026, 3, 2, 17, 0)

    def test_work_window_until_midnight(self):
        settings = AutoScheduleSettings(work_hour_start=20, work_hour_end=24)
        window = settings.work_window(date(2026, 3, 2))
        assert window.end == datetime(2026, 3, 3, 0, 0)

    def test_energy_window(self):
        settings = AutoScheduleSettings(high_energy_start=9, high_energy_end=12)
        assert settings.energy_window(EnergyLevel.HIGH) == (9, 12)
        assert settings.energy_window("high") == (9, 12)
        assert settings.energy_window(EnergyLevel.LOW) is None

    def test_max_consecutive_minutes(self):
        assert AutoScheduleSettings(max_consecutive_hours=1.5).max_consecutive_minutes == 90
