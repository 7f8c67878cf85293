"""Tests for break auditing, suggestions and compliance scoring."""

from datetime import datetime, timedelta

from fluidplan.engine.breaks import (
    can_schedule_without_violation,
    get_break_compliance_score,
    round_half_up,
    suggest_breaks,
    validate_schedule_breaks,
)
from fluidplan.models.breaks import BreakSuggestionType, BreakViolationType, Severity
from fluidplan.models.settings import AutoScheduleSettings


def at(hour, minute=0, day=2):
    return datetime(2026, 3, day, hour, minute)


def back_to_back(placed_task, start, count, minutes):
    return [placed_task(start + timedelta(minutes=i * minutes), minutes) for i in range(count)]


class TestValidateScheduleBreaks:
    """Test the three violation rules."""

    def test_empty_schedule(self, settings):
        assert validate_schedule_breaks([], settings) == []

    def test_unscheduled_tasks_ignored(self, make_task, settings):
        assert validate_schedule_breaks([make_task(), make_task()], settings) == []

    def test_well_spaced_schedule(self, placed_task, settings):
        tasks = [placed_task(at(9), 60), placed_task(at(10, 15), 60), placed_task(at(14), 60)]
        assert validate_schedule_breaks(tasks, settings) == []

    def test_back_to_back_is_high_severity(self, placed_task, settings):
        first, second = back_to_back(placed_task, at(14), 2, 60)

        violations = validate_schedule_breaks([first, second], settings)

        assert len(violations) == 1
        violation = violations[0]
        assert violation.type == BreakViolationType.INSUFFICIENT_BREAK
        assert violation.severity == Severity.HIGH
        assert violation.task_ids == [first.id, second.id]
        assert violation.start_time == at(15)
        assert violation.end_time == at(15)

    def test_short_gap_is_medium_severity(self, placed_task, settings):
        tasks = [placed_task(at(14), 60), placed_task(at(15, 7), 60)]

        violations = validate_schedule_breaks(tasks, settings)

        assert [v.severity for v in violations] == [Severity.MEDIUM]

    def test_overlapping_tasks_are_not_insufficient_breaks(self, placed_task, settings):
        tasks = [placed_task(at(14), 60), placed_task(at(14, 30), 60)]

        violations = validate_schedule_breaks(tasks, settings)

        assert all(v.type != BreakViolationType.INSUFFICIENT_BREAK for v in violations)

    def test_input_order_does_not_matter(self, placed_task, settings):
        first, second = back_to_back(placed_task, at(14), 2, 60)

        violations = validate_schedule_breaks([second, first], settings)

        assert violations[0].task_ids == [first.id, second.id]

    def test_long_continuous_block(self, placed_task, settings):
        """Four 90-minute tasks back to back: three short gaps and one long block."""
        tasks = back_to_back(placed_task, at(8), 4, 90)

        violations = validate_schedule_breaks(tasks, settings)

        types = [v.type for v in violations]
        assert types == [BreakViolationType.INSUFFICIENT_BREAK] * 3 + [BreakViolationType.TOO_LONG_CONTINUOUS]
        block = violations[-1]
        assert block.severity == Severity.HIGH
        assert block.task_ids == [t.id for t in tasks]
        assert block.start_time == at(8)
        assert block.end_time == at(14)

    def test_long_block_medium_severity(self, placed_task, settings):
        tasks = [placed_task(at(14), 100), placed_task(at(15, 45), 100)]

        violations = validate_schedule_breaks(tasks, settings)

        too_long = [v for v in violations if v.type == BreakViolationType.TOO_LONG_CONTINUOUS]
        assert len(too_long) == 1
        assert too_long[0].severity == Severity.MEDIUM

    def test_block_at_limit_is_allowed(self, placed_task, settings):
        tasks = [placed_task(at(14), 90), placed_task(at(15, 30), 90)]

        violations = validate_schedule_breaks(tasks, settings)

        assert all(v.type != BreakViolationType.TOO_LONG_CONTINUOUS for v in violations)

    def test_missing_lunch_break(self, placed_task, settings):
        tasks = [placed_task(at(11, 30), 30), placed_task(at(12, 5), 60)]

        violations = validate_schedule_breaks(tasks, settings)

        lunch = [v for v in violations if v.type == BreakViolationType.NO_LUNCH_BREAK]
        assert len(lunch) == 1
        assert lunch[0].task_ids == [t.id for t in tasks]
        assert lunch[0].severity == Severity.MEDIUM

    def test_lunch_gap_satisfies_rule(self, placed_task, settings):
        tasks = [placed_task(at(11, 30), 30), placed_task(at(12, 30), 60)]
        assert validate_schedule_breaks(tasks, settings) == []

    def test_lunch_window_bounds_are_inclusive(self, placed_task, settings):
        tasks = [placed_task(at(12, 40), 45), placed_task(at(13, 30), 30)]

        violations = validate_schedule_breaks(tasks, settings)

        assert any(v.type == BreakViolationType.NO_LUNCH_BREAK for v in violations)

    def test_single_task_over_lunch(self, placed_task, settings):
        tasks = [placed_task(at(11, 30), 120)]
        assert validate_schedule_breaks(tasks, settings) == []

    def test_lunch_checked_per_day(self, placed_task, settings):
        tasks = [placed_task(at(12, 0, day=2), 30), placed_task(at(12, 0, day=3), 30)]
        assert validate_schedule_breaks(tasks, settings) == []


class TestSuggestBreaks:
    """Test suggest_breaks()."""

    def test_short_break_suggestion(self, placed_task, settings):
        tasks = back_to_back(placed_task, at(14), 2, 60)

        suggestions = suggest_breaks(tasks, settings)

        assert len(suggestions) == 1
        suggestion = suggestions[0]
        assert suggestion.type == BreakSuggestionType.SHORT_BREAK
        assert suggestion.suggested_time == at(15)
        assert suggestion.duration == 10
        assert suggestion.priority == Severity.HIGH

    def test_long_break_suggestion_at_block_midpoint(self, placed_task, settings):
        tasks = back_to_back(placed_task, at(8), 4, 90)

        suggestions = suggest_breaks(tasks, settings)

        long_breaks = [s for s in suggestions if s.type == BreakSuggestionType.LONG_BREAK]
        assert len(long_breaks) == 1
        assert long_breaks[0].suggested_time == at(11)
        assert long_breaks[0].duration == 20

    def test_lunch_suggestion(self, placed_task, settings):
        tasks = [placed_task(at(11, 30), 30), placed_task(at(12, 10), 30), placed_task(at(12, 50), 30)]

        suggestions = suggest_breaks(tasks, settings)

        lunch = [s for s in suggestions if s.type == BreakSuggestionType.LUNCH]
        assert len(lunch) == 1
        assert lunch[0].suggested_time == at(12)
        assert lunch[0].duration == 60
        assert lunch[0].priority == Severity.HIGH

    def test_sorted_by_priority_then_time(self, placed_task, settings):
        tasks = [
            placed_task(at(9), 60),
            placed_task(at(10, 7), 60),   # medium gap
            placed_task(at(14), 60),
            placed_task(at(15), 60),      # high gap
        ]

        suggestions = suggest_breaks(tasks, settings)

        assert [s.priority for s in suggestions] == [Severity.HIGH, Severity.MEDIUM]
        assert suggestions[0].suggested_time == at(15)

    def test_filter_by_day(self, placed_task, settings):
        monday = back_to_back(placed_task, at(14, day=2), 2, 60)
        tuesday = back_to_back(placed_task, at(14, day=3), 2, 60)

        suggestions = suggest_breaks(monday + tuesday, settings, day=at(0, day=3).date())

        assert len(suggestions) == 1
        assert suggestions[0].suggested_time == at(15, day=3)

    def test_disabled(self, placed_task):
        tasks = back_to_back(placed_task, at(14), 2, 60)

        assert suggest_breaks(tasks, AutoScheduleSettings(enforce_breaks=False)) == []
        assert suggest_breaks(tasks, AutoScheduleSettings(enable_suggestions=False)) == []


class TestCanScheduleWithoutViolation:
    """Test can_schedule_without_violation()."""

    def test_detects_new_violation(self, placed_task, settings):
        existing = [placed_task(at(9), 60)]

        assert not can_schedule_without_violation(placed_task(at(10, 5), 30), existing, settings)
        assert can_schedule_without_violation(placed_task(at(10, 30), 30), existing, settings)

    def test_existing_violations_do_not_count(self, placed_task, settings):
        existing = back_to_back(placed_task, at(9), 2, 30)

        assert can_schedule_without_violation(placed_task(at(15), 30), existing, settings)

    def test_always_true_when_not_enforced(self, placed_task):
        existing = [placed_task(at(9), 60)]
        settings = AutoScheduleSettings(enforce_breaks=False)

        assert can_schedule_without_violation(placed_task(at(10), 30), existing, settings)


class TestBreakComplianceScore:
    """Test get_break_compliance_score()."""

    def test_clean_schedule(self, placed_task, settings):
        tasks = [placed_task(at(9), 60), placed_task(at(14), 60)]
        assert get_break_compliance_score(tasks, settings) == 100

    def test_empty_schedule(self, settings):
        assert get_break_compliance_score([], settings) == 100

    def test_penalized_by_severity(self, placed_task, settings):
        # One high violation (3 points) out of 2 * 3 possible
        tasks = back_to_back(placed_task, at(14), 2, 60)
        assert get_break_compliance_score(tasks, settings) == 50

    def test_floored_at_zero(self, placed_task, settings):
        tasks = back_to_back(placed_task, at(8), 4, 90)
        assert get_break_compliance_score(tasks, settings) == 0

    def test_always_100_when_not_enforced(self, placed_task):
        tasks = back_to_back(placed_task, at(8), 4, 90)
        assert get_break_compliance_score(tasks, AutoScheduleSettings(enforce_breaks=False)) == 100

    def test_is_integer(self, placed_task, settings):
        tasks = [placed_task(at(14), 60), placed_task(at(15, 7), 60), placed_task(at(17), 60)]
        score = get_break_compliance_score(tasks, settings)
        assert isinstance(score, int)
        assert score == 78

    def test_half_points_round_up(self, placed_task, settings):
        """Three high violations over eight tasks score 62.5, reported as 63."""
        tasks = []
        for day in (2, 3, 4):
            tasks += back_to_back(placed_task, at(14, day=day), 2, 60)
        tasks += [placed_task(at(14, day=5), 60), placed_task(at(14, day=6), 60)]

        assert len(validate_schedule_breaks(tasks, settings)) == 3
        assert get_break_compliance_score(tasks, settings) == 63


class TestRoundHalfUp:
    """Test round_half_up()."""

    def test_halves_go_up(self):
        assert round_half_up(62.5) == 63
        assert round_half_up(2.5) == 3
        assert round_half_up(0.5) == 1

    def test_other_values(self):
        assert round_half_up(62.49) == 62
        assert round_half_up(7) == 7
        assert round_half_up(0.0) == 0
