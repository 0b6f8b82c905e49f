"""Tests for weekly plan construction and labels."""

from datetime import date, datetime

import pytest

from chroniyam_planner.common.error_handlers import ValidationError
from chroniyam_planner.models import TimeWindow
from chroniyam_planner.plans import (
    build_current_week_plan,
    build_future_week_plan,
    first_available_future_week,
    future_week_options,
    hours_left_today,
    plan_label,
    week_navigation_label,
)

# Wednesday
TODAY = "2025-12-31"
MORNING = datetime(2025, 12, 31, 8, 0)
EVENING = datetime(2025, 12, 31, 20, 20)


class TestHoursLeftToday:
    """Hours before midnight, rounded down to half hours."""

    @pytest.mark.parametrize(
        "now,expected",
        [
            (datetime(2025, 12, 31, 0, 0), 24.0),
            (datetime(2025, 12, 31, 20, 20), 3.5),
            (datetime(2025, 12, 31, 20, 30), 3.5),
            (datetime(2025, 12, 31, 20, 31), 3.0),
            (datetime(2025, 12, 31, 23, 59), 0.0),
        ],
    )
    def test_rounds_down_to_half_hour(self, now, expected):
        assert hours_left_today(now) == expected


class TestCurrentWeekPlan:
    """Plans for the rest of the current week."""

    def test_runs_from_today_to_sunday(self):
        plan = build_current_week_plan(TODAY, 8, now=MORNING)
        assert plan.start_date == date(2025, 12, 31)
        assert plan.end_date == date(2026, 1, 4)
        assert plan.days == 5
        assert plan.total_hours == 40

    def test_start_from_tomorrow(self):
        plan = build_current_week_plan(TODAY, 8, start_from_tomorrow=True, now=EVENING)
        assert plan.start_date == date(2026, 1, 1)
        assert plan.days == 4
        assert plan.total_hours == 32

    def test_late_start_uses_hours_left_today(self):
        """After 20:20 only 3.5h are left, so today contributes 3.5h."""
        plan = build_current_week_plan(TODAY, 8, now=EVENING)
        assert plan.total_hours == 3.5 + 4 * 8
        assert plan.hours_per_day == 8

    def test_late_start_with_explicit_today_hours(self):
        plan = build_current_week_plan(TODAY, 8, today_hours=2, now=EVENING)
        assert plan.total_hours == 2 + 4 * 8

    def test_sunday_plan_is_one_day(self):
        plan = build_current_week_plan("2026-01-04", 6, now=datetime(2026, 1, 4, 9, 0))
        assert plan.days == 1
        assert plan.start_date == plan.end_date


class TestFutureWeeks:
    """Upcoming Monday-Sunday weeks."""

    def test_future_plan_spans_full_week(self):
        plan = build_future_week_plan("2026-01-05", 6)
        assert plan.end_date == date(2026, 1, 11)
        assert plan.days == 7
        assert plan.total_hours == 42

    def test_future_plan_must_start_on_monday(self):
        with pytest.raises(ValidationError) as exc_info:
            build_future_week_plan("2026-01-06", 8)
        assert exc_info.value.field == "start_date"

    def test_options_flag_planned_weeks(self):
        existing = [TimeWindow.for_range("2026-01-12", "2026-01-18", 8)]
        options = future_week_options(TODAY, existing)
        assert [o.start for o in options] == [
            date(2026, 1, 5),
            date(2026, 1, 12),
            date(2026, 1, 19),
            date(2026, 1, 26),
        ]
        assert [o.is_planned for o in options] == [False, True, False, False]

    def test_option_count(self):
        assert len(future_week_options(TODAY, [], count=2)) == 2

    def test_first_available_skips_planned(self):
        existing = [TimeWindow.for_range("2026-01-05", "2026-01-11", 8)]
        option = first_available_future_week(TODAY, existing)
        assert option.start == date(2026, 1, 12)

    def test_first_available_none_when_all_planned(self):
        existing = [TimeWindow.for_range("2026-01-05", "2026-02-01", 8)]
        assert first_available_future_week(TODAY, existing) is None


class TestLabels:
    """Week labels shown in the plan dialog and header."""

    @pytest.fixture
    def plans(self):
        return [
            TimeWindow.for_range("2026-01-05", "2026-01-11", 8),
            TimeWindow.for_range("2025-12-31", "2026-01-04", 8),
            TimeWindow.for_range("2026-01-26", "2026-02-01", 8),
        ]

    def test_exact_match(self, plans):
        assert plan_label(plans, "2026-01-05", "2026-01-11") == "Week 2"

    def test_overlap_match(self, plans):
        assert plan_label(plans, "2026-01-01", "2026-01-07") == "Week 1"

    def test_no_match(self, plans):
        assert plan_label(plans, "2026-01-12", "2026-01-18") == ""

    @pytest.mark.parametrize(
        "index,expected",
        [
            (0, "Week 1 of 3 (Dec 31 – Jan 4)"),
            (1, "Week 2 of 3 (Jan 5–11)"),
            (2, "Week 3 of 3 (Jan 26 – Feb 1)"),
        ],
    )
    def test_navigation_label(self, plans, index, expected):
        ordered = sorted(plans, key=lambda p: p.start_date)
        assert week_navigation_label(ordered, index) == expected

    def test_single_plan_has_no_navigation_label(self, plans):
        assert week_navigation_label(plans[:1], 0) is None
