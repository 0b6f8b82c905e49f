"""Tests for the create/edit and single-task paste admission flows."""

from datetime import date

import pytest

from chroniyam_planner.admission import (
    check_capacity,
    equivalent_range,
    paste_task,
    validate_task_draft,
)
from chroniyam_planner.capacity import window_ledger
from chroniyam_planner.common.error_handlers import ValidationError
from chroniyam_planner.models import Quadrant, TaskDraft

MONDAY = "2025-12-29"
TUESDAY = "2025-12-30"
WEDNESDAY = "2025-12-31"
SATURDAY = "2026-01-03"
NEXT_MONDAY = "2026-01-05"
NEXT_SUNDAY = "2026-01-11"


def draft(**overrides) -> TaskDraft:
    data = {
        "title": "Write report",
        "quadrant": Quadrant.SCHEDULE,
        "estimated_hours": 2.0,
        "start_date": MONDAY,
        "due_date": MONDAY,
    }
    data.update(overrides)
    return TaskDraft(**data)


class TestDraftInputValidation:
    """Input validity errors are reported before capacity is checked."""

    def test_valid_draft_is_accepted(self, week):
        result = validate_task_draft(draft(), [], week)
        assert result.accepted
        assert result.task.title == "Write report"
        assert result.task.start_date == date(2025, 12, 29)
        assert result.errors == []

    def test_blank_title(self, week):
        result = validate_task_draft(draft(title="   "), [], week)
        assert not result.accepted
        assert result.error_code == "VALIDATION_ERROR"
        assert result.errors == ["Title is required."]
        assert result.details == {"field": "title"}

    def test_due_before_start(self, week):
        result = validate_task_draft(draft(start_date=TUESDAY, due_date=MONDAY), [], week)
        assert not result.accepted
        assert result.details == {"field": "due_date"}
        assert result.errors[0].startswith("Due date must be on or after the start date")

    @pytest.mark.parametrize("hours", [0, -2])
    def test_non_positive_hours(self, week, hours):
        result = validate_task_draft(draft(estimated_hours=hours), [], week)
        assert not result.accepted
        assert result.error_code == "NON_POSITIVE_HOURS"

    def test_hours_must_follow_granularity(self, week):
        result = validate_task_draft(draft(estimated_hours=1.3), [], week)
        assert not result.accepted
        assert result.error_code == "VALIDATION_ERROR"
        assert "multiple of 0.5" in result.message

    def test_dates_outside_plan(self, week):
        result = validate_task_draft(
            draft(start_date=NEXT_MONDAY, due_date=NEXT_MONDAY), [], week
        )
        assert not result.accepted
        assert "must fall within the plan" in result.message

    def test_without_plan_only_inputs_are_checked(self, make_task):
        """No plan means no capacity limit to check against."""
        existing = [make_task(hours=8)]
        result = validate_task_draft(draft(estimated_hours=20), existing, None)
        assert result.accepted


class TestDraftCapacity:
    """Capacity checks for the create/edit flow."""

    def test_day_capacity_rejection(self, week, make_task):
        """With 7h scheduled a 2h task does not fit on the same day."""
        existing = [make_task(hours=5), make_task(hours=2)]
        result = validate_task_draft(draft(estimated_hours=2), existing, week)
        assert not result.accepted
        assert result.error_code == "DAY_CAPACITY_EXCEEDED"
        assert result.errors == [
            "Not enough capacity. Requested: 2h, Available: 1h, Short by: 1h"
        ]
        assert result.details == {"needed": 2.0, "available": 1.0, "shortfall": 1.0}

    def test_one_hour_still_fits(self, week, make_task):
        existing = [make_task(hours=5), make_task(hours=2)]
        assert validate_task_draft(draft(estimated_hours=1), existing, week).accepted

    def test_unchanged_edit_is_accepted(self, week, make_task):
        """Saving a task without changes never counts against itself."""
        full_day = make_task(hours=8)
        result = validate_task_draft(TaskDraft.from_task(full_day), [full_day], week)
        assert result.accepted
        assert result.task.id == full_day.id

    def test_full_day_warning_does_not_block(self, week, make_task):
        existing = [make_task(hours=8)]
        result = validate_task_draft(
            draft(estimated_hours=4, due_date=TUESDAY), existing, week
        )
        assert result.accepted
        assert result.warnings == ["1 day is already full (8h allocated)."]

    def test_recurring_reports_first_failing_day(self, week, make_task):
        """A recurring task needs its full hours free on each day."""
        existing = [make_task(hours=7, start=TUESDAY)]
        result = validate_task_draft(
            draft(estimated_hours=2, due_date=WEDNESDAY, is_recurring=True), existing, week
        )
        assert not result.accepted
        assert result.error_code == "DAY_CAPACITY_EXCEEDED"
        assert result.errors == [
            "Daily limit 8h. 7h already scheduled. 1h left on Dec 30 (2025-12-30)."
        ]

    def test_check_capacity_recurring_valid(self, week, make_task):
        candidate = make_task(hours=3, due=WEDNESDAY, recurring=True)
        ledger = window_ledger([make_task(hours=5)], week)
        check = check_capacity(candidate, ledger, week.hours_per_day)
        assert check.is_valid
        assert check.failing_date is None


class TestPasteTask:
    """Pasting a copied task into a quadrant."""

    def test_paste_without_plan(self, make_task):
        result = paste_task(make_task(), Quadrant.DO_FIRST, [], None)
        assert not result.accepted
        assert result.errors == ["Create a plan before pasting tasks."]

    def test_paste_creates_new_task(self, week, make_task):
        copied = make_task("Review", hours=2, completed=True)
        result = paste_task(copied, Quadrant.DO_FIRST, [copied], week)
        assert result.accepted
        pasted = result.task
        assert pasted.id != copied.id
        assert pasted.quadrant == Quadrant.DO_FIRST
        assert pasted.completed is False
        assert pasted.start_date == copied.start_date

    def test_paste_rejected_with_shortfall(self, week, make_task):
        copied = make_task("Copied", hours=3)
        tasks = [make_task("Filler", hours=5), copied]
        result = paste_task(copied, Quadrant.SCHEDULE, tasks, week)
        assert not result.accepted
        assert result.error_code == "DAY_CAPACITY_EXCEEDED"
        assert result.errors == [
            "Cannot paste task: Not enough capacity. Need 3h but only 0h available "
            "(shortfall: 3h)."
        ]
        assert result.details["shortfall"] == 3.0

    def test_recurring_paste_needs_hours_free_on_each_day(self, week, make_task):
        """A full day is not made up for by room on another day."""
        copied = make_task("Standup", hours=2, due=TUESDAY, recurring=True)
        filler = make_task("Filler", hours=6)
        tasks = [filler, copied]
        result = paste_task(copied, Quadrant.SCHEDULE, tasks, week)
        assert not result.accepted
        assert result.error_code == "DAY_CAPACITY_EXCEEDED"
        assert result.errors == [
            "Cannot paste task: Not enough capacity. Need 2h on Dec 29 (2025-12-29) "
            "but only 0h available (shortfall: 2h)."
        ]

    def test_paste_matches_create_flow(self, week, make_task):
        copied = make_task("Standup", hours=2, due=TUESDAY, recurring=True)
        tasks = [make_task("Filler", hours=6), copied]
        pasted = paste_task(copied, Quadrant.SCHEDULE, tasks, week)
        created = validate_task_draft(
            draft(estimated_hours=2, due_date=TUESDAY, is_recurring=True), tasks, week
        )
        assert pasted.accepted is created.accepted is False

    def test_paste_respects_weekly_limit(self, week, make_task):
        """Free room on the target day does not bypass the weekly ceiling."""
        tasks = [
            make_task("Offsite", hours=10, recurring=True),
            make_task("Block", hours=40, start=TUESDAY, due=SATURDAY),
        ]
        copied = make_task("Sunday prep", hours=8, start=NEXT_SUNDAY)
        result = paste_task(copied, Quadrant.SCHEDULE, tasks, week)
        assert not result.accepted
        assert result.error_code == "WEEKLY_LIMIT_EXCEEDED"
        assert result.errors == [
            "Cannot paste task: Weekly limit exceeded. Need 8h but only 6h available "
            "this week (shortfall: 2h)."
        ]
        assert result.details == {"needed": 8.0, "available": 6.0, "shortfall": 2.0}

    def test_paste_into_other_week_keeps_weekday(self, next_week, make_task):
        copied = make_task("Planning", hours=2, start=WEDNESDAY)
        result = paste_task(copied, Quadrant.SCHEDULE, [copied], next_week)
        assert result.accepted
        assert result.task.start_date == date(2026, 1, 7)
        assert result.task.due_date == date(2026, 1, 7)


class TestEquivalentRange:
    """Mapping a task's range into another plan."""

    def test_range_inside_window_is_unchanged(self, week, make_task):
        task = make_task(start=MONDAY, due=WEDNESDAY)
        assert equivalent_range(task, week) == (MONDAY, WEDNESDAY)

    def test_range_that_overflows_target_week(self, next_week, make_task):
        task = make_task(start=SATURDAY, due=NEXT_MONDAY)
        with pytest.raises(ValidationError) as exc_info:
            equivalent_range(task, next_week)
        assert "does not fit in the plan" in exc_info.value.message
