"""Tests for planner models."""

from datetime import date

import pytest
from pydantic import ValidationError

from chroniyam_planner.models import (
    QUADRANTS,
    AdmissionResult,
    Quadrant,
    TaskDraft,
    TimeWindow,
    WeekTemplateEntry,
)


class TestTask:
    """Task field validation."""

    def test_title_is_stripped(self, make_task):
        assert make_task("  Write docs  ").title == "Write docs"

    def test_blank_title_rejected(self, make_task):
        with pytest.raises(ValidationError):
            make_task("   ")

    def test_due_before_start_rejected(self, make_task):
        with pytest.raises(ValidationError):
            make_task(start="2026-01-02", due="2026-01-01")

    @pytest.mark.parametrize("hours", [0, -1, 1.25])
    def test_invalid_hours_rejected(self, make_task, hours):
        with pytest.raises(ValidationError):
            make_task(hours=hours)

    def test_span(self, make_task):
        task = make_task(start="2025-12-31", due="2026-01-02")
        assert task.span_days == 3
        assert task.dates == ["2025-12-31", "2026-01-01", "2026-01-02"]

    def test_ids_are_unique(self, make_task):
        assert make_task().id != make_task().id


class TestTaskDraft:
    """Form drafts convert to tasks."""

    def test_round_trip_keeps_id(self, make_task):
        task = make_task("Draft me", hours=2.5)
        assert TaskDraft.from_task(task).to_task() == task

    def test_new_draft_gets_fresh_id(self):
        task = TaskDraft(title="New", start_date="2026-01-01", due_date="2026-01-01").to_task()
        assert task.id
        assert task.quadrant == Quadrant.DO_FIRST


class TestTimeWindow:
    """Plan range validation."""

    def test_for_range_computes_days_and_total(self):
        window = TimeWindow.for_range("2025-12-29", "2026-01-04", 7.5)
        assert window.days == 7
        assert window.total_hours == 52.5
        assert window.key == ("2025-12-29", "2026-01-04")
        assert window.contains(date(2026, 1, 1))
        assert not window.contains("2026-01-05")

    def test_days_must_match_range(self):
        with pytest.raises(ValidationError):
            TimeWindow(
                start_date="2025-12-29",
                end_date="2026-01-04",
                days=5,
                hours_per_day=8,
                total_hours=40,
            )

    @pytest.mark.parametrize("hours_per_day", [0, 24.5])
    def test_hours_per_day_bounds(self, hours_per_day):
        with pytest.raises(ValidationError):
            TimeWindow.for_range("2025-12-29", "2026-01-04", hours_per_day)

    def test_end_before_start_rejected(self):
        with pytest.raises(ValidationError):
            TimeWindow(
                start_date="2026-01-04",
                end_date="2025-12-29",
                days=1,
                hours_per_day=8,
                total_hours=8,
            )


class TestWeekTemplateEntry:
    """Weekday-positioned template entries."""

    def test_weekday_bounds(self):
        with pytest.raises(ValidationError):
            WeekTemplateEntry(
                title="Bad",
                quadrant=Quadrant.SCHEDULE,
                estimated_hours=1,
                start_weekday=0,
                end_weekday=7,
            )

    def test_weekday_order(self):
        with pytest.raises(ValidationError):
            WeekTemplateEntry(
                title="Bad",
                quadrant=Quadrant.SCHEDULE,
                estimated_hours=1,
                start_weekday=4,
                end_weekday=2,
            )


class TestQuadrants:
    def test_four_quadrants_in_order(self):
        assert [q.key for q in QUADRANTS] == list(Quadrant)
        assert QUADRANTS[1].description == "Not Urgent but Important"


class TestAdmissionResult:
    def test_accepted_has_no_error_response(self, make_task):
        result = AdmissionResult.accept([make_task()])
        assert result.to_error_response() is None
        assert result.task is not None

    def test_message_joins_errors(self):
        result = AdmissionResult.reject(["First.", "Second."], "WEEK_PASTE_REJECTED")
        assert result.message == "First. Second."
        assert result.task is None
