import os

import pytest

# Set test environment variables before importing any application code
os.environ.update({
    "CHRONIYAM_ENVIRONMENT": "test",
    "CHRONIYAM_LOG_LEVEL": "DEBUG",
})

from chroniyam_allocation import TaskSpec  # noqa: E402
from chroniyam_planner.models import Quadrant, Task, TimeWindow  # noqa: E402
from chroniyam_planner.session import PlannerSession  # noqa: E402

# Monday 2025-12-29 .. Sunday 2026-01-04
MONDAY = "2025-12-29"
TUESDAY = "2025-12-30"
WEDNESDAY = "2025-12-31"
SUNDAY = "2026-01-04"
NEXT_MONDAY = "2026-01-05"
NEXT_SUNDAY = "2026-01-11"


@pytest.fixture
def week():
    """Full Monday-Sunday plan at 8h/day"""
    return TimeWindow.for_range(MONDAY, SUNDAY, 8.0)


@pytest.fixture
def next_week():
    return TimeWindow.for_range(NEXT_MONDAY, NEXT_SUNDAY, 8.0)


@pytest.fixture
def make_task():
    """Factory for planner tasks with sensible defaults"""

    def _make_task(
        title: str = "Task",
        hours: float = 1.0,
        start: str = MONDAY,
        due: str | None = None,
        quadrant: Quadrant = Quadrant.SCHEDULE,
        recurring: bool = False,
        **kwargs,
    ) -> Task:
        return Task(
            title=title,
            quadrant=quadrant,
            estimated_hours=hours,
            start_date=start,
            due_date=due or start,
            is_recurring=recurring,
            **kwargs,
        )

    return _make_task


@pytest.fixture
def make_spec():
    """Factory for bare engine task values"""

    def _make_spec(
        task_id: str,
        hours: float,
        start: str = MONDAY,
        due: str | None = None,
        recurring: bool = False,
    ) -> TaskSpec:
        return TaskSpec(
            id=task_id,
            start_date=start,
            due_date=due or start,
            estimated_hours=hours,
            is_recurring=recurring,
        )

    return _make_spec


@pytest.fixture
def session(week):
    """Session with the 2025-12-29 week planned"""
    planner = PlannerSession()
    planner.save_plan(week)
    return planner
