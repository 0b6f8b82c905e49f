"""
Capacity queries over a time window.

Every figure here is read from the same sequential-fill ledger that the
admission flows validate against, so the numbers shown next to a form always
agree with the decision made when the form is submitted.
"""

import logging
from collections.abc import Iterable, Sequence
from datetime import date

from chroniyam_allocation import (
    Ledger,
    LedgerOrdering,
    build_allocation_trace,
    build_ledger,
    enumerate_dates,
    format_date,
    parse_date,
    remaining_on_day,
)
from chroniyam_allocation.dates import ranges_overlap
from chroniyam_allocation.ledger import (
    AllocationTrace,
    format_hours,
    ledger_total,
    round_hours,
)

from chroniyam_planner.config import settings
from chroniyam_planner.models import DayUsage, RangeCapacity, Task, TimeWindow

logger = logging.getLogger(__name__)

# Tolerance when comparing available hours against requested hours
HOURS_TOLERANCE = 0.001


def tasks_in_window(tasks: Iterable[Task], window: TimeWindow | None) -> list[Task]:
    """Tasks whose span overlaps ``window``; all tasks when there is no window."""
    if window is None:
        return list(tasks)
    return [
        task
        for task in tasks
        if ranges_overlap(
            task.start_date, task.due_date, window.start_date, window.end_date
        )
    ]


def window_ledger(
    tasks: Iterable[Task],
    window: TimeWindow,
    ordering: LedgerOrdering | None = None,
) -> Ledger:
    """Ledger of the tasks overlapping ``window`` at its daily budget."""
    return build_ledger(
        tasks_in_window(tasks, window),
        window.hours_per_day,
        ordering or settings.ledger_ordering,
    )


def window_trace(
    tasks: Iterable[Task],
    window: TimeWindow,
    ordering: LedgerOrdering | None = None,
) -> AllocationTrace:
    """Per-task, per-day breakdown for ``window``, logging truncated tasks."""
    trace = build_allocation_trace(
        tasks_in_window(tasks, window),
        window.hours_per_day,
        ordering or settings.ledger_ordering,
    )
    if settings.warn_on_truncation:
        for allocation in trace.truncated:
            logger.warning(
                f"Task {allocation.task_id}: {format_hours(allocation.unallocated_hours)} "
                f"of {format_hours(allocation.requested_hours)} do not fit in its date range"
            )
    return trace


def _window_remaining(
    days: Iterable[str], ledger: Ledger, window: TimeWindow
) -> dict[str, float]:
    # Days outside the window have no budget at all.
    return {
        day: remaining_on_day(day, ledger, window.hours_per_day)
        if window.contains(day)
        else 0.0
        for day in days
    }


def remaining_across_range(
    start_date: date | str,
    end_date: date | str,
    requested_hours: float,
    tasks: Sequence[Task],
    window: TimeWindow,
) -> RangeCapacity:
    """
    Check whether ``requested_hours`` fit between ``start_date`` and ``end_date``.

    Args:
        start_date: First day of the range (inclusive)
        end_date: Last day of the range (inclusive)
        requested_hours: Hours that need to be placed
        tasks: Current task list
        window: Time window providing the daily budget

    Returns:
        RangeCapacity with total available hours, shortfall and verdict
    """
    ledger = window_ledger(tasks, window)
    remaining = _window_remaining(enumerate_dates(start_date, end_date), ledger, window)

    total_available = round_hours(sum(remaining.values()))
    shortfall = round_hours(max(0.0, requested_hours - total_available))
    can_allocate = total_available > requested_hours - HOURS_TOLERANCE

    return RangeCapacity(
        total_available=total_available, shortfall=shortfall, can_allocate=can_allocate
    )


def remaining_for_date(day: date | str, tasks: Sequence[Task], window: TimeWindow) -> float:
    """Hours left on a single day of ``window``"""
    ledger = window_ledger(tasks, window)
    return _window_remaining([format_date(day)], ledger, window)[format_date(day)]


def capacity_breakdown(
    start_date: date | str,
    end_date: date | str,
    tasks: Sequence[Task],
    window: TimeWindow,
) -> dict[str, float]:
    """Hours left on each day between ``start_date`` and ``end_date``"""
    ledger = window_ledger(tasks, window)
    return _window_remaining(enumerate_dates(start_date, end_date), ledger, window)


def window_allocated_hours(tasks: Sequence[Task], window: TimeWindow) -> float:
    """Hours committed inside ``window``, recomputed from the task list"""
    ledger = window_ledger(tasks, window)
    return round_hours(ledger_total(ledger, window.dates))


def with_allocated_hours(window: TimeWindow, tasks: Sequence[Task]) -> TimeWindow:
    return window.model_copy(
        update={"allocated_hours": window_allocated_hours(tasks, window)}
    )


def day_usage_summary(
    day: date | str,
    tasks: Sequence[Task],
    window: TimeWindow,
    exclude_task_id: str | None = None,
) -> DayUsage:
    """Used and remaining hours on ``day``, ignoring the task being edited"""
    others = [t for t in tasks if t.id != exclude_task_id]
    ledger = window_ledger(others, window)
    key = format_date(day)
    used = round_hours(ledger.get(key, 0.0))
    remaining = _window_remaining([key], ledger, window)[key]
    return DayUsage(date=parse_date(day), used=used, remaining=remaining)


def day_hint(usage: DayUsage) -> str:
    """Form hint text for the selected start day"""
    return f"This day has {format_hours(usage.remaining)} remaining"
