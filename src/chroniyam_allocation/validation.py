"""
Allocation validation against daily and weekly hour limits.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum

from .dates import DateLike, format_date, week_dates
from .exceptions import EmptySelectionError, NonPositiveHoursError
from .ledger import (
    DEFAULT_DAILY_LIMIT,
    HOURS_EPSILON,
    Ledger,
    SupportsAllocation,
    format_hours,
    per_day_remaining,
    release_task,
    round_hours,
    weekly_limit,
    weekly_used,
)


class CapacityViolation(str, Enum):
    """Which limit rejected an allocation."""

    DAY_CAPACITY = "DAY_CAPACITY_EXCEEDED"
    WEEKLY_LIMIT = "WEEKLY_LIMIT_EXCEEDED"


@dataclass
class AllocationResult:
    is_valid: bool
    max_allowable_hours: float = 0.0
    weekly_remaining: float = 0.0
    per_day_remaining: dict[str, float] = field(default_factory=dict)
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    requested_hours: float = 0.0
    selected_capacity: float = 0.0
    violation: CapacityViolation | None = None

    @property
    def shortfall(self) -> float:
        if self.violation is None:
            return 0.0
        return round_hours(max(0.0, self.requested_hours - self.max_allowable_hours))

    @property
    def full_days(self) -> list[str]:
        return [d for d, hours in self.per_day_remaining.items() if hours <= 0]


def full_days_warning(count: int, daily_limit: float) -> str:
    if count == 1:
        return f"1 day is already full ({format_hours(daily_limit)} allocated)."
    return f"{count} days are already full ({format_hours(daily_limit)} allocated)."


def validate_allocation(
    *,
    selected_dates: Sequence[DateLike],
    requested_hours: float,
    ledger: Ledger,
    daily_limit: float = DEFAULT_DAILY_LIMIT,
    exclude_task_id: str | None = None,
    tasks: Sequence[SupportsAllocation] = (),
) -> AllocationResult:
    """Check whether ``requested_hours`` fit on ``selected_dates``.

    Args:
        selected_dates: Days the hours may be placed on
        requested_hours: Hours to place
        ledger: Current per-day committed hours
        daily_limit: Hours available on each day
        exclude_task_id: Task being edited; its own hours are released from the
            ledger first so an unchanged edit never counts against itself
        tasks: Task list used to look up ``exclude_task_id``

    Returns:
        AllocationResult describing capacity, errors and warnings

    Raises:
        EmptySelectionError: if no dates are selected
        NonPositiveHoursError: if ``requested_hours`` is zero or negative
    """
    if not selected_dates:
        raise EmptySelectionError()
    if requested_hours <= 0:
        raise NonPositiveHoursError(requested_hours)

    dates = list(dict.fromkeys(format_date(d) for d in selected_dates))

    adjusted = ledger
    if exclude_task_id is not None:
        excluded = next((t for t in tasks if t.id == exclude_task_id), None)
        if excluded is not None:
            adjusted = release_task(ledger, excluded)

    remaining_by_day = per_day_remaining(dates, adjusted, daily_limit)
    selected_capacity = round_hours(sum(remaining_by_day.values()))

    warnings: list[str] = []
    full_count = sum(1 for hours in remaining_by_day.values() if hours <= 0)
    if full_count:
        warnings.append(full_days_warning(full_count, daily_limit))

    # The weekly ceiling is taken from the week of the first selected day.
    week = week_dates(dates[0])
    weekly_remaining = round_hours(
        weekly_limit(daily_limit) - weekly_used(week, adjusted)
    )
    max_allowable = max(0.0, min(selected_capacity, weekly_remaining))

    errors: list[str] = []
    violation: CapacityViolation | None = None
    if requested_hours > max_allowable + HOURS_EPSILON:
        if requested_hours > selected_capacity + HOURS_EPSILON:
            violation = CapacityViolation.DAY_CAPACITY
            errors.append(
                f"Not enough capacity. Requested: {format_hours(requested_hours)}, "
                f"Available: {format_hours(selected_capacity)}, "
                f"Short by: {format_hours(requested_hours - selected_capacity)}"
            )
        else:
            violation = CapacityViolation.WEEKLY_LIMIT
            available_week = max(0.0, weekly_remaining)
            errors.append(
                f"Weekly limit exceeded. Requested: {format_hours(requested_hours)}, "
                f"Available this week: {format_hours(available_week)}, "
                f"Short by: {format_hours(requested_hours - available_week)}"
            )

    return AllocationResult(
        is_valid=not errors,
        max_allowable_hours=max_allowable,
        weekly_remaining=weekly_remaining,
        per_day_remaining=remaining_by_day,
        errors=errors,
        warnings=warnings,
        requested_hours=requested_hours,
        selected_capacity=selected_capacity,
        violation=violation,
    )
