"""Hours-allocation engine decoupled from the planner layer.

This package is intentionally dependency-free. It turns task lists into a
per-day hour ledger and validates new allocations against daily and weekly
limits. Everything here is a pure function of its inputs.
"""

from .dates import (
    DateRange,
    enumerate_dates,
    format_date,
    parse_date,
    week_dates,
    week_end,
    week_start,
    weekday_index,
)
from .exceptions import (
    AllocationError,
    EmptySelectionError,
    InvalidDateError,
    InvalidRangeError,
    NonPositiveHoursError,
)
from .ledger import (
    DEFAULT_DAILY_LIMIT,
    AllocationTrace,
    DatedAllocation,
    Ledger,
    LedgerOrdering,
    TaskAllocation,
    TaskSpec,
    allocate_task,
    build_allocation_trace,
    build_ledger,
    release_task,
    remaining_across_days,
    remaining_on_day,
    weekly_limit,
)
from .validation import AllocationResult, CapacityViolation, validate_allocation

__all__ = [
    "AllocationError",
    "AllocationResult",
    "AllocationTrace",
    "allocate_task",
    "build_allocation_trace",
    "build_ledger",
    "CapacityViolation",
    "DateRange",
    "DatedAllocation",
    "DEFAULT_DAILY_LIMIT",
    "EmptySelectionError",
    "enumerate_dates",
    "format_date",
    "InvalidDateError",
    "InvalidRangeError",
    "Ledger",
    "LedgerOrdering",
    "NonPositiveHoursError",
    "parse_date",
    "release_task",
    "remaining_across_days",
    "remaining_on_day",
    "TaskAllocation",
    "TaskSpec",
    "validate_allocation",
    "week_dates",
    "week_end",
    "week_start",
    "weekday_index",
    "weekly_limit",
]
