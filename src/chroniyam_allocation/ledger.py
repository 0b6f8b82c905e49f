"""
Daily hour ledger: the per-date record of hours already committed by tasks.

The ledger is never stored. It is rebuilt from a task list on every query with
the sequential-fill rule:

* a recurring task commits its full ``estimated_hours`` on every day it spans;
* a non-recurring task is a single pool of hours drained across its span in
  date order, taking ``min(pool, daily_limit - used)`` on each day until the
  pool is empty. Hours that do not fit anywhere in the span are dropped.

Tasks are layered in the order given by ``LedgerOrdering`` so the outcome is
deterministic for a given task list.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from datetime import date
from enum import Enum
from typing import Protocol

from .dates import DAYS_IN_WEEK, DateLike, enumerate_dates, format_date, parse_date

logger = logging.getLogger(__name__)

DEFAULT_DAILY_LIMIT = 8.0

# Amounts below this are float noise, not hours.
HOURS_EPSILON = 1e-9

Ledger = dict[str, float]


class SupportsAllocation(Protocol):
    """Anything shaped like a task as far as the ledger is concerned."""

    id: str
    start_date: date | str
    due_date: date | str
    estimated_hours: float
    is_recurring: bool


@dataclass(frozen=True)
class TaskSpec:
    """Minimal task value accepted by the engine."""

    id: str
    start_date: str
    due_date: str
    estimated_hours: float
    is_recurring: bool = False


class LedgerOrdering(str, Enum):
    """Order in which tasks claim partial-day capacity."""

    INSERTION = "insertion"
    EARLIEST_DUE_FIRST = "earliest_due_first"


@dataclass
class TaskAllocation:
    """Where one task's hours landed in the ledger."""

    task_id: str
    requested_hours: float
    hours_by_date: dict[str, float] = field(default_factory=dict)
    unallocated_hours: float = 0.0
    is_recurring: bool = False

    @property
    def allocated_hours(self) -> float:
        return sum(self.hours_by_date.values())

    @property
    def is_truncated(self) -> bool:
        return self.unallocated_hours > HOURS_EPSILON


@dataclass(frozen=True)
class DatedAllocation:
    """One task's share of one day, as shown on a calendar cell."""

    task_id: str
    date: str
    hours: float
    day_index: int
    total_days: int


@dataclass
class AllocationTrace:
    ledger: Ledger
    allocations: list[TaskAllocation] = field(default_factory=list)
    by_date: dict[str, list[DatedAllocation]] = field(default_factory=dict)

    @property
    def truncated(self) -> list[TaskAllocation]:
        return [a for a in self.allocations if a.is_truncated]


def round_hours(hours: float) -> float:
    """Round to one decimal place."""
    return round(hours * 10) / 10


def format_hours(hours: float) -> str:
    """``2h`` for whole hours, ``2.5h`` otherwise."""
    rounded = round_hours(hours)
    if rounded == int(rounded):
        return f"{int(rounded)}h"
    return f"{rounded:.1f}h"


def task_dates(task: SupportsAllocation) -> list[str]:
    """The inclusive list of dates a task spans."""
    return list(enumerate_dates(task.start_date, task.due_date))


def order_tasks(
    tasks: Iterable[SupportsAllocation],
    ordering: LedgerOrdering = LedgerOrdering.INSERTION,
) -> list[SupportsAllocation]:
    """Return ``tasks`` in the order they should be layered onto the ledger."""
    ordered = list(tasks)
    if ordering == LedgerOrdering.EARLIEST_DUE_FIRST:
        # sorted() is stable, so ties keep insertion order
        ordered.sort(key=lambda t: (parse_date(t.due_date), parse_date(t.start_date)))
    return ordered


def allocate_task(
    ledger: Ledger, task: SupportsAllocation, daily_limit: float = DEFAULT_DAILY_LIMIT
) -> TaskAllocation:
    """Layer one task onto ``ledger`` in place and report where its hours went."""
    allocation = TaskAllocation(
        task_id=task.id,
        requested_hours=task.estimated_hours,
        is_recurring=bool(task.is_recurring),
    )
    dates = task_dates(task)

    if task.is_recurring:
        for day in dates:
            ledger[day] = ledger.get(day, 0.0) + task.estimated_hours
            allocation.hours_by_date[day] = task.estimated_hours
        return allocation

    remaining = task.estimated_hours
    for day in dates:
        if remaining <= HOURS_EPSILON:
            break
        used = ledger.get(day, 0.0)
        to_allocate = min(remaining, daily_limit - used)
        if to_allocate > 0:
            ledger[day] = used + to_allocate
            allocation.hours_by_date[day] = to_allocate
            remaining -= to_allocate

    allocation.unallocated_hours = max(0.0, remaining)
    return allocation


def build_allocation_trace(
    tasks: Iterable[SupportsAllocation],
    daily_limit: float = DEFAULT_DAILY_LIMIT,
    ordering: LedgerOrdering = LedgerOrdering.INSERTION,
) -> AllocationTrace:
    """Build the ledger and keep the per-task, per-day breakdown."""
    trace = AllocationTrace(ledger={})
    for task in order_tasks(tasks, ordering):
        allocation = allocate_task(trace.ledger, task, daily_limit)
        trace.allocations.append(allocation)

        total_days = span_days_of(task)
        for day_index, day in enumerate(task_dates(task), start=1):
            hours = allocation.hours_by_date.get(day)
            if not hours:
                continue
            trace.by_date.setdefault(day, []).append(
                DatedAllocation(
                    task_id=task.id,
                    date=day,
                    hours=hours,
                    day_index=day_index,
                    total_days=total_days,
                )
            )

        if allocation.is_truncated:
            logger.debug(
                f"Task {task.id} has {format_hours(allocation.unallocated_hours)} "
                f"that do not fit between {format_date(task.start_date)} and "
                f"{format_date(task.due_date)}"
            )
    return trace


def build_ledger(
    tasks: Iterable[SupportsAllocation],
    daily_limit: float = DEFAULT_DAILY_LIMIT,
    ordering: LedgerOrdering = LedgerOrdering.INSERTION,
) -> Ledger:
    """Per-date committed hours for ``tasks`` under the sequential-fill rule."""
    ledger: Ledger = {}
    count = 0
    for task in order_tasks(tasks, ordering):
        allocate_task(ledger, task, daily_limit)
        count += 1
    logger.debug(
        f"Built ledger for {count} tasks over {len(ledger)} days "
        f"({format_hours(ledger_total(ledger))} committed)"
    )
    return ledger


def release_task(ledger: Ledger, task: SupportsAllocation) -> Ledger:
    """Return a copy of ``ledger`` with ``task``'s contribution taken back out.

    Non-recurring hours are released with the same sequential walk used to
    place them: starting from the first spanned day, subtract
    ``min(remaining, ledger[day])`` until the task's hours are used up.
    Recurring hours are released from every spanned day.
    """
    adjusted = dict(ledger)
    dates = task_dates(task)

    if task.is_recurring:
        for day in dates:
            if adjusted.get(day):
                adjusted[day] = max(0.0, adjusted[day] - task.estimated_hours)
        return adjusted

    remaining = task.estimated_hours
    for day in dates:
        if remaining <= HOURS_EPSILON:
            break
        current = adjusted.get(day, 0.0)
        if current > 0:
            to_subtract = min(remaining, current)
            adjusted[day] = max(0.0, current - to_subtract)
            remaining -= to_subtract
    return adjusted


def span_days_of(task: SupportsAllocation) -> int:
    return (parse_date(task.due_date) - parse_date(task.start_date)).days + 1


def remaining_on_day(
    day: DateLike, ledger: Ledger, daily_limit: float = DEFAULT_DAILY_LIMIT
) -> float:
    """Hours still free on ``day``, never below zero."""
    return max(0.0, daily_limit - ledger.get(format_date(day), 0.0))


def per_day_remaining(
    days: Iterable[DateLike], ledger: Ledger, daily_limit: float = DEFAULT_DAILY_LIMIT
) -> dict[str, float]:
    return {format_date(d): remaining_on_day(d, ledger, daily_limit) for d in days}


def remaining_across_days(
    days: Iterable[DateLike], ledger: Ledger, daily_limit: float = DEFAULT_DAILY_LIMIT
) -> float:
    """Sum of each day's remaining hours (not a blended pool)."""
    return sum(per_day_remaining(days, ledger, daily_limit).values())


def weekly_limit(daily_limit: float = DEFAULT_DAILY_LIMIT) -> float:
    return daily_limit * DAYS_IN_WEEK


def weekly_used(days: Sequence[DateLike], ledger: Ledger) -> float:
    return ledger_total(ledger, days)


def ledger_total(ledger: Ledger, days: Iterable[DateLike] | None = None) -> float:
    """Total committed hours, optionally restricted to ``days``."""
    if days is None:
        return sum(ledger.values())
    return sum(ledger.get(format_date(d), 0.0) for d in days)
