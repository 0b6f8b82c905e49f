"""
Copy a week of tasks as a weekday template and paste it into another week.

A template stores each task's start and end as weekdays (Monday=0 .. Sunday=6)
rather than dates, so pasting lands every task on the same weekday of the
target week. Pasting is all-or-nothing: either every remapped task fits or
nothing is added.
"""

import logging
from collections.abc import Sequence

from chroniyam_allocation import (
    allocate_task,
    format_date,
    week_dates,
    weekday_index,
    weekly_limit,
)
from chroniyam_allocation.ledger import HOURS_EPSILON, format_hours, ledger_total

from chroniyam_planner.admission import capacity_message, check_capacity
from chroniyam_planner.capacity import tasks_in_window, window_ledger
from chroniyam_planner.common.error_handlers import (
    ClipboardEmptyError,
    handle_planner_error,
)
from chroniyam_planner.models import AdmissionResult, Task, TimeWindow, WeekTemplateEntry

logger = logging.getLogger(__name__)


def copy_week_template(
    tasks: Sequence[Task], source_week: TimeWindow
) -> list[WeekTemplateEntry]:
    """
    Record the tasks overlapping ``source_week`` as weekday-positioned entries.

    A task reaching outside the source week is clipped to the week before its
    weekdays are taken; its estimated hours are copied unchanged.
    """
    template: list[WeekTemplateEntry] = []
    for task in tasks_in_window(tasks, source_week):
        start = max(task.start_date, source_week.start_date)
        end = min(task.due_date, source_week.end_date)
        start_weekday = weekday_index(start)
        end_weekday = weekday_index(end)
        if end_weekday < start_weekday or (end - start).days >= 7:
            # Longer than a Monday-Sunday run; keep it to the rest of its week.
            logger.warning(
                f"Task '{task.title}' crosses a week boundary; "
                f"copying it as {format_date(start)} through Sunday"
            )
            end_weekday = 6

        template.append(
            WeekTemplateEntry(
                title=task.title,
                description=task.description,
                quadrant=task.quadrant,
                estimated_hours=task.estimated_hours,
                is_recurring=task.is_recurring,
                start_weekday=start_weekday,
                end_weekday=end_weekday,
            )
        )

    logger.info(
        f"Copied {len(template)} tasks from week "
        f"{format_date(source_week.start_date)} to {format_date(source_week.end_date)}"
    )
    return template


def remap_template(
    template: Sequence[WeekTemplateEntry], target_week: TimeWindow
) -> tuple[list[Task], list[WeekTemplateEntry]]:
    """
    Turn template entries into fresh tasks dated inside ``target_week``.

    Returns:
        Tuple of (tasks, dropped) where ``dropped`` holds the entries whose
        weekday has no date in the target week
    """
    dates_by_weekday: dict[int, str] = {}
    for day in target_week.dates:
        dates_by_weekday.setdefault(weekday_index(day), day)

    tasks: list[Task] = []
    dropped: list[WeekTemplateEntry] = []
    for entry in template:
        start = dates_by_weekday.get(entry.start_weekday)
        end = dates_by_weekday.get(entry.end_weekday)
        if start is None or end is None or end < start:
            dropped.append(entry)
            continue
        tasks.append(
            Task(
                title=entry.title,
                description=entry.description,
                quadrant=entry.quadrant,
                estimated_hours=entry.estimated_hours,
                start_date=start,
                due_date=end,
                completed=False,
                is_recurring=entry.is_recurring,
            )
        )
    return tasks, dropped


def paste_week_template(
    template: Sequence[WeekTemplateEntry],
    target_week: TimeWindow,
    existing_tasks: Sequence[Task],
) -> AdmissionResult:
    """
    Validate pasting ``template`` into ``target_week``.

    Candidates are checked in template order against a running ledger seeded
    from the target week's existing tasks; each accepted candidate is layered
    onto the ledger before the next is checked. Every violation is collected.

    Args:
        template: Entries produced by ``copy_week_template``
        target_week: Plan receiving the tasks
        existing_tasks: Snapshot of every task in the session

    Returns:
        AdmissionResult holding all new tasks, or every violation found
    """
    if not template:
        return handle_planner_error(ClipboardEmptyError("week"))

    daily_limit = target_week.hours_per_day
    candidates, dropped = remap_template(template, target_week)

    warnings: list[str] = []
    if dropped:
        titles = ", ".join(f"'{entry.title}'" for entry in dropped)
        warnings.append(
            f"{len(dropped)} of {len(template)} tasks have no matching day in the "
            f"target week and were skipped: {titles}."
        )
        logger.warning(f"Week paste skipped entries without a matching day: {titles}")

    if not candidates:
        return AdmissionResult.reject(
            ["None of the copied tasks fit the days of the target week."],
            "NOTHING_TO_PASTE",
            warnings=warnings,
        )

    ledger = window_ledger(existing_tasks, target_week)
    errors: list[str] = []
    for candidate in candidates:
        check = check_capacity(candidate, ledger, daily_limit)
        if not check.is_valid:
            errors.append(
                f"'{candidate.title}': {capacity_message(check, ledger, daily_limit)}"
            )
            continue
        allocate_task(ledger, candidate, daily_limit)

    if errors:
        logger.warning(
            f"Rejected week paste into {format_date(target_week.start_date)}: "
            f"{len(errors)} of {len(candidates)} tasks do not fit"
        )
        return AdmissionResult.reject(
            errors,
            "WEEK_PASTE_REJECTED",
            warnings=warnings,
            details={"violations": len(errors), "candidates": len(candidates)},
        )

    limit = weekly_limit(daily_limit)
    week_total = ledger_total(ledger, week_dates(target_week.start_date))
    if week_total > limit + HOURS_EPSILON:
        logger.warning(
            f"Rejected week paste into {format_date(target_week.start_date)}: "
            f"weekly total {format_hours(week_total)} over {format_hours(limit)}"
        )
        return AdmissionResult.reject(
            [
                f"Weekly limit exceeded. The week would hold {format_hours(week_total)} "
                f"but the limit is {format_hours(limit)} "
                f"(over by {format_hours(week_total - limit)})."
            ],
            "WEEKLY_LIMIT_EXCEEDED",
            warnings=warnings,
            details={"week_total": week_total, "weekly_limit": limit},
        )

    logger.info(
        f"Pasted {len(candidates)} tasks into week {format_date(target_week.start_date)}"
    )
    return AdmissionResult.accept(candidates, warnings)
