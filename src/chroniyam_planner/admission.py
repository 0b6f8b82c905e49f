"""
Task admission flows: create/edit a task and paste a copied task.

Each flow validates a candidate against a ledger snapshot and returns an
``AdmissionResult``. Validation failures never escape as exceptions; the
caller commits the returned tasks only when ``accepted`` is true.
"""

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field
from datetime import timedelta

from pydantic import ValidationError as PydanticValidationError

from chroniyam_allocation import (
    AllocationError,
    AllocationResult,
    CapacityViolation,
    Ledger,
    NonPositiveHoursError,
    enumerate_dates,
    format_date,
    parse_date,
    validate_allocation,
    weekday_index,
)
from chroniyam_allocation.dates import format_short
from chroniyam_allocation.ledger import SupportsAllocation, format_hours
from chroniyam_allocation.validation import full_days_warning

from chroniyam_planner.capacity import window_ledger
from chroniyam_planner.common.error_handlers import (
    CapacityExceededError,
    PlannerError,
    ValidationError,
    handle_planner_error,
    validate_date_order,
)
from chroniyam_planner.models import (
    AdmissionResult,
    Quadrant,
    Task,
    TaskDraft,
    TimeWindow,
)

logger = logging.getLogger(__name__)

ADMISSION_ERRORS = (PlannerError, AllocationError, PydanticValidationError)


@dataclass
class CapacityCheck:
    """Outcome of checking one candidate against a ledger"""

    is_valid: bool
    result: AllocationResult
    failing_date: str | None = None
    warnings: list[str] = field(default_factory=list)


def check_capacity(
    candidate: SupportsAllocation, ledger: Ledger, daily_limit: float
) -> CapacityCheck:
    """
    Validate a task-shaped candidate against ``ledger``.

    Recurring candidates need their full hours free on every spanned day, so
    each day is validated on its own and the first failing day is reported.
    Non-recurring candidates are validated over the whole span at once.
    """
    dates = list(enumerate_dates(candidate.start_date, candidate.due_date))

    if not candidate.is_recurring:
        result = validate_allocation(
            selected_dates=dates,
            requested_hours=candidate.estimated_hours,
            ledger=ledger,
            daily_limit=daily_limit,
        )
        return CapacityCheck(
            is_valid=result.is_valid, result=result, warnings=list(result.warnings)
        )

    full_days = 0
    result: AllocationResult | None = None
    for day in dates:
        result = validate_allocation(
            selected_dates=[day],
            requested_hours=candidate.estimated_hours,
            ledger=ledger,
            daily_limit=daily_limit,
        )
        full_days += len(result.full_days)
        if not result.is_valid:
            warnings = [full_days_warning(full_days, daily_limit)] if full_days else []
            return CapacityCheck(
                is_valid=False, result=result, failing_date=day, warnings=warnings
            )

    warnings = [full_days_warning(full_days, daily_limit)] if full_days else []
    return CapacityCheck(is_valid=True, result=result, warnings=warnings)  # type: ignore[arg-type]


def capacity_message(check: CapacityCheck, ledger: Ledger, daily_limit: float) -> str:
    """User-facing message for a failed capacity check"""
    result = check.result
    day = check.failing_date
    if day is None:
        return result.errors[0]
    if result.violation == CapacityViolation.DAY_CAPACITY:
        used = ledger.get(day, 0.0)
        return (
            f"Daily limit {format_hours(daily_limit)}. {format_hours(used)} already "
            f"scheduled. {format_hours(result.selected_capacity)} left on "
            f"{format_short(day)} ({day})."
        )
    return f"{format_short(day)} ({day}): {result.errors[0]}"


def capacity_error(
    check: CapacityCheck, ledger: Ledger, daily_limit: float
) -> CapacityExceededError:
    result = check.result
    violation = result.violation or CapacityViolation.DAY_CAPACITY
    return CapacityExceededError(
        needed=result.requested_hours,
        available=result.max_allowable_hours,
        message=capacity_message(check, ledger, daily_limit),
        error_code=violation.value,
    )


def _check_draft_inputs(draft: TaskDraft) -> None:
    if not draft.title.strip():
        raise ValidationError("Title is required.", field="title")
    validate_date_order(draft.start_date, draft.due_date)
    if draft.estimated_hours <= 0:
        raise NonPositiveHoursError(draft.estimated_hours)


def _check_within_window(draft: TaskDraft, window: TimeWindow) -> None:
    if not (window.contains(draft.start_date) and window.contains(draft.due_date)):
        raise ValidationError(
            f"Task dates must fall within the plan "
            f"({format_date(window.start_date)} to {format_date(window.end_date)}).",
            field="start_date",
        )


def validate_task_draft(
    draft: TaskDraft,
    all_tasks: Sequence[Task],
    window: TimeWindow | None = None,
) -> AdmissionResult:
    """
    Validate a create/edit form submission.

    Args:
        draft: Form input; ``draft.id`` is set when editing an existing task
        all_tasks: Snapshot of every task in the session
        window: Active plan, if any. Without one only input validity is checked.

    Returns:
        AdmissionResult holding the task to save, or the rejection reasons
    """
    warnings: list[str] = []
    try:
        _check_draft_inputs(draft)

        task = draft.to_task()

        if window is not None:
            _check_within_window(draft, window)
            others = [t for t in all_tasks if t.id != draft.id]
            ledger = window_ledger(others, window)
            check = check_capacity(task, ledger, window.hours_per_day)
            warnings.extend(check.warnings)
            if not check.is_valid:
                raise capacity_error(check, ledger, window.hours_per_day)
    except ADMISSION_ERRORS as e:
        logger.warning(f"Rejected task '{draft.title}': {e}")
        return handle_planner_error(e, warnings)

    action = "Updated" if draft.id else "Created"
    logger.info(
        f"{action} task '{task.title}' ({format_hours(task.estimated_hours)}, "
        f"{format_date(task.start_date)} to {format_date(task.due_date)})"
    )
    return AdmissionResult.accept([task], warnings)


def equivalent_range(task: Task, window: TimeWindow) -> tuple[str, str]:
    """
    Date range in ``window`` matching ``task``'s range.

    The task's own dates are used when they lie inside the window. Otherwise
    the range keeps its length and starts on the same weekday inside the window.
    """
    if window.contains(task.start_date) and window.contains(task.due_date):
        return format_date(task.start_date), format_date(task.due_date)

    start_weekday = weekday_index(task.start_date)
    start = next(
        (d for d in window.dates if weekday_index(d) == start_weekday), None
    )
    if start is None:
        raise ValidationError(
            f"The plan has no {task.start_date.strftime('%A')} to paste '{task.title}' onto.",
            field="start_date",
        )
    due = parse_date(start) + timedelta(days=task.span_days - 1)
    if not window.contains(due):
        raise ValidationError(
            f"'{task.title}' spans {task.span_days} days and does not fit in the plan "
            f"starting {format_short(start)}.",
            field="due_date",
        )
    return start, format_date(due)


def _paste_capacity_error(check: CapacityCheck) -> CapacityExceededError:
    result = check.result
    needed = result.requested_hours
    available = result.max_allowable_hours
    shortfall = max(0.0, needed - available)
    violation = result.violation or CapacityViolation.DAY_CAPACITY
    day = ""
    if check.failing_date:
        day = f" on {format_short(check.failing_date)} ({check.failing_date})"

    if violation == CapacityViolation.WEEKLY_LIMIT:
        reason, scope = "Weekly limit exceeded", " this week"
    else:
        reason, scope = "Not enough capacity", ""
    return CapacityExceededError(
        needed=needed,
        available=available,
        message=(
            f"Cannot paste task: {reason}. Need {format_hours(needed)}{day} but only "
            f"{format_hours(available)} available{scope} "
            f"(shortfall: {format_hours(shortfall)})."
        ),
        error_code=violation.value,
    )


def paste_task(
    copied: Task,
    target_quadrant: Quadrant,
    all_tasks: Sequence[Task],
    window: TimeWindow | None,
) -> AdmissionResult:
    """
    Validate pasting a copy of ``copied`` into ``target_quadrant``.

    The copy goes through the same capacity check as a newly created task:
    recurring copies need their hours free on each day, and every copy is
    held to the weekly limit.

    Args:
        copied: Task on the clipboard
        target_quadrant: Quadrant the copy is dropped into
        all_tasks: Snapshot of every task in the session
        window: Active plan receiving the copy

    Returns:
        AdmissionResult holding the new task, or needed/available/shortfall details
    """
    try:
        if window is None:
            raise ValidationError("Create a plan before pasting tasks.")

        start, due = equivalent_range(copied, window)
        task = Task(
            title=copied.title,
            description=copied.description,
            quadrant=target_quadrant,
            estimated_hours=copied.estimated_hours,
            start_date=start,
            due_date=due,
            completed=False,
            is_recurring=copied.is_recurring,
        )

        ledger = window_ledger(all_tasks, window)
        check = check_capacity(task, ledger, window.hours_per_day)
        if not check.is_valid:
            raise _paste_capacity_error(check)
    except ADMISSION_ERRORS as e:
        logger.warning(f"Rejected paste of '{copied.title}': {e}")
        return handle_planner_error(e)

    logger.info(f"Pasted '{task.title}' into {target_quadrant.value} ({start} to {due})")
    return AdmissionResult.accept([task])
