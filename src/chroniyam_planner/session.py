"""
Planner session state.

``PlannerSession`` owns the task list, the weekly plans and both clipboards.
Admission flows run against a snapshot of the task list; the session only
changes its own state after a flow accepts.
"""

import logging
from datetime import date

from chroniyam_allocation import Ledger, build_ledger
from chroniyam_allocation.ledger import AllocationTrace, build_allocation_trace

from chroniyam_planner import admission
from chroniyam_planner.balance import evaluate_balance
from chroniyam_planner.capacity import (
    day_usage_summary,
    tasks_in_window,
    window_ledger,
    window_trace,
    with_allocated_hours,
)
from chroniyam_planner.common.error_handlers import (
    ClipboardEmptyError,
    ResourceNotFoundError,
    ValidationError,
    handle_planner_error,
)
from chroniyam_planner.config import settings
from chroniyam_planner.models import (
    AdmissionResult,
    BalanceReport,
    DayUsage,
    Quadrant,
    Task,
    TaskDraft,
    TimeWindow,
    WeekTemplateEntry,
)
from chroniyam_planner.plans import sort_plans, week_navigation_label
from chroniyam_planner.week_template import copy_week_template, paste_week_template

logger = logging.getLogger(__name__)


class PlannerSession:
    """In-memory planner state for a single user"""

    def __init__(self) -> None:
        self.tasks: list[Task] = []
        self.plans: list[TimeWindow] = []
        self.current_plan_index = 0

        self.copied_task: Task | None = None
        self.paste_error = ""

        self.copied_week: list[WeekTemplateEntry] | None = None
        self.copied_week_key: tuple[str, str] | None = None

    # Plans

    @property
    def sorted_plans(self) -> list[TimeWindow]:
        return sort_plans(self.plans)

    @property
    def current_plan(self) -> TimeWindow | None:
        ordered = self.sorted_plans
        if 0 <= self.current_plan_index < len(ordered):
            return ordered[self.current_plan_index]
        return None

    @property
    def current_window(self) -> TimeWindow | None:
        """Current plan with ``allocated_hours`` recomputed from the tasks"""
        plan = self.current_plan
        if plan is None:
            return None
        return with_allocated_hours(plan, self.tasks)

    @property
    def can_go_previous(self) -> bool:
        return self.current_plan_index > 0

    @property
    def can_go_next(self) -> bool:
        return self.current_plan_index < len(self.plans) - 1

    def previous_week(self) -> TimeWindow | None:
        if self.can_go_previous:
            self.current_plan_index -= 1
        return self.current_plan

    def next_week(self) -> TimeWindow | None:
        if self.can_go_next:
            self.current_plan_index += 1
        return self.current_plan

    @property
    def navigation_label(self) -> str | None:
        return week_navigation_label(self.sorted_plans, self.current_plan_index)

    def save_plan(self, plan: TimeWindow) -> TimeWindow:
        """
        Add a plan, or replace the plan with the same start and end dates.

        A newly added plan becomes the current plan.
        """
        for index, existing in enumerate(self.plans):
            if existing.key == plan.key:
                self.plans[index] = plan
                logger.info(f"Updated plan {plan.key[0]} to {plan.key[1]}")
                return plan

        self.plans.append(plan)
        self.current_plan_index = next(
            i for i, p in enumerate(self.sorted_plans) if p.key == plan.key
        )
        logger.info(
            f"Added plan {plan.key[0]} to {plan.key[1]} "
            f"({plan.hours_per_day}h/day, {plan.total_hours}h total)"
        )
        return plan

    # Tasks

    @property
    def week_tasks(self) -> list[Task]:
        """Tasks overlapping the current plan, or all tasks without a plan"""
        return tasks_in_window(self.tasks, self.current_plan)

    def get_task(self, task_id: str) -> Task:
        for task in self.tasks:
            if task.id == task_id:
                return task
        raise ResourceNotFoundError("Task", task_id)

    def _replace_task(self, task: Task) -> None:
        for index, existing in enumerate(self.tasks):
            if existing.id == task.id:
                self.tasks[index] = task
                return
        self.tasks.append(task)

    def save_task(self, draft: TaskDraft) -> AdmissionResult:
        """Create or update a task; nothing changes when the draft is rejected"""
        result = admission.validate_task_draft(
            draft, list(self.tasks), self.current_plan
        )
        if result.accepted:
            self._replace_task(result.tasks[0])
        return result

    def delete_task(self, task_id: str) -> Task:
        task = self.get_task(task_id)
        self.tasks = [t for t in self.tasks if t.id != task_id]
        logger.info(f"Deleted task '{task.title}'")
        return task

    def move_task(self, task_id: str, quadrant: Quadrant) -> Task:
        """Move a task to another quadrant. Hours and dates are unchanged."""
        task = self.get_task(task_id).model_copy(update={"quadrant": quadrant})
        self._replace_task(task)
        logger.info(f"Moved task '{task.title}' to {quadrant.value}")
        return task

    def toggle_completed(self, task_id: str) -> Task:
        task = self.get_task(task_id)
        task = task.model_copy(update={"completed": not task.completed})
        self._replace_task(task)
        return task

    def clear_tasks(self, scope_to_current_window: bool = True) -> int:
        """
        Remove tasks and return how many were removed.

        With a current plan and ``scope_to_current_window`` only the tasks
        overlapping that plan are removed.
        """
        plan = self.current_plan
        if scope_to_current_window and plan is not None:
            removed = {t.id for t in tasks_in_window(self.tasks, plan)}
        else:
            removed = {t.id for t in self.tasks}
        self.tasks = [t for t in self.tasks if t.id not in removed]
        logger.info(f"Cleared {len(removed)} tasks")
        return len(removed)

    # Single-task clipboard

    def copy_task(self, task_id: str) -> Task:
        self.copied_task = self.get_task(task_id)
        self.paste_error = ""
        return self.copied_task

    def paste_task(self, quadrant: Quadrant) -> AdmissionResult:
        """
        Paste the copied task into ``quadrant`` of the current plan.

        The clipboard is cleared on success. On rejection it is kept and the
        message is stored in ``paste_error``.
        """
        if self.copied_task is None:
            result = handle_planner_error(ClipboardEmptyError("task"))
        else:
            result = admission.paste_task(
                self.copied_task, quadrant, list(self.tasks), self.current_plan
            )

        if not result.accepted:
            self.paste_error = result.message
            return result

        self.tasks.extend(result.tasks)
        self.copied_task = None
        self.paste_error = ""
        return result

    def cancel_clipboard(self) -> None:
        self.copied_task = None
        self.paste_error = ""

    # Week clipboard

    def copy_week(self) -> list[WeekTemplateEntry]:
        plan = self.current_plan
        if plan is None:
            raise ValidationError("Create a plan before copying a week.")
        template = copy_week_template(self.tasks, plan)
        if not template:
            raise ValidationError("There are no tasks in this week to copy.")
        self.copied_week = template
        self.copied_week_key = plan.key
        return template

    @property
    def can_paste_week(self) -> bool:
        plan = self.current_plan
        return (
            plan is not None
            and self.copied_week is not None
            and plan.key != self.copied_week_key
        )

    def paste_week(self) -> AdmissionResult:
        """Paste the copied week into the current plan as a single unit"""
        plan = self.current_plan
        if plan is None:
            return handle_planner_error(
                ValidationError("Create a plan before pasting a week.")
            )
        if self.copied_week is None:
            return handle_planner_error(ClipboardEmptyError("week"))
        if plan.key == self.copied_week_key:
            return handle_planner_error(
                ValidationError("Cannot paste a week into the week it was copied from.")
            )

        result = paste_week_template(self.copied_week, plan, list(self.tasks))
        if result.accepted:
            self.tasks.extend(result.tasks)
        return result

    # Snapshots

    def ledger(self) -> Ledger:
        plan = self.current_plan
        if plan is None:
            return build_ledger(
                self.tasks, settings.default_hours_per_day, settings.ledger_ordering
            )
        return window_ledger(self.tasks, plan)

    def allocation_trace(self) -> AllocationTrace:
        """Per-task, per-day hours for the calendar view"""
        plan = self.current_plan
        if plan is None:
            return build_allocation_trace(
                self.tasks, settings.default_hours_per_day, settings.ledger_ordering
            )
        return window_trace(self.tasks, plan)

    def day_usage(self, day: date | str, exclude_task_id: str | None = None) -> DayUsage:
        plan = self.current_plan
        if plan is None:
            raise ValidationError("Create a plan to see daily capacity.")
        return day_usage_summary(day, self.tasks, plan, exclude_task_id)

    def balance(self) -> BalanceReport:
        return evaluate_balance(self.week_tasks)
