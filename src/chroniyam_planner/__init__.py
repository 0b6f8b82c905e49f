"""Eisenhower-matrix weekly planner built on the hours-allocation engine.

Tasks, plans and admission flows live here; the per-day hour bookkeeping is
delegated to ``chroniyam_allocation``.
"""

from chroniyam_planner.admission import paste_task, validate_task_draft
from chroniyam_planner.balance import evaluate_balance
from chroniyam_planner.capacity import remaining_across_range
from chroniyam_planner.config import Settings, configure_logging, settings
from chroniyam_planner.models import (
    QUADRANTS,
    AdmissionResult,
    BalanceReport,
    Quadrant,
    Task,
    TaskDraft,
    TimeWindow,
    WeekTemplateEntry,
)
from chroniyam_planner.session import PlannerSession
from chroniyam_planner.week_template import copy_week_template, paste_week_template

__all__ = [
    "AdmissionResult",
    "BalanceReport",
    "configure_logging",
    "copy_week_template",
    "evaluate_balance",
    "paste_task",
    "paste_week_template",
    "PlannerSession",
    "Quadrant",
    "QUADRANTS",
    "remaining_across_range",
    "Settings",
    "settings",
    "Task",
    "TaskDraft",
    "TimeWindow",
    "validate_task_draft",
    "WeekTemplateEntry",
]
