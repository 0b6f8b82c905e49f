"""
Weekly plan construction and labelling.

A plan is a ``TimeWindow``: either the rest of the current week (today or
tomorrow through Sunday) or a full Monday-Sunday week in the future.
"""

import logging
import math
from collections.abc import Sequence
from datetime import date, datetime, timedelta

from chroniyam_allocation import format_date, parse_date
from chroniyam_allocation.dates import (
    DAYS_IN_WEEK,
    next_monday,
    ranges_overlap,
    upcoming_sunday,
    week_end,
)

from chroniyam_planner.common.error_handlers import ValidationError
from chroniyam_planner.config import settings
from chroniyam_planner.models import FutureWeekOption, TimeWindow

logger = logging.getLogger(__name__)

HOURS_IN_DAY = 24


def hours_left_today(now: datetime | None = None) -> float:
    """Hours remaining before midnight, rounded down to the nearest half hour"""
    now = now or datetime.now()
    left = HOURS_IN_DAY - now.hour - now.minute / 60
    return max(0.0, math.floor(left * 2) / 2)


def build_current_week_plan(
    today: date | str,
    hours_per_day: float,
    start_from_tomorrow: bool = False,
    today_hours: float | None = None,
    now: datetime | None = None,
) -> TimeWindow:
    """
    Plan covering the rest of the current week.

    When the plan starts today and the daily budget exceeds the hours left
    today, today contributes ``today_hours`` (default: the hours left) to the
    total instead of a full day.

    Args:
        today: Current date
        hours_per_day: Daily hour budget
        start_from_tomorrow: Start the plan tomorrow instead of today
        today_hours: Hours the user can still give today
        now: Current time, used to compute the hours left today

    Returns:
        TimeWindow from the start day to the upcoming Sunday
    """
    start = parse_date(today)
    if start_from_tomorrow:
        start += timedelta(days=1)
    end = upcoming_sunday(start)
    days = (end - start).days + 1

    total_hours = days * hours_per_day
    if not start_from_tomorrow:
        left = hours_left_today(now)
        if hours_per_day > left:
            first_day = left if today_hours is None else today_hours
            total_hours = first_day + (days - 1) * hours_per_day

    plan = TimeWindow.for_range(start, end, hours_per_day, total_hours=total_hours)
    logger.info(
        f"Built current-week plan {format_date(start)} to {format_date(end)} "
        f"({days} days, {total_hours}h total)"
    )
    return plan


def build_future_week_plan(start_monday: date | str, hours_per_day: float) -> TimeWindow:
    """Full Monday-Sunday plan starting on ``start_monday``"""
    start = parse_date(start_monday)
    if start.weekday() != 0:
        raise ValidationError(
            f"Future plans must start on a Monday, got {format_date(start)}",
            field="start_date",
        )
    return TimeWindow.for_range(start, week_end(start), hours_per_day)


def future_week_options(
    today: date | str,
    existing_plans: Sequence[TimeWindow],
    count: int | None = None,
) -> list[FutureWeekOption]:
    """The next ``count`` Monday-start weeks, flagged when already planned"""
    count = count or settings.future_week_options
    options: list[FutureWeekOption] = []
    start = next_monday(today)
    for _ in range(count):
        end = start + timedelta(days=DAYS_IN_WEEK - 1)
        is_planned = any(
            ranges_overlap(start, end, plan.start_date, plan.end_date)
            for plan in existing_plans
        )
        options.append(FutureWeekOption(start=start, end=end, is_planned=is_planned))
        start += timedelta(days=DAYS_IN_WEEK)
    return options


def first_available_future_week(
    today: date | str,
    existing_plans: Sequence[TimeWindow],
    count: int | None = None,
) -> FutureWeekOption | None:
    return next(
        (
            option
            for option in future_week_options(today, existing_plans, count)
            if not option.is_planned
        ),
        None,
    )


def sort_plans(plans: Sequence[TimeWindow]) -> list[TimeWindow]:
    return sorted(plans, key=lambda plan: plan.start_date)


def plan_label(
    plans: Sequence[TimeWindow], start: date | str, end: date | str
) -> str:
    """
    "Week N" for the plan matching ``start``..``end``.

    An exact match wins; otherwise the first overlapping plan is used. Returns
    an empty string when no plan matches.
    """
    ordered = sort_plans(plans)
    start, end = parse_date(start), parse_date(end)

    for index, plan in enumerate(ordered):
        if plan.start_date == start and plan.end_date == end:
            return f"Week {index + 1}"

    for index, plan in enumerate(ordered):
        if ranges_overlap(start, end, plan.start_date, plan.end_date):
            return f"Week {index + 1}"

    return ""


def _date_range_text(start: date, end: date) -> str:
    start_month = start.strftime("%b")
    end_month = end.strftime("%b")
    if start == end:
        return f"{start_month} {start.day}"
    if start_month == end_month:
        return f"{start_month} {start.day}–{end.day}"
    return f"{start_month} {start.day} – {end_month} {end.day}"


def week_navigation_label(sorted_plans: Sequence[TimeWindow], index: int) -> str | None:
    """Header label such as "Week 2 of 3 (Jan 5–11)"; None for a single plan"""
    if len(sorted_plans) <= 1 or not 0 <= index < len(sorted_plans):
        return None
    plan = sorted_plans[index]
    return (
        f"Week {index + 1} of {len(sorted_plans)} "
        f"({_date_range_text(plan.start_date, plan.end_date)})"
    )
