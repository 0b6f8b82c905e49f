"""
Common utilities module
"""

from chroniyam_planner.common.error_handlers import (
    PlannerError,
    ResourceNotFoundError,
    ValidationError,
    CapacityExceededError,
    ClipboardEmptyError,
    handle_planner_error,
    validate_date_order,
)

__all__ = [
    "PlannerError",
    "ResourceNotFoundError",
    "ValidationError",
    "CapacityExceededError",
    "ClipboardEmptyError",
    "handle_planner_error",
    "validate_date_order",
]
