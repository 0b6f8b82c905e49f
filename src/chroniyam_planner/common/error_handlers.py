"""
Common error handling utilities
"""

import logging

from pydantic import ValidationError as PydanticValidationError

from chroniyam_allocation import AllocationError, format_date
from chroniyam_allocation.ledger import format_hours

from chroniyam_planner.models import AdmissionResult

logger = logging.getLogger(__name__)


class PlannerError(Exception):
    """Base exception for planner-layer errors"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class ResourceNotFoundError(PlannerError):
    """Raised when a task or plan is not in the session"""

    def __init__(self, resource_type: str, resource_id: str):
        message = f"{resource_type} with ID {resource_id} not found"
        super().__init__(message, "RESOURCE_NOT_FOUND")


class ValidationError(PlannerError):
    """Raised when input validation fails"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message, "VALIDATION_ERROR")


class CapacityExceededError(PlannerError):
    """Raised when requested hours do not fit in the available capacity"""

    def __init__(
        self,
        needed: float,
        available: float,
        message: str | None = None,
        error_code: str = "DAY_CAPACITY_EXCEEDED",
    ):
        self.needed = needed
        self.available = available
        self.shortfall = max(0.0, needed - available)
        if message is None:
            message = (
                f"Not enough capacity. Need {format_hours(needed)} but only "
                f"{format_hours(available)} available "
                f"(shortfall: {format_hours(self.shortfall)})."
            )
        super().__init__(message, error_code)


class ClipboardEmptyError(PlannerError):
    """Raised when pasting with nothing copied"""

    def __init__(self, what: str = "task"):
        super().__init__(f"No {what} has been copied.", "CLIPBOARD_EMPTY")


def handle_planner_error(
    error: Exception, warnings: list[str] | None = None
) -> AdmissionResult:
    """Convert engine and planner errors to a rejected admission result"""
    if isinstance(error, CapacityExceededError):
        return AdmissionResult.reject(
            [error.message],
            error.error_code or "DAY_CAPACITY_EXCEEDED",
            warnings=warnings,
            details={
                "needed": error.needed,
                "available": error.available,
                "shortfall": error.shortfall,
            },
        )
    elif isinstance(error, ValidationError):
        return AdmissionResult.reject(
            [error.message],
            error.error_code or "VALIDATION_ERROR",
            warnings=warnings,
            details={"field": error.field} if error.field else {},
        )
    elif isinstance(error, (PlannerError, AllocationError)):
        return AdmissionResult.reject(
            [error.message], error.error_code or "VALIDATION_ERROR", warnings=warnings
        )
    elif isinstance(error, PydanticValidationError):
        messages = [
            f"{' -> '.join(str(loc) for loc in e['loc']) or 'input'}: {e['msg']}"
            for e in error.errors()
        ]
        return AdmissionResult.reject(
            messages, "VALIDATION_ERROR", warnings=warnings
        )
    else:
        logger.error(f"Unhandled planner error: {error}")
        return AdmissionResult.reject(
            ["Internal error"],
            "INTERNAL_ERROR",
            warnings=warnings,
            details={"error_type": type(error).__name__},
        )


def validate_date_order(start, due) -> None:
    """Raise ValidationError when ``due`` is before ``start``"""
    if due < start:
        raise ValidationError(
            f"Due date must be on or after the start date "
            f"({format_date(due)} < {format_date(start)}).",
            field="due_date",
        )
