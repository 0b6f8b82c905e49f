from datetime import date
from enum import Enum
from typing import Any
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from chroniyam_allocation import enumerate_dates, format_date, parse_date

from chroniyam_planner.config import settings


class Quadrant(str, Enum):
    """Eisenhower matrix quadrant"""

    DO_FIRST = "Do First"
    SCHEDULE = "Schedule"
    DELEGATE = "Delegate"
    ELIMINATE = "Eliminate"


class QuadrantInfo(BaseModel):
    """Display metadata for a quadrant"""

    key: Quadrant
    description: str
    tooltip: list[str]

    model_config = ConfigDict(frozen=True)


QUADRANTS: list[QuadrantInfo] = [
    QuadrantInfo(
        key=Quadrant.DO_FIRST,
        description="Urgent and Important",
        tooltip=[
            "Crisis mode: Deadlines, emergencies, and pressing problems.",
            "Handle these immediately but work to minimize time here through better planning.",
        ],
    ),
    QuadrantInfo(
        key=Quadrant.SCHEDULE,
        description="Not Urgent but Important",
        tooltip=[
            "Strategic zone: Planning, personal development, and relationship building.",
            "This is where you should spend most of your time for long-term success.",
        ],
    ),
    QuadrantInfo(
        key=Quadrant.DELEGATE,
        description="Urgent but Not Important",
        tooltip=[
            "Distraction zone: Interruptions, some calls and emails, other people's priorities.",
            "Learn to say no or delegate these tasks.",
        ],
    ),
    QuadrantInfo(
        key=Quadrant.ELIMINATE,
        description="Not Urgent and Not Important",
        tooltip=[
            "Time wasters: Busy work, excessive social media, and trivial tasks.",
            "Minimize or eliminate these activities entirely.",
        ],
    ),
]


def new_task_id() -> str:
    return str(uuid4())


def _check_granularity(hours: float) -> float:
    step = settings.hours_granularity
    if abs(round(hours / step) * step - hours) > 1e-9:
        raise ValueError(f"Estimated hours must be a multiple of {step}")
    return hours


class Task(BaseModel):
    """A planned piece of work placed in one quadrant"""

    id: str = Field(default_factory=new_task_id, description="Unique task identifier")
    title: str = Field(..., min_length=1, description="Task title")
    description: str | None = Field(None, description="Optional notes")
    quadrant: Quadrant = Field(..., description="Eisenhower quadrant")
    estimated_hours: float = Field(..., gt=0, description="Estimated hours")
    start_date: date = Field(..., description="First day of the task (inclusive)")
    due_date: date = Field(..., description="Last day of the task (inclusive)")
    completed: bool = False
    is_recurring: bool = Field(
        False, description="Commit the full estimate on every spanned day"
    )

    @field_validator("title")
    @classmethod
    def validate_title(cls, v: str) -> str:
        """Title cannot be blank"""
        if not v.strip():
            raise ValueError("Title cannot be empty")
        return v.strip()

    @field_validator("estimated_hours")
    @classmethod
    def validate_estimated_hours(cls, v: float) -> float:
        return _check_granularity(v)

    @model_validator(mode="after")
    def validate_date_order(self) -> "Task":
        if self.due_date < self.start_date:
            raise ValueError("Due date must be on or after the start date")
        return self

    @property
    def span_days(self) -> int:
        return (self.due_date - self.start_date).days + 1

    @property
    def dates(self) -> list[str]:
        return list(enumerate_dates(self.start_date, self.due_date))


class TaskDraft(BaseModel):
    """Editable task input from the create/edit form.

    Unlike ``Task`` a draft may be inconsistent (blank title, due date before
    start date); the admission flow reports those problems instead of raising.
    """

    id: str | None = None
    title: str = ""
    description: str | None = None
    quadrant: Quadrant = Quadrant.DO_FIRST
    estimated_hours: float = 1.0
    start_date: date
    due_date: date
    completed: bool = False
    is_recurring: bool = False

    @classmethod
    def from_task(cls, task: Task) -> "TaskDraft":
        return cls(**task.model_dump())

    def to_task(self) -> Task:
        data = self.model_dump(exclude={"id"})
        return Task(id=self.id or new_task_id(), **data)


class TimeWindow(BaseModel):
    """A planning period with a per-day hour budget"""

    start_date: date
    end_date: date
    days: int = Field(..., ge=1)
    hours_per_day: float = Field(..., gt=0, le=24)
    total_hours: float = Field(..., ge=0)
    allocated_hours: float = Field(
        0.0, ge=0, description="Derived from the task list, never stored truth"
    )

    @model_validator(mode="after")
    def validate_range(self) -> "TimeWindow":
        if self.end_date < self.start_date:
            raise ValueError("End date must be on or after the start date")
        span = (self.end_date - self.start_date).days + 1
        if self.days != span:
            raise ValueError(f"Window spans {span} days, not {self.days}")
        return self

    @classmethod
    def for_range(
        cls,
        start_date: date | str,
        end_date: date | str,
        hours_per_day: float,
        total_hours: float | None = None,
    ) -> "TimeWindow":
        start = parse_date(start_date)
        end = parse_date(end_date)
        days = (end - start).days + 1
        return cls(
            start_date=start,
            end_date=end,
            days=days,
            hours_per_day=hours_per_day,
            total_hours=days * hours_per_day if total_hours is None else total_hours,
        )

    @property
    def dates(self) -> list[str]:
        return list(enumerate_dates(self.start_date, self.end_date))

    @property
    def key(self) -> tuple[str, str]:
        return format_date(self.start_date), format_date(self.end_date)

    def contains(self, day: date | str) -> bool:
        return self.start_date <= parse_date(day) <= self.end_date


class WeekTemplateEntry(BaseModel):
    """One copied task, positioned by weekday rather than by date"""

    title: str
    description: str | None = None
    quadrant: Quadrant
    estimated_hours: float = Field(..., gt=0)
    is_recurring: bool = False
    start_weekday: int = Field(..., ge=0, le=6, description="Monday=0 .. Sunday=6")
    end_weekday: int = Field(..., ge=0, le=6, description="Monday=0 .. Sunday=6")

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def validate_weekday_order(self) -> "WeekTemplateEntry":
        if self.end_weekday < self.start_weekday:
            raise ValueError("End weekday must be on or after the start weekday")
        return self


class RangeCapacity(BaseModel):
    """Capacity of a date range for a requested number of hours"""

    total_available: float
    shortfall: float
    can_allocate: bool


class DayUsage(BaseModel):
    """Hours used and left on a single day"""

    date: date
    used: float
    remaining: float


class FutureWeekOption(BaseModel):
    """An upcoming Monday-start week offered for planning"""

    start: date
    end: date
    is_planned: bool


class QuadrantShare(BaseModel):
    quadrant: Quadrant
    count: int
    percentage: int


class BalanceReport(BaseModel):
    """Distribution of tasks across quadrants against healthy ranges"""

    total_tasks: int
    shares: list[QuadrantShare] = Field(default_factory=list)
    issues: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def is_balanced(self) -> bool:
        return not self.issues

    def percentage(self, quadrant: Quadrant) -> int:
        share = next((s for s in self.shares if s.quadrant == quadrant), None)
        return share.percentage if share else 0


class ErrorDetail(BaseModel):
    """Error detail model"""

    code: str
    message: str
    details: dict[str, Any] | None = None


class ErrorResponse(BaseModel):
    """Standardized error response model"""

    error: ErrorDetail

    @classmethod
    def create(
        cls, code: str, message: str, details: dict[str, Any] | None = None
    ) -> "ErrorResponse":
        """Create a standardized error response"""
        return cls(error=ErrorDetail(code=code, message=message, details=details))


class AdmissionResult(BaseModel):
    """Outcome of an admission flow: accepted tasks or the reasons for rejection"""

    accepted: bool
    tasks: list[Task] = Field(default_factory=list)
    errors: list[str] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)
    error_code: str | None = None
    details: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def accept(
        cls, tasks: list[Task], warnings: list[str] | None = None
    ) -> "AdmissionResult":
        return cls(accepted=True, tasks=tasks, warnings=warnings or [])

    @classmethod
    def reject(
        cls,
        errors: list[str],
        error_code: str,
        warnings: list[str] | None = None,
        details: dict[str, Any] | None = None,
    ) -> "AdmissionResult":
        return cls(
            accepted=False,
            errors=errors,
            error_code=error_code,
            warnings=warnings or [],
            details=details or {},
        )

    @property
    def task(self) -> Task | None:
        return self.tasks[0] if self.tasks else None

    @property
    def message(self) -> str:
        return " ".join(self.errors)

    def to_error_response(self) -> ErrorResponse | None:
        if self.accepted:
            return None
        return ErrorResponse.create(
            code=self.error_code or "VALIDATION_ERROR",
            message=self.message,
            details=self.details or None,
        )
