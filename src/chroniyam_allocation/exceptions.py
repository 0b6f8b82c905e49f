"""
Exceptions raised by the allocation engine
"""


class AllocationError(Exception):
    """Base exception for allocation engine errors"""

    def __init__(self, message: str, error_code: str | None = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class InvalidDateError(AllocationError):
    """Raised when a date string is not a valid YYYY-MM-DD calendar date"""

    def __init__(self, value: object):
        self.value = value
        super().__init__(
            f"Invalid date: {value!r} (expected YYYY-MM-DD)", "INVALID_DATE"
        )


class InvalidRangeError(AllocationError):
    """Raised when a date range ends before it starts"""

    def __init__(self, start: str, end: str):
        self.start = start
        self.end = end
        super().__init__(
            f"Due date must be on or after the start date ({end} < {start}).",
            "INVALID_RANGE",
        )


class EmptySelectionError(AllocationError):
    """Raised when no dates are selected for an allocation"""

    def __init__(self):
        super().__init__("At least one day must be selected.", "EMPTY_SELECTION")


class NonPositiveHoursError(AllocationError):
    """Raised when requested hours are zero or negative"""

    def __init__(self, hours: float):
        self.hours = hours
        super().__init__("Hours must be greater than 0.", "NON_POSITIVE_HOURS")
