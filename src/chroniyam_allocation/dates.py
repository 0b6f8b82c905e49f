"""
Local calendar-date helpers.

All arithmetic is done on ``datetime.date`` values, which carry no time or
timezone component, so a ``YYYY-MM-DD`` string always round-trips to the same
calendar day regardless of where the code runs.
"""

from __future__ import annotations

from collections.abc import Iterator
from datetime import date, datetime, timedelta

from .exceptions import InvalidDateError, InvalidRangeError

DATE_FORMAT = "%Y-%m-%d"
DAYS_IN_WEEK = 7

DateLike = date | str


def parse_date(value: DateLike) -> date:
    """Parse a ``YYYY-MM-DD`` string (or pass a date through) as a local date."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        raise InvalidDateError(value)
    try:
        return datetime.strptime(value.strip(), DATE_FORMAT).date()
    except ValueError:
        raise InvalidDateError(value) from None


def format_date(value: DateLike) -> str:
    """Format a date as ``YYYY-MM-DD``."""
    return parse_date(value).strftime(DATE_FORMAT)


class DateRange:
    """Inclusive, ascending range of calendar dates.

    Iterating yields ``YYYY-MM-DD`` strings lazily. The range can be iterated
    any number of times; each iteration starts again from the first date.
    """

    __slots__ = ("start", "end")

    def __init__(self, start: DateLike, end: DateLike):
        start_date = parse_date(start)
        end_date = parse_date(end)
        if end_date < start_date:
            raise InvalidRangeError(format_date(start_date), format_date(end_date))
        self.start = start_date
        self.end = end_date

    def __iter__(self) -> Iterator[str]:
        current = self.start
        while current <= self.end:
            yield current.strftime(DATE_FORMAT)
            current += timedelta(days=1)

    def __len__(self) -> int:
        return (self.end - self.start).days + 1

    def __contains__(self, item: object) -> bool:
        try:
            value = parse_date(item)  # type: ignore[arg-type]
        except InvalidDateError:
            return False
        return self.start <= value <= self.end

    def __repr__(self) -> str:
        return f"DateRange({format_date(self.start)!r}, {format_date(self.end)!r})"


def enumerate_dates(start: DateLike, end: DateLike) -> DateRange:
    """Inclusive dates between ``start`` and ``end``.

    Raises:
        InvalidRangeError: if ``end`` is before ``start``
    """
    return DateRange(start, end)


def span_days(start: DateLike, end: DateLike) -> int:
    return len(DateRange(start, end))


def weekday_index(value: DateLike) -> int:
    """Zero-indexed day of week with Monday=0 .. Sunday=6."""
    return parse_date(value).weekday()


def week_start(value: DateLike) -> date:
    """Monday of the week containing ``value``."""
    d = parse_date(value)
    return d - timedelta(days=d.weekday())


def week_end(value: DateLike) -> date:
    """Sunday of the week containing ``value``."""
    return week_start(value) + timedelta(days=DAYS_IN_WEEK - 1)


def week_dates(value: DateLike) -> list[str]:
    """The seven Monday..Sunday date strings of the week containing ``value``."""
    return list(DateRange(week_start(value), week_end(value)))


def next_monday(value: DateLike) -> date:
    """The first Monday strictly after ``value``."""
    d = parse_date(value)
    return d + timedelta(days=DAYS_IN_WEEK - d.weekday())


def upcoming_sunday(value: DateLike) -> date:
    """``value`` itself when it is a Sunday, otherwise the following Sunday."""
    return week_end(value)


def ranges_overlap(
    a_start: DateLike, a_end: DateLike, b_start: DateLike, b_end: DateLike
) -> bool:
    return parse_date(a_start) <= parse_date(b_end) and parse_date(
        a_end
    ) >= parse_date(b_start)


def format_short(value: DateLike) -> str:
    """``Dec 29`` style label."""
    d = parse_date(value)
    return f"{d.strftime('%b')} {d.day}"


def format_week_range(value: DateLike) -> str:
    """``Dec 29 - Jan 4, 2026`` label for the week containing ``value``."""
    end = week_end(value)
    return f"{format_short(week_start(value))} - {format_short(end)}, {end.year}"
