"""
Calendar -- pure date arithmetic for months, days and workable time.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.

All functions work on calendar ``date`` values.  Callers holding a
``datetime`` normalise it with ``as_calendar_date`` first, so that
time-of-day never influences a day or month boundary.
"""

import calendar as _calendar
from collections.abc import Iterable, Iterator
from datetime import date, datetime, timedelta
from decimal import Decimal
from zoneinfo import ZoneInfo


def as_calendar_date(value: date | datetime, tz: str | None = None) -> date:
    """
    Drop the time-of-day from *value*.

    Aware datetimes are first converted to *tz* (when given) so the day is
    the business day, not the UTC day.  Naive datetimes are taken as-is.
    """
    if isinstance(value, datetime):
        if tz is not None and value.tzinfo is not None:
            value = value.astimezone(ZoneInfo(tz))
        return value.date()
    return value


def start_of_month(day: date) -> date:
    return day.replace(day=1)


def end_of_month(day: date) -> date:
    last = _calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=last)


def month_bounds(day: date) -> tuple[date, date]:
    """Inclusive first and last day of *day*'s month."""
    return start_of_month(day), end_of_month(day)


def previous_month(day: date) -> date:
    """First day of the month before *day*'s month."""
    return start_of_month(start_of_month(day) - timedelta(days=1))


def parse_month(value: str) -> date:
    """
    Parse a "YYYY-MM" month key into the month's first day.

    Raises:
        ValueError: If *value* is not a valid "YYYY-MM" string.
    """
    year_text, sep, month_text = value.partition("-")
    if not sep or len(year_text) != 4 or not month_text:
        raise ValueError(f"Invalid month '{value}', expected YYYY-MM")
    return date(int(year_text), int(month_text), 1)


def each_day(start: date, end: date) -> Iterator[date]:
    """Yield every day from *start* to *end*, both inclusive."""
    current = start
    while current <= end:
        yield current
        current += timedelta(days=1)


def is_weekend(day: date) -> bool:
    return day.weekday() >= 5


def workable_days(start: date, end: date, holidays: Iterable[date] = ()) -> int:
    """Number of weekdays in [start, end] that are not holidays."""
    off = set(holidays)
    return sum(
        1 for day in each_day(start, end)
        if not is_weekend(day) and day not in off
    )


def workable_hours(
    start: date,
    end: date,
    holidays: Iterable[date],
    daily_hours: Decimal,
) -> Decimal:
    """Workable days in [start, end] times the daily ceiling."""
    return workable_days(start, end, holidays) * daily_hours
