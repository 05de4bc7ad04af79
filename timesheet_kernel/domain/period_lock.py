"""
PeriodLock -- rolling month-end edit window.

Responsibility:
    Decides whether entries dated on a given day may still be created,
    edited or deleted.  An entry's month stays open until the end of the
    grace window after the month's last day; after that it is locked for
    good.  There is no override path.

Architecture position:
    Kernel > Domain -- pure functions of two timestamps, zero I/O.

Invariants enforced:
    - The lock is per month, not per entry age: every day of a month
      shares one lock date.
    - Monotonic: once locked for ``now``, locked for every later ``now``.
"""

from datetime import date, datetime, timedelta

from timesheet_kernel.domain.calendar import as_calendar_date, end_of_month

DEFAULT_GRACE_DAYS = 5


def lock_date(entry_date: date | datetime, grace_days: int = DEFAULT_GRACE_DAYS) -> date:
    """
    Last calendar day on which entries for *entry_date*'s month may change.

    Example:
        lock_date(date(2026, 2, 15)) -> date(2026, 3, 5)
    """
    return end_of_month(as_calendar_date(entry_date)) + timedelta(days=grace_days)


def is_locked(
    entry_date: date | datetime,
    now: date | datetime,
    grace_days: int = DEFAULT_GRACE_DAYS,
) -> bool:
    """
    True when *now* is past the lock date of *entry_date*'s month.

    The lock date itself is editable through its last instant, so the
    comparison is on calendar days: locked iff today > lock date.
    Callers are responsible for converting *now* into the business
    timezone before calling.
    """
    return as_calendar_date(now) > lock_date(entry_date, grace_days)
