"""
Clock -- the only source of "now" for lock decisions and dashboards.

Responsibility:
    Services and selectors receive a Clock instead of calling
    ``datetime.now()``.  Whether a month is still editable depends on
    today's date in the organization's timezone, so ``today(tz)`` is the
    question the rest of the kernel actually asks.

Architecture position:
    Kernel > Domain.  ``SystemClock`` is the single place that reads the
    wall clock.
"""

from abc import ABC, abstractmethod
from datetime import date, datetime, timedelta, timezone

from timesheet_kernel.domain.calendar import as_calendar_date


class Clock(ABC):
    """Injectable time source.  ``now()`` is always timezone-aware."""

    @abstractmethod
    def now(self) -> datetime:
        ...

    def today(self, tz: str = "UTC") -> date:
        """The calendar date of ``now()`` as seen in *tz*."""
        return as_calendar_date(self.now(), tz)


class SystemClock(Clock):
    def now(self) -> datetime:
        return datetime.now(timezone.utc)


class DeterministicClock(Clock):
    """
    Clock frozen at a chosen instant, for tests and replays.

    The instant only moves through ``set_time`` or ``advance``, which is
    how tests walk across a month-end grace period.
    """

    DEFAULT_INSTANT = datetime(2026, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __init__(self, instant: datetime | None = None):
        self._instant = instant or self.DEFAULT_INSTANT

    def now(self) -> datetime:
        return self._instant

    def set_time(self, instant: datetime) -> None:
        self._instant = instant

    def advance(self, delta: timedelta) -> None:
        self._instant += delta
