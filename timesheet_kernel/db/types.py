"""
Module: timesheet_kernel.db.types
Responsibility: Column types for timesheet data.  Centralizes the storage
    representation of hours so that every model and query uses the same
    exact arithmetic, and the portable UUID column used for every key.
Architecture position: Kernel > DB.  May be imported by models/, services/
    and selectors/.  MUST NOT import from any of those layers.

Invariants enforced:
    - No floats for hours.  Hours are persisted as INTEGER half-hour ticks
      and surfaced as Decimal with one decimal place, so SUM() over the
      column is exact and 7.0 <= 7.0 always holds.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import Integer, String
from sqlalchemy.types import TypeDecorator

# Ticks per hour in the storage representation
TICKS_PER_HOUR = 2


class HalfHours(TypeDecorator):
    """
    Hours stored as an integer count of half-hour ticks.

    Contract:
        - process_bind_param: Decimal("6.5") -> 13 on INSERT/UPDATE.
        - process_result_value: 13 -> Decimal("6.5") on SELECT.
        - Values that are not whole ticks raise ValueError at bind time;
          the service layer rejects them earlier with InvalidHoursError.
    """

    impl = Integer
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        ticks = Decimal(str(value)) * TICKS_PER_HOUR
        if ticks != ticks.to_integral_value():
            raise ValueError(f"{value} is not a whole number of half hours")
        return int(ticks)

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return (Decimal(int(value)) / TICKS_PER_HOUR).quantize(Decimal("0.1"))


class UUIDString(TypeDecorator):
    """
    UUID stored as its canonical 36-character text.

    PostgreSQL and SQLite share one column definition, so tests on the
    in-memory database exercise the same mapping as production.
    """

    impl = String(36)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        return None if value is None else str(value)

    def process_result_value(self, value, dialect):
        return None if value is None else UUID(value)
