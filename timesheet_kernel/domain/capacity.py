"""
Capacity -- per-user daily hours ceiling.

Responsibility:
    Decides whether adding (or changing) an entry keeps a user's total for
    one calendar day within the ceiling.

Architecture position:
    Kernel > Domain -- pure function over already-fetched same-day hours.
    The caller queries the right day for the right owner; this module
    performs no I/O.

Invariants enforced:
    - Exact arithmetic: hours are compared as integer half-hour ticks, so
      a total of exactly the ceiling is always accepted.
    - When validating an update, the entry being updated is excluded from
      the existing hours so its old value is not double-counted.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from decimal import Decimal
from uuid import UUID

from timesheet_kernel.exceptions import InvalidHoursError

DEFAULT_DAILY_LIMIT = Decimal("7")

# Half-hour granularity; mirrors the HalfHours column type
TICKS_PER_HOUR = 2


@dataclass(frozen=True)
class CapacityCheck:
    """Result of a capacity check.  Totals are Decimal hours."""

    ok: bool
    total: Decimal
    existing_total: Decimal
    limit: Decimal


def hours_to_ticks(hours: Decimal | int | float | str) -> int:
    """
    Convert hours to half-hour ticks.

    Raises:
        InvalidHoursError: If *hours* is not a whole number of half hours.
    """
    value = hours if isinstance(hours, Decimal) else Decimal(str(hours))
    if not value.is_finite():
        raise InvalidHoursError(hours)
    ticks = value * TICKS_PER_HOUR
    if ticks != ticks.to_integral_value():
        raise InvalidHoursError(hours)
    return int(ticks)


def ticks_to_hours(ticks: int) -> Decimal:
    return (Decimal(ticks) / TICKS_PER_HOUR).quantize(Decimal("0.1"))


def check_capacity(
    existing_hours: Iterable[Decimal | tuple[UUID, Decimal]],
    candidate_hours: Decimal,
    exclude_entry_id: UUID | None = None,
    daily_limit: Decimal = DEFAULT_DAILY_LIMIT,
) -> CapacityCheck:
    """
    Check that existing same-day hours plus *candidate_hours* fit the ceiling.

    Args:
        existing_hours: Hours already logged that day by the same owner,
            either plain values or ``(entry_id, hours)`` pairs.
        candidate_hours: Hours of the new (or updated) entry.
        exclude_entry_id: Pair entries with this id are skipped.
        daily_limit: The ceiling; a total equal to it is accepted.

    Returns:
        CapacityCheck with ``ok`` and the existing and attempted totals.
    """
    existing_ticks = 0
    for item in existing_hours:
        if isinstance(item, tuple):
            entry_id, hours = item
            if exclude_entry_id is not None and entry_id == exclude_entry_id:
                continue
        else:
            hours = item
        existing_ticks += hours_to_ticks(hours)

    total_ticks = existing_ticks + hours_to_ticks(candidate_hours)
    limit_ticks = hours_to_ticks(daily_limit)

    return CapacityCheck(
        ok=total_ticks <= limit_ticks,
        total=ticks_to_hours(total_ticks),
        existing_total=ticks_to_hours(existing_ticks),
        limit=ticks_to_hours(limit_ticks),
    )
