"""
Typed Exception Hierarchy for the Timesheet Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

The calendar, bulk-entry and reporting surfaces render a kind-specific
message for every rejected operation ("Daily limit exceeded. You have
already logged 6h..."). They must never parse message strings to find out
what went wrong:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (totals, lock dates, ids)

Example - WRONG way to handle errors:
    try:
        service.log_time(actor, entry)
    except Exception as e:
        if "locked" in str(e):  # FRAGILE - message might change
            show_locked_banner()

Example - RIGHT way (what this module enables):
    try:
        service.log_time(actor, entry)
    except PeriodLockedError as e:
        show_locked_banner(cutoff=e.lock_date)
    except DailyLimitExceededError as e:
        show_limit(e.existing_total, e.attempted_total)

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

All exceptions inherit from TimesheetKernelError:

    TimesheetKernelError (base)
    |
    +-- AccessError
    |   +-- UnauthorizedError
    |       +-- NotAuthenticatedError
    |       +-- NotEntryOwnerError
    |
    +-- EntryError
    |   +-- EntryNotFoundError
    |   +-- InvalidHoursError
    |
    +-- PeriodError
    |   +-- PeriodLockedError
    |
    +-- CapacityError
    |   +-- DailyLimitExceededError
    |
    +-- ConfigurationError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Access          | UNAUTHORIZED                | Base for both access failures below
                | NOT_AUTHENTICATED           | No actor supplied to a write/report op
                | NOT_ENTRY_OWNER             | Actor is not the entry's owner
----------------|-----------------------------|-----------------------------------------
Entry           | ENTRY_NOT_FOUND             | Entry id doesn't exist
                | INVALID_HOURS               | Hours not representable as half-hours
----------------|-----------------------------|-----------------------------------------
Period          | PERIOD_LOCKED               | Past month end + grace window
----------------|-----------------------------|-----------------------------------------
Capacity        | DAILY_LIMIT_EXCEEDED        | Day total would exceed the ceiling
----------------|-----------------------------|-----------------------------------------
Configuration   | CONFIGURATION_ERROR         | Settings produce an unusable policy

Persistence and driver failures (sqlalchemy.exc.*) are NOT wrapped.
They propagate to the caller unchanged; retry policy belongs outside
the kernel.

===============================================================================
"""

from datetime import date
from decimal import Decimal
from uuid import UUID


class TimesheetKernelError(Exception):
    """
    Base exception for all timesheet kernel errors.

    All subclasses must have a `code` class attribute for
    machine-readable error identification.
    """

    code: str = "TIMESHEET_KERNEL_ERROR"


# Access-related exceptions


class AccessError(TimesheetKernelError):
    """Base exception for access-control errors."""

    code: str = "ACCESS_ERROR"


class UnauthorizedError(AccessError):
    """Actor may not perform the operation."""

    code: str = "UNAUTHORIZED"


class NotAuthenticatedError(UnauthorizedError):
    """No authenticated actor was supplied."""

    code: str = "NOT_AUTHENTICATED"

    def __init__(self, operation: str):
        self.operation = operation
        super().__init__(f"Unauthorized: {operation} requires an authenticated actor")


class NotEntryOwnerError(UnauthorizedError):
    """
    Actor attempted to mutate an entry owned by someone else.

    Ownership is absolute: no role bypasses it.
    """

    code: str = "NOT_ENTRY_OWNER"

    def __init__(self, entry_id: UUID, actor_id: UUID, owner_id: UUID):
        self.entry_id = entry_id
        self.actor_id = actor_id
        self.owner_id = owner_id
        super().__init__(
            f"Unauthorized: actor {actor_id} does not own entry {entry_id}"
        )


# Entry-related exceptions


class EntryError(TimesheetKernelError):
    """Base exception for timesheet entry errors."""

    code: str = "ENTRY_ERROR"


class EntryNotFoundError(EntryError):
    """Entry with given ID was not found."""

    code: str = "ENTRY_NOT_FOUND"

    def __init__(self, entry_id: UUID):
        self.entry_id = entry_id
        super().__init__(f"Entry not found: {entry_id}")


class InvalidHoursError(EntryError):
    """Hours value cannot be represented as whole half-hour ticks."""

    code: str = "INVALID_HOURS"

    def __init__(self, hours: object):
        self.hours = str(hours)
        super().__init__(f"Hours must be a multiple of 0.5, got {hours}")


# Period-related exceptions


class PeriodError(TimesheetKernelError):
    """Base exception for period-related errors."""

    code: str = "PERIOD_ERROR"


class PeriodLockedError(PeriodError):
    """The entry's month is past its editable window."""

    code: str = "PERIOD_LOCKED"

    def __init__(self, entry_date: date, lock_date: date):
        self.entry_date = entry_date
        self.lock_date = lock_date
        super().__init__(
            f"Period is locked for {entry_date.isoformat()}. "
            f"Entries for this month could be changed until {lock_date.isoformat()}."
        )


# Capacity-related exceptions


def _fmt_hours(value: Decimal) -> str:
    """Render 7.0 as '7' and 6.5 as '6.5' for messages."""
    return format(value.normalize(), "f")


class CapacityError(TimesheetKernelError):
    """Base exception for daily capacity errors."""

    code: str = "CAPACITY_ERROR"


class DailyLimitExceededError(CapacityError):
    """Candidate total hours for the day exceed the ceiling."""

    code: str = "DAILY_LIMIT_EXCEEDED"

    def __init__(
        self,
        work_date: date,
        existing_total: Decimal,
        attempted_total: Decimal,
        daily_limit: Decimal,
    ):
        self.work_date = work_date
        self.existing_total = existing_total
        self.attempted_total = attempted_total
        self.daily_limit = daily_limit
        super().__init__(
            f"Daily limit exceeded on {work_date.isoformat()}. "
            f"You have already logged {_fmt_hours(existing_total)}h. "
            f"Taking this would equal {_fmt_hours(attempted_total)}h "
            f"(Max {_fmt_hours(daily_limit)}h)."
        )


# Configuration exceptions


class ConfigurationError(TimesheetKernelError):
    """Settings cannot be turned into a usable policy."""

    code: str = "CONFIGURATION_ERROR"

    def __init__(self, field: str, reason: str):
        self.field = field
        self.reason = reason
        super().__init__(f"Invalid configuration for '{field}': {reason}")
