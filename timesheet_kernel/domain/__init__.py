"""Pure domain core: clock, DTOs, calendar, period lock, capacity, scope."""

from timesheet_kernel.domain.capacity import CapacityCheck, check_capacity
from timesheet_kernel.domain.clock import Clock, DeterministicClock, SystemClock
from timesheet_kernel.domain.dtos import (
    CALENDAR_VIEW,
    Actor,
    EntryInput,
    EntryUpdate,
    RecurringInput,
    Role,
    TimesheetPolicy,
)
from timesheet_kernel.domain.period_lock import is_locked, lock_date
from timesheet_kernel.domain.scope import (
    VisibilityScope,
    resolve_entry_scope,
    resolve_project_scope,
    resolve_team_scope,
)

__all__ = [
    "Actor",
    "CALENDAR_VIEW",
    "CapacityCheck",
    "Clock",
    "DeterministicClock",
    "EntryInput",
    "EntryUpdate",
    "RecurringInput",
    "Role",
    "SystemClock",
    "TimesheetPolicy",
    "VisibilityScope",
    "check_capacity",
    "is_locked",
    "lock_date",
    "resolve_entry_scope",
    "resolve_project_scope",
    "resolve_team_scope",
]
