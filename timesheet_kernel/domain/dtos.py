"""
DTOs -- Pure domain data transfer objects.

Responsibility:
    Defines the immutable data structures that cross the kernel boundary:
    the acting identity (Actor), write inputs (EntryInput, RecurringInput,
    EntryUpdate), persistence drafts (EntryDraft) and read results
    (TimesheetEntryInfo, TimesheetEntryView, ProjectInfo), plus the
    TimesheetPolicy that parameterises the business rules.

Architecture position:
    Kernel > Domain -- pure functional core, zero I/O.
    Free of ORM dependencies; the service and selector layers convert
    ORM rows into these types.

Invariants enforced:
    - Hours are Decimal everywhere; floats are converted through str()
      so 0.1-style binary artefacts never enter the kernel.
    - Actor.role is always a Role member.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from uuid import UUID

# Calendar view the presentation layer refreshes after any mutation
CALENDAR_VIEW = "/dashboard/calendar"


class Role(str, Enum):
    """Application roles, least to most privileged for reading."""

    DEV = "DEV"
    PM = "PM"
    GM = "GM"
    ADMIN = "ADMIN"


def to_decimal(value: Decimal | int | float | str) -> Decimal:
    """Coerce an hours value to Decimal without binary float artefacts."""
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


@dataclass(frozen=True)
class Actor:
    """Authenticated identity issuing an operation."""

    id: UUID
    role: Role

    def __post_init__(self) -> None:
        if not isinstance(self.role, Role):
            object.__setattr__(self, "role", Role(self.role))


@dataclass(frozen=True)
class TimesheetPolicy:
    """
    Parameters of the timesheet business rules.

    Contract:
        Built by the configuration layer (or defaulted for tests).  The
        kernel never reads configuration files itself.
    """

    daily_limit_hours: Decimal = Decimal("7")
    lock_grace_days: int = 5
    timezone: str = "UTC"
    budget_hourly_rate: Decimal = Decimal("500")
    dashboard_top_projects: int = 5
    dashboard_recent_entries: int = 5
    dashboard_project_status_limit: int = 10
    team_entries_limit: int = 50


@dataclass(frozen=True)
class EntryInput:
    """Input to log_time."""

    project_id: UUID
    date: date | datetime
    hours: Decimal
    description: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "hours", to_decimal(self.hours))


@dataclass(frozen=True)
class RecurringInput:
    """Input to log_recurring_time: same project/hours/description on many days."""

    project_id: UUID
    hours: Decimal
    description: str = ""
    dates: tuple[date | datetime, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "hours", to_decimal(self.hours))
        object.__setattr__(self, "dates", tuple(self.dates))


@dataclass(frozen=True)
class EntryUpdate:
    """Input to update_entry.  None means "leave unchanged"."""

    hours: Decimal | None = None
    description: str | None = None

    def __post_init__(self) -> None:
        if self.hours is not None:
            object.__setattr__(self, "hours", to_decimal(self.hours))


@dataclass(frozen=True)
class EntryDraft:
    """A validated entry ready to be persisted by the gateway."""

    user_id: UUID
    project_id: UUID
    entry_date: date
    hours: Decimal
    description: str


@dataclass(frozen=True)
class TimesheetEntryInfo:
    """Stored entry as seen by the business rules."""

    id: UUID
    user_id: UUID
    project_id: UUID
    entry_date: date
    hours: Decimal
    description: str


@dataclass(frozen=True)
class ProjectInfo:
    """Project display fields."""

    id: UUID
    code: str
    name: str
    start_date: date | None = None
    end_date: date | None = None
    budget: Decimal = Decimal("0")


@dataclass(frozen=True)
class TimesheetEntryView:
    """Entry joined with its project's display fields (calendar listing)."""

    id: UUID
    user_id: UUID
    project_id: UUID
    entry_date: date
    hours: Decimal
    description: str
    project: ProjectInfo


@dataclass(frozen=True)
class RecurringResult:
    """Outcome of a recurring batch."""

    count: int
    entry_ids: tuple[UUID, ...] = field(default=())
