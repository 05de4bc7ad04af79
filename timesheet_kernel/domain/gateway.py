"""
Gateway -- persistence port for timesheet entries.

Responsibility:
    Declares the storage capabilities TimesheetService depends on, so the
    business rules never touch a concrete ORM session.  The production
    adapter is ``services.sql_gateway.SqlTimesheetGateway``.

Architecture position:
    Kernel > Domain -- abstract port, zero I/O.

Contract for implementers:
    - Reads return DTOs, never ORM rows.
    - Writes join the caller's transaction; the caller commits.
    - ``create_entries`` persists all drafts or none.
    - ``acquire_owner_lock`` blocks concurrent capacity-relevant writes for
      the same owner until the caller's transaction ends.
"""

from abc import ABC, abstractmethod
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from uuid import UUID

from timesheet_kernel.domain.dtos import (
    EntryDraft,
    TimesheetEntryInfo,
    TimesheetEntryView,
)


class TimesheetGateway(ABC):
    """Storage capabilities required by the timesheet rules."""

    @abstractmethod
    def acquire_owner_lock(self, user_id: UUID) -> None:
        """Serialise capacity-relevant writes for *user_id*."""
        ...

    @abstractmethod
    def find_entry_by_id(self, entry_id: UUID) -> TimesheetEntryInfo | None:
        ...

    @abstractmethod
    def find_entries_by_user_and_day(
        self, user_id: UUID, day: date
    ) -> list[TimesheetEntryInfo]:
        """Entries owned by *user_id* dated *day*."""
        ...

    @abstractmethod
    def find_entries_by_user_and_days(
        self, user_id: UUID, days: Iterable[date]
    ) -> dict[date, list[TimesheetEntryInfo]]:
        """Entries owned by *user_id* on any of *days*, grouped by day."""
        ...

    @abstractmethod
    def find_entries_for_user_between(
        self, user_id: UUID, start: date, end: date
    ) -> list[TimesheetEntryView]:
        """Entries in [start, end] joined with project display fields."""
        ...

    @abstractmethod
    def create_entry(self, draft: EntryDraft) -> UUID:
        ...

    @abstractmethod
    def create_entries(self, drafts: Sequence[EntryDraft]) -> list[UUID]:
        """Persist every draft atomically; return ids in draft order."""
        ...

    @abstractmethod
    def update_entry(
        self,
        entry_id: UUID,
        actor_id: UUID,
        hours: Decimal | None = None,
        description: str | None = None,
    ) -> None:
        """Change only the supplied fields."""
        ...

    @abstractmethod
    def delete_entry(self, entry_id: UUID) -> None:
        ...
