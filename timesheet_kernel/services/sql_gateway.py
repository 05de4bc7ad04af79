"""
SqlTimesheetGateway -- SQLAlchemy adapter for the TimesheetGateway port.

Responsibility:
    Reads and writes ``timesheet_entries`` rows on behalf of
    TimesheetService and converts them to domain DTOs.

Architecture position:
    Kernel > Services -- imperative shell.

Invariants enforced:
    - Flush-only: never commits or rolls back the session.
    - ``create_entries`` adds every row and flushes once, so a failing
      batch leaves nothing behind once the caller rolls back.
    - ``acquire_owner_lock`` takes ``SELECT ... FOR UPDATE`` on the
      owner's ``users`` row.  Under READ COMMITTED the validating read that
      follows sees every write committed by a competing transaction for
      the same owner, which closes the read-check-write race on the daily
      ceiling.  SQLite ignores FOR UPDATE.  File databases open every
      transaction with BEGIN IMMEDIATE (see ``db.engine``), so the writer
      lock serialises instead.  In-memory SQLite shares one connection
      across sessions and is not race-safe.

Failure modes:
    - EntryNotFoundError from update/delete when the row vanished.
    - sqlalchemy.exc.* propagate unchanged (infrastructure failures).
"""

from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select

from timesheet_kernel.domain.dtos import (
    EntryDraft,
    ProjectInfo,
    TimesheetEntryInfo,
    TimesheetEntryView,
)
from timesheet_kernel.domain.gateway import TimesheetGateway
from timesheet_kernel.exceptions import EntryNotFoundError
from timesheet_kernel.logging_config import get_logger
from timesheet_kernel.models.project import Project
from timesheet_kernel.models.timesheet_entry import TimesheetEntry
from timesheet_kernel.models.user import User
from timesheet_kernel.services.base import BaseService

logger = get_logger("services.sql_gateway")


def project_info(project: Project) -> ProjectInfo:
    """Convert ORM Project to ProjectInfo DTO."""
    return ProjectInfo(
        id=project.id,
        code=project.code,
        name=project.name,
        start_date=project.start_date,
        end_date=project.end_date,
        budget=project.budget,
    )


def entry_info(entry: TimesheetEntry) -> TimesheetEntryInfo:
    """Convert ORM TimesheetEntry to TimesheetEntryInfo DTO."""
    return TimesheetEntryInfo(
        id=entry.id,
        user_id=entry.user_id,
        project_id=entry.project_id,
        entry_date=entry.entry_date,
        hours=entry.hours,
        description=entry.description,
    )


class SqlTimesheetGateway(BaseService[TimesheetEntry], TimesheetGateway):
    """
    TimesheetGateway backed by a SQLAlchemy session.

    Non-goals:
        - Does NOT apply business rules; TimesheetService validates first.
    """

    model = TimesheetEntry

    def acquire_owner_lock(self, user_id: UUID) -> None:
        self.session.execute(
            select(User.id).where(User.id == user_id).with_for_update()
        ).scalar_one_or_none()

    def find_entry_by_id(self, entry_id: UUID) -> TimesheetEntryInfo | None:
        entry = self._fetch(entry_id)
        if entry is None:
            return None
        return entry_info(entry)

    def find_entries_by_user_and_day(
        self, user_id: UUID, day: date
    ) -> list[TimesheetEntryInfo]:
        rows = self.session.execute(
            select(TimesheetEntry)
            .where(
                TimesheetEntry.user_id == user_id,
                TimesheetEntry.entry_date == day,
            )
            .order_by(TimesheetEntry.created_at, TimesheetEntry.id)
        ).scalars()
        return [entry_info(row) for row in rows]

    def find_entries_by_user_and_days(
        self, user_id: UUID, days: Iterable[date]
    ) -> dict[date, list[TimesheetEntryInfo]]:
        wanted = sorted(set(days))
        grouped: dict[date, list[TimesheetEntryInfo]] = defaultdict(list)
        if not wanted:
            return grouped

        rows = self.session.execute(
            select(TimesheetEntry)
            .where(
                TimesheetEntry.user_id == user_id,
                TimesheetEntry.entry_date.in_(wanted),
            )
            .order_by(TimesheetEntry.entry_date, TimesheetEntry.id)
        ).scalars()
        for row in rows:
            grouped[row.entry_date].append(entry_info(row))
        return grouped

    def find_entries_for_user_between(
        self, user_id: UUID, start: date, end: date
    ) -> list[TimesheetEntryView]:
        rows = self.session.execute(
            select(TimesheetEntry, Project)
            .join(Project, Project.id == TimesheetEntry.project_id)
            .where(
                TimesheetEntry.user_id == user_id,
                TimesheetEntry.entry_date >= start,
                TimesheetEntry.entry_date <= end,
            )
            .order_by(
                TimesheetEntry.entry_date,
                TimesheetEntry.created_at,
                TimesheetEntry.id,
            )
        ).all()
        return [
            TimesheetEntryView(
                id=entry.id,
                user_id=entry.user_id,
                project_id=entry.project_id,
                entry_date=entry.entry_date,
                hours=entry.hours,
                description=entry.description,
                project=project_info(project),
            )
            for entry, project in rows
        ]

    def _new_row(self, draft: EntryDraft) -> TimesheetEntry:
        return TimesheetEntry(
            user_id=draft.user_id,
            project_id=draft.project_id,
            entry_date=draft.entry_date,
            hours=draft.hours,
            description=draft.description,
            created_by_id=draft.user_id,
        )

    def create_entry(self, draft: EntryDraft) -> UUID:
        row = self._new_row(draft)
        self._persist(row)
        return row.id

    def create_entries(self, drafts: Sequence[EntryDraft]) -> list[UUID]:
        rows = [self._new_row(draft) for draft in drafts]
        self._persist(*rows)
        logger.debug("entries_flushed", extra={"count": len(rows)})
        return [row.id for row in rows]

    def _get_row(self, entry_id: UUID) -> TimesheetEntry:
        row = self._fetch(entry_id)
        if row is None:
            raise EntryNotFoundError(entry_id)
        return row

    def update_entry(
        self,
        entry_id: UUID,
        actor_id: UUID,
        hours: Decimal | None = None,
        description: str | None = None,
    ) -> None:
        row = self._get_row(entry_id)
        if hours is not None:
            row.hours = hours
        if description is not None:
            row.description = description
        row.stamp_update(actor_id)
        self._persist(row)

    def delete_entry(self, entry_id: UUID) -> None:
        row = self._get_row(entry_id)
        self._remove(row)
