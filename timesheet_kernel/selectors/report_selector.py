"""
Module: timesheet_kernel.selectors.report_selector
Responsibility: Role-scoped monthly timesheet reports.
Architecture position: Kernel > Selectors.

Invariants enforced:
    - Role scope: DEV reads only their own entries, PM only entries on
      assigned projects, GM/ADMIN everything.  The user and project
      filters are intersected with that scope and never widen it.
    - A PM filtering on a project they are not assigned to gets ``[]``.

Failure modes:
    - NotAuthenticatedError when no actor is supplied.
    - ValueError when the month key is not "YYYY-MM".
"""

from collections import defaultdict
from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from timesheet_kernel.domain.calendar import month_bounds, parse_month
from timesheet_kernel.domain.dtos import Actor
from timesheet_kernel.domain.scope import resolve_entry_scope
from timesheet_kernel.exceptions import NotAuthenticatedError
from timesheet_kernel.logging_config import get_logger
from timesheet_kernel.models.project import Project
from timesheet_kernel.models.timesheet_entry import TimesheetEntry
from timesheet_kernel.models.user import User
from timesheet_kernel.selectors.base import BaseSelector

logger = get_logger("selectors.report")


@dataclass(frozen=True)
class ReportFilter:
    """Report query: a "YYYY-MM" month plus optional narrowing filters."""

    month: str
    user_id: UUID | None = None
    project_id: UUID | None = None


@dataclass(frozen=True)
class ReportEntryDTO:
    """One report row: an entry with user and project display fields."""

    id: UUID
    entry_date: date
    hours: Decimal
    description: str
    user_id: UUID
    user_name: str
    user_login: str
    project_id: UUID
    project_code: str
    project_name: str


@dataclass(frozen=True)
class ReportSummary:
    """Totals over a list of report rows.  Keys are project code / user id."""

    total_hours: Decimal = Decimal("0")
    entry_count: int = 0
    by_project: dict[str, Decimal] = field(default_factory=dict)
    by_user: dict[UUID, Decimal] = field(default_factory=dict)


class ReportSelector(BaseSelector[TimesheetEntry]):
    """Selector for monthly timesheet reports."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get_report_data(
        self,
        actor: Actor | None,
        report_filter: ReportFilter,
    ) -> list[ReportEntryDTO]:
        """
        Entries for the filter's month visible to *actor*, by date ascending.

        Raises:
            NotAuthenticatedError: If *actor* is None.
            ValueError: If ``report_filter.month`` is malformed.
        """
        if actor is None:
            raise NotAuthenticatedError("get_report_data")

        start, end = month_bounds(parse_month(report_filter.month))
        scope = resolve_entry_scope(
            actor,
            self._assigned_project_ids(actor.id),
            user_id=report_filter.user_id,
            project_id=report_filter.project_id,
        )
        if scope.is_empty:
            logger.debug("report_scope_empty", extra={"month": report_filter.month})
            return []

        query = (
            select(TimesheetEntry, User, Project)
            .join(User, User.id == TimesheetEntry.user_id)
            .join(Project, Project.id == TimesheetEntry.project_id)
            .where(
                TimesheetEntry.entry_date >= start,
                TimesheetEntry.entry_date <= end,
            )
            .order_by(
                TimesheetEntry.entry_date,
                TimesheetEntry.created_at,
                TimesheetEntry.id,
            )
        )
        query = self._scoped(
            query, scope, TimesheetEntry.user_id, TimesheetEntry.project_id
        )

        return [
            ReportEntryDTO(
                id=entry.id,
                entry_date=entry.entry_date,
                hours=entry.hours,
                description=entry.description,
                user_id=user.id,
                user_name=user.display_name,
                user_login=user.userlogin,
                project_id=project.id,
                project_code=project.code,
                project_name=project.name,
            )
            for entry, user, project in self.session.execute(query).all()
        ]

    @staticmethod
    def summarize(rows: list[ReportEntryDTO]) -> ReportSummary:
        """Total hours overall, per project code and per user."""
        by_project: dict[str, Decimal] = defaultdict(Decimal)
        by_user: dict[UUID, Decimal] = defaultdict(Decimal)
        total = Decimal("0")
        for row in rows:
            total += row.hours
            by_project[row.project_code] += row.hours
            by_user[row.user_id] += row.hours
        return ReportSummary(
            total_hours=total,
            entry_count=len(rows),
            by_project=dict(by_project),
            by_user=dict(by_user),
        )
