"""
Module: timesheet_kernel.selectors.dashboard_selector
Responsibility: Personal dashboard statistics and the manager team view.
Architecture position: Kernel > Selectors.  Uses an injected Clock for
    "the current month" and the TimesheetPolicy for limits and rates.

Invariants enforced:
    - Personal figures (month totals, top projects, recent activity) are
      always the actor's own, whatever the role.
    - Budget status is shown to PM/GM/ADMIN only; a PM sees only assigned
      projects.
    - The team view follows resolve_team_scope: DEV gets nothing, a PM
      only their assigned projects and the users on them, and an
      out-of-scope filter yields an empty view.
    - Workable hours = weekdays in the month that are not holidays, times
      the daily ceiling.

Failure modes:
    - NotAuthenticatedError from get_dashboard_stats / get_team_data when
      no actor is supplied.  get_filters returns empty lists instead.
"""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from timesheet_kernel.domain.calendar import (
    as_calendar_date,
    month_bounds,
    previous_month,
    workable_hours,
)
from timesheet_kernel.domain.clock import Clock, SystemClock
from timesheet_kernel.domain.dtos import Actor, Role, TimesheetPolicy
from timesheet_kernel.domain.scope import VisibilityScope, resolve_team_scope
from timesheet_kernel.exceptions import NotAuthenticatedError
from timesheet_kernel.models.holiday import Holiday
from timesheet_kernel.models.project import Project, ProjectAssignment
from timesheet_kernel.models.timesheet_entry import TimesheetEntry
from timesheet_kernel.models.user import User
from timesheet_kernel.selectors.base import BaseSelector

_ZERO = Decimal("0")
_HUNDRED = Decimal("100")
_CENT = Decimal("0.01")


@dataclass(frozen=True)
class ProjectHours:
    """Hours the actor logged on one project this month."""

    project_id: UUID
    code: str
    name: str
    hours: Decimal


@dataclass(frozen=True)
class RecentActivity:
    id: UUID
    project_code: str
    entry_date: date
    hours: Decimal
    description: str


@dataclass(frozen=True)
class ProjectStatus:
    """Budget versus hours consumed on a project, all time."""

    id: UUID
    code: str
    name: str
    budget: Decimal
    used_hours: Decimal
    used_budget: Decimal


@dataclass(frozen=True)
class DashboardStats:
    total_hours_month: Decimal
    total_hours_prev_month: Decimal
    workable_hours_month: Decimal
    top_projects: tuple[ProjectHours, ...]
    recent_activity: tuple[RecentActivity, ...]
    project_status: tuple[ProjectStatus, ...] | None = None


@dataclass(frozen=True)
class TeamUserStat:
    user_id: UUID
    name: str
    total_hours: Decimal
    workable_hours: Decimal
    is_complete: bool
    percentage: Decimal


@dataclass(frozen=True)
class TeamEntry:
    id: UUID
    entry_date: date
    hours: Decimal
    description: str
    project_code: str
    project_name: str
    user_name: str


@dataclass(frozen=True)
class TeamData:
    users: tuple[TeamUserStat, ...] = ()
    entries: tuple[TeamEntry, ...] = ()


@dataclass(frozen=True)
class FilterUser:
    id: UUID
    name: str


@dataclass(frozen=True)
class FilterProject:
    id: UUID
    code: str
    name: str


@dataclass(frozen=True)
class FilterOptions:
    users: tuple[FilterUser, ...] = ()
    projects: tuple[FilterProject, ...] = ()


class DashboardSelector(BaseSelector[TimesheetEntry]):
    """
    Selector for the dashboard page.

    Contract:
        All month boundaries are calendar dates in the policy timezone,
        derived from the injected clock.
    """

    def __init__(
        self,
        session: Session,
        clock: Clock | None = None,
        policy: TimesheetPolicy | None = None,
    ):
        super().__init__(session)
        self._clock = clock or SystemClock()
        self._policy = policy or TimesheetPolicy()

    def _today(self) -> date:
        return self._clock.today(self._policy.timezone)

    def _holiday_dates(self, start: date, end: date) -> list[date]:
        return list(
            self.session.execute(
                select(Holiday.holiday_date).where(
                    Holiday.holiday_date >= start,
                    Holiday.holiday_date <= end,
                )
            ).scalars()
        )

    def _workable_hours(self, start: date, end: date) -> Decimal:
        return workable_hours(
            start,
            end,
            self._holiday_dates(start, end),
            self._policy.daily_limit_hours,
        )

    def _user_hours_between(
        self, user_id: UUID, start: date, end: date
    ) -> list[tuple[UUID, Decimal]]:
        rows = self.session.execute(
            select(TimesheetEntry.project_id, TimesheetEntry.hours).where(
                TimesheetEntry.user_id == user_id,
                TimesheetEntry.entry_date >= start,
                TimesheetEntry.entry_date <= end,
            )
        ).all()
        return [(project_id, hours) for project_id, hours in rows]

    # ------------------------------------------------------------------
    # Personal dashboard
    # ------------------------------------------------------------------

    def get_dashboard_stats(self, actor: Actor | None) -> DashboardStats:
        """
        Personal figures for the current month plus, for managers, the
        budget status of visible projects.

        Raises:
            NotAuthenticatedError: If *actor* is None.
        """
        if actor is None:
            raise NotAuthenticatedError("get_dashboard_stats")

        start, end = month_bounds(self._today())
        prev_start, prev_end = month_bounds(previous_month(start))

        current = self._user_hours_between(actor.id, start, end)
        previous = self._user_hours_between(actor.id, prev_start, prev_end)

        per_project: dict[UUID, Decimal] = defaultdict(Decimal)
        for project_id, hours in current:
            per_project[project_id] += hours

        project_status = None
        if actor.role in (Role.PM, Role.GM, Role.ADMIN):
            project_status = self._project_status(actor)

        return DashboardStats(
            total_hours_month=sum((h for _, h in current), _ZERO),
            total_hours_prev_month=sum((h for _, h in previous), _ZERO),
            workable_hours_month=self._workable_hours(start, end),
            top_projects=self._top_projects(per_project),
            recent_activity=self._recent_activity(actor.id),
            project_status=project_status,
        )

    def _top_projects(
        self, per_project: dict[UUID, Decimal]
    ) -> tuple[ProjectHours, ...]:
        if not per_project:
            return ()
        projects = {
            p.id: p
            for p in self.session.execute(
                select(Project).where(Project.id.in_(list(per_project)))
            ).scalars()
        }
        ranked = sorted(
            (
                ProjectHours(
                    project_id=pid,
                    code=projects[pid].code,
                    name=projects[pid].name,
                    hours=hours,
                )
                for pid, hours in per_project.items()
            ),
            key=lambda p: (-p.hours, p.code),
        )
        return tuple(ranked[: self._policy.dashboard_top_projects])

    def _recent_activity(self, user_id: UUID) -> tuple[RecentActivity, ...]:
        rows = self.session.execute(
            select(TimesheetEntry, Project.code)
            .join(Project, Project.id == TimesheetEntry.project_id)
            .where(TimesheetEntry.user_id == user_id)
            .order_by(
                TimesheetEntry.entry_date.desc(),
                TimesheetEntry.created_at.desc(),
            )
            .limit(self._policy.dashboard_recent_entries)
        ).all()
        return tuple(
            RecentActivity(
                id=entry.id,
                project_code=code,
                entry_date=entry.entry_date,
                hours=entry.hours,
                description=entry.description,
            )
            for entry, code in rows
        )

    def _project_status(self, actor: Actor) -> tuple[ProjectStatus, ...]:
        query = (
            select(Project)
            .order_by(Project.code)
            .limit(self._policy.dashboard_project_status_limit)
        )
        if actor.role == Role.PM:
            assigned = self._assigned_project_ids(actor.id)
            if not assigned:
                return ()
            query = query.where(Project.id.in_(list(assigned)))

        projects = list(self.session.execute(query).scalars())
        if not projects:
            return ()

        used: dict[UUID, Decimal] = defaultdict(Decimal)
        rows = self.session.execute(
            select(TimesheetEntry.project_id, TimesheetEntry.hours).where(
                TimesheetEntry.project_id.in_([p.id for p in projects])
            )
        ).all()
        for project_id, hours in rows:
            used[project_id] += hours

        rate = self._policy.budget_hourly_rate
        return tuple(
            ProjectStatus(
                id=p.id,
                code=p.code,
                name=p.name,
                budget=p.budget,
                used_hours=used[p.id],
                used_budget=used[p.id] * rate,
            )
            for p in projects
        )

    # ------------------------------------------------------------------
    # Team view
    # ------------------------------------------------------------------

    def get_team_data(
        self,
        actor: Actor | None,
        month_date: date | datetime,
        user_id: UUID | None = None,
        project_id: UUID | None = None,
    ) -> TeamData:
        """
        Per-user completion statistics and the latest entries for a month.

        Users are sorted by completion percentage, highest first.

        Raises:
            NotAuthenticatedError: If *actor* is None.
        """
        if actor is None:
            raise NotAuthenticatedError("get_team_data")
        if actor.role == Role.DEV:
            return TeamData()

        assigned: frozenset[UUID] = frozenset()
        team_users: frozenset[UUID] | None = None
        if actor.role == Role.PM:
            assigned = self._assigned_project_ids(actor.id)
            team_users = self._users_on_projects(assigned)

        scope = resolve_team_scope(
            actor,
            assigned,
            team_users or (),
            user_id=user_id,
            project_id=project_id,
        )
        if scope.is_empty:
            return TeamData()

        start, end = month_bounds(as_calendar_date(month_date, self._policy.timezone))

        candidates = team_users
        if user_id is not None:
            candidates = frozenset({user_id}) if candidates is None else candidates & {user_id}
        if project_id is not None:
            on_project = self._users_on_projects(frozenset({project_id}))
            candidates = on_project if candidates is None else candidates & on_project

        return TeamData(
            users=self._team_user_stats(candidates, start, end),
            entries=self._team_entries(scope, start, end),
        )

    def _team_entries(
        self, scope: VisibilityScope, start: date, end: date
    ) -> tuple[TeamEntry, ...]:
        query = (
            select(TimesheetEntry, Project, User)
            .join(Project, Project.id == TimesheetEntry.project_id)
            .join(User, User.id == TimesheetEntry.user_id)
            .where(
                TimesheetEntry.entry_date >= start,
                TimesheetEntry.entry_date <= end,
            )
            .order_by(
                TimesheetEntry.entry_date.desc(),
                TimesheetEntry.created_at.desc(),
            )
            .limit(self._policy.team_entries_limit)
        )
        query = self._scoped(
            query, scope, TimesheetEntry.user_id, TimesheetEntry.project_id
        )
        return tuple(
            TeamEntry(
                id=entry.id,
                entry_date=entry.entry_date,
                hours=entry.hours,
                description=entry.description,
                project_code=project.code,
                project_name=project.name,
                user_name=user.display_name,
            )
            for entry, project, user in self.session.execute(query).all()
        )

    def _team_user_stats(
        self,
        candidates: frozenset[UUID] | None,
        start: date,
        end: date,
    ) -> tuple[TeamUserStat, ...]:
        # Chart totals count every hour the user logged, on any project
        user_query = select(User)
        if candidates is not None:
            if not candidates:
                return ()
            user_query = user_query.where(User.id.in_(list(candidates)))
        users = list(self.session.execute(user_query).scalars())
        if not users:
            return ()

        totals: dict[UUID, Decimal] = defaultdict(Decimal)
        rows = self.session.execute(
            select(TimesheetEntry.user_id, TimesheetEntry.hours).where(
                TimesheetEntry.entry_date >= start,
                TimesheetEntry.entry_date <= end,
                TimesheetEntry.user_id.in_([u.id for u in users]),
            )
        ).all()
        for owner_id, hours in rows:
            totals[owner_id] += hours

        workable = self._workable_hours(start, end)
        stats = []
        for user in users:
            total = totals[user.id]
            if workable > 0:
                percentage = min(
                    (total / workable * _HUNDRED).quantize(_CENT), _HUNDRED
                )
            else:
                percentage = _HUNDRED
            stats.append(
                TeamUserStat(
                    user_id=user.id,
                    name=user.display_name,
                    total_hours=total,
                    workable_hours=workable,
                    is_complete=total >= workable,
                    percentage=percentage,
                )
            )
        stats.sort(key=lambda s: (-s.percentage, s.name))
        return tuple(stats)

    # ------------------------------------------------------------------
    # Filter pick lists
    # ------------------------------------------------------------------

    def get_filters(self, actor: Actor | None) -> FilterOptions:
        """Users and projects a manager may filter the team view on."""
        if actor is None or actor.role == Role.DEV:
            return FilterOptions()

        project_query = select(Project).order_by(Project.code)
        user_query = select(User).order_by(User.name, User.userlogin)
        if actor.role == Role.PM:
            assigned = self._assigned_project_ids(actor.id)
            if not assigned:
                return FilterOptions()
            project_query = project_query.where(Project.id.in_(list(assigned)))
            user_query = user_query.where(
                User.id.in_(
                    select(ProjectAssignment.user_id).where(
                        ProjectAssignment.project_id.in_(list(assigned))
                    )
                )
            )

        return FilterOptions(
            users=tuple(
                FilterUser(id=u.id, name=u.display_name)
                for u in self.session.execute(user_query).scalars()
            ),
            projects=tuple(
                FilterProject(id=p.id, code=p.code, name=p.name)
                for p in self.session.execute(project_query).scalars()
            ),
        )
