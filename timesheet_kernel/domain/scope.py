"""
Scope -- role-based visibility of timesheet data.

Responsibility:
    Maps an actor's role to the set of owners and projects whose timesheet
    data the actor may read, and intersects caller-supplied filters with
    that boundary.

Architecture position:
    Kernel > Domain -- pure functions, zero I/O.  Callers fetch the
    actor's project assignments (and, for team views, the users assigned
    to those projects) and pass them in.

Invariants enforced:
    - Filters narrow, never widen: a user or project filter is intersected
      with the role scope, so it cannot escape the role boundary.
    - A PM filtering on a project outside their assignments gets an EMPTY
      scope (an empty result, not an error).
    - Scopes are read-only.  Write access is governed solely by entry
      ownership in TimesheetService, for every role.
"""

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from uuid import UUID

from timesheet_kernel.domain.dtos import Actor, Role


@dataclass(frozen=True)
class VisibilityScope:
    """
    Filter descriptor over (owner, project).

    ``None`` on a dimension means unrestricted; an empty frozenset means
    nothing is visible.
    """

    user_ids: frozenset[UUID] | None = None
    project_ids: frozenset[UUID] | None = None

    @property
    def is_empty(self) -> bool:
        return (self.user_ids is not None and not self.user_ids) or (
            self.project_ids is not None and not self.project_ids
        )

    @property
    def is_unrestricted(self) -> bool:
        return self.user_ids is None and self.project_ids is None

    def restrict_users(self, user_ids: Iterable[UUID]) -> "VisibilityScope":
        wanted = frozenset(user_ids)
        merged = wanted if self.user_ids is None else self.user_ids & wanted
        return VisibilityScope(user_ids=merged, project_ids=self.project_ids)

    def restrict_projects(self, project_ids: Iterable[UUID]) -> "VisibilityScope":
        wanted = frozenset(project_ids)
        merged = wanted if self.project_ids is None else self.project_ids & wanted
        return VisibilityScope(user_ids=self.user_ids, project_ids=merged)

    def allows(self, user_id: UUID, project_id: UUID) -> bool:
        if self.user_ids is not None and user_id not in self.user_ids:
            return False
        if self.project_ids is not None and project_id not in self.project_ids:
            return False
        return True


EMPTY_SCOPE = VisibilityScope(user_ids=frozenset(), project_ids=frozenset())

_ScopeBuilder = Callable[[Actor, frozenset[UUID]], VisibilityScope]

# Role -> entry scope for reports and listings
_ENTRY_SCOPES: dict[Role, _ScopeBuilder] = {
    Role.DEV: lambda actor, assigned: VisibilityScope(user_ids=frozenset({actor.id})),
    Role.PM: lambda actor, assigned: VisibilityScope(project_ids=assigned),
    Role.GM: lambda actor, assigned: VisibilityScope(),
    Role.ADMIN: lambda actor, assigned: VisibilityScope(),
}

# Role -> projects the actor may pick from (None = all projects)
_PROJECT_SCOPES: dict[Role, Callable[[frozenset[UUID]], frozenset[UUID] | None]] = {
    Role.DEV: lambda assigned: assigned,
    Role.PM: lambda assigned: assigned,
    Role.GM: lambda assigned: None,
    Role.ADMIN: lambda assigned: None,
}


def _apply_filters(
    scope: VisibilityScope,
    user_id: UUID | None,
    project_id: UUID | None,
) -> VisibilityScope:
    if project_id is not None:
        scope = scope.restrict_projects({project_id})
    if user_id is not None:
        scope = scope.restrict_users({user_id})
    return scope


def resolve_entry_scope(
    actor: Actor,
    assigned_project_ids: Iterable[UUID] = (),
    user_id: UUID | None = None,
    project_id: UUID | None = None,
) -> VisibilityScope:
    """
    Scope of timesheet entries *actor* may read.

    DEV: own entries.  PM: entries on assigned projects.  GM/ADMIN:
    everything.  Optional filters are intersected with the role scope.
    """
    assigned = frozenset(assigned_project_ids)
    scope = _ENTRY_SCOPES[actor.role](actor, assigned)
    return _apply_filters(scope, user_id, project_id)


def resolve_project_scope(
    actor: Actor,
    assigned_project_ids: Iterable[UUID] = (),
) -> frozenset[UUID] | None:
    """Projects *actor* may log against or list; None means all projects."""
    return _PROJECT_SCOPES[actor.role](frozenset(assigned_project_ids))


def resolve_team_scope(
    actor: Actor,
    assigned_project_ids: Iterable[UUID] = (),
    team_user_ids: Iterable[UUID] = (),
    user_id: UUID | None = None,
    project_id: UUID | None = None,
) -> VisibilityScope:
    """
    Scope for the manager team view.

    DEV has no team view (empty).  PM sees entries on their assigned
    projects and may only filter on users assigned to those projects.
    GM/ADMIN see everything.
    """
    if actor.role == Role.DEV:
        return EMPTY_SCOPE
    if actor.role == Role.PM:
        if user_id is not None and user_id not in frozenset(team_user_ids):
            return EMPTY_SCOPE
        scope = VisibilityScope(project_ids=frozenset(assigned_project_ids))
    else:
        scope = VisibilityScope()
    return _apply_filters(scope, user_id, project_id)
