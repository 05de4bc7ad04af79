"""
Module: timesheet_kernel.selectors.base
Responsibility: Abstract base class for all read-only query selectors.
    Selectors are the read side of the kernel: calendar-adjacent reports,
    dashboards and filter lists, with no mutation capability.
Architecture position: Kernel > Selectors.  May import from db/, models/
    and the pure domain (scope, calendar, DTOs).  MUST NOT import from
    services/ or outer layers.

Invariants enforced:
    - Read-only access: selectors accept a Session from the caller but MUST
      NOT call session.add(), session.delete(), session.commit(), or
      session.flush().
    - DTO return convention: selectors return frozen dataclasses, never raw
      ORM instances.
    - Role scoping: every entry query is filtered through a
      VisibilityScope resolved from the actor's role and assignments.
"""

from abc import ABC
from typing import Generic, TypeVar
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from timesheet_kernel.db.base import Base
from timesheet_kernel.domain.scope import VisibilityScope
from timesheet_kernel.models.project import ProjectAssignment

ModelType = TypeVar("ModelType", bound=Base)


class BaseSelector(ABC, Generic[ModelType]):
    """
    Abstract base class for all selectors.

    Contract:
        Selectors accept a Session from the caller, perform read-only
        queries, and return DTOs.  They MUST NOT mutate any data.

    Non-goals:
        - BaseSelector does NOT define report queries; subclasses do.
    """

    def __init__(self, session: Session):
        """
        Initialize the selector.

        Args:
            session: SQLAlchemy session for database operations.
        """
        self.session = session

    def _assigned_project_ids(self, user_id: UUID) -> frozenset[UUID]:
        """Projects *user_id* is assigned to."""
        rows = self.session.execute(
            select(ProjectAssignment.project_id).where(
                ProjectAssignment.user_id == user_id
            )
        ).scalars()
        return frozenset(rows)

    def _users_on_projects(self, project_ids: frozenset[UUID]) -> frozenset[UUID]:
        """Users assigned to any of *project_ids*."""
        if not project_ids:
            return frozenset()
        rows = self.session.execute(
            select(ProjectAssignment.user_id).where(
                ProjectAssignment.project_id.in_(list(project_ids))
            )
        ).scalars()
        return frozenset(rows)

    @staticmethod
    def _scoped(query, scope: VisibilityScope, user_column, project_column):
        """Apply *scope* to a select over an entry-like table."""
        if scope.user_ids is not None:
            query = query.where(user_column.in_(list(scope.user_ids)))
        if scope.project_ids is not None:
            query = query.where(project_column.in_(list(scope.project_ids)))
        return query
