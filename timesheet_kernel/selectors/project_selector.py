"""
Module: timesheet_kernel.selectors.project_selector
Responsibility: Projects an actor may pick from when logging time.
Architecture position: Kernel > Selectors.

ADMIN and GM pick from every project; PM and DEV only from projects they
are assigned to.  An unauthenticated caller gets an empty list.
"""

from sqlalchemy import select
from sqlalchemy.orm import Session

from timesheet_kernel.domain.dtos import Actor, ProjectInfo
from timesheet_kernel.domain.scope import resolve_project_scope
from timesheet_kernel.models.project import Project
from timesheet_kernel.selectors.base import BaseSelector


def _to_info(project: Project) -> ProjectInfo:
    return ProjectInfo(
        id=project.id,
        code=project.code,
        name=project.name,
        start_date=project.start_date,
        end_date=project.end_date,
        budget=project.budget,
    )


class ProjectSelector(BaseSelector[Project]):
    """Selector for project pick lists."""

    def __init__(self, session: Session):
        super().__init__(session)

    def get_assigned_projects(self, actor: Actor | None) -> list[ProjectInfo]:
        """Projects visible to *actor*, ordered by code."""
        if actor is None:
            return []

        allowed = resolve_project_scope(actor, self._assigned_project_ids(actor.id))
        query = select(Project).order_by(Project.code)
        if allowed is not None:
            if not allowed:
                return []
            query = query.where(Project.id.in_(list(allowed)))

        return [_to_info(p) for p in self.session.execute(query).scalars()]
