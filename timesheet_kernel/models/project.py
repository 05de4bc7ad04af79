"""
Module: timesheet_kernel.models.project
Responsibility: ORM persistence for projects and the user/project
    assignment link that drives manager visibility.
Architecture position: Kernel > Models.  May import from db/base.py only.

Invariants enforced:
    - Project.code is unique.
    - A (user_id, project_id) pair is assigned at most once.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Numeric, String, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timesheet_kernel.db.base import TrackedBase
from timesheet_kernel.db.types import UUIDString


class Project(TrackedBase):
    """Unit that time is logged against.  Immutable from the kernel's view."""

    __tablename__ = "projects"

    __table_args__ = (
        UniqueConstraint("code", name="uq_project_code"),
    )

    code: Mapped[str] = mapped_column(String(50), nullable=False)

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    start_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    end_date: Mapped[date | None] = mapped_column(Date, nullable=True)

    # Budget in currency units; compared against used hours x hourly rate
    budget: Mapped[Decimal] = mapped_column(
        Numeric(14, 2),
        nullable=False,
        default=Decimal("0"),
    )

    assignments: Mapped[list["ProjectAssignment"]] = relationship(
        back_populates="project",
        cascade="all, delete-orphan",
    )

    def __repr__(self) -> str:
        return f"<Project {self.code}>"


class ProjectAssignment(TrackedBase):
    """
    Many-to-many link putting a user in scope for a project's data.

    Created and removed by administrative tooling; read by the
    visibility scope resolver.
    """

    __tablename__ = "project_assignments"

    __table_args__ = (
        UniqueConstraint("user_id", "project_id", name="uq_assignment_user_project"),
        Index("idx_assignment_project", "project_id"),
    )

    user_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("users.id"),
        nullable=False,
    )

    project_id: Mapped[UUID] = mapped_column(
        UUIDString(),
        ForeignKey("projects.id"),
        nullable=False,
    )

    project: Mapped[Project] = relationship(back_populates="assignments")

    def __repr__(self) -> str:
        return f"<ProjectAssignment user={self.user_id} project={self.project_id}>"
