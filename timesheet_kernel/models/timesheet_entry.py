"""
Module: timesheet_kernel.models.timesheet_entry
Responsibility: ORM persistence for timesheet entries -- hours a user
    logged against a project on a calendar day.
Architecture position: Kernel > Models.  May import from db/ only.

Invariants enforced (by TimesheetService, not the table):
    - For any (user_id, entry_date) the sum of hours never exceeds the
      daily ceiling.
    - user_id, project_id and entry_date never change after creation.
    - Only the owner mutates or deletes a row, and only while the
      entry's month is inside its editable window.
"""

from datetime import date
from decimal import Decimal
from uuid import UUID

from sqlalchemy import Date, ForeignKey, Index, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from timesheet_kernel.db.base import TrackedBase
from timesheet_kernel.db.types import HalfHours, UUIDString
from timesheet_kernel.models.project import Project
from timesheet_kernel.models.user import User


class TimesheetEntry(TrackedBase):
    """
    Hours logged by one user against one project on one day.

    Non-goals:
        - No "move to another day" or "reassign project" mutation exists.
    """

    __tablename__ = "timesheet_entries"

    __table_args__ = (
        Index("idx_entry_user_date", "user_id", "entry_date"),
        Index("idx_entry_project_date", "project_id", "entry_date"),
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

    # Calendar day; time-of-day is normalised away before storage
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)

    hours: Mapped[Decimal] = mapped_column(HalfHours(), nullable=False)

    description: Mapped[str] = mapped_column(Text, nullable=False, default="")

    project: Mapped[Project] = relationship()

    user: Mapped[User] = relationship()

    def __repr__(self) -> str:
        return (
            f"<TimesheetEntry {self.id}: {self.entry_date.isoformat()} "
            f"{self.hours}h>"
        )
