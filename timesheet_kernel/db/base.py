"""
Module: timesheet_kernel.db.base
Responsibility: Declarative base for the timesheet tables.  Fixes the key
    type, the timestamp type, constraint naming and the audit columns every
    table carries.
Architecture position: Kernel > DB.  Imported by every model file.  MUST
    NOT import from models/, services/, selectors/, domain/, or outer layers.

Invariants enforced:
    - Every row has a uuid4 primary key stored through UUIDString.
    - Every datetime column is timezone-aware.
    - Unnamed constraints and indexes get deterministic names, so schema
      diffs between SQLite test databases and PostgreSQL stay readable.
"""

from datetime import datetime
from typing import ClassVar
from uuid import UUID, uuid4

from sqlalchemy import DateTime, MetaData, func
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from timesheet_kernel.db.types import UUIDString

NAMING_CONVENTION = {
    "ix": "ix_%(table_name)s_%(column_0_N_name)s",
    "uq": "uq_%(table_name)s_%(column_0_N_name)s",
    "fk": "fk_%(table_name)s_%(column_0_name)s_%(referred_table_name)s",
    "pk": "pk_%(table_name)s",
}


class Base(DeclarativeBase):
    """
    Declarative base for all timesheet models.

    ``Mapped[UUID]`` and ``Mapped[datetime]`` annotations resolve through
    ``type_annotation_map``; models only spell out a column type when it
    differs (``HalfHours``, ``Numeric``, ``Date``).
    """

    metadata = MetaData(naming_convention=NAMING_CONVENTION)

    type_annotation_map: ClassVar[dict] = {
        datetime: DateTime(timezone=True),
        UUID: UUIDString(),
    }

    id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


class TrackedBase(Base):
    """
    Abstract base recording who wrote a row and when.

    Contract:
        ``created_by_id`` is nullable because users, projects and holidays
        are loaded by administrative tooling with no acting user; timesheet
        entries always carry their owner there.  ``updated_by_id`` names
        the last user to change the row through ``stamp_update``.
    """

    __abstract__ = True

    created_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        nullable=False,
    )
    updated_at: Mapped[datetime] = mapped_column(
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )
    created_by_id: Mapped[UUID | None] = mapped_column(nullable=True)
    updated_by_id: Mapped[UUID | None] = mapped_column(nullable=True)

    def stamp_update(self, actor_id: UUID) -> None:
        self.updated_by_id = actor_id
