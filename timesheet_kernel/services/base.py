"""
BaseService -- row-level persistence helpers shared by kernel adapters.

Responsibility:
    Holds the session and the small set of add / fetch / remove helpers
    that every writer needs, so each adapter states its queries and
    nothing else.

Architecture position:
    Kernel > Services -- imperative shell infrastructure.

Invariants enforced:
    - Flush, never commit.  Every helper ends with ``session.flush()`` so
      constraint violations surface inside the operation, while the
      caller (``session_scope()`` or the test harness) decides whether the
      unit of work commits.  A recurring batch is all-or-nothing because
      of this.
"""

from abc import ABC
from typing import ClassVar, Generic, TypeVar
from uuid import UUID

from sqlalchemy.orm import Session

from timesheet_kernel.db.base import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseService(ABC, Generic[ModelType]):
    """
    Session holder for one mapped model.

    Subclasses set ``model`` to the ORM class they own.
    """

    model: ClassVar[type[Base]]

    def __init__(self, session: Session):
        self.session = session

    def _fetch(self, row_id: UUID) -> ModelType | None:
        return self.session.get(self.model, row_id)

    def _persist(self, *rows: ModelType) -> None:
        self.session.add_all(rows)
        self.session.flush()

    def _remove(self, row: ModelType) -> None:
        self.session.delete(row)
        self.session.flush()
