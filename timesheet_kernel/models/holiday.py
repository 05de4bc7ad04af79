"""
Module: timesheet_kernel.models.holiday
Responsibility: ORM persistence for named non-working dates.
Architecture position: Kernel > Models.  May import from db/base.py only.

Holidays only feed workable-day counts for dashboards and team views.
They play no part in the period lock or the daily capacity ceiling.
"""

from datetime import date

from sqlalchemy import Date, Index, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from timesheet_kernel.db.base import TrackedBase


class Holiday(TrackedBase):
    """A named non-working calendar date tagged with its year."""

    __tablename__ = "holidays"

    __table_args__ = (
        Index("idx_holiday_date", "holiday_date"),
        Index("idx_holiday_year", "year"),
    )

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    holiday_date: Mapped[date] = mapped_column(Date, nullable=False)

    year: Mapped[int] = mapped_column(Integer, nullable=False)

    def __repr__(self) -> str:
        return f"<Holiday {self.holiday_date.isoformat()}: {self.name}>"
