"""
Module: timesheet_kernel.selectors.holiday_selector
Responsibility: Read access to configured holidays.
Architecture position: Kernel > Selectors.
"""

from dataclasses import dataclass
from datetime import date
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from timesheet_kernel.models.holiday import Holiday
from timesheet_kernel.selectors.base import BaseSelector


@dataclass(frozen=True)
class HolidayDTO:
    """A named non-working day."""

    id: UUID
    name: str
    holiday_date: date
    year: int


class HolidaySelector(BaseSelector[Holiday]):
    """Selector for holiday lists, ordered by date."""

    def __init__(self, session: Session):
        super().__init__(session)

    def _to_dto(self, holiday: Holiday) -> HolidayDTO:
        return HolidayDTO(
            id=holiday.id,
            name=holiday.name,
            holiday_date=holiday.holiday_date,
            year=holiday.year,
        )

    def get_holidays(self, year: int) -> list[HolidayDTO]:
        rows = self.session.execute(
            select(Holiday)
            .where(Holiday.year == year)
            .order_by(Holiday.holiday_date)
        ).scalars()
        return [self._to_dto(h) for h in rows]

    def get_holidays_between(self, start: date, end: date) -> list[HolidayDTO]:
        """Holidays dated within [start, end], both inclusive."""
        rows = self.session.execute(
            select(Holiday)
            .where(Holiday.holiday_date >= start, Holiday.holiday_date <= end)
            .order_by(Holiday.holiday_date)
        ).scalars()
        return [self._to_dto(h) for h in rows]
