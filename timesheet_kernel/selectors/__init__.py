"""Selectors for the timesheet kernel (read side)."""

from timesheet_kernel.selectors.dashboard_selector import (
    DashboardSelector,
    DashboardStats,
    FilterOptions,
    TeamData,
)
from timesheet_kernel.selectors.holiday_selector import HolidayDTO, HolidaySelector
from timesheet_kernel.selectors.project_selector import ProjectSelector
from timesheet_kernel.selectors.report_selector import (
    ReportEntryDTO,
    ReportFilter,
    ReportSelector,
    ReportSummary,
)

__all__ = [
    "DashboardSelector",
    "DashboardStats",
    "FilterOptions",
    "HolidayDTO",
    "HolidaySelector",
    "ProjectSelector",
    "ReportEntryDTO",
    "ReportFilter",
    "ReportSelector",
    "ReportSummary",
    "TeamData",
]
