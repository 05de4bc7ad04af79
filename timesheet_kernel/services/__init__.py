"""Services for the timesheet kernel (write side)."""

from timesheet_kernel.services.sql_gateway import SqlTimesheetGateway
from timesheet_kernel.services.timesheet_service import TimesheetService

__all__ = [
    "SqlTimesheetGateway",
    "TimesheetService",
]
