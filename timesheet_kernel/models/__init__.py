"""ORM models for the timesheet kernel."""

from timesheet_kernel.models.holiday import Holiday
from timesheet_kernel.models.project import Project, ProjectAssignment
from timesheet_kernel.models.timesheet_entry import TimesheetEntry
from timesheet_kernel.models.user import User

__all__ = [
    "User",
    "Project",
    "ProjectAssignment",
    "TimesheetEntry",
    "Holiday",
]
