"""
Timesheet Kernel

The business-rule layer of the timesheet application:
- Rolling month-end period lock with a grace window
- Exact per-user daily capacity ceiling
- Role-scoped visibility for reporting and team views
- Owner-only mutation of timesheet entries
"""

__version__ = "0.1.0"
