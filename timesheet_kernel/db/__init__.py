"""Database layer - engine, base classes and column types."""

from timesheet_kernel.db.base import Base, TrackedBase
from timesheet_kernel.db.engine import (
    create_tables,
    get_engine,
    get_session,
    session_scope,
)
from timesheet_kernel.db.types import TICKS_PER_HOUR, HalfHours, UUIDString

__all__ = [
    "get_engine",
    "get_session",
    "session_scope",
    "create_tables",
    "Base",
    "TrackedBase",
    "UUIDString",
    "HalfHours",
    "TICKS_PER_HOUR",
]
