"""
Config -> Kernel Bridges.

Functions that turn TimesheetSettings into running kernel infrastructure.
They live in timesheet_config (the producer) because the kernel must
NEVER import timesheet_config.

Usage:
    from timesheet_config import get_active_config
    from timesheet_config.bridges import bootstrap

    settings = get_active_config()
    policy = bootstrap(settings)
"""

from __future__ import annotations

from sqlalchemy.engine import Engine

from timesheet_config.schema import TimesheetSettings
from timesheet_kernel.db.engine import init_engine_from_url
from timesheet_kernel.domain.dtos import TimesheetPolicy
from timesheet_kernel.logging_config import configure_logging


def configure_kernel_logging(settings: TimesheetSettings) -> None:
    configure_logging(level=settings.logging.level)


def init_engine(settings: TimesheetSettings) -> Engine:
    """Initialise the kernel engine from the database section."""
    db = settings.database
    return init_engine_from_url(
        db.url,
        echo=db.echo,
        pool_size=db.pool_size,
        max_overflow=db.max_overflow,
    )


def bootstrap(settings: TimesheetSettings) -> TimesheetPolicy:
    """
    Configure logging and the engine, and return the validated policy.

    The policy is validated first so a bad configuration fails before
    any connection is opened.
    """
    policy = settings.to_policy()
    configure_kernel_logging(settings)
    init_engine(settings)
    return policy
