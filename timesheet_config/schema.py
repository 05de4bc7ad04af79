"""
Timesheet configuration schema.

Frozen dataclasses that a YAML configuration set is parsed into by the
loader.  ``TimesheetSettings`` is the sole runtime artifact returned by
``timesheet_config.get_active_config()``.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum, unique
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timesheet_kernel.domain.dtos import TimesheetPolicy
from timesheet_kernel.exceptions import ConfigurationError

# ---------------------------------------------------------------------------
# Scope and lifecycle
# ---------------------------------------------------------------------------


@unique
class ConfigStatus(str, Enum):
    """Lifecycle status for a configuration set."""

    DRAFT = "draft"
    PUBLISHED = "published"


@dataclass(frozen=True)
class ConfigScope:
    """Scope of applicability for a configuration set."""

    organization: str
    effective_from: date
    effective_to: date | None = None

    def covers(self, organization: str, as_of_date: date) -> bool:
        org_matches = self.organization in ("*", organization)
        date_matches = self.effective_from <= as_of_date and (
            self.effective_to is None or self.effective_to >= as_of_date
        )
        return org_matches and date_matches


# ---------------------------------------------------------------------------
# Sections
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class PolicySettings:
    """Business-rule parameters; mirrors the kernel's TimesheetPolicy."""

    daily_limit_hours: Decimal = Decimal("7.0")
    lock_grace_days: int = 5
    timezone: str = "UTC"
    budget_hourly_rate: Decimal = Decimal("500")
    dashboard_top_projects: int = 5
    dashboard_recent_entries: int = 5
    dashboard_project_status_limit: int = 10
    team_entries_limit: int = 50


@dataclass(frozen=True)
class DatabaseSettings:
    url: str = "sqlite://"
    echo: bool = False
    pool_size: int = 20
    max_overflow: int = 10


@dataclass(frozen=True)
class LoggingSettings:
    level: str = "INFO"


# ---------------------------------------------------------------------------
# Configuration set
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class TimesheetSettings:
    """
    A parsed configuration set.

    Attributes:
        config_id: Unique identifier (e.g., "default")
        version: Configuration version number
        scope: Applicability scope
        status: Lifecycle status
        policy: Business-rule parameters
        database: Engine parameters
        logging: Log level
    """

    config_id: str
    version: int
    scope: ConfigScope
    status: ConfigStatus = ConfigStatus.PUBLISHED
    policy: PolicySettings = field(default_factory=PolicySettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    def to_policy(self) -> TimesheetPolicy:
        """
        Build the kernel's TimesheetPolicy.

        Raises:
            ConfigurationError: If a policy value is unusable.
        """
        p = self.policy

        if p.daily_limit_hours <= 0:
            raise ConfigurationError("daily_limit_hours", "must be positive")
        if (p.daily_limit_hours * 2) % 1 != 0:
            raise ConfigurationError(
                "daily_limit_hours", "must be a multiple of 0.5 hours"
            )
        if p.lock_grace_days < 0:
            raise ConfigurationError("lock_grace_days", "must not be negative")
        if p.budget_hourly_rate < 0:
            raise ConfigurationError("budget_hourly_rate", "must not be negative")
        try:
            ZoneInfo(p.timezone)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ConfigurationError("timezone", f"unknown zone {p.timezone!r}") from exc
        for name in (
            "dashboard_top_projects",
            "dashboard_recent_entries",
            "dashboard_project_status_limit",
            "team_entries_limit",
        ):
            if getattr(p, name) <= 0:
                raise ConfigurationError(name, "must be positive")

        return TimesheetPolicy(
            daily_limit_hours=p.daily_limit_hours,
            lock_grace_days=p.lock_grace_days,
            timezone=p.timezone,
            budget_hourly_rate=p.budget_hourly_rate,
            dashboard_top_projects=p.dashboard_top_projects,
            dashboard_recent_entries=p.dashboard_recent_entries,
            dashboard_project_status_limit=p.dashboard_project_status_limit,
            team_entries_limit=p.team_entries_limit,
        )
