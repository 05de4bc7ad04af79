"""
Configuration Loader (``timesheet_config.loader``).

Responsibility
--------------
Loads a configuration set's ``root.yaml`` and parses it into the frozen
``timesheet_config.schema`` dataclasses.  Runtime callers go through
``timesheet_config.get_active_config()`` instead.

Invariants enforced
-------------------
* Required keys (``config_id``, ``version``, ``scope.organization``,
  ``scope.effective_from``) raise ``KeyError`` when missing; optional
  sections fall back to the schema defaults.
* Decimal values are parsed from their string form, never through float.

Failure modes
-------------
* Missing YAML file  -> ``FileNotFoundError`` propagates.
* Malformed YAML  -> ``yaml.YAMLError`` propagates.
* Missing required keys  -> ``KeyError`` propagates.
* Invalid date or decimal  -> ``ValueError``.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal, InvalidOperation
from pathlib import Path
from typing import Any

import yaml

from timesheet_config.schema import (
    ConfigScope,
    ConfigStatus,
    DatabaseSettings,
    LoggingSettings,
    PolicySettings,
    TimesheetSettings,
)


def load_yaml_file(path: Path) -> dict[str, Any]:
    """
    Load a single YAML file and return its contents as a dict.

    Raises:
        FileNotFoundError: if the file does not exist.
        yaml.YAMLError: if the file contains invalid YAML.
    """
    with open(path) as f:
        return yaml.safe_load(f) or {}


def parse_date(value: Any) -> date:
    """Parse a date from YAML (string or date object)."""
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        return date.fromisoformat(value)
    raise ValueError(f"Cannot parse date from {value!r}")


def parse_decimal(value: Any) -> Decimal:
    """Parse a Decimal from YAML; numbers go through str() first."""
    try:
        return Decimal(str(value))
    except InvalidOperation as exc:
        raise ValueError(f"Cannot parse decimal from {value!r}") from exc


def parse_scope(data: dict[str, Any]) -> ConfigScope:
    return ConfigScope(
        organization=data["organization"],
        effective_from=parse_date(data["effective_from"]),
        effective_to=parse_date(data["effective_to"]) if data.get("effective_to") else None,
    )


def parse_policy(data: dict[str, Any]) -> PolicySettings:
    defaults = PolicySettings()
    return PolicySettings(
        daily_limit_hours=parse_decimal(
            data.get("daily_limit_hours", defaults.daily_limit_hours)
        ),
        lock_grace_days=int(data.get("lock_grace_days", defaults.lock_grace_days)),
        timezone=str(data.get("timezone", defaults.timezone)),
        budget_hourly_rate=parse_decimal(
            data.get("budget_hourly_rate", defaults.budget_hourly_rate)
        ),
        dashboard_top_projects=int(
            data.get("dashboard_top_projects", defaults.dashboard_top_projects)
        ),
        dashboard_recent_entries=int(
            data.get("dashboard_recent_entries", defaults.dashboard_recent_entries)
        ),
        dashboard_project_status_limit=int(
            data.get(
                "dashboard_project_status_limit",
                defaults.dashboard_project_status_limit,
            )
        ),
        team_entries_limit=int(
            data.get("team_entries_limit", defaults.team_entries_limit)
        ),
    )


def parse_database(data: dict[str, Any]) -> DatabaseSettings:
    defaults = DatabaseSettings()
    return DatabaseSettings(
        url=str(data.get("url", defaults.url)),
        echo=bool(data.get("echo", defaults.echo)),
        pool_size=int(data.get("pool_size", defaults.pool_size)),
        max_overflow=int(data.get("max_overflow", defaults.max_overflow)),
    )


def parse_logging(data: dict[str, Any]) -> LoggingSettings:
    return LoggingSettings(level=str(data.get("level", "INFO")).upper())


def parse_settings(data: dict[str, Any]) -> TimesheetSettings:
    """Parse a whole configuration set from its root dict."""
    return TimesheetSettings(
        config_id=data["config_id"],
        version=int(data["version"]),
        scope=parse_scope(data["scope"]),
        status=ConfigStatus(data.get("status", "published")),
        policy=parse_policy(data.get("policy") or {}),
        database=parse_database(data.get("database") or {}),
        logging=parse_logging(data.get("logging") or {}),
    )


def load_settings(set_dir: Path) -> TimesheetSettings:
    """Load ``<set_dir>/root.yaml``."""
    return parse_settings(load_yaml_file(set_dir / "root.yaml"))
