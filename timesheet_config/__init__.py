"""
timesheet_config -- single public entrypoint for timesheet configuration.

Responsibility:
    Provides the ONLY way to obtain configuration at runtime through
    ``get_active_config()``.  No other component reads configuration files
    or environment variables directly.  Returns a frozen
    ``TimesheetSettings``; ``TimesheetSettings.to_policy()`` and
    ``timesheet_config.bridges`` translate it into kernel inputs.

Architecture position:
    Configuration -- YAML-driven settings.  This package sits above
    ``timesheet_kernel``.  The kernel MUST NEVER import from
    ``timesheet_config``.

Invariants enforced:
    - Single entrypoint: all runtime config flows through
      ``get_active_config()``.
    - ``DATABASE_URL``, when set, overrides ``database.url``; nothing else
      is read from the environment.

Failure modes:
    - ``FileNotFoundError`` -- no configuration set for the requested
      organization / date.
    - ``yaml.YAMLError`` -- malformed YAML.
    - ``KeyError`` / ``ValueError`` -- missing or malformed values.
"""

from __future__ import annotations

import dataclasses
import os
from datetime import date
from pathlib import Path

from timesheet_config.loader import load_settings
from timesheet_config.schema import (
    ConfigScope,
    ConfigStatus,
    DatabaseSettings,
    LoggingSettings,
    PolicySettings,
    TimesheetSettings,
)
from timesheet_kernel.logging_config import get_logger

_logger = get_logger("config")

# Default configuration sets directory
_DEFAULT_CONFIG_DIR = Path(__file__).parent / "sets"

DATABASE_URL_ENV = "DATABASE_URL"


def get_active_config(
    organization: str = "*",
    as_of_date: date | None = None,
    config_dir: Path | None = None,
) -> TimesheetSettings:
    """The ONLY public configuration entrypoint.

    Args:
        organization: Organization identifier for scope matching.
        as_of_date: Date for effective date filtering.  Defaults to today.
        config_dir: Override path to configuration sets directory.
            Defaults to timesheet_config/sets/.

    Returns:
        TimesheetSettings, with the DATABASE_URL override applied.

    Raises:
        FileNotFoundError: If no matching configuration set is found.
    """
    sets_dir = config_dir or _DEFAULT_CONFIG_DIR
    settings = _find_matching_config(sets_dir, organization, as_of_date or date.today())

    env_url = os.environ.get(DATABASE_URL_ENV)
    if env_url:
        settings = dataclasses.replace(
            settings,
            database=dataclasses.replace(settings.database, url=env_url),
        )

    _logger.info(
        "timesheet_config_loaded",
        extra={
            "config_id": settings.config_id,
            "config_version": settings.version,
            "organization": settings.scope.organization,
            "database_url_from_env": bool(env_url),
        },
    )
    return settings


def _find_matching_config(
    sets_dir: Path, organization: str, as_of_date: date
) -> TimesheetSettings:
    """Find the configuration set matching an organization and date.

    Prefers PUBLISHED sets, then the highest version.  Falls back to the
    only available set when exactly one exists (development/testing).

    Raises:
        FileNotFoundError: If ``sets_dir`` does not exist or no
            configuration set matches.
    """
    if not sets_dir.is_dir():
        raise FileNotFoundError(f"Configuration sets directory not found: {sets_dir}")

    all_sets = [
        load_settings(subdir)
        for subdir in sorted(sets_dir.iterdir())
        if subdir.is_dir() and (subdir / "root.yaml").exists()
    ]
    candidates = [s for s in all_sets if s.scope.covers(organization, as_of_date)]

    if not candidates:
        if len(all_sets) == 1:
            return all_sets[0]
        raise FileNotFoundError(
            f"No configuration set found for organization='{organization}' "
            f"as_of_date={as_of_date} in {sets_dir}"
        )

    published = [s for s in candidates if s.status == ConfigStatus.PUBLISHED]
    return max(published or candidates, key=lambda s: s.version)


__all__ = [
    "ConfigScope",
    "ConfigStatus",
    "DatabaseSettings",
    "LoggingSettings",
    "PolicySettings",
    "TimesheetSettings",
    "get_active_config",
]
