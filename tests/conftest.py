"""
Pytest fixtures for the timesheet kernel test suite.

Provides:
- An in-memory SQLite database per test (tables created and dropped)
- Actor, project, assignment and holiday factories
- A TimesheetService wired to a DeterministicClock and a
  RecordingViewInvalidator
- An in-memory TimesheetGateway for property tests that must not touch
  a database
- Structured log capture

Environment Variables:
- DATABASE_URL: PostgreSQL connection URL.  Only tests marked
  ``postgres`` use it; they are skipped when it is unset or not
  PostgreSQL.
"""

import json
import logging
import os
from collections import defaultdict
from collections.abc import Iterable, Sequence
from datetime import date, datetime, timezone
from decimal import Decimal
from io import StringIO
from uuid import UUID, uuid4

import pytest
from sqlalchemy.orm import Session

from timesheet_kernel.db.engine import (
    create_tables,
    drop_tables,
    get_session_factory,
    init_engine_from_url,
    reset_engine,
)
from timesheet_kernel.domain.clock import DeterministicClock
from timesheet_kernel.domain.dtos import (
    Actor,
    EntryDraft,
    ProjectInfo,
    Role,
    TimesheetEntryInfo,
    TimesheetEntryView,
    TimesheetPolicy,
)
from timesheet_kernel.domain.gateway import TimesheetGateway
from timesheet_kernel.domain.invalidation import RecordingViewInvalidator
from timesheet_kernel.exceptions import EntryNotFoundError
from timesheet_kernel.logging_config import (
    LogContext,
    StructuredFormatter,
    configure_logging,
    reset_logging,
)
from timesheet_kernel.models.holiday import Holiday
from timesheet_kernel.models.project import Project, ProjectAssignment
from timesheet_kernel.models.user import User
from timesheet_kernel.services.timesheet_service import TimesheetService

SQLITE_URL = "sqlite://"

# 2026-03-10 is a Tuesday; February 2026 stays editable until 2026-03-05
DEFAULT_NOW = datetime(2026, 3, 10, 9, 0, tzinfo=timezone.utc)


def get_postgres_url() -> str | None:
    url = os.environ.get("DATABASE_URL")
    if url and url.startswith("postgresql"):
        return url
    return None


def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line(
        "markers", "postgres: mark test as requiring PostgreSQL"
    )


# =============================================================================
# Logging fixtures
# =============================================================================


@pytest.fixture(autouse=True, scope="session")
def _configure_test_logging():
    """Configure structured logging for the test suite."""
    reset_logging()
    configure_logging(level=logging.DEBUG, stream=StringIO())
    yield
    reset_logging()


@pytest.fixture(autouse=True)
def _clear_log_context():
    """Clear LogContext between tests to prevent cross-test contamination."""
    LogContext.clear()
    yield
    LogContext.clear()


@pytest.fixture
def captured_logs():
    """
    Capture timesheet_kernel logs as parsed JSON dicts.

    Usage::

        def test_something(captured_logs, timesheet_service):
            timesheet_service.log_time(...)
            logs = captured_logs()
            assert any(r["message"] == "time_logged" for r in logs)
    """
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(StructuredFormatter())
    root = logging.getLogger("timesheet_kernel")
    root.addHandler(handler)

    def _get_records() -> list[dict]:
        lines = stream.getvalue().strip().split("\n")
        return [json.loads(line) for line in lines if line]

    yield _get_records

    root.removeHandler(handler)


# =============================================================================
# Database fixtures
# =============================================================================


@pytest.fixture
def db_engine():
    """Fresh in-memory SQLite engine with all tables, per test."""
    reset_engine()
    engine = init_engine_from_url(SQLITE_URL)
    create_tables()
    yield engine
    drop_tables()
    reset_engine()


@pytest.fixture
def session(db_engine) -> Session:
    """Session whose uncommitted work is rolled back at teardown."""
    sess = get_session_factory()()
    yield sess
    sess.rollback()
    sess.close()


# =============================================================================
# Clock / policy / invalidation
# =============================================================================


@pytest.fixture
def deterministic_clock() -> DeterministicClock:
    return DeterministicClock(DEFAULT_NOW)


@pytest.fixture
def policy() -> TimesheetPolicy:
    return TimesheetPolicy()


@pytest.fixture
def recording_invalidator() -> RecordingViewInvalidator:
    return RecordingViewInvalidator()


@pytest.fixture
def timesheet_service(session, deterministic_clock, policy, recording_invalidator):
    return TimesheetService.for_session(
        session,
        clock=deterministic_clock,
        policy=policy,
        invalidator=recording_invalidator,
    )


# =============================================================================
# Data factories
# =============================================================================


@pytest.fixture
def make_actor(session):
    """Create a User row and return the matching Actor."""
    counter = {"n": 0}

    def _make(role: Role | str = Role.DEV, name: str | None = None) -> Actor:
        counter["n"] += 1
        role = Role(role)
        login = f"{role.value.lower()}{counter['n']}"
        user = User(userlogin=login, name=name or login.title(), role=role.value)
        session.add(user)
        session.flush()
        return Actor(id=user.id, role=role)

    return _make


@pytest.fixture
def make_project(session):
    """Create a Project row and return it."""

    def _make(code: str, name: str | None = None, budget: str = "100000") -> Project:
        project = Project(code=code, name=name or f"Project {code}", budget=Decimal(budget))
        session.add(project)
        session.flush()
        return project

    return _make


@pytest.fixture
def assign(session):
    """Assign a user to a project."""

    def _assign(user_id: UUID, project_id: UUID) -> None:
        session.add(ProjectAssignment(user_id=user_id, project_id=project_id))
        session.flush()

    return _assign


@pytest.fixture
def make_holiday(session):
    def _make(day: date, name: str = "Holiday") -> Holiday:
        holiday = Holiday(name=name, holiday_date=day, year=day.year)
        session.add(holiday)
        session.flush()
        return holiday

    return _make


@pytest.fixture
def dev(make_actor) -> Actor:
    return make_actor(Role.DEV, name="Dana Dev")


@pytest.fixture
def project(make_project) -> Project:
    return make_project("P-001", "Apollo")


# =============================================================================
# In-memory gateway
# =============================================================================


class InMemoryTimesheetGateway(TimesheetGateway):
    """Dict-backed TimesheetGateway used by database-free tests."""

    def __init__(self) -> None:
        self.entries: dict[UUID, TimesheetEntryInfo] = {}
        self.locks: list[UUID] = []
        self._order: dict[UUID, int] = {}

    def acquire_owner_lock(self, user_id: UUID) -> None:
        self.locks.append(user_id)

    def find_entry_by_id(self, entry_id: UUID) -> TimesheetEntryInfo | None:
        return self.entries.get(entry_id)

    def find_entries_by_user_and_day(self, user_id: UUID, day: date) -> list[TimesheetEntryInfo]:
        return [
            e for e in self.entries.values()
            if e.user_id == user_id and e.entry_date == day
        ]

    def find_entries_by_user_and_days(
        self, user_id: UUID, days: Iterable[date]
    ) -> dict[date, list[TimesheetEntryInfo]]:
        wanted = set(days)
        grouped: dict[date, list[TimesheetEntryInfo]] = defaultdict(list)
        for e in self.entries.values():
            if e.user_id == user_id and e.entry_date in wanted:
                grouped[e.entry_date].append(e)
        return grouped

    def find_entries_for_user_between(
        self, user_id: UUID, start: date, end: date
    ) -> list[TimesheetEntryView]:
        rows = sorted(
            (
                e for e in self.entries.values()
                if e.user_id == user_id and start <= e.entry_date <= end
            ),
            key=lambda e: (e.entry_date, self._order[e.id]),
        )
        return [
            TimesheetEntryView(
                id=e.id,
                user_id=e.user_id,
                project_id=e.project_id,
                entry_date=e.entry_date,
                hours=e.hours,
                description=e.description,
                project=ProjectInfo(id=e.project_id, code="MEM", name="In memory"),
            )
            for e in rows
        ]

    def create_entry(self, draft: EntryDraft) -> UUID:
        return self.create_entries([draft])[0]

    def create_entries(self, drafts: Sequence[EntryDraft]) -> list[UUID]:
        ids = []
        for draft in drafts:
            entry_id = uuid4()
            self.entries[entry_id] = TimesheetEntryInfo(
                id=entry_id,
                user_id=draft.user_id,
                project_id=draft.project_id,
                entry_date=draft.entry_date,
                hours=draft.hours,
                description=draft.description,
            )
            self._order[entry_id] = len(self._order)
            ids.append(entry_id)
        return ids

    def update_entry(
        self,
        entry_id: UUID,
        actor_id: UUID,
        hours: Decimal | None = None,
        description: str | None = None,
    ) -> None:
        current = self.entries.get(entry_id)
        if current is None:
            raise EntryNotFoundError(entry_id)
        self.entries[entry_id] = TimesheetEntryInfo(
            id=current.id,
            user_id=current.user_id,
            project_id=current.project_id,
            entry_date=current.entry_date,
            hours=current.hours if hours is None else hours,
            description=current.description if description is None else description,
        )

    def delete_entry(self, entry_id: UUID) -> None:
        if self.entries.pop(entry_id, None) is None:
            raise EntryNotFoundError(entry_id)

    def day_total(self, user_id: UUID, day: date) -> Decimal:
        return sum(
            (e.hours for e in self.find_entries_by_user_and_day(user_id, day)),
            Decimal("0"),
        )


@pytest.fixture
def memory_gateway_cls():
    """The in-memory gateway class, for tests that build many instances."""
    return InMemoryTimesheetGateway


@pytest.fixture
def memory_gateway() -> InMemoryTimesheetGateway:
    return InMemoryTimesheetGateway()
