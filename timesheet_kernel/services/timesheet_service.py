"""
TimesheetService -- the single orchestration point for timesheet entries.

Responsibility:
    Creates, updates, deletes and lists timesheet entries, enforcing
    authentication, ownership, the month-end period lock and the daily
    capacity ceiling together, then signals the calendar view.

Architecture position:
    Kernel > Services -- imperative shell.
    Called by the calendar UI (log_time, list_entries, update_entry,
    delete_entry) and the bulk-entry UI (log_recurring_time).  Depends on
    the TimesheetGateway port, an injected Clock and a ViewInvalidator.

Invariants enforced:
    - Capacity: for any (owner, day) persisted hours never exceed
      ``policy.daily_limit_hours``.  The owner lock is acquired before the
      validating read, so concurrent requests cannot both pass the check.
    - Period lock: create/update/delete are rejected once the entry's
      month is past its lock date; update/delete use the STORED date.
    - Ownership: only the owner updates or deletes an entry, whatever
      their role.
    - Recurring batches are all-or-nothing.

Failure modes:
    - NotAuthenticatedError: no actor (every write operation).
    - EntryNotFoundError: unknown entry id (update/delete).
    - NotEntryOwnerError: actor is not the owner (update/delete).
    - PeriodLockedError: entry month is locked.
    - DailyLimitExceededError: day total would exceed the ceiling.
    - InvalidHoursError: hours not representable as half-hour ticks.

Check order (kept exactly as the calendar UI observes it):
    update_entry: not found -> ownership -> lock -> capacity
    delete_entry: not found -> lock -> ownership
"""

from collections import defaultdict
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from timesheet_kernel.domain.calendar import as_calendar_date, month_bounds
from timesheet_kernel.domain.capacity import check_capacity
from timesheet_kernel.domain.clock import Clock, SystemClock
from timesheet_kernel.domain.dtos import (
    CALENDAR_VIEW,
    Actor,
    EntryDraft,
    EntryInput,
    EntryUpdate,
    RecurringInput,
    RecurringResult,
    TimesheetEntryInfo,
    TimesheetEntryView,
    TimesheetPolicy,
)
from timesheet_kernel.domain.gateway import TimesheetGateway
from timesheet_kernel.domain.invalidation import (
    LoggingViewInvalidator,
    ViewInvalidator,
)
from timesheet_kernel.domain.period_lock import is_locked, lock_date
from timesheet_kernel.exceptions import (
    DailyLimitExceededError,
    EntryNotFoundError,
    NotAuthenticatedError,
    NotEntryOwnerError,
    PeriodLockedError,
)
from timesheet_kernel.logging_config import LogContext, get_logger
from timesheet_kernel.services.sql_gateway import SqlTimesheetGateway

logger = get_logger("services.timesheet")


class TimesheetService:
    """
    Service for logging and maintaining timesheet entries.

    Contract:
        Every write operation takes the acting identity (``None`` means
        unauthenticated) and either completes or raises a typed
        TimesheetKernelError.  Persistence failures propagate unchanged.
        Writes join the caller's transaction; the caller commits.

    Non-goals:
        - Does NOT validate the hour increment/range of form input beyond
          what exact tick arithmetic requires.
        - Does NOT retry anything.
    """

    def __init__(
        self,
        gateway: TimesheetGateway,
        clock: Clock | None = None,
        policy: TimesheetPolicy | None = None,
        invalidator: ViewInvalidator | None = None,
    ):
        self._gateway = gateway
        self._clock = clock or SystemClock()
        self._policy = policy or TimesheetPolicy()
        self._invalidator = invalidator or LoggingViewInvalidator()

    @classmethod
    def for_session(
        cls,
        session: Session,
        clock: Clock | None = None,
        policy: TimesheetPolicy | None = None,
        invalidator: ViewInvalidator | None = None,
    ) -> "TimesheetService":
        """Build a service on the SQLAlchemy gateway for *session*."""
        return cls(SqlTimesheetGateway(session), clock, policy, invalidator)

    # ------------------------------------------------------------------
    # Rule helpers
    # ------------------------------------------------------------------

    def _today(self) -> date:
        return self._clock.today(self._policy.timezone)

    def _require_actor(self, actor: Actor | None, operation: str) -> Actor:
        if actor is None:
            logger.warning("unauthenticated_rejected", extra={"operation": operation})
            raise NotAuthenticatedError(operation)
        return actor

    def _require_owner(self, actor: Actor, entry: TimesheetEntryInfo) -> None:
        if entry.user_id != actor.id:
            logger.warning(
                "ownership_rejected",
                extra={"entry_id": str(entry.id), "owner_id": str(entry.user_id)},
            )
            raise NotEntryOwnerError(entry.id, actor.id, entry.user_id)

    def _require_entry(self, entry_id: UUID) -> TimesheetEntryInfo:
        entry = self._gateway.find_entry_by_id(entry_id)
        if entry is None:
            raise EntryNotFoundError(entry_id)
        return entry

    def _require_unlocked(self, entry_date: date, today: date) -> None:
        grace = self._policy.lock_grace_days
        if is_locked(entry_date, today, grace):
            cutoff = lock_date(entry_date, grace)
            logger.warning(
                "period_locked_rejected",
                extra={
                    "entry_date": entry_date.isoformat(),
                    "lock_date": cutoff.isoformat(),
                    "today": today.isoformat(),
                },
            )
            raise PeriodLockedError(entry_date, cutoff)

    def _require_capacity(
        self,
        day: date,
        existing: list[tuple[UUID, Decimal] | Decimal],
        hours: Decimal,
        exclude_entry_id: UUID | None = None,
    ) -> None:
        result = check_capacity(
            existing,
            hours,
            exclude_entry_id=exclude_entry_id,
            daily_limit=self._policy.daily_limit_hours,
        )
        if not result.ok:
            logger.warning(
                "daily_limit_rejected",
                extra={
                    "work_date": day.isoformat(),
                    "existing_total": result.existing_total,
                    "attempted_total": result.total,
                },
            )
            raise DailyLimitExceededError(
                day, result.existing_total, result.total, result.limit
            )

    def _signal_calendar(self) -> None:
        try:
            self._invalidator.invalidate(CALENDAR_VIEW)
        except Exception:
            # Fire-and-forget: the mutation already succeeded.
            logger.warning(
                "view_invalidation_failed",
                extra={"view": CALENDAR_VIEW},
                exc_info=True,
            )

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def log_time(self, actor: Actor | None, entry: EntryInput) -> UUID:
        """
        Log hours for the actor on one day.

        Steps: lock check, owner lock + same-day read, capacity check,
        insert, calendar signal.

        Returns:
            The new entry's id.
        """
        actor = self._require_actor(actor, "log_time")
        day = as_calendar_date(entry.date, self._policy.timezone)

        with LogContext.bind(actor_id=str(actor.id)):
            self._require_unlocked(day, self._today())

            self._gateway.acquire_owner_lock(actor.id)
            same_day = self._gateway.find_entries_by_user_and_day(actor.id, day)
            self._require_capacity(
                day, [(e.id, e.hours) for e in same_day], entry.hours
            )

            entry_id = self._gateway.create_entry(
                EntryDraft(
                    user_id=actor.id,
                    project_id=entry.project_id,
                    entry_date=day,
                    hours=entry.hours,
                    description=entry.description,
                )
            )

            logger.info(
                "time_logged",
                extra={
                    "entry_id": str(entry_id),
                    "project_id": str(entry.project_id),
                    "work_date": day.isoformat(),
                    "hours": entry.hours,
                },
            )

        self._signal_calendar()
        return entry_id

    def log_recurring_time(
        self, actor: Actor | None, batch: RecurringInput
    ) -> RecurringResult:
        """
        Log the same project/hours/description on every date of *batch*.

        Every date is checked (lock, then capacity including hours already
        accepted earlier in this batch for the same day) before anything is
        written.  The first violating date, in chronological order, aborts
        the whole batch.
        """
        actor = self._require_actor(actor, "log_recurring_time")
        if not batch.dates:
            return RecurringResult(count=0)

        tz = self._policy.timezone
        days = sorted(as_calendar_date(d, tz) for d in batch.dates)
        today = self._today()

        with LogContext.bind(actor_id=str(actor.id)):
            self._gateway.acquire_owner_lock(actor.id)
            existing = self._gateway.find_entries_by_user_and_days(actor.id, days)

            pending: dict[date, list[Decimal]] = defaultdict(list)
            for day in days:
                self._require_unlocked(day, today)
                already = [(e.id, e.hours) for e in existing.get(day, [])]
                self._require_capacity(day, already + pending[day], batch.hours)
                pending[day].append(batch.hours)

            entry_ids = self._gateway.create_entries(
                [
                    EntryDraft(
                        user_id=actor.id,
                        project_id=batch.project_id,
                        entry_date=day,
                        hours=batch.hours,
                        description=batch.description,
                    )
                    for day in days
                ]
            )

            logger.info(
                "recurring_time_logged",
                extra={
                    "project_id": str(batch.project_id),
                    "count": len(entry_ids),
                    "first_date": days[0].isoformat(),
                    "last_date": days[-1].isoformat(),
                    "hours": batch.hours,
                },
            )

        self._signal_calendar()
        return RecurringResult(count=len(entry_ids), entry_ids=tuple(entry_ids))

    def update_entry(
        self, actor: Actor | None, entry_id: UUID, changes: EntryUpdate
    ) -> None:
        """
        Change hours and/or description of the actor's own entry.

        Capacity is re-checked only when ``changes.hours`` is supplied and
        differs from the stored value.
        """
        actor = self._require_actor(actor, "update_entry")

        with LogContext.bind(actor_id=str(actor.id), entry_id=str(entry_id)):
            entry = self._require_entry(entry_id)
            self._require_owner(actor, entry)
            self._require_unlocked(entry.entry_date, self._today())

            if changes.hours is not None and changes.hours != entry.hours:
                self._gateway.acquire_owner_lock(actor.id)
                same_day = self._gateway.find_entries_by_user_and_day(
                    actor.id, entry.entry_date
                )
                self._require_capacity(
                    entry.entry_date,
                    [(e.id, e.hours) for e in same_day],
                    changes.hours,
                    exclude_entry_id=entry.id,
                )

            self._gateway.update_entry(
                entry.id,
                actor.id,
                hours=changes.hours,
                description=changes.description,
            )

            logger.info(
                "entry_updated",
                extra={
                    "hours_changed": changes.hours is not None,
                    "description_changed": changes.description is not None,
                },
            )

        self._signal_calendar()

    def delete_entry(self, actor: Actor | None, entry_id: UUID) -> None:
        """Delete the actor's own entry while its month is unlocked."""
        actor = self._require_actor(actor, "delete_entry")

        with LogContext.bind(actor_id=str(actor.id), entry_id=str(entry_id)):
            entry = self._require_entry(entry_id)
            self._require_unlocked(entry.entry_date, self._today())
            self._require_owner(actor, entry)

            self._gateway.delete_entry(entry.id)

            logger.info(
                "entry_deleted",
                extra={"work_date": entry.entry_date.isoformat(), "hours": entry.hours},
            )

        self._signal_calendar()

    def list_entries(
        self, actor: Actor | None, month_anchor: date | datetime
    ) -> list[TimesheetEntryView]:
        """
        The actor's entries for the month containing *month_anchor*.

        Unauthenticated callers get an empty list, not an error.
        """
        if actor is None:
            return []
        start, end = month_bounds(as_calendar_date(month_anchor, self._policy.timezone))
        return self._gateway.find_entries_for_user_between(actor.id, start, end)
