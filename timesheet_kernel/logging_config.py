"""
Structured JSON logging for the timesheet kernel.

Every record under the ``timesheet_kernel`` logger is rendered as one
JSON object: an envelope (``ts``, ``level``, ``logger``, ``message``),
the fields bound through ``LogContext``, every ``extra=`` field, and, for
kernel exceptions, their ``code`` and structured attributes.

Usage::

    logger = get_logger("services.timesheet")
    with LogContext.bind(actor_id=str(actor.id)):
        logger.info("time_logged", extra={"hours": Decimal("6.5")})
"""

__all__ = [
    "StructuredFormatter",
    "LogContext",
    "get_logger",
    "configure_logging",
    "reset_logging",
]

import json
import logging
import sys
import threading
from collections.abc import Iterator, Mapping
from contextlib import contextmanager
from contextvars import ContextVar
from datetime import UTC, date, datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

LOGGER_NAMESPACE = "timesheet_kernel"

# ---------------------------------------------------------------------------
# Context propagation
# ---------------------------------------------------------------------------

_context: ContextVar[Mapping[str, str]] = ContextVar("timesheet_log_context", default={})


class LogContext:
    """
    Request-scoped log fields, safe across threads and asyncio tasks.

    Only the names in ``FIELDS`` are accepted; anything else belongs in
    ``extra=`` on the individual record.
    """

    FIELDS = frozenset({"correlation_id", "request_id", "actor_id", "entry_id"})

    @classmethod
    def _merged(cls, fields: Mapping[str, Any]) -> dict[str, str]:
        unknown = set(fields) - cls.FIELDS
        if unknown:
            raise TypeError(f"Unknown log context fields: {sorted(unknown)}")
        merged = dict(_context.get())
        merged.update({k: str(v) for k, v in fields.items() if v is not None})
        return merged

    @classmethod
    def set(cls, **fields: Any) -> None:
        """Set fields for the rest of the current context.  None is ignored."""
        _context.set(cls._merged(fields))

    @classmethod
    def get_all(cls) -> dict[str, str]:
        return dict(_context.get())

    @classmethod
    def clear(cls) -> None:
        _context.set({})

    @classmethod
    @contextmanager
    def bind(cls, **fields: Any) -> Iterator[None]:
        """Set fields for the duration of a ``with`` block, then restore."""
        token = _context.set(cls._merged(fields))
        try:
            yield
        finally:
            _context.reset(token)


# ---------------------------------------------------------------------------
# JSON Formatter
# ---------------------------------------------------------------------------

_RESERVED_ATTRS: frozenset[str] = frozenset(
    vars(logging.LogRecord("", 0, "", 0, "", (), None))
) | {"message", "taskName"}


def _json_default(obj: Any) -> Any:
    if isinstance(obj, (UUID, Decimal)):
        return str(obj)
    if isinstance(obj, (date, datetime)):
        return obj.isoformat()
    return str(obj)


def _exception_fields(exc: BaseException) -> dict[str, Any]:
    fields: dict[str, Any] = {
        "exc_type": type(exc).__name__,
        "exc_message": str(exc),
    }
    code = getattr(exc, "code", None)
    if code is not None:
        fields["exc_code"] = code
    for name, value in vars(exc).items():
        if not name.startswith("_"):
            fields[f"exc_{name}"] = value
    return fields


class StructuredFormatter(logging.Formatter):
    """Render each record as a single JSON line."""

    def format(self, record: logging.LogRecord) -> str:
        payload: dict[str, Any] = {
            "ts": datetime.fromtimestamp(record.created, tz=UTC).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            **LogContext.get_all(),
        }

        for key, value in vars(record).items():
            if key not in _RESERVED_ATTRS:
                payload.setdefault(key, value)

        if record.exc_info and record.exc_info[1] is not None:
            payload.update(_exception_fields(record.exc_info[1]))
            payload["traceback"] = self.formatException(record.exc_info)

        return json.dumps(payload, default=_json_default)


# ---------------------------------------------------------------------------
# Logger factory and setup
# ---------------------------------------------------------------------------


def get_logger(name: str) -> logging.Logger:
    """Logger ``timesheet_kernel.<name>``."""
    return logging.getLogger(f"{LOGGER_NAMESPACE}.{name}")


_configured = False
_lock = threading.Lock()


def configure_logging(
    *,
    level: int | str = logging.INFO,
    stream: Any = None,
    handler: logging.Handler | None = None,
) -> None:
    """
    Attach one JSON handler to the ``timesheet_kernel`` logger.

    Idempotent: only the first call in a process has any effect.  The
    namespace does not propagate to the root logger, so host applications
    keep their own formatting.
    """
    global _configured
    with _lock:
        if _configured:
            return
        _configured = True

    target = handler or logging.StreamHandler(stream or sys.stderr)
    target.setFormatter(StructuredFormatter())

    namespace = logging.getLogger(LOGGER_NAMESPACE)
    namespace.setLevel(level)
    namespace.propagate = False
    namespace.addHandler(target)


def reset_logging() -> None:
    """Undo ``configure_logging``.  For tests."""
    global _configured
    with _lock:
        _configured = False
    namespace = logging.getLogger(LOGGER_NAMESPACE)
    namespace.handlers.clear()
    namespace.setLevel(logging.WARNING)
