"""
Invalidation -- notify the presentation layer that a view is stale.

Responsibility:
    Every successful timesheet mutation signals that the calendar view must
    be re-rendered.  The signal is fire-and-forget: it is not part of the
    kernel's invariants, and the mechanism (cache tags, websocket push,
    path revalidation) belongs to the application shell.

Architecture position:
    Kernel > Domain -- port definition plus two trivial adapters.
"""

from abc import ABC, abstractmethod

from timesheet_kernel.logging_config import get_logger

logger = get_logger("domain.invalidation")


class ViewInvalidator(ABC):
    """Port for view/cache invalidation signals."""

    @abstractmethod
    def invalidate(self, view: str) -> None:
        """Mark *view* stale."""
        ...


class LoggingViewInvalidator(ViewInvalidator):
    """Default adapter: records the signal in the structured log only."""

    def invalidate(self, view: str) -> None:
        logger.debug("view_invalidated", extra={"view": view})


class RecordingViewInvalidator(ViewInvalidator):
    """
    Test adapter that remembers every signal in order.

    Used in tests to assert which mutations signalled and which did not.
    """

    def __init__(self) -> None:
        self.views: list[str] = []

    def invalidate(self, view: str) -> None:
        self.views.append(view)

    def clear(self) -> None:
        self.views.clear()
