from __future__ import annotations

from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any, Iterator


if TYPE_CHECKING:
    from testlane.reports.base import Reporter
    from testlane.testing.models import TestProperties


@dataclass(frozen=True, slots=True)
class AttemptContext:
    """State of the attempt running on the current worker thread.

    Attributes
    ----------
    thread_id
        Identifier of the worker thread running the attempt.
    test_properties
        Properties of the test being executed.
    reporter
        Reporter returned by the ``report`` policy hook for this attempt.
    attempt
        1-based attempt number for these properties.
    fixture
        Object returned by the ``provide`` policy hook.
    """

    thread_id: int
    test_properties: TestProperties
    reporter: Reporter
    attempt: int = 1
    fixture: Any = None


ATTEMPT_CONTEXT: ContextVar[AttemptContext | None] = ContextVar("attempt_context", default=None)


@contextmanager
def attempt_context_scope(ctx: AttemptContext) -> Iterator[None]:
    token = ATTEMPT_CONTEXT.set(ctx)
    try:
        yield
    finally:
        ATTEMPT_CONTEXT.reset(token)


def current_attempt() -> AttemptContext:
    """Return the attempt running on this thread.

    Raises:
        RuntimeError: If called outside of a running attempt.
    """
    ctx = ATTEMPT_CONTEXT.get()
    if ctx is None:
        msg = "No test attempt is running on this thread"
        raise RuntimeError(msg)
    return ctx


def narrate(message: str) -> None:
    """Send a message to the reporter of the running attempt."""
    ctx = current_attempt()
    ctx.reporter.narrate(ctx.thread_id, ctx.test_properties, message)
