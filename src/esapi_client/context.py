from __future__ import annotations

import time
from collections.abc import Awaitable, Callable
from datetime import timedelta
from typing import Any, TypeVar

import anyio

from .errors import CallCancelledError, DeadlineExceededError


T = TypeVar("T")

_MISSING: Any = object()


class CallContext:
    def __init__(self, timeout: float | timedelta | None = None) -> None:
        if isinstance(timeout, timedelta):
            timeout = timeout.total_seconds()
        self._deadline = None if timeout is None else time.monotonic() + timeout
        self._cancelled = False
        self._waiters: list[anyio.Event] = []

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    @property
    def deadline(self) -> float | None:
        """Deadline on the ``time.monotonic`` clock, or None."""
        return self._deadline

    def remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def cancel(self) -> None:
        """Cancel the context; in-flight calls running under it are aborted.

        Must be called from the event loop running those calls.
        """
        self._cancelled = True
        for event in list(self._waiters):
            event.set()

    async def run(self, func: Callable[..., Awaitable[T]], *args: Any) -> T:
        if self._cancelled:
            raise CallCancelledError("call cancelled before dispatch")
        remaining = self.remaining()
        if remaining is not None and remaining <= 0:
            raise DeadlineExceededError("deadline exceeded before dispatch")

        event = anyio.Event()
        self._waiters.append(event)
        outcome: Any = _MISSING
        failure: Exception | None = None
        try:
            async with anyio.create_task_group() as tg:
                tg.start_soon(_cancel_on_event, event, tg.cancel_scope)
                with anyio.move_on_after(remaining):
                    try:
                        outcome = await func(*args)
                    except Exception as exc:
                        failure = exc
                tg.cancel_scope.cancel()
        finally:
            self._waiters.remove(event)

        if failure is not None:
            raise failure
        if outcome is _MISSING:
            if self._cancelled:
                raise CallCancelledError("call cancelled")
            raise DeadlineExceededError("deadline exceeded")
        return outcome


async def _cancel_on_event(event: anyio.Event, scope: anyio.CancelScope) -> None:
    await event.wait()
    scope.cancel()
