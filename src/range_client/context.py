"""
Cancellation and deadline handling for queries.

A QueryContext is the cancellation signal that travels with a logical query.
It can be cancelled explicitly from any task, or automatically when its
deadline passes. The retry orchestrator races it against the attempt in
flight, and the attempt executor checks it before every network call.

Usage:
    with QueryContext(timeout=2.0) as ctx:
        lines = await client.query_with_deadline(ctx, "%cluster")
"""

import asyncio
from typing import Optional

from range_client.exceptions import CancellationError

DEADLINE_EXCEEDED = "deadline exceeded"


class QueryContext:
    """
    Cancellation signal with an optional deadline.

    Must be created while an event loop is running when ``timeout`` is given,
    because the deadline is armed on that loop.

    Attributes:
        timeout: Seconds until the deadline fires (None = no deadline)
    """

    def __init__(self, timeout: Optional[float] = None):
        self.timeout = timeout
        self._event = asyncio.Event()
        self._reason: Optional[str] = None
        self._timer: Optional[asyncio.TimerHandle] = None

        if timeout is not None:
            if timeout <= 0:
                self.cancel(DEADLINE_EXCEEDED)
            else:
                loop = asyncio.get_running_loop()
                self._timer = loop.call_later(timeout, self.cancel, DEADLINE_EXCEEDED)

    @classmethod
    def background(cls) -> "QueryContext":
        """A context that is never cancelled unless told to."""
        return cls()

    @classmethod
    def with_timeout(cls, seconds: float) -> "QueryContext":
        return cls(timeout=seconds)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    @property
    def reason(self) -> Optional[str]:
        return self._reason

    def cancel(self, reason: str = "query cancelled") -> None:
        """Cancel the context. Only the first reason is kept."""
        if self._event.is_set():
            return
        self._reason = reason
        self._event.set()
        self._disarm()

    def error(self) -> CancellationError:
        return CancellationError(self._reason or "query cancelled")

    async def wait(self) -> None:
        """Block until the context is cancelled."""
        await self._event.wait()

    async def sleep(self, seconds: float) -> bool:
        """
        Sleep for ``seconds`` unless cancelled first.

        Returns:
            True if the sleep was cut short by cancellation
        """
        if self.cancelled:
            return True
        try:
            await asyncio.wait_for(self._event.wait(), timeout=seconds)
        except asyncio.TimeoutError:
            return False
        return True

    def _disarm(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def __enter__(self) -> "QueryContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self._disarm()

    def __repr__(self) -> str:
        state = f"cancelled={self._reason!r}" if self.cancelled else "active"
        return f"QueryContext(timeout={self.timeout}, {state})"
