"""Time sources and deferred-callback schedulers used by the gating primitives."""

from __future__ import annotations

import asyncio
import time
from collections.abc import Callable
from typing import Any, Protocol


class TimerHandle(Protocol):
    """Handle of a pending deferred callback."""

    def cancel(self) -> None: ...


class Clock(Protocol):
    """Monotonic time source, in seconds."""

    def now(self) -> float: ...


class Scheduler(Protocol):
    """Runs a callback once after a delay, in seconds."""

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...


class MonotonicClock:
    """:class:`Clock` backed by :func:`time.monotonic`."""

    def now(self) -> float:
        return time.monotonic()


class LoopScheduler:
    """:class:`Scheduler` arming timers on an asyncio event loop.

    Without an explicit loop the running loop is looked up at each call, so
    the scheduler must be used from inside a coroutine or loop callback.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None) -> None:
        self._loop = loop

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> asyncio.TimerHandle:
        loop = self._loop or asyncio.get_running_loop()
        return loop.call_later(delay, callback, *args)


__all__ = [
    "Clock",
    "LoopScheduler",
    "MonotonicClock",
    "Scheduler",
    "TimerHandle",
]
