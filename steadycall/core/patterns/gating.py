"""Debounce and throttle gates for synchronous callbacks.

Each gate is a small state object owned by one wrapped callable:

- :class:`Debouncer` holds at most one pending timer handle. Every call
  cancels the pending handle and arms a new one, so a burst collapses into a
  single trailing execution with the last call's arguments.
- :class:`Throttler` holds the timestamp of the last execution. A call runs
  immediately when the window has elapsed and is dropped otherwise.

Usage:
    save = debounce(write_draft, 0.5)
    save(text)            # runs write_draft(text) 0.5s after the last call

    refresh = throttle(redraw, 0.1)
    refresh()             # runs redraw() at most once per 0.1s
"""

from __future__ import annotations

import functools
from collections.abc import Callable
from enum import Enum
from typing import TYPE_CHECKING, Any, Generic, TypeVar

from steadycall.core.exceptions import InvalidGateConfigError
from steadycall.core.logging import get_logger
from steadycall.core.monitoring import get_metrics_collector
from steadycall.core.patterns.clock import Clock, LoopScheduler, MonotonicClock, Scheduler, TimerHandle
from steadycall.core.patterns.safe import operation_name

if TYPE_CHECKING:
    from steadycall.core.config import GateSettings

R = TypeVar("R")

logger = get_logger(__name__)


class GateState(Enum):
    IDLE = "idle"
    PENDING = "pending"


def _validate_delay(delay: float) -> float:
    if delay < 0:
        raise InvalidGateConfigError(f"delay must be >= 0, got {delay!r}", delay=delay)
    return float(delay)


class Debouncer:
    """Trailing-edge debounce around ``fn``."""

    def __init__(self, fn: Callable[..., Any], delay: float, *, scheduler: Scheduler | None = None) -> None:
        functools.update_wrapper(self, fn)
        self._fn = fn
        self._delay = _validate_delay(delay)
        self._scheduler = scheduler or LoopScheduler()
        self._handle: TimerHandle | None = None
        self._name = operation_name(fn)

    @classmethod
    def from_settings(
        cls, fn: Callable[..., Any], settings: GateSettings, *, scheduler: Scheduler | None = None
    ) -> Debouncer:
        """Build a debouncer using ``settings.debounce_delay``."""

        return cls(fn, settings.debounce_delay, scheduler=scheduler)

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def state(self) -> GateState:
        return GateState.PENDING if self._handle is not None else GateState.IDLE

    def __call__(self, *args: Any, **kwargs: Any) -> None:
        metrics = get_metrics_collector()
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
            metrics.record_gate_call("debounce", "superseded")
            logger.bind(operation=self._name, policy="debounce").debug("Debounced call to {} superseded", self._name)

        self._handle = self._scheduler.call_later(self._delay, self._fire, args, kwargs)
        metrics.record_gate_call("debounce", "armed")

    def _fire(self, args: tuple[Any, ...], kwargs: dict[str, Any]) -> None:
        # back to idle before running fn so a raising fn leaves the gate usable
        self._handle = None
        get_metrics_collector().record_gate_call("debounce", "executed")
        self._fn(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<Debouncer {self._name} delay={self._delay} state={self.state.value}>"


class Throttler(Generic[R]):
    """Leading-edge throttle around ``fn``."""

    def __init__(self, fn: Callable[..., R], delay: float, *, clock: Clock | None = None) -> None:
        functools.update_wrapper(self, fn)
        self._fn = fn
        self._delay = _validate_delay(delay)
        self._clock = clock or MonotonicClock()
        self._last_invocation: float | None = None
        self._name = operation_name(fn)

    @classmethod
    def from_settings(
        cls, fn: Callable[..., R], settings: GateSettings, *, clock: Clock | None = None
    ) -> Throttler[R]:
        """Build a throttler using ``settings.throttle_delay``."""

        return cls(fn, settings.throttle_delay, clock=clock)

    @property
    def delay(self) -> float:
        return self._delay

    @property
    def last_invocation(self) -> float | None:
        """Clock reading of the last accepted call, ``None`` before the first."""
        return self._last_invocation

    def __call__(self, *args: Any, **kwargs: Any) -> R | None:
        now = self._clock.now()
        metrics = get_metrics_collector()
        if self._last_invocation is not None and now - self._last_invocation < self._delay:
            metrics.record_gate_call("throttle", "dropped")
            logger.bind(operation=self._name, policy="throttle").debug(
                "Throttled call to {} dropped ({:.3f}s since last run)",
                self._name,
                now - self._last_invocation,
            )
            return None

        self._last_invocation = now
        metrics.record_gate_call("throttle", "executed")
        return self._fn(*args, **kwargs)

    def __repr__(self) -> str:
        return f"<Throttler {self._name} delay={self._delay}>"


def debounce(fn: Callable[..., Any], delay: float, *, scheduler: Scheduler | None = None) -> Debouncer:
    """Return a new :class:`Debouncer` for ``fn`` with ``delay`` seconds."""

    return Debouncer(fn, delay, scheduler=scheduler)


def throttle(fn: Callable[..., R], delay: float, *, clock: Clock | None = None) -> Throttler[R]:
    """Return a new :class:`Throttler` for ``fn`` with ``delay`` seconds."""

    return Throttler(fn, delay, clock=clock)


__all__ = [
    "Debouncer",
    "GateState",
    "Throttler",
    "debounce",
    "throttle",
]
