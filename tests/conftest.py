"""Pytest configuration for steadycall test suite."""

from __future__ import annotations

import heapq
import itertools
from collections.abc import Callable, Iterator
from typing import Any

import pytest
from loguru import logger
from prometheus_client import CollectorRegistry

from steadycall.core.monitoring import MetricsCollector, configure_metrics_collector


class _VirtualHandle:
    def __init__(self) -> None:
        self.cancelled = False

    def cancel(self) -> None:
        self.cancelled = True


class VirtualTime:
    """Deterministic clock and scheduler driven by :meth:`advance_to`."""

    def __init__(self) -> None:
        self._now = 0.0
        self._seq = itertools.count()
        self._queue: list[tuple[float, int, _VirtualHandle, Callable[..., Any], tuple[Any, ...]]] = []

    def now(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> _VirtualHandle:
        handle = _VirtualHandle()
        heapq.heappush(self._queue, (self._now + delay, next(self._seq), handle, callback, args))
        return handle

    @property
    def pending(self) -> int:
        return sum(1 for entry in self._queue if not entry[2].cancelled)

    def advance_to(self, when: float) -> None:
        while self._queue and self._queue[0][0] <= when:
            due, _, handle, callback, args = heapq.heappop(self._queue)
            if handle.cancelled:
                continue
            self._now = due
            callback(*args)
        self._now = max(self._now, when)

    def advance(self, seconds: float) -> None:
        self.advance_to(self._now + seconds)


@pytest.fixture
def virtual_time() -> VirtualTime:
    return VirtualTime()


@pytest.fixture
def recorded_sleeps() -> tuple[list[float], Callable[[float], Any]]:
    """Sleep replacement recording each requested delay without waiting."""

    delays: list[float] = []

    async def fake_sleep(delay: float) -> None:
        delays.append(delay)

    return delays, fake_sleep


@pytest.fixture
def metrics() -> Iterator[MetricsCollector]:
    """Isolated collector installed as the process-wide default."""

    collector = MetricsCollector(registry=CollectorRegistry())
    configure_metrics_collector(collector)
    yield collector
    configure_metrics_collector(None)


@pytest.fixture
def log_records() -> Iterator[list[dict[str, Any]]]:
    """Capture loguru records emitted during the test."""

    records: list[dict[str, Any]] = []
    handler_id = logger.add(lambda message: records.append(message.record), level="DEBUG")
    yield records
    logger.remove(handler_id)
