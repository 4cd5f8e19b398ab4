"""Resilience and rate-gating patterns module."""

from steadycall.core.patterns.clock import Clock, LoopScheduler, MonotonicClock, Scheduler, TimerHandle
from steadycall.core.patterns.gating import Debouncer, GateState, Throttler, debounce, throttle
from steadycall.core.patterns.outcome import Outcome
from steadycall.core.patterns.retry import (
    ExponentialBackoffRetry,
    RetryConfig,
    RetryRegistry,
    RetryState,
    get_all_retry_stats,
    get_retry_stats,
    retry,
    retry_registry,
    retry_with_backoff,
)
from steadycall.core.patterns.safe import safe, safe_run

__all__ = [
    "Clock",
    "Scheduler",
    "TimerHandle",
    "MonotonicClock",
    "LoopScheduler",
    "Outcome",
    "safe",
    "safe_run",
    "ExponentialBackoffRetry",
    "RetryConfig",
    "RetryRegistry",
    "RetryState",
    "retry",
    "retry_registry",
    "retry_with_backoff",
    "get_retry_stats",
    "get_all_retry_stats",
    "Debouncer",
    "Throttler",
    "GateState",
    "debounce",
    "throttle",
]
