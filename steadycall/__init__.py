"""steadycall - 弹性执行与调用节流工具

提供安全执行(safe_run)、指数退避重试(retry_with_backoff)、
防抖(debounce)与节流(throttle)四个核心操作。

Usage:
    outcome = await steadycall.safe_run(fetch_profile, fallback={})
    data, error = outcome
    profile = await steadycall.retry_with_backoff(fetch_profile, max_attempts=5, base_delay=0.5)
"""

from steadycall.core.exceptions import (
    InvalidGateConfigError,
    InvalidRetryConfigError,
    OperationFailure,
    RetryExhausted,
    SteadyCallError,
    normalize_error,
)
from steadycall.core.logging import configure_logging
from steadycall.core.patterns import (
    Debouncer,
    ExponentialBackoffRetry,
    Outcome,
    RetryConfig,
    Throttler,
    debounce,
    retry,
    retry_with_backoff,
    safe,
    safe_run,
    throttle,
)

__version__ = "0.1.0"

__all__ = [
    "safe_run",
    "retry_with_backoff",
    "debounce",
    "throttle",
    "safe",
    "retry",
    "Outcome",
    "Debouncer",
    "Throttler",
    "RetryConfig",
    "ExponentialBackoffRetry",
    "SteadyCallError",
    "OperationFailure",
    "RetryExhausted",
    "InvalidRetryConfigError",
    "InvalidGateConfigError",
    "normalize_error",
    "configure_logging",
    "__version__",
]
