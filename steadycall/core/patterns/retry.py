"""重试机制实现，包括指数退避重试."""

from __future__ import annotations

import asyncio
import functools
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from enum import Enum
from typing import TYPE_CHECKING, Any, TypeVar

from steadycall.core.exceptions import ErrorCode, InvalidRetryConfigError, RetryExhausted
from steadycall.core.logging import get_logger
from steadycall.core.monitoring import get_metrics_collector
from steadycall.core.patterns.safe import operation_name

if TYPE_CHECKING:
    from steadycall.core.config import RetrySettings

T = TypeVar("T")

SleepFunc = Callable[[float], Awaitable[Any]]

logger = get_logger(__name__)


class RetryState(Enum):
    """重试状态."""

    READY = "ready"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass(frozen=True)
class RetryConfig:
    """重试配置."""

    max_attempts: int = 3  # 最大尝试次数(含首次)
    base_delay: float = 1.0  # 基础延迟时间(秒)

    def __post_init__(self) -> None:
        if isinstance(self.max_attempts, bool) or not isinstance(self.max_attempts, int) or self.max_attempts < 1:
            raise InvalidRetryConfigError(
                f"max_attempts must be an integer >= 1, got {self.max_attempts!r}",
                max_attempts=self.max_attempts,
            )
        if self.base_delay < 0:
            raise InvalidRetryConfigError(
                f"base_delay must be >= 0, got {self.base_delay!r}",
                base_delay=self.base_delay,
            )

    @classmethod
    def from_settings(cls, settings: RetrySettings) -> RetryConfig:
        """从配置文件的重试设置创建."""
        return cls(max_attempts=settings.max_attempts, base_delay=settings.base_delay)


class ExponentialBackoffRetry:
    """指数退避重试实现.

    第k次失败(k < max_attempts)后等待 base_delay * 2 ** (k - 1) 秒，
    不加抖动，不设上限。
    """

    def __init__(
        self,
        config: RetryConfig | None = None,
        *,
        name: str | None = None,
        sleep: SleepFunc = asyncio.sleep,
    ):
        self.config = config or RetryConfig()
        self.name = name
        self._sleep = sleep
        self.attempt_count = 0
        self.total_delay = 0.0
        self.state = RetryState.READY
        self.last_exception: Exception | None = None

    async def execute(self, func: Callable[..., Awaitable[T]], *args: Any, **kwargs: Any) -> T:
        """执行函数，应用重试逻辑.

        每次调用拥有独立的尝试计数，同一实例上并发的调用互不影响；
        实例上的统计字段只记录最近一次结束的调用。

        Args:
            func: 要执行的函数
            *args: 函数参数
            **kwargs: 函数关键字参数

        Returns:
            函数返回结果

        Raises:
            RetryExhausted: 当所有尝试都失败时抛出，携带最后的异常
        """
        self.state = RetryState.RUNNING
        label = self.name or operation_name(func)
        metrics = get_metrics_collector()
        log = logger.bind(operation=label)

        attempt = 0
        total_delay = 0.0
        while True:
            attempt += 1
            try:
                result = await func(*args, **kwargs)
            except Exception as e:
                metrics.record_attempt(label, success=False)

                if attempt >= self.config.max_attempts:
                    self._finish(RetryState.FAILED, attempt, total_delay, e)
                    metrics.record_exhausted(label)
                    log.bind(attempt=attempt, error_code=ErrorCode.RETRY_EXHAUSTED.value).error(
                        "{} failed after {} attempt(s): {}: {}",
                        label,
                        attempt,
                        type(e).__name__,
                        e,
                    )
                    raise RetryExhausted(attempt, e, operation=label) from e

                delay = self._calculate_delay(attempt)
                log.bind(attempt=attempt).warning(
                    "{} attempt {}/{} failed ({}: {}), retrying in {:.3f}s",
                    label,
                    attempt,
                    self.config.max_attempts,
                    type(e).__name__,
                    e,
                    delay,
                )
                metrics.observe_backoff(delay)
                await self._sleep(delay)
                total_delay += delay
                continue

            metrics.record_attempt(label, success=True)
            self._finish(RetryState.COMPLETED, attempt, total_delay, None)
            if attempt > 1:
                log.bind(attempt=attempt).info("{} succeeded on attempt {}", label, attempt)
            return result

    def _finish(self, state: RetryState, attempts: int, total_delay: float, error: Exception | None) -> None:
        self.state = state
        self.attempt_count = attempts
        self.total_delay = total_delay
        self.last_exception = error

    def _calculate_delay(self, attempt_number: int) -> float:
        """计算第attempt_number次失败后的延迟时间.

        Args:
            attempt_number: 失败的尝试序号(从1开始)

        Returns:
            延迟时间(秒)
        """
        if attempt_number < 1:
            return 0.0
        return self.config.base_delay * (2 ** (attempt_number - 1))

    def get_stats(self) -> dict[str, Any]:
        """获取重试统计信息.

        Returns:
            重试统计字典
        """
        return {
            "name": self.name,
            "attempts": self.attempt_count,
            "max_attempts": self.config.max_attempts,
            "total_delay": self.total_delay,
            "state": self.state.value,
            "last_exception": str(self.last_exception) if self.last_exception else None,
        }

    def reset(self) -> None:
        """重置重试状态."""
        self.attempt_count = 0
        self.total_delay = 0.0
        self.state = RetryState.READY
        self.last_exception = None


async def retry_with_backoff(
    operation: Callable[[], Awaitable[T]],
    max_attempts: int = 3,
    base_delay: float = 1.0,
    *,
    name: str | None = None,
    sleep: SleepFunc = asyncio.sleep,
) -> T:
    """以指数退避重试执行异步操作.

    Args:
        operation: 无参数的异步可调用对象
        max_attempts: 最大尝试次数(>= 1)
        base_delay: 基础延迟时间(秒, >= 0)
        name: 日志和指标中使用的操作名，默认取函数名
        sleep: 等待函数，测试时可替换

    Returns:
        第一次成功尝试的结果

    Raises:
        InvalidRetryConfigError: 参数非法时在任何尝试之前抛出
        RetryExhausted: 所有尝试都失败
    """
    config = RetryConfig(max_attempts=max_attempts, base_delay=base_delay)
    return await ExponentialBackoffRetry(config, name=name, sleep=sleep).execute(operation)


class RetryRegistry:
    """重试注册表."""

    def __init__(self) -> None:
        self._retries: dict[str, ExponentialBackoffRetry] = {}
        self._lock = asyncio.Lock()

    async def get_or_create(self, name: str, config: RetryConfig | None = None) -> ExponentialBackoffRetry:
        """获取或创建重试实例.

        Args:
            name: 重试实例名称
            config: 重试配置，仅在首次创建时使用

        Returns:
            ExponentialBackoffRetry实例
        """
        async with self._lock:
            if name not in self._retries:
                self._retries[name] = ExponentialBackoffRetry(config, name=name)
            return self._retries[name]

    def get_retry(self, name: str) -> ExponentialBackoffRetry | None:
        return self._retries.get(name)

    def get_all_stats(self) -> dict[str, dict[str, Any]]:
        return {name: retry.get_stats() for name, retry in self._retries.items()}


class RetryDecorator:
    """重试装饰器，每次调用使用新的重试实例."""

    def __init__(self, name: str, config: RetryConfig | None = None, *, sleep: SleepFunc = asyncio.sleep):
        self.name = name
        self.config = config or RetryConfig()
        self._sleep = sleep

    def __call__(self, func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[T]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> T:
            retry_instance = ExponentialBackoffRetry(self.config, name=self.name, sleep=self._sleep)
            return await retry_instance.execute(func, *args, **kwargs)

        return wrapper


# 全局重试注册表
retry_registry = RetryRegistry()


def retry(
    name: str,
    max_attempts: int = 3,
    base_delay: float = 1.0,
    *,
    sleep: SleepFunc = asyncio.sleep,
) -> RetryDecorator:
    """重试装饰器工厂函数.

    Args:
        name: 重试实例名称
        max_attempts: 最大尝试次数
        base_delay: 基础延迟时间(秒)
        sleep: 等待函数

    Returns:
        RetryDecorator实例
    """
    return RetryDecorator(name, RetryConfig(max_attempts=max_attempts, base_delay=base_delay), sleep=sleep)


async def get_retry_instance(name: str) -> ExponentialBackoffRetry:
    """获取指定重试实例."""
    return await retry_registry.get_or_create(name)


def get_retry_stats(name: str) -> dict[str, Any] | None:
    """获取重试统计信息."""
    retry_instance = retry_registry.get_retry(name)
    return retry_instance.get_stats() if retry_instance else None


def get_all_retry_stats() -> dict[str, dict[str, Any]]:
    """获取所有重试实例的统计信息."""
    return retry_registry.get_all_stats()


__all__ = [
    "ExponentialBackoffRetry",
    "RetryConfig",
    "RetryDecorator",
    "RetryRegistry",
    "RetryState",
    "get_all_retry_stats",
    "get_retry_instance",
    "get_retry_stats",
    "retry",
    "retry_registry",
    "retry_with_backoff",
]
