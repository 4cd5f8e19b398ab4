"""安全执行：将异步操作的异常转换为Outcome数据."""

from __future__ import annotations

import functools
from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from steadycall.core.exceptions import format_error_payload, normalize_error
from steadycall.core.logging import get_logger
from steadycall.core.monitoring import get_metrics_collector
from steadycall.core.patterns.outcome import Outcome

T = TypeVar("T")

logger = get_logger(__name__)


def operation_name(operation: Callable[..., Any]) -> str:
    """Return a readable name for log records and metric labels.

    Enclosing function scopes are dropped from nested qualnames, so a closure
    ``build.<locals>.fetch`` is reported as ``fetch``.
    """

    target = operation.func if isinstance(operation, functools.partial) else operation
    name = getattr(target, "__qualname__", None) or getattr(target, "__name__", None) or type(target).__name__
    return name.rpartition("<locals>.")[2].strip("<>")


async def safe_run(
    operation: Callable[[], Awaitable[T]],
    fallback: T | None = None,
    *,
    name: str | None = None,
) -> Outcome[T]:
    """执行一次异步操作，不抛出异常.

    Args:
        operation: 无参数的异步可调用对象
        fallback: 失败时放入Outcome.data的值
        name: 日志和指标中使用的操作名，默认取函数名

    Returns:
        成功时为Outcome(data=结果, error=None)，
        失败时为Outcome(data=fallback, error=规范化后的异常)
    """
    try:
        result = await operation()
    except Exception as e:
        error = normalize_error(e)
        name = name or operation_name(operation)
        payload = format_error_payload(error)
        logger.bind(operation=name, error_code=payload["code"]).warning(
            "Operation {} failed: {}: {}",
            name,
            payload["type"],
            payload["message"],
        )
        get_metrics_collector().record_safe_run_failure(name)
        return Outcome.failure(error, fallback)

    return Outcome.success(result)


def safe(
    fallback: Any = None, *, name: str | None = None
) -> Callable[[Callable[..., Awaitable[T]]], Callable[..., Awaitable[Outcome[T]]]]:
    """装饰器：被装饰的异步函数返回Outcome而不是抛出异常.

    Args:
        fallback: 失败时放入Outcome.data的值
        name: 日志和指标中使用的操作名

    Returns:
        装饰器
    """

    def decorator(func: Callable[..., Awaitable[T]]) -> Callable[..., Awaitable[Outcome[T]]]:
        @functools.wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Outcome[T]:
            return await safe_run(functools.partial(func, *args, **kwargs), fallback, name=name)

        return wrapper

    return decorator


__all__ = ["operation_name", "safe", "safe_run"]
