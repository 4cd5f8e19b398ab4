"""steadycall核心异常类."""

from typing import Any

from steadycall.core.exceptions.codes import ErrorCode


class SteadyCallError(Exception):
    """steadycall基础异常类."""

    def __init__(
        self,
        message: str,
        error_code: str = ErrorCode.GENERAL_ERROR.value,
        details: dict[str, Any] | None = None,
    ):
        """初始化异常.

        Args:
            message: 错误消息
            error_code: 错误代码
            details: 额外详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}


class OperationFailure(SteadyCallError):
    """被包装操作的失败，统一表示非异常的失败值."""

    def __init__(
        self,
        message: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message, ErrorCode.OPERATION_FAILURE.value, details)


class RetryExhausted(SteadyCallError):
    """所有重试尝试均失败."""

    def __init__(
        self,
        attempts: int,
        last_error: Exception,
        operation: str | None = None,
    ):
        details: dict[str, Any] = {
            "attempts": attempts,
            "last_error_type": type(last_error).__name__,
        }
        if operation:
            details["operation"] = operation
        super().__init__(
            f"Operation failed after {attempts} attempt(s): {last_error}",
            ErrorCode.RETRY_EXHAUSTED.value,
            details,
        )
        self.attempts = attempts
        self.last_error = last_error


class InvalidRetryConfigError(SteadyCallError):
    """重试参数非法."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message, ErrorCode.INVALID_CONFIGURATION.value, details)


class InvalidGateConfigError(SteadyCallError):
    """防抖/节流参数非法."""

    def __init__(self, message: str, **details: Any):
        super().__init__(message, ErrorCode.INVALID_CONFIGURATION.value, details)


class ConfigurationError(SteadyCallError):
    """配置文件无法加载."""

    def __init__(
        self,
        message: str,
        config_path: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super_details = details or {}
        if config_path:
            super_details["config_path"] = config_path
        super().__init__(message, ErrorCode.CONFIGURATION_ERROR.value, super_details)
        self.config_path = config_path


def normalize_error(failure: Any) -> Exception:
    """Return ``failure`` as an exception, wrapping non-exception values.

    Exceptions pass through untouched so callers can still match on their
    type. Anything else is stringified into an :class:`OperationFailure`
    that keeps the original object under ``details["raw"]``.
    """

    if isinstance(failure, Exception):
        return failure
    return OperationFailure(str(failure), details={"raw": failure})
