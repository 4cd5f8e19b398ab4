"""Serializable error payloads for log records."""

from typing import Any

from steadycall.core.exceptions.base import SteadyCallError
from steadycall.core.exceptions.codes import ErrorCode


def format_error_payload(error: BaseException) -> dict[str, Any]:
    """格式化错误为可序列化的字典.

    Args:
        error: 异常对象

    Returns:
        包含code/message/details/type的字典
    """
    if isinstance(error, SteadyCallError):
        code = error.error_code
        message = error.message
        details = {key: value for key, value in error.details.items() if key != "raw"}
    else:
        code = ErrorCode.OPERATION_FAILURE.value
        message = str(error)
        details = {}

    return {
        "code": code,
        "message": message,
        "details": details,
        "type": type(error).__name__,
    }


__all__ = ["format_error_payload"]
