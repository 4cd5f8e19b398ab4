"""Exception handling module."""

from steadycall.core.exceptions.base import (
    ConfigurationError,
    InvalidGateConfigError,
    InvalidRetryConfigError,
    OperationFailure,
    RetryExhausted,
    SteadyCallError,
    normalize_error,
)
from steadycall.core.exceptions.codes import ErrorCode
from steadycall.core.exceptions.messages import format_error_payload

__all__ = [
    "SteadyCallError",
    "OperationFailure",
    "RetryExhausted",
    "InvalidRetryConfigError",
    "InvalidGateConfigError",
    "ConfigurationError",
    "ErrorCode",
    "normalize_error",
    "format_error_payload",
]
