"""Standardized error codes for steadycall exceptions."""

from enum import Enum


class ErrorCode(str, Enum):
    """Error codes attached to every :class:`SteadyCallError`."""

    GENERAL_ERROR = "GENERAL_ERROR"

    # Execution
    OPERATION_FAILURE = "OPERATION_FAILURE"
    RETRY_EXHAUSTED = "RETRY_EXHAUSTED"

    # Configuration
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    INVALID_CONFIGURATION = "INVALID_CONFIGURATION"


__all__ = ["ErrorCode"]
