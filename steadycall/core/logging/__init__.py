"""Structured JSON logging for executors and gates."""

from steadycall.core.logging.config import LogConfig
from steadycall.core.logging.logger import RECORD_FIELDS, configure_logging, get_logger, log_context, logger

__all__ = [
    "LogConfig",
    "RECORD_FIELDS",
    "configure_logging",
    "get_logger",
    "log_context",
    "logger",
]
