"""JSON log records for executors and gates.

Every record is written as one JSON object per line with these fields at
top level, ``null`` when a record does not carry them:

- ``trace_id``: correlation id from :func:`log_context`, generated otherwise
- ``operation``: name of the wrapped callable
- ``attempt``: 1-based attempt number inside a retry sequence
- ``policy``: ``"debounce"`` or ``"throttle"`` for gate decisions
- ``error_code``: :class:`~steadycall.core.exceptions.ErrorCode` value of a failure

Anything else bound on the record lands under ``context``.
"""

from __future__ import annotations

import json
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from pathlib import Path
from typing import IO, TYPE_CHECKING, Any
from uuid import uuid4

from loguru import logger

from steadycall.core.logging.config import LogConfig

if TYPE_CHECKING:
    from loguru import Logger

RECORD_FIELDS = ("trace_id", "operation", "attempt", "policy", "error_code")

_trace_id: ContextVar[str | None] = ContextVar("steadycall_trace_id", default=None)
_scoped_fields: ContextVar[dict[str, Any]] = ContextVar("steadycall_scoped_fields", default={})


def _patch_record(record: dict[str, Any]) -> None:
    extra = record["extra"]
    for key, value in _scoped_fields.get().items():
        extra.setdefault(key, value)

    if not extra.get("trace_id"):
        trace_id = _trace_id.get()
        if trace_id is None:
            trace_id = uuid4().hex
            _trace_id.set(trace_id)
        extra["trace_id"] = trace_id

    for key in RECORD_FIELDS:
        extra.setdefault(key, None)


def _to_json_line(record: dict[str, Any]) -> str:
    extra = record["extra"]
    payload: dict[str, Any] = {
        "timestamp": record["time"].isoformat(),
        "level": record["level"].name,
        "logger": extra.get("logger_name"),
        "message": record["message"],
    }
    payload.update({key: extra.get(key) for key in RECORD_FIELDS})

    context = {k: v for k, v in extra.items() if k not in RECORD_FIELDS and k != "logger_name"}
    if context:
        payload["context"] = context

    exception = record["exception"]
    if exception is not None and exception.type is not None:
        payload["exception"] = f"{exception.type.__name__}: {exception.value}"
    return json.dumps(payload, default=str) + "\n"


class _JsonLineSink:
    """Loguru sink appending JSON lines to a text stream or a file path."""

    def __init__(self, target: IO[str] | Path) -> None:
        if isinstance(target, Path):
            target.parent.mkdir(parents=True, exist_ok=True)
        self._target = target

    def __call__(self, message: Any) -> None:
        line = _to_json_line(message.record)
        if isinstance(self._target, Path):
            with self._target.open("a", encoding="utf-8") as handle:
                handle.write(line)
        else:
            self._target.write(line)
            self._target.flush()


def configure_logging(config: LogConfig | None = None, /, **options: Any) -> LogConfig:
    """Replace loguru's sinks with steadycall's JSON sinks.

    Pass a :class:`LogConfig`, keyword options for one, or both (options
    override the given config). Returns the config that was applied.
    """

    if config is None:
        config = LogConfig(**options)
    elif options:
        config = LogConfig(**{**dict(config), **options})

    handlers: list[dict[str, Any]] = []
    if config.console:
        handlers.append({"sink": _JsonLineSink(config.stream or sys.stderr), "level": config.level})
    if config.file_path is not None:
        handlers.append({"sink": _JsonLineSink(config.file_path), "level": config.level})

    logger.configure(handlers=handlers, patcher=_patch_record, extra=dict(config.static_fields))
    return config


def get_logger(name: str | None = None) -> Logger:
    """Return the loguru logger, bound to ``name`` when given."""

    if name:
        return logger.bind(logger_name=name)
    return logger


@contextmanager
def log_context(*, trace_id: str | None = None, **fields: Any) -> Iterator[str]:
    """Tag every record emitted inside the block with a trace id and ``fields``.

    Fields bound directly on a logger take precedence over scoped ones.
    """

    fields_token = _scoped_fields.set({**_scoped_fields.get(), **fields})
    active_trace = trace_id or uuid4().hex
    trace_token = _trace_id.set(active_trace)
    try:
        yield active_trace
    finally:
        _trace_id.reset(trace_token)
        _scoped_fields.reset(fields_token)


__all__ = [
    "RECORD_FIELDS",
    "configure_logging",
    "get_logger",
    "log_context",
    "logger",
]
