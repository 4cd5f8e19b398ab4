"""Options for the JSON log sinks."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

_LOGURU_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class LogConfig(BaseModel):
    """Where steadycall writes JSON log lines and at which level.

    ``stream`` defaults to ``sys.stderr`` when ``console`` is enabled.
    ``static_fields`` are attached to every record, e.g. a service name.
    """

    model_config = ConfigDict(arbitrary_types_allowed=True)

    level: str = "INFO"
    console: bool = True
    stream: Any = None
    file_path: Path | None = None
    static_fields: dict[str, Any] = Field(default_factory=dict)

    @field_validator("level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in _LOGURU_LEVELS:
            raise ValueError(f"unknown log level {value!r}")
        return level


__all__ = ["LogConfig"]
