"""Tagged success/failure value returned by safe execution."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Any, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True, slots=True)
class Outcome(Generic[T]):
    """Result of a captured operation.

    ``error is None`` marks a success, in which case ``data`` holds the
    operation's result. A failed outcome always carries the error; its
    ``data`` is the caller-supplied fallback, or ``None``.
    """

    data: T | None = None
    error: Exception | None = None

    @classmethod
    def success(cls, value: T) -> Outcome[T]:
        return cls(data=value, error=None)

    @classmethod
    def failure(cls, error: Exception, fallback: T | None = None) -> Outcome[T]:
        if error is None:
            raise ValueError("a failed outcome requires an error")
        return cls(data=fallback, error=error)

    @property
    def ok(self) -> bool:
        return self.error is None

    @property
    def failed(self) -> bool:
        return self.error is not None

    def unwrap(self) -> T | None:
        """Return ``data`` on success, raise the captured error otherwise."""

        if self.error is not None:
            raise self.error
        return self.data

    def __iter__(self) -> Iterator[Any]:
        # data, error = outcome
        yield self.data
        yield self.error


__all__ = ["Outcome"]
