# src/core/outcome.py - v1
"""Explicit result values for best-effort operations.

Callers decide whether to discard the error; nothing is swallowed silently.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Awaitable, Generic, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Success value or captured error of a best-effort operation."""

    value: T | None = None
    error: Exception | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, value: T | None = None) -> Outcome[T]:
        return cls(value=value)

    @classmethod
    def failure(cls, error: Exception) -> Outcome[T]:
        return cls(error=error)

    def log_if_failed(self, logger: logging.Logger, message: str, *args: object) -> Outcome[T]:
        """Log the captured error at WARNING level and return self."""
        if self.error is not None:
            logger.warning(message + ": %s", *args, self.error)
        return self


async def attempt(
    awaitable: Awaitable[T],
    *expected: type[Exception],
) -> Outcome[T]:
    """Await and capture the listed exception types into an Outcome.

    Exceptions not listed propagate unchanged.
    """
    catch = expected or (Exception,)
    try:
        return Outcome.success(await awaitable)
    except catch as e:
        return Outcome.failure(e)
