# src/llm/retry.py - v2
"""Retry policy with exponential backoff for generation calls.

Only the generator client retries. Resolution algorithms call the generator
once and surface GenerationFailure.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

logger = logging.getLogger(__name__)


class LLMRetryExhausted(Exception):
    """All retries exhausted for an LLM call."""

    def __init__(self, operation: str, error_type: str, attempts: int, last_error: Exception):
        self.operation = operation
        self.error_type = error_type
        self.attempts = attempts
        self.last_error = last_error
        super().__init__(
            f"{operation} failed after {attempts} attempt(s) ({error_type}): {last_error}"
        )


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a specific error type."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "rate_limit": RetryConfig(max_retries=3, base_delay_s=2.0),
    "timeout": RetryConfig(max_retries=2, base_delay_s=1.0, backoff_factor=1.0),
    "server_error": RetryConfig(max_retries=3, base_delay_s=3.0),
    "connection": RetryConfig(max_retries=2, base_delay_s=1.0),
    "parse_error": RetryConfig(max_retries=1, base_delay_s=0.5, backoff_factor=1.0),
}


def classify_error(error: Exception) -> str:
    """Classify an exception into a retry error type ("unknown" is not retried)."""
    msg = str(error).lower()
    name = type(error).__name__.lower()

    if isinstance(error, ValueError) and ("json" in msg or "parse" in msg or "validation" in msg):
        return "parse_error"
    if "429" in msg or "rate" in msg or "resource_exhausted" in msg or "quota" in msg:
        return "rate_limit"
    if "timeout" in name or "timeout" in msg or "timed out" in msg:
        return "timeout"
    if any(c in msg for c in ("500", "502", "503", "504", "unavailable", "overloaded")):
        return "server_error"
    if "connection" in name or "connection" in msg:
        return "connection"
    return "unknown"


def compute_delay(config: RetryConfig, attempt: int) -> float:
    """Delay before the retry following a 0-based attempt."""
    delay = config.base_delay_s * (config.backoff_factor ** attempt)
    if config.jitter:
        delay *= 0.5 + random.random()  # noqa: S311
    return delay


async def with_retry(
    fn: Callable[..., Awaitable[Any]],
    *args: Any,
    operation: str = "llm_call",
    retry_configs: dict[str, RetryConfig] | None = None,
    **kwargs: Any,
) -> Any:
    """Execute an async function, retrying transient failures.

    Raises:
        LLMRetryExhausted: When the error is not retryable or retries run out.
    """
    configs = DEFAULT_RETRY_CONFIGS if retry_configs is None else retry_configs
    attempts = 0

    while True:
        try:
            return await fn(*args, **kwargs)
        except Exception as e:
            error_type = classify_error(e)
            attempts += 1
            config = configs.get(error_type)

            if config is None or attempts > config.max_retries:
                raise LLMRetryExhausted(operation, error_type, attempts, e) from e

            delay = compute_delay(config, attempts - 1)
            logger.warning(
                "%s: %s (attempt %d/%d), retrying in %.1fs",
                operation, error_type, attempts, config.max_retries, delay,
            )
            await asyncio.sleep(delay)
