# src/llm/retry.py — v2
"""Retry policy with exponential backoff for upstream model calls.

The retry budget bounds how long a report can sit in ANALYZING: at most
``1 + max_retries`` attempts, each bounded by the client's request timeout.
"""

from __future__ import annotations

import asyncio
import logging
import random
from dataclasses import dataclass, replace
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
            f"{operation} failed after {attempts} attempts ({error_type}): {last_error}"
        )


@dataclass(frozen=True)
class RetryConfig:
    """Retry configuration for a specific error type."""

    max_retries: int
    base_delay_s: float
    backoff_factor: float = 2.0
    jitter: bool = True


DEFAULT_RETRY_CONFIGS: dict[str, RetryConfig] = {
    "rate_limit": RetryConfig(max_retries=2, base_delay_s=2.0),
    "timeout": RetryConfig(max_retries=1, base_delay_s=1.0, backoff_factor=1.0),
    "server_error": RetryConfig(max_retries=2, base_delay_s=2.0),
    "connection": RetryConfig(max_retries=2, base_delay_s=1.0),
}


def build_retry_configs(max_retries: int) -> dict[str, RetryConfig]:
    """Default policy with every error type capped at max_retries."""
    return {
        name: replace(cfg, max_retries=min(cfg.max_retries, max_retries))
        for name, cfg in DEFAULT_RETRY_CONFIGS.items()
    }


def classify_error(error: Exception) -> str:
    """Classify an exception into a retry error type."""
    msg = str(error).lower()
    name = type(error).__name__.lower()

    if "quota" in msg or "insufficient" in msg:
        return "quota"
    if "429" in msg or "rate" in msg or "ratelimit" in name:
        return "rate_limit"
    if "timeout" in name or "timeout" in msg or "timed out" in msg:
        return "timeout"
    if "connection" in name or "connection" in msg:
        return "connection"
    if any(c in msg for c in ("500", "502", "503", "504", "overloaded", "server")):
        return "server_error"
    return "unknown"


def _compute_delay(config: RetryConfig, attempt: int) -> float:
    """Compute delay for a given attempt (0-based)."""
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
    """Execute an async function with retry logic.

    Error types without a config (quota, unknown) are not retried.

    Raises:
        LLMRetryExhausted: If all retries are exhausted.
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

            delay = _compute_delay(config, attempts - 1)
            logger.warning(
                "%s: %s (attempt %d/%d), retrying in %.1fs",
                operation, error_type, attempts, config.max_retries, delay,
            )
            await asyncio.sleep(delay)
