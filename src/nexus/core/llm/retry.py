"""
Retry policy for completion requests.

Completion endpoints fail transiently (rate limits, overloaded upstream
models, dropped connections). Requests are retried with exponential backoff
and jitter; client errors other than 429 fail immediately.
"""

from __future__ import annotations

import logging
import random
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import TypeVar

import httpx

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """
    Exponential backoff settings.

    Attributes:
        max_retries: Retries after the first attempt
        base_delay: Delay in seconds before the first retry
        multiplier: Backoff multiplier per retry
        jitter_ratio: Random variance applied to each delay (0.2 = ±20%)
    """

    max_retries: int = 2
    base_delay: float = 1.0
    multiplier: float = 2.0
    jitter_ratio: float = 0.2

    def __post_init__(self) -> None:
        if self.max_retries < 0:
            raise ValueError("max_retries must be non-negative")
        if self.base_delay < 0:
            raise ValueError("base_delay must be non-negative")
        if self.multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        if not 0.0 <= self.jitter_ratio <= 1.0:
            raise ValueError("jitter_ratio must be between 0.0 and 1.0")

    def delay_for(self, attempt: int) -> float:
        """Delay before retry number ``attempt`` (0-indexed)."""
        delay = self.base_delay * (self.multiplier**attempt)
        variance = delay * self.jitter_ratio
        return max(0.0, delay + random.uniform(-variance, variance))


def is_retryable_error(exception: Exception) -> bool:
    """
    Whether an httpx exception is worth retrying.

    Retries 5xx responses, 429 rate limits, timeouts and connection errors.
    Other 4xx responses are permanent (bad key, unknown model).
    """
    # HTTPStatusError is also an HTTPError, so check it first
    if isinstance(exception, httpx.HTTPStatusError):
        status_code = exception.response.status_code
        return status_code == 429 or 500 <= status_code < 600
    return isinstance(exception, httpx.HTTPError)


def call_with_retry(
    func: Callable[[], T],
    policy: RetryPolicy,
    *,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """
    Call ``func`` until it succeeds or the policy is exhausted.

    Args:
        func: Zero-argument callable performing one request
        policy: Backoff settings
        sleep: Sleep function (replaced in tests)

    Returns:
        The first successful result.

    Raises:
        The last exception, once it is non-retryable or retries run out.
    """
    attempt = 0
    while True:
        try:
            return func()
        except Exception as e:
            if not is_retryable_error(e):
                raise
            if attempt >= policy.max_retries:
                logger.warning("Giving up after %d retries: %s", policy.max_retries, e)
                raise
            delay = policy.delay_for(attempt)
            attempt += 1
            logger.info(
                "Retry %d/%d after %.2fs due to: %s", attempt, policy.max_retries, delay, e
            )
            sleep(delay)
