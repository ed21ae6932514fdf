"""Exponential backoff shared by provider callers and the report generator."""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_not_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from thesis_research.errors import RateLimitExceeded
from thesis_research.models.config import RetryConfig


logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class RetryPolicy:
    """How many times to retry and how long to wait in between.

    ``fn`` is called at most ``max_retries + 1`` times. The delay before
    retry ``k`` (``k >= 1``) is
    ``min(initial_delay_ms * backoff_multiplier ** (k - 1), max_delay_ms)``.
    """

    max_retries: int = 3
    initial_delay_ms: float = 1000.0
    max_delay_ms: float = 30000.0
    backoff_multiplier: float = 2.0

    @classmethod
    def from_config(cls, config: RetryConfig) -> "RetryPolicy":
        return cls(
            max_retries=config.max_retries,
            initial_delay_ms=config.initial_delay_ms,
            max_delay_ms=config.max_delay_ms,
            backoff_multiplier=config.backoff_multiplier,
        )

    @property
    def max_attempts(self) -> int:
        return self.max_retries + 1

    def delay_ms(self, attempt: int) -> float:
        """Delay in milliseconds before retry ``attempt`` (1-indexed)."""
        if attempt < 1:
            raise ValueError("attempt must be >= 1")
        return min(self.initial_delay_ms * self.backoff_multiplier ** (attempt - 1), self.max_delay_ms)

    def wait(self) -> wait_exponential:
        """Equivalent tenacity wait strategy (seconds)."""
        return wait_exponential(
            multiplier=self.initial_delay_ms / 1000.0,
            exp_base=self.backoff_multiplier,
            max=self.max_delay_ms / 1000.0,
        )


DEFAULT_POLICY = RetryPolicy()


async def retry(
    fn: Callable[[], Awaitable[T]],
    policy: RetryPolicy | None = None,
    *,
    retry_on: type[BaseException] | tuple[type[BaseException], ...] = Exception,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> T:
    """Call ``fn`` until it succeeds or the retry budget is spent.

    Returns the first successful result. When every attempt fails the error
    from the final attempt is re-raised unchanged. ``RateLimitExceeded`` is
    never retried: a daily cap will not clear within the backoff window.

    Args:
        fn: Zero-argument coroutine function
        policy: Backoff settings, defaults to 3 retries from 1s doubling to 30s
        retry_on: Exception types that count as retryable failures
        sleep: Awaitable sleep taking seconds (injectable for tests)
    """
    policy = policy or DEFAULT_POLICY

    retrying = AsyncRetrying(
        retry=retry_if_exception_type(retry_on) & retry_if_not_exception_type(RateLimitExceeded),
        stop=stop_after_attempt(policy.max_attempts),
        wait=policy.wait(),
        sleep=sleep,
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    return await retrying(fn)
