"""Rate-limited async HTTP client shared by all provider clients."""

import asyncio
import logging
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from thesis_research.errors import HttpError, RateLimitExceeded, RequestTimeout, SchemaValidationError
from thesis_research.models.config import RateLimitConfig


logger = logging.getLogger(__name__)

DAY_MS = 24 * 60 * 60 * 1000

Clock = Callable[[], float]
Sleep = Callable[[float], Awaitable[Any]]


def monotonic_ms() -> float:
    return time.monotonic() * 1000.0


class RateLimiter:
    """Token bucket with an optional daily cap.

    The bucket holds ``requests_per_minute`` tokens and refills continuously
    at ``requests_per_minute / 60000`` tokens per millisecond. The daily
    counter resets once more than 24 hours have passed since the window
    started (a rolling window from first use, not aligned to midnight).

    Daily quota is checked and reserved synchronously when ``acquire()`` is
    called, so a capped caller fails at once even while others are queued
    for tokens. Token accounting runs under a FIFO lock, so concurrent
    callers are admitted one at a time in call order.
    """

    def __init__(
        self,
        config: RateLimitConfig,
        *,
        clock: Clock = monotonic_ms,
        sleep: Sleep = asyncio.sleep,
    ):
        self.config = config
        self._clock = clock
        self._sleep = sleep

        self._max_tokens = max(1, int(config.requests_per_minute))
        self._refill_rate = config.requests_per_minute / 60000.0
        self._tokens = float(self._max_tokens)
        self._last_refill = clock()

        self._daily_limit = config.requests_per_day
        self._daily_count = 0
        self._daily_window_start = self._last_refill

        self._lock = asyncio.Lock()

    @property
    def tokens(self) -> float:
        return self._tokens

    @property
    def max_tokens(self) -> int:
        return self._max_tokens

    @property
    def daily_count(self) -> int:
        return self._daily_count

    @property
    def daily_window_start(self) -> float:
        return self._daily_window_start

    def _reserve_daily(self) -> None:
        if self._daily_limit is None:
            return

        now = self._clock()
        if now - self._daily_window_start > DAY_MS:
            logger.debug(f"Daily window elapsed, resetting count (was {self._daily_count})")
            self._daily_count = 0
            self._daily_window_start = now

        if self._daily_count >= self._daily_limit:
            logger.warning(f"Daily rate limit of {self._daily_limit} requests exceeded")
            raise RateLimitExceeded("Daily rate limit exceeded", limit=self._daily_limit)

        self._daily_count += 1

    def _refill(self) -> None:
        now = self._clock()
        elapsed = max(0.0, now - self._last_refill)
        self._tokens = min(float(self._max_tokens), self._tokens + elapsed * self._refill_rate)
        self._last_refill = now

    async def acquire(self) -> None:
        """Wait until a request may be issued.

        Raises:
            RateLimitExceeded: If the daily cap is reached (no waiting)
        """
        self._reserve_daily()

        try:
            async with self._lock:
                self._refill()
                if self._tokens < 1:
                    wait_ms = (1 - self._tokens) / self._refill_rate
                    logger.debug(f"Rate limiting: waiting {wait_ms:.0f}ms for a token")
                    await self._sleep(wait_ms / 1000.0)
                    self._refill()
                    self._tokens = max(self._tokens, 1.0)

                self._tokens -= 1
        except asyncio.CancelledError:
            self._release_daily()
            raise

    def _release_daily(self) -> None:
        # Only the cancelled caller's own reservation; never below zero
        if self._daily_limit is not None and self._daily_count > 0:
            self._daily_count -= 1


class HttpClient:
    """JSON-over-HTTP client with per-call timeout and optional rate limiting.

    Does not retry; wrap calls with :func:`thesis_research.fetchers.retry.retry`
    where resilience is needed.
    """

    def __init__(
        self,
        base_url: str,
        *,
        headers: dict[str, str] | None = None,
        timeout: float = 30.0,
        rate_limit: RateLimitConfig | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.headers = dict(headers or {})
        self.timeout = timeout
        self.rate_limiter: RateLimiter | None = None
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

        if rate_limit is not None:
            self.set_rate_limiter(rate_limit)

    def set_rate_limiter(self, config: RateLimitConfig) -> None:
        self.rate_limiter = RateLimiter(config)

    def _get_client(self) -> httpx.AsyncClient:
        """Get or create HTTP client."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                timeout=self.timeout,
                headers=self.headers,
                follow_redirects=True,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _build_url(self, path: str) -> str:
        if not path.startswith("/"):
            path = f"/{path}"
        return f"{self.base_url}{path}"

    async def _send(self, method: str, path: str, **kwargs: Any) -> Any:
        if self.rate_limiter is not None:
            await self.rate_limiter.acquire()

        url = self._build_url(path)
        client = self._get_client()

        try:
            response = await client.request(method, url, **kwargs)
        except httpx.TimeoutException as e:
            raise RequestTimeout(url, self.timeout) from e

        if not response.is_success:
            raise HttpError(response.status_code, response.reason_phrase, response.text, url=url)

        try:
            return response.json()
        except ValueError as e:
            raise SchemaValidationError(url, f"Response is not valid JSON: {e}", payload=response.text[:500]) from e

    async def get(self, path: str, params: dict[str, str | int | float | bool] | None = None) -> Any:
        """Issue a GET request and return the decoded JSON body."""
        query = None
        if params:
            query = {key: _stringify(value) for key, value in params.items()}
        return await self._send("GET", path, params=query)

    async def post(self, path: str, body: Any) -> Any:
        """Issue a JSON POST request and return the decoded JSON body."""
        return await self._send("POST", path, json=body)


def _stringify(value: str | int | float | bool) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"
    return str(value)
