"""Tests for thesis_research.fetchers.http.RateLimiter."""

from __future__ import annotations

import asyncio

import pytest

from thesis_research.errors import RateLimitExceeded
from thesis_research.fetchers.http import DAY_MS, RateLimiter
from thesis_research.models.config import RateLimitConfig


def make_limiter(clock, rpm: float = 60, rpd: int | None = None) -> RateLimiter:
    return RateLimiter(
        RateLimitConfig(requests_per_minute=rpm, requests_per_day=rpd),
        clock=clock,
        sleep=clock.sleep,
    )


class TestTokenBucket:
    def test_starts_full(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=5)
        assert limiter.max_tokens == 5
        assert limiter.tokens == 5

    def test_burst_up_to_capacity_without_waiting(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=5)

        async def run():
            for _ in range(5):
                await limiter.acquire()

        asyncio.run(run())
        assert fake_clock.sleeps == []
        assert limiter.tokens == pytest.approx(0)

    def test_waits_for_refill_when_empty(self, fake_clock):
        # 60/min refills one token per second
        limiter = make_limiter(fake_clock, rpm=60)

        async def run():
            for _ in range(61):
                await limiter.acquire()

        asyncio.run(run())
        assert fake_clock.sleeps == [pytest.approx(1.0)]
        assert limiter.tokens >= 0

    def test_tokens_never_exceed_capacity(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=10)
        asyncio.run(limiter.acquire())
        fake_clock.now += 10 * 60_000
        asyncio.run(limiter.acquire())
        assert limiter.tokens == pytest.approx(9)

    def test_fractional_rate_keeps_one_token_capacity(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=0.5)
        assert limiter.max_tokens == 1

        async def run():
            await limiter.acquire()
            await limiter.acquire()

        asyncio.run(run())
        # 0.5/min -> one token every 120s
        assert fake_clock.sleeps == [pytest.approx(120.0)]

    def test_concurrent_callers_admitted_in_order(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=2)
        order: list[int] = []

        async def caller(i: int):
            await limiter.acquire()
            order.append(i)

        async def run():
            await asyncio.gather(*(caller(i) for i in range(4)))

        asyncio.run(run())
        assert order == [0, 1, 2, 3]
        # two extra tokens at 2/min take 30s each
        assert sum(fake_clock.sleeps) == pytest.approx(60.0)


class TestDailyCap:
    def test_rejects_immediately_at_cap(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=100, rpd=3)

        async def run():
            for _ in range(3):
                await limiter.acquire()
            await limiter.acquire()

        with pytest.raises(RateLimitExceeded) as exc_info:
            asyncio.run(run())
        assert exc_info.value.limit == 3
        assert limiter.daily_count == 3
        assert fake_clock.sleeps == []

    def test_rejection_does_not_consume_a_token(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=10, rpd=1)
        asyncio.run(limiter.acquire())
        tokens = limiter.tokens

        with pytest.raises(RateLimitExceeded):
            asyncio.run(limiter.acquire())
        assert limiter.tokens == tokens

    def test_window_resets_after_a_day(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=100, rpd=2)

        async def run():
            await limiter.acquire()
            await limiter.acquire()

        asyncio.run(run())
        fake_clock.now += DAY_MS + 1
        asyncio.run(limiter.acquire())

        assert limiter.daily_count == 1
        assert limiter.daily_window_start == fake_clock.now

    def test_window_does_not_reset_at_exactly_a_day(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=100, rpd=1)
        asyncio.run(limiter.acquire())
        fake_clock.now += DAY_MS

        with pytest.raises(RateLimitExceeded):
            asyncio.run(limiter.acquire())

    def test_no_daily_cap(self, fake_clock):
        limiter = make_limiter(fake_clock, rpm=1000)

        async def run():
            for _ in range(500):
                await limiter.acquire()

        asyncio.run(run())
        assert limiter.daily_count == 0


class TestCancellation:
    def test_cancelled_wait_returns_daily_reservation(self, fake_clock):
        async def blocked_sleep(seconds: float) -> None:
            await asyncio.Event().wait()

        limiter = RateLimiter(
            RateLimitConfig(requests_per_minute=1, requests_per_day=10),
            clock=fake_clock,
            sleep=blocked_sleep,
        )

        async def run():
            await limiter.acquire()
            waiter = asyncio.ensure_future(limiter.acquire())
            await asyncio.sleep(0)
            assert limiter.daily_count == 2
            waiter.cancel()
            with pytest.raises(asyncio.CancelledError):
                await waiter

        asyncio.run(run())
        assert limiter.daily_count == 1
