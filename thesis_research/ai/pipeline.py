"""End-to-end report and quote-sync jobs."""

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Protocol, TypeVar

import httpx

from thesis_research.ai.input_builder import build_report_input
from thesis_research.ai.report_generator import ReportGenerator
from thesis_research.errors import HttpError, RateLimitExceeded, RequestTimeout, ThesisResearchError
from thesis_research.fetchers.fmp import FMPClient
from thesis_research.fetchers.news import NewsAPIClient
from thesis_research.fetchers.retry import RetryPolicy, retry
from thesis_research.models.market import NewsArticle, NormalizedQuote
from thesis_research.models.report import GenerationResult, TriggerType
from thesis_research.normalizers.ticker import normalize_ticker

if TYPE_CHECKING:
    from thesis_research.storage.reports import ReportStore


logger = logging.getLogger(__name__)

T = TypeVar("T")

# Provider failures worth another attempt; schema errors and the daily cap are not
TRANSIENT_ERRORS = (HttpError, RequestTimeout, httpx.TransportError)


class QuoteSource(Protocol):
    async def get_quote(self, ticker: str) -> NormalizedQuote: ...


@dataclass
class QuoteSyncResult:
    synced: int = 0
    failed: int = 0
    errors: list[str] = field(default_factory=list)
    quotes: dict[str, NormalizedQuote] = field(default_factory=dict)


async def sync_quotes(
    client: QuoteSource,
    tickers: Iterable[str],
    progress: Callable[[int, int], None] | None = None,
) -> QuoteSyncResult:
    """Fetch quotes one ticker at a time, recording per-ticker failures.

    A failed ticker is counted and described in ``errors`` as
    ``"TICKER: message"``; the sync carries on with the next one. Hitting
    the provider's daily cap ends the sync early, with every remaining
    ticker counted as failed.

    Args:
        client: Anything with an async ``get_quote(ticker)``
        tickers: Symbols to sync
        progress: Called with ``(done, total)`` after each ticker
    """
    symbols = [normalize_ticker(t) for t in tickers]
    result = QuoteSyncResult()
    total = len(symbols)

    for i, ticker in enumerate(symbols):
        try:
            quote = await client.get_quote(ticker)
        except RateLimitExceeded as e:
            remaining = symbols[i:]
            logger.warning(f"Quote sync stopped at {ticker}: {e}")
            result.failed += len(remaining)
            result.errors.extend(f"{t}: {e}" for t in remaining)
            break
        except (ThesisResearchError, httpx.HTTPError) as e:
            logger.warning(f"Quote sync failed for {ticker}: {e}")
            result.failed += 1
            result.errors.append(f"{ticker}: {e}")
        else:
            result.synced += 1
            result.quotes[ticker] = quote

        if progress is not None:
            progress(i + 1, total)

    logger.info(f"Quote sync complete: {result.synced} synced, {result.failed} failed")
    return result


class ReportPipeline:
    """Fetch data for one company, generate its report and store it.

    Profile, quote and fundamentals are required and retried with
    ``retry_policy`` on transient failures; news is best effort.
    """

    def __init__(
        self,
        fmp: FMPClient,
        news: NewsAPIClient | None,
        generator: ReportGenerator,
        store: "ReportStore | None" = None,
        *,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.fmp = fmp
        self.news = news
        self.generator = generator
        self.store = store
        self.retry_policy = retry_policy or RetryPolicy()
        self.sleep = sleep

    async def _fetch(self, fn: Callable[[], Awaitable[T]]) -> T:
        return await retry(fn, self.retry_policy, retry_on=TRANSIENT_ERRORS, sleep=self.sleep)

    async def _fetch_news(self, ticker: str) -> list[NewsArticle]:
        if self.news is None:
            return []
        try:
            return await self.news.get_stock_news(ticker)
        except (ThesisResearchError, httpx.HTTPError) as e:
            logger.warning(f"[{ticker}] News unavailable, continuing without it: {e}")
            return []

    async def run(self, ticker: str, trigger: TriggerType = "manual") -> GenerationResult:
        ticker = normalize_ticker(ticker)
        logger.info(f"Generating report for {ticker} (trigger: {trigger})")

        logger.info(f"[{ticker}] Fetching market data...")
        profile = await self._fetch(lambda: self.fmp.get_profile(ticker))
        quote = await self._fetch(lambda: self.fmp.get_quote(ticker))

        logger.info(f"[{ticker}] Fetching fundamentals...")
        fundamentals = await self._fetch(lambda: self.fmp.get_fundamentals(ticker))
        articles = await self._fetch_news(ticker)

        logger.info(f"[{ticker}] Generating AI report...")
        data = build_report_input(profile, quote, fundamentals, articles)
        result = await self.generator.generate_report_with_research(data)

        if self.store is not None:
            logger.info(f"[{ticker}] Storing report...")
            self.store.save(ticker, result, trigger)

        logger.info(f"[{ticker}] Report generation complete (quality {result.quality.overall})")
        return result
