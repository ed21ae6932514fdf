"""Financial Modeling Prep quote, profile and fundamentals client."""

import asyncio
import logging
from typing import Any

import httpx

from thesis_research.errors import RateLimitExceeded, SchemaValidationError, ThesisResearchError
from thesis_research.fetchers.http import HttpClient
from thesis_research.models.config import ProviderConfig, RateLimitConfig
from thesis_research.models.market import NormalizedFundamentals, NormalizedProfile, NormalizedQuote
from thesis_research.models.providers import (
    FmpConstituent,
    FmpFinancialGrowth,
    FmpKeyMetricsTTM,
    FmpProfile,
    FmpQuote,
    FmpRatiosTTM,
)
from thesis_research.normalizers.common import parse_payload, parse_payload_list
from thesis_research.normalizers.fmp import (
    normalize_fmp_fundamentals,
    normalize_fmp_profile,
    normalize_fmp_quote,
)
from thesis_research.normalizers.ticker import normalize_ticker


logger = logging.getLogger(__name__)

BASE_URL = "https://financialmodelingprep.com/api/v3"
DEFAULT_RATE_LIMIT = RateLimitConfig(requests_per_minute=10, requests_per_day=250)


class FMPClient:
    """Client for the FMP v3 REST API."""

    # Tickers per /quote call
    BATCH_SIZE = 50

    def __init__(
        self,
        api_key: str,
        rate_limit: RateLimitConfig | None = None,
        *,
        base_url: str = BASE_URL,
        timeout: float = 30.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.api_key = api_key
        self.http = HttpClient(
            base_url,
            timeout=timeout,
            rate_limit=rate_limit or DEFAULT_RATE_LIMIT,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "FMPClient":
        return cls(
            config.resolve_api_key() or "",
            config.rate_limit,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "FMPClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _get(self, path: str, **params: str | int) -> Any:
        return await self.http.get(path, {"apikey": self.api_key, **params})

    async def get_quote(self, ticker: str) -> NormalizedQuote:
        """Get the latest quote for a ticker.

        Raises:
            SchemaValidationError: If the payload is malformed or empty
        """
        ticker = normalize_ticker(ticker)
        data = await self._get(f"/quote/{ticker}")
        quotes = parse_payload_list(FmpQuote, data, "fmp.quote")
        if not quotes:
            raise SchemaValidationError("fmp.quote", f"No quote found for {ticker}", payload=data)
        return normalize_fmp_quote(quotes[0])

    async def get_profile(self, ticker: str) -> NormalizedProfile:
        """Get the company profile for a ticker."""
        ticker = normalize_ticker(ticker)
        data = await self._get(f"/profile/{ticker}")
        profiles = parse_payload_list(FmpProfile, data, "fmp.profile")
        if not profiles:
            raise SchemaValidationError("fmp.profile", f"No profile found for {ticker}", payload=data)
        return normalize_fmp_profile(profiles[0])

    async def get_fundamentals(self, ticker: str) -> NormalizedFundamentals:
        """Get TTM ratios, TTM key metrics and the latest growth record, merged."""
        ticker = normalize_ticker(ticker)
        ratios_data, metrics_data, growth_data = await asyncio.gather(
            self._get(f"/ratios-ttm/{ticker}"),
            self._get(f"/key-metrics-ttm/{ticker}"),
            self._get(f"/financial-growth/{ticker}", limit=1),
        )

        ratios = parse_payload_list(FmpRatiosTTM, ratios_data, "fmp.ratios-ttm")
        metrics = parse_payload_list(FmpKeyMetricsTTM, metrics_data, "fmp.key-metrics-ttm")
        growth = parse_payload_list(FmpFinancialGrowth, growth_data, "fmp.financial-growth")

        return normalize_fmp_fundamentals(
            ticker,
            ratios[0] if ratios else None,
            metrics[0] if metrics else None,
            growth[0] if growth else None,
        )

    async def get_sp500_constituents(self) -> list[str]:
        """Get the current S&P 500 ticker list."""
        data = await self._get("/sp500_constituent")
        return [item.symbol for item in parse_payload_list(FmpConstituent, data, "fmp.sp500_constituent")]

    async def get_quotes(self, tickers: list[str]) -> dict[str, NormalizedQuote]:
        """Fetch quotes in batches of ``BATCH_SIZE`` tickers per call.

        A failed batch is logged and skipped; the other batches still
        contribute to the result. Within a batch each record is validated
        on its own, so one malformed quote only drops that ticker.
        """
        results: dict[str, NormalizedQuote] = {}
        symbols = [normalize_ticker(t) for t in tickers]

        for start in range(0, len(symbols), self.BATCH_SIZE):
            batch = symbols[start:start + self.BATCH_SIZE]
            try:
                data = await self._get(f"/quote/{','.join(batch)}")
                if not isinstance(data, list):
                    raise SchemaValidationError(
                        "fmp.quote",
                        f"Expected a JSON array of FmpQuote, got {type(data).__name__}",
                        payload=data,
                    )
            except RateLimitExceeded as e:
                logger.warning(f"Stopping quote batch at {batch[0]}: {e}")
                break
            except (ThesisResearchError, httpx.HTTPError) as e:
                logger.warning(f"Failed to fetch batch quotes {batch[0]}..{batch[-1]}: {e}")
                continue

            for item in data:
                try:
                    raw = parse_payload(FmpQuote, item, "fmp.quote")
                except SchemaValidationError as e:
                    symbol = item.get("symbol", "?") if isinstance(item, dict) else "?"
                    logger.warning(f"Skipping malformed quote for {symbol}: {e}")
                    continue
                results[raw.symbol] = normalize_fmp_quote(raw)

        return results
