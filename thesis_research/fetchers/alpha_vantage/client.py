"""Alpha Vantage quote and company overview client."""

import logging
from typing import Any

import httpx

from thesis_research.errors import HttpError, RateLimitExceeded, ThesisResearchError
from thesis_research.fetchers.http import HttpClient
from thesis_research.models.config import ProviderConfig, RateLimitConfig
from thesis_research.models.market import CompanyOverview, NormalizedQuote
from thesis_research.models.providers import AvCompanyOverview, AvGlobalQuoteResponse
from thesis_research.normalizers.alpha_vantage import normalize_av_overview, normalize_av_quote
from thesis_research.normalizers.common import parse_payload
from thesis_research.normalizers.ticker import normalize_ticker


logger = logging.getLogger(__name__)

BASE_URL = "https://www.alphavantage.co"
DEFAULT_RATE_LIMIT = RateLimitConfig(requests_per_minute=5, requests_per_day=500)


class AlphaVantageClient:
    """Client for the Alpha Vantage ``/query`` API.

    Alpha Vantage answers throttled or invalid calls with HTTP 200 and a
    ``Note``/``Information``/``Error Message`` body; those are raised as
    HttpError (429 and 400) so they are not mistaken for a format change.
    """

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
    ) -> "AlphaVantageClient":
        return cls(
            config.resolve_api_key() or "",
            config.rate_limit,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "AlphaVantageClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def _query(self, function: str, ticker: str) -> Any:
        data = await self.http.get("/query", {
            "function": function,
            "symbol": ticker,
            "apikey": self.api_key,
        })

        if isinstance(data, dict):
            for key in ("Note", "Information"):
                if key in data:
                    raise HttpError(429, "Too Many Requests", str(data[key]))
            if "Error Message" in data:
                raise HttpError(400, "Bad Request", str(data["Error Message"]))

        return data

    async def get_quote(self, ticker: str) -> NormalizedQuote:
        """Get the latest quote for a ticker."""
        ticker = normalize_ticker(ticker)
        data = await self._query("GLOBAL_QUOTE", ticker)
        parsed = parse_payload(AvGlobalQuoteResponse, data, "alpha_vantage.GLOBAL_QUOTE")
        return normalize_av_quote(parsed.global_quote)

    async def get_overview(self, ticker: str) -> CompanyOverview:
        """Get company overview with trailing fundamentals."""
        ticker = normalize_ticker(ticker)
        data = await self._query("OVERVIEW", ticker)
        parsed = parse_payload(AvCompanyOverview, data, "alpha_vantage.OVERVIEW")
        return normalize_av_overview(parsed)

    async def get_quotes(self, tickers: list[str]) -> dict[str, NormalizedQuote]:
        """Fetch quotes one ticker at a time.

        Failed tickers are logged and left out of the result. A daily cap
        stops the batch early since every remaining call would fail too.
        """
        results: dict[str, NormalizedQuote] = {}

        for ticker in tickers:
            try:
                results[normalize_ticker(ticker)] = await self.get_quote(ticker)
            except RateLimitExceeded as e:
                logger.warning(f"Stopping quote batch at {ticker}: {e}")
                break
            except (ThesisResearchError, httpx.HTTPError) as e:
                logger.warning(f"Failed to fetch quote for {ticker}: {e}")

        return results
