"""NewsAPI search and headlines client."""

from typing import Any

import httpx

from thesis_research.fetchers.http import HttpClient
from thesis_research.models.config import ProviderConfig, RateLimitConfig
from thesis_research.models.market import NewsArticle, NewsSearchOptions
from thesis_research.models.providers import NewsApiResponse
from thesis_research.normalizers.common import parse_payload
from thesis_research.normalizers.news import normalize_news_article
from thesis_research.normalizers.ticker import normalize_ticker


BASE_URL = "https://newsapi.org/v2"
DEFAULT_RATE_LIMIT = RateLimitConfig(requests_per_minute=10, requests_per_day=100)


class NewsAPIClient:
    """Client for NewsAPI ``/everything`` and ``/top-headlines``.

    The key travels in the ``X-Api-Key`` header rather than the query.
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
        self.http = HttpClient(
            base_url,
            headers={"X-Api-Key": api_key},
            timeout=timeout,
            rate_limit=rate_limit or DEFAULT_RATE_LIMIT,
            transport=transport,
        )

    @classmethod
    def from_config(
        cls,
        config: ProviderConfig,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "NewsAPIClient":
        return cls(
            config.resolve_api_key() or "",
            config.rate_limit,
            base_url=config.base_url,
            timeout=config.timeout,
            transport=transport,
        )

    async def close(self) -> None:
        await self.http.close()

    async def __aenter__(self) -> "NewsAPIClient":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    def _parse_articles(self, data: Any, source: str) -> list[NewsArticle]:
        parsed = parse_payload(NewsApiResponse, data, source)
        return [normalize_news_article(article) for article in parsed.articles]

    async def search(self, options: NewsSearchOptions) -> list[NewsArticle]:
        """Search all articles matching a query."""
        params: dict[str, str | int] = {
            "q": options.query,
            "sortBy": options.sort_by,
            "pageSize": options.page_size,
            "page": options.page,
            "language": "en",
        }
        if options.from_date is not None:
            params["from"] = options.from_date.isoformat()
        if options.to_date is not None:
            params["to"] = options.to_date.isoformat()

        data = await self.http.get("/everything", params)
        return self._parse_articles(data, "newsapi.everything")

    async def get_stock_news(self, ticker: str, **overrides: Any) -> list[NewsArticle]:
        """Most recent articles mentioning a ticker.

        Args:
            ticker: Ticker symbol
            **overrides: Any NewsSearchOptions field (e.g. ``page_size``)
        """
        ticker = normalize_ticker(ticker)
        options = NewsSearchOptions(**{
            "query": f'"{ticker}" OR "{ticker} stock"',
            "sort_by": "publishedAt",
            "page_size": 10,
            **overrides,
        })
        return await self.search(options)

    async def get_top_headlines(self, page_size: int = 20, page: int = 1) -> list[NewsArticle]:
        """Top US business headlines."""
        data = await self.http.get("/top-headlines", {
            "category": "business",
            "country": "us",
            "pageSize": page_size,
            "page": page,
        })
        return self._parse_articles(data, "newsapi.top-headlines")
