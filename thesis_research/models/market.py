"""Provider-agnostic market data records.

Numeric fields are either finite numbers or ``None``. Providers report
missing values as ``"None"``, ``"-"``, empty strings or nulls; the
normalizers map all of those to ``None`` before these models are built, and
the models reject strings and NaN outright.
"""

from datetime import date, datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field


ProviderName = Literal["alpha_vantage", "fmp", "newsapi"]


class MarketRecord(BaseModel):
    """Base for normalized records: strict types, no NaN/inf, immutable."""

    model_config = ConfigDict(strict=True, allow_inf_nan=False, frozen=True)


class NormalizedQuote(MarketRecord):
    """Latest price snapshot for one ticker."""

    ticker: str = Field(description="Ticker symbol (e.g., 'AAPL')")
    price: float = Field(description="Last traded price")
    source: ProviderName

    name: str | None = Field(default=None)
    exchange: str | None = Field(default=None)

    open: float | None = Field(default=None)
    high: float | None = Field(default=None, description="Day high")
    low: float | None = Field(default=None, description="Day low")
    previous_close: float | None = Field(default=None)
    change: float | None = Field(default=None)
    change_percent: float | None = Field(default=None, description="Percent points, 1.25 == 1.25%")
    volume: int | None = Field(default=None)
    avg_volume: float | None = Field(default=None)

    year_high: float | None = Field(default=None)
    year_low: float | None = Field(default=None)
    sma50: float | None = Field(default=None)
    sma200: float | None = Field(default=None)
    market_cap: float | None = Field(default=None)
    shares_outstanding: float | None = Field(default=None)
    eps: float | None = Field(default=None)
    pe: float | None = Field(default=None)

    earnings_date: str | None = Field(default=None, description="Next earnings announcement")
    latest_trading_day: str | None = Field(default=None, description="YYYY-MM-DD")
    timestamp: datetime | None = Field(default=None)


class NormalizedProfile(MarketRecord):
    """Company descriptive data."""

    ticker: str
    name: str
    source: ProviderName
    description: str = Field(default="")
    exchange: str | None = Field(default=None)
    sector: str | None = Field(default=None)
    industry: str | None = Field(default=None)
    market_cap: float | None = Field(default=None)

    ceo: str | None = Field(default=None)
    website: str | None = Field(default=None)
    logo_url: str | None = Field(default=None)
    ipo_date: str | None = Field(default=None)
    employees: int | None = Field(default=None)
    country: str | None = Field(default=None)
    is_etf: bool | None = Field(default=None)
    is_active: bool | None = Field(default=None)


class CompanyOverview(MarketRecord):
    """Alpha Vantage OVERVIEW: profile plus trailing metrics in one call."""

    profile: NormalizedProfile

    pe: float | None = Field(default=None)
    forward_pe: float | None = Field(default=None)
    peg: float | None = Field(default=None)
    ps: float | None = Field(default=None)
    pb: float | None = Field(default=None)
    ev_to_revenue: float | None = Field(default=None)
    ev_to_ebitda: float | None = Field(default=None)
    book_value: float | None = Field(default=None)
    eps: float | None = Field(default=None)
    dividend_yield: float | None = Field(default=None)

    profit_margin: float | None = Field(default=None)
    operating_margin: float | None = Field(default=None)
    roa: float | None = Field(default=None)
    roe: float | None = Field(default=None)
    revenue: float | None = Field(default=None)
    gross_profit: float | None = Field(default=None)
    eps_growth_yoy: float | None = Field(default=None)
    revenue_growth_yoy: float | None = Field(default=None)

    analyst_target_price: float | None = Field(default=None)
    beta: float | None = Field(default=None)
    week52_high: float | None = Field(default=None)
    week52_low: float | None = Field(default=None)
    sma50: float | None = Field(default=None)
    sma200: float | None = Field(default=None)
    shares_outstanding: float | None = Field(default=None)
    ex_dividend_date: str | None = Field(default=None)

    @property
    def ticker(self) -> str:
        return self.profile.ticker


class NormalizedFundamentals(MarketRecord):
    """Trailing valuation, profitability, balance-sheet and growth ratios."""

    ticker: str
    date: str = Field(description="As-of date (YYYY-MM-DD)")
    source: ProviderName

    # Valuation
    pe: float | None = Field(default=None)
    pb: float | None = Field(default=None)
    ps: float | None = Field(default=None)
    peg: float | None = Field(default=None)
    ev_ebitda: float | None = Field(default=None)
    enterprise_value: float | None = Field(default=None)

    # Profitability (ratios, 0.25 == 25%)
    gross_margin: float | None = Field(default=None)
    operating_margin: float | None = Field(default=None)
    net_margin: float | None = Field(default=None)
    roe: float | None = Field(default=None)
    roa: float | None = Field(default=None)
    roic: float | None = Field(default=None)

    # Dividends
    dividend_yield: float | None = Field(default=None)
    payout_ratio: float | None = Field(default=None)

    # Balance sheet
    debt_to_equity: float | None = Field(default=None)
    current_ratio: float | None = Field(default=None)
    quick_ratio: float | None = Field(default=None)
    interest_coverage: float | None = Field(default=None)

    # Per share
    book_value: float | None = Field(default=None)
    fcf_per_share: float | None = Field(default=None)
    revenue_per_share: float | None = Field(default=None)

    # Growth
    revenue_growth_yoy: float | None = Field(default=None)
    eps_growth_yoy: float | None = Field(default=None)
    revenue_growth_3y: float | None = Field(default=None)
    eps_growth_3y: float | None = Field(default=None)


class NewsArticle(MarketRecord):
    """News article from a search or headline feed."""

    title: str
    url: str
    source: str
    published_at: datetime
    description: str | None = Field(default=None)
    image_url: str | None = Field(default=None)
    author: str | None = Field(default=None)
    content: str | None = Field(default=None)


class NewsSearchOptions(BaseModel):
    """Search parameters for the news provider."""

    query: str = Field(min_length=1)
    from_date: date | None = Field(default=None)
    to_date: date | None = Field(default=None)
    sort_by: Literal["relevancy", "popularity", "publishedAt"] = Field(default="publishedAt")
    page_size: int = Field(default=20, ge=1, le=100)
    page: int = Field(default=1, ge=1)
