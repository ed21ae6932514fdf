"""Raw response schemas for the market-data and news providers.

Field names match each provider's JSON exactly (via aliases). Required
fields must be present with the right JSON type; a missing field or a type
change means the provider changed its format and fails validation.
"""

from pydantic import BaseModel, ConfigDict, Field


class ProviderPayload(BaseModel):
    """Base for raw payloads: JSON types are checked strictly."""

    model_config = ConfigDict(strict=True, extra="ignore")


# ---------------------------------------------------------------------------
# Alpha Vantage (every value is a string)
# ---------------------------------------------------------------------------


class AvGlobalQuote(ProviderPayload):
    symbol: str = Field(alias="01. symbol")
    open: str = Field(alias="02. open")
    high: str = Field(alias="03. high")
    low: str = Field(alias="04. low")
    price: str = Field(alias="05. price")
    volume: str = Field(alias="06. volume")
    latest_trading_day: str = Field(alias="07. latest trading day")
    previous_close: str = Field(alias="08. previous close")
    change: str = Field(alias="09. change")
    change_percent: str = Field(alias="10. change percent")


class AvGlobalQuoteResponse(ProviderPayload):
    global_quote: AvGlobalQuote = Field(alias="Global Quote")


class AvCompanyOverview(ProviderPayload):
    Symbol: str
    Name: str
    Description: str
    Exchange: str
    Sector: str
    Industry: str
    MarketCapitalization: str
    PERatio: str
    PEGRatio: str
    BookValue: str
    DividendPerShare: str
    DividendYield: str
    EPS: str
    ProfitMargin: str
    OperatingMarginTTM: str
    ReturnOnAssetsTTM: str
    ReturnOnEquityTTM: str
    RevenueTTM: str
    GrossProfitTTM: str
    QuarterlyEarningsGrowthYOY: str
    QuarterlyRevenueGrowthYOY: str
    AnalystTargetPrice: str
    TrailingPE: str
    ForwardPE: str
    PriceToSalesRatioTTM: str
    PriceToBookRatio: str
    EVToRevenue: str
    EVToEBITDA: str
    Beta: str
    week52_high: str = Field(alias="52WeekHigh")
    week52_low: str = Field(alias="52WeekLow")
    sma50: str = Field(alias="50DayMovingAverage")
    sma200: str = Field(alias="200DayMovingAverage")
    SharesOutstanding: str
    DividendDate: str | None = Field(default=None)
    ExDividendDate: str | None = Field(default=None)


# ---------------------------------------------------------------------------
# Financial Modeling Prep
# ---------------------------------------------------------------------------


class FmpQuote(ProviderPayload):
    symbol: str
    name: str
    price: float
    changesPercentage: float
    change: float
    dayLow: float
    dayHigh: float
    yearHigh: float
    yearLow: float
    marketCap: float
    priceAvg50: float
    priceAvg200: float
    exchange: str
    volume: float
    avgVolume: float
    open: float
    previousClose: float
    eps: float | None
    pe: float | None
    earningsAnnouncement: str | None
    sharesOutstanding: float
    timestamp: int


class FmpProfile(ProviderPayload):
    symbol: str
    companyName: str
    exchange: str
    industry: str
    sector: str
    description: str
    ceo: str | None
    website: str | None
    image: str | None
    ipoDate: str | None
    mktCap: float
    fullTimeEmployees: str | None
    country: str | None
    isEtf: bool
    isActivelyTrading: bool


class FmpRatiosTTM(ProviderPayload):
    """Subset of /ratios-ttm consumed by the fundamentals merge."""

    symbol: str
    date: str
    period: str
    currentRatio: float | None
    quickRatio: float | None
    grossProfitMargin: float | None
    operatingProfitMargin: float | None
    netProfitMargin: float | None
    returnOnAssets: float | None
    returnOnEquity: float | None
    debtEquityRatio: float | None
    interestCoverage: float | None
    freeCashFlowPerShare: float | None
    payoutRatio: float | None
    priceToBookRatio: float | None
    priceToSalesRatio: float | None
    priceEarningsRatio: float | None
    priceEarningsToGrowthRatio: float | None
    dividendYield: float | None
    enterpriseValueMultiple: float | None


class FmpKeyMetricsTTM(ProviderPayload):
    """Subset of /key-metrics-ttm consumed by the fundamentals merge."""

    symbol: str
    date: str
    period: str
    revenuePerShare: float | None
    freeCashFlowPerShare: float | None
    bookValuePerShare: float | None
    enterpriseValue: float | None
    peRatio: float | None
    priceToSalesRatio: float | None
    pbRatio: float | None
    enterpriseValueOverEBITDA: float | None
    debtToEquity: float | None
    currentRatio: float | None
    interestCoverage: float | None
    dividendYield: float | None
    payoutRatio: float | None
    roic: float | None
    roe: float | None


class FmpFinancialGrowth(ProviderPayload):
    """Subset of /financial-growth consumed by the fundamentals merge."""

    symbol: str
    date: str
    period: str
    revenueGrowth: float | None
    epsgrowth: float | None
    threeYRevenueGrowthPerShare: float | None
    threeYNetIncomeGrowthPerShare: float | None


class FmpConstituent(ProviderPayload):
    symbol: str


# ---------------------------------------------------------------------------
# NewsAPI
# ---------------------------------------------------------------------------


class NewsApiSource(ProviderPayload):
    id: str | None
    name: str


class NewsApiArticle(ProviderPayload):
    source: NewsApiSource
    author: str | None
    title: str
    description: str | None
    url: str
    urlToImage: str | None
    publishedAt: str
    content: str | None


class NewsApiResponse(ProviderPayload):
    status: str
    totalResults: int
    articles: list[NewsApiArticle]
