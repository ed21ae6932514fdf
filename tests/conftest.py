"""Shared fixtures: fake clock, provider payloads and LLM stubs."""

from __future__ import annotations

import json
from types import SimpleNamespace
from typing import Any

import pytest

from thesis_research.models.report import StockReportInput


class FakeClock:
    """Millisecond clock advanced only by the fake sleep."""

    def __init__(self, start: float = 0.0):
        self.now = start
        self.sleeps: list[float] = []

    def __call__(self) -> float:
        return self.now

    async def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds * 1000.0


class SleepRecorder:
    def __init__(self):
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


class FakeLLM:
    """Stands in for LLMClient: returns queued responses or raises queued errors."""

    def __init__(self, responses: list[Any], model: str = "gpt-4o"):
        self.responses = list(responses)
        self.model = model
        self.calls: list[dict[str, Any]] = []

    async def complete(self, system: str, user: str, **kwargs: Any) -> str:
        self.calls.append({"system": system, "user": user, **kwargs})
        response = self.responses.pop(0)
        if isinstance(response, BaseException):
            raise response
        return response

    async def close(self) -> None:
        pass


def make_report_dict(
    bull: int = 3,
    bear: int = 3,
    metrics: int = 6,
    summary: str | None = None,
    assessment: str | None = None,
) -> dict[str, Any]:
    return {
        "executiveSummary": summary if summary is not None else (
            "XYZ Corp is a mid-cap industrial supplier trading near its five-year average multiple "
            "while revenue growth has slowed to 4% and margins are stable."
        ),
        "bullCase": [f"Revenue could grow 12% as backlog point {i} converts" for i in range(bull)],
        "bearCase": [f"Margins could compress by 3% if input cost point {i} rises" for i in range(bear)],
        "valuationAssessment": assessment if assessment is not None else (
            "At 18x trailing earnings XYZ trades at a 10% discount to peers and close to its own "
            "ten-year median. On EV/EBITDA of 11x the picture is similar. A discounted cash flow "
            "with 5% growth and a 9% discount rate points to roughly $52 per share."
        ),
        "valuationVerdict": "fairly_valued",
        "keyMetrics": [
            {"name": f"Metric {i}", "value": f"{i}.0", "explanation": "Tracks operating leverage"}
            for i in range(metrics)
        ],
    }


def make_report_json(**kwargs: Any) -> str:
    return json.dumps(make_report_dict(**kwargs))


@pytest.fixture
def report_input() -> StockReportInput:
    return StockReportInput(
        ticker="XYZ",
        company_name="XYZ Corp",
        price=48.25,
        market_cap=12_500_000_000,
        sector="Industrials",
        industry="Machinery",
        description="Industrial equipment supplier.",
        pe=None,
        gross_margin=0.253,
        recent_news=["2024-05-01: XYZ wins contract"],
    )


@pytest.fixture
def fake_clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def sleep_recorder() -> SleepRecorder:
    return SleepRecorder()


@pytest.fixture
def av_quote_payload() -> dict[str, Any]:
    return {
        "Global Quote": {
            "01. symbol": "IBM",
            "02. open": "168.1000",
            "03. high": "170.2500",
            "04. low": "167.5000",
            "05. price": "169.9000",
            "06. volume": "3456789",
            "07. latest trading day": "2024-05-10",
            "08. previous close": "167.8000",
            "09. change": "2.1000",
            "10. change percent": "1.2515%",
        }
    }


@pytest.fixture
def av_overview_payload() -> dict[str, Any]:
    return {
        "Symbol": "IBM",
        "Name": "International Business Machines",
        "Description": "IBM provides hybrid cloud and AI services.",
        "Exchange": "NYSE",
        "Sector": "TECHNOLOGY",
        "Industry": "COMPUTER & OFFICE EQUIPMENT",
        "MarketCapitalization": "None",
        "PERatio": "19.5",
        "PEGRatio": "-",
        "BookValue": "25.2",
        "DividendPerShare": "6.64",
        "DividendYield": "0.0391",
        "EPS": "8.14",
        "ProfitMargin": "0.134",
        "OperatingMarginTTM": "0.143",
        "ReturnOnAssetsTTM": "0.046",
        "ReturnOnEquityTTM": "0.372",
        "RevenueTTM": "61860000000",
        "GrossProfitTTM": "34300000000",
        "QuarterlyEarningsGrowthYOY": "0.05",
        "QuarterlyRevenueGrowthYOY": "0.015",
        "AnalystTargetPrice": "181.3",
        "TrailingPE": "19.5",
        "ForwardPE": "17.1",
        "PriceToSalesRatioTTM": "2.6",
        "PriceToBookRatio": "6.7",
        "EVToRevenue": "3.3",
        "EVToEBITDA": "14.2",
        "Beta": "0.71",
        "52WeekHigh": "199.18",
        "52WeekLow": "130.68",
        "50DayMovingAverage": "184.5",
        "200DayMovingAverage": "165.2",
        "SharesOutstanding": "916000000",
        "DividendDate": "2024-06-10",
        "ExDividendDate": "2024-05-09",
    }


def fmp_quote(symbol: str = "AAPL", price: float = 189.5) -> dict[str, Any]:
    return {
        "symbol": symbol,
        "name": f"{symbol} Inc.",
        "price": price,
        "changesPercentage": 1.05,
        "change": 1.97,
        "dayLow": 187.1,
        "dayHigh": 190.2,
        "yearHigh": 199.62,
        "yearLow": 164.08,
        "marketCap": 2_930_000_000_000,
        "priceAvg50": 176.3,
        "priceAvg200": 181.1,
        "exchange": "NASDAQ",
        "volume": 52_000_000,
        "avgVolume": 58_000_000,
        "open": 187.5,
        "previousClose": 187.53,
        "eps": 6.43,
        "pe": 29.47,
        "earningsAnnouncement": "2024-07-25T20:00:00.000+0000",
        "sharesOutstanding": 15_460_000_000,
        "timestamp": 1715371200,
    }


@pytest.fixture
def fmp_profile_payload() -> list[dict[str, Any]]:
    return [{
        "symbol": "AAPL",
        "companyName": "Apple Inc.",
        "exchange": "NASDAQ",
        "industry": "Consumer Electronics",
        "sector": "Technology",
        "description": "Apple designs smartphones and computers.",
        "ceo": "Mr. Timothy D. Cook",
        "website": "https://www.apple.com",
        "image": "https://example.com/AAPL.png",
        "ipoDate": "1980-12-12",
        "mktCap": 2_930_000_000_000,
        "fullTimeEmployees": "161000",
        "country": "US",
        "isEtf": False,
        "isActivelyTrading": True,
    }]


@pytest.fixture
def fmp_ratios_payload() -> list[dict[str, Any]]:
    return [{
        "symbol": "AAPL",
        "date": "2024-05-10",
        "period": "TTM",
        "currentRatio": 1.04,
        "quickRatio": 0.92,
        "grossProfitMargin": 0.456,
        "operatingProfitMargin": 0.302,
        "netProfitMargin": 0.261,
        "returnOnAssets": 0.27,
        "returnOnEquity": 1.47,
        "debtEquityRatio": 1.7,
        "interestCoverage": 29.1,
        "freeCashFlowPerShare": 6.8,
        "payoutRatio": 0.15,
        "priceToBookRatio": 44.0,
        "priceToSalesRatio": 7.6,
        "priceEarningsRatio": 29.4,
        "priceEarningsToGrowthRatio": 2.1,
        "dividendYield": 0.0051,
        "enterpriseValueMultiple": 22.5,
    }]


@pytest.fixture
def fmp_metrics_payload() -> list[dict[str, Any]]:
    return [{
        "symbol": "AAPL",
        "date": "2024-05-10",
        "period": "TTM",
        "revenuePerShare": 24.6,
        "freeCashFlowPerShare": 6.9,
        "bookValuePerShare": 4.3,
        "enterpriseValue": 2_980_000_000_000,
        "peRatio": 29.0,
        "priceToSalesRatio": None,
        "pbRatio": 43.5,
        "enterpriseValueOverEBITDA": None,
        "debtToEquity": 1.65,
        "currentRatio": None,
        "interestCoverage": None,
        "dividendYield": None,
        "payoutRatio": None,
        "roic": 0.55,
        "roe": None,
    }]


@pytest.fixture
def fmp_growth_payload() -> list[dict[str, Any]]:
    return [{
        "symbol": "AAPL",
        "date": "2023-09-30",
        "period": "FY",
        "revenueGrowth": -0.028,
        "epsgrowth": 0.0025,
        "threeYRevenueGrowthPerShare": 0.38,
        "threeYNetIncomeGrowthPerShare": 0.65,
    }]


@pytest.fixture
def news_payload() -> dict[str, Any]:
    return {
        "status": "ok",
        "totalResults": 2,
        "articles": [
            {
                "source": {"id": None, "name": "Reuters"},
                "author": "Jane Doe",
                "title": "Apple shares surge after record buyback",
                "description": "Strong iPhone demand beat estimates.",
                "url": "https://example.com/a",
                "urlToImage": None,
                "publishedAt": "2024-05-03T14:30:00Z",
                "content": None,
            },
            {
                "source": {"id": "bloomberg", "name": "Bloomberg"},
                "author": None,
                "title": "Apple faces lawsuit over App Store",
                "description": None,
                "url": "https://example.com/b",
                "urlToImage": "https://example.com/b.png",
                "publishedAt": "2024-05-02T09:00:00Z",
                "content": "Full text",
            },
        ],
    }


def openai_response(content: str | None) -> SimpleNamespace:
    """Minimal object shaped like a chat completion."""
    message = SimpleNamespace(content=content)
    return SimpleNamespace(choices=[SimpleNamespace(message=message)])
