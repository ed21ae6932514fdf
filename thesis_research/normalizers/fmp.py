"""Financial Modeling Prep payload normalization."""

from datetime import datetime, timezone

from thesis_research.models.market import NormalizedFundamentals, NormalizedProfile, NormalizedQuote
from thesis_research.models.providers import (
    FmpFinancialGrowth,
    FmpKeyMetricsTTM,
    FmpProfile,
    FmpQuote,
    FmpRatiosTTM,
)

from .common import parse_int, parse_number, parse_text


SOURCE = "fmp"


def normalize_fmp_quote(raw: FmpQuote) -> NormalizedQuote:
    """Normalize an FMP /quote record."""
    return NormalizedQuote(
        ticker=raw.symbol,
        name=raw.name,
        exchange=raw.exchange,
        price=float(raw.price),
        source=SOURCE,
        open=parse_number(raw.open),
        high=parse_number(raw.dayHigh),
        low=parse_number(raw.dayLow),
        previous_close=parse_number(raw.previousClose),
        change=parse_number(raw.change),
        change_percent=parse_number(raw.changesPercentage),
        volume=parse_int(raw.volume),
        avg_volume=parse_number(raw.avgVolume),
        year_high=parse_number(raw.yearHigh),
        year_low=parse_number(raw.yearLow),
        sma50=parse_number(raw.priceAvg50),
        sma200=parse_number(raw.priceAvg200),
        market_cap=parse_number(raw.marketCap),
        shares_outstanding=parse_number(raw.sharesOutstanding),
        eps=parse_number(raw.eps),
        pe=parse_number(raw.pe),
        earnings_date=parse_text(raw.earningsAnnouncement),
        timestamp=datetime.fromtimestamp(raw.timestamp, tz=timezone.utc),
    )


def normalize_fmp_profile(raw: FmpProfile) -> NormalizedProfile:
    """Normalize an FMP /profile record."""
    return NormalizedProfile(
        ticker=raw.symbol,
        name=raw.companyName,
        source=SOURCE,
        description=raw.description,
        exchange=parse_text(raw.exchange),
        sector=parse_text(raw.sector),
        industry=parse_text(raw.industry),
        market_cap=parse_number(raw.mktCap),
        ceo=parse_text(raw.ceo),
        website=parse_text(raw.website),
        logo_url=parse_text(raw.image),
        ipo_date=parse_text(raw.ipoDate),
        employees=parse_int(raw.fullTimeEmployees),
        country=parse_text(raw.country),
        is_etf=raw.isEtf,
        is_active=raw.isActivelyTrading,
    )


def _first(*values: float | None) -> float | None:
    """First value that normalizes to a finite number."""
    for value in values:
        number = parse_number(value)
        if number is not None:
            return number
    return None


def normalize_fmp_fundamentals(
    ticker: str,
    ratios: FmpRatiosTTM | None,
    metrics: FmpKeyMetricsTTM | None,
    growth: FmpFinancialGrowth | None,
    *,
    today: str | None = None,
) -> NormalizedFundamentals:
    """Merge TTM ratios, TTM key metrics and the latest growth record.

    Key metrics take precedence over ratios where both report a value.
    Any of the three inputs may be missing; their fields then stay None.

    Args:
        ticker: Requested ticker
        ratios: First /ratios-ttm record, if any
        metrics: First /key-metrics-ttm record, if any
        growth: First /financial-growth record, if any
        today: As-of date fallback when ratios carry none (YYYY-MM-DD)
    """
    r = ratios
    m = metrics
    g = growth

    as_of = r.date if r is not None else (today or datetime.now(timezone.utc).date().isoformat())

    return NormalizedFundamentals(
        ticker=ticker,
        date=as_of,
        source=SOURCE,
        # Valuation
        pe=_first(m and m.peRatio, r and r.priceEarningsRatio),
        pb=_first(m and m.pbRatio, r and r.priceToBookRatio),
        ps=_first(m and m.priceToSalesRatio, r and r.priceToSalesRatio),
        peg=_first(r and r.priceEarningsToGrowthRatio),
        ev_ebitda=_first(m and m.enterpriseValueOverEBITDA, r and r.enterpriseValueMultiple),
        enterprise_value=_first(m and m.enterpriseValue),
        # Profitability
        gross_margin=_first(r and r.grossProfitMargin),
        operating_margin=_first(r and r.operatingProfitMargin),
        net_margin=_first(r and r.netProfitMargin),
        roe=_first(m and m.roe, r and r.returnOnEquity),
        roa=_first(r and r.returnOnAssets),
        roic=_first(m and m.roic),
        # Dividends
        dividend_yield=_first(m and m.dividendYield, r and r.dividendYield),
        payout_ratio=_first(m and m.payoutRatio, r and r.payoutRatio),
        # Balance sheet
        debt_to_equity=_first(m and m.debtToEquity, r and r.debtEquityRatio),
        current_ratio=_first(m and m.currentRatio, r and r.currentRatio),
        quick_ratio=_first(r and r.quickRatio),
        interest_coverage=_first(m and m.interestCoverage, r and r.interestCoverage),
        # Per share
        book_value=_first(m and m.bookValuePerShare),
        fcf_per_share=_first(m and m.freeCashFlowPerShare, r and r.freeCashFlowPerShare),
        revenue_per_share=_first(m and m.revenuePerShare),
        # Growth
        revenue_growth_yoy=_first(g and g.revenueGrowth),
        eps_growth_yoy=_first(g and g.epsgrowth),
        revenue_growth_3y=_first(g and g.threeYRevenueGrowthPerShare),
        eps_growth_3y=_first(g and g.threeYNetIncomeGrowthPerShare),
    )
