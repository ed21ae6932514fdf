"""Assemble report input from normalized provider records."""

from collections.abc import Iterable

from thesis_research.models.market import (
    CompanyOverview,
    NewsArticle,
    NormalizedFundamentals,
    NormalizedProfile,
    NormalizedQuote,
)
from thesis_research.models.report import StockReportInput


def format_headline(article: NewsArticle) -> str:
    return f"{article.published_at.date().isoformat()}: {article.title}"


def _first(*values: float | None) -> float | None:
    for value in values:
        if value is not None:
            return value
    return None


def build_report_input(
    profile: NormalizedProfile,
    quote: NormalizedQuote,
    fundamentals: NormalizedFundamentals | None = None,
    news: Iterable[NewsArticle] = (),
    overview: CompanyOverview | None = None,
) -> StockReportInput:
    """Merge profile, quote, fundamentals and news into one report input.

    Fundamentals take precedence for ratios; the quote and the Alpha Vantage
    overview fill the gaps. Forward P/E and analyst target price only come
    from the overview.
    """
    f = fundamentals
    o = overview

    market_cap = _first(quote.market_cap, profile.market_cap, o.profile.market_cap if o else None)

    return StockReportInput(
        ticker=profile.ticker,
        company_name=profile.name,
        price=quote.price,
        market_cap=market_cap or 0.0,
        sector=profile.sector or "",
        industry=profile.industry or "",
        description=profile.description,
        pe=_first(f.pe if f else None, quote.pe, o.pe if o else None),
        forward_pe=o.forward_pe if o else None,
        ps=_first(f.ps if f else None, o.ps if o else None),
        pb=_first(f.pb if f else None, o.pb if o else None),
        ev_ebitda=_first(f.ev_ebitda if f else None, o.ev_to_ebitda if o else None),
        gross_margin=f.gross_margin if f else None,
        operating_margin=_first(f.operating_margin if f else None, o.operating_margin if o else None),
        net_margin=_first(f.net_margin if f else None, o.profit_margin if o else None),
        roe=_first(f.roe if f else None, o.roe if o else None),
        roic=f.roic if f else None,
        revenue_growth_yoy=_first(f.revenue_growth_yoy if f else None, o.revenue_growth_yoy if o else None),
        eps_growth_yoy=_first(f.eps_growth_yoy if f else None, o.eps_growth_yoy if o else None),
        dividend_yield=_first(f.dividend_yield if f else None, o.dividend_yield if o else None),
        payout_ratio=f.payout_ratio if f else None,
        debt_to_equity=f.debt_to_equity if f else None,
        current_ratio=f.current_ratio if f else None,
        recent_news=[format_headline(article) for article in news],
        analyst_target_price=o.analyst_target_price if o else None,
    )
