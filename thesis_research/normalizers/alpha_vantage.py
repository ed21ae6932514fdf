"""Alpha Vantage payload normalization."""

from thesis_research.errors import SchemaValidationError
from thesis_research.models.market import CompanyOverview, NormalizedProfile, NormalizedQuote
from thesis_research.models.providers import AvCompanyOverview, AvGlobalQuote

from .common import parse_int, parse_number, parse_percent, parse_text


SOURCE = "alpha_vantage"


def normalize_av_quote(raw: AvGlobalQuote) -> NormalizedQuote:
    """Normalize a GLOBAL_QUOTE record.

    Args:
        raw: Validated ``Global Quote`` object

    Returns:
        NormalizedQuote with sentinel values mapped to None

    Raises:
        SchemaValidationError: If the quote carries no usable price
    """
    price = parse_number(raw.price)
    if price is None:
        raise SchemaValidationError(SOURCE, f"Quote for {raw.symbol} has no price", payload=raw.price)

    return NormalizedQuote(
        ticker=raw.symbol,
        price=price,
        source=SOURCE,
        open=parse_number(raw.open),
        high=parse_number(raw.high),
        low=parse_number(raw.low),
        volume=parse_int(raw.volume),
        previous_close=parse_number(raw.previous_close),
        change=parse_number(raw.change),
        change_percent=parse_percent(raw.change_percent),
        latest_trading_day=parse_text(raw.latest_trading_day),
    )


def normalize_av_overview(raw: AvCompanyOverview) -> CompanyOverview:
    """Normalize an OVERVIEW record into a profile plus trailing metrics."""
    profile = NormalizedProfile(
        ticker=raw.Symbol,
        name=raw.Name,
        source=SOURCE,
        description=raw.Description,
        exchange=parse_text(raw.Exchange),
        sector=parse_text(raw.Sector),
        industry=parse_text(raw.Industry),
        market_cap=parse_number(raw.MarketCapitalization),
    )

    return CompanyOverview(
        profile=profile,
        pe=parse_number(raw.PERatio),
        forward_pe=parse_number(raw.ForwardPE),
        peg=parse_number(raw.PEGRatio),
        ps=parse_number(raw.PriceToSalesRatioTTM),
        pb=parse_number(raw.PriceToBookRatio),
        ev_to_revenue=parse_number(raw.EVToRevenue),
        ev_to_ebitda=parse_number(raw.EVToEBITDA),
        book_value=parse_number(raw.BookValue),
        eps=parse_number(raw.EPS),
        dividend_yield=parse_number(raw.DividendYield),
        profit_margin=parse_number(raw.ProfitMargin),
        operating_margin=parse_number(raw.OperatingMarginTTM),
        roa=parse_number(raw.ReturnOnAssetsTTM),
        roe=parse_number(raw.ReturnOnEquityTTM),
        revenue=parse_number(raw.RevenueTTM),
        gross_profit=parse_number(raw.GrossProfitTTM),
        eps_growth_yoy=parse_number(raw.QuarterlyEarningsGrowthYOY),
        revenue_growth_yoy=parse_number(raw.QuarterlyRevenueGrowthYOY),
        analyst_target_price=parse_number(raw.AnalystTargetPrice),
        beta=parse_number(raw.Beta),
        week52_high=parse_number(raw.week52_high),
        week52_low=parse_number(raw.week52_low),
        sma50=parse_number(raw.sma50),
        sma200=parse_number(raw.sma200),
        shares_outstanding=parse_number(raw.SharesOutstanding),
        ex_dividend_date=parse_text(raw.ExDividendDate),
    )
