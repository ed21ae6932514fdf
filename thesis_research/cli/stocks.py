"""Market data CLI commands."""

from typing import Annotated

import typer
from rich.markup import escape
from rich.table import Table

from thesis_research.fetchers.alpha_vantage import AlphaVantageClient
from thesis_research.fetchers.fmp import FMPClient
from thesis_research.fetchers.news import NewsAPIClient
from thesis_research.models.market import CompanyOverview, NormalizedFundamentals, NormalizedQuote
from thesis_research.normalizers.news import analyze_sentiment
from thesis_research.normalizers.ticker import is_valid_ticker, normalize_ticker

from .common import console, fmt, fmt_ratio, get_config, require_key, run


SENTIMENT_STYLES = {"positive": "green", "negative": "red", "neutral": "dim"}


def _check_tickers(tickers: list[str]) -> list[str]:
    symbols = [normalize_ticker(t) for t in tickers]
    invalid = [t for t in symbols if not is_valid_ticker(t)]
    if invalid:
        console.print(f"[red]Error:[/red] Invalid ticker(s): {', '.join(invalid)}")
        raise typer.Exit(1)
    return symbols


def _quote_table(quotes: dict[str, NormalizedQuote]) -> Table:
    table = Table(title="Quotes")
    table.add_column("Ticker", style="bold")
    table.add_column("Price", justify="right")
    table.add_column("Change", justify="right")
    table.add_column("Volume", justify="right")
    table.add_column("Market Cap", justify="right")
    table.add_column("P/E", justify="right")

    for ticker, quote in quotes.items():
        change = quote.change_percent
        style = "green" if change is not None and change >= 0 else "red"
        table.add_row(
            ticker,
            fmt(quote.price),
            f"[{style}]{fmt(change, '+.2f', '%')}[/{style}]",
            fmt(quote.volume, ",d"),
            fmt(quote.market_cap, ",.0f"),
            fmt(quote.pe),
        )
    return table


def quote(
    ctx: typer.Context,
    tickers: Annotated[list[str], typer.Argument(help="Ticker symbols")],
    provider: Annotated[
        str,
        typer.Option("--provider", "-p", help="Quote provider: fmp or alpha_vantage"),
    ] = "fmp",
) -> None:
    """Show latest quotes.

    Example:
        thesis quote AAPL MSFT NVDA
    """
    symbols = _check_tickers(tickers)
    if provider not in ("fmp", "alpha_vantage"):
        console.print(f"[red]Error:[/red] Unknown provider: {provider}")
        raise typer.Exit(1)
    config = get_config(ctx)

    async def fetch() -> dict[str, NormalizedQuote]:
        if provider == "fmp":
            require_key(config.fmp, "FMP")
            async with FMPClient.from_config(config.fmp) as client:
                return await client.get_quotes(symbols)
        require_key(config.alpha_vantage, "Alpha Vantage")
        async with AlphaVantageClient.from_config(config.alpha_vantage) as client:
            return await client.get_quotes(symbols)

    quotes = run(fetch())
    if not quotes:
        console.print("[yellow]No quotes returned[/yellow]")
        raise typer.Exit(1)

    console.print(_quote_table(quotes))
    missing = [t for t in symbols if t not in quotes]
    if missing:
        console.print(f"[yellow]Missing:[/yellow] {', '.join(missing)}")


def overview(
    ctx: typer.Context,
    ticker: Annotated[str, typer.Argument(help="Ticker symbol")],
) -> None:
    """Show the Alpha Vantage company overview."""
    symbol = _check_tickers([ticker])[0]
    config = get_config(ctx)

    async def fetch() -> CompanyOverview:
        require_key(config.alpha_vantage, "Alpha Vantage")
        async with AlphaVantageClient.from_config(config.alpha_vantage) as client:
            return await client.get_overview(symbol)

    data = run(fetch())
    profile = data.profile

    console.print(f"\n[bold]{escape(profile.name)}[/bold] ({profile.ticker})")
    console.print(f"  {profile.exchange or 'N/A'} | {profile.sector or 'N/A'} | {profile.industry or 'N/A'}")
    if profile.description:
        console.print(f"\n{escape(profile.description)}\n")

    table = Table(show_header=False)
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Market Cap", fmt(profile.market_cap, ",.0f"))
    table.add_row("P/E", fmt(data.pe))
    table.add_row("Forward P/E", fmt(data.forward_pe))
    table.add_row("PEG", fmt(data.peg))
    table.add_row("P/S", fmt(data.ps))
    table.add_row("P/B", fmt(data.pb))
    table.add_row("EV/EBITDA", fmt(data.ev_to_ebitda))
    table.add_row("Profit Margin", fmt_ratio(data.profit_margin))
    table.add_row("ROE", fmt_ratio(data.roe))
    table.add_row("Dividend Yield", fmt_ratio(data.dividend_yield))
    table.add_row("Beta", fmt(data.beta))
    table.add_row("52W Range", f"{fmt(data.week52_low)} - {fmt(data.week52_high)}")
    table.add_row("Analyst Target", fmt(data.analyst_target_price))
    console.print(table)


def fundamentals(
    ctx: typer.Context,
    ticker: Annotated[str, typer.Argument(help="Ticker symbol")],
) -> None:
    """Show trailing fundamentals from FMP."""
    symbol = _check_tickers([ticker])[0]
    config = get_config(ctx)

    async def fetch() -> NormalizedFundamentals:
        require_key(config.fmp, "FMP")
        async with FMPClient.from_config(config.fmp) as client:
            return await client.get_fundamentals(symbol)

    data = run(fetch())

    table = Table(title=f"{data.ticker} fundamentals (as of {data.date})")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    rows = [
        ("P/E", fmt(data.pe)),
        ("P/B", fmt(data.pb)),
        ("P/S", fmt(data.ps)),
        ("PEG", fmt(data.peg)),
        ("EV/EBITDA", fmt(data.ev_ebitda)),
        ("Gross Margin", fmt_ratio(data.gross_margin)),
        ("Operating Margin", fmt_ratio(data.operating_margin)),
        ("Net Margin", fmt_ratio(data.net_margin)),
        ("ROE", fmt_ratio(data.roe)),
        ("ROIC", fmt_ratio(data.roic)),
        ("Debt/Equity", fmt(data.debt_to_equity)),
        ("Current Ratio", fmt(data.current_ratio)),
        ("Dividend Yield", fmt_ratio(data.dividend_yield)),
        ("Revenue Growth (YoY)", fmt_ratio(data.revenue_growth_yoy)),
        ("EPS Growth (YoY)", fmt_ratio(data.eps_growth_yoy)),
    ]
    for name, value in rows:
        table.add_row(name, value)
    console.print(table)


def news(
    ctx: typer.Context,
    ticker: Annotated[str, typer.Argument(help="Ticker symbol")],
    limit: Annotated[int, typer.Option("--limit", "-n", min=1, max=100, help="Articles to show")] = 10,
) -> None:
    """Show recent news with keyword sentiment."""
    symbol = _check_tickers([ticker])[0]
    config = get_config(ctx)

    async def fetch():
        require_key(config.news, "NewsAPI")
        async with NewsAPIClient.from_config(config.news) as client:
            return await client.get_stock_news(symbol, page_size=limit)

    articles = run(fetch())
    if not articles:
        console.print(f"[yellow]No news found for {symbol}[/yellow]")
        return

    table = Table(title=f"{symbol} news")
    table.add_column("Date")
    table.add_column("Source")
    table.add_column("Headline")
    table.add_column("Sentiment")
    for article in articles:
        sentiment = analyze_sentiment(f"{article.title} {article.description or ''}")
        style = SENTIMENT_STYLES[sentiment.label]
        table.add_row(
            article.published_at.date().isoformat(),
            escape(article.source),
            escape(article.title),
            f"[{style}]{sentiment.label} ({sentiment.score:+.2f})[/{style}]",
        )
    console.print(table)
