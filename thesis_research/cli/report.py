"""AI report CLI commands."""

from typing import Annotated, Optional

import typer
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from thesis_research.ai.llm import LLMClient
from thesis_research.ai.pipeline import ReportPipeline
from thesis_research.ai.report_generator import ReportGenerator
from thesis_research.fetchers.fmp import FMPClient
from thesis_research.fetchers.news import NewsAPIClient
from thesis_research.fetchers.retry import RetryPolicy
from thesis_research.models.config import AppConfig
from thesis_research.models.report import GenerationResult, StoredReport, TriggerType
from thesis_research.normalizers.ticker import is_valid_ticker, normalize_ticker
from thesis_research.storage import ReportStore

from .common import console, get_config, require_key, run


app = typer.Typer(help="AI stock report commands", no_args_is_help=True)

TRIGGERS = ("earnings", "major_news", "price_move", "estimate_revision", "weekly_refresh", "manual")
VERDICT_STYLES = {"undervalued": "green", "fairly_valued": "yellow", "overvalued": "red"}


def _store(config: AppConfig) -> ReportStore:
    return ReportStore(config.storage_dir)


async def _generate(config: AppConfig, ticker: str, trigger: TriggerType, research: bool) -> GenerationResult:
    require_key(config.fmp, "FMP")

    llm = LLMClient.from_config(config.openai)
    research_client = None
    if research and config.perplexity is not None:
        if config.perplexity.resolve_api_key():
            research_client = LLMClient.from_config(config.perplexity)
        else:
            console.print("[yellow]Warning:[/yellow] No Perplexity key, skipping research")

    news_client = NewsAPIClient.from_config(config.news) if config.news.resolve_api_key() else None

    generator = ReportGenerator(
        llm,
        research_client,
        max_attempts=config.report_max_attempts,
        retry_policy=RetryPolicy(
            max_retries=config.report_max_attempts - 1,
            initial_delay_ms=config.retry.initial_delay_ms,
            max_delay_ms=config.retry.max_delay_ms,
            backoff_multiplier=config.retry.backoff_multiplier,
        ),
    )

    try:
        async with FMPClient.from_config(config.fmp) as fmp:
            pipeline = ReportPipeline(
                fmp,
                news_client,
                generator,
                _store(config),
                retry_policy=RetryPolicy.from_config(config.retry),
            )
            return await pipeline.run(ticker, trigger)
    finally:
        for client in (news_client, research_client, llm):
            if client is not None:
                await client.close()


def print_report(stored: StoredReport) -> None:
    report = stored.report
    verdict_style = VERDICT_STYLES[report.valuation_verdict]

    console.print(f"\n[bold]{stored.ticker}[/bold] report v{stored.version}")
    console.print(
        f"  Generated: {stored.generated_at.isoformat()} | Model: {stored.model_used or 'N/A'}"
        f" | Trigger: {stored.trigger_type} | Quality: {stored.quality_score if stored.quality_score is not None else 'N/A'}"
    )
    console.print(Panel(escape(report.executive_summary), title="Executive Summary"))

    console.print("[bold green]Bull case[/bold green]")
    for point in report.bull_case:
        console.print(f"  + {escape(point)}")
    console.print("[bold red]Bear case[/bold red]")
    for point in report.bear_case:
        console.print(f"  - {escape(point)}")

    console.print(Panel(
        escape(report.valuation_assessment),
        title=f"Valuation: [{verdict_style}]{report.valuation_verdict}[/{verdict_style}]",
    ))

    table = Table(title="Key metrics")
    table.add_column("Metric", style="bold")
    table.add_column("Value", justify="right")
    table.add_column("Why it matters")
    for metric in report.key_metrics:
        table.add_row(escape(metric.name), escape(metric.value), escape(metric.explanation))
    console.print(table)

    if report.recent_developments:
        console.print("[bold]Recent developments[/bold]")
        for item in report.recent_developments:
            console.print(f"  {item.date}  {escape(item.headline)}: {escape(item.summary)}")
    if report.catalyst_calendar:
        console.print("[bold]Catalysts[/bold]")
        for event in report.catalyst_calendar:
            console.print(f"  {event.date}  {escape(f'[{event.type}]')} {escape(event.event)}")

    if stored.quality_issues:
        console.print("[yellow]Quality issues:[/yellow]")
        for issue in stored.quality_issues:
            console.print(f"  - {issue}")


@app.command("generate")
def generate(
    ctx: typer.Context,
    ticker: Annotated[str, typer.Argument(help="Ticker symbol")],
    no_research: Annotated[
        bool,
        typer.Option("--no-research", help="Skip the Perplexity research step"),
    ] = False,
    trigger: Annotated[
        str,
        typer.Option("--trigger", "-t", help=f"Trigger type: {', '.join(TRIGGERS)}"),
    ] = "manual",
) -> None:
    """Generate and store a new report version.

    Example:
        thesis report generate AAPL --trigger earnings
    """
    symbol = normalize_ticker(ticker)
    if not is_valid_ticker(symbol):
        console.print(f"[red]Error:[/red] Invalid ticker: {ticker}")
        raise typer.Exit(1)
    if trigger not in TRIGGERS:
        console.print(f"[red]Error:[/red] Unknown trigger: {trigger}")
        console.print(f"Supported triggers: {', '.join(TRIGGERS)}")
        raise typer.Exit(1)

    config = get_config(ctx)
    console.print(f"\n[bold]Report generation[/bold] {symbol} (trigger: {trigger})\n")

    with console.status(f"Generating report for {symbol}..."):
        result = run(_generate(config, symbol, trigger, research=not no_research))

    console.print()
    console.print("[bold green]✓ Report generated[/bold green]")
    console.print(f"  Quality: {result.quality.overall}/100")
    console.print(f"  Attempts: {result.attempts}")
    console.print(f"  Duration: {result.generation_time_ms / 1000:.1f}s")

    stored = _store(config).latest(symbol)
    if stored is not None:
        print_report(stored)


@app.command("list")
def list_reports(
    ctx: typer.Context,
    ticker: Annotated[Optional[str], typer.Argument(help="Only this ticker")] = None,
) -> None:
    """List stored reports."""
    config = get_config(ctx)
    store = _store(config)
    tickers = [normalize_ticker(ticker)] if ticker else store.list_tickers()

    if not any(store.list_versions(t) for t in tickers):
        console.print(f"[yellow]No reports found in {store.base_dir}[/yellow]")
        return

    table = Table(title=f"Reports ({store.base_dir})")
    table.add_column("Ticker", style="bold")
    table.add_column("Version", justify="right")
    table.add_column("Generated")
    table.add_column("Trigger")
    table.add_column("Quality", justify="right")
    table.add_column("Verdict")

    for t in tickers:
        for version in store.list_versions(t):
            stored = store.load(t, version)
            table.add_row(
                stored.ticker,
                f"v{stored.version}",
                stored.generated_at.strftime("%Y-%m-%d %H:%M"),
                stored.trigger_type,
                str(stored.quality_score) if stored.quality_score is not None else "N/A",
                stored.report.valuation_verdict,
            )
    console.print(table)


@app.command("show")
def show(
    ctx: typer.Context,
    ticker: Annotated[str, typer.Argument(help="Ticker symbol")],
    version: Annotated[
        Optional[int],
        typer.Option("--version", "-V", min=1, help="Report version (default: latest)"),
    ] = None,
) -> None:
    """Print a stored report."""
    config = get_config(ctx)
    store = _store(config)
    symbol = normalize_ticker(ticker)

    if version is None:
        stored = store.latest(symbol)
        if stored is None:
            console.print(f"[yellow]No reports for {symbol}[/yellow]")
            raise typer.Exit(1)
    else:
        versions = store.list_versions(symbol)
        if version not in versions:
            console.print(f"[red]Error:[/red] No report v{version} for {symbol}")
            raise typer.Exit(1)
        stored = store.load(symbol, version)

    print_report(stored)
