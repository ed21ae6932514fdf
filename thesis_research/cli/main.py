"""CLI entry point for thesis-research."""

from pathlib import Path
from typing import Annotated, Optional

import typer
from dotenv import load_dotenv

from thesis_research.config import load_app_config
from thesis_research.errors import ConfigError

from . import stocks
from .common import console, setup_logging
from .report import app as report_app

app = typer.Typer(
    name="thesis",
    help="Stock research: market data, news and AI-generated reports.",
    no_args_is_help=True,
)


@app.callback()
def main(
    ctx: typer.Context,
    config: Annotated[
        Optional[Path],
        typer.Option("--config", "-c", help="Path to providers.yaml (default: bundled config dir)"),
    ] = None,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Enable verbose logging"),
    ] = False,
) -> None:
    load_dotenv()
    setup_logging(verbose)
    try:
        ctx.obj = {"config": load_app_config(config), "config_path": config}
    except (ConfigError, FileNotFoundError) as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)


# Register subcommands
app.command("quote")(stocks.quote)
app.command("overview")(stocks.overview)
app.command("fundamentals")(stocks.fundamentals)
app.command("news")(stocks.news)
app.add_typer(report_app, name="report", help="AI stock reports")


if __name__ == "__main__":
    app()
