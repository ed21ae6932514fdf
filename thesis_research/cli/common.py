"""Shared CLI plumbing: console, logging, config and error handling."""

import asyncio
import logging
from collections.abc import Coroutine
from pathlib import Path
from typing import Any, TypeVar

import typer
from rich.console import Console
from rich.logging import RichHandler

from thesis_research.config import load_app_config
from thesis_research.errors import ConfigError, ThesisResearchError
from thesis_research.models.config import AppConfig, ProviderConfig


console = Console()
logger = logging.getLogger(__name__)

T = TypeVar("T")


def setup_logging(verbose: bool = False) -> None:
    """Setup logging with rich handler."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=True)],
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(logging.DEBUG if verbose else logging.WARNING)


def get_config(ctx: typer.Context) -> AppConfig:
    """Config loaded by the root callback, or loaded now for direct calls."""
    if isinstance(ctx.obj, dict) and isinstance(ctx.obj.get("config"), AppConfig):
        return ctx.obj["config"]
    path: Path | None = ctx.obj.get("config_path") if isinstance(ctx.obj, dict) else None
    return load_app_config(path)


def require_key(config: ProviderConfig, name: str) -> None:
    if not config.resolve_api_key():
        env = f" (set {config.api_key_env})" if config.api_key_env else ""
        raise ConfigError(f"No API key configured for {name}{env}")


def run(coro: Coroutine[Any, Any, T]) -> T:
    """Run a command coroutine, mapping failures to exit codes.

    Typed errors print a one-line message and exit 1; anything else is
    logged with its traceback and also exits 1. Ctrl-C exits 130.
    """
    try:
        return asyncio.run(coro)
    except KeyboardInterrupt:
        console.print("\n[yellow]Interrupted by user[/yellow]")
        raise typer.Exit(130)
    except ThesisResearchError as e:
        console.print(f"[red]Error:[/red] {e}")
        raise typer.Exit(1)
    except Exception as e:
        console.print(f"\n[red]Error:[/red] {e}")
        logger.exception("Command failed")
        raise typer.Exit(1)


def fmt(value: float | None, spec: str = ".2f", suffix: str = "") -> str:
    if value is None:
        return "N/A"
    return f"{value:{spec}}{suffix}"


def fmt_ratio(value: float | None) -> str:
    """0.253 -> 25.3%"""
    if value is None:
        return "N/A"
    return f"{value * 100:.1f}%"
