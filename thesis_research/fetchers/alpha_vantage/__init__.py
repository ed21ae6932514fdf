"""Alpha Vantage market-data fetcher module."""

from .client import AlphaVantageClient

__all__ = ["AlphaVantageClient"]
