"""NewsAPI fetcher module."""

from .client import NewsAPIClient

__all__ = ["NewsAPIClient"]
