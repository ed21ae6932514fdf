"""Financial Modeling Prep fetcher module."""

from .client import FMPClient

__all__ = ["FMPClient"]
