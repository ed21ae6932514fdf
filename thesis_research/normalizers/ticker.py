"""Ticker symbol helpers."""

import re


TICKER_PATTERN = re.compile(r"^[A-Z]{1,5}(\.[A-Z])?$")


def normalize_ticker(ticker: str) -> str:
    """Uppercase and trim a ticker symbol."""
    return ticker.strip().upper()


def is_valid_ticker(ticker: str) -> bool:
    """Check for 1-5 letters with an optional share-class suffix (``BRK.B``)."""
    return TICKER_PATTERN.match(normalize_ticker(ticker)) is not None
