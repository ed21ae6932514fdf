"""Normalizers converting provider-specific payloads to unified records."""

from .alpha_vantage import normalize_av_overview, normalize_av_quote
from .common import parse_int, parse_number, parse_percent, parse_text
from .fmp import normalize_fmp_fundamentals, normalize_fmp_profile, normalize_fmp_quote
from .news import SentimentResult, analyze_sentiment, normalize_news_article
from .ticker import is_valid_ticker, normalize_ticker

__all__ = [
    "normalize_av_overview",
    "normalize_av_quote",
    "normalize_fmp_fundamentals",
    "normalize_fmp_profile",
    "normalize_fmp_quote",
    "normalize_news_article",
    "analyze_sentiment",
    "SentimentResult",
    "parse_int",
    "parse_number",
    "parse_percent",
    "parse_text",
    "is_valid_ticker",
    "normalize_ticker",
]
