"""NewsAPI article normalization and keyword sentiment."""

from dataclasses import dataclass
from datetime import datetime
from typing import Literal

from thesis_research.errors import SchemaValidationError
from thesis_research.models.market import NewsArticle
from thesis_research.models.providers import NewsApiArticle

from .common import parse_text


SOURCE = "newsapi"

POSITIVE_WORDS = (
    "surge", "soar", "jump", "gain", "rise", "rally", "boost", "growth",
    "profit", "beat", "exceed", "strong", "bullish", "upgrade", "buy",
    "outperform", "record", "high", "success", "positive", "optimistic",
)

NEGATIVE_WORDS = (
    "drop", "fall", "plunge", "decline", "loss", "miss", "weak", "bearish",
    "downgrade", "sell", "underperform", "low", "fail", "negative", "concern",
    "risk", "warning", "cut", "slash", "layoff", "recession", "crash",
)


def _parse_published_at(value: str) -> datetime:
    try:
        return datetime.fromisoformat(value.replace("Z", "+00:00"))
    except ValueError as e:
        raise SchemaValidationError(SOURCE, f"Invalid publishedAt timestamp: {value!r}", payload=value) from e


def normalize_news_article(raw: NewsApiArticle) -> NewsArticle:
    """Normalize a NewsAPI article."""
    return NewsArticle(
        title=raw.title,
        url=raw.url,
        source=raw.source.name,
        published_at=_parse_published_at(raw.publishedAt),
        description=parse_text(raw.description),
        image_url=parse_text(raw.urlToImage),
        author=parse_text(raw.author),
        content=parse_text(raw.content),
    )


@dataclass(frozen=True)
class SentimentResult:
    score: float
    label: Literal["positive", "negative", "neutral"]


def analyze_sentiment(text: str) -> SentimentResult:
    """Keyword-count sentiment in [-1, 1].

    Each listed word counts once if it appears anywhere in the text
    (substring match, case-insensitive).
    """
    lower = text.lower()
    positive = sum(1 for word in POSITIVE_WORDS if word in lower)
    negative = sum(1 for word in NEGATIVE_WORDS if word in lower)

    total = positive + negative
    if total == 0:
        return SentimentResult(score=0.0, label="neutral")

    score = (positive - negative) / total
    if score > 0.2:
        label = "positive"
    elif score < -0.2:
        label = "negative"
    else:
        label = "neutral"

    return SentimentResult(score=score, label=label)
