"""Data models for market data, configuration and AI reports."""

from .config import AppConfig, LLMConfig, ProviderConfig, RateLimitConfig, RetryConfig
from .market import (
    CompanyOverview,
    NewsArticle,
    NewsSearchOptions,
    NormalizedFundamentals,
    NormalizedProfile,
    NormalizedQuote,
)
from .report import (
    CatalystEvent,
    GeneratedReport,
    GenerationResult,
    KeyMetric,
    QualityScore,
    RecentDevelopment,
    StockReportInput,
    StoredReport,
)

__all__ = [
    "AppConfig",
    "LLMConfig",
    "ProviderConfig",
    "RateLimitConfig",
    "RetryConfig",
    "CompanyOverview",
    "NewsArticle",
    "NewsSearchOptions",
    "NormalizedFundamentals",
    "NormalizedProfile",
    "NormalizedQuote",
    "CatalystEvent",
    "GeneratedReport",
    "GenerationResult",
    "KeyMetric",
    "QualityScore",
    "RecentDevelopment",
    "StockReportInput",
    "StoredReport",
]
