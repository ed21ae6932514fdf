"""Rate-limited provider clients."""

from .alpha_vantage import AlphaVantageClient
from .fmp import FMPClient
from .http import HttpClient, RateLimiter
from .news import NewsAPIClient
from .retry import RetryPolicy, retry

__all__ = [
    "AlphaVantageClient",
    "FMPClient",
    "HttpClient",
    "NewsAPIClient",
    "RateLimiter",
    "RetryPolicy",
    "retry",
]
