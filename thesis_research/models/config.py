"""Configuration models for provider clients and report generation."""

import os
from typing import Any

from pydantic import BaseModel, Field


class RateLimitConfig(BaseModel):
    """Token-bucket rate limiting configuration."""

    requests_per_minute: float = Field(gt=0)
    requests_per_day: int | None = Field(default=None, gt=0)


class RetryConfig(BaseModel):
    """Exponential backoff configuration."""

    max_retries: int = Field(default=3, ge=0, le=10)
    initial_delay_ms: float = Field(default=1000.0, ge=0.0)
    max_delay_ms: float = Field(default=30000.0, ge=0.0)
    backoff_multiplier: float = Field(default=2.0, ge=1.0)


class ProviderConfig(BaseModel):
    """Market-data or news provider configuration."""

    base_url: str
    api_key: str | None = Field(default=None)
    api_key_env: str | None = Field(default=None, description="Environment variable holding the key")
    headers: dict[str, str] = Field(default_factory=dict)
    rate_limit: RateLimitConfig | None = Field(default=None)
    timeout: float = Field(default=30.0, gt=0.0)

    def resolve_api_key(self) -> str | None:
        """Explicit key wins, then the configured environment variable."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.environ.get(self.api_key_env) or None
        return None


class LLMConfig(BaseModel):
    """Chat-completion provider configuration."""

    model: str
    base_url: str | None = Field(default=None)
    api_key: str | None = Field(default=None)
    api_key_env: str | None = Field(default=None)
    rate_limit: RateLimitConfig | None = Field(default=None)
    timeout: float = Field(default=60.0, gt=0.0)

    def resolve_api_key(self) -> str | None:
        """Explicit key wins, then the configured environment variable."""
        if self.api_key:
            return self.api_key
        if self.api_key_env:
            return os.environ.get(self.api_key_env) or None
        return None


def _default_alpha_vantage() -> ProviderConfig:
    return ProviderConfig(
        base_url="https://www.alphavantage.co",
        api_key_env="ALPHA_VANTAGE_API_KEY",
        rate_limit=RateLimitConfig(requests_per_minute=5, requests_per_day=500),
    )


def _default_fmp() -> ProviderConfig:
    return ProviderConfig(
        base_url="https://financialmodelingprep.com/api/v3",
        api_key_env="FMP_API_KEY",
        rate_limit=RateLimitConfig(requests_per_minute=10, requests_per_day=250),
    )


def _default_news() -> ProviderConfig:
    return ProviderConfig(
        base_url="https://newsapi.org/v2",
        api_key_env="NEWS_API_KEY",
        rate_limit=RateLimitConfig(requests_per_minute=10, requests_per_day=100),
    )


def _default_openai() -> LLMConfig:
    return LLMConfig(
        model="gpt-4o",
        api_key_env="OPENAI_API_KEY",
        rate_limit=RateLimitConfig(requests_per_minute=60),
    )


def _default_perplexity() -> LLMConfig:
    return LLMConfig(
        model="sonar-pro",
        base_url="https://api.perplexity.ai",
        api_key_env="PERPLEXITY_API_KEY",
        rate_limit=RateLimitConfig(requests_per_minute=20),
    )


class AppConfig(BaseModel):
    """Top-level application configuration."""

    alpha_vantage: ProviderConfig = Field(default_factory=_default_alpha_vantage)
    fmp: ProviderConfig = Field(default_factory=_default_fmp)
    news: ProviderConfig = Field(default_factory=_default_news)
    openai: LLMConfig = Field(default_factory=_default_openai)
    perplexity: LLMConfig | None = Field(default_factory=_default_perplexity)
    retry: RetryConfig = Field(default_factory=RetryConfig)
    report_max_attempts: int = Field(default=3, ge=1, le=10)
    storage_dir: str = Field(default="data/reports")

    @classmethod
    def from_yaml(cls, data: dict[str, Any] | None) -> "AppConfig":
        """Create config from parsed YAML data.

        Provider sections are merged over the built-in defaults so a file
        only needs to name what it changes. ``perplexity: null`` disables
        research.
        """
        data = data or {}
        defaults = cls()
        config_data: dict[str, Any] = {}

        for name in ("alpha_vantage", "fmp", "news", "openai", "perplexity"):
            if name not in data:
                continue
            section = data[name]
            if section is None:
                config_data[name] = None
                continue
            base = getattr(defaults, name)
            merged = base.model_dump() if base is not None else {}
            merged.update(section)
            config_data[name] = merged

        if "retry" in data:
            config_data["retry"] = RetryConfig(**data["retry"])
        for key in ("report_max_attempts", "storage_dir"):
            if data.get(key) is not None:
                config_data[key] = data[key]

        return cls(**config_data)
