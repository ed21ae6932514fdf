"""Typed errors raised by the provider and report-generation layers."""

from typing import Any


class ThesisResearchError(Exception):
    """Base class for all errors raised by this package."""


class ConfigError(ThesisResearchError):
    """Configuration is missing or invalid."""


class RateLimitExceeded(ThesisResearchError):
    """Daily request cap reached. Not retryable within the current window."""

    def __init__(self, message: str, limit: int | None = None):
        super().__init__(message)
        self.limit = limit


class HttpError(ThesisResearchError):
    """Provider answered with a non-2xx status."""

    def __init__(self, status: int, status_text: str, body: str, url: str | None = None):
        super().__init__(f"HTTP {status}: {status_text}")
        self.status = status
        self.status_text = status_text
        self.body = body
        self.url = url


class RequestTimeout(ThesisResearchError):
    """Request was cancelled after the per-call timeout elapsed."""

    def __init__(self, url: str, timeout: float):
        super().__init__(f"Request to {url} timed out after {timeout:.1f}s")
        self.url = url
        self.timeout = timeout


class SchemaValidationError(ThesisResearchError):
    """Payload did not match the expected schema.

    Raised for provider responses whose shape changed and for LLM output that
    does not satisfy the report schema.
    """

    def __init__(
        self,
        source: str,
        message: str,
        errors: list[dict[str, Any]] | None = None,
        payload: Any = None,
    ):
        super().__init__(f"{source}: {message}")
        self.source = source
        self.errors = errors or []
        self.payload = payload


class ReportGenerationError(ThesisResearchError):
    """LLM call produced no usable content."""


class ReportNotFound(ThesisResearchError):
    """No stored report for the requested ticker/version."""
