"""Stock research toolkit: rate-limited provider clients and AI report generation."""

__version__ = "0.1.0"
