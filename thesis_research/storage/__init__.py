"""Storage layer for generated reports."""

from .reports import ReportStore

__all__ = ["ReportStore"]
