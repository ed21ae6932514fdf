"""LLM-backed report generation."""

from .input_builder import build_report_input
from .llm import LLMClient
from .pipeline import QuoteSyncResult, ReportPipeline, sync_quotes
from .prompts import PROMPT_VERSION, build_research_prompt, build_stock_report_prompt
from .quality import score_report_quality
from .report_generator import ReportGenerator, ReportState

__all__ = [
    "LLMClient",
    "PROMPT_VERSION",
    "QuoteSyncResult",
    "ReportGenerator",
    "ReportPipeline",
    "ReportState",
    "build_report_input",
    "build_research_prompt",
    "build_stock_report_prompt",
    "score_report_quality",
    "sync_quotes",
]
