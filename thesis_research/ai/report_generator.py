"""AI stock report generation.

Drives an LLM through research, generation, validation and scoring for one
company. Generation is retried with exponential backoff; a response that is
not valid JSON or fails the report schema counts as a failed attempt.
"""

import asyncio
import json
import logging
import time
from collections.abc import Awaitable, Callable
from enum import Enum
from typing import Any

from thesis_research.ai.llm import LLMClient
from thesis_research.ai.prompts import (
    RESEARCH_SYSTEM_PROMPT,
    SYSTEM_PROMPT,
    build_research_prompt,
    build_stock_report_prompt,
)
from thesis_research.ai.quality import score_report_quality
from thesis_research.errors import ConfigError, ReportGenerationError
from thesis_research.fetchers.retry import RetryPolicy, retry
from thesis_research.models.report import GeneratedReport, GenerationResult, StockReportInput


logger = logging.getLogger(__name__)

REPORT_TEMPERATURE = 0.7
REPORT_MAX_TOKENS = 4000
RESEARCH_TEMPERATURE = 0.3
RESEARCH_MAX_TOKENS = 2000
RESEARCH_NEWS_PREFIX = "[AI Research Summary]: "
RESEARCH_EXCERPT_CHARS = 500


class ReportState(str, Enum):
    IDLE = "idle"
    RESEARCHING = "researching"
    GENERATING = "generating"
    VALIDATING = "validating"
    SCORING = "scoring"
    DONE = "done"
    FAILED = "failed"


def parse_report(content: str) -> GeneratedReport:
    """Parse and validate one LLM response.

    Raises:
        ReportGenerationError: If the content is empty or not valid JSON
        pydantic.ValidationError: If the JSON violates the report schema
    """
    if not content:
        raise ReportGenerationError("No content in LLM response")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as e:
        raise ReportGenerationError(f"LLM response is not valid JSON: {e}") from e
    return GeneratedReport.model_validate(data)


class ReportGenerator:
    """Generates validated, scored reports.

    Args:
        llm: Client used for report generation (JSON mode)
        research: Optional client used for the research step (e.g. Perplexity)
        max_attempts: Total generation attempts before giving up
        retry_policy: Overrides the default 1s, 2s, 4s... backoff
        sleep: Awaitable sleep taking seconds (injectable for tests)
    """

    def __init__(
        self,
        llm: LLMClient,
        research: LLMClient | None = None,
        *,
        max_attempts: int = 3,
        retry_policy: RetryPolicy | None = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        if max_attempts < 1:
            raise ValueError("max_attempts must be >= 1")
        self.llm = llm
        self.research = research
        self.retry_policy = retry_policy or RetryPolicy(
            max_retries=max_attempts - 1,
            initial_delay_ms=1000,
            backoff_multiplier=2,
        )
        self.sleep = sleep
        self.state = ReportState.IDLE
        self.last_attempts = 0

    @property
    def model(self) -> str:
        return self.llm.model

    async def research_stock(self, ticker: str, company_name: str) -> str:
        """Collect recent developments for a company from the research model."""
        if self.research is None:
            raise ConfigError("No research client configured")

        self.state = ReportState.RESEARCHING
        logger.info(f"Researching {ticker}")
        return await self.research.complete(
            RESEARCH_SYSTEM_PROMPT,
            build_research_prompt(ticker, company_name),
            temperature=RESEARCH_TEMPERATURE,
            max_tokens=RESEARCH_MAX_TOKENS,
        )

    async def generate_report(self, data: StockReportInput) -> GeneratedReport:
        """Generate one validated report, retrying failed attempts.

        Raises:
            The error from the final attempt once every attempt has failed
        """
        prompt = build_stock_report_prompt(data)
        self.last_attempts = 0

        async def attempt() -> GeneratedReport:
            self.last_attempts += 1
            number = self.last_attempts
            self.state = ReportState.GENERATING
            try:
                content = await self.llm.complete(
                    SYSTEM_PROMPT,
                    prompt,
                    temperature=REPORT_TEMPERATURE,
                    max_tokens=REPORT_MAX_TOKENS,
                    json_mode=True,
                )
                self.state = ReportState.VALIDATING
                return parse_report(content)
            except Exception as e:
                logger.warning(f"Attempt {number} for {data.ticker} failed: {type(e).__name__}: {e}")
                raise

        try:
            report = await retry(attempt, self.retry_policy, sleep=self.sleep)
        except Exception:
            self.state = ReportState.FAILED
            logger.error(f"Report generation for {data.ticker} failed after {self.last_attempts} attempts")
            raise

        logger.info(f"Generated report for {data.ticker} in {self.last_attempts} attempt(s)")
        return report

    async def generate_report_with_research(self, data: StockReportInput) -> GenerationResult:
        """Research (when configured), generate and score a report.

        A research failure is logged and generation proceeds without it.
        Research output is appended to a copy of ``data.recent_news``; the
        caller's input is left untouched.
        """
        started = time.monotonic()
        research = ""

        if self.research is not None:
            try:
                research = await self.research_stock(data.ticker, data.company_name)
            except Exception as e:
                logger.warning(f"Research for {data.ticker} failed, continuing without it: {e}")
                research = ""

        if research:
            data = data.model_copy(update={
                "recent_news": [*data.recent_news, f"{RESEARCH_NEWS_PREFIX}{research[:RESEARCH_EXCERPT_CHARS]}..."],
            })

        report = await self.generate_report(data)

        self.state = ReportState.SCORING
        quality = score_report_quality(report)
        if quality.issues:
            logger.info(f"{data.ticker} quality {quality.overall}: {'; '.join(quality.issues)}")

        self.state = ReportState.DONE
        return GenerationResult(
            report=report,
            quality=quality,
            research=research,
            generation_time_ms=int((time.monotonic() - started) * 1000),
            model=self.model,
            attempts=self.last_attempts,
        )
