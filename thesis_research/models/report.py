"""AI stock report models."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


ValuationVerdict = Literal["undervalued", "fairly_valued", "overvalued"]
CatalystType = Literal["earnings", "dividend", "product", "regulatory", "other"]
TriggerType = Literal["earnings", "major_news", "price_move", "estimate_revision", "weekly_refresh", "manual"]


class ReportModel(BaseModel):
    """Base for LLM-produced structures.

    JSON keys are camelCase (``executiveSummary``) on input and output;
    snake_case and unknown keys are rejected, and instances are immutable
    once validated.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        extra="forbid",
        frozen=True,
    )


class KeyMetric(ReportModel):
    name: str
    value: str
    explanation: str


class RecentDevelopment(ReportModel):
    date: str = Field(description="YYYY-MM-DD")
    headline: str
    summary: str


class CatalystEvent(ReportModel):
    date: str = Field(description="YYYY-MM-DD")
    event: str
    type: CatalystType


class GeneratedReport(ReportModel):
    """Validated LLM report. Any violation discards the whole response."""

    executive_summary: str
    bull_case: list[str] = Field(min_length=3, max_length=5)
    bear_case: list[str] = Field(min_length=3, max_length=5)
    valuation_assessment: str
    valuation_verdict: ValuationVerdict
    key_metrics: list[KeyMetric] = Field(min_length=5, max_length=7)
    recent_developments: list[RecentDevelopment] | None = Field(default=None)
    catalyst_calendar: list[CatalystEvent] | None = Field(default=None)

    def to_json_dict(self) -> dict:
        """Serialize with the camelCase keys of the report JSON contract."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class QualityScore(BaseModel):
    """Heuristic quality assessment of a generated report."""

    overall: int = Field(ge=0, le=100)
    completeness: int = Field(ge=0, le=100)
    specificity: int = Field(ge=0, le=100)
    balance: int = Field(ge=0, le=100)
    issues: list[str] = Field(default_factory=list)


class StockReportInput(BaseModel):
    """Everything the prompt needs about one company.

    Only ticker, company name, price and market cap are required; every
    analytical metric may be unknown.
    """

    model_config = ConfigDict(allow_inf_nan=False)

    ticker: str = Field(min_length=1)
    company_name: str
    price: float
    market_cap: float

    sector: str = Field(default="")
    industry: str = Field(default="")
    description: str = Field(default="")

    # Valuation
    pe: float | None = Field(default=None)
    forward_pe: float | None = Field(default=None)
    ps: float | None = Field(default=None)
    pb: float | None = Field(default=None)
    ev_ebitda: float | None = Field(default=None)

    # Profitability (ratios, 0.25 == 25%)
    gross_margin: float | None = Field(default=None)
    operating_margin: float | None = Field(default=None)
    net_margin: float | None = Field(default=None)
    roe: float | None = Field(default=None)
    roic: float | None = Field(default=None)

    # Growth
    revenue_growth_yoy: float | None = Field(default=None)
    eps_growth_yoy: float | None = Field(default=None)

    # Dividends
    dividend_yield: float | None = Field(default=None)
    payout_ratio: float | None = Field(default=None)

    # Balance sheet
    debt_to_equity: float | None = Field(default=None)
    current_ratio: float | None = Field(default=None)

    recent_news: list[str] = Field(default_factory=list)

    # Analyst estimates
    analyst_target_price: float | None = Field(default=None)
    number_of_analysts: int | None = Field(default=None)


class GenerationResult(BaseModel):
    """Outcome of a successful generation run."""

    report: GeneratedReport
    quality: QualityScore
    research: str = Field(default="")
    generation_time_ms: int = Field(ge=0)
    model: str
    attempts: int = Field(ge=1)


class StoredReport(BaseModel):
    """A persisted report version for one ticker."""

    ticker: str
    version: int = Field(ge=1)
    generated_at: datetime
    model_used: str | None = Field(default=None)
    prompt_version: str | None = Field(default=None)
    trigger_type: TriggerType = Field(default="manual")
    quality_score: int | None = Field(default=None, ge=0, le=100)
    quality_issues: list[str] = Field(default_factory=list)
    generation_time_ms: int | None = Field(default=None)
    human_reviewed: bool = Field(default=False)
    report: GeneratedReport
