"""Heuristic quality scoring for generated reports.

Three sub-scores start at 100 and lose points per rule:

completeness
    -20 executive summary under 100 chars, -15 bull case under 3 points,
    -15 bear case under 3 points, -20 valuation assessment under 200 chars,
    -10 fewer than 5 key metrics.
specificity
    -5 per bull/bear point without a figure (``12%``, ``$40``, ``3x``),
    -20 if the valuation assessment has no figure.
balance
    ratio of the shorter to the longer joined case text; -30 below 0.5,
    -15 below 0.7.

``overall`` is the 40/35/25 weighted mean, rounded. Every score is clamped
to 0..100. One issue string is recorded per triggered rule, in rule order,
except the per-point specificity deductions.
"""

import re
from collections.abc import Sequence
from typing import Any, Protocol

from thesis_research.models.report import QualityScore


NUMBER_PATTERN = re.compile(r"\d+(\.\d+)?%|\$\d+|\d+x")


class ScorableReport(Protocol):
    executive_summary: str
    bull_case: Sequence[str]
    bear_case: Sequence[str]
    valuation_assessment: str
    key_metrics: Sequence[Any]


def _clamp(value: float) -> int:
    return int(max(0, min(100, value)))


def _round_half_up(value: float) -> int:
    # round() would send 62.5 to 62
    return int(value + 0.5) if value >= 0 else -int(-value + 0.5)


def _has_figure(text: str) -> bool:
    return NUMBER_PATTERN.search(text) is not None


def score_report_quality(report: ScorableReport) -> QualityScore:
    """Score a report's completeness, specificity and balance.

    Accepts any object with the report's fields, so drafts that would fail
    schema validation can be scored as well.
    """
    issues: list[str] = []
    completeness = 100
    specificity = 100
    balance = 100

    # Completeness
    if not report.executive_summary or len(report.executive_summary) < 100:
        completeness -= 20
        issues.append("Executive summary is too short")

    if len(report.bull_case) < 3:
        completeness -= 15
        issues.append("Bull case has fewer than 3 points")

    if len(report.bear_case) < 3:
        completeness -= 15
        issues.append("Bear case has fewer than 3 points")

    if not report.valuation_assessment or len(report.valuation_assessment) < 200:
        completeness -= 20
        issues.append("Valuation assessment is too short")

    if len(report.key_metrics) < 5:
        completeness -= 10
        issues.append("Fewer than 5 key metrics")

    # Specificity
    for point in [*report.bull_case, *report.bear_case]:
        if not _has_figure(point):
            specificity -= 5

    if not _has_figure(report.valuation_assessment or ""):
        specificity -= 20
        issues.append("Valuation assessment lacks specific numbers")

    # Balance
    bull_length = len(" ".join(report.bull_case))
    bear_length = len(" ".join(report.bear_case))
    longest = max(bull_length, bear_length)
    ratio = min(bull_length, bear_length) / longest if longest else 1.0

    if ratio < 0.5:
        balance -= 30
        issues.append("Bull and bear cases are significantly unbalanced")
    elif ratio < 0.7:
        balance -= 15
        issues.append("Bull and bear cases could be more balanced")

    completeness = _clamp(completeness)
    specificity = _clamp(specificity)
    balance = _clamp(balance)
    overall = _round_half_up(completeness * 0.4 + specificity * 0.35 + balance * 0.25)

    return QualityScore(
        overall=_clamp(overall),
        completeness=completeness,
        specificity=specificity,
        balance=balance,
        issues=issues,
    )
