"""Prompts for AI stock report generation and research."""

from thesis_research.models.report import StockReportInput


PROMPT_VERSION = "v1"

SYSTEM_PROMPT = """You are an expert equity research analyst creating stock reports for retail investors. Your reports should be:

1. **Plain English**: Avoid jargon. When you must use financial terms, explain them briefly.
2. **Balanced**: Present both bull and bear cases honestly. Don't be promotional.
3. **Specific**: Use concrete numbers, dates, and facts. Avoid vague statements.
4. **Actionable**: Help investors understand what to watch for and when.
5. **Honest about uncertainty**: Acknowledge when data is limited or conclusions are uncertain.

Your analysis should be grounded in:
- Recent financial statements and earnings calls
- Industry dynamics and competitive positioning
- Valuation relative to peers and history
- Near-term catalysts and risks

Never provide specific buy/sell recommendations or price targets as investment advice. Present analysis for educational purposes only."""

RESEARCH_SYSTEM_PROMPT = (
    "You are a financial research assistant. "
    "Provide factual, well-sourced information about stocks."
)

REPORT_JSON_CONTRACT = """{
  "executiveSummary": "2-3 sentence overview of the company and current investment situation",
  "bullCase": ["Point 1", "Point 2", "Point 3", "Point 4", "Point 5"],
  "bearCase": ["Point 1", "Point 2", "Point 3", "Point 4", "Point 5"],
  "valuationAssessment": "2-3 paragraph analysis of current valuation vs history and peers",
  "valuationVerdict": "undervalued" | "fairly_valued" | "overvalued",
  "keyMetrics": [
    {"name": "Metric Name", "value": "Current Value", "explanation": "Why this matters for this stock"},
    ...
  ],
  "recentDevelopments": [
    {"date": "YYYY-MM-DD", "headline": "Brief headline", "summary": "1-2 sentence summary"},
    ...
  ],
  "catalystCalendar": [
    {"date": "YYYY-MM-DD", "event": "Event description", "type": "earnings|dividend|product|regulatory|other"},
    ...
  ]
}"""

REPORT_GUIDELINES = """Important guidelines:
1. Bull and bear cases should each have 3-5 specific, substantive points
2. Key metrics should include 5-7 most relevant metrics for THIS specific stock
3. Be specific with dates and numbers where possible
4. Valuation verdict should be based on multiple valuation methods, not just P/E
5. Recent developments should focus on material events from the last 30 days
6. Catalyst calendar should include known upcoming events (earnings, ex-div dates, etc.)"""


def format_number(value: float | None) -> str:
    if value is None:
        return "N/A"
    return f"{value:.2f}"


def format_percent(value: float | None) -> str:
    """Format a ratio (0.253) as a percent (25.3%)."""
    if value is None:
        return "N/A"
    return f"{value * 100:.1f}%"


def format_market_cap(value: float) -> str:
    if value >= 1e12:
        return f"${value / 1e12:.2f}T"
    if value >= 1e9:
        return f"${value / 1e9:.2f}B"
    if value >= 1e6:
        return f"${value / 1e6:.2f}M"
    return f"${value:.0f}"


def build_stock_report_prompt(data: StockReportInput) -> str:
    """Build the user prompt for one company.

    Output is a pure function of the input: the same input always yields
    the same prompt.
    """
    target = f"${data.analyst_target_price:.2f}" if data.analyst_target_price else "N/A"
    analysts = data.number_of_analysts if data.number_of_analysts is not None else "N/A"

    if data.recent_news:
        news = "\n".join(f"{i}. {item}" for i, item in enumerate(data.recent_news, start=1))
    else:
        news = "No recent news available."

    return f"""Generate a comprehensive stock analysis report for {data.ticker} ({data.company_name}).

## Company Overview
- **Sector**: {data.sector}
- **Industry**: {data.industry}
- **Description**: {data.description}

## Current Market Data
- **Stock Price**: ${data.price:.2f}
- **Market Cap**: {format_market_cap(data.market_cap)}

## Valuation Metrics
- **P/E Ratio**: {format_number(data.pe)}
- **Forward P/E**: {format_number(data.forward_pe)}
- **P/S Ratio**: {format_number(data.ps)}
- **P/B Ratio**: {format_number(data.pb)}
- **EV/EBITDA**: {format_number(data.ev_ebitda)}

## Profitability
- **Gross Margin**: {format_percent(data.gross_margin)}
- **Operating Margin**: {format_percent(data.operating_margin)}
- **Net Margin**: {format_percent(data.net_margin)}
- **ROE**: {format_percent(data.roe)}
- **ROIC**: {format_percent(data.roic)}

## Growth
- **Revenue Growth (YoY)**: {format_percent(data.revenue_growth_yoy)}
- **EPS Growth (YoY)**: {format_percent(data.eps_growth_yoy)}

## Dividends
- **Dividend Yield**: {format_percent(data.dividend_yield)}
- **Payout Ratio**: {format_percent(data.payout_ratio)}

## Financial Health
- **Debt/Equity**: {format_number(data.debt_to_equity)}
- **Current Ratio**: {format_number(data.current_ratio)}

## Analyst Coverage
- **Average Target Price**: {target}
- **Number of Analysts**: {analysts}

## Recent News
{news}

---

Please provide your analysis in the following JSON format:

{REPORT_JSON_CONTRACT}

{REPORT_GUIDELINES}"""


def build_research_prompt(ticker: str, company_name: str) -> str:
    return f"""Research {ticker} ({company_name}). Focus on:
1. Most recent earnings results and any guidance changes
2. Major news from the last 30 days
3. Recent analyst rating changes
4. Upcoming catalysts (earnings date, product launches, etc.)
5. Key competitive developments

Be specific with dates, numbers, and sources."""
