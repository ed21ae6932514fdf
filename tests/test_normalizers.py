"""Tests for thesis_research.normalizers."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from thesis_research.errors import SchemaValidationError
from thesis_research.models.providers import (
    AvCompanyOverview,
    AvGlobalQuoteResponse,
    FmpFinancialGrowth,
    FmpKeyMetricsTTM,
    FmpQuote,
    FmpRatiosTTM,
    NewsApiResponse,
)
from thesis_research.normalizers import (
    analyze_sentiment,
    is_valid_ticker,
    normalize_av_overview,
    normalize_av_quote,
    normalize_fmp_fundamentals,
    normalize_fmp_quote,
    normalize_news_article,
    normalize_ticker,
    parse_int,
    parse_number,
    parse_percent,
    parse_text,
)
from thesis_research.normalizers.common import parse_payload, parse_payload_list

from conftest import fmp_quote


class TestParseNumber:
    @pytest.mark.parametrize("value", ["None", "none", "-", "", "  ", "N/A", "null", "NaN", None])
    def test_sentinels_become_none(self, value):
        assert parse_number(value) is None

    def test_never_zero_for_missing(self):
        assert parse_number("None") != 0

    def test_parses_strings_and_numbers(self):
        assert parse_number("19.50") == 19.5
        assert parse_number("1,234.5") == 1234.5
        assert parse_number(7) == 7.0
        assert parse_number(0) == 0.0

    def test_rejects_non_finite_and_bool(self):
        assert parse_number(float("inf")) is None
        assert parse_number(float("nan")) is None
        assert parse_number(True) is None
        assert parse_number("abc") is None

    def test_percent_and_int(self):
        assert parse_percent("1.2515%") == pytest.approx(1.2515)
        assert parse_percent("-") is None
        assert parse_int("3456789") == 3456789
        assert parse_int("None") is None

    def test_parse_text(self):
        assert parse_text("  NYSE ") == "NYSE"
        assert parse_text("None") is None
        assert parse_text(None) is None


class TestAlphaVantage:
    def test_quote(self, av_quote_payload):
        raw = AvGlobalQuoteResponse.model_validate(av_quote_payload).global_quote
        quote = normalize_av_quote(raw)

        assert quote.ticker == "IBM"
        assert quote.price == 169.9
        assert quote.volume == 3456789
        assert quote.change_percent == pytest.approx(1.2515)
        assert quote.latest_trading_day == "2024-05-10"
        assert quote.source == "alpha_vantage"

    def test_quote_without_price_fails(self, av_quote_payload):
        av_quote_payload["Global Quote"]["05. price"] = "None"
        raw = AvGlobalQuoteResponse.model_validate(av_quote_payload).global_quote
        with pytest.raises(SchemaValidationError):
            normalize_av_quote(raw)

    def test_overview_maps_sentinels_to_none(self, av_overview_payload):
        overview = normalize_av_overview(AvCompanyOverview.model_validate(av_overview_payload))

        assert overview.ticker == "IBM"
        assert overview.profile.market_cap is None
        assert overview.peg is None
        assert overview.pe == 19.5
        assert overview.forward_pe == 17.1
        assert overview.week52_high == 199.18
        assert overview.analyst_target_price == 181.3
        assert overview.ex_dividend_date == "2024-05-09"


class TestFmp:
    def test_quote(self):
        quote = normalize_fmp_quote(FmpQuote.model_validate(fmp_quote("AAPL", 189.5)))

        assert quote.ticker == "AAPL"
        assert quote.price == 189.5
        assert quote.volume == 52_000_000
        assert quote.pe == 29.47
        assert quote.timestamp == datetime.fromtimestamp(1715371200, tz=timezone.utc)

    def test_quote_with_null_pe(self):
        payload = fmp_quote()
        payload["pe"] = None
        payload["eps"] = None
        quote = normalize_fmp_quote(FmpQuote.model_validate(payload))
        assert quote.pe is None
        assert quote.eps is None

    def test_fundamentals_prefer_key_metrics(self, fmp_ratios_payload, fmp_metrics_payload, fmp_growth_payload):
        fundamentals = normalize_fmp_fundamentals(
            "AAPL",
            FmpRatiosTTM.model_validate(fmp_ratios_payload[0]),
            FmpKeyMetricsTTM.model_validate(fmp_metrics_payload[0]),
            FmpFinancialGrowth.model_validate(fmp_growth_payload[0]),
        )

        assert fundamentals.date == "2024-05-10"
        assert fundamentals.pe == 29.0
        assert fundamentals.pb == 43.5
        # key metric is null, ratio fills in
        assert fundamentals.ps == 7.6
        assert fundamentals.ev_ebitda == 22.5
        assert fundamentals.roe == 1.47
        assert fundamentals.roic == 0.55
        assert fundamentals.revenue_growth_yoy == -0.028
        assert fundamentals.eps_growth_3y == 0.65

    def test_fundamentals_with_missing_sections(self):
        fundamentals = normalize_fmp_fundamentals("AAPL", None, None, None, today="2024-05-10")
        assert fundamentals.date == "2024-05-10"
        assert fundamentals.pe is None
        assert fundamentals.revenue_growth_yoy is None


class TestNews:
    def test_article(self, news_payload):
        raw = NewsApiResponse.model_validate(news_payload).articles[0]
        article = normalize_news_article(raw)

        assert article.source == "Reuters"
        assert article.published_at == datetime(2024, 5, 3, 14, 30, tzinfo=timezone.utc)
        assert article.image_url is None

    def test_sentiment_labels(self):
        assert analyze_sentiment("Shares surge after record profit").label == "positive"
        assert analyze_sentiment("Stock plunges on lawsuit and weak guidance").label == "negative"
        assert analyze_sentiment("Company schedules annual meeting").label == "neutral"

    def test_sentiment_without_keywords_is_zero(self):
        result = analyze_sentiment("Annual meeting scheduled for Tuesday")
        assert result.score == 0
        assert result.label == "neutral"

    def test_sentiment_score_bounded(self):
        result = analyze_sentiment("surge surge gain growth beat")
        assert -1 <= result.score <= 1


class TestPayloadValidation:
    def test_missing_field_raises_schema_error(self, av_quote_payload):
        del av_quote_payload["Global Quote"]["05. price"]
        with pytest.raises(SchemaValidationError) as exc_info:
            parse_payload(AvGlobalQuoteResponse, av_quote_payload, "alpha_vantage.GLOBAL_QUOTE")
        assert exc_info.value.source == "alpha_vantage.GLOBAL_QUOTE"
        assert exc_info.value.errors

    def test_type_change_raises_schema_error(self):
        payload = fmp_quote()
        payload["price"] = "189.5"
        with pytest.raises(SchemaValidationError):
            parse_payload(FmpQuote, payload, "fmp.quote")

    def test_extra_fields_are_ignored(self):
        payload = fmp_quote()
        payload["newField"] = "added by provider"
        assert parse_payload(FmpQuote, payload, "fmp.quote").symbol == "AAPL"

    def test_list_payload_must_be_array(self):
        with pytest.raises(SchemaValidationError):
            parse_payload_list(FmpQuote, {"Error Message": "Invalid API KEY"}, "fmp.quote")


class TestTicker:
    def test_normalize(self):
        assert normalize_ticker(" aapl ") == "AAPL"

    @pytest.mark.parametrize("ticker", ["AAPL", "brk.b", "F", "GOOGL"])
    def test_valid(self, ticker):
        assert is_valid_ticker(ticker)

    @pytest.mark.parametrize("ticker", ["", "TOOLONG", "AB1", "BRK.BB", "A-B"])
    def test_invalid(self, ticker):
        assert not is_valid_ticker(ticker)
