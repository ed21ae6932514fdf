"""Tests for the thesis CLI."""

from __future__ import annotations

import pytest
from typer.testing import CliRunner

from thesis_research.cli.main import app
from thesis_research.models.report import GeneratedReport, GenerationResult, QualityScore
from thesis_research.storage import ReportStore

from conftest import make_report_dict


runner = CliRunner()


@pytest.fixture
def config_path(tmp_path):
    path = tmp_path / "providers.yaml"
    path.write_text(f"storage_dir: {tmp_path / 'reports'}\n")
    return path


@pytest.fixture
def store(tmp_path) -> ReportStore:
    return ReportStore(tmp_path / "reports")


def save_report(store: ReportStore, ticker: str, quality: int = 88) -> None:
    store.save(ticker, GenerationResult(
        report=GeneratedReport.model_validate(make_report_dict()),
        quality=QualityScore(overall=quality, completeness=100, specificity=90, balance=70),
        generation_time_ms=2500,
        model="gpt-4o",
        attempts=1,
    ))


class TestReportCommands:
    def test_list_empty(self, config_path):
        result = runner.invoke(app, ["--config", str(config_path), "report", "list"])
        assert result.exit_code == 0
        assert "No reports found" in result.output

    def test_list_and_show(self, config_path, store):
        save_report(store, "AAPL")
        save_report(store, "AAPL", quality=91)

        listed = runner.invoke(app, ["--config", str(config_path), "report", "list", "AAPL"])
        assert listed.exit_code == 0
        assert "v2" in listed.output

        shown = runner.invoke(app, ["--config", str(config_path), "report", "show", "aapl", "--version", "1"])
        assert shown.exit_code == 0
        assert "AAPL" in shown.output
        assert "Bull case" in shown.output

    def test_show_missing(self, config_path):
        result = runner.invoke(app, ["--config", str(config_path), "report", "show", "MSFT"])
        assert result.exit_code == 1

    def test_generate_rejects_unknown_trigger(self, config_path):
        result = runner.invoke(app, ["--config", str(config_path), "report", "generate", "AAPL", "--trigger", "whim"])
        assert result.exit_code == 1
        assert "Unknown trigger" in result.output


class TestMarketCommands:
    def test_invalid_ticker(self, config_path):
        result = runner.invoke(app, ["--config", str(config_path), "quote", "TOOLONG"])
        assert result.exit_code == 1
        assert "Invalid ticker" in result.output

    def test_missing_api_key(self, config_path, monkeypatch):
        monkeypatch.delenv("FMP_API_KEY", raising=False)
        monkeypatch.setattr("thesis_research.cli.main.load_dotenv", lambda: False)
        result = runner.invoke(app, ["--config", str(config_path), "fundamentals", "AAPL"])
        assert result.exit_code == 1
        assert "FMP_API_KEY" in result.output

    def test_missing_config_file(self, tmp_path):
        result = runner.invoke(app, ["--config", str(tmp_path / "missing.yaml"), "report", "list"])
        assert result.exit_code == 1
