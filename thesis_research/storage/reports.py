"""Versioned report storage.

Directory structure:
    data/
      reports/
        AAPL/
          v1.json
          v2.json
        MSFT/
          v1.json

Each file is one StoredReport. Versions count up from 1 per ticker and
are never rewritten.
"""

import logging
import re
from datetime import datetime, timezone
from pathlib import Path

import orjson

from thesis_research.ai.prompts import PROMPT_VERSION
from thesis_research.errors import ReportNotFound
from thesis_research.models.report import GenerationResult, StoredReport, TriggerType
from thesis_research.normalizers.ticker import normalize_ticker


logger = logging.getLogger(__name__)

VERSION_FILE = re.compile(r"^v(\d+)\.json$")


class ReportStore:
    """File-backed store of generated reports, one directory per ticker."""

    def __init__(self, base_dir: Path | str = "data/reports"):
        self.base_dir = Path(base_dir)

    def _ticker_dir(self, ticker: str) -> Path:
        return self.base_dir / normalize_ticker(ticker)

    def _path(self, ticker: str, version: int) -> Path:
        return self._ticker_dir(ticker) / f"v{version}.json"

    def list_versions(self, ticker: str) -> list[int]:
        """Stored versions for a ticker, ascending."""
        ticker_dir = self._ticker_dir(ticker)
        if not ticker_dir.is_dir():
            return []
        versions = []
        for path in ticker_dir.iterdir():
            match = VERSION_FILE.match(path.name)
            if match:
                versions.append(int(match.group(1)))
        return sorted(versions)

    def list_tickers(self) -> list[str]:
        if not self.base_dir.is_dir():
            return []
        return sorted(
            path.name for path in self.base_dir.iterdir()
            if path.is_dir() and self.list_versions(path.name)
        )

    def save(
        self,
        ticker: str,
        result: GenerationResult,
        trigger_type: TriggerType = "manual",
        generated_at: datetime | None = None,
    ) -> StoredReport:
        """Persist a generation result as the ticker's next version.

        If another writer claims the same version first, the next free
        version is used instead.
        """
        ticker = normalize_ticker(ticker)
        versions = self.list_versions(ticker)
        version = versions[-1] + 1 if versions else 1
        generated_at = generated_at or datetime.now(timezone.utc)

        while True:
            stored = StoredReport(
                ticker=ticker,
                version=version,
                generated_at=generated_at,
                model_used=result.model,
                prompt_version=PROMPT_VERSION,
                trigger_type=trigger_type,
                quality_score=result.quality.overall,
                quality_issues=list(result.quality.issues),
                generation_time_ms=result.generation_time_ms,
                report=result.report,
            )

            path = self._path(ticker, version)
            path.parent.mkdir(parents=True, exist_ok=True)
            try:
                with open(path, "xb") as f:
                    f.write(orjson.dumps(
                        stored.model_dump(mode="json", by_alias=True, exclude_none=True),
                        option=orjson.OPT_INDENT_2 | orjson.OPT_SORT_KEYS,
                    ))
            except FileExistsError:
                logger.warning(f"{path} already exists, trying v{version + 1}")
                version += 1
                continue
            break

        logger.info(f"Report written: {path}")
        return stored

    def load(self, ticker: str, version: int) -> StoredReport:
        path = self._path(ticker, version)
        if not path.exists():
            raise ReportNotFound(f"No report v{version} for {normalize_ticker(ticker)}")
        with open(path, "rb") as f:
            return StoredReport.model_validate(orjson.loads(f.read()))

    def latest(self, ticker: str) -> StoredReport | None:
        """Most recent version for a ticker, or None if none is stored."""
        versions = self.list_versions(ticker)
        if not versions:
            return None
        return self.load(ticker, versions[-1])
