from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Dict, Optional

import pandas as pd

from qdacoverage.models import DocumentReport

logger = logging.getLogger(__name__)

RESULT_COLUMNS = [
    "Document",
    "Strategy",
    "Sentences",
    "Encoded Sentences",
    "Coverage %",
    "Records Applied",
    "Segments Not Found",
    "Records Skipped",
]


class Storage:
    """Results CSV with one row per analyzed document, keyed by document name."""

    def __init__(self, out_csv: Path) -> None:
        self.out_csv = Path(out_csv)
        self.out_csv.parent.mkdir(parents=True, exist_ok=True)
        self._df: Optional[pd.DataFrame] = None

        self._load_or_init_csv()

    def _load_or_init_csv(self) -> None:
        """Load existing CSV or initialize with the result columns."""
        if self.out_csv.exists():
            try:
                self._df = pd.read_csv(self.out_csv, dtype=str, keep_default_na=False)
                for col in RESULT_COLUMNS:
                    self._ensure_column(col)
                logger.info("Loaded existing results CSV with %d rows", len(self._df))
            except (pd.errors.ParserError, pd.errors.EmptyDataError, UnicodeDecodeError) as e:
                logger.warning("Failed to load existing results CSV, creating new: %s", e)
                self._df = pd.DataFrame(columns=RESULT_COLUMNS)
        else:
            self._df = pd.DataFrame(columns=RESULT_COLUMNS)

    def _save_csv(self) -> None:
        if self._df is not None:
            self._df.to_csv(self.out_csv, index=False, encoding="utf-8")

    def _ensure_column(self, col_name: str) -> None:
        if self._df is not None and col_name not in self._df.columns:
            self._df[col_name] = ""

    def _upsert_row(self, document: str, data: Dict[str, Any]) -> None:
        """Insert or update a row by document name."""
        if self._df is None:
            return

        mask = self._df["Document"] == document
        if mask.any():
            for col, val in data.items():
                self._df.loc[mask, col] = val
        else:
            new_row = {col: "" for col in self._df.columns}
            new_row["Document"] = document
            new_row.update(data)
            self._df = pd.concat([self._df, pd.DataFrame([new_row])], ignore_index=True)

        self._save_csv()

    def save_report(self, report: DocumentReport) -> None:
        self._upsert_row(
            report.document,
            {
                "Strategy": report.strategy,
                "Sentences": str(report.stats.total),
                "Encoded Sentences": str(report.stats.encoded),
                "Coverage %": f"{report.stats.percentage:.2f}",
                "Records Applied": str(report.records_applied),
                "Segments Not Found": str(report.segments_not_found),
                "Records Skipped": str(report.records_skipped),
            },
        )
        logger.info("Saved results for %s to %s", report.document, self.out_csv)

    def to_frame(self) -> pd.DataFrame:
        return self._df.copy() if self._df is not None else pd.DataFrame(columns=RESULT_COLUMNS)
