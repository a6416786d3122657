"""Analyze command - Sentence coverage of coded segments per document."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import List, Optional, Sequence

from qdacoverage.conf.config import settings
from qdacoverage.core.matching import build_strategy
from qdacoverage.errors import (
    FileAccessError,
    MalformedRecordError,
    PositionConsistencyError,
)
from qdacoverage.models import AnnotationRecord, DocumentReport, SentenceStats
from qdacoverage.services.storage import Storage
from qdacoverage.utils.csv_loader import load_annotations
from qdacoverage.utils.text import document_matches, read_document

logger = logging.getLogger(__name__)


def run_analyze(
    documents: Sequence[str | Path],
    annotations: str | Path,
    strategy: str = settings.STRATEGY,
    track_repeats: bool = False,
    strict: bool = False,
    output_csv: Optional[str | Path] = None,
) -> List[DocumentReport]:
    """Analyze each document against the annotation export, one after another."""
    records = list(load_annotations(Path(annotations), strict=strict))
    store = Storage(Path(output_csv)) if output_csv else None

    # A single document takes every record, as exports usually cover one text
    filter_by_name = len(documents) > 1

    reports: List[DocumentReport] = []
    for document in documents:
        path = Path(document)
        doc_records = records
        if filter_by_name:
            doc_records = [r for r in records if document_matches(r.document_name, path)]
            logger.debug("%s: %d of %d records apply", path.name, len(doc_records), len(records))

        try:
            report = analyze_document(
                path,
                doc_records,
                strategy=strategy,
                track_repeats=track_repeats,
                strict=strict,
            )
        except (FileAccessError, MalformedRecordError) as exc:
            if strict:
                raise
            logger.error("❌ [%s] Analysis aborted: %s", path.name, exc)
            continue

        logger.info("✅ [%s] %s", path.name, report.summary)
        reports.append(report)
        if store:
            store.save_report(report)

    _print_coverage_summary(reports)
    return reports


def analyze_document(
    path: Path,
    records: Sequence[AnnotationRecord],
    strategy: str = settings.STRATEGY,
    track_repeats: bool = False,
    strict: bool = False,
) -> DocumentReport:
    """Apply every record to one document and collect its sentence statistics."""
    text = read_document(path)
    matcher = build_strategy(
        strategy,
        text,
        track_repeats=track_repeats,
        terminator=settings.SENTENCE_TERMINATOR,
        page_delimiter=settings.PAGE_DELIMITER,
    )
    report = DocumentReport(document=path.name, strategy=matcher.name)

    for record in records:
        try:
            applied = matcher.apply(record)
        except (MalformedRecordError, PositionConsistencyError) as exc:
            if strict:
                if isinstance(exc, PositionConsistencyError):
                    raise PositionConsistencyError(f"row {record.row_number}: {exc}") from exc
                raise
            logger.warning("⚠️ [%s] Skipping row %d: %s", path.name, record.row_number, exc)
            report.records_skipped += 1
            continue

        if applied:
            report.records_applied += 1
        else:
            report.segments_not_found += 1

    report.stats = matcher.get_sentence_data()
    return report


def _print_coverage_summary(reports: Sequence[DocumentReport]) -> None:
    """Print per-document and total sentence coverage."""
    if not reports:
        logger.info("No documents analyzed.")
        return

    total = SentenceStats()
    for report in reports:
        total = total + report.stats

    print("\n" + "=" * 60)
    print("SENTENCE COVERAGE")
    print("=" * 60)
    for report in reports:
        print(f"{report.document}: {report.summary}")
        if report.segments_not_found or report.records_skipped:
            print(
                f"  not found: {report.segments_not_found}, skipped: {report.records_skipped}"
            )
    if len(reports) > 1:
        print()
        print(f"Total: {total.encoded}/{total.total} sentences encoded ({total.percentage:.2f}%)")
    print("=" * 60)
