"""
Strategies that apply annotation records to a document.

- substring: locate the literal segment text (first occurrence, or the next
  occurrence per repeated segment with ``track_repeats``)
- position: mark the exact page-relative range given by the record's
  start and end positions
"""
from __future__ import annotations

import logging
from typing import Dict, Optional

from qdacoverage.core.analyzer import SENTENCE_TERMINATOR, CoverageAnalyzer
from qdacoverage.core.pages import PAGE_DELIMITER, PaginatedDocument, parse_position
from qdacoverage.errors import ConfigurationError, MalformedRecordError
from qdacoverage.models import AnnotationRecord, Position, SentenceStats

logger = logging.getLogger(__name__)

STRATEGIES = ("substring", "position")


class MatchingStrategy:
    name = ""

    def apply(self, record: AnnotationRecord) -> bool:
        """Mark the record as covered. Returns False when its text was not found."""
        raise NotImplementedError

    def get_sentence_data(self) -> SentenceStats:
        raise NotImplementedError


class SubstringStrategy(MatchingStrategy):
    name = "substring"

    def __init__(self, analyzer: CoverageAnalyzer, track_repeats: bool = False) -> None:
        self.analyzer = analyzer
        self.track_repeats = track_repeats
        self._cursors: Dict[str, int] = {}

    def apply(self, record: AnnotationRecord) -> bool:
        segment = record.segment.replace("\r", "")
        if not segment.strip():
            # Blank segments are reported as not found by mark_segment
            segment = ""
        start = 0
        if self.track_repeats:
            start = self._cursors.get(segment, 0)
            # No later occurrence left: fall back to the first one
            if start and self.analyzer.text.find(segment, start) == -1:
                start = 0

        offset = self.analyzer.mark_segment(segment, start=start)
        if offset is None:
            return False
        if self.track_repeats:
            self._cursors[segment] = offset + 1
        return True

    def get_sentence_data(self) -> SentenceStats:
        return self.analyzer.get_sentence_data()


class PositionStrategy(MatchingStrategy):
    name = "position"

    def __init__(self, document: PaginatedDocument) -> None:
        self.document = document

    def apply(self, record: AnnotationRecord) -> bool:
        start = _record_position(record, record.start, record.start_raw)
        end = _record_position(record, record.end, record.end_raw)
        self.document.mark_positions(start, end)
        return True

    def get_sentence_data(self) -> SentenceStats:
        return self.document.get_sentence_data()


def _record_position(
    record: AnnotationRecord, parsed: Optional[Position], raw: str
) -> Position:
    if parsed is not None:
        return parsed
    try:
        return parse_position(raw)
    except MalformedRecordError as exc:
        raise MalformedRecordError(str(exc), row_number=record.row_number) from exc


def build_strategy(
    name: str,
    text: str,
    track_repeats: bool = False,
    terminator: str = SENTENCE_TERMINATOR,
    page_delimiter: str = PAGE_DELIMITER,
) -> MatchingStrategy:
    """Create a strategy over freshly loaded document text."""
    if name == "substring":
        analyzer = CoverageAnalyzer.from_text(text, terminator=terminator)
        return SubstringStrategy(analyzer, track_repeats=track_repeats)
    if name == "position":
        if track_repeats:
            logger.debug("track_repeats has no effect with the position strategy")
        document = PaginatedDocument.from_text(
            text, delimiter=page_delimiter, terminator=terminator
        )
        return PositionStrategy(document)
    raise ConfigurationError(f"Unknown matching strategy {name!r}, expected one of {STRATEGIES}")
