"""Paginated documents for position-exact matching."""
from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, Iterator, List

from qdacoverage.core.analyzer import SENTENCE_TERMINATOR, CoverageAnalyzer
from qdacoverage.errors import MalformedRecordError, PositionConsistencyError
from qdacoverage.models import Position, SentenceStats

logger = logging.getLogger(__name__)

# "<text> (<source>, S. <page>: <offset>)" at the end of each page
PAGE_MARKER_REGEX = re.compile(
    r"^(?P<text>[\s\S]*) \([^\n]*, S\. (?P<page>\d+): (?P<offset>\d+)\)"
)

POSITION_REGEX = re.compile(r"(?P<page>\d+): (?P<offset>\d+)")

PAGE_DELIMITER = "\r\n\r\n"


def parse_position(value: str) -> Position:
    """Parse an export position such as ``"12: 3456"``."""
    match = POSITION_REGEX.search(value or "")
    if not match:
        raise MalformedRecordError(f"Unparseable position {value!r}")
    return Position(page=int(match.group("page")), offset=int(match.group("offset")))


@dataclass
class Page:
    number: int
    offset: int
    analyzer: CoverageAnalyzer = field(repr=False)

    @property
    def text(self) -> str:
        return self.analyzer.text

    @classmethod
    def from_segment(cls, segment: str, terminator: str = SENTENCE_TERMINATOR) -> "Page":
        """
        Parse one page chunk, stripping its trailing citation marker.

        Carriage returns stay in the page text: export offsets count them.
        """
        match = PAGE_MARKER_REGEX.search(segment)
        if not match:
            preview = segment[-60:].replace("\n", " ")
            raise MalformedRecordError(f"Page has no citation marker: ...{preview!r}")
        return cls(
            number=int(match.group("page")),
            offset=int(match.group("offset")),
            analyzer=CoverageAnalyzer(match.group("text"), terminator=terminator),
        )

    def mark_positions(self, start: Position, end: Position) -> None:
        """Mark the inclusive range between two page-relative positions."""
        if start.page != end.page:
            raise PositionConsistencyError(
                f"Annotation spans pages {start.page} and {end.page}"
            )
        if start.page != self.number:
            raise PositionConsistencyError(
                f"Annotation on page {start.page} applied to page {self.number}"
            )
        self.analyzer.mark_range(start.offset - self.offset, end.offset - self.offset)

    def get_sentence_data(self) -> SentenceStats:
        return self.analyzer.get_sentence_data()


class PaginatedDocument:
    def __init__(self, pages: List[Page]) -> None:
        self.pages = pages
        self._by_number: Dict[int, Page] = {}
        for page in pages:
            if page.number in self._by_number:
                logger.warning("Duplicate page number %d, keeping the first", page.number)
                continue
            self._by_number[page.number] = page

    @classmethod
    def from_text(
        cls,
        text: str,
        delimiter: str = PAGE_DELIMITER,
        terminator: str = SENTENCE_TERMINATOR,
    ) -> "PaginatedDocument":
        pages = [
            Page.from_segment(chunk, terminator=terminator)
            for chunk in split_pages(text, delimiter)
        ]
        logger.debug("Parsed %d pages", len(pages))
        return cls(pages)

    def __iter__(self) -> Iterator[Page]:
        return iter(self.pages)

    def __len__(self) -> int:
        return len(self.pages)

    def page(self, number: int) -> Page:
        try:
            return self._by_number[number]
        except KeyError:
            raise PositionConsistencyError(f"Document has no page {number}") from None

    def mark_positions(self, start: Position, end: Position) -> None:
        if start.page != end.page:
            raise PositionConsistencyError(
                f"Annotation spans pages {start.page} and {end.page}"
            )
        self.page(start.page).mark_positions(start, end)

    def get_sentence_data(self) -> SentenceStats:
        stats = SentenceStats()
        for page in self.pages:
            stats = stats + page.get_sentence_data()
        return stats


def split_pages(text: str, delimiter: str = PAGE_DELIMITER) -> List[str]:
    """
    Split raw text on the page delimiter, dropping blank chunks.

    Files saved with bare LF line endings have no CRLF delimiter; they are
    split on the delimiter with its carriage returns removed.
    """
    if delimiter not in text and "\r" in delimiter and "\r" not in text:
        delimiter = delimiter.replace("\r", "")
    return [chunk for chunk in text.split(delimiter) if chunk.strip()]
