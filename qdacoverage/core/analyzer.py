"""
Sentence coverage over a single document text.

The analyzer keeps one boolean per character of the (carriage-return free)
document text. Annotated segments flip ranges of that bitmap to True; the
sentence scan then counts how many `.`-terminated sentences contain at least
one covered character.
"""
from __future__ import annotations

import enum
import logging
import warnings
from typing import List, Optional

from qdacoverage.errors import (
    ConfigurationError,
    PositionConsistencyError,
    SegmentNotFoundWarning,
)
from qdacoverage.models import SentenceStats

logger = logging.getLogger(__name__)

SENTENCE_TERMINATOR = "."


def normalize_text(text: str) -> str:
    """Remove every carriage return so offsets match the exported segments."""
    return text.replace("\r", "")


class ScanState(enum.Enum):
    SCANNING_UNCOVERED = "uncovered"
    SCANNING_COVERED = "covered"


class CoverageAnalyzer:
    def __init__(self, text: str, terminator: str = SENTENCE_TERMINATOR) -> None:
        if len(terminator) != 1:
            raise ConfigurationError(
                f"Sentence terminator must be one character, got {terminator!r}"
            )
        self.text = text
        self.terminator = terminator
        self._covered: List[bool] = [False] * len(text)

    @classmethod
    def from_text(cls, text: str, terminator: str = SENTENCE_TERMINATOR) -> "CoverageAnalyzer":
        return cls(normalize_text(text), terminator=terminator)

    def __len__(self) -> int:
        return len(self._covered)

    @property
    def covered(self) -> List[bool]:
        """Copy of the coverage bitmap."""
        return list(self._covered)

    @property
    def covered_characters(self) -> int:
        return sum(self._covered)

    def mark_segment(self, segment: str, start: int = 0) -> Optional[int]:
        """
        Mark the first occurrence of ``segment`` at or after ``start`` as covered.

        Returns the offset of the match, or None when the segment does not
        occur. A miss emits SegmentNotFoundWarning and never raises.

        Without a ``start`` cursor repeated identical text always resolves to
        its first occurrence.
        """
        if not segment:
            warnings.warn("Empty segment cannot be located", SegmentNotFoundWarning, stacklevel=2)
            return None

        offset = self.text.find(segment, start)
        if offset == -1:
            preview = segment if len(segment) <= 60 else segment[:57] + "..."
            warnings.warn(
                f"Segment not found in document: {preview!r}",
                SegmentNotFoundWarning,
                stacklevel=2,
            )
            return None

        self._set_range(offset, offset + len(segment))
        logger.debug("Marked segment at [%d, %d)", offset, offset + len(segment))
        return offset

    def mark_range(self, start: int, end: int) -> None:
        """Mark the inclusive character range ``[start, end]`` as covered."""
        if start < 0 or end < start or end >= len(self._covered):
            raise PositionConsistencyError(
                f"Range [{start}, {end}] outside text of length {len(self._covered)}"
            )
        self._set_range(start, end + 1)

    def _set_range(self, start: int, stop: int) -> None:
        for i in range(start, stop):
            self._covered[i] = True

    def get_sentence_data(self) -> SentenceStats:
        """
        Count sentences and sentences with any covered character.

        A sentence closes on the terminator; the coverage flag resets after
        each one. Text after the last terminator is not a sentence.
        """
        total = 0
        encoded = 0
        state = ScanState.SCANNING_UNCOVERED

        for char, is_covered in zip(self.text, self._covered):
            if is_covered:
                state = ScanState.SCANNING_COVERED
            if char == self.terminator:
                total += 1
                if state is ScanState.SCANNING_COVERED:
                    encoded += 1
                state = ScanState.SCANNING_UNCOVERED

        return SentenceStats(total=total, encoded=encoded)
