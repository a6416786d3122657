from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Position:
    page: int
    offset: int


@dataclass
class AnnotationRecord:
    segment: str
    row_number: int = 0
    start_raw: str = ""
    end_raw: str = ""
    document_name: str = ""
    document_group: str = ""
    code: str = ""
    color: str = ""
    comment: str = ""
    weight: str = ""
    editor: str = ""
    edit_date: str = ""
    creator: str = ""
    creation_date: str = ""
    area: str = ""
    coverage: str = ""
    start: Optional[Position] = None
    end: Optional[Position] = None


@dataclass(frozen=True)
class SentenceStats:
    total: int = 0
    encoded: int = 0

    @property
    def percentage(self) -> float:
        if self.total == 0:
            return 0.0
        return 100 * self.encoded / self.total

    def __add__(self, other: "SentenceStats") -> "SentenceStats":
        return SentenceStats(self.total + other.total, self.encoded + other.encoded)

    def __iter__(self):
        # Allows `total, encoded = analyzer.get_sentence_data()`
        yield self.total
        yield self.encoded


@dataclass
class DocumentReport:
    document: str
    strategy: str
    stats: SentenceStats = field(default_factory=SentenceStats)
    records_applied: int = 0
    segments_not_found: int = 0
    records_skipped: int = 0

    @property
    def summary(self) -> str:
        """Short human readable line for console output."""
        return (
            f"{self.stats.encoded}/{self.stats.total} sentences encoded "
            f"({self.stats.percentage:.2f}%)"
        )
