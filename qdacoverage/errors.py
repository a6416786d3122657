from __future__ import annotations

from pathlib import Path
from typing import Optional


class CoverageError(Exception):
    """Base class for fatal or record-level analysis errors."""


class FileAccessError(CoverageError):
    def __init__(self, path: str | Path, reason: str = "") -> None:
        self.path = Path(path)
        message = f"Cannot read {self.path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class MalformedRecordError(CoverageError):
    def __init__(self, message: str, row_number: Optional[int] = None) -> None:
        self.row_number = row_number
        if row_number is not None:
            message = f"row {row_number}: {message}"
        super().__init__(message)


class PositionConsistencyError(CoverageError):
    """Start/end positions disagree with each other or with the target page."""


class SegmentNotFoundWarning(UserWarning):
    """An annotated segment does not occur in the document text."""


class ConfigurationError(CoverageError, ValueError):
    """Invalid strategy, terminator or other setting."""
