from __future__ import annotations

import logging
from pathlib import Path

from qdacoverage.errors import FileAccessError

logger = logging.getLogger(__name__)


def read_document(path: str | Path, encoding: str = "utf-8-sig") -> str:
    """
    Read a document text or export file.

    ``encoding`` (UTF-8 with or without BOM by default) first, latin-1 as a
    fallback for older files. Line endings are returned untouched.
    """
    path = Path(path)
    if not path.is_file():
        raise FileAccessError(path, "no such file")
    try:
        return _read_raw(path, encoding)
    except UnicodeDecodeError:
        logger.warning("%s is not valid %s, reading as latin-1", path.name, encoding)
        return _read_raw(path, "latin-1")


def _read_raw(path: Path, encoding: str) -> str:
    # newline="" keeps "\r\n" intact so page delimiters survive
    try:
        with path.open("r", encoding=encoding, newline="") as f:
            return f.read()
    except OSError as e:
        raise FileAccessError(path, e.strerror or str(e)) from e


def document_matches(document_name: str, path: Path) -> bool:
    """Check whether an export's document name refers to the given file."""
    name = document_name.strip()
    if not name:
        return True
    return name in (path.name, path.stem)
