import csv
import io
import logging
from pathlib import Path
from typing import Dict, Iterator, Optional

from qdacoverage.conf.config import settings
from qdacoverage.core.pages import parse_position
from qdacoverage.errors import MalformedRecordError
from qdacoverage.models import AnnotationRecord
from qdacoverage.utils.text import read_document

logger = logging.getLogger(__name__)

# Export column -> AnnotationRecord field
COLUMN_MAP: Dict[str, str] = {
    "Farbe": "color",
    "Kommentar": "comment",
    "Dokumentgruppe": "document_group",
    "Dokumentname": "document_name",
    "Code": "code",
    "Anfang": "start_raw",
    "Ende": "end_raw",
    "Gewicht": "weight",
    "Segment": "segment",
    "Bearbeitet von": "editor",
    "Bearbeitet am": "edit_date",
    "Erstellt von": "creator",
    "Erstellt am": "creation_date",
    "Fläche": "area",
    "Abdeckungsgrad %": "coverage",
}

SEGMENT_COLUMN = "Segment"


def load_annotations(
    csv_path: Path,
    strict: bool = False,
    delimiter: Optional[str] = None,
    encoding: Optional[str] = None,
) -> Iterator[AnnotationRecord]:
    """
    Reads a coding export and yields AnnotationRecords in file order.

    Rows that fail to parse are logged and skipped, or raised as
    MalformedRecordError when ``strict`` is set. Positions are parsed when
    present; a bad position only matters to the position strategy, so it is
    left as None here and reported there.
    """
    csv_path = Path(csv_path)
    delimiter = delimiter or settings.CSV_DELIMITER
    encoding = encoding or settings.CSV_ENCODING

    # Whole file up front: a decode failure falls back before any row is yielded
    content = read_document(csv_path, encoding=encoding)

    with io.StringIO(content, newline="") as f:
        reader = csv.DictReader(f, delimiter=delimiter)
        fieldnames = [name.strip() for name in (reader.fieldnames or [])]
        if SEGMENT_COLUMN not in fieldnames:
            raise MalformedRecordError(
                f"{csv_path}: missing '{SEGMENT_COLUMN}' column (found: {', '.join(fieldnames)})"
            )
        reader.fieldnames = fieldnames
        unknown = [name for name in fieldnames if name and name not in COLUMN_MAP]
        if unknown:
            logger.debug("Ignoring unknown columns: %s", ", ".join(unknown))

        count = 0
        skipped = 0
        for row_number, row in enumerate(reader, start=1):
            try:
                record = _parse_row(row, row_number)
            except MalformedRecordError as e:
                if strict:
                    raise
                logger.warning("Skipping %s %s", csv_path.name, e)
                skipped += 1
                continue
            yield record
            count += 1

    logger.info("csv_loader: loaded %d annotations from %s (skipped: %d)", count, csv_path.name, skipped)


def _parse_row(row: Dict[str, Optional[str]], row_number: int) -> AnnotationRecord:
    # DictReader puts overflow cells under None and fills short rows with None
    if None in row:
        raise MalformedRecordError("too many columns", row_number=row_number)
    segment = row.get(SEGMENT_COLUMN)
    if segment is None:
        raise MalformedRecordError("too few columns", row_number=row_number)

    values = {
        field: (row.get(column) or "")
        for column, field in COLUMN_MAP.items()
    }
    record = AnnotationRecord(row_number=row_number, **values)
    record.start = _optional_position(record.start_raw)
    record.end = _optional_position(record.end_raw)
    return record


def _optional_position(value: str):
    if not value.strip():
        return None
    try:
        return parse_position(value)
    except MalformedRecordError:
        return None
