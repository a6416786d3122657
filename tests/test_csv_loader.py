import csv

import pytest

from qdacoverage.errors import FileAccessError, MalformedRecordError
from qdacoverage.models import Position
from qdacoverage.utils.csv_loader import load_annotations


def test_load_annotations(write_export, export_row):
    path = write_export(
        [
            export_row("agreed the plan", start="1: 30", end="1: 44", document="interview"),
            export_row("Budget", code="Money"),
        ]
    )

    records = list(load_annotations(path))

    assert len(records) == 2
    first, second = records
    assert first.segment == "agreed the plan"
    assert first.row_number == 1
    assert first.document_name == "interview"
    assert first.start == Position(1, 30)
    assert first.end == Position(1, 44)
    assert first.color == "#ff0000"
    assert first.creator == "AB"
    assert second.code == "Money"
    assert second.start is None
    assert second.row_number == 2


def test_segment_text_kept_verbatim(write_export, export_row):
    path = write_export([export_row("  spaced; with\r\nbreak  ")])
    (record,) = load_annotations(path)
    assert record.segment == "  spaced; with\r\nbreak  "


def test_bad_position_is_left_unparsed(write_export, export_row):
    path = write_export([export_row("Budget", start="start", end="1: 10")])
    (record,) = load_annotations(path)
    assert record.start is None
    assert record.start_raw == "start"
    assert record.end == Position(1, 10)


def test_empty_segment_kept_for_positions(write_export, export_row):
    path = write_export([export_row("first"), export_row("", start="1: 0", end="1: 2")])
    records = list(load_annotations(path))
    assert [r.segment for r in records] == ["first", ""]
    assert records[1].start == Position(1, 0)
    assert records[1].end == Position(1, 2)


def test_malformed_rows_strict(write_export, export_row):
    path = write_export([export_row("first")])
    with path.open("a", newline="", encoding="utf-8") as f:
        csv.writer(f, delimiter=";").writerow(["x"] * 20)
    with pytest.raises(MalformedRecordError) as excinfo:
        list(load_annotations(path, strict=True))
    assert excinfo.value.row_number == 2


def test_too_many_columns(write_export, export_row, tmp_path):
    path = write_export([export_row("first")])
    with path.open("a", newline="", encoding="utf-8") as f:
        writer = csv.writer(f, delimiter=";")
        writer.writerow(["x"] * 20)

    records = list(load_annotations(path))
    assert [r.segment for r in records] == ["first"]


def test_missing_segment_column(tmp_path):
    path = tmp_path / "bad.csv"
    path.write_text("Farbe;Code\n#fff;Theme\n", encoding="utf-8")
    with pytest.raises(MalformedRecordError):
        list(load_annotations(path))


def test_missing_file(tmp_path):
    with pytest.raises(FileAccessError) as excinfo:
        list(load_annotations(tmp_path / "missing.csv"))
    assert excinfo.value.path.name == "missing.csv"


def test_utf8_bom_header(tmp_path):
    path = tmp_path / "bom.csv"
    path.write_text("Segment;Code\nHello;Greeting\n", encoding="utf-8-sig")
    (record,) = load_annotations(path)
    assert record.segment == "Hello"
    assert record.code == "Greeting"


def test_latin1_export_falls_back_with_warning(tmp_path, caplog):
    path = tmp_path / "latin.csv"
    path.write_bytes("Segment;Fläche\nGröße;1\n".encode("latin-1"))

    with caplog.at_level("WARNING"):
        (record,) = load_annotations(path)

    assert record.segment == "Größe"
    assert record.area == "1"
    assert "reading as latin-1" in caplog.text
