import csv

import pytest

from qdacoverage.utils.csv_loader import COLUMN_MAP

EXPORT_COLUMNS = list(COLUMN_MAP.keys())


def make_row(segment, start="", end="", document="", code="Theme"):
    row = {col: "" for col in EXPORT_COLUMNS}
    row.update(
        {
            "Farbe": "#ff0000",
            "Dokumentgruppe": "Interviews",
            "Dokumentname": document,
            "Code": code,
            "Anfang": start,
            "Ende": end,
            "Gewicht": "0",
            "Segment": segment,
            "Erstellt von": "AB",
            "Erstellt am": "01.02.2024 10:00",
        }
    )
    return row


@pytest.fixture
def write_export(tmp_path):
    """Write a semicolon-delimited coding export and return its path."""

    def _write(rows, name="export.csv"):
        path = tmp_path / name
        with path.open("w", newline="", encoding="utf-8") as f:
            writer = csv.DictWriter(f, fieldnames=EXPORT_COLUMNS, delimiter=";")
            writer.writeheader()
            for row in rows:
                writer.writerow(row)
        return path

    return _write


@pytest.fixture
def interview_text():
    return (
        "The team met on Monday.\r\n"
        "Everyone agreed the plan was too ambitious. "
        "Budget was not discussed.\r\n"
        "The meeting ended early."
    )


@pytest.fixture
def paginated_text():
    return (
        "First page opens here. It has two sentences. (Interview 1, S. 1: 0)"
        "\r\n\r\n"
        "Second page starts. Then it ends. (Interview 1, S. 2: 44)"
    )


@pytest.fixture
def export_row():
    return make_row
