from __future__ import annotations

import csv
import io
from decimal import Decimal
from pathlib import Path

import pytest

from award_pacing.ingest import load_records_from_csv
from award_pacing.ingest.adapters.awards_csv import to_records

_DATA = Path(__file__).resolve().parent / "data"


def _rows(text: str):
    return csv.reader(io.StringIO(text))


def test_sample_file_skips_malformed_rows():
    records = load_records_from_csv(_DATA / "awards_sample.csv")

    assert [(r.year, r.month, r.day, r.amount) for r in records] == [
        (2025, 1, 5, Decimal("100.00")),
        (2025, 1, 20, Decimal("50.00")),
        (2025, 3, 2, Decimal("300.00")),
        (2025, 4, 15, Decimal("150.00")),
        (2025, 6, 9, Decimal("200.00")),
    ]
    assert records[3].cohort == "Unassigned"
    assert records[4].category == "Uncategorized"


def test_headerless_input_and_optional_columns():
    records = list(to_records(_rows("2025-02-01,10\n2025-02-02,20,Books\n")))
    assert [(r.amount, r.category, r.cohort) for r in records] == [
        (Decimal(10), "Uncategorized", "Unassigned"),
        (Decimal(20), "Books", "Unassigned"),
    ]


def test_header_detection_only_on_first_non_empty_row():
    text = "\n\nDate,Amount\n2025-02-01,10\nupdate,5\n"
    records = list(to_records(_rows(text)))
    assert len(records) == 1


def test_quoted_fields_and_impossible_days_pass_through():
    text = '2025-02-30,"1000.50","Tuition, Fees",Fall\n2025-02,5\n2025-02-01\n'
    records = list(to_records(_rows(text)))
    assert len(records) == 1
    r = records[0]
    assert (r.day, r.category, r.amount) == (30, "Tuition, Fees", Decimal("1000.50"))
    assert r.calendar_date() is None


def test_missing_file_raises():
    with pytest.raises(FileNotFoundError):
        load_records_from_csv(_DATA / "does-not-exist.csv")
