from __future__ import annotations

import csv
from datetime import date
from pathlib import Path

from cnb_fixing.ingestion.models import RateRecord
from cnb_fixing.ingestion.rate_csv import CSV_HEADER, RateCSVExporter


def test_exporter_sorts_by_date_then_code(tmp_path: Path) -> None:
    records = [
        RateRecord(rate_date=date(2024, 1, 2), currency="USD", rate=22.7),
        RateRecord(rate_date=date(2024, 1, 1), currency="USD", rate=22.6),
        RateRecord(rate_date=date(2024, 1, 1), currency="EUR", rate=24.65),
    ]

    path = RateCSVExporter(date_format="%d.%m.%Y").write(records, tmp_path / "rates.csv")

    with path.open(newline="", encoding="utf-8") as handle:
        rows = list(csv.reader(handle))
    assert tuple(rows[0]) == CSV_HEADER
    assert rows[1:] == [
        ["01.01.2024", "EUR", "24.65"],
        ["01.01.2024", "USD", "22.6"],
        ["02.01.2024", "USD", "22.7"],
    ]


def test_exporter_writes_header_for_empty_store(tmp_path: Path) -> None:
    path = RateCSVExporter().write([], tmp_path / "empty.csv")

    assert path.read_text(encoding="utf-8").splitlines() == [",".join(CSV_HEADER)]
