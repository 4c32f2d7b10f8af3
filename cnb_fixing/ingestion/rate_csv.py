"""CSV export of stored fixing rates."""

from __future__ import annotations

import csv
from pathlib import Path
from typing import Sequence

from cnb_fixing.ingestion.models import RateRecord

CSV_HEADER = ("Date", "Code", "Rate")


class RateCSVExporter:
    """Write rate records as ``Date,Code,Rate`` rows sorted by date then code."""

    def __init__(self, *, date_format: str = "%Y-%m-%d") -> None:
        self.date_format = date_format

    def write(self, records: Sequence[RateRecord], csv_path: str | Path) -> Path:
        path = Path(csv_path)
        path.parent.mkdir(parents=True, exist_ok=True)
        ordered = sorted(records, key=lambda record: (record.rate_date, record.currency))
        with path.open("w", newline="", encoding="utf-8") as handle:
            writer = csv.writer(handle)
            writer.writerow(CSV_HEADER)
            for record in ordered:
                writer.writerow(
                    [record.rate_date.strftime(self.date_format), record.currency, f"{record.rate}"]
                )
        return path


__all__ = ["CSV_HEADER", "RateCSVExporter"]
