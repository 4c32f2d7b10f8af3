"""Min/max/average reporting over stored fixing rates."""

from __future__ import annotations

from datetime import date
from typing import Iterable

from cnb_fixing.db.base_backend import RateStore
from cnb_fixing.errors import ValidationError
from cnb_fixing.ingestion.models import RateStats
from cnb_fixing.utils.date_range import date_range


def normalise_codes(codes: Iterable[str] | str) -> set[str]:
    """Turn ``"usd, EUR"`` or an iterable of codes into an uppercase set."""

    if isinstance(codes, str):
        codes = codes.split(",")
    normalised = {code.strip().upper() for code in codes if code and code.strip()}
    if not normalised:
        raise ValidationError("At least one currency code is required")
    invalid = sorted(code for code in normalised if not code.isalpha())
    if invalid:
        raise ValidationError(f"Invalid currency codes: {', '.join(invalid)}")
    return normalised


class AggregationEngine:
    def __init__(self, store: RateStore) -> None:
        self.store = store

    def report(
        self, start: date, end: date, codes: Iterable[str] | str
    ) -> dict[str, RateStats]:
        """Return per-currency statistics for ``[start, end]``.

        Currencies without a single stored rate in the window are left out of
        the result. Keys are ordered alphabetically.
        """

        window = date_range(start, end)
        wanted = normalise_codes(codes)
        records = self.store.query_range(window.start, window.end, wanted)

        grouped: dict[str, list[float]] = {}
        for record in records:
            grouped.setdefault(record.currency, []).append(record.rate)

        return {
            code: RateStats(
                min=min(rates),
                max=max(rates),
                avg=sum(rates) / len(rates),
                count=len(rates),
            )
            for code, rates in sorted(grouped.items())
        }


__all__ = ["AggregationEngine", "normalise_codes"]
