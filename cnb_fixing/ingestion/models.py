"""Data models shared across ingestion, storage and reporting."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any


@dataclass(slots=True)
class RateRecord:
    """A stored CNB fixing rate for one currency on one day."""

    rate_date: date
    currency: str
    rate: float

    def as_dict(self) -> dict[str, Any]:
        return {
            "currencyCode": self.currency,
            "rate": self.rate,
            "date": self.rate_date.isoformat(),
        }


@dataclass(slots=True)
class ParsedRow:
    """One data line of the daily feed with its rate already converted."""

    country: str
    currency_name: str
    amount: int
    code: str
    rate: float
    raw_rate: str


@dataclass(slots=True)
class ParseDiagnostic:
    """Non-fatal warning about a feed line that was skipped."""

    line_number: int
    country: str
    code: str | None
    raw_value: str
    message: str

    def __str__(self) -> str:
        return f"line {self.line_number} ({self.country}): {self.message}"


@dataclass(slots=True)
class FeedParseResult:
    rows: list[ParsedRow] = field(default_factory=list)
    diagnostics: list[ParseDiagnostic] = field(default_factory=list)
    header_found: bool = False


@dataclass(slots=True)
class SyncSummary:
    """Outcome of synchronising a single fixing date."""

    rate_date: date
    upserted: int = 0
    diagnostics: list[ParseDiagnostic] = field(default_factory=list)
    errors: list[str] = field(default_factory=list)
    fetch_error: str | None = None

    @property
    def ok(self) -> bool:
        """True when the feed was fetched and every parsed row was stored."""

        return self.fetch_error is None and not self.errors

    def as_dict(self) -> dict[str, Any]:
        return {
            "date": self.rate_date.isoformat(),
            "ok": self.ok,
            "upserted": self.upserted,
            "diagnostics": [str(item) for item in self.diagnostics],
            "errors": list(self.errors),
            "fetch_error": self.fetch_error,
        }


@dataclass(slots=True)
class RateStats:
    """Min/max/average of one currency's rates over a window."""

    min: float
    max: float
    avg: float
    count: int

    def as_dict(self) -> dict[str, float | int]:
        return {"min": self.min, "max": self.max, "avg": self.avg, "count": self.count}
