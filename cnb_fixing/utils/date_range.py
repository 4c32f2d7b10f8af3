"""Calendar helpers for walking inclusive date windows."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta
from typing import Iterator

from cnb_fixing.errors import ValidationError


@dataclass(frozen=True)
class DateRange:
    """Container representing a closed date range."""

    start: date
    end: date

    def __post_init__(self) -> None:
        if self.start > self.end:
            raise ValidationError("start date must not be after end date")

    def days(self) -> Iterator[date]:
        """Yield every calendar day in the window, oldest first."""

        current = self.start
        while current <= self.end:
            yield current
            current += timedelta(days=1)

    def __len__(self) -> int:
        return (self.end - self.start).days + 1


def parse_date(value: str | date) -> date:
    """Parse an ISO ``YYYY-MM-DD`` string to :class:`date`."""

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value).strip(), "%Y-%m-%d").date()
    except ValueError as exc:
        raise ValidationError(f"Invalid date {value!r}; expected YYYY-MM-DD") from exc


def date_range(start: str | date, end: str | date) -> DateRange:
    """Build a validated :class:`DateRange` from loose caller input."""

    return DateRange(start=parse_date(start), end=parse_date(end))


def iter_days(start: str | date, end: str | date) -> Iterator[date]:
    """Yield each day between ``start`` and ``end`` inclusive."""

    return date_range(start, end).days()


__all__ = ["DateRange", "date_range", "iter_days", "parse_date"]
