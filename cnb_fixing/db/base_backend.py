"""Rate store interface implemented by every persistence backend."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable

from cnb_fixing.ingestion.models import RateRecord


class RateStore(ABC):
    """Keyed storage of :class:`RateRecord` values.

    Records are unique per ``(currency, rate_date)``. ``upsert`` must be atomic
    for a key so two concurrent syncs of the same day cannot produce
    duplicates. Backend failures are raised as
    :class:`cnb_fixing.errors.StoreError`.
    """

    @abstractmethod
    def ensure_schema(self) -> None:
        """Create required tables/collections and verify connectivity."""

    @abstractmethod
    def upsert(self, code: str, rate_date: date, rate: float) -> RateRecord:
        """Insert the rate for ``(code, rate_date)`` or overwrite the stored one."""

    @abstractmethod
    def query_range(self, start: date, end: date, codes: Iterable[str]) -> list[RateRecord]:
        """Return records dated within ``[start, end]`` whose currency is in ``codes``."""

    @abstractmethod
    def find_all(self) -> list[RateRecord]:
        """Return every stored record ordered by date then currency."""

    def close(self) -> None:  # pragma: no cover - optional cleanup hook
        """Backends may override to release connections/resources."""

    def __enter__(self) -> "RateStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = ["RateStore"]
