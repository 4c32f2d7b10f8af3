"""Exception hierarchy shared across cnb_fixing."""

from __future__ import annotations

from datetime import date


class CnbFixingError(Exception):
    """Base class for every error raised by the package."""


class FetchError(CnbFixingError):
    """The CNB feed could not be downloaded for a given date."""

    def __init__(self, message: str, *, rate_date: date | None = None) -> None:
        super().__init__(message)
        self.rate_date = rate_date


class StoreError(CnbFixingError):
    """A persistence backend failed while reading or writing rates."""


class ValidationError(CnbFixingError, ValueError):
    """Caller input was rejected before any I/O took place."""


__all__ = ["CnbFixingError", "FetchError", "StoreError", "ValidationError"]
