"""Abstractions for pluggable feed sources."""

from __future__ import annotations

from datetime import date
from typing import Protocol


class FeedFetcher(Protocol):
    """Contract for downloading the raw fixing feed.

    Implementations return the feed body for ``rate_date`` and raise
    :class:`cnb_fixing.errors.FetchError` on network failures, non-success
    responses and timeouts.
    """

    def fetch(self, rate_date: date) -> str:
        ...  # pragma: no cover - protocol definition


__all__ = ["FeedFetcher"]
