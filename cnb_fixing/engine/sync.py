"""Fetch, parse and upsert driver for CNB fixing dates."""

from __future__ import annotations

from datetime import date

from cnb_fixing.db.base_backend import RateStore
from cnb_fixing.errors import FetchError, StoreError
from cnb_fixing.ingestion.feed_parser import parse_feed
from cnb_fixing.ingestion.models import SyncSummary
from cnb_fixing.ingestion.strategy import FeedFetcher
from cnb_fixing.utils.date_range import date_range
from cnb_fixing.utils.logger import get_logger

LOGGER = get_logger(__name__)


class SyncEngine:
    """Synchronise fixing rates from a feed source into a rate store.

    The engine keeps no state between calls. Expected upstream problems (fetch
    failures, unreadable rows, single-row store failures) end up in the
    returned :class:`SyncSummary` instead of being raised.
    """

    def __init__(self, store: RateStore, fetcher: FeedFetcher) -> None:
        self.store = store
        self.fetcher = fetcher

    def sync_one_day(self, rate_date: date) -> SyncSummary:
        summary = SyncSummary(rate_date=rate_date)
        LOGGER.info("Synchronising CNB fixing for %s", rate_date)
        try:
            raw_text = self.fetcher.fetch(rate_date)
        except FetchError as exc:
            LOGGER.warning("Skipping %s: %s", rate_date, exc)
            summary.fetch_error = str(exc)
            return summary

        parsed = parse_feed(raw_text)
        for diagnostic in parsed.diagnostics:
            LOGGER.warning("Skipped feed row for %s: %s", rate_date, diagnostic)
        summary.diagnostics.extend(parsed.diagnostics)

        for row in parsed.rows:
            try:
                self.store.upsert(row.code, rate_date, row.rate)
            except StoreError as exc:
                LOGGER.error("Failed to store %s for %s: %s", row.code, rate_date, exc)
                summary.errors.append(f"{row.code}: {exc}")
                continue
            summary.upserted += 1

        LOGGER.info(
            "Finished %s: upserted %s rows, %s diagnostics, %s errors",
            rate_date,
            summary.upserted,
            len(summary.diagnostics),
            len(summary.errors),
        )
        return summary

    def sync_range(self, start: date, end: date) -> list[SyncSummary]:
        """Synchronise every day in ``[start, end]`` one after another, oldest first.

        Raises :class:`cnb_fixing.errors.ValidationError` when ``start`` is after
        ``end``. A failing day is recorded in its own summary and the loop moves on.
        """

        window = date_range(start, end)
        summaries = [self.sync_one_day(day) for day in window.days()]
        failed = sum(1 for summary in summaries if not summary.ok)
        LOGGER.info(
            "Range %s to %s finished: %s days, %s with failures",
            window.start,
            window.end,
            len(summaries),
            failed,
        )
        return summaries

    def sync_today(self) -> SyncSummary:
        return self.sync_one_day(date.today())


__all__ = ["SyncEngine"]
