"""CLI + helpers for populating the rate store from CNB daily fixings."""

from __future__ import annotations

import argparse
import os
from datetime import date

from cnb_fixing.ingestion.cnb_feed import DEFAULT_TIMEOUT
from cnb_fixing.ingestion.models import SyncSummary
from cnb_fixing.utils.date_range import date_range
from cnb_fixing.utils.logger import get_logger

LOGGER = get_logger(__name__)

DB_URL_ENV = "CNB_FIXING_DB_URL"
FEED_URL_ENV = "CNB_FIXING_FEED_URL"

__all__ = ["DB_URL_ENV", "FEED_URL_ENV", "add_common_arguments", "seed_cnb_rates", "parse_args", "main"]


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--db",
        dest="db_url",
        default=os.environ.get(DB_URL_ENV),
        help=f"Database DSN (defaults to ${DB_URL_ENV} or the bundled SQLite file)",
    )
    parser.add_argument(
        "--feed-url",
        dest="feed_url",
        default=os.environ.get(FEED_URL_ENV),
        help=f"Override the CNB daily.txt endpoint (defaults to ${FEED_URL_ENV})",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=DEFAULT_TIMEOUT,
        help="Per-request timeout in seconds for the CNB feed",
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--from", dest="start", required=True, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--to", dest="end", required=True, help="End date (YYYY-MM-DD)")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the window and report how many days would be synchronised",
    )
    add_common_arguments(parser)
    return parser.parse_args(argv)


def seed_cnb_rates(
    start: str | date,
    end: str | date,
    *,
    db_url: str | None = None,
    feed_url: str | None = None,
    timeout: float = DEFAULT_TIMEOUT,
    dry_run: bool = False,
) -> list[SyncSummary]:
    """Synchronise every CNB fixing date between ``start`` and ``end``."""

    from cnb_fixing import CnbFixing

    window = date_range(start, end)
    if dry_run:
        LOGGER.info(
            "Dry-run enabled; would synchronise %s days (%s to %s)",
            len(window),
            window.start,
            window.end,
        )
        return []
    with CnbFixing(db_url, feed_url=feed_url, timeout=timeout) as fx:
        summaries = fx.sync_range(window.start, window.end)
    upserted = sum(summary.upserted for summary in summaries)
    failed = [summary.rate_date.isoformat() for summary in summaries if not summary.ok]
    LOGGER.info(
        "Seeding finished: %s rows upserted over %s days (failed days: %s)",
        upserted,
        len(summaries),
        ", ".join(failed) or "none",
    )
    return summaries


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    seed_cnb_rates(
        args.start,
        args.end,
        db_url=args.db_url,
        feed_url=args.feed_url,
        timeout=args.timeout,
        dry_run=args.dry_run,
    )


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
