"""Synchronise today's CNB fixing; meant to be fired once a day by cron or a timer."""

from __future__ import annotations

import argparse
import sys

from cnb_fixing import CnbFixing
from cnb_fixing.seeds.populate_cnb_rates import add_common_arguments
from cnb_fixing.utils.logger import get_logger

LOGGER = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    add_common_arguments(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    args = parse_args(argv)
    with CnbFixing(args.db_url, feed_url=args.feed_url, timeout=args.timeout) as fx:
        summary = fx.start()
    if not summary.ok:
        LOGGER.error("Daily sync for %s did not complete cleanly", summary.rate_date)
        return 1
    return 0


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    sys.exit(main())
