"""Print min/max/average CNB rates for a window and a list of currencies."""

from __future__ import annotations

import argparse
import json

from cnb_fixing import CnbFixing
from cnb_fixing.seeds.populate_cnb_rates import add_common_arguments


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--from", dest="start", required=True, help="Start date (YYYY-MM-DD)")
    parser.add_argument("--to", dest="end", required=True, help="End date (YYYY-MM-DD)")
    parser.add_argument(
        "--currencies",
        required=True,
        help="Comma separated currency codes, e.g. USD,EUR",
    )
    add_common_arguments(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    with CnbFixing(args.db_url, feed_url=args.feed_url, timeout=args.timeout) as fx:
        rows = fx.report_rows(args.start, args.end, args.currencies)
    print(json.dumps(rows, indent=2))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
