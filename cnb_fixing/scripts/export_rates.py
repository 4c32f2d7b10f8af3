"""Dump every stored CNB rate as JSON, or write it to a CSV file."""

from __future__ import annotations

import argparse
import json
from pathlib import Path

from cnb_fixing import CnbFixing
from cnb_fixing.ingestion.rate_csv import RateCSVExporter
from cnb_fixing.seeds.populate_cnb_rates import add_common_arguments
from cnb_fixing.utils.logger import get_logger

LOGGER = get_logger(__name__)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("--output", dest="output", help="Write a CSV file instead of JSON to stdout")
    add_common_arguments(parser)
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> None:
    args = parse_args(argv)
    with CnbFixing(args.db_url, feed_url=args.feed_url, timeout=args.timeout) as fx:
        records = fx.all_records()
    if args.output:
        path = RateCSVExporter().write(records, Path(args.output))
        LOGGER.info("Exported %s rates to %s", len(records), path)
        return
    print(json.dumps([record.as_dict() for record in records], indent=2))


if __name__ == "__main__":  # pragma: no cover - CLI entry point
    main()
