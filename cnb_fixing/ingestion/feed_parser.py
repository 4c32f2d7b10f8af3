"""Parser for the CNB ``daily.txt`` exchange rate fixing feed.

The feed is a short preamble (``19 Jan 2024 #13``) followed by a pipe-delimited
table::

    Country|Currency|Amount|Code|Rate
    Australia|dollar|1|AUD|15,263
    Hungary|forint|100|HUF|6,497

Everything before the header is ignored. Rates use a decimal comma. Rows whose
rate cannot be read are reported as diagnostics and dropped, the rest of the
table is still returned.
"""

from __future__ import annotations

import math

from cnb_fixing.ingestion.models import FeedParseResult, ParseDiagnostic, ParsedRow
from cnb_fixing.utils.cnb import FEED_HEADER
from cnb_fixing.utils.logger import get_logger

LOGGER = get_logger(__name__)

FIELD_COUNT = 5


def parse_rate(value: str) -> float | None:
    """Convert a decimal-comma rate into a positive finite float, or ``None``."""

    cleaned = value.strip().replace(",", ".")
    if not cleaned:
        return None
    try:
        rate = float(cleaned)
    except ValueError:
        return None
    if not math.isfinite(rate) or rate <= 0:
        return None
    return rate


def _parse_amount(value: str) -> int:
    try:
        amount = int(value.strip())
    except ValueError:
        return 1
    return amount if amount > 0 else 1


def parse_feed(raw_text: str) -> FeedParseResult:
    """Split ``raw_text`` into parsed rows and diagnostics, preserving feed order."""

    result = FeedParseResult()
    for line_number, line in enumerate(raw_text.splitlines(), start=1):
        trimmed = line.strip()
        if not result.header_found:
            if trimmed.startswith(FEED_HEADER):
                result.header_found = True
            continue
        if not trimmed:
            continue

        fields = [item.strip() for item in trimmed.split("|")]
        if len(fields) != FIELD_COUNT:
            result.diagnostics.append(
                ParseDiagnostic(
                    line_number=line_number,
                    country=fields[0],
                    code=None,
                    raw_value=trimmed,
                    message=f"expected {FIELD_COUNT} fields, found {len(fields)}",
                )
            )
            continue

        country, currency_name, amount, code, raw_rate = fields
        if not code.isalpha():
            result.diagnostics.append(
                ParseDiagnostic(
                    line_number=line_number,
                    country=country,
                    code=None,
                    raw_value=code,
                    message=f"invalid currency code {code!r} for {country}",
                )
            )
            continue
        rate = parse_rate(raw_rate)
        if rate is None:
            result.diagnostics.append(
                ParseDiagnostic(
                    line_number=line_number,
                    country=country,
                    code=code.upper(),
                    raw_value=raw_rate,
                    message=f"could not parse rate {raw_rate!r} for {country}",
                )
            )
            continue

        result.rows.append(
            ParsedRow(
                country=country,
                currency_name=currency_name,
                amount=_parse_amount(amount),
                code=code.upper(),
                rate=rate,
                raw_rate=raw_rate,
            )
        )

    if not result.header_found:
        LOGGER.info("Feed header not found; treating feed as empty")
    return result


__all__ = ["FIELD_COUNT", "parse_feed", "parse_rate"]
