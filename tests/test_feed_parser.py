from __future__ import annotations

import pytest

from cnb_fixing.ingestion.feed_parser import parse_feed, parse_rate

CNB_FEED = """19 Jan 2024 #13
Country|Currency|Amount|Code|Rate
Australia|dollar|1|AUD|15,065
EMU|euro|1|EUR|24,700
Hungary|forint|100|HUF|6,497
USA|dollar|1|USD|22,693
"""


def test_parse_feed_reads_rows_in_feed_order() -> None:
    result = parse_feed(CNB_FEED)

    assert result.header_found is True
    assert [row.code for row in result.rows] == ["AUD", "EUR", "HUF", "USD"]
    assert result.rows[1].rate == pytest.approx(24.7)
    assert result.rows[2].amount == 100
    assert result.rows[2].currency_name == "forint"
    assert result.rows[2].raw_rate == "6,497"
    assert result.diagnostics == []


def test_parse_feed_drops_unparseable_rate_with_diagnostic() -> None:
    raw = (
        "Country|Currency|Amount|Code|Rate\n"
        "Czech Republic|koruna|1|CZK|24,5\n"
        "BadRow|x|y|XYZ|notanumber\n"
    )

    result = parse_feed(raw)

    assert len(result.rows) == 1
    assert result.rows[0].code == "CZK"
    assert result.rows[0].rate == 24.5
    assert len(result.diagnostics) == 1
    diagnostic = result.diagnostics[0]
    assert diagnostic.code == "XYZ"
    assert diagnostic.country == "BadRow"
    assert diagnostic.line_number == 3
    assert "BadRow" in str(diagnostic)


def test_parse_feed_without_header_is_empty() -> None:
    result = parse_feed("19 Jan 2024 #13\nEMU|euro|1|EUR|24,700\n")

    assert result.rows == []
    assert result.diagnostics == []
    assert result.header_found is False


def test_parse_feed_ignores_blank_lines_and_whitespace() -> None:
    raw = "  Country|Currency|Amount|Code|Rate  \n\n   \n  EMU | euro | 1 | eur | 24,700  \n"

    result = parse_feed(raw)

    assert [(row.country, row.code, row.rate) for row in result.rows] == [("EMU", "EUR", 24.7)]


def test_parse_feed_reports_lines_with_wrong_field_count() -> None:
    raw = "Country|Currency|Amount|Code|Rate\nBroken|line|1|USD\nUSA|dollar|1|USD|22,693\n"

    result = parse_feed(raw)

    assert [row.code for row in result.rows] == ["USD"]
    assert len(result.diagnostics) == 1
    assert result.diagnostics[0].code is None
    assert "expected 5 fields" in result.diagnostics[0].message


def test_parse_feed_keeps_duplicate_codes() -> None:
    raw = "Country|Currency|Amount|Code|Rate\nUSA|dollar|1|USD|22,6\nUSA|dollar|1|USD|22,7\n"

    result = parse_feed(raw)

    assert [row.rate for row in result.rows] == [22.6, 22.7]


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("24,5", 24.5),
        (" 6,497 ", 6.497),
        ("22.693", 22.693),
        ("", None),
        ("abc", None),
        ("nan", None),
        ("inf", None),
        ("-1,5", None),
        ("0", None),
    ],
)
def test_parse_rate(raw: str, expected: float | None) -> None:
    assert parse_rate(raw) == expected
