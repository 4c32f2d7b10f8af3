from __future__ import annotations

from datetime import date
from pathlib import Path

import pytest

from cnb_fixing.db.sqlite_backend import SQLiteBackend
from cnb_fixing.engine.aggregation import AggregationEngine, normalise_codes
from cnb_fixing.errors import StoreError, ValidationError
from cnb_fixing.ingestion.models import RateStats


@pytest.fixture
def store(tmp_path: Path):
    backend = SQLiteBackend(tmp_path / "report.db")
    backend.upsert("USD", date(2024, 1, 1), 23.0)
    backend.upsert("USD", date(2024, 1, 2), 25.0)
    backend.upsert("EUR", date(2024, 1, 1), 25.0)
    backend.upsert("USD", date(2024, 1, 5), 99.0)
    backend.upsert("GBP", date(2024, 1, 1), 28.0)
    yield backend
    backend.close()


def test_report_computes_min_max_avg_per_currency(store: SQLiteBackend) -> None:
    report = AggregationEngine(store).report(date(2024, 1, 1), date(2024, 1, 2), {"USD", "EUR"})

    assert report == {
        "EUR": RateStats(min=25.0, max=25.0, avg=25.0, count=1),
        "USD": RateStats(min=23.0, max=25.0, avg=24.0, count=2),
    }
    assert list(report) == ["EUR", "USD"]
    assert report["USD"].as_dict() == {"min": 23.0, "max": 25.0, "avg": 24.0, "count": 2}


def test_currency_without_records_is_absent(store: SQLiteBackend) -> None:
    report = AggregationEngine(store).report(date(2024, 1, 1), date(2024, 1, 2), ["USD", "JPY"])

    assert list(report) == ["USD"]


def test_codes_accept_comma_separated_lowercase_input(store: SQLiteBackend) -> None:
    report = AggregationEngine(store).report(date(2024, 1, 1), date(2024, 1, 31), "usd, gbp")

    assert set(report) == {"USD", "GBP"}
    assert report["USD"].count == 3
    assert report["USD"].avg == pytest.approx((23.0 + 25.0 + 99.0) / 3)


@pytest.mark.parametrize("codes", [set(), "", " , ", ["US1"]])
def test_invalid_code_sets_are_rejected(codes) -> None:
    with pytest.raises(ValidationError):
        normalise_codes(codes)


def test_reversed_window_is_rejected_before_querying() -> None:
    class _ExplodingStore:
        def query_range(self, *args, **kwargs):
            raise AssertionError("store must not be queried")

    with pytest.raises(ValidationError):
        AggregationEngine(_ExplodingStore()).report(  # type: ignore[arg-type]
            date(2024, 1, 2), date(2024, 1, 1), {"USD"}
        )


def test_store_errors_propagate() -> None:
    class _BrokenStore:
        def query_range(self, *args, **kwargs):
            raise StoreError("connection lost")

    with pytest.raises(StoreError):
        AggregationEngine(_BrokenStore()).report(  # type: ignore[arg-type]
            date(2024, 1, 1), date(2024, 1, 2), {"USD"}
        )
