"""SyncEngine behaviour against a real SQLite store and a scripted feed."""

from __future__ import annotations

from datetime import date
from pathlib import Path
from typing import Iterable

import pytest

from cnb_fixing.db.sqlite_backend import SQLiteBackend
from cnb_fixing.engine.sync import SyncEngine
from cnb_fixing.errors import FetchError, StoreError, ValidationError
from cnb_fixing.ingestion.models import RateRecord

HEADER = "Country|Currency|Amount|Code|Rate"


def _feed(*rows: str) -> str:
    return "\n".join(["19 Jan 2024 #13", HEADER, *rows]) + "\n"


class _ScriptedFetcher:
    def __init__(self, feeds: dict[date, str | Exception]) -> None:
        self.feeds = feeds
        self.calls: list[date] = []

    def fetch(self, rate_date: date) -> str:
        self.calls.append(rate_date)
        outcome = self.feeds.get(rate_date, "")
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class _FlakyStore(SQLiteBackend):
    def __init__(self, db_path: Path, failing_codes: Iterable[str]) -> None:
        super().__init__(db_path)
        self.failing_codes = set(failing_codes)

    def upsert(self, code: str, rate_date: date, rate: float) -> RateRecord:
        if code in self.failing_codes:
            raise StoreError("disk I/O error")
        return super().upsert(code, rate_date, rate)


@pytest.fixture
def store(tmp_path: Path):
    backend = SQLiteBackend(tmp_path / "sync.db")
    yield backend
    backend.close()


def test_sync_one_day_is_idempotent(store: SQLiteBackend) -> None:
    day = date(2024, 1, 19)
    fetcher = _ScriptedFetcher({day: _feed("EMU|euro|1|EUR|24,700", "USA|dollar|1|USD|22,693")})
    engine = SyncEngine(store, fetcher)

    first = engine.sync_one_day(day)
    second = engine.sync_one_day(day)

    assert first.upserted == second.upserted == 2
    assert first.ok and second.ok
    assert store.find_all() == [
        RateRecord(rate_date=day, currency="EUR", rate=24.7),
        RateRecord(rate_date=day, currency="USD", rate=22.693),
    ]


def test_changed_feed_overwrites_stored_rate(store: SQLiteBackend) -> None:
    day = date(2024, 1, 19)
    fetcher = _ScriptedFetcher({day: _feed("USA|dollar|1|USD|22,693")})
    engine = SyncEngine(store, fetcher)
    engine.sync_one_day(day)

    fetcher.feeds[day] = _feed("USA|dollar|1|USD|22,800")
    engine.sync_one_day(day)

    rows = store.query_range(day, day, {"USD"})
    assert len(rows) == 1
    assert rows[0].rate == 22.8


def test_bad_rows_are_reported_and_never_stored(store: SQLiteBackend) -> None:
    day = date(2024, 1, 2)
    fetcher = _ScriptedFetcher(
        {day: _feed("Czech Republic|koruna|1|CZK|24,5", "BadRow|x|y|XYZ|notanumber")}
    )

    summary = SyncEngine(store, fetcher).sync_one_day(day)

    assert summary.upserted == 1
    assert summary.ok is True
    assert [diagnostic.code for diagnostic in summary.diagnostics] == ["XYZ"]
    assert [record.currency for record in store.find_all()] == ["CZK"]


def test_fetch_failure_returns_failed_summary(store: SQLiteBackend) -> None:
    day = date(2024, 1, 2)
    fetcher = _ScriptedFetcher({day: FetchError("HTTP 503", rate_date=day)})

    summary = SyncEngine(store, fetcher).sync_one_day(day)

    assert summary.ok is False
    assert summary.fetch_error == "HTTP 503"
    assert summary.upserted == 0
    assert store.find_all() == []


def test_missing_header_stores_nothing(store: SQLiteBackend) -> None:
    day = date(2024, 1, 6)
    fetcher = _ScriptedFetcher({day: "no fixing published"})

    summary = SyncEngine(store, fetcher).sync_one_day(day)

    assert summary.ok is True
    assert summary.upserted == 0
    assert summary.diagnostics == []


def test_row_level_store_failure_does_not_stop_batch(tmp_path: Path) -> None:
    day = date(2024, 1, 19)
    fetcher = _ScriptedFetcher(
        {day: _feed("EMU|euro|1|EUR|24,700", "Japan|yen|100|JPY|15,400", "USA|dollar|1|USD|22,693")}
    )
    with _FlakyStore(tmp_path / "flaky.db", failing_codes={"JPY"}) as store:
        summary = SyncEngine(store, fetcher).sync_one_day(day)
        stored = [record.currency for record in store.find_all()]

    assert summary.upserted == 2
    assert summary.ok is False
    assert len(summary.errors) == 1
    assert summary.errors[0].startswith("JPY:")
    assert stored == ["EUR", "USD"]


def test_sync_range_covers_every_day_in_order_despite_failures(store: SQLiteBackend) -> None:
    first, middle, last = date(2024, 1, 1), date(2024, 1, 2), date(2024, 1, 3)
    fetcher = _ScriptedFetcher(
        {
            first: _feed("USA|dollar|1|USD|23,000"),
            middle: FetchError("timed out", rate_date=middle),
            last: _feed("USA|dollar|1|USD|25,000"),
        }
    )

    summaries = SyncEngine(store, fetcher).sync_range(first, last)

    assert fetcher.calls == [first, middle, last]
    assert [summary.rate_date for summary in summaries] == [first, middle, last]
    assert [summary.ok for summary in summaries] == [True, False, True]
    assert summaries[1].fetch_error == "timed out"
    assert [record.rate_date for record in store.find_all()] == [first, last]


def test_sync_range_rejects_reversed_window(store: SQLiteBackend) -> None:
    fetcher = _ScriptedFetcher({})

    with pytest.raises(ValidationError):
        SyncEngine(store, fetcher).sync_range(date(2024, 1, 3), date(2024, 1, 1))

    assert fetcher.calls == []


def test_sync_today_uses_current_date(store: SQLiteBackend) -> None:
    fetcher = _ScriptedFetcher({})

    summary = SyncEngine(store, fetcher).sync_today()

    assert fetcher.calls == [date.today()]
    assert summary.rate_date == date.today()
