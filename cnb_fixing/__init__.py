"""Public interface for the cnb_fixing package."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from enum import Enum
from importlib import metadata as importlib_metadata
from pathlib import Path
from typing import Any, Dict, Iterable, List
from urllib.parse import parse_qsl, quote, urlencode, urlparse, urlunparse

from pymongo import MongoClient
from sqlalchemy import create_engine, text

from cnb_fixing.db import DEFAULT_SQLITE_DB_PATH
from cnb_fixing.db.base_backend import RateStore
from cnb_fixing.db.mongo_backend import MongoBackend
from cnb_fixing.db.mysql_backend import MySQLBackend
from cnb_fixing.db.postgres_backend import PostgresBackend
from cnb_fixing.db.sqlite_backend import SQLiteBackend
from cnb_fixing.engine.aggregation import AggregationEngine, normalise_codes
from cnb_fixing.engine.sync import SyncEngine
from cnb_fixing.errors import CnbFixingError, FetchError, StoreError, ValidationError
from cnb_fixing.ingestion.cnb_feed import DEFAULT_TIMEOUT, CNBFeedClient
from cnb_fixing.ingestion.models import RateRecord, RateStats, SyncSummary
from cnb_fixing.ingestion.strategy import FeedFetcher
from cnb_fixing.utils.cnb import CNB_DAILY_URL
from cnb_fixing.utils.date_range import date_range, parse_date

__all__ = [
    "__version__",
    "CnbFixing",
    "CnbFixingError",
    "DatabaseBackend",
    "DatabaseConnectionInfo",
    "FetchError",
    "RateRecord",
    "RateStats",
    "StoreError",
    "SyncSummary",
    "ValidationError",
    "seed_cnb_rates",
]

try:
    __version__ = importlib_metadata.version("cnb-fixing")
except importlib_metadata.PackageNotFoundError:  # pragma: no cover - fallback for local runs
    __version__ = "0.1.0"


def seed_cnb_rates(*args, **kwargs):
    from cnb_fixing.seeds.populate_cnb_rates import seed_cnb_rates as _seed_cnb_rates

    return _seed_cnb_rates(*args, **kwargs)


class DatabaseBackend(str, Enum):
    """Supported database engines for CnbFixing."""

    SQLITE = "sqlite"
    MYSQL = "mysql"
    POSTGRES = "postgres"
    MONGODB = "mongodb"


# DSN scheme (without any ``+driver`` suffix) -> backend and the scheme the driver expects.
_SCHEMES: dict[str, tuple[DatabaseBackend, str]] = {
    "sqlite": (DatabaseBackend.SQLITE, "sqlite"),
    "postgres": (DatabaseBackend.POSTGRES, "postgresql"),
    "postgresql": (DatabaseBackend.POSTGRES, "postgresql"),
    "mysql": (DatabaseBackend.MYSQL, "mysql"),
    "mariadb": (DatabaseBackend.MYSQL, "mysql"),
    "mongodb": (DatabaseBackend.MONGODB, "mongodb"),
}


@dataclass(slots=True)
class DatabaseConnectionInfo:
    """Which store to open: the backend, its driver URL and the database name.

    For SQLite ``name`` is the database file path.
    """

    backend: DatabaseBackend
    url: str
    name: str | None = None

    @classmethod
    def from_url(cls, url: str) -> "DatabaseConnectionInfo":
        """Parse a DSN such as ``postgres://user:pwd@db/fx`` or ``sqlite:///rates.db``.

        Mongo style DSNs may carry the database name as a ``DATABASE_NAME=``
        query parameter instead of the path.
        """

        scheme, separator, _ = url.partition("://")
        if not separator or not scheme:
            raise ValidationError("DB_URL must include a scheme (e.g. mysql:// or postgres://)")
        base_scheme, plus, driver = scheme.lower().partition("+")
        if base_scheme not in _SCHEMES:
            raise ValidationError(
                "Unsupported database backend. Supported values are SQLite, MySQL, "
                "Postgres, and MongoDB."
            )
        backend, canonical_scheme = _SCHEMES[base_scheme]

        if backend is DatabaseBackend.SQLITE:
            # urlunparse would collapse the ``////`` of absolute SQLite paths.
            _, _, db_path = url.partition(":///")
            if not db_path:
                raise ValidationError("SQLite DSN must include a file path (sqlite:///rates.db)")
            return cls.default_sqlite(db_path)

        parsed = urlparse(url)._replace(scheme=f"{canonical_scheme}{plus}{driver}")
        name = parsed.path.lstrip("/") or None
        query: list[tuple[str, str]] = []
        for key, value in parse_qsl(parsed.query, keep_blank_values=True):
            if key.upper() == "DATABASE_NAME":
                name = name or value or None
                continue
            query.append((key, value))
        parsed = parsed._replace(path=f"/{name}" if name else parsed.path, query=urlencode(query))
        return cls(backend=backend, url=urlunparse(parsed), name=name)

    @classmethod
    def default_sqlite(cls, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> "DatabaseConnectionInfo":
        path = Path(db_path)
        return cls(
            backend=DatabaseBackend.SQLITE,
            url=f"sqlite:///{quote(path.as_posix(), safe='/:')}",
            name=str(path),
        )


class CnbFixing:
    """Package facade wiring a rate store, the CNB feed and both engines.

    The store is opened lazily on first use and released by :meth:`close` (or
    by leaving a ``with`` block). A process that hosts the facade should call
    :meth:`start` once so today's fixing is present before the first scheduled
    run.
    """

    __slots__ = ("connection_info", "backend", "_store", "_fetcher", "_owns_fetcher")

    _DRIVER_HINTS: dict[DatabaseBackend, str] = {
        DatabaseBackend.POSTGRES: "Install psycopg2 via 'pip install cnb-fixing[postgres]'.",
        DatabaseBackend.MYSQL: "Install PyMySQL via 'pip install cnb-fixing[mysql]'.",
    }

    __version__ = __version__

    def __init__(
        self,
        db_config: DatabaseConnectionInfo | str | None = None,
        *,
        fetcher: FeedFetcher | None = None,
        feed_url: str | None = None,
        timeout: float = DEFAULT_TIMEOUT,
        store: RateStore | None = None,
    ) -> None:
        if isinstance(db_config, DatabaseConnectionInfo):
            self.connection_info = db_config
        elif isinstance(db_config, str) and db_config:
            self.connection_info = DatabaseConnectionInfo.from_url(db_config)
        else:
            self.connection_info = DatabaseConnectionInfo.default_sqlite()
        self.backend = self.connection_info.backend.value
        self._store: RateStore | None = store
        self._owns_fetcher = fetcher is None
        self._fetcher: FeedFetcher = fetcher or CNBFeedClient(
            base_url=feed_url or CNB_DAILY_URL, timeout=timeout
        )

    def _build_store(self) -> RateStore:
        info = self.connection_info
        if info.backend is DatabaseBackend.SQLITE:
            # SQLiteBackend creates its schema on construction.
            return SQLiteBackend(info.name or DEFAULT_SQLITE_DB_PATH)
        store: RateStore
        if info.backend is DatabaseBackend.POSTGRES:
            store = PostgresBackend(info.url)
        elif info.backend is DatabaseBackend.MYSQL:
            store = MySQLBackend(info.url)
        elif info.backend is DatabaseBackend.MONGODB:
            store = MongoBackend(info.url, database=info.name)
        else:
            raise ValidationError(f"Unsupported backend: {info.backend}")
        store.ensure_schema()
        return store

    @property
    def store(self) -> RateStore:
        if self._store is None:
            self._store = self._build_store()
        return self._store

    def sync_engine(self) -> SyncEngine:
        return SyncEngine(self.store, self._fetcher)

    def aggregation_engine(self) -> AggregationEngine:
        return AggregationEngine(self.store)

    def start(self) -> SyncSummary:
        """Seed today's fixing; called once when the hosting process comes up."""

        return self.sync_engine().sync_today()

    def sync_one_day(self, rate_date: date | str) -> SyncSummary:
        return self.sync_engine().sync_one_day(parse_date(rate_date))

    def sync_range(self, from_date: date | str, to_date: date | str) -> List[SyncSummary]:
        """Synchronise every fixing date between ``from_date`` and ``to_date`` inclusive."""

        window = date_range(from_date, to_date)
        return self.sync_engine().sync_range(window.start, window.end)

    def report(
        self,
        from_date: date | str,
        to_date: date | str,
        currencies: Iterable[str] | str,
    ) -> Dict[str, RateStats]:
        # Reject bad input before the store is opened.
        window = date_range(from_date, to_date)
        codes = normalise_codes(currencies)
        return self.aggregation_engine().report(window.start, window.end, codes)

    def report_rows(
        self,
        from_date: date | str,
        to_date: date | str,
        currencies: Iterable[str] | str,
    ) -> List[Dict[str, Any]]:
        """Report as a list of ``{"currency", "minRate", "maxRate", "avgRate"}`` rows."""

        return [
            {
                "currency": code,
                "minRate": stats.min,
                "maxRate": stats.max,
                "avgRate": stats.avg,
            }
            for code, stats in self.report(from_date, to_date, currencies).items()
        ]

    def all_records(self) -> List[RateRecord]:
        return self.store.find_all()

    def connection(self) -> tuple[bool, str | None]:
        """Attempt to establish a database connection and report the outcome."""

        if self.connection_info.backend is DatabaseBackend.MONGODB:
            return self._probe_mongodb()
        return self._probe_relational_db()

    def _missing_driver_message(self, exc: ModuleNotFoundError) -> str:
        module_name = exc.name or str(exc)
        base = (
            f"Missing optional dependency '{module_name}' required for "
            f"{self.connection_info.backend.value} connections."
        )
        hint = self._DRIVER_HINTS.get(self.connection_info.backend)
        return f"{base} {hint}" if hint else base

    def _probe_relational_db(self) -> tuple[bool, str | None]:
        engine = None
        try:
            engine = create_engine(self.connection_info.url, future=True)
            with engine.connect() as conn:
                conn.execute(text("SELECT 1"))
        except ModuleNotFoundError as exc:
            return False, self._missing_driver_message(exc)
        except Exception as exc:  # pragma: no cover - SQLAlchemy provides error detail
            return False, str(exc)
        finally:
            if engine is not None:
                engine.dispose()
        return True, None

    def _probe_mongodb(self) -> tuple[bool, str | None]:
        client: MongoClient | None = None
        try:
            client = MongoClient(self.connection_info.url, serverSelectionTimeoutMS=5000)
            client.admin.command("ping")
        except Exception as exc:  # pragma: no cover - pymongo surfaces detail
            return False, str(exc)
        finally:
            if client is not None:
                client.close()
        return True, None

    def close(self) -> None:
        if self._store is not None:
            self._store.close()
            self._store = None
        if self._owns_fetcher and isinstance(self._fetcher, CNBFeedClient):
            self._fetcher.close()

    def __enter__(self) -> "CnbFixing":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
