"""Shared logic for SQL (SQLite/Postgres/MySQL) backends."""

from __future__ import annotations

from datetime import date, datetime, timezone
from typing import Any, Iterable

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    MetaData,
    Numeric,
    PrimaryKeyConstraint,
    String,
    Table,
    create_engine,
    select,
    text,
)
from sqlalchemy.dialects.mysql import insert as mysql_insert
from sqlalchemy.dialects.postgresql import insert as postgresql_insert
from sqlalchemy.dialects.sqlite import insert as sqlite_insert
from sqlalchemy.engine import Engine
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.sql.dml import Insert

from cnb_fixing.db.base_backend import RateStore
from cnb_fixing.errors import StoreError
from cnb_fixing.ingestion.models import RateRecord
from cnb_fixing.utils.logger import get_logger

LOGGER = get_logger(__name__)

METADATA = MetaData()

RATES_TABLE = Table(
    "cnb_rates",
    METADATA,
    Column("rate_date", Date, nullable=False),
    Column("currency_code", String(8), nullable=False),
    Column("rate", Numeric(18, 6, asdecimal=False), nullable=False),
    Column("updated_at", DateTime, nullable=False),
    PrimaryKeyConstraint("rate_date", "currency_code", name="pk_cnb_rates"),
)

KEY_COLUMNS = ("rate_date", "currency_code")


class RelationalBackend(RateStore):
    """Rate store backed by a SQLAlchemy engine.

    Upserts use the dialect's native conditional insert so the write is a
    single statement guarded by the primary key.
    """

    def __init__(self, url: str) -> None:
        self.url = url
        self._engine_instance: Engine | None = None

    def _engine_options(self) -> dict[str, Any]:
        return {}

    def _get_engine(self) -> Engine:
        if self._engine_instance is None:
            self._engine_instance = create_engine(self.url, future=True, **self._engine_options())
        return self._engine_instance

    def ensure_schema(self) -> None:
        engine = self._get_engine()
        try:
            with engine.begin() as connection:
                LOGGER.info("Ensuring cnb_rates schema exists")
                connection.execute(text("SELECT 1"))
                METADATA.create_all(connection)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to ensure cnb_rates schema: {exc}") from exc

    def _upsert_statement(self, values: dict[str, Any]) -> Insert:
        dialect = self._get_engine().dialect.name
        if dialect in {"sqlite", "postgresql"}:
            insert = sqlite_insert if dialect == "sqlite" else postgresql_insert
            stmt = insert(RATES_TABLE).values(**values)
            return stmt.on_conflict_do_update(
                index_elements=list(KEY_COLUMNS),
                set_={"rate": stmt.excluded.rate, "updated_at": stmt.excluded.updated_at},
            )
        if dialect in {"mysql", "mariadb"}:
            stmt = mysql_insert(RATES_TABLE).values(**values)
            return stmt.on_duplicate_key_update(
                rate=stmt.inserted.rate,
                updated_at=stmt.inserted.updated_at,
            )
        raise StoreError(f"Unsupported SQL dialect for upserts: {dialect}")

    def upsert(self, code: str, rate_date: date, rate: float) -> RateRecord:
        values = {
            "rate_date": rate_date,
            "currency_code": code,
            "rate": rate,
            "updated_at": datetime.now(timezone.utc).replace(tzinfo=None),
        }
        statement = self._upsert_statement(values)
        try:
            with self._get_engine().begin() as connection:
                connection.execute(statement)
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to upsert {code} for {rate_date}: {exc}") from exc
        return RateRecord(rate_date=rate_date, currency=code, rate=rate)

    def query_range(self, start: date, end: date, codes: Iterable[str]) -> list[RateRecord]:
        code_list = sorted(set(codes))
        if not code_list:
            return []
        stmt = (
            select(RATES_TABLE)
            .where(RATES_TABLE.c.rate_date >= start)
            .where(RATES_TABLE.c.rate_date <= end)
            .where(RATES_TABLE.c.currency_code.in_(code_list))
            .order_by(RATES_TABLE.c.rate_date, RATES_TABLE.c.currency_code)
        )
        return self._fetch(stmt)

    def find_all(self) -> list[RateRecord]:
        stmt = select(RATES_TABLE).order_by(
            RATES_TABLE.c.rate_date, RATES_TABLE.c.currency_code
        )
        return self._fetch(stmt)

    def _fetch(self, stmt) -> list[RateRecord]:
        try:
            with self._get_engine().connect() as connection:
                rows = connection.execute(stmt).mappings().all()
        except SQLAlchemyError as exc:
            raise StoreError(f"Failed to read cnb_rates: {exc}") from exc
        return [
            RateRecord(
                rate_date=_normalise_rate_date(row["rate_date"]),
                currency=row["currency_code"],
                rate=float(row["rate"]),
            )
            for row in rows
        ]

    def close(self) -> None:
        if self._engine_instance is not None:
            self._engine_instance.dispose()
            self._engine_instance = None


def _normalise_rate_date(value: object) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    return date.fromisoformat(str(value))


__all__ = ["KEY_COLUMNS", "METADATA", "RATES_TABLE", "RelationalBackend"]
