"""MongoDB backend strategy.

Documents keep the ``currencies`` collection layout used by the original
service (``currencyCode``, ``rate``, ``date``) so existing data stays readable.
BSON has no date-only type, so fixing dates are stored as midnight datetimes.
"""

from __future__ import annotations

from datetime import date, datetime, time, timezone
from typing import Any, Iterable

from pymongo import ASCENDING, MongoClient, ReturnDocument
from pymongo.errors import ConfigurationError, PyMongoError

from cnb_fixing.db.base_backend import RateStore
from cnb_fixing.errors import StoreError, ValidationError
from cnb_fixing.ingestion.models import RateRecord
from cnb_fixing.utils.logger import get_logger

LOGGER = get_logger(__name__)

COLLECTION_NAME = "currencies"


class MongoBackend(RateStore):
    """Rate store that persists fixing rates inside MongoDB."""

    def __init__(self, url: str, *, database: str | None = None) -> None:
        self.url = url
        self._client = MongoClient(url)
        if database is None:
            try:
                db = self._client.get_default_database()
            except ConfigurationError as exc:
                self._client.close()
                raise ValidationError("MongoDB connection URI must include a database name") from exc
        else:
            db = self._client[database]
        self._collection = db[COLLECTION_NAME]

    def ensure_schema(self) -> None:
        try:
            LOGGER.info("Ensuring MongoDB %s collection exists", COLLECTION_NAME)
            self._client.admin.command("ping")
            self._collection.create_index(
                [("currencyCode", ASCENDING), ("date", ASCENDING)], unique=True
            )
        except PyMongoError as exc:
            raise StoreError(f"Failed to ensure MongoDB schema: {exc}") from exc

    def upsert(self, code: str, rate_date: date, rate: float) -> RateRecord:
        try:
            doc = self._collection.find_one_and_update(
                {"currencyCode": code, "date": _to_datetime(rate_date)},
                {"$set": {"rate": rate, "updatedAt": datetime.now(timezone.utc)}},
                upsert=True,
                return_document=ReturnDocument.AFTER,
            )
        except PyMongoError as exc:
            raise StoreError(f"Failed to upsert {code} for {rate_date}: {exc}") from exc
        return _to_record(doc)

    def query_range(self, start: date, end: date, codes: Iterable[str]) -> list[RateRecord]:
        code_list = sorted(set(codes))
        if not code_list:
            return []
        query: dict[str, Any] = {
            "date": {"$gte": _to_datetime(start), "$lte": _to_datetime(end)},
            "currencyCode": {"$in": code_list},
        }
        return self._find(query)

    def find_all(self) -> list[RateRecord]:
        return self._find({})

    def _find(self, query: dict[str, Any]) -> list[RateRecord]:
        try:
            docs = self._collection.find(query).sort([("date", ASCENDING), ("currencyCode", ASCENDING)])
            return [_to_record(doc) for doc in docs]
        except PyMongoError as exc:
            raise StoreError(f"Failed to read MongoDB rates: {exc}") from exc

    def close(self) -> None:
        self._client.close()


def _to_datetime(day: date) -> datetime:
    return datetime.combine(day, time.min)


def _to_record(doc: dict[str, Any]) -> RateRecord:
    stored = doc["date"]
    rate_date = stored.date() if isinstance(stored, datetime) else date.fromisoformat(str(stored))
    return RateRecord(rate_date=rate_date, currency=doc["currencyCode"], rate=float(doc["rate"]))


__all__ = ["COLLECTION_NAME", "MongoBackend"]
