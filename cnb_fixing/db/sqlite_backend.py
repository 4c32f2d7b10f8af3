"""SQLite backend strategy implementation."""

from __future__ import annotations

from pathlib import Path
from typing import Any

from cnb_fixing.db import DEFAULT_SQLITE_DB_PATH
from cnb_fixing.db.relational_backend import RelationalBackend


class SQLiteBackend(RelationalBackend):
    """Rate store kept in a local SQLite file; the schema is created on construction."""

    def __init__(self, db_path: str | Path = DEFAULT_SQLITE_DB_PATH) -> None:
        self.db_path = Path(db_path).expanduser().resolve()
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(f"sqlite:///{self.db_path}")
        self.ensure_schema()

    def _engine_options(self) -> dict[str, Any]:
        return {"connect_args": {"check_same_thread": False}}


__all__ = ["SQLiteBackend"]
