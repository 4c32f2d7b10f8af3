"""PostgreSQL backend strategy."""

from __future__ import annotations

from typing import Any

from cnb_fixing.db.relational_backend import RelationalBackend


class PostgresBackend(RelationalBackend):
    """Relational backend for PostgreSQL; upserts use ``ON CONFLICT DO UPDATE``."""

    def _engine_options(self) -> dict[str, Any]:
        return {"pool_pre_ping": True}


__all__ = ["PostgresBackend"]
