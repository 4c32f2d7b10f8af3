"""MySQL backend strategy."""

from __future__ import annotations

from typing import Any

from cnb_fixing.db.relational_backend import RelationalBackend


class MySQLBackend(RelationalBackend):
    """Relational backend for MySQL/MariaDB; upserts use ``ON DUPLICATE KEY UPDATE``."""

    def _engine_options(self) -> dict[str, Any]:
        # Recycle before the server's default wait_timeout drops idle connections.
        return {"pool_pre_ping": True, "pool_recycle": 3600}


__all__ = ["MySQLBackend"]
