"""Helpers for locating the default SQLite database."""

from __future__ import annotations

from pathlib import Path
from typing import Final

__all__ = ["DEFAULT_SQLITE_DB_PATH", "default_sqlite_path"]

# Resolved relative to this package so the default store does not depend on the
# working directory of the process.
DEFAULT_SQLITE_DB_PATH: Final[Path] = Path(__file__).resolve().with_name("cnb_rates.db")


def default_sqlite_path() -> Path:
    """Return the absolute path to the default ``cnb_rates.db`` file."""

    return DEFAULT_SQLITE_DB_PATH
