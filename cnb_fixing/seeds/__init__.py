"""Database seeding utilities for :mod:`cnb_fixing`."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

__all__ = ["seed_cnb_rates"]

if TYPE_CHECKING:  # pragma: no cover - import only for static analyzers
    from cnb_fixing.seeds.populate_cnb_rates import seed_cnb_rates as seed_cnb_rates


def __getattr__(name: str) -> Any:
    """Lazily expose seed helpers to avoid import-time side effects."""

    if name == "seed_cnb_rates":
        from cnb_fixing.seeds.populate_cnb_rates import seed_cnb_rates as _seed

        return _seed
    raise AttributeError(f"module 'cnb_fixing.seeds' has no attribute {name}")
