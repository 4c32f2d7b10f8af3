"""Synchronisation and reporting engines built on top of a rate store."""

from __future__ import annotations

from cnb_fixing.engine.aggregation import AggregationEngine
from cnb_fixing.engine.sync import SyncEngine

__all__ = ["AggregationEngine", "SyncEngine"]
