"""Logging setup shared by every cnb_fixing module."""

from __future__ import annotations

import logging
import os

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_LEVEL_ENV = "CNB_FIXING_LOG_LEVEL"

_configured = False


def resolve_level(value: str | None) -> int:
    """Map a level name such as ``"debug"`` to its number; unknown names mean INFO."""

    if not value:
        return logging.INFO
    level = logging.getLevelName(value.strip().upper())
    return level if isinstance(level, int) else logging.INFO


def get_logger(name: str = "cnb_fixing") -> logging.Logger:
    """Return the named logger, configuring root logging on the first call.

    The root level is read from ``CNB_FIXING_LOG_LEVEL`` once.
    """
    global _configured
    if not _configured:
        logging.basicConfig(level=resolve_level(os.environ.get(LOG_LEVEL_ENV)), format=LOG_FORMAT)
        _configured = True
    return logging.getLogger(name)


__all__ = ["LOG_FORMAT", "LOG_LEVEL_ENV", "get_logger", "resolve_level"]
