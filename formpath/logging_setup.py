"""Logging for the FormPath API process.

One stdout handler on the root logger carries the wizard, export and
persistence events (`event_name key=value` lines). The PDF libraries used by
the overlay and summary renderers are held at WARNING so an export does not
flood the log with per-object chatter. `FORMPATH_LOG_LEVEL` sets the level
for the application loggers.
"""
from __future__ import annotations

import logging
import os
from logging.config import dictConfig
from typing import Any, Dict

LOG_LEVEL_ENV = "FORMPATH_LOG_LEVEL"
DEFAULT_LEVEL = "INFO"

# PDF libraries log per page and per object at lower levels
QUIET_LIBRARIES = ("fitz", "reportlab")


def logging_config(level: str | None = None) -> Dict[str, Any]:
    """Build the `dictConfig` payload for the given (or environment) level."""
    level = (level or os.environ.get(LOG_LEVEL_ENV) or DEFAULT_LEVEL).upper()
    server = {"level": level, "handlers": ["console"], "propagate": False}
    loggers: Dict[str, Any] = {name: {"level": "WARNING"} for name in QUIET_LIBRARIES}
    loggers.update({name: dict(server) for name in ("uvicorn", "uvicorn.error", "uvicorn.access")})
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "default": {"format": "%(asctime)s %(levelname)s:%(name)s:%(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": level,
                "formatter": "default",
                "stream": "ext://sys.stdout",
            }
        },
        "root": {"level": level, "handlers": ["console"]},
        "loggers": loggers,
    }


def configure_logging(level: str | None = None) -> None:
    """Install the FormPath handlers unless the root logger already has some."""
    root = logging.getLogger()
    if root.handlers:
        return
    dictConfig(logging_config(level))


__all__ = ["LOG_LEVEL_ENV", "logging_config", "configure_logging"]
