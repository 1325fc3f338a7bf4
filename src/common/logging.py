"""Logging configuration shared by the runners."""

from __future__ import annotations

import copy
import logging
from logging.config import dictConfig
from typing import Any

LOGGING_CONFIG: dict[str, Any] = {
    "version": 1,
    "disable_existing_loggers": False,
    "formatters": {
        "default": {
            "format": "%(asctime)s | %(levelname)s | %(name)s | %(message)s",
        },
    },
    "handlers": {
        "default": {
            "class": "logging.StreamHandler",
            "formatter": "default",
            "stream": "ext://sys.stderr",
        },
    },
    "loggers": {
        # httpx logs every request at INFO; keep it quiet unless debugging
        "httpx": {"level": "WARNING"},
        "httpcore": {"level": "WARNING"},
    },
    "root": {"handlers": ["default"], "level": "INFO"},
}


def configure_logging(level: str | int = "INFO") -> None:
    """Configure the logging subsystem for a run."""

    if isinstance(level, str):
        level = level.strip().upper()
        if level not in logging.getLevelNamesMapping():
            level = "INFO"
    config = copy.deepcopy(LOGGING_CONFIG)
    config["root"]["level"] = level

    dictConfig(config)
    logging.getLogger(__name__).debug("Logging configured with level %s", level)
