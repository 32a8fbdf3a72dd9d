"""
Logging helpers: module loggers for library code, one-shot setup for the CLI.
"""

from __future__ import annotations

import logging
import os
import sys
from datetime import datetime, timezone

ENV_LOG_LEVEL = "CHARTFLOW_LOG_LEVEL"
DEFAULT_LOG_LEVEL = "WARNING"


class PlainFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:  # type: ignore[override]
        timestamp = datetime.fromtimestamp(record.created, timezone.utc).isoformat(timespec="seconds")
        return f"{timestamp} {record.levelname} {record.name}: {record.getMessage()}"


def _level_from_str(level: str) -> int:
    value = getattr(logging, level.upper(), None)
    if isinstance(value, int):
        return value
    return logging.WARNING


def setup_logging(level: str | None = None) -> None:
    """
    Configure the chartflow logger once. Subsequent calls are no-ops.
    Level: argument, else CHARTFLOW_LOG_LEVEL, else WARNING.
    """
    if getattr(setup_logging, "_configured", False):
        return

    resolved = _level_from_str(level or os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL)

    handler = logging.StreamHandler(stream=sys.stderr)
    handler.setFormatter(PlainFormatter())

    root = logging.getLogger("chartflow")
    root.setLevel(resolved)
    root.handlers = [handler]
    root.propagate = False

    setattr(setup_logging, "_configured", True)


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
