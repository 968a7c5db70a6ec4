# src/logging/logger.py — v2
"""Logger factory with JSON and text formatters.

Both formatters read the report/stage context set by the lifecycle manager,
so every line logged from a background analysis can be traced to its report.
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

from soilsense.logging.context import get_context

ROOT_LOGGER_NAME = "soilsense"


class _ContextFormatter(logging.Formatter):
    """Shared helpers: record time in UTC and rendered exception text."""

    @staticmethod
    def _timestamp(record: logging.LogRecord) -> datetime:
        return datetime.fromtimestamp(record.created, tz=timezone.utc)

    def _exception_text(self, record: logging.LogRecord) -> str | None:
        if record.exc_info and record.exc_info[1] is not None:
            return self.formatException(record.exc_info)
        return None


class JsonFormatter(_ContextFormatter):
    """One JSON object per line."""

    def format(self, record: logging.LogRecord) -> str:
        entry: dict[str, Any] = {
            "timestamp": self._timestamp(record).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        context = get_context().as_dict()
        if context:
            entry["context"] = context

        # logger.info(..., extra={"data": {...}})
        data = getattr(record, "data", None)
        if data:
            entry["data"] = data

        exception = self._exception_text(record)
        if exception:
            entry["exception"] = exception
        return json.dumps(entry, default=str, ensure_ascii=False)


class TextFormatter(_ContextFormatter):
    """Human-readable lines for development."""

    def format(self, record: logging.LogRecord) -> str:
        ctx = get_context()
        head = f"{self._timestamp(record):%Y-%m-%d %H:%M:%S} [{record.levelname:8s}] {record.name}"
        if ctx.report_id:
            head += f" [report={ctx.report_id}]"
        if ctx.stage:
            head += f" ({ctx.stage})"
        line = f"{head} - {record.getMessage()}"

        exception = self._exception_text(record)
        return f"{line}\n{exception}" if exception else line


def get_logger(name: str) -> logging.Logger:
    """Get a named logger under the soilsense root. See setup_logging()."""
    return logging.getLogger(f"{ROOT_LOGGER_NAME}.{name}")


def setup_logging(
    level: str = "INFO",
    log_format: str = "json",
    log_file: str | None = None,
    rotation: str = "10MB",
    retention: int = 30,
    stream: TextIO | None = None,
) -> None:
    """Configure the soilsense root logger. Safe to call more than once.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR).
        log_format: "json" or "text".
        log_file: Also write to this file, rotated by size.
        rotation: Max file size before rotation (e.g. "10MB").
        retention: Number of rotated files to keep.
        stream: Console stream (default stdout; the CLI passes stderr).
    """
    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    root_logger.setLevel(getattr(logging, level.upper(), logging.INFO))

    for handler in list(root_logger.handlers):
        handler.close()
    root_logger.handlers.clear()

    formatter: logging.Formatter = JsonFormatter() if log_format == "json" else TextFormatter()

    handlers: list[logging.Handler] = [logging.StreamHandler(stream or sys.stdout)]
    if log_file:
        from soilsense.logging.handlers import create_rotating_handler

        handlers.append(
            create_rotating_handler(log_file, rotation=rotation, retention=retention)
        )

    for handler in handlers:
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
