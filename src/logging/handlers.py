# src/logging/handlers.py — v2
"""Size-based rotating file handler for LOG_FILE."""

from __future__ import annotations

import re
from logging.handlers import RotatingFileHandler
from pathlib import Path

_UNITS = {"": 1, "B": 1, "KB": 1024, "MB": 1024**2, "GB": 1024**3}
_SIZE_RE = re.compile(r"^(\d+)\s*([KMG]?B?)$", re.IGNORECASE)


def _parse_size(size_str: str) -> int:
    """Convert LOG_ROTATION ("10MB", "512kb", "1048576") to bytes."""
    match = _SIZE_RE.match(size_str.strip())
    if not match:
        raise ValueError(f"Invalid size format: {size_str!r}. Use e.g. '10MB'.")
    unit = match.group(2).upper()
    if unit in ("K", "M", "G"):
        unit += "B"
    return int(match.group(1)) * _UNITS[unit]


def create_rotating_handler(
    log_file: str | Path,
    rotation: str = "10MB",
    retention: int = 30,
) -> RotatingFileHandler:
    """Rotating handler writing UTF-8 to log_file; parent dirs are created.

    The file is opened on the first emitted record.
    """
    path = Path(log_file).expanduser()
    path.parent.mkdir(parents=True, exist_ok=True)
    return RotatingFileHandler(
        filename=str(path),
        maxBytes=_parse_size(rotation),
        backupCount=retention,
        encoding="utf-8",
        delay=True,
    )
