# src/logging/context.py — v1
"""Contextual logging support: attach report_id and pipeline stage to log records."""

from __future__ import annotations

import contextvars
from dataclasses import dataclass
from typing import Any

# Context variables for structured logging, set per background analysis task.
_report_id: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "report_id", default=None
)
_stage: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "stage", default=None
)


@dataclass
class LogContext:
    """Immutable snapshot of current logging context."""

    report_id: str | None = None
    stage: str | None = None

    def as_dict(self) -> dict[str, Any]:
        """Return non-None fields as dict for JSON log injection."""
        return {k: v for k, v in self.__dict__.items() if v is not None}


def get_context() -> LogContext:
    """Snapshot current context variables."""
    return LogContext(report_id=_report_id.get(), stage=_stage.get())


def set_report_context(report_id: str) -> None:
    """Set report-level context (called once per analysis task)."""
    _report_id.set(report_id)


def set_stage(stage: str | None) -> None:
    """Set the current pipeline stage (extraction, validation, upstream, ...)."""
    _stage.set(stage)


def clear_context() -> None:
    """Reset all context variables."""
    _report_id.set(None)
    _stage.set(None)
