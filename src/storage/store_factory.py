# src/storage/store_factory.py — v1
"""Factory: instantiate the report store from configuration."""

from __future__ import annotations

from soilsense.config.settings import Settings
from soilsense.storage.base_report_store import BaseReportStore
from soilsense.storage.memory_report_store import MemoryReportStore


def create_report_store(settings: Settings) -> BaseReportStore:
    """Create the report store selected by REPORT_STORE_BACKEND.

    Raises:
        ValueError: If the backend is not supported.
    """
    if settings.report_store_backend == "memory":
        return MemoryReportStore()

    if settings.report_store_backend == "json":
        from soilsense.storage.json_report_store import JsonReportStore
        return JsonReportStore(settings.report_store_root)

    raise ValueError(f"Unsupported report store: {settings.report_store_backend!r}")
