# src/storage/memory_report_store.py — v1
"""In-process report store (default backend)."""

from __future__ import annotations

import threading
from typing import Any

from soilsense.core.models import ReportRecord, ReportStatus
from soilsense.storage.base_report_store import (
    BaseReportStore,
    PersistenceError,
    ReportNotFoundError,
    apply_update,
    select_page,
)


class MemoryReportStore(BaseReportStore):
    """Keep records in a dict. Returned records are copies."""

    def __init__(self) -> None:
        self._records: dict[str, ReportRecord] = {}
        self._lock = threading.Lock()

    async def create(self, record: ReportRecord) -> ReportRecord:
        with self._lock:
            if record.id in self._records:
                raise PersistenceError(f"Report already exists: {record.id}")
            self._records[record.id] = record.model_copy(deep=True)
        return record.model_copy(deep=True)

    async def get(self, report_id: str) -> ReportRecord:
        with self._lock:
            record = self._records.get(report_id)
        if record is None:
            raise ReportNotFoundError(report_id)
        return record.model_copy(deep=True)

    async def update(self, report_id: str, **fields: Any) -> ReportRecord:
        with self._lock:
            current = self._records.get(report_id)
            if current is None:
                raise ReportNotFoundError(report_id)
            updated = apply_update(current, fields)
            self._records[report_id] = updated
        return updated.model_copy(deep=True)

    async def list(
        self,
        owner_id: str | None = None,
        status: ReportStatus | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[ReportRecord], int]:
        with self._lock:
            records = list(self._records.values())
        page, total = select_page(records, owner_id, status, offset, limit)
        return [r.model_copy(deep=True) for r in page], total
