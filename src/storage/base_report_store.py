# src/storage/base_report_store.py — v1
"""Abstract report store interface.

Every lifecycle transition is a single ``update`` call, so a backend only
has to make one update atomic with respect to concurrent readers.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Any

from soilsense.core.models import ReportRecord, ReportStatus


class PersistenceError(Exception):
    """The backing store could not read or write a record."""


class ReportNotFoundError(LookupError):
    """No record with the requested id."""

    def __init__(self, report_id: str) -> None:
        self.report_id = report_id
        super().__init__(f"Report not found: {report_id}")


class BaseReportStore(ABC):
    """Unified interface for report storage backends."""

    @abstractmethod
    async def create(self, record: ReportRecord) -> ReportRecord:
        """Persist a new record."""

    @abstractmethod
    async def get(self, report_id: str) -> ReportRecord:
        """Return the record or raise ReportNotFoundError."""

    @abstractmethod
    async def update(self, report_id: str, **fields: Any) -> ReportRecord:
        """Apply fields to the record atomically and return the new version."""

    @abstractmethod
    async def list(
        self,
        owner_id: str | None = None,
        status: ReportStatus | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[ReportRecord], int]:
        """Return one page of matching records (newest first) and the total count."""


def apply_update(record: ReportRecord, fields: dict[str, Any]) -> ReportRecord:
    """Return a validated copy of record with fields replaced.

    Raises:
        PersistenceError: If fields name unknown attributes.
    """
    unknown = set(fields) - set(ReportRecord.model_fields)
    if unknown:
        raise PersistenceError(f"Unknown report fields: {sorted(unknown)}")
    data = record.model_dump()
    data.update(fields)
    return ReportRecord.model_validate(data)


def select_page(
    records: list[ReportRecord],
    owner_id: str | None,
    status: ReportStatus | None,
    offset: int,
    limit: int,
) -> tuple[list[ReportRecord], int]:
    """Filter, sort newest first and slice records."""
    matching = [
        r for r in records
        if (owner_id is None or r.owner_id == owner_id)
        and (status is None or r.status == status)
    ]
    matching.sort(key=lambda r: r.created_at, reverse=True)
    return matching[offset:offset + limit], len(matching)
