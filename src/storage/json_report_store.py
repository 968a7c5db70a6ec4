# src/storage/json_report_store.py — v2
"""Local filesystem report store: one JSON document per report."""

from __future__ import annotations

import json
import logging
import os
import re
from pathlib import Path
from typing import Any

from pydantic import ValidationError

from soilsense.core.models import ReportRecord, ReportStatus
from soilsense.storage.base_report_store import (
    BaseReportStore,
    PersistenceError,
    ReportNotFoundError,
    apply_update,
    select_page,
)

logger = logging.getLogger(__name__)

# Report ids are uuid4 hex; anything else never reaches the filesystem.
_REPORT_ID_RE = re.compile(r"[0-9a-f]{32}")


class JsonReportStore(BaseReportStore):
    """Persist each report as ``<root>/<id>.json``.

    Writes go to a temporary file that replaces the target, so readers see
    either the previous or the new version of a record.
    """

    def __init__(self, root: str | Path) -> None:
        self._root = Path(root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    def _path(self, report_id: str) -> Path:
        if not _REPORT_ID_RE.fullmatch(report_id):
            raise ReportNotFoundError(report_id)
        return self._root / f"{report_id}.json"

    def _load(self, path: Path) -> ReportRecord:
        try:
            return ReportRecord.model_validate_json(path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            raise ReportNotFoundError(path.stem) from None
        except (OSError, ValidationError) as e:
            raise PersistenceError(f"Cannot read report {path.stem}: {e}") from e

    def _save(self, record: ReportRecord) -> None:
        target = self._path(record.id)
        tmp = target.with_suffix(".json.tmp")
        try:
            tmp.write_text(
                json.dumps(record.to_dict(), ensure_ascii=False, indent=2),
                encoding="utf-8",
            )
            os.replace(tmp, target)
        except OSError as e:
            raise PersistenceError(f"Cannot write report {record.id}: {e}") from e

    async def create(self, record: ReportRecord) -> ReportRecord:
        if not _REPORT_ID_RE.fullmatch(record.id):
            raise PersistenceError(f"Invalid report id: {record.id!r}")
        if self._path(record.id).exists():
            raise PersistenceError(f"Report already exists: {record.id}")
        self._save(record)
        return record

    async def get(self, report_id: str) -> ReportRecord:
        return self._load(self._path(report_id))

    async def update(self, report_id: str, **fields: Any) -> ReportRecord:
        updated = apply_update(self._load(self._path(report_id)), fields)
        self._save(updated)
        return updated

    async def list(
        self,
        owner_id: str | None = None,
        status: ReportStatus | None = None,
        offset: int = 0,
        limit: int = 10,
    ) -> tuple[list[ReportRecord], int]:
        records = []
        for path in sorted(self._root.glob("*.json")):
            try:
                records.append(self._load(path))
            except PersistenceError as e:
                logger.warning("Skipping unreadable report file %s: %s", path.name, e)
        return select_page(records, owner_id, status, offset, limit)
