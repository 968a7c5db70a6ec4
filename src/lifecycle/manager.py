# src/lifecycle/manager.py — v1
"""Report lifecycle: PENDING -> ANALYZING -> COMPLETED | FAILED.

The manager is the only writer of report records after creation. Analysis
runs as a detached asyncio task per report; callers observe progress by
polling ``get_status``.
"""

from __future__ import annotations

import asyncio
import logging
import uuid
from typing import Any

from soilsense.analysis.orchestrator import AnalysisOrchestrator
from soilsense.core.clock import Clock, utc_now
from soilsense.core.models import (
    AnalysisFailure,
    ReportPage,
    ReportRecord,
    ReportStatus,
    ReportStatusView,
    Season,
)
from soilsense.logging.context import clear_context, set_report_context, set_stage
from soilsense.storage.base_report_store import BaseReportStore

logger = logging.getLogger(__name__)

ALLOWED_TRANSITIONS: dict[ReportStatus, frozenset[ReportStatus]] = {
    ReportStatus.PENDING: frozenset({ReportStatus.ANALYZING, ReportStatus.FAILED}),
    ReportStatus.ANALYZING: frozenset({ReportStatus.COMPLETED, ReportStatus.FAILED}),
    ReportStatus.COMPLETED: frozenset(),
    ReportStatus.FAILED: frozenset(),
}


class InvalidTransitionError(Exception):
    """A report was asked to move to a state its current state cannot reach."""

    def __init__(self, report_id: str, current: ReportStatus, target: ReportStatus) -> None:
        self.report_id = report_id
        self.current = current
        self.target = target
        super().__init__(
            f"Report {report_id}: cannot move from {current.value} to {target.value}"
        )


class ReportLifecycleManager:
    """Create reports and drive their analysis to a terminal state.

    Usage:
        manager = ReportLifecycleManager(store, orchestrator)
        record = await manager.create(...)
        manager.schedule_analysis(record.id)
        view = await manager.get_status(record.id)
    """

    def __init__(
        self,
        store: BaseReportStore,
        orchestrator: AnalysisOrchestrator,
        clock: Clock | None = None,
    ) -> None:
        self._store = store
        self._orchestrator = orchestrator
        self._clock = clock or utc_now
        self._tasks: set[asyncio.Task[None]] = set()

    @property
    def pending_tasks(self) -> int:
        return len(self._tasks)

    async def create(
        self,
        owner_id: str,
        district: str,
        state: str,
        area: str,
        season: Season,
        file_path: str,
        extracted_text: str | None,
    ) -> ReportRecord:
        """Persist a new PENDING report."""
        now = self._clock()
        record = ReportRecord(
            id=uuid.uuid4().hex,
            owner_id=owner_id,
            district=district,
            state=state,
            area=area,
            season=season,
            file_path=file_path,
            extracted_text=extracted_text,
            status=ReportStatus.PENDING,
            created_at=now,
            updated_at=now,
        )
        created = await self._store.create(record)
        logger.info("Report %s created for owner %s (%s)", created.id, owner_id, season.value)
        return created

    async def run_analysis(self, report_id: str) -> None:
        """Analyze one report and persist the terminal state.

        Never raises: any exception is recorded as FAILED, and a failure to
        record FAILED is logged.
        """
        set_report_context(report_id)
        try:
            set_stage("analysis")
            record = await self._transition(report_id, ReportStatus.ANALYZING)
            result = await self._orchestrator.analyze(record.location())

            set_stage("persist")
            await self._transition(
                report_id,
                ReportStatus.COMPLETED,
                analysis=result,
                analyzed_at=self._clock(),
            )
            logger.info("Report %s completed (%s)", report_id, result.kind.value)
        except Exception as e:
            if isinstance(e, InvalidTransitionError) and e.current.is_terminal:
                logger.warning(
                    "Report %s already %s; analysis skipped", report_id, e.current.value
                )
                return
            logger.error(
                "Analysis of report %s failed (%s): %s",
                report_id, type(e).__name__, e,
            )
            await self._mark_failed(report_id, e)
        finally:
            clear_context()

    def schedule_analysis(self, report_id: str) -> asyncio.Task[None]:
        """Start run_analysis in the background and return immediately."""
        task = asyncio.create_task(self.run_analysis(report_id), name=f"analysis-{report_id}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    async def drain(self) -> None:
        """Wait for every scheduled analysis to finish."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def get_status(self, report_id: str) -> ReportStatusView:
        record = await self._store.get(report_id)
        return ReportStatusView(
            status=record.status,
            created_at=record.created_at,
            analyzed_at=record.analyzed_at,
        )

    async def get_record(self, report_id: str) -> ReportRecord:
        return await self._store.get(report_id)

    async def list_reports(
        self,
        owner_id: str | None = None,
        status: ReportStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> ReportPage:
        """List reports newest first.

        Raises:
            ValueError: If page or limit is below 1.
        """
        if page < 1 or limit < 1:
            raise ValueError("page and limit must be >= 1")
        records, total = await self._store.list(
            owner_id=owner_id,
            status=status,
            offset=(page - 1) * limit,
            limit=limit,
        )
        return ReportPage(reports=records, page=page, limit=limit, total=total)

    async def _transition(
        self,
        report_id: str,
        target: ReportStatus,
        **fields: Any,
    ) -> ReportRecord:
        current = await self._store.get(report_id)
        if target not in ALLOWED_TRANSITIONS[current.status]:
            raise InvalidTransitionError(report_id, current.status, target)
        updated = await self._store.update(
            report_id, status=target, updated_at=self._clock(), **fields
        )
        logger.debug("Report %s: %s -> %s", report_id, current.status.value, target.value)
        return updated

    async def _mark_failed(self, report_id: str, error: Exception) -> None:
        set_stage("failure")
        failure = AnalysisFailure(
            error=str(error) or type(error).__name__,
            timestamp=self._clock().isoformat(),
        )
        try:
            await self._transition(report_id, ReportStatus.FAILED, failure=failure)
        except Exception:
            logger.exception("Could not record failure for report %s", report_id)
