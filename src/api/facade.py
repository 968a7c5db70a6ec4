# src/api/facade.py — v3
"""Public API facade: single entry point for the report pipeline.

Usage:
    from soilsense.api.facade import ReportPipeline

    async with ReportPipeline.from_settings() as pipeline:
        receipt = await pipeline.submit_report(
            owner_id="u1", file_path="report.pdf",
            district="Ludhiana", state="Punjab", area="Khanna", season="RABI",
        )
        status = await pipeline.get_status(receipt.report.id)
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Any

from soilsense.analysis.detailed import DetailedRecommendationService
from soilsense.analysis.orchestrator import AnalysisOrchestrator
from soilsense.api.models import UploadReceipt, UploadRequest
from soilsense.cache.base_cache_store import BaseCacheStore
from soilsense.cache.cache_factory import create_cache_store
from soilsense.config.settings import Settings, load_settings
from soilsense.core.clock import Clock
from soilsense.core.models import (
    DetailedRecommendation,
    ReportPage,
    ReportRecord,
    ReportStatus,
    ReportStatusView,
    Season,
    ValidationReport,
)
from soilsense.extraction.service import TextExtractionService
from soilsense.lifecycle.manager import ReportLifecycleManager
from soilsense.llm.base_client import BaseLLMClient
from soilsense.llm.client_factory import create_client_for
from soilsense.llm.config import resolve_all
from soilsense.storage.base_report_store import BaseReportStore
from soilsense.storage.store_factory import create_report_store
from soilsense.validation.content_validator import ContentValidator

logger = logging.getLogger(__name__)

_FROM_SETTINGS: Any = object()


class ReportPipeline:
    """Upload, status and detail operations over one set of services.

    Services (caches, store, model clients) are created once and shared by
    every request handled by this instance.
    """

    def __init__(
        self,
        settings: Settings,
        extraction: TextExtractionService,
        validator: ContentValidator,
        lifecycle: ReportLifecycleManager,
        detailed: DetailedRecommendationService,
        caches: list[BaseCacheStore] | None = None,
    ) -> None:
        self.settings = settings
        self.extraction = extraction
        self.validator = validator
        self.lifecycle = lifecycle
        self.detailed = detailed
        self._caches = caches or []
        self._sweepers: list[asyncio.Task[None]] = []

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        clock: Clock | None = None,
        llm_client: BaseLLMClient | None = _FROM_SETTINGS,
        store: BaseReportStore | None = None,
    ) -> ReportPipeline:
        """Wire every service from settings.

        Args:
            settings: Loaded from the environment if None.
            clock: Shared source of "now" for caches and the lifecycle.
            llm_client: Client used for both analysis and detailed
                recommendations. Pass None to force template mode; omit to
                build clients from the configured providers.
            store: Report store; built from settings if None.
        """
        settings = settings or load_settings()

        extraction_cache = create_cache_store(
            "extraction", settings.extraction_cache_ttl_s, settings, clock=clock
        )
        analysis_cache = create_cache_store(
            "analysis", settings.analysis_cache_ttl_s, settings, clock=clock
        )

        if llm_client is _FROM_SETTINGS:
            for component, assignment in resolve_all(settings).items():
                logger.debug(
                    "LLM routing: %s -> %s:%s (%s)",
                    component, assignment.provider, assignment.model, assignment.source,
                )
            analysis_llm = create_client_for("analysis", settings)
            detailed_llm = create_client_for("detailed_recommendations", settings)
        else:
            analysis_llm = detailed_llm = llm_client

        validator = ContentValidator(min_score=settings.validation_min_score)
        orchestrator = AnalysisOrchestrator(
            settings, analysis_cache, validator, analysis_llm, clock=clock
        )
        store = store or create_report_store(settings)
        lifecycle = ReportLifecycleManager(store, orchestrator, clock=clock)
        detailed = DetailedRecommendationService(settings, analysis_cache, detailed_llm)

        logger.info(
            "Report pipeline ready: cache=%s, store=%s, model=%s",
            settings.cache_backend,
            type(store).__name__,
            analysis_llm.model_name if analysis_llm else "templates",
        )
        return cls(
            settings,
            TextExtractionService(extraction_cache),
            validator,
            lifecycle,
            detailed,
            caches=[extraction_cache, analysis_cache],
        )

    # --- Lifecycle ---

    async def __aenter__(self) -> ReportPipeline:
        self.start()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    def start(self) -> None:
        """Start periodic cache sweeps when CACHE_SWEEP_INTERVAL_S > 0."""
        interval = self.settings.cache_sweep_interval_s
        if interval <= 0 or self._sweepers:
            return
        for cache in self._caches:
            self._sweepers.append(
                asyncio.create_task(cache.run_sweeper(interval), name=f"sweep-{cache.name}")
            )

    async def aclose(self) -> None:
        """Wait for in-flight analyses, then stop the sweepers."""
        await self.lifecycle.drain()
        for task in self._sweepers:
            task.cancel()
        await asyncio.gather(*self._sweepers, return_exceptions=True)
        self._sweepers.clear()
        for cache in self._caches:
            logger.debug("Cache %s stats: %s", cache.name, cache.stats.as_dict())

    # --- Operations ---

    async def submit_report(
        self,
        owner_id: str,
        file_path: str | Path,
        district: str,
        state: str,
        area: str,
        season: Season | str,
    ) -> UploadReceipt:
        """Extract text, create a PENDING report and start its analysis.

        Returns as soon as the record exists; the analysis continues in the
        background.

        Raises:
            pydantic.ValidationError: Empty location fields or unknown season.
            UploadValidationError: Disallowed file type or size.
            UnsupportedFileTypeError: No extractor for the file type.
        """
        request = UploadRequest(
            owner_id=owner_id,
            file_path=Path(file_path),
            district=district,
            state=state,
            area=area,
            season=season,
        )
        request.check_file(
            self.settings.upload_allowed_extensions_list,
            self.settings.upload_max_size_bytes,
        )

        text = await self.extraction.extract(request.file_path)
        record = await self.lifecycle.create(
            owner_id=request.owner_id,
            district=request.district,
            state=request.state,
            area=request.area,
            season=request.season,
            file_path=str(request.file_path),
            extracted_text=text,
        )
        self.lifecycle.schedule_analysis(record.id)
        return UploadReceipt(report=record)

    async def get_status(self, report_id: str) -> ReportStatusView:
        return await self.lifecycle.get_status(report_id)

    async def get_report(self, report_id: str) -> ReportRecord:
        return await self.lifecycle.get_record(report_id)

    async def list_reports(
        self,
        owner_id: str | None = None,
        status: ReportStatus | None = None,
        page: int = 1,
        limit: int = 10,
    ) -> ReportPage:
        return await self.lifecycle.list_reports(owner_id, status, page, limit)

    async def get_detailed_recommendations(
        self,
        report_id: str,
        requester_id: str,
        requester_role: str,
    ) -> DetailedRecommendation:
        """Detailed plan for a completed report.

        Raises:
            ReportNotFoundError, ReportNotReadyError, ReportAccessDeniedError
        """
        record = await self.lifecycle.get_record(report_id)
        return await self.detailed.for_report(record, requester_id, requester_role)

    async def check_content(self, file_path: str | Path) -> ValidationReport:
        """Extract a file and run only the content gate on it."""
        text = await self.extraction.extract(file_path)
        return self.validator.validate(text)
