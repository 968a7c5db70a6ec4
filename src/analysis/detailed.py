# src/analysis/detailed.py — v2
"""On-demand detailed recommendations for a completed report.

Runs synchronously within the caller's request: the existing analysis (not
the raw report text) is expanded into a season-long plan. Any failure falls
back to a fully populated static plan, so callers always receive the same
shape.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from soilsense.analysis import fallbacks
from soilsense.analysis.prompts import DETAILED_SYSTEM_PROMPT, build_detailed_prompt
from soilsense.analysis.response_parser import ResponseParseFailure, parse_detailed
from soilsense.cache.base_cache_store import BaseCacheStore
from soilsense.cache.fingerprint import compute_detail_fingerprint
from soilsense.config.settings import Settings
from soilsense.core.models import (
    AnalysisResult,
    DetailedRecommendation,
    ReportRecord,
    ReportStatus,
    Season,
)
from soilsense.llm.base_client import BaseLLMClient
from soilsense.llm.models import Message
from soilsense.llm.retry import LLMRetryExhausted, RetryConfig, build_retry_configs, with_retry

logger = logging.getLogger(__name__)

# Compared verbatim against the requester role. Roles are stored upper-case
# (UserRole.ADMIN), so only owners pass this check in practice.
ADMIN_ROLE_LITERAL = "admin"


class ReportNotReadyError(Exception):
    """Detailed recommendations need a COMPLETED report with an analysis."""

    def __init__(self, report_id: str, status: ReportStatus) -> None:
        self.report_id = report_id
        self.status = status
        super().__init__(
            f"Report {report_id} is {status.value}; analysis must be completed first"
        )


class ReportAccessDeniedError(PermissionError):
    """Requester is neither the owner nor an administrator."""


class DetailedRecommendationService:
    """Expand a completed analysis into a DetailedRecommendation."""

    def __init__(
        self,
        settings: Settings,
        cache: BaseCacheStore,
        llm_client: BaseLLMClient | None = None,
        retry_configs: dict[str, RetryConfig] | None = None,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._llm = llm_client
        self._retry_configs = (
            retry_configs
            if retry_configs is not None
            else build_retry_configs(settings.llm_max_retries)
        )

    async def for_report(
        self,
        record: ReportRecord,
        requester_id: str,
        requester_role: str,
    ) -> DetailedRecommendation:
        """Detailed recommendations for record, after status and access checks.

        Raises:
            ReportNotReadyError: Report not COMPLETED or without an analysis.
            ReportAccessDeniedError: Requester may not read this report.
        """
        if record.status != ReportStatus.COMPLETED or record.analysis is None:
            raise ReportNotReadyError(record.id, record.status)
        if record.owner_id != requester_id and requester_role != ADMIN_ROLE_LITERAL:
            raise ReportAccessDeniedError(
                f"User {requester_id} may not access report {record.id}"
            )

        location = f"{record.area}, {record.district}, {record.state}"
        return await self.elaborate(record.analysis, location, record.season)

    async def elaborate(
        self,
        existing_analysis: AnalysisResult | dict[str, Any],
        location: str,
        season: Season | str,
    ) -> DetailedRecommendation:
        """Return the detailed plan for an analysis, location and season."""
        analysis = (
            existing_analysis.to_dict()
            if isinstance(existing_analysis, AnalysisResult)
            else dict(existing_analysis)
        )
        season_name = season.value if isinstance(season, Season) else str(season)
        fingerprint = compute_detail_fingerprint(analysis, location, season_name)

        payload = await self._cache.get_or_compute(
            fingerprint,
            lambda: self._compute(analysis, location, season_name),
            ttl_for=self._ttl_for,
        )
        return DetailedRecommendation.model_validate(payload)

    def _ttl_for(self, payload: dict[str, Any]) -> int | None:
        if payload.get("isMock") and payload.get("error"):
            return self._settings.effective_degraded_ttl_s
        return None

    async def _compute(
        self,
        analysis: dict[str, Any],
        location: str,
        season: str,
    ) -> dict[str, Any]:
        if self._llm is None:
            logger.info("No model credentials configured, using static detailed plan")
            return fallbacks.mock_detailed().to_dict()

        prompt = build_detailed_prompt(analysis, location, season)
        try:
            response = await with_retry(
                self._complete_once,
                [Message(role="user", content=prompt)],
                operation="detailed_recommendations",
                retry_configs=self._retry_configs,
            )
        except LLMRetryExhausted as e:
            logger.error("Detailed recommendations call failed: %s", e)
            message = str(e.last_error) or type(e.last_error).__name__
            return fallbacks.mock_detailed(
                error=f"{fallbacks.UPSTREAM_ERROR_PREFIX}{message}"
            ).to_dict()

        try:
            detailed = parse_detailed(response.content)
        except ResponseParseFailure as e:
            logger.warning("Detailed recommendations not decodable (%s), using static plan", e)
            return fallbacks.mock_detailed(error=str(e)).to_dict()
        return detailed.to_dict()

    async def _complete_once(self, messages: list[Message]) -> Any:
        assert self._llm is not None
        return await asyncio.wait_for(
            self._llm.complete(
                messages,
                system=DETAILED_SYSTEM_PROMPT,
                max_tokens=self._settings.llm_detailed_max_tokens,
                temperature=self._settings.llm_temperature,
            ),
            timeout=self._settings.llm_request_timeout_s,
        )
