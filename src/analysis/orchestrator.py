# src/analysis/orchestrator.py — v1
"""AI analysis orchestrator: cache, content gate, model call, fallbacks.

Every analysis request resolves to exactly one AnalysisResult variant:

    cache hit            -> cached payload (any variant)
    text rejected        -> validation_rejected
    no model configured  -> degraded mock
    model JSON decoded   -> success
    model text not JSON  -> unstructured
    model call failed    -> degraded mock with error and timestamp

Each computed variant is written to the analysis cache under the request
fingerprint. Upstream failures use ``degraded_cache_ttl_s``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from soilsense.analysis import fallbacks
from soilsense.analysis.prompts import ANALYSIS_SYSTEM_PROMPT, build_analysis_prompt
from soilsense.analysis.response_parser import ResponseParseFailure, parse_analysis
from soilsense.cache.base_cache_store import BaseCacheStore
from soilsense.cache.fingerprint import compute_analysis_fingerprint
from soilsense.config.settings import Settings
from soilsense.core.clock import Clock, utc_now
from soilsense.core.models import AnalysisResult, LocationContext
from soilsense.llm.base_client import BaseLLMClient
from soilsense.llm.models import Message
from soilsense.llm.retry import LLMRetryExhausted, RetryConfig, build_retry_configs, with_retry
from soilsense.validation.content_validator import ContentValidator

logger = logging.getLogger(__name__)


class AnalysisOrchestrator:
    """Produce an AnalysisResult for a location context.

    Args:
        settings: Model parameters and cache TTLs.
        cache: Analysis cache instance.
        validator: Content gate applied before any model call.
        llm_client: Upstream client, or None to run on static templates.
        retry_configs: Override of the retry policy (defaults derive from
            ``settings.llm_max_retries``).
        clock: Source of failure timestamps.
    """

    def __init__(
        self,
        settings: Settings,
        cache: BaseCacheStore,
        validator: ContentValidator,
        llm_client: BaseLLMClient | None = None,
        retry_configs: dict[str, RetryConfig] | None = None,
        clock: Clock | None = None,
    ) -> None:
        self._settings = settings
        self._cache = cache
        self._validator = validator
        self._llm = llm_client
        self._retry_configs = (
            retry_configs
            if retry_configs is not None
            else build_retry_configs(settings.llm_max_retries)
        )
        self._clock = clock or utc_now

    @property
    def has_llm(self) -> bool:
        return self._llm is not None

    async def analyze(self, context: LocationContext) -> AnalysisResult:
        """Return the analysis for context, computing it at most once per TTL."""
        fingerprint = compute_analysis_fingerprint(context)
        payload = await self._cache.get_or_compute(
            fingerprint,
            lambda: self._compute(context),
            ttl_for=self._ttl_for,
        )
        return AnalysisResult.model_validate(payload)

    def _ttl_for(self, payload: dict[str, Any]) -> int | None:
        if fallbacks.is_upstream_error(payload):
            return self._settings.effective_degraded_ttl_s
        return None

    async def _compute(self, context: LocationContext) -> dict[str, Any]:
        report = self._validator.validate(context.extracted_text)
        if not report.is_valid:
            logger.info(
                "Content rejected: score %d < %d (matched: %s)",
                report.score, self._validator.min_score,
                ", ".join(report.matched_keywords) or "none",
            )
            return fallbacks.validation_rejected(report).to_dict()

        if self._llm is None:
            logger.info("No model credentials configured, using %s template", context.season.value)
            return fallbacks.mock_analysis(context.season).to_dict()

        try:
            raw = await self._call_model(context)
        except LLMRetryExhausted as e:
            logger.error(
                "Analysis call failed after %d attempts (%s): %s",
                e.attempts, e.error_type, e.last_error,
            )
            message = str(e.last_error) or type(e.last_error).__name__
            return fallbacks.upstream_error(context.season, message, self._clock()).to_dict()

        try:
            result = parse_analysis(raw)
        except ResponseParseFailure as e:
            logger.warning("Unstructured model answer (%s), keeping raw text", e)
            return fallbacks.unstructured(raw).to_dict()

        logger.info(
            "Analysis complete: %d crops, overall score %d",
            len(result.recommendations), result.overall_score,
        )
        return result.to_dict()

    async def _call_model(self, context: LocationContext) -> str:
        assert self._llm is not None
        messages = [Message(role="user", content=build_analysis_prompt(context))]
        response = await with_retry(
            self._complete_once,
            messages,
            operation="soil_analysis",
            retry_configs=self._retry_configs,
        )
        logger.debug(
            "Model %s/%s answered in %dms (%d in, %d out tokens)",
            response.provider, response.model, response.latency_ms,
            response.input_tokens, response.output_tokens,
        )
        return response.content

    async def _complete_once(self, messages: list[Message]) -> Any:
        assert self._llm is not None
        return await asyncio.wait_for(
            self._llm.complete(
                messages,
                system=ANALYSIS_SYSTEM_PROMPT,
                max_tokens=self._settings.llm_max_tokens,
                temperature=self._settings.llm_temperature,
            ),
            timeout=self._settings.llm_request_timeout_s,
        )
