# src/analysis/response_parser.py — v1
"""Decode raw model output into an AnalysisResult.

The model is asked for a single JSON object but often wraps it in prose or
Markdown fences. The outermost ``{...}`` span is located greedily and decoded
as-is; no attempt is made to repair malformed JSON.
"""

from __future__ import annotations

import json
import logging
import re
from typing import Any

from pydantic import ValidationError

from soilsense.core.models import AnalysisKind, AnalysisResult, DetailedRecommendation

logger = logging.getLogger(__name__)

_JSON_OBJECT_RE = re.compile(r"\{[\s\S]*\}")

# Markers describe how a result was produced; the model never sets them.
_RESET_MARKERS: dict[str, Any] = {
    "kind": AnalysisKind.SUCCESS,
    "validation_error": None,
    "validation_score": None,
    "matched_keywords": None,
    "error": None,
    "timestamp": None,
    "raw_analysis": None,
    "is_mock": False,
}


class ResponseParseFailure(ValueError):
    """Raw model output could not be decoded into the expected schema."""


def extract_json_object(raw: str) -> dict[str, Any]:
    """Return the outermost JSON object embedded in raw.

    Raises:
        ResponseParseFailure: No ``{...}`` span, invalid JSON, or the span
            decodes to something other than an object.
    """
    match = _JSON_OBJECT_RE.search(raw or "")
    if match is None:
        raise ResponseParseFailure("no JSON object in model output")
    try:
        data = json.loads(match.group(0))
    except json.JSONDecodeError as e:
        raise ResponseParseFailure(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise ResponseParseFailure("JSON payload is not an object")
    return data


def parse_analysis(raw: str) -> AnalysisResult:
    """Decode raw model output into a success-variant AnalysisResult.

    Raises:
        ResponseParseFailure: If the output does not match the schema.
    """
    data = extract_json_object(raw)
    if not isinstance(data.get("recommendations"), list):
        raise ResponseParseFailure("missing 'recommendations' list")
    data.pop("kind", None)

    try:
        result = AnalysisResult.model_validate(data)
    except ValidationError as e:
        raise ResponseParseFailure(
            f"schema mismatch ({e.error_count()} errors)"
        ) from e

    logger.debug(
        "Parsed analysis: %d recommendations, score %d",
        len(result.recommendations), result.overall_score,
    )
    return result.model_copy(update=_RESET_MARKERS)


def parse_detailed(raw: str) -> DetailedRecommendation:
    """Decode raw model output into a DetailedRecommendation.

    Raises:
        ResponseParseFailure: If the output does not match the schema.
    """
    data = extract_json_object(raw)
    try:
        result = DetailedRecommendation.model_validate(data)
    except ValidationError as e:
        raise ResponseParseFailure(
            f"schema mismatch ({e.error_count()} errors)"
        ) from e
    return result.model_copy(update={"is_mock": False, "error": None})
