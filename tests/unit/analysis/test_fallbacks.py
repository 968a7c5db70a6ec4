# tests/unit/analysis/test_fallbacks.py — v1
"""Tests for analysis/fallbacks.py — static result variants."""

from __future__ import annotations

from datetime import datetime, timezone

import pytest

from soilsense.analysis import fallbacks
from soilsense.core.models import AnalysisKind, Season, ValidationReport


class TestMockAnalysis:
    @pytest.mark.parametrize("season", list(Season))
    def test_shape(self, season):
        result = fallbacks.mock_analysis(season)
        assert result.kind == AnalysisKind.DEGRADED
        assert result.is_mock is True
        assert result.overall_score == 75
        assert len(result.recommendations) == 5
        assert result.error is None

    @pytest.mark.parametrize(
        "season,first_crop",
        [(Season.KHARIF, "Rice"), (Season.RABI, "Wheat"), (Season.ZAID, "Watermelon")],
    )
    def test_first_crop_per_season(self, season, first_crop):
        assert fallbacks.mock_analysis(season).recommendations[0].crop == first_crop

    def test_templates_not_shared(self):
        a = fallbacks.mock_analysis(Season.RABI)
        a.herbicides[0].target_weeds.append("Mutated")
        b = fallbacks.mock_analysis(Season.RABI)
        assert "Mutated" not in b.herbicides[0].target_weeds


class TestUpstreamError:
    def test_error_and_timestamp(self):
        now = datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)
        result = fallbacks.upstream_error(Season.KHARIF, "Request timed out", now)
        assert result.error == "AI Analysis failed: Request timed out"
        assert result.timestamp == "2024-06-01T09:00:00+00:00"
        assert result.is_mock is True
        assert len(result.recommendations) == 5

    def test_is_upstream_error_on_payload(self):
        now = datetime(2024, 6, 1, tzinfo=timezone.utc)
        assert fallbacks.is_upstream_error(
            fallbacks.upstream_error(Season.ZAID, "x", now).to_dict()
        )
        assert not fallbacks.is_upstream_error(fallbacks.mock_analysis(Season.ZAID).to_dict())


class TestValidationRejected:
    def test_markers(self):
        report = ValidationReport(is_valid=False, score=1, matched_keywords=["soil"])
        result = fallbacks.validation_rejected(report)
        assert result.kind == AnalysisKind.VALIDATION_REJECTED
        assert result.validation_error is True
        assert result.validation_score == 1
        assert result.matched_keywords == ["soil"]
        assert result.recommendations == []
        assert result.additional_tips

    def test_serialized_names(self):
        report = ValidationReport(is_valid=False, score=0, matched_keywords=[])
        payload = fallbacks.validation_rejected(report).to_dict()
        assert payload["validationError"] is True
        assert payload["validationScore"] == 0


class TestUnstructured:
    def test_raw_text_preserved(self):
        raw = "The soil looks fine. Grow rice."
        result = fallbacks.unstructured(raw)
        assert result.kind == AnalysisKind.UNSTRUCTURED
        assert len(result.recommendations) == 1
        assert result.raw_analysis == raw
        assert result.additional_tips == [raw]
        assert result.to_dict()["rawAnalysis"] == raw


class TestMockDetailed:
    def test_fully_populated(self):
        detailed = fallbacks.mock_detailed()
        assert detailed.is_mock is True
        assert detailed.soil_health.ph.startswith("6.2")
        assert detailed.crop_recommendations.primary == ["Wheat", "Barley", "Mustard"]
        assert len(detailed.fertilizer_schedule) == 3
        assert len(detailed.pest_management) == 2
        assert len(detailed.irrigation_schedule) == 3
        assert len(detailed.seasonal_tips) == 5
        assert detailed.economics.expected_yield

    def test_serializes_ph_alias(self):
        assert "pH" in fallbacks.mock_detailed().to_dict()["soilHealth"]
