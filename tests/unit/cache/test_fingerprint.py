# tests/unit/cache/test_fingerprint.py — v2
"""Tests for cache/fingerprint.py."""

from __future__ import annotations

import os

import pytest

from soilsense.cache.fingerprint import (
    compute_analysis_fingerprint,
    compute_detail_fingerprint,
    compute_file_fingerprint,
    compute_text_hash,
)
from soilsense.core.models import Season


class TestFileFingerprint:
    def test_stable_for_unchanged_file(self, soil_report_file):
        assert compute_file_fingerprint(soil_report_file) == compute_file_fingerprint(
            str(soil_report_file)
        )

    def test_changes_with_mtime(self, soil_report_file):
        before = compute_file_fingerprint(soil_report_file)
        st = soil_report_file.stat()
        os.utime(soil_report_file, ns=(st.st_atime_ns, st.st_mtime_ns + 1_000_000_000))
        assert compute_file_fingerprint(soil_report_file) != before

    def test_changes_with_size(self, soil_report_file):
        before = compute_file_fingerprint(soil_report_file)
        st = soil_report_file.stat()
        soil_report_file.write_text("different length content", encoding="utf-8")
        os.utime(soil_report_file, ns=(st.st_atime_ns, st.st_mtime_ns))
        assert compute_file_fingerprint(soil_report_file) != before

    def test_different_paths_differ(self, soil_report_file, hello_file):
        assert compute_file_fingerprint(soil_report_file) != compute_file_fingerprint(hello_file)

    def test_missing_file_raises(self, tmp_path):
        with pytest.raises(OSError):
            compute_file_fingerprint(tmp_path / "nope.pdf")


class TestAnalysisFingerprint:
    def test_normalizes_location_case_and_spacing(self, kharif_context):
        other = kharif_context.model_copy(
            update={"district": "  CUTTACK ", "area": "salipur"}
        )
        assert compute_analysis_fingerprint(kharif_context) == compute_analysis_fingerprint(other)

    def test_season_matters(self, kharif_context):
        rabi = kharif_context.model_copy(update={"season": Season.RABI})
        assert compute_analysis_fingerprint(kharif_context) != compute_analysis_fingerprint(rabi)

    def test_text_matters(self, kharif_context):
        other = kharif_context.model_copy(update={"extracted_text": "other text"})
        assert compute_analysis_fingerprint(kharif_context) != compute_analysis_fingerprint(other)

    def test_none_text_equals_empty(self):
        assert compute_text_hash(None) == compute_text_hash("")


class TestDetailFingerprint:
    def test_key_order_irrelevant(self):
        a = {"overallScore": 70, "recommendations": [{"crop": "Rice"}]}
        b = {"recommendations": [{"crop": "Rice"}], "overallScore": 70}
        assert compute_detail_fingerprint(a, "Salipur", "KHARIF") == compute_detail_fingerprint(
            b, "Salipur", "kharif"
        )

    def test_location_matters(self):
        a = {"overallScore": 70}
        assert compute_detail_fingerprint(a, "Salipur", "KHARIF") != compute_detail_fingerprint(
            a, "Khanna", "KHARIF"
        )
