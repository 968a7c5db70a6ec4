# tests/unit/config/test_settings.py — v2
"""Tests for config/settings.py — typed Settings and validation rules."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from soilsense.config.settings import ConfigurationError, Settings, load_settings


def _settings(**kwargs) -> Settings:
    kwargs.setdefault("openai_api_key", "")
    kwargs.setdefault("anthropic_api_key", "")
    return Settings(_env_file=None, **kwargs)


class TestSettingsDefaults:
    def test_default_model(self):
        s = _settings()
        assert s.llm_default_provider == "openai"
        assert s.llm_default_model == "gpt-4"
        assert s.llm_max_tokens == 3000
        assert s.llm_temperature == pytest.approx(0.2)
        assert s.llm_request_timeout_s == pytest.approx(30.0)

    def test_default_cache_ttls(self):
        s = _settings()
        assert s.extraction_cache_ttl_s == 86400
        assert s.analysis_cache_ttl_s == 3600
        assert s.degraded_cache_ttl_s is None
        assert s.cache_single_flight is True

    def test_default_validation_threshold(self):
        assert _settings().validation_min_score == 3

    def test_effective_degraded_ttl_defaults_to_analysis_ttl(self):
        assert _settings().effective_degraded_ttl_s == 3600

    def test_effective_degraded_ttl_override(self):
        assert _settings(degraded_cache_ttl_s=60).effective_degraded_ttl_s == 60


class TestSettingsValidation:
    def test_zero_ttl_rejected(self):
        with pytest.raises(ValidationError):
            _settings(analysis_cache_ttl_s=0)

    def test_negative_retries_rejected(self):
        with pytest.raises(ValidationError):
            _settings(llm_max_retries=-1)

    def test_degraded_ttl_longer_than_analysis_ttl(self):
        with pytest.raises(ConfigurationError, match="DEGRADED_CACHE_TTL_S"):
            _settings(degraded_cache_ttl_s=7200)

    def test_degraded_ttl_zero(self):
        with pytest.raises(ConfigurationError):
            _settings(degraded_cache_ttl_s=0)

    def test_min_score_below_one(self):
        with pytest.raises(ConfigurationError, match="VALIDATION_MIN_SCORE"):
            _settings(validation_min_score=0)

    def test_upload_size_must_be_positive(self):
        with pytest.raises(ConfigurationError, match="UPLOAD_MAX_SIZE_MB"):
            _settings(upload_max_size_mb=0)

    def test_multiple_errors_joined(self):
        with pytest.raises(ConfigurationError) as exc_info:
            _settings(validation_min_score=0, upload_max_size_mb=0)
        assert "; " in str(exc_info.value)


class TestSettingsHelpers:
    def test_allowed_extensions_list(self):
        s = _settings(upload_allowed_extensions="PDF, .txt,,png")
        assert s.upload_allowed_extensions_list == [".pdf", ".txt", ".png"]

    def test_default_allowed_extensions(self):
        exts = _settings().upload_allowed_extensions_list
        assert set(exts) == {".jpeg", ".jpg", ".png", ".pdf", ".doc", ".docx", ".txt"}

    def test_upload_max_size_bytes(self):
        assert _settings().upload_max_size_bytes == 5 * 1024 * 1024

    def test_api_key_for(self):
        s = _settings(openai_api_key="sk-a", anthropic_api_key="sk-b")
        assert s.api_key_for("openai") == "sk-a"
        assert s.api_key_for("anthropic") == "sk-b"
        assert s.api_key_for("custom") == ""


class TestEnvironment:
    def test_env_var_override(self, monkeypatch):
        monkeypatch.setenv("ANALYSIS_CACHE_TTL_S", "120")
        assert _settings().analysis_cache_ttl_s == 120

    def test_load_settings_overrides(self, monkeypatch, tmp_path):
        monkeypatch.chdir(tmp_path)
        s = load_settings(validation_min_score=5, openai_api_key="")
        assert s.validation_min_score == 5
