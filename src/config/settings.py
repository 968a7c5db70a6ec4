# src/config/settings.py — v1
"""Typed configuration loaded from .env via pydantic-settings.

Single source of truth for all deployment-specific settings: upstream model
credentials, cache lifetimes, validation threshold, storage backends and
logging.
"""

from __future__ import annotations

from pathlib import Path
from typing import Literal

from pydantic import field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class ConfigurationError(Exception):
    """Raised when configuration is internally inconsistent."""


class Settings(BaseSettings):
    """Application settings loaded from .env file."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # === LLM PROVIDERS ===
    llm_default_provider: str = "openai"
    llm_default_model: str = "gpt-4"
    llm_temperature: float = 0.2
    llm_max_tokens: int = 3000
    llm_detailed_max_tokens: int = 2000
    llm_request_timeout_s: float = 30.0
    llm_max_retries: int = 2

    # Provider API keys (an empty key switches the pipeline to mock mode)
    openai_api_key: str = ""
    anthropic_api_key: str = ""

    # Per-component LLM assignment ("provider:model", highest priority)
    llm_analysis: str = ""
    llm_detailed_recommendations: str = ""

    # === Caches ===
    cache_backend: Literal["memory", "json"] = "memory"
    cache_root: Path = Path("~/.soilsense/cache")
    extraction_cache_ttl_s: int = 24 * 60 * 60
    analysis_cache_ttl_s: int = 60 * 60
    degraded_cache_ttl_s: int | None = None
    cache_sweep_interval_s: int = 0
    cache_single_flight: bool = True

    # === Content validation ===
    validation_min_score: int = 3

    # === Uploads ===
    upload_max_size_mb: int = 5
    upload_allowed_extensions: str = "jpeg,jpg,png,pdf,doc,docx,txt"

    # === Report storage ===
    report_store_backend: Literal["memory", "json"] = "memory"
    report_store_root: Path = Path("~/.soilsense/reports")

    # === Logging ===
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    log_format: Literal["json", "text"] = "json"
    log_file: Path | None = None
    log_rotation: str = "10MB"
    log_retention: int = 30

    # --- Validators ---

    @field_validator("extraction_cache_ttl_s", "analysis_cache_ttl_s")
    @classmethod
    def validate_ttl(cls, v: int) -> int:  # noqa: N805
        if v <= 0:
            raise ValueError("cache TTL must be > 0")
        return v

    @field_validator("llm_max_retries", "cache_sweep_interval_s")
    @classmethod
    def validate_non_negative(cls, v: int) -> int:  # noqa: N805
        if v < 0:
            raise ValueError("value must be >= 0")
        return v

    @model_validator(mode="after")
    def validate_config_consistency(self) -> Settings:
        """Validate cross-field consistency rules."""
        errors: list[str] = []

        if self.degraded_cache_ttl_s is not None and not (
            0 < self.degraded_cache_ttl_s <= self.analysis_cache_ttl_s
        ):
            errors.append(
                "DEGRADED_CACHE_TTL_S must be > 0 and <= ANALYSIS_CACHE_TTL_S"
            )

        if self.validation_min_score < 1:
            errors.append("VALIDATION_MIN_SCORE must be >= 1")

        if self.upload_max_size_mb <= 0:
            errors.append("UPLOAD_MAX_SIZE_MB must be > 0")

        if self.cache_backend == "json" and not str(self.cache_root).strip():
            errors.append("CACHE_BACKEND=json requires CACHE_ROOT")

        if (
            self.report_store_backend == "json"
            and not str(self.report_store_root).strip()
        ):
            errors.append("REPORT_STORE_BACKEND=json requires REPORT_STORE_ROOT")

        if errors:
            raise ConfigurationError("; ".join(errors))

        return self

    # --- Helpers ---

    @property
    def effective_degraded_ttl_s(self) -> int:
        """TTL applied to results degraded by an upstream failure."""
        if self.degraded_cache_ttl_s is None:
            return self.analysis_cache_ttl_s
        return self.degraded_cache_ttl_s

    @property
    def upload_allowed_extensions_list(self) -> list[str]:
        """Parse comma-separated upload extensions (with leading dot)."""
        return [
            f".{e.strip().lower().lstrip('.')}"
            for e in self.upload_allowed_extensions.split(",")
            if e.strip()
        ]

    @property
    def upload_max_size_bytes(self) -> int:
        return self.upload_max_size_mb * 1024 * 1024

    def api_key_for(self, provider: str) -> str:
        """Return the configured API key for a provider ('' if none)."""
        if provider == "openai":
            return self.openai_api_key
        if provider == "anthropic":
            return self.anthropic_api_key
        return ""


def load_settings(**overrides: object) -> Settings:
    """Load settings from .env with optional overrides.

    Args:
        **overrides: Field-level overrides (for testing or the CLI).

    Returns:
        Validated Settings instance.

    Raises:
        ConfigurationError: If configuration is internally inconsistent.
    """
    return Settings(**overrides)  # type: ignore[arg-type]
