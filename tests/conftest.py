# tests/conftest.py — v2
"""Shared test fixtures for all unit and integration tests.

Provides settings without environment leakage, a controllable clock, mock
LLM clients and sample report files. No network access: every model call
is mocked.
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone
from pathlib import Path
from unittest.mock import AsyncMock

import pytest

from soilsense.cache.memory_store import MemoryCacheStore
from soilsense.config.settings import Settings
from soilsense.core.models import LocationContext, Season
from soilsense.llm.models import LLMResponse

SOIL_REPORT_TEXT = (
    "Soil Test Report\n"
    "pH: 6.8  Organic Carbon: 0.45%\n"
    "Available Nitrogen: 210 kg/ha (low)\n"
    "Available Phosphorus: 18 kg/ha  Potassium: 240 kg/ha\n"
    "Texture: sandy loam. Recommended crop rotation with legumes."
)

VALID_ANALYSIS_JSON = """{
  "recommendations": [
    {"crop": "Rice", "suitability": 92, "reason": "Good water retention"},
    {"crop": "Maize", "suitability": 81, "reason": "Moderate nitrogen demand"}
  ],
  "fertilizers": [
    {"name": "Urea", "quantity": "100 kg/hectare", "applicationTime": "Split doses",
     "purpose": "Nitrogen", "applicationMethod": "Broadcasting"}
  ],
  "herbicides": [],
  "pesticides": [],
  "soilDeficiencies": [
    {"nutrient": "Nitrogen", "currentLevel": "210 kg/ha", "recommendedLevel": "280 kg/ha",
     "solution": "Urea", "quantity": "100 kg/hectare", "timeline": "One season"}
  ],
  "overallScore": 72,
  "additionalTips": ["Add farmyard manure"]
}"""


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 6, 1, 9, 0, tzinfo=timezone.utc)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


# === FIXTURES: Configuration ===


@pytest.fixture
def settings() -> Settings:
    """Settings isolated from .env and the process environment keys."""
    return Settings(_env_file=None, openai_api_key="", anthropic_api_key="")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def memory_cache(clock: FakeClock) -> MemoryCacheStore:
    return MemoryCacheStore("analysis", 3600, clock=clock)


# === FIXTURES: Sample data ===


@pytest.fixture
def soil_report_text() -> str:
    return SOIL_REPORT_TEXT


@pytest.fixture
def kharif_context() -> LocationContext:
    return LocationContext(
        district="Cuttack",
        state="Odisha",
        area="Salipur",
        season=Season.KHARIF,
        extracted_text=SOIL_REPORT_TEXT,
    )


@pytest.fixture
def soil_report_file(tmp_path: Path) -> Path:
    path = tmp_path / "soil_report.txt"
    path.write_text(SOIL_REPORT_TEXT, encoding="utf-8")
    return path


@pytest.fixture
def hello_file(tmp_path: Path) -> Path:
    path = tmp_path / "hello.txt"
    path.write_text("hello world", encoding="utf-8")
    return path


# === FIXTURES: Mock LLM ===


@pytest.fixture
def mock_llm_response() -> LLMResponse:
    """Standard mock LLM response carrying a valid analysis."""
    return LLMResponse(
        content=VALID_ANALYSIS_JSON,
        input_tokens=900,
        output_tokens=400,
        model="gpt-4",
        provider="openai",
        latency_ms=1200,
    )


@pytest.fixture
def mock_llm_client(mock_llm_response: LLMResponse) -> AsyncMock:
    """Mock BaseLLMClient returning mock_llm_response."""
    client = AsyncMock()
    client.complete = AsyncMock(return_value=mock_llm_response)
    client.provider_name = "openai"
    client.model_name = "gpt-4"
    return client


@pytest.fixture
def make_response():
    """Factory for LLMResponse objects with arbitrary content."""

    def _make(content: str) -> LLMResponse:
        return LLMResponse(
            content=content,
            input_tokens=10,
            output_tokens=10,
            model="gpt-4",
            provider="openai",
            latency_ms=5,
        )

    return _make
