# src/core/models.py — v1
"""Shared Pydantic domain models used across modules.

No module redefines these types; all imports come from core.models.
Outward-facing models serialize with camelCase aliases (``overallScore``,
``additionalTips``...) so persisted records keep the shape consumers read,
and accept snake_case field names on input.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    """Base for models persisted and returned to consumers."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        coerce_numbers_to_str=True,
    )

    def to_dict(self) -> dict[str, Any]:
        """JSON-compatible dict using the outward (camelCase) field names."""
        return self.model_dump(mode="json", by_alias=True)


# === ENUMS ===


class Season(str, Enum):
    """Indian cropping seasons."""

    KHARIF = "KHARIF"
    RABI = "RABI"
    ZAID = "ZAID"


class ReportStatus(str, Enum):
    """Report lifecycle state."""

    PENDING = "PENDING"
    ANALYZING = "ANALYZING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (ReportStatus.COMPLETED, ReportStatus.FAILED)


class UserRole(str, Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class AnalysisKind(str, Enum):
    """Which variant of AnalysisResult a payload is."""

    SUCCESS = "success"
    UNSTRUCTURED = "unstructured"
    VALIDATION_REJECTED = "validation_rejected"
    DEGRADED = "degraded"


# === REQUEST CONTEXT ===


class LocationContext(BaseModel):
    """Inputs of a single analysis request."""

    district: str
    state: str
    area: str
    season: Season
    extracted_text: str | None = ""


class ValidationReport(_CamelModel):
    """Outcome of the keyword content gate."""

    is_valid: bool
    score: int
    matched_keywords: list[str] = Field(default_factory=list)


# === ANALYSIS RESULT ===


class CropRecommendation(_CamelModel):
    """A ranked crop suggestion. Suitability is clamped to 0..100."""

    crop: str
    suitability: int = 0
    reason: str = ""

    @field_validator("suitability", mode="before")
    @classmethod
    def clamp_suitability(cls, v: Any) -> int:  # noqa: N805
        return _clamp_score(v)


class FertilizerEntry(_CamelModel):
    name: str
    quantity: str = ""
    application_time: str = ""
    purpose: str = ""
    application_method: str = ""


class HerbicideEntry(_CamelModel):
    name: str
    quantity: str = ""
    application_time: str = ""
    target_weeds: list[str] = Field(default_factory=list)
    safety_notes: str = ""


class PesticideEntry(_CamelModel):
    name: str
    quantity: str = ""
    application_time: str = ""
    target_pests: list[str] = Field(default_factory=list)
    safety_notes: str = ""


class SoilDeficiency(_CamelModel):
    nutrient: str
    current_level: str = ""
    recommended_level: str = ""
    solution: str = ""
    quantity: str = ""
    timeline: str = ""


class AnalysisResult(_CamelModel):
    """Structured agronomic analysis of a soil report.

    Every variant (success, unstructured, validation-rejected, degraded)
    shares this shape; consumers only inspect the optional markers
    (``validation_error``, ``error``, ``is_mock``, ``raw_analysis``) when
    they care which variant they got.
    """

    kind: AnalysisKind = AnalysisKind.SUCCESS
    recommendations: list[CropRecommendation] = Field(default_factory=list)
    fertilizers: list[FertilizerEntry] = Field(default_factory=list)
    herbicides: list[HerbicideEntry] = Field(default_factory=list)
    pesticides: list[PesticideEntry] = Field(default_factory=list)
    soil_deficiencies: list[SoilDeficiency] = Field(default_factory=list)
    overall_score: int = 0
    additional_tips: list[str] = Field(default_factory=list)

    # Variant markers
    validation_error: bool | None = None
    validation_score: int | None = None
    matched_keywords: list[str] | None = None
    error: str | None = None
    timestamp: str | None = None
    raw_analysis: str | None = None
    is_mock: bool = False

    @field_validator("overall_score", mode="before")
    @classmethod
    def clamp_overall_score(cls, v: Any) -> int:  # noqa: N805
        return _clamp_score(v)


class AnalysisFailure(_CamelModel):
    """Payload persisted on a report that reached FAILED."""

    error: str
    timestamp: str


# === REPORT RECORD ===


class ReportRecord(_CamelModel):
    """A soil report and its analysis progress."""

    id: str
    owner_id: str
    district: str
    state: str
    area: str
    season: Season
    file_path: str
    extracted_text: str | None = None
    status: ReportStatus = ReportStatus.PENDING
    analysis: AnalysisResult | None = None
    failure: AnalysisFailure | None = None
    created_at: datetime
    analyzed_at: datetime | None = None
    updated_at: datetime | None = None

    def location(self) -> LocationContext:
        """Build the analysis request context for this report."""
        return LocationContext(
            district=self.district,
            state=self.state,
            area=self.area,
            season=self.season,
            extracted_text=self.extracted_text,
        )


class ReportStatusView(_CamelModel):
    """What a status poller sees."""

    status: ReportStatus
    created_at: datetime
    analyzed_at: datetime | None = None


# === DETAILED RECOMMENDATIONS ===


class SoilNutrients(_CamelModel):
    nitrogen: str = ""
    phosphorus: str = ""
    potassium: str = ""


class SoilHealth(_CamelModel):
    ph: str = Field(default="", alias="pH")
    organic_matter: str = ""
    nutrients: SoilNutrients = Field(default_factory=SoilNutrients)


class CropPlan(_CamelModel):
    primary: list[str] = Field(default_factory=list)
    secondary: list[str] = Field(default_factory=list)
    avoid: list[str] = Field(default_factory=list)


class FertilizerScheduleItem(_CamelModel):
    stage: str
    fertilizer: str = ""
    quantity: str = ""
    timing: str = ""


class PestManagementItem(_CamelModel):
    pest: str
    solution: str = ""
    timing: str = ""
    prevention: str = ""


class IrrigationScheduleItem(_CamelModel):
    stage: str
    frequency: str = ""
    quantity: str = ""
    method: str = ""


class Economics(_CamelModel):
    estimated_cost: str = ""
    expected_yield: str = ""
    expected_revenue: str = ""
    profit_margin: str = ""


class DetailedRecommendation(_CamelModel):
    """Expanded, season-long plan derived from a completed analysis."""

    soil_health: SoilHealth = Field(default_factory=SoilHealth)
    crop_recommendations: CropPlan = Field(default_factory=CropPlan)
    fertilizer_schedule: list[FertilizerScheduleItem] = Field(default_factory=list)
    pest_management: list[PestManagementItem] = Field(default_factory=list)
    irrigation_schedule: list[IrrigationScheduleItem] = Field(default_factory=list)
    seasonal_tips: list[str] = Field(default_factory=list)
    economics: Economics = Field(default_factory=Economics)
    is_mock: bool = False
    error: str | None = None


def _clamp_score(value: Any) -> int:
    """Coerce a model-provided score to an int within 0..100."""
    if isinstance(value, bool):
        raise ValueError("score must be a number")
    if isinstance(value, str):
        value = value.strip().rstrip("%")
    try:
        number = round(float(value))
    except (TypeError, ValueError, OverflowError) as e:
        raise ValueError(f"score must be a number, got {value!r}") from e
    return max(0, min(100, number))


class ReportPage(_CamelModel):
    """One page of a report listing."""

    reports: list[ReportRecord] = Field(default_factory=list)
    page: int = 1
    limit: int = 10
    total: int = 0

    @property
    def pages(self) -> int:
        return -(-self.total // self.limit) if self.limit else 0
