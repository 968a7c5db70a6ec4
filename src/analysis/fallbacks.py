# src/analysis/fallbacks.py — v1
"""Static results used when the model cannot or should not be asked.

Three situations produce a result without a structured model answer:
the content gate rejects the text, no model credentials are configured
(or the call fails), or the model answers with something that is not the
expected JSON.
"""

from __future__ import annotations

from datetime import datetime

from soilsense.core.models import (
    AnalysisKind,
    AnalysisResult,
    CropPlan,
    CropRecommendation,
    DetailedRecommendation,
    Economics,
    FertilizerEntry,
    FertilizerScheduleItem,
    HerbicideEntry,
    IrrigationScheduleItem,
    PesticideEntry,
    PestManagementItem,
    Season,
    SoilDeficiency,
    SoilHealth,
    SoilNutrients,
    ValidationReport,
)

MOCK_OVERALL_SCORE = 75
UPSTREAM_ERROR_PREFIX = "AI Analysis failed: "

_SEASON_CROPS: dict[Season, list[tuple[str, int, str]]] = {
    Season.KHARIF: [
        ("Rice", 90, "Monsoon rainfall and water-retentive soils suit transplanted paddy"),
        ("Maize", 85, "Grows well in warm, humid conditions with moderate nitrogen"),
        ("Cotton", 80, "Suited to well-drained soils and the long kharif growing window"),
        ("Soybean", 78, "Fixes nitrogen and tolerates slightly acidic soils"),
        ("Groundnut", 75, "Performs well on light, well-drained soils"),
    ],
    Season.RABI: [
        ("Wheat", 90, "Cool winter temperatures and residual soil moisture favour wheat"),
        ("Mustard", 85, "Low water requirement and good market demand"),
        ("Gram", 80, "Fixes nitrogen and tolerates moderate soil fertility"),
        ("Barley", 78, "Tolerates marginal and slightly saline soils"),
        ("Peas", 75, "Short duration legume that improves soil nitrogen"),
    ],
    Season.ZAID: [
        ("Watermelon", 88, "Thrives in hot, dry summers on sandy loam"),
        ("Cucumber", 84, "Short duration crop suited to summer irrigation"),
        ("Moong", 80, "Short duration pulse that restores soil nitrogen"),
        ("Muskmelon", 78, "Suited to warm temperatures and light soils"),
        ("Okra", 75, "Tolerates heat and gives continuous harvests"),
    ],
}

_MOCK_FERTILIZERS = [
    FertilizerEntry(
        name="Urea (46-0-0)",
        quantity="100-120 kg/hectare",
        application_time="Split: half at sowing, half at 30 days",
        purpose="Nitrogen supply for vegetative growth",
        application_method="Broadcasting",
    ),
    FertilizerEntry(
        name="DAP (18-46-0)",
        quantity="100 kg/hectare",
        application_time="Before sowing",
        purpose="Phosphorus for root development",
        application_method="Drilling",
    ),
    FertilizerEntry(
        name="Muriate of Potash (0-0-60)",
        quantity="50 kg/hectare",
        application_time="Before sowing",
        purpose="Potassium for disease resistance",
        application_method="Broadcasting",
    ),
]

_MOCK_HERBICIDES = [
    HerbicideEntry(
        name="Pendimethalin 30% EC",
        quantity="3.3 liters/hectare",
        application_time="Within 3 days of sowing",
        target_weeds=["Annual grasses", "Broadleaf weeds"],
        safety_notes="Wear gloves and a mask; do not spray in strong wind",
    ),
]

_MOCK_PESTICIDES = [
    PesticideEntry(
        name="Neem oil 1500 ppm",
        quantity="2.5 liters/hectare",
        application_time="At first sign of sucking pests",
        target_pests=["Aphids", "Whitefly", "Jassids"],
        safety_notes="Spray in the evening to protect pollinators",
    ),
]

_MOCK_DEFICIENCIES = [
    SoilDeficiency(
        nutrient="Nitrogen",
        current_level="Low",
        recommended_level="280-560 kg/hectare",
        solution="Apply urea in split doses and incorporate green manure",
        quantity="100-120 kg/hectare urea",
        timeline="One season",
    ),
    SoilDeficiency(
        nutrient="Organic carbon",
        current_level="Below 0.5%",
        recommended_level="Above 0.75%",
        solution="Add farmyard manure or compost",
        quantity="5-10 tonnes/hectare",
        timeline="Two to three seasons",
    ),
]

_MOCK_TIPS = [
    "Get the soil retested before the next season to track improvement",
    "Rotate cereals with legumes to restore soil nitrogen",
    "Use certified seed of varieties recommended for your district",
]


def mock_analysis(season: Season) -> AnalysisResult:
    """Degraded result from the static template for season."""
    return AnalysisResult(
        kind=AnalysisKind.DEGRADED,
        recommendations=[
            CropRecommendation(crop=crop, suitability=score, reason=reason)
            for crop, score, reason in _SEASON_CROPS[season]
        ],
        fertilizers=[f.model_copy() for f in _MOCK_FERTILIZERS],
        herbicides=[h.model_copy(deep=True) for h in _MOCK_HERBICIDES],
        pesticides=[p.model_copy(deep=True) for p in _MOCK_PESTICIDES],
        soil_deficiencies=[d.model_copy() for d in _MOCK_DEFICIENCIES],
        overall_score=MOCK_OVERALL_SCORE,
        additional_tips=list(_MOCK_TIPS),
        is_mock=True,
    )


def upstream_error(season: Season, message: str, now: datetime) -> AnalysisResult:
    """Degraded result recording why the model call failed."""
    return mock_analysis(season).model_copy(
        update={
            "error": f"{UPSTREAM_ERROR_PREFIX}{message}",
            "timestamp": now.isoformat(),
        }
    )


def validation_rejected(report: ValidationReport) -> AnalysisResult:
    """Result for text that does not look like a soil report."""
    return AnalysisResult(
        kind=AnalysisKind.VALIDATION_REJECTED,
        overall_score=0,
        additional_tips=[
            "The uploaded document does not appear to be a soil test report.",
            "Upload a laboratory soil report showing pH, nitrogen, "
            "phosphorus, potassium and organic carbon values.",
            f"Only {report.score} soil-related terms were recognised in the document.",
        ],
        validation_error=True,
        validation_score=report.score,
        matched_keywords=list(report.matched_keywords),
    )


def unstructured(raw: str) -> AnalysisResult:
    """Result carrying model text that could not be decoded as JSON."""
    return AnalysisResult(
        kind=AnalysisKind.UNSTRUCTURED,
        recommendations=[
            CropRecommendation(
                crop="See detailed analysis",
                suitability=0,
                reason="The analysis could not be structured; read the raw analysis text",
            )
        ],
        overall_score=0,
        additional_tips=[raw],
        raw_analysis=raw,
    )


def is_upstream_error(payload: dict) -> bool:
    """True for a cached payload produced by upstream_error."""
    return bool(payload.get("isMock")) and bool(payload.get("error"))


# === DETAILED RECOMMENDATIONS ===


def mock_detailed(error: str | None = None) -> DetailedRecommendation:
    """Fully populated static season plan."""
    return DetailedRecommendation(
        soil_health=SoilHealth(
            ph="6.2 - Slightly acidic, needs lime application",
            organic_matter="2.1% - Low, add compost",
            nutrients=SoilNutrients(
                nitrogen="45 ppm - Low, apply urea",
                phosphorus="18 ppm - Medium, apply DAP",
                potassium="120 ppm - Adequate",
            ),
        ),
        crop_recommendations=CropPlan(
            primary=["Wheat", "Barley", "Mustard"],
            secondary=["Gram", "Lentil", "Peas"],
            avoid=["Rice - requires more water"],
        ),
        fertilizer_schedule=[
            FertilizerScheduleItem(
                stage="Pre-planting", fertilizer="DAP (18-46-0)",
                quantity="50 kg per acre", timing="15 days before sowing",
            ),
            FertilizerScheduleItem(
                stage="First top dressing", fertilizer="Urea (46-0-0)",
                quantity="50 kg per acre", timing="25-30 days after sowing",
            ),
            FertilizerScheduleItem(
                stage="Second top dressing", fertilizer="Urea",
                quantity="25 kg per acre", timing="45-50 days after sowing",
            ),
        ],
        pest_management=[
            PestManagementItem(
                pest="Aphids", solution="Imidacloprid 20 ml per acre",
                timing="When 5% plants show infestation",
                prevention="Use resistant varieties",
            ),
            PestManagementItem(
                pest="Rust disease", solution="Mancozeb 2 kg per acre",
                timing="First appearance of symptoms",
                prevention="Crop rotation with legumes",
            ),
        ],
        irrigation_schedule=[
            IrrigationScheduleItem(
                stage="Sowing to germination", frequency="Every 3-4 days",
                quantity="15-20 mm", method="Light irrigation",
            ),
            IrrigationScheduleItem(
                stage="Tillering", frequency="Every 7-10 days",
                quantity="25-30 mm", method="Medium irrigation",
            ),
            IrrigationScheduleItem(
                stage="Flowering to grain filling", frequency="Every 5-7 days",
                quantity="30-35 mm", method="Heavy irrigation",
            ),
        ],
        seasonal_tips=[
            "Monitor soil moisture regularly",
            "Apply organic matter to improve soil structure",
            "Use crop rotation to break pest cycles",
            "Test soil every 2-3 years",
            "Keep field records for better planning",
        ],
        economics=Economics(
            estimated_cost="Rs 18,000-22,000 per acre",
            expected_yield="18-20 quintals per acre",
            expected_revenue="Rs 40,000-45,000 per acre",
            profit_margin="45-50%",
        ),
        is_mock=True,
        error=error,
    )
