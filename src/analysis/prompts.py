# src/analysis/prompts.py — v1
"""Prompt templates for soil-report analysis and detailed recommendations."""

from __future__ import annotations

import json
from typing import Any

from soilsense.core.models import LocationContext

ANALYSIS_SYSTEM_PROMPT = (
    "You are a senior agricultural scientist with decades of field experience "
    "in Indian agriculture, soil science and crop management. You know "
    "regional farming practices, local crop varieties, and the fertilizers, "
    "herbicides and pesticides sold in Indian markets. Base every "
    "recommendation on scientific principles and practical farming "
    "experience. Respond with a single JSON object."
)

DETAILED_SYSTEM_PROMPT = (
    "You are an agronomy advisor who turns a soil analysis into a complete, "
    "season-long field plan for a smallholder farmer in India. "
    "Respond with a single JSON object."
)

_NO_TEXT = "No specific soil data provided"

# Maximum characters of extracted text embedded in the prompt.
MAX_REPORT_CHARS = 12_000

_ANALYSIS_SCHEMA = """{
  "recommendations": [
    {"crop": "Crop name", "suitability": 95, "reason": "Soil compatibility, climate fit, market potential and expected yield"}
  ],
  "fertilizers": [
    {"name": "Fertilizer", "quantity": "Amount per hectare", "applicationTime": "e.g. Before sowing", "purpose": "Deficiency addressed", "applicationMethod": "Broadcasting, drilling or foliar spray"}
  ],
  "herbicides": [
    {"name": "Herbicide", "quantity": "Amount per hectare", "applicationTime": "When to apply", "targetWeeds": ["Weed"], "safetyNotes": "Safety notes"}
  ],
  "pesticides": [
    {"name": "Pesticide", "quantity": "Amount per hectare", "applicationTime": "When to apply", "targetPests": ["Pest"], "safetyNotes": "Safety notes"}
  ],
  "soilDeficiencies": [
    {"nutrient": "Nutrient", "currentLevel": "Measured level", "recommendedLevel": "Target level", "solution": "Treatment", "quantity": "Amount per hectare", "timeline": "Time to improvement"}
  ],
  "overallScore": 78,
  "additionalTips": ["Region and season specific advice"]
}"""

_DETAILED_SCHEMA = """{
  "soilHealth": {"pH": "value and interpretation", "organicMatter": "value and interpretation",
                 "nutrients": {"nitrogen": "...", "phosphorus": "...", "potassium": "..."}},
  "cropRecommendations": {"primary": ["Crop"], "secondary": ["Crop"], "avoid": ["Crop - reason"]},
  "fertilizerSchedule": [{"stage": "...", "fertilizer": "...", "quantity": "...", "timing": "..."}],
  "pestManagement": [{"pest": "...", "solution": "...", "timing": "...", "prevention": "..."}],
  "irrigationSchedule": [{"stage": "...", "frequency": "...", "quantity": "...", "method": "..."}],
  "seasonalTips": ["..."],
  "economics": {"estimatedCost": "...", "expectedYield": "...", "expectedRevenue": "...", "profitMargin": "..."}
}"""


def build_analysis_prompt(context: LocationContext) -> str:
    """User prompt embedding location, season and the extracted report text."""
    season = context.season.value
    report_text = (context.extracted_text or "").strip() or _NO_TEXT
    if len(report_text) > MAX_REPORT_CHARS:
        report_text = report_text[:MAX_REPORT_CHARS]

    return f"""Analyze the following soil report and give agronomic recommendations.

LOCATION: {context.area}, {context.district}, {context.state}
SEASON: {season}
SOIL REPORT DATA:
{report_text}

Answer with JSON in exactly this format:

{_ANALYSIS_SCHEMA}

Instructions:
1. Give the TOP 5 crops for the {season} season in {context.district}, {context.state}, best first.
2. Suitability and overallScore are integers from 0 to 100.
3. Account for local climate, measured soil values, water availability and market demand.
4. Name fertilizers, herbicides and pesticides available in India, with quantities in kg/hectare or liters/hectare.
5. Prefer organic and sustainable practices where they are viable and include safety guidance for chemicals.
6. Consider crop rotation and long-term soil health.
"""


def build_detailed_prompt(
    analysis: dict[str, Any],
    location: str,
    season: str,
) -> str:
    """User prompt expanding an existing analysis into a season plan."""
    summary = json.dumps(
        {
            "recommendations": analysis.get("recommendations", []),
            "soilDeficiencies": analysis.get("soilDeficiencies", []),
            "fertilizers": analysis.get("fertilizers", []),
            "overallScore": analysis.get("overallScore"),
        },
        ensure_ascii=False,
        indent=2,
    )
    return f"""Expand this soil analysis into a detailed plan.

LOCATION: {location}
SEASON: {season}
EXISTING ANALYSIS:
{summary}

Answer with JSON in exactly this format:

{_DETAILED_SCHEMA}

Keep quantities per acre, name products sold in India and stay consistent with the existing analysis.
"""
