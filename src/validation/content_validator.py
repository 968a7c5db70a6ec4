# src/validation/content_validator.py — v1
"""Keyword heuristic deciding whether text plausibly is a soil report.

This is a cheap gate, not a classifier: it only exists to skip the upstream
model call for uploads that are obviously unrelated (a holiday photo, a
blank page, a CV). False positives and negatives are acceptable.
"""

from __future__ import annotations

import logging
import re

from soilsense.core.models import ValidationReport

logger = logging.getLogger(__name__)

DEFAULT_MIN_SCORE = 3

ENGLISH_KEYWORDS: tuple[str, ...] = (
    "soil", "crop", "nitrogen", "phosphorus", "potassium", "ph",
    "organic carbon", "organic matter", "fertilizer", "fertiliser", "manure",
    "compost", "nutrient", "micronutrient", "zinc", "sulphur", "sulfur",
    "iron", "boron", "manganese", "copper", "electrical conductivity",
    "salinity", "moisture", "irrigation", "yield", "harvest", "seed",
    "sowing", "farm", "field", "agriculture", "agricultural", "hectare",
    "acre", "kharif", "rabi", "zaid", "urea", "dap", "npk", "pesticide",
    "herbicide", "texture", "loam", "clay", "sandy", "silt",
)

HINDI_KEYWORDS: tuple[str, ...] = (
    "मिट्टी", "मृदा", "फसल", "खेत", "खेती", "किसान", "नाइट्रोजन",
    "फास्फोरस", "पोटाश", "पोटेशियम", "उर्वरक", "खाद", "जैविक", "कार्बन",
    "सिंचाई", "बीज", "बुवाई", "उपज", "कृषि", "पोषक", "जिंक", "गंधक",
    "यूरिया", "खरीफ", "रबी", "जायद", "हेक्टेयर", "एकड़",
)

SOIL_KEYWORDS: tuple[str, ...] = ENGLISH_KEYWORDS + HINDI_KEYWORDS


class ContentValidator:
    """Count distinct agriculture keywords present in a text.

    Args:
        min_score: Distinct keyword matches required for ``is_valid``.
        keywords: Override the built-in bilingual keyword list.
    """

    def __init__(
        self,
        min_score: int = DEFAULT_MIN_SCORE,
        keywords: tuple[str, ...] | list[str] | None = None,
    ) -> None:
        self._min_score = min_score
        self._keywords = tuple(
            dict.fromkeys(k.lower() for k in (keywords or SOIL_KEYWORDS))
        )
        self._patterns = [(kw, _keyword_pattern(kw)) for kw in self._keywords]

    @property
    def min_score(self) -> int:
        return self._min_score

    def validate(self, text: str | None) -> ValidationReport:
        """Score text by distinct case-insensitive keyword matches."""
        haystack = (text or "").lower()
        matched = [kw for kw, pattern in self._patterns if pattern.search(haystack)]
        score = len(matched)
        report = ValidationReport(
            is_valid=score >= self._min_score,
            score=score,
            matched_keywords=matched,
        )
        logger.debug(
            "Content validation: score=%d valid=%s matched=%s",
            score, report.is_valid, matched,
        )
        return report


def _keyword_pattern(keyword: str) -> re.Pattern[str]:
    """Compile the matcher for one lowercase keyword.

    Latin keywords must start a word ("crops" matches "crop", "adapt" does
    not match "dap"); keywords of three letters or fewer must also end one.
    Devanagari keywords match as plain substrings.
    """
    escaped = re.escape(keyword)
    if not keyword.isascii():
        return re.compile(escaped)
    if len(keyword) <= 3:
        return re.compile(rf"(?<![a-z0-9]){escaped}(?![a-z0-9])")
    return re.compile(rf"(?<![a-z0-9]){escaped}")
