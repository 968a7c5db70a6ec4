# src/extraction/placeholder_extractors.py — v1
"""Extractors for formats that are accepted but not parsed yet.

Office documents and images are stored and analyzed against a fixed
placeholder string. This is not an error: the content validator will
reject the placeholder and the report still completes.
"""

from __future__ import annotations

from pathlib import Path

from soilsense.extraction.base_extractor import BaseExtractor

OFFICE_PLACEHOLDER = "Document uploaded - manual analysis required"
IMAGE_PLACEHOLDER = "Image uploaded - visual analysis required"


class OfficeDocumentExtractor(BaseExtractor):
    """Word documents (.doc, .docx)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".doc", ".docx"]

    @property
    def is_placeholder(self) -> bool:
        return True

    async def extract(self, path: Path) -> str:
        return OFFICE_PLACEHOLDER


class ImageExtractor(BaseExtractor):
    """Photographed or scanned reports (.jpg, .jpeg, .png). No OCR."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".jpg", ".jpeg", ".png"]

    @property
    def is_placeholder(self) -> bool:
        return True

    async def extract(self, path: Path) -> str:
        return IMAGE_PLACEHOLDER
