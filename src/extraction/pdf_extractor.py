# src/extraction/pdf_extractor.py — v2
"""PDF extractor using PyMuPDF (fitz).

Requires the 'pymupdf' package. Parsing runs in a worker thread so the event
loop is not blocked by large documents.
"""

from __future__ import annotations

import asyncio
import logging
from pathlib import Path

from soilsense.extraction.base_extractor import BaseExtractor, normalize_whitespace

logger = logging.getLogger(__name__)


class PdfExtractor(BaseExtractor):
    """Extractor for PDF files using PyMuPDF."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".pdf"]

    async def extract(self, path: Path) -> str:
        """Extract text from every page, normalizing whitespace."""
        raw_text = await asyncio.to_thread(self._read_pages, path)
        return normalize_whitespace(raw_text)

    @staticmethod
    def _read_pages(path: Path) -> str:
        try:
            import fitz  # PyMuPDF
        except ImportError as e:
            raise ImportError(
                "pymupdf package required for PDF extraction: pip install pymupdf"
            ) from e

        doc = fitz.open(str(path))
        try:
            parts = [doc[page_num].get_text("text") for page_num in range(len(doc))]
        finally:
            doc.close()
        logger.debug("Read %d PDF pages from %s", len(parts), path.name)
        return "\n".join(parts)
