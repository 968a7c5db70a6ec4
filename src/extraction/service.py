# src/extraction/service.py — v2
"""Text extraction service: extension dispatch behind a fingerprint cache.

Extraction never blocks the pipeline: a corrupt or unreadable file yields a
placeholder string instead of an exception. Only an unsupported extension
is reported to the caller, before anything is read. Concurrent requests for
the same file share a single extractor run.
"""

from __future__ import annotations

import logging
from pathlib import Path

from soilsense.cache.base_cache_store import BaseCacheStore
from soilsense.cache.fingerprint import compute_file_fingerprint
from soilsense.extraction.base_extractor import BaseExtractor
from soilsense.extraction.extractor_factory import create_extractor

logger = logging.getLogger(__name__)

EXTRACTION_FAILED_PLACEHOLDER = "File uploaded - processing error occurred"


class _ExtractionFailed(Exception):
    """Raised inside the cached computation so failures are never stored."""


class TextExtractionService:
    """Extract text from uploaded report files, reusing cached results."""

    def __init__(self, cache: BaseCacheStore) -> None:
        self._cache = cache

    async def extract(self, file_path: str | Path) -> str:
        """Return the text of file_path.

        Raises:
            UnsupportedFileTypeError: If the extension has no extractor.
        """
        path = Path(file_path)
        extractor = create_extractor(path.suffix)

        try:
            fingerprint = compute_file_fingerprint(path)
        except OSError as exc:
            logger.error("Cannot stat %s: %s", path, exc)
            return EXTRACTION_FAILED_PLACEHOLDER

        try:
            return await self._cache.get_or_compute(
                fingerprint, lambda: self._run(extractor, path)
            )
        except _ExtractionFailed:
            return EXTRACTION_FAILED_PLACEHOLDER

    async def _run(self, extractor: BaseExtractor, path: Path) -> str:
        try:
            text = await extractor.extract(path)
        except Exception as exc:
            logger.error(
                "File processing error for %s (%s): %s",
                path.name, type(exc).__name__, exc,
            )
            raise _ExtractionFailed(str(exc)) from exc

        if extractor.is_placeholder:
            logger.info("Stored %s without parsing (%s)", path.name, type(extractor).__name__)
        else:
            logger.info(
                "Extracted %d chars from %s with %s",
                len(text), path.name, type(extractor).__name__,
            )
        return text
