# src/extraction/extractor_factory.py — v3
"""Factory: instantiate extractor from file extension."""

from __future__ import annotations

from soilsense.extraction.base_extractor import BaseExtractor
from soilsense.extraction.pdf_extractor import PdfExtractor
from soilsense.extraction.placeholder_extractors import (
    ImageExtractor,
    OfficeDocumentExtractor,
)
from soilsense.extraction.txt_extractor import TxtExtractor

# Registry maps extension → extractor class.
_EXTRACTOR_REGISTRY: dict[str, type[BaseExtractor]] = {}


def _register_defaults() -> None:
    """Register built-in extractors."""
    for cls in [TxtExtractor, PdfExtractor, OfficeDocumentExtractor, ImageExtractor]:
        instance = cls()
        for ext in instance.supported_extensions:
            _EXTRACTOR_REGISTRY[ext.lower()] = cls


_register_defaults()


class UnsupportedFileTypeError(ValueError):
    """Raised when no extractor is available for a file extension."""


def _normalize_extension(extension: str) -> str:
    ext = extension.lower()
    if not ext.startswith("."):
        ext = f".{ext}"
    return ext


def create_extractor(extension: str) -> BaseExtractor:
    """Create an extractor for the given file extension.

    Args:
        extension: File extension with or without dot (".pdf", "txt").

    Returns:
        BaseExtractor instance.

    Raises:
        UnsupportedFileTypeError: If no extractor is registered.
    """
    ext = _normalize_extension(extension)
    cls = _EXTRACTOR_REGISTRY.get(ext)
    if cls is None:
        raise UnsupportedFileTypeError(
            f"No extractor for file type {ext!r}. "
            f"Supported: {', '.join(sorted(_EXTRACTOR_REGISTRY))}"
        )
    return cls()


def register_extractor(extension: str, cls: type[BaseExtractor]) -> None:
    """Register a custom extractor for an extension."""
    _EXTRACTOR_REGISTRY[_normalize_extension(extension)] = cls


def supported_extensions() -> list[str]:
    """Return list of supported file extensions."""
    return sorted(_EXTRACTOR_REGISTRY.keys())
