# tests/unit/extraction/test_extractor_factory.py — v2
"""Tests for extraction/extractor_factory.py."""

from __future__ import annotations

from pathlib import Path

import pytest

from soilsense.extraction import extractor_factory
from soilsense.extraction.base_extractor import BaseExtractor
from soilsense.extraction.extractor_factory import (
    UnsupportedFileTypeError,
    create_extractor,
    register_extractor,
    supported_extensions,
)
from soilsense.extraction.pdf_extractor import PdfExtractor
from soilsense.extraction.placeholder_extractors import ImageExtractor, OfficeDocumentExtractor
from soilsense.extraction.txt_extractor import TxtExtractor


class TestCreateExtractor:
    @pytest.mark.parametrize(
        "ext,cls",
        [
            (".pdf", PdfExtractor),
            ("pdf", PdfExtractor),
            (".PDF", PdfExtractor),
            (".txt", TxtExtractor),
            (".doc", OfficeDocumentExtractor),
            (".docx", OfficeDocumentExtractor),
            (".jpg", ImageExtractor),
            (".jpeg", ImageExtractor),
            (".png", ImageExtractor),
        ],
    )
    def test_dispatch(self, ext, cls):
        assert isinstance(create_extractor(ext), cls)

    def test_unsupported(self):
        with pytest.raises(UnsupportedFileTypeError, match=".xlsx"):
            create_extractor(".xlsx")

    def test_unsupported_is_value_error(self):
        assert issubclass(UnsupportedFileTypeError, ValueError)

    def test_supported_extensions(self):
        exts = supported_extensions()
        assert {".pdf", ".txt", ".doc", ".docx", ".jpg", ".jpeg", ".png"} <= set(exts)


class TestRegisterExtractor:
    def test_register_custom(self, monkeypatch):
        class CsvExtractor(BaseExtractor):
            @property
            def supported_extensions(self) -> list[str]:
                return [".csv"]

            async def extract(self, path: Path) -> str:
                return "csv"

        monkeypatch.setattr(
            extractor_factory, "_EXTRACTOR_REGISTRY", dict(extractor_factory._EXTRACTOR_REGISTRY)
        )
        register_extractor("CSV", CsvExtractor)
        assert isinstance(create_extractor(".csv"), CsvExtractor)
