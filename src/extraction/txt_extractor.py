# src/extraction/txt_extractor.py — v3
"""Plain text extractor: passthrough with trimming."""

from __future__ import annotations

import asyncio
from pathlib import Path

from soilsense.extraction.base_extractor import BaseExtractor


class TxtExtractor(BaseExtractor):
    """Extractor for plain text files (.txt)."""

    @property
    def supported_extensions(self) -> list[str]:
        return [".txt"]

    async def extract(self, path: Path) -> str:
        data = await asyncio.to_thread(path.read_bytes)
        return data.decode("utf-8", errors="replace").strip()
