# src/extraction/base_extractor.py — v2
"""Abstract extractor interface for uploaded report formats."""

from __future__ import annotations

import re
from abc import ABC, abstractmethod
from pathlib import Path


class BaseExtractor(ABC):
    """Unified interface for document format extractors."""

    @property
    @abstractmethod
    def supported_extensions(self) -> list[str]:
        """File extensions this extractor handles (e.g., ['.pdf'])."""

    @abstractmethod
    async def extract(self, path: Path) -> str:
        """Extract plain text from the file at path."""

    @property
    def is_placeholder(self) -> bool:
        """Whether this extractor returns a fixed string instead of parsing."""
        return False


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace runs within lines and drop blank lines."""
    lines = (re.sub(r"\s+", " ", line).strip() for line in text.splitlines())
    return "\n".join(line for line in lines if line)
