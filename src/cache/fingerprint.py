# src/cache/fingerprint.py — v3
"""Deterministic cache keys for extraction and analysis requests.

Fingerprints are computed from immutable inputs only, so two calls with the
same inputs always map to the same cache slot regardless of call order:

- file fingerprint: resolved path + size + modification time (ns)
- analysis fingerprint: normalized district/state/area + season + text hash
- detail fingerprint: canonical JSON of the analysis + location + season
"""

from __future__ import annotations

import hashlib
import json
import os
import re
from pathlib import Path
from typing import Any

from soilsense.core.models import LocationContext


def compute_file_fingerprint(path: str | Path) -> str:
    """Fingerprint a file by identity and metadata, without reading its bytes.

    Raises:
        OSError: If the file cannot be stat'ed.
    """
    resolved = Path(path).expanduser().resolve()
    st = os.stat(resolved)
    return _sha256("file", str(resolved), str(st.st_size), str(st.st_mtime_ns))


def compute_text_hash(text: str | None) -> str:
    """SHA-256 of the extracted text exactly as stored."""
    return hashlib.sha256((text or "").encode("utf-8")).hexdigest()


def compute_analysis_fingerprint(context: LocationContext) -> str:
    """Fingerprint an analysis request (location + season + text hash)."""
    return _sha256(
        "analysis",
        _normalize_text(context.district),
        _normalize_text(context.state),
        _normalize_text(context.area),
        context.season.value,
        compute_text_hash(context.extracted_text),
    )


def compute_detail_fingerprint(
    analysis: dict[str, Any],
    location: str,
    season: str,
) -> str:
    """Fingerprint a detailed-recommendation request."""
    canonical = json.dumps(analysis, sort_keys=True, separators=(",", ":"))
    return _sha256(
        "detail",
        hashlib.sha256(canonical.encode("utf-8")).hexdigest(),
        _normalize_text(location),
        season.upper(),
    )


def _sha256(*parts: str) -> str:
    # Unit separator keeps ("ab", "c") distinct from ("a", "bc").
    return hashlib.sha256("\x1f".join(parts).encode("utf-8")).hexdigest()


def _normalize_text(text: str) -> str:
    """Normalize a location field: lowercase, collapse whitespace."""
    return re.sub(r"\s+", " ", text.lower()).strip()
