# src/cache/json_store.py — v2
"""JSON file-based cache store (CACHE_BACKEND=json).

Stores cache entries as individual JSON files under a per-cache directory,
so extraction and analysis results survive a process restart.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import ValidationError

from soilsense.cache.base_cache_store import BaseCacheStore
from soilsense.cache.models import CacheEntry

logger = logging.getLogger(__name__)


class JsonCacheStore(BaseCacheStore):
    """File-based cache store using JSON files."""

    def __init__(self, cache_root: Path | str, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._root = Path(cache_root).expanduser()
        self._root.mkdir(parents=True, exist_ok=True)

    async def _read(self, key: str) -> CacheEntry | None:
        path = self._entry_path(key)
        if not path.exists():
            return None
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return CacheEntry(**data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            logger.warning("Failed to read cache entry %s: %s", key, e)
            return None

    async def _write(self, key: str, entry: CacheEntry) -> None:
        path = self._entry_path(key)
        path.parent.mkdir(parents=True, exist_ok=True)
        tmp = path.with_suffix(".json.tmp")
        tmp.write_text(entry.model_dump_json(indent=2), encoding="utf-8")
        os.replace(tmp, path)

    async def _remove(self, key: str) -> None:
        path = self._entry_path(key)
        if path.exists():
            path.unlink()

    async def _keys(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return [p.stem for p in self._root.glob("*.json")]

    def _entry_path(self, key: str) -> Path:
        """Return file path for a cache key."""
        safe_key = key.replace("/", "_").replace("\\", "_")
        return self._root / f"{safe_key}.json"
