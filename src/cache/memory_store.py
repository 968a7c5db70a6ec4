# src/cache/memory_store.py — v1
"""Process-local dict-backed cache store (default CACHE_BACKEND=memory)."""

from __future__ import annotations

import copy

from soilsense.cache.base_cache_store import BaseCacheStore
from soilsense.cache.models import CacheEntry


class MemoryCacheStore(BaseCacheStore):
    """In-memory cache store. Payloads are deep-copied on write and read."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._entries: dict[str, CacheEntry] = {}

    async def _read(self, key: str) -> CacheEntry | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        return entry.model_copy(update={"payload": copy.deepcopy(entry.payload)})

    async def _write(self, key: str, entry: CacheEntry) -> None:
        self._entries[key] = entry.model_copy(
            update={"payload": copy.deepcopy(entry.payload)}
        )

    async def _remove(self, key: str) -> None:
        self._entries.pop(key, None)

    async def _keys(self) -> list[str]:
        return list(self._entries)
