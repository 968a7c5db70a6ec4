# src/cache/base_cache_store.py — v2
"""Abstract TTL cache store interface.

Backends implement raw entry access (``_read``, ``_write``, ``_remove``,
``_keys``); expiry, lazy eviction, the optional background sweep and
single-flight computation are shared here.
"""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable

from soilsense.cache.models import CacheEntry, CacheStats
from soilsense.core.clock import Clock, utc_now

logger = logging.getLogger(__name__)


class BaseCacheStore(ABC):
    """Unified interface for cache storage backends.

    Args:
        name: Instance label used in logs ("extraction", "analysis").
        default_ttl_s: TTL applied when ``put`` receives no explicit TTL.
        clock: Source of "now"; injectable for TTL tests.
        single_flight: Share one in-flight computation per key in
            ``get_or_compute``.
    """

    def __init__(
        self,
        name: str,
        default_ttl_s: int,
        clock: Clock | None = None,
        single_flight: bool = True,
    ) -> None:
        self.name = name
        self.default_ttl_s = default_ttl_s
        self.stats = CacheStats()
        self._clock = clock or utc_now
        self._single_flight = single_flight
        self._in_flight: dict[str, asyncio.Future[Any]] = {}

    # --- Backend primitives ---

    @abstractmethod
    async def _read(self, key: str) -> CacheEntry | None:
        """Return the raw entry for key, expired or not."""

    @abstractmethod
    async def _write(self, key: str, entry: CacheEntry) -> None:
        """Persist an entry."""

    @abstractmethod
    async def _remove(self, key: str) -> None:
        """Remove an entry if present."""

    @abstractmethod
    async def _keys(self) -> list[str]:
        """List all stored keys."""

    # --- Public API ---

    async def get(self, key: str) -> Any | None:
        """Return the live payload for key, evicting it if expired."""
        entry = await self._read(key)
        if entry is None:
            self.stats.misses += 1
            return None
        if entry.is_expired(self._clock()):
            await self._remove(key)
            self.stats.evictions += 1
            self.stats.misses += 1
            logger.debug("Cache %s: evicted expired entry %s", self.name, key[:12])
            return None
        self.stats.hits += 1
        return entry.payload

    async def put(self, key: str, payload: Any, ttl_s: int | None = None) -> None:
        """Store payload under key with ttl_s (default TTL if None)."""
        entry = CacheEntry(
            fingerprint=key,
            payload=payload,
            created_at=self._clock(),
            ttl_s=ttl_s if ttl_s is not None else self.default_ttl_s,
        )
        await self._write(key, entry)
        self.stats.writes += 1

    async def delete(self, key: str) -> None:
        await self._remove(key)

    async def clear(self) -> None:
        for key in await self._keys():
            await self._remove(key)

    async def sweep(self) -> int:
        """Remove every expired entry. Returns the number removed."""
        now = self._clock()
        removed = 0
        for key in await self._keys():
            entry = await self._read(key)
            if entry is not None and entry.is_expired(now):
                await self._remove(key)
                removed += 1
        self.stats.evictions += removed
        if removed:
            logger.debug("Cache %s: sweep removed %d entries", self.name, removed)
        return removed

    async def size(self) -> int:
        return len(await self._keys())

    async def get_or_compute(
        self,
        key: str,
        compute: Callable[[], Awaitable[Any]],
        ttl_for: Callable[[Any], int | None] | None = None,
    ) -> Any:
        """Return the cached payload, or compute, store and return it.

        With single-flight enabled, concurrent callers for the same key await
        the first caller's computation instead of computing again. An
        exception from ``compute`` propagates to every waiter and nothing is
        cached.

        Args:
            key: Fingerprint.
            compute: Zero-arg coroutine function producing a JSON-able payload.
            ttl_for: Optional per-payload TTL (None falls back to default TTL).
        """
        if self._single_flight:
            pending = self._in_flight.get(key)
            if pending is not None:
                self.stats.in_flight_joins += 1
                return await asyncio.shield(pending)

        cached = await self.get(key)
        if cached is not None:
            return cached

        if not self._single_flight:
            payload = await compute()
            await self.put(key, payload, ttl_s=ttl_for(payload) if ttl_for else None)
            return payload

        future: asyncio.Future[Any] = asyncio.get_running_loop().create_future()
        self._in_flight[key] = future
        try:
            payload = await compute()
            await self.put(key, payload, ttl_s=ttl_for(payload) if ttl_for else None)
        except asyncio.CancelledError:
            future.cancel()
            raise
        except Exception as exc:
            future.set_exception(exc)
            # Mark retrieved: waiters may not exist.
            future.exception()
            raise
        else:
            future.set_result(payload)
        finally:
            self._in_flight.pop(key, None)
        return payload

    async def run_sweeper(self, interval_s: float) -> None:
        """Sweep expired entries every interval_s until cancelled."""
        while True:
            await asyncio.sleep(interval_s)
            try:
                await self.sweep()
            except Exception:
                logger.exception("Cache %s: sweep failed", self.name)
