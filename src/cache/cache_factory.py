# src/cache/cache_factory.py — v3
"""Factory for cache store instantiation."""

from __future__ import annotations

from pathlib import Path

from soilsense.cache.base_cache_store import BaseCacheStore
from soilsense.config.settings import Settings
from soilsense.core.clock import Clock


def create_cache_store(
    name: str,
    ttl_s: int,
    settings: Settings | None = None,
    clock: Clock | None = None,
) -> BaseCacheStore:
    """Instantiate the configured cache backend.

    Args:
        name: Cache instance name; also the subdirectory for the json backend.
        ttl_s: Default entry TTL in seconds.
        settings: Application settings. Defaults to the memory backend.
        clock: Optional clock override (tests).

    Returns:
        Configured BaseCacheStore implementation.
    """
    backend = "memory" if settings is None else settings.cache_backend
    single_flight = True if settings is None else settings.cache_single_flight

    if backend == "memory":
        from soilsense.cache.memory_store import MemoryCacheStore
        return MemoryCacheStore(
            name, ttl_s, clock=clock, single_flight=single_flight,
        )

    if backend == "json":
        from soilsense.cache.json_store import JsonCacheStore
        root = Path(settings.cache_root).expanduser() / name  # type: ignore[union-attr]
        return JsonCacheStore(
            root, name, ttl_s, clock=clock, single_flight=single_flight,
        )

    raise ValueError(f"Unsupported cache backend: {backend!r}")
