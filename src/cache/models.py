# src/cache/models.py — v1
"""Cache domain models: CacheEntry and CacheStats."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Any

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Single cache entry linking a fingerprint to a JSON-compatible payload."""

    fingerprint: str
    payload: Any
    created_at: datetime
    ttl_s: int

    @property
    def expires_at(self) -> datetime:
        return self.created_at + timedelta(seconds=self.ttl_s)

    def is_expired(self, now: datetime) -> bool:
        """An entry is live strictly before created_at + ttl_s."""
        return now >= self.expires_at


@dataclass
class CacheStats:
    """Running counters for one cache instance."""

    hits: int = 0
    misses: int = 0
    writes: int = 0
    evictions: int = 0
    in_flight_joins: int = 0

    def as_dict(self) -> dict[str, int]:
        return dict(self.__dict__)
