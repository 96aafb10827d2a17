# gdp_radar/utils/ttl_cache.py
from __future__ import annotations

from typing import Any, Callable, Dict, Optional
from dataclasses import dataclass
import time

DAY_SECONDS = 24 * 60 * 60


@dataclass(frozen=True)
class CacheEntry:
    key: str
    data: Any
    timestamp: float


def countries_key() -> str:
    return "countries"


def gdp_key(code: str, start_year: int, end_year: int) -> str:
    return f"gdp-{code}-{start_year}-{end_year}"


class TTLCache:
    """
    In-memory cache keyed by query string.

    An entry is fresh while ``clock() - timestamp < ttl``. Stale entries
    are reported as absent but left in place until the next ``set`` for
    the same key overwrites them. No eviction, no locking: the owner is
    expected to use it from a single event loop.
    """

    def __init__(
        self,
        ttl_seconds: float = DAY_SECONDS,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.ttl = ttl_seconds
        self._clock = clock
        self._store: Dict[str, CacheEntry] = {}

    def is_fresh(self, entry: CacheEntry) -> bool:
        return (self._clock() - entry.timestamp) < self.ttl

    def get_entry(self, key: str) -> Optional[CacheEntry]:
        return self._store.get(key)

    def get(self, key: str) -> Optional[Any]:
        entry = self._store.get(key)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry.data

    def set(self, key: str, data: Any) -> CacheEntry:
        entry = CacheEntry(key=key, data=data, timestamp=self._clock())
        self._store[key] = entry
        return entry

    def clear(self) -> None:
        self._store.clear()

    def __contains__(self, key: object) -> bool:
        entry = self._store.get(key)  # type: ignore[arg-type]
        return entry is not None and self.is_fresh(entry)

    def __len__(self) -> int:
        return len(self._store)


__all__ = ["CacheEntry", "TTLCache", "countries_key", "gdp_key", "DAY_SECONDS"]
