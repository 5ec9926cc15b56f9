"""In-memory TTL cache for historical series."""

from __future__ import annotations

import time
from collections.abc import Callable

from markethistory.domain.models import CacheEntry, HistoricalDataPoint


def epoch_ms() -> int:
    return int(time.time() * 1000)


class TTLCache:
    """Key to (data, stored-at, ttl) map owned by one history client.

    The cache stores whatever it is given and never evicts. Callers decide
    whether a hit is still fresh with `CacheEntry.is_valid`; a stale entry is
    simply overwritten by the next store for the same key.
    """

    def __init__(self, clock: Callable[[], int] = epoch_ms) -> None:
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}

    def now_ms(self) -> int:
        return self._clock()

    def get(self, key: str) -> CacheEntry | None:
        return self._entries.get(key)

    def set(self, key: str, data: list[HistoricalDataPoint], ttl_ms: int) -> None:
        self._entries[key] = CacheEntry(data=list(data), timestamp_ms=self._clock(), ttl_ms=ttl_ms)

    def get_fresh(self, key: str) -> list[HistoricalDataPoint] | None:
        """Return cached data only while the entry is within its TTL."""
        entry = self._entries.get(key)
        if entry is None or not entry.is_valid(self._clock()):
            return None
        return list(entry.data)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: object) -> bool:
        return key in self._entries


def history_cache_key(asset_class: str, symbol: str, timeframe: str) -> str:
    return f"{asset_class}-historical-{symbol}-{timeframe}"
