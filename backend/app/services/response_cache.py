"""
Process-local response cache with a TTL and a hard entry limit.

Expiry is checked lazily when an entry is read; there is no background sweep.
When the cache is full, inserting a new key drops the oldest-inserted entry,
regardless of how recently it was read. Not thread-safe: it is meant to be
touched from a single event loop.
"""

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

logger = logging.getLogger(__name__)

DEFAULT_TTL_SECONDS = 30 * 60
DEFAULT_MAX_ENTRIES = 100


@dataclass
class CacheEntry:
    payload: Any
    created_at: float


class ResponseCache:
    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.monotonic,
    ):
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries

    def get(self, key: str) -> Optional[Any]:
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() - entry.created_at > self.ttl_seconds:
            del self._entries[key]
            logger.debug(f"Cache entry expired: {key}")
            return None
        return entry.payload

    def put(self, key: str, payload: Any) -> None:
        if key not in self._entries and len(self._entries) >= self.max_entries:
            oldest = next(iter(self._entries))
            del self._entries[oldest]
            logger.debug(f"Cache full, evicted oldest entry: {oldest}")
        # overwriting keeps the key's original insertion position
        self._entries[key] = CacheEntry(payload=payload, created_at=self._clock())

    def clear(self) -> None:
        self._entries.clear()
