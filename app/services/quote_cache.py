# app/services/quote_cache.py
#
# Quote Cache
# Tiny fixed-TTL map used in front of upstream price lookups.

import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional

DEFAULT_TTL_SECONDS = 15 * 60


@dataclass
class CacheEntry:
    value: Any
    expiry: float


class QuoteCache:
    """
    key -> (value, expiry) with a single timestamp check on read.

    No eviction besides overwrite, no capacity bound and no persistence:
    the key space is a handful of fixed strings ("GOLD_PRICE", "SILVER_PRICE").
    Not locked; concurrent writers on one key are last-write-wins.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, CacheEntry] = {}

    def get(self, key: str) -> Optional[Any]:
        """Return the cached value, or None when missing or expired."""
        entry = self._entries.get(key)
        if entry is not None and self._clock() < entry.expiry:
            return entry.value
        return None

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = CacheEntry(value=value, expiry=self._clock() + self.ttl_seconds)

    def __len__(self) -> int:
        return len(self._entries)
