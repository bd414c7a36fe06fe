"""In-memory TTL cache for decoded upstream responses.

Entries are invalidated lazily: an expired entry stays in the map until it is
overwritten, evicted or the cache is cleared, but ``get`` never returns it.
"""

import time
from collections import OrderedDict
from dataclasses import dataclass
from typing import Any, Callable, Optional

DEFAULT_TTL_SECONDS = 300.0


@dataclass
class CacheEntry:
    key: str
    value: Any
    stored_at: float

    def is_fresh(self, now: float, ttl_seconds: float) -> bool:
        return now - self.stored_at < ttl_seconds


class TtlCache:
    """URL-keyed cache with a single TTL for every entry.

    ``max_entries=None`` keeps every distinct key for the life of the process.
    With a capacity, the least recently used entry is evicted on insert.
    """

    def __init__(
        self,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: Optional[int] = None,
        clock: Optional[Callable[[], float]] = None,
    ):
        self.ttl_seconds = ttl_seconds
        self.max_entries = max_entries
        self._clock = clock or time.monotonic
        self._entries: "OrderedDict[str, CacheEntry]" = OrderedDict()

    def get(self, key: str) -> Optional[CacheEntry]:
        entry = self._entries.get(key)
        if entry is None or not entry.is_fresh(self._clock(), self.ttl_seconds):
            return None
        if self.max_entries is not None:
            self._entries.move_to_end(key)
        return entry

    def set(self, key: str, value: Any) -> CacheEntry:
        entry = CacheEntry(key=key, value=value, stored_at=self._clock())
        self._entries[key] = entry
        self._entries.move_to_end(key)
        if self.max_entries is not None:
            while len(self._entries) > self.max_entries:
                self._entries.popitem(last=False)
        return entry

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, key: str) -> bool:
        return key in self._entries
