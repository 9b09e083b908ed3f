from __future__ import annotations

import logging
import time
from typing import Callable, Dict, List, Optional

from .entities import CacheEntry


logger = logging.getLogger(__name__)


class GridCache:
    """Bounded in-memory store of grid responses with a freshness window.

    Eviction happens only inside :meth:`sweep`, which :meth:`put` runs before
    every insert. :meth:`get` checks freshness on every call, so lookups stay
    correct however long ago the last sweep ran.
    """

    DEFAULT_TTL = 10 * 60
    DEFAULT_MAX_ENTRIES = 10

    def __init__(
        self,
        ttl: float = DEFAULT_TTL,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        time_func: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_entries < 1:
            raise ValueError("max_entries must be at least 1")
        self.ttl = ttl
        self.max_entries = max_entries
        self._time_func = time_func
        self._storage: Dict[str, CacheEntry] = {}

    def __len__(self) -> int:
        return len(self._storage)

    def now(self) -> float:
        return self._time_func()

    def is_fresh(self, entry: CacheEntry, now: Optional[float] = None) -> bool:
        if now is None:
            now = self._time_func()
        return now - entry.inserted_at < self.ttl

    def get(self, key: str) -> Optional[CacheEntry]:
        entry = self._storage.get(key)
        if entry is None or not self.is_fresh(entry):
            return None
        return entry

    def put(self, key: str, entry: CacheEntry) -> None:
        self.sweep()
        self._storage[key] = entry
        self._trim()

    def sweep(self) -> int:
        now = self._time_func()
        expired = [key for key, entry in self._storage.items() if not self.is_fresh(entry, now)]
        for key in expired:
            self._storage.pop(key, None)
        removed = len(expired) + self._trim()
        if removed:
            logger.debug("Swept %s grid cache entries, %s left", removed, len(self._storage))
        return removed

    def values(self) -> List[CacheEntry]:
        return list(self._storage.values())

    def clear(self) -> None:
        self._storage.clear()

    def _trim(self) -> int:
        removed = 0
        while len(self._storage) > self.max_entries:
            oldest = min(self._storage, key=lambda key: self._storage[key].inserted_at)
            del self._storage[oldest]
            removed += 1
        return removed


__all__ = ["GridCache"]
