import time
from dataclasses import dataclass
from typing import Any, Callable, Hashable


@dataclass
class CacheEntry:
    value: Any
    fetched_at: float


class QueryCache:
    """Last-fetched results keyed by (user_id, table, params).

    Mutating services call invalidate(); nothing is pushed from the store.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._entries: dict[tuple, CacheEntry] = {}
        self._clock = clock

    def get(self, user_id, table: str, params: Hashable = None, max_age: float | None = None):
        """Return the cached value, or None on a miss or when older than max_age seconds."""
        entry = self._entries.get((user_id, table, params))
        if entry is None:
            return None
        if max_age is not None and self._clock() - entry.fetched_at > max_age:
            del self._entries[(user_id, table, params)]
            return None
        return entry.value

    def put(self, user_id, table: str, params: Hashable, value) -> None:
        self._entries[(user_id, table, params)] = CacheEntry(value, self._clock())

    def fetched_at(self, user_id, table: str, params: Hashable = None) -> float | None:
        entry = self._entries.get((user_id, table, params))
        return entry.fetched_at if entry else None

    def invalidate(self, user_id, table: str | None = None) -> int:
        """Drop every entry for the user (optionally one table). Returns how many went."""
        stale = [
            key for key in self._entries
            if key[0] == user_id and (table is None or key[1] == table)
        ]
        for key in stale:
            del self._entries[key]
        return len(stale)

    def clear(self) -> None:
        self._entries.clear()
