"""Time-bounded in-process cache for upstream lookups."""
import time
from collections.abc import Callable
from dataclasses import dataclass
from datetime import timedelta
from typing import Any


@dataclass
class _Entry:
    value: Any
    stored_at: float


class TTLCache:
    """Dict-backed cache whose entries go stale after ``ttl``.

    Misses (None values) are cached like any other value, so a day with no
    upstream data is not re-fetched on every request. Concurrent
    recomputation of the same key is harmless: the last set() wins.
    """

    def __init__(
        self,
        ttl: timedelta,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = ttl.total_seconds()
        self._clock = clock
        self._entries: dict[str, _Entry] = {}

    def lookup(self, key: str) -> tuple[bool, Any]:
        """Return (hit, value); stale or absent entries are a miss."""
        entry = self._entries.get(key)
        if entry is None or self._clock() - entry.stored_at >= self._ttl:
            return False, None
        return True, entry.value

    def set(self, key: str, value: Any) -> None:
        self._entries[key] = _Entry(value=value, stored_at=self._clock())

    def clear(self) -> None:
        """Clear all cached data."""
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
