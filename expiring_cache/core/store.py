"""Thread-safe key -> Entry mapping backing a cache.

Every single-key operation takes the store's internal lock, so the store is
safe to use from caller threads and the janitor thread at the same time.
Compound cache-level operations are serialized one layer up by the cache's
reader/writer guard.
"""

from __future__ import annotations

import threading
from typing import Dict, Generic, List, Optional, Set, TypeVar

from .entry import Clock, Entry, now_ms

T = TypeVar("T")


class Store(Generic[T]):
    """Concurrent mapping from string keys to :class:`Entry` records.

    Parameters
    ----------
    clock: Clock
        Millisecond clock used to stamp and check entries.
    capacity_hint: Optional[int]
        Expected number of entries. Recorded for introspection only; Python
        dicts grow on demand and cannot be pre-sized.
    """

    def __init__(
        self, clock: Clock = now_ms, capacity_hint: Optional[int] = None
    ) -> None:
        self._clock = clock
        self.capacity_hint = capacity_hint
        self._items: Dict[str, Entry[T]] = {}
        self._lock = threading.Lock()

    @property
    def clock(self) -> Clock:
        return self._clock

    def set(self, key: str, value: T, duration_ms: int) -> None:
        """Insert ``value`` under ``key``, replacing any previous entry."""
        entry = Entry.create(value, duration_ms, self._clock())
        with self._lock:
            self._items[key] = entry

    def lookup(self, key: str) -> Optional[T]:
        """Return the value for ``key`` if present and live, else None.

        Expired entries are left in place; removing them is the janitor's job.
        """
        with self._lock:
            entry = self._items.get(key)
        if entry is not None and entry.is_live(self._clock()):
            return entry.value
        return None

    def remove(self, key: str) -> None:
        """Delete ``key`` if present."""
        with self._lock:
            self._items.pop(key, None)

    def scan_expired(self, now: int) -> Set[str]:
        """Return the keys whose entry expired strictly before ``now``."""
        with self._lock:
            snapshot = list(self._items.items())
        return {key for key, entry in snapshot if entry.is_expired(now)}

    def discard_expired(self, key: str, now: int) -> bool:
        """Remove ``key`` only if the entry stored under it is still expired.

        A key overwritten between the scan and this call keeps its fresh
        entry. Returns True when an entry was removed.
        """
        with self._lock:
            entry = self._items.get(key)
            if entry is None or not entry.is_expired(now):
                return False
            del self._items[key]
            return True

    def entry(self, key: str) -> Optional[Entry[T]]:
        """Return the raw entry for ``key`` regardless of expiry."""
        with self._lock:
            return self._items.get(key)

    def keys(self) -> List[str]:
        """Snapshot of every stored key, expired or not."""
        with self._lock:
            return list(self._items)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._items

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)
