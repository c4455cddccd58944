"""A thread-safe set."""

from __future__ import annotations

import threading
from collections.abc import Hashable, Iterator


class SyncSet:
    """A set that many threads can share.

    Iteration runs over a snapshot, so keys may be removed while iterating.
    """

    def __init__(self) -> None:
        self._keys: set[Hashable] = set()
        self._lock = threading.Lock()

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return key in self._keys

    def insert(self, key: Hashable) -> None:
        """Add ``key`` if it is not already present."""
        with self._lock:
            self._keys.add(key)

    def remove(self, key: Hashable) -> None:
        """Remove ``key``; removing an absent key does nothing."""
        with self._lock:
            self._keys.discard(key)

    def __iter__(self) -> Iterator[Hashable]:
        with self._lock:
            snapshot = list(self._keys)
        return iter(snapshot)

    def __len__(self) -> int:
        with self._lock:
            return len(self._keys)

    def __repr__(self) -> str:
        return f"SyncSet({sorted(map(repr, self))})"