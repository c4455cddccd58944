"""An LRU cache whose items are refreshed in the background by a sync callback."""

from __future__ import annotations

import enum
import logging
import queue
import threading
import time
from collections import OrderedDict
from collections.abc import Callable, Hashable, Iterable, Sequence
from dataclasses import dataclass, field
from typing import Any

from stdkit.sync_set import SyncSet

logger = logging.getLogger(__name__)

ERR_NOT_FOUND = "NOT_FOUND"


class ItemNotFoundError(LookupError):
    """Raised when an item id is not present in the cache."""

    code = ERR_NOT_FOUND

    def __init__(self, item_id: Hashable) -> None:
        super().__init__(f"Item with id [{item_id}] not found.")
        self.item_id = item_id


class SyncAction(enum.Enum):
    """What the cache should do with an item after syncing it."""

    UNCHANGED = 0
    UPDATE = 1


@dataclass(frozen=True)
class ItemWrapper:
    """An item as handed to batch creation and sync callbacks."""

    id: Hashable
    item: Any


@dataclass(frozen=True)
class ItemSyncResponse:
    """The result of syncing one item."""

    id: Hashable
    item: Any
    action: SyncAction = SyncAction.UNCHANGED


Batch = Sequence[ItemWrapper]
SyncFunc = Callable[[Batch], Iterable[ItemSyncResponse]]
CreateBatchesFunc = Callable[[Sequence[ItemWrapper]], Iterable[Batch]]


@dataclass
class CacheMetrics:
    """Counters describing cache activity."""

    sync_errors: int = 0
    evictions: int = 0
    cache_hit: int = 0
    cache_miss: int = 0
    size: int = 0
    syncs: int = 0
    sync_seconds: float = 0.0
    _lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )

    def _increment(self, name: str, amount: float = 1) -> None:
        with self._lock:
            setattr(self, name, getattr(self, name) + amount)

    def _set_size(self, size: int) -> None:
        with self._lock:
            self.size = size

    def _record_sync(self, seconds: float) -> None:
        with self._lock:
            self.syncs += 1
            self.sync_seconds += seconds


def single_item_batches(snapshot: Sequence[ItemWrapper]) -> list[list[ItemWrapper]]:
    """Put every item in a batch of its own."""
    return [[item] for item in snapshot]


class _LRU:
    """A bounded, thread-safe map that evicts the least recently used key."""

    def __init__(self, size: int, on_evict: Callable[[Hashable, Any], None]) -> None:
        self._size = size
        self._data: OrderedDict[Hashable, Any] = OrderedDict()
        self._lock = threading.Lock()
        self._on_evict = on_evict

    def get(self, key: Hashable) -> tuple[bool, Any]:
        with self._lock:
            if key not in self._data:
                return False, None
            self._data.move_to_end(key)
            return True, self._data[key]

    def peek(self, key: Hashable) -> tuple[bool, Any]:
        with self._lock:
            if key not in self._data:
                return False, None
            return True, self._data[key]

    def add(self, key: Hashable, value: Any) -> None:
        evicted = []
        with self._lock:
            if key in self._data:
                self._data.move_to_end(key)
            self._data[key] = value
            while len(self._data) > self._size:
                evicted.append(self._data.popitem(last=False))
        for old_key, old_value in evicted:
            self._on_evict(old_key, old_value)

    def remove(self, key: Hashable) -> None:
        with self._lock:
            self._data.pop(key, None)

    def keys(self) -> list[Hashable]:
        with self._lock:
            return list(self._data)


_SHUTDOWN = object()


class AutoRefreshCache:
    """A thread-safe LRU cache that keeps its items up to date in the background.

    Every ``resync_period`` seconds a snapshot of the cached items is split into
    batches by ``create_batches`` and queued; ``parallelism`` worker threads hand
    each batch to ``sync_cb`` and store the items it marks for update. An item may
    be created only once; the cache offers no direct update.
    """

    def __init__(
        self,
        name: str,
        sync_cb: SyncFunc,
        resync_period: float,
        parallelism: int,
        size: int,
        create_batches: CreateBatchesFunc = single_item_batches,
    ) -> None:
        if size <= 0:
            raise ValueError("must provide a positive size")
        if parallelism <= 0:
            raise ValueError("parallelism must be positive")
        if resync_period <= 0:
            raise ValueError("resync period must be positive")
        self.name = name
        self.metrics = CacheMetrics()
        self._sync_cb = sync_cb
        self._create_batches = create_batches
        self._resync_period = float(resync_period)
        self._parallelism = parallelism
        self._lru = _LRU(size, lambda _k, _v: self.metrics._increment("evictions"))
        self._to_delete = SyncSet()
        self._queue: queue.Queue = queue.Queue()
        self._stopping = threading.Event()
        self._threads: list[threading.Thread] = []
        self._started = False

    def start(self) -> None:
        """Start the background workers and the periodic enqueueing."""
        if self._started:
            raise RuntimeError(f"cache [{self.name}] was already started")
        self._started = True
        for i in range(self._parallelism):
            self._threads.append(
                threading.Thread(
                    target=self._worker, name=f"{self.name}-worker-{i}", daemon=True
                )
            )
        self._threads.append(
            threading.Thread(
                target=self._enqueue_loop, name=f"{self.name}-enqueue", daemon=True
            )
        )
        for thread in self._threads:
            thread.start()

    def stop(self) -> None:
        """Stop the background threads and wait for them to finish."""
        self._stopping.set()
        for _ in range(self._parallelism):
            self._queue.put(_SHUTDOWN)
        current = threading.current_thread()
        for thread in self._threads:
            if thread is not current:
                thread.join()

    def __enter__(self) -> "AutoRefreshCache":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()

    def get(self, item_id: Hashable) -> Any:
        """Return the item with ``item_id``; raise ItemNotFoundError if absent."""
        found, value = self._lru.get(item_id)
        if found:
            self.metrics._increment("cache_hit")
            return value
        self.metrics._increment("cache_miss")
        raise ItemNotFoundError(item_id)

    def get_or_create(self, item_id: Hashable, item: Any) -> Any:
        """Return the cached item if present, else store ``item`` and return it."""
        found, value = self._lru.get(item_id)
        if found:
            self.metrics._increment("cache_hit")
            return value
        self._lru.add(item_id, item)
        self.metrics._increment("cache_miss")
        return item

    def delete_delayed(self, item_id: Hashable) -> None:
        """Queue an item for deletion during the next sync cycle.

        Until then, get and get_or_create keep returning the item.
        """
        self._to_delete.insert(item_id)

    def _enqueue_loop(self) -> None:
        while not self._stopping.is_set():
            try:
                self._enqueue_batches()
            except Exception:
                logger.exception("[%s] failed to enqueue batches", self.name)
            self._stopping.wait(self._resync_period)

    def _enqueue_batches(self) -> None:
        keys = self._lru.keys()
        self.metrics._set_size(len(keys))
        snapshot = []
        for key in keys:
            # A key evicted since the listing is simply skipped.
            found, value = self._lru.peek(key)
            if found and key not in self._to_delete:
                snapshot.append(ItemWrapper(key, value))
        for batch in self._create_batches(snapshot):
            self._queue.put(list(batch))

    def _worker(self) -> None:
        try:
            while not self._stopping.is_set():
                batch = self._queue.get()
                if batch is _SHUTDOWN or self._stopping.is_set():
                    return
                self._sync_batch(batch)
        except Exception:
            logger.exception("[%s] worker failed and is shutting down", self.name)

    def _sync_batch(self, batch: list[ItemWrapper]) -> None:
        started = time.perf_counter()
        try:
            responses = list(self._sync_cb(batch))
        except Exception as err:
            self.metrics._increment("sync_errors")
            logger.error("[%s] failed to get latest copy of a batch: %s", self.name, err)
            self.metrics._record_sync(time.perf_counter() - started)
            return

        for response in responses:
            if response.action is SyncAction.UPDATE:
                # Re-adds the item if it was evicted meanwhile.
                self._lru.add(response.id, response.item)

        for key in self._to_delete:
            self._lru.remove(key)
            self._to_delete.remove(key)

        self.metrics._record_sync(time.perf_counter() - started)