"""Bounded FIFO queue persisted in a key-value store."""

import json
import logging
import threading
from collections import deque
from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

from ai_gateway.infrastructure.storage.kv_store import KeyValueStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DurableQueue(Generic[T]):
    """Thread-safe ring buffer with drop-oldest eviction.

    The whole queue is stored as one JSON array under ``key``. Every
    mutation rewrites that array while holding the lock, so push, drain and
    remove are atomic with respect to each other.
    """

    def __init__(
        self,
        store: KeyValueStore,
        key: str,
        capacity: int,
        serialize: Callable[[T], dict[str, Any]],
        deserialize: Callable[[dict[str, Any]], T],
        identify: Callable[[T], str | None],
    ):
        if capacity <= 0:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self._store = store
        self._key = key
        self._capacity = capacity
        self._serialize = serialize
        self._deserialize = deserialize
        self._identify = identify
        self._items: deque[T] = deque()
        self._lock = threading.Lock()
        self._evicted = 0
        self._load()

    @property
    def capacity(self) -> int:
        return self._capacity

    def _load(self) -> None:
        try:
            raw = self._store.get(self._key)
        except UnicodeDecodeError as e:
            logger.error("Discarding undecodable durable queue '%s': %s", self._key, e)
            return
        except OSError as e:
            logger.error("Failed to read durable queue '%s': %s", self._key, e)
            return
        if not raw:
            return
        try:
            data = json.loads(raw)
            items = [self._deserialize(item) for item in data]
        except (ValueError, TypeError) as e:
            logger.error("Discarding unreadable durable queue '%s': %s", self._key, e)
            return

        if len(items) > self._capacity:
            dropped = len(items) - self._capacity
            logger.warning(
                "Durable queue '%s' holds %s entries, keeping the newest %s",
                self._key,
                len(items),
                self._capacity,
            )
            items = items[dropped:]
        self._items.extend(items)
        logger.info("Loaded %s pending entries from '%s'", len(self._items), self._key)

    def _save(self) -> None:
        payload = json.dumps([self._serialize(item) for item in self._items], ensure_ascii=False)
        try:
            self._store.set(self._key, payload)
        except OSError as e:
            # In-memory contents stay authoritative until the next successful save.
            logger.error("Failed to persist durable queue '%s': %s", self._key, e)

    def push(self, item: T) -> T | None:
        """Append *item*; return the evicted oldest entry when at capacity."""
        evicted: T | None = None
        with self._lock:
            if len(self._items) >= self._capacity:
                evicted = self._items.popleft()
                self._evicted += 1
            self._items.append(item)
            self._save()
        if evicted is not None:
            logger.warning(
                "Durable queue '%s' full (%s), evicted oldest entry id=%s",
                self._key,
                self._capacity,
                self._identify(evicted),
            )
        return evicted

    def snapshot(self) -> list[T]:
        """Return a copy of the current contents, oldest first."""
        with self._lock:
            return list(self._items)

    def drain(self) -> list[T]:
        """Return the entire contents and clear the queue in one step."""
        with self._lock:
            items = list(self._items)
            self._items.clear()
            self._save()
            return items

    def remove(self, items: Iterable[T]) -> int:
        """Remove the given entries (matched by id); return how many were removed."""
        ids = {self._identify(item) for item in items}
        ids.discard(None)
        with self._lock:
            before = len(self._items)
            self._items = deque(item for item in self._items if self._identify(item) not in ids)
            removed = before - len(self._items)
            if removed:
                self._save()
            return removed

    def clear(self) -> None:
        with self._lock:
            self._items.clear()
            self._save()

    def __len__(self) -> int:
        with self._lock:
            return len(self._items)

    def get_stats(self) -> dict[str, Any]:
        with self._lock:
            return {
                "key": self._key,
                "size": len(self._items),
                "capacity": self._capacity,
                "evicted": self._evicted,
            }
