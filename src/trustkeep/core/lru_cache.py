"""LRU (Least Recently Used) cache utilities for bounded in-memory caching.

Keeps the trust caches from growing without bound when many distinct
owners are touched over the life of a process.
"""

from __future__ import annotations

import threading
from collections import OrderedDict
from collections.abc import Callable, Iterator
from typing import Any, Optional, TypeVar

# Default max size for LRU caches (configurable via TRUSTKEEP_CACHE_SIZE)
DEFAULT_CACHE_MAX_SIZE = 1000

K = TypeVar("K")
V = TypeVar("V")


def get_cache_max_size() -> int:
    """Get the configured cache max size from config."""
    from .config import get_config

    try:
        return get_config().cache_size
    except Exception:
        return DEFAULT_CACHE_MAX_SIZE


class LRUDict(dict[K, V]):
    """
    A dictionary with LRU (Least Recently Used) eviction policy.

    Room is made *before* a new key is inserted, so the dictionary never
    holds more than max_size items, not even between two statements.
    Each evicted item is handed to ``on_evict`` while the lock is held.

    Thread-safe for concurrent access. The lock is re-entrant and exposed
    as ``lock`` so owners can make compound operations atomic.

    Example:
        cache = LRUDict(max_size=100, on_evict=lambda k, v: print("dropped", k))
        cache["key1"] = "value1"  # Adds item
        cache["key1"]  # Accessing moves key1 to most recent
        # When a 101st key arrives, the oldest item is evicted first
    """

    def __init__(
        self,
        max_size: Optional[int] = None,
        on_evict: Optional[Callable[[K, V], None]] = None,
    ) -> None:
        """
        Initialize LRU cache.

        Args:
            max_size: Maximum number of items. If None, uses TRUSTKEEP_CACHE_SIZE
                      or DEFAULT_CACHE_MAX_SIZE.
            on_evict: Called with (key, value) after an item is evicted.
        """
        super().__init__()
        self._max_size = max_size if max_size is not None else get_cache_max_size()
        if self._max_size < 1:
            raise ValueError(f"max_size must be positive, got {self._max_size}")
        self._on_evict = on_evict
        self._order: OrderedDict[K, None] = OrderedDict()
        self._lock = threading.RLock()

    @property
    def max_size(self) -> int:
        """Maximum cache size."""
        return self._max_size

    @property
    def lock(self) -> threading.RLock:
        """The re-entrant lock guarding the map and its access order."""
        return self._lock

    def __setitem__(self, key: K, value: V) -> None:
        """Set item and mark it most recently used."""
        with self._lock:
            if key in self._order:
                self._order.move_to_end(key)
            else:
                self._make_room()
                self._order[key] = None
            super().__setitem__(key, value)

    def __getitem__(self, key: K) -> V:
        """Get item and mark as recently used."""
        with self._lock:
            value = super().__getitem__(key)
            self._order.move_to_end(key)
            return value

    def __delitem__(self, key: K) -> None:
        with self._lock:
            super().__delitem__(key)
            self._order.pop(key, None)

    def __contains__(self, key: object) -> bool:
        with self._lock:
            return super().__contains__(key)

    def get(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Get item without updating access order (peek)."""
        with self._lock:
            return super().get(key, default)

    def peek(self, key: K, default: Optional[V] = None) -> Optional[V]:
        """Get item without updating access order."""
        return self.get(key, default)

    def pop(self, key: K, *args: Any) -> V:
        """Remove and return item. Never triggers on_evict."""
        with self._lock:
            self._order.pop(key, None)
            return super().pop(key, *args)

    def _make_room(self) -> None:
        """Evict oldest items until one more fits."""
        while len(self._order) >= self._max_size:
            oldest_key, _ = self._order.popitem(last=False)
            value = super().pop(oldest_key)
            if self._on_evict is not None:
                self._on_evict(oldest_key, value)

    def __iter__(self) -> Iterator[K]:
        """Iterate over keys in order (oldest to newest)."""
        with self._lock:
            return iter(list(self._order.keys()))

    def keys(self) -> Any:
        """Return keys in LRU order."""
        with self._lock:
            return list(self._order.keys())

    def items(self) -> Any:
        """Return items in LRU order."""
        with self._lock:
            return [(k, super(LRUDict, self).__getitem__(k)) for k in self._order]

    def stats(self) -> dict[str, Any]:
        """Return cache statistics."""
        with self._lock:
            return {
                "size": len(self),
                "max_size": self._max_size,
                "utilization": len(self) / self._max_size,
            }
