"""Bounded, thread-safe memo for optimizer results."""

from __future__ import annotations

import hashlib
import json
import logging
import threading
from collections import OrderedDict
from typing import Any, Callable, Hashable, Iterable, Optional, TypeVar

from pydantic import BaseModel

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_CACHE_SIZE = 100


def _plain(value: Any) -> Any:
    if isinstance(value, BaseModel):
        return value.model_dump(mode="json")
    raise TypeError(f"Object of type {type(value).__name__} is not serializable")


def canonical(value: Any) -> str:
    """Stable JSON text for models, lists and scalars (sorted keys, no whitespace)."""
    return json.dumps(value, default=_plain, sort_keys=True, separators=(",", ":"))


def demands_key(demands: Iterable[Any]) -> list[str]:
    """Order-independent serialisation of a demand list."""
    return sorted(canonical(d) for d in demands)


def make_key(*parts: Any) -> str:
    return hashlib.sha256(canonical(list(parts)).encode("utf-8")).hexdigest()


class ResultCache:
    """
    LRU cache of immutable results.

    Values are computed outside the lock; two threads racing on the same
    key may both compute it, and the first stored value wins.
    """

    def __init__(self, capacity: int = DEFAULT_CACHE_SIZE):
        if capacity < 1:
            raise ValueError("cache capacity must be at least 1")
        self.capacity = capacity
        self._entries: OrderedDict[Hashable, Any] = OrderedDict()
        self._lock = threading.Lock()
        self.hits = 0
        self.misses = 0

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._entries

    def get(self, key: Hashable) -> Optional[Any]:
        with self._lock:
            if key not in self._entries:
                self.misses += 1
                return None
            self._entries.move_to_end(key)
            self.hits += 1
            return self._entries[key]

    def put(self, key: Hashable, value: Any) -> Any:
        """Store `value` unless the key is already present; return the stored value."""
        with self._lock:
            if key in self._entries:
                self._entries.move_to_end(key)
                return self._entries[key]
            self._entries[key] = value
            while len(self._entries) > self.capacity:
                evicted, _ = self._entries.popitem(last=False)
                logger.debug("Evicted cache entry %s", evicted)
            return value

    def get_or_compute(self, key: Hashable, compute: Callable[[], T]) -> T:
        cached = self.get(key)
        if cached is not None:
            logger.debug("Cache hit %s", key)
            return cached
        return self.put(key, compute())

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()
            self.hits = 0
            self.misses = 0
