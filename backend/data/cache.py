"""Response cache used by the data clients."""

from __future__ import annotations

import threading
import time
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, Tuple


class Cache(ABC):
    """Minimal key/value cache with per-entry time-to-live."""

    @abstractmethod
    def get(self, key: str) -> Optional[Any]:
        ...

    @abstractmethod
    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        ...


class TTLCache(Cache):
    """Process-local TTL cache, shared between request and worker threads."""

    def __init__(
        self,
        default_ttl: float = 120.0,
        max_items: int = 512,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._ttl = default_ttl
        self._max = max_items
        self._clock = clock
        self._store: Dict[str, Tuple[float, Any]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            item = self._store.get(key)
            if item is None:
                return None
            expires_at, value = item
            if expires_at < self._clock():
                self._store.pop(key, None)
                return None
            return value

    def set(self, key: str, value: Any, ttl: Optional[float] = None) -> None:
        with self._lock:
            if key not in self._store and len(self._store) >= self._max:
                oldest = min(self._store.items(), key=lambda item: item[1][0])[0]
                self._store.pop(oldest, None)
            self._store[key] = (self._clock() + (self._ttl if ttl is None else ttl), value)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)
