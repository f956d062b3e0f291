# utils/cache.py
import time
from dataclasses import dataclass
from threading import RLock
from typing import Any, Callable, Dict, Optional

from flask import current_app


@dataclass
class CacheEntry:
    value: Any
    created_at: float

    def is_expired(self, now: float, ttl: float) -> bool:
        return now - self.created_at > ttl


class TTLCache:
    """
    Response cache keyed by endpoint. Entries expire after `ttl_seconds`;
    writers drop whole families of keys with invalidate(prefix).
    """

    def __init__(self, ttl_seconds: float = 300, clock: Callable[[], float] = time.monotonic):
        self.ttl = ttl_seconds
        self.clock = clock
        self._data: Dict[str, CacheEntry] = {}
        self._lock = RLock()

    def get(self, key: str) -> Optional[Any]:
        with self._lock:
            entry = self._data.get(key)
            if entry is None:
                return None
            if entry.is_expired(self.clock(), self.ttl):
                del self._data[key]
                return None
            return entry.value

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = CacheEntry(value, self.clock())

    def invalidate(self, prefix: str = "") -> int:
        with self._lock:
            keys = [k for k in self._data if k.startswith(prefix)]
            for k in keys:
                del self._data[k]
            return len(keys)

    def __len__(self):
        return len(self._data)


def response_cache() -> TTLCache:
    return current_app.extensions["response_cache"]
