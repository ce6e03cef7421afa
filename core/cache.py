# core/cache.py

"""
Process-wide in-memory cache for session-scoped state.

Keys are namespaced with a prefix ("permissions:<role>", "role_draft:<id>")
so a whole family can be dropped at once on login, logout or after a save.
Entries without a TTL live until invalidated.
"""

from threading import Lock
from time import monotonic
from typing import Any, Dict, List, Optional, Tuple

from core.logging_config import logger

# value, deadline (None: no expiry)
_Entry = Tuple[Any, Optional[float]]


class SessionCache:
    def __init__(self):
        self._entries: Dict[str, _Entry] = {}
        self._lock = Lock()

    def get(self, key: str) -> Optional[Any]:
        """Value for key, or None when missing or past its deadline."""
        with self._lock:
            found = self._entries.get(key)
            if found is None:
                return None
            value, deadline = found
            if deadline is not None and monotonic() >= deadline:
                self._entries.pop(key, None)
                return None
            return value

    def set(self, key: str, value: Any, ttl_seconds: Optional[float] = None):
        deadline = monotonic() + ttl_seconds if ttl_seconds is not None else None
        with self._lock:
            self._entries[key] = (value, deadline)

    def delete(self, key: str):
        with self._lock:
            self._entries.pop(key, None)

    def delete_prefix(self, prefix: str) -> int:
        """Drop every key in the `prefix` namespace. Returns how many went."""
        with self._lock:
            doomed = [key for key in self._entries if key.startswith(prefix)]
            for key in doomed:
                del self._entries[key]
        if doomed:
            logger.debug(f"Cache invalidated {len(doomed)} entries for prefix '{prefix}'")
        return len(doomed)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._entries)

    def clear(self):
        with self._lock:
            self._entries.clear()

    def size(self) -> int:
        with self._lock:
            return len(self._entries)


# Global cache instance
_cache = SessionCache()


def get_cache() -> SessionCache:
    return _cache


def cache_get(key: str) -> Optional[Any]:
    return _cache.get(key)


def cache_set(key: str, value: Any, ttl_seconds: Optional[float] = None):
    _cache.set(key, value, ttl_seconds)


def cache_delete(key: str):
    _cache.delete(key)


def cache_delete_prefix(prefix: str) -> int:
    return _cache.delete_prefix(prefix)


def cache_clear():
    """Clear all cache entries."""
    _cache.clear()
