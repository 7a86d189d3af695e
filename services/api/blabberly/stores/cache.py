"""In-process result cache with TTL expiration.

Each caller owns its own instance (explore: 15 minutes, search: 5 minutes).
Keys encode the query, e.g. "trending" or "places:<normalized query>".

Entries expire lazily: a stale entry is dropped the next time it is read.
There is no size bound and no background sweep; explore keys are a fixed set
and search keys live for one session's worth of queries.
"""

from collections.abc import Callable
import threading
import time
from typing import Any

# Key prefixes
PREFIX_SEARCH_PLACES = "places:"
PREFIX_SEARCH_USERS = "users:"
PREFIX_SEARCH_POSTS = "posts:"


class ResultCache:
    """TTL memoization keyed by logical query name."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, Any]] = {}
        self._lock = threading.Lock()

    @property
    def ttl_seconds(self) -> float:
        return self._ttl

    def get(self, key: str) -> Any | None:
        """Get a cached payload.

        Args:
            key: Cache key.

        Returns:
            The payload if stored less than `ttl_seconds` ago, otherwise None.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return None
            stored_at, payload = entry
            if self._clock() - stored_at >= self._ttl:
                del self._entries[key]
                return None
            return payload

    def set(self, key: str, payload: Any) -> None:
        """Store a payload under `key`, replacing any previous entry."""
        with self._lock:
            self._entries[key] = (self._clock(), payload)

    def delete(self, key: str) -> None:
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.get(key) is not None

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)
