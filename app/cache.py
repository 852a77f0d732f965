from __future__ import annotations

import threading
import time
from typing import Dict, Optional, Tuple

from adapters.metrics.prometheus import cache_events_total
from sqlite_parser.types import Schema


class SchemaCache:
    """
    Tiny in-memory TTL cache of parsed schemas.

    Keys combine the database path with its size and mtime, so a file that
    changes on disk is parsed again even before the TTL runs out.
    """

    def __init__(self, ttl: float = 300.0) -> None:
        self.ttl = ttl
        self._store: Dict[str, Tuple[float, Schema]] = {}
        self._lock = threading.Lock()

    def _gc(self, now: float) -> None:
        """Remove expired entries; the caller holds the lock."""
        expired_keys = [
            key for key, (ts, _) in self._store.items() if now - ts > self.ttl
        ]
        for key in expired_keys:
            del self._store[key]

    def get(self, key: str) -> Optional[Schema]:
        """
        Return the cached schema if present and not expired, otherwise None.
        Also updates Prometheus counters for hits/misses.
        """
        now = time.time()
        with self._lock:
            self._gc(now)
            entry = self._store.get(key)

        if entry is None:
            cache_events_total.labels(hit="false").inc()
            return None

        cache_events_total.labels(hit="true").inc()
        return entry[1]

    def set(self, key: str, schema: Schema) -> None:
        with self._lock:
            self._store[key] = (time.time(), schema)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
