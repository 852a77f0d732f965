from __future__ import annotations

import logging
import os
import threading
import time
import uuid
from pathlib import Path
from typing import Dict, Tuple, Optional

log = logging.getLogger(__name__)


class DbUploadStore:
    """
    Registry for uploaded SQLite files with simple TTL-based cleanup.

    Responsibilities:
    - Persist uploaded bytes under upload_dir as <db_id>.sqlite.
    - Track uploaded DBs by db_id -> filesystem path.
    - Remove stale entries and delete underlying files when expired.
    """

    def __init__(self, upload_dir: str, ttl_seconds: int) -> None:
        self.upload_dir = upload_dir
        self.ttl_seconds = ttl_seconds
        self._entries: Dict[str, Tuple[str, float]] = {}
        self._lock = threading.Lock()

        Path(self.upload_dir).mkdir(parents=True, exist_ok=True)
        log.debug(
            "Initialized DbUploadStore",
            extra={
                "upload_dir": self.upload_dir,
                "ttl_seconds": self.ttl_seconds,
            },
        )

    def _now(self) -> float:
        return time.time()

    def _is_expired(self, ts: float, now: Optional[float] = None) -> bool:
        if now is None:
            now = self._now()
        return (now - ts) > self.ttl_seconds

    def _drop_locked(self, db_id: str, path: str) -> None:
        self._entries.pop(db_id, None)
        try:
            if os.path.exists(path):
                os.remove(path)
                log.debug(
                    "Deleted expired uploaded DB file",
                    extra={"db_id": db_id, "path": path},
                )
        except OSError as exc:
            # Best-effort cleanup; a leftover file is harmless.
            log.debug(
                "Failed to delete expired uploaded DB file",
                extra={"db_id": db_id, "path": path},
                exc_info=exc,
            )

    def _gc_locked(self, now: Optional[float] = None) -> None:
        if now is None:
            now = self._now()

        for db_id, (path, ts) in list(self._entries.items()):
            if self._is_expired(ts, now) or (not os.path.exists(path)):
                self._drop_locked(db_id, path)

    def cleanup_stale(self) -> None:
        with self._lock:
            self._gc_locked()

    def save(self, data: bytes) -> str:
        """Write ``data`` to a new file and register it. Returns the db_id."""
        db_id = str(uuid.uuid4())
        path = os.path.join(self.upload_dir, f"{db_id}.sqlite")
        with open(path, "wb") as fh:
            fh.write(data)
        self.register(db_id, path)
        return db_id

    def register(self, db_id: str, path: str) -> None:
        now = self._now()
        with self._lock:
            self._entries[db_id] = (path, now)
            self._gc_locked(now=now)
        log.debug(
            "Registered uploaded DB in DbUploadStore",
            extra={"db_id": db_id, "path": path},
        )

    def resolve(self, db_id: str) -> Optional[str]:
        """
        Resolve db_id to a filesystem path if it exists and is not expired.

        Returns:
            str path if valid, or None if missing/expired.
        """
        with self._lock:
            self._gc_locked()
            entry = self._entries.get(db_id)
            return entry[0] if entry else None
