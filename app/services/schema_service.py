from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple

from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.metrics.prometheus import PrometheusMetrics
from sqlite_parser.parser import parse_schema
from sqlite_parser.types import Schema, Table

from app.cache import SchemaCache
from app.settings import Settings
from app.state import DbUploadStore
from app.errors import DbNotFound, TableNotFound, UploadRejected

log = logging.getLogger(__name__)

ALLOWED_UPLOAD_SUFFIXES = (".db", ".sqlite", ".sqlite3")


@dataclass
class SchemaService:
    """
    Application-level service for schema introspection.

    Responsibilities:
        - Resolve a db_id (uploaded file) or the default SQLite path.
        - Parse the schema with Prometheus metrics wired in.
        - Cache parsed schemas keyed by path, size and mtime.
    """

    settings: Settings
    store: DbUploadStore
    cache: SchemaCache
    metrics: PrometheusMetrics = field(default_factory=PrometheusMetrics)

    def _resolve_path(self, db_id: Optional[str]) -> str:
        if db_id:
            path = self.store.resolve(db_id)
            if not path:
                raise DbNotFound(
                    f"Could not resolve DB for db_id={db_id!r}",
                    extra={"db_id": db_id},
                )
            return path

        default_path = self.settings.default_sqlite_path
        if not Path(default_path).exists():
            raise DbNotFound("Default SQLite database is not available")
        return default_path

    def _cache_key(self, path: str) -> str:
        st = os.stat(path)
        return f"{Path(path).resolve()}|{st.st_size}|{st.st_mtime_ns}"

    def get_schema(self, db_id: Optional[str]) -> Tuple[Schema, bool]:
        """Return (schema, cached)."""
        path = self._resolve_path(db_id)
        key = self._cache_key(path)

        cached = self.cache.get(key)
        if cached is not None:
            return cached, True

        schema = parse_schema(
            path,
            tables_query=self.settings.tables_query or None,
            metrics=self.metrics,
            timeout=self.settings.sqlite_timeout_sec,
        )
        self.cache.set(key, schema)
        return schema, False

    def get_table(self, db_id: Optional[str], table_name: str) -> Table:
        schema, _ = self.get_schema(db_id)
        table = schema.table(table_name)
        if table is None:
            raise TableNotFound(
                f"Table {table_name!r} not found",
                extra={"table": table_name, "db_id": db_id},
            )
        return table

    def save_upload(self, filename: str, data: bytes) -> str:
        if not filename.lower().endswith(ALLOWED_UPLOAD_SUFFIXES):
            raise UploadRejected(
                "Only .db, .sqlite or .sqlite3 files are allowed",
                extra={"filename": filename},
            )

        max_bytes = self.settings.upload_max_bytes
        if len(data) > max_bytes:
            raise UploadRejected(f"File too large (> {max_bytes} bytes)")

        db_id = self.store.save(data)
        log.debug("Registered uploaded DB", extra={"db_id": db_id})
        return db_id

    def ping(self) -> None:
        """Readiness: the default DB must open and list its tables."""
        SQLiteAdapter(
            self.settings.default_sqlite_path,
            timeout=self.settings.sqlite_timeout_sec,
        ).ping()
