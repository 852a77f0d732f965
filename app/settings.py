from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path

from dotenv import load_dotenv

# Resolve repo root from this file's location:
# app/settings.py → parent = app/ → parent = repo root
REPO_ROOT = Path(__file__).resolve().parents[1]

# Canonical demo DB shipped with the repo
DEFAULT_DEMO_DB = REPO_ROOT / "data" / "demo.db"

load_dotenv()


@dataclass
class Settings:
    """
    Centralized application configuration.

    Does NOT depend on pydantic. Values are loaded from environment
    variables via Settings.from_env().
    """

    # --- Default SQLite path (demo DB) ---
    default_sqlite_path: str = str(DEFAULT_DEMO_DB)

    # --- Introspection ---
    tables_query: str = ""  # empty → built-in sqlite_master listing
    sqlite_timeout_sec: float = 3.0

    # --- SQLite uploaded DBs ---
    db_upload_dir: str = "/tmp/sqlite_parser_dbs"
    db_ttl_seconds: int = 7200  # 2 hours

    # --- Upload constraints ---
    upload_max_bytes: int = 20 * 1024 * 1024  # 20MB

    # --- Cache settings ---
    cache_ttl_sec: int = 300

    # --- API keys (comma-separated) ---
    api_keys_raw: str = ""

    # --- App version / env ---
    app_version: str = "dev"
    app_env: str = "dev"

    @property
    def api_keys(self) -> set[str]:
        return {k.strip() for k in self.api_keys_raw.split(",") if k.strip()}

    @classmethod
    def from_env(cls) -> "Settings":
        """
        Build Settings from environment variables with sane fallbacks.

        - DEFAULT_SQLITE_PATH can be absolute or relative.
        - Relative paths are resolved against REPO_ROOT.
        """

        def getenv_int(name: str, default: int) -> int:
            raw = os.getenv(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return int(raw)
            except ValueError:
                return default

        def getenv_float(name: str, default: float) -> float:
            raw = os.getenv(name)
            if raw is None or raw.strip() == "":
                return default
            try:
                return float(raw)
            except ValueError:
                return default

        # --- Default SQLite path ---
        raw_default_db = os.getenv("DEFAULT_SQLITE_PATH", "").strip()
        if raw_default_db:
            db_candidate = Path(raw_default_db)
            if not db_candidate.is_absolute():
                db_candidate = REPO_ROOT / raw_default_db
        else:
            db_candidate = DEFAULT_DEMO_DB

        return cls(
            default_sqlite_path=str(db_candidate),
            tables_query=os.getenv("SCHEMA_TABLES_QUERY", cls.tables_query).strip(),
            sqlite_timeout_sec=getenv_float("SQLITE_TIMEOUT_SEC", cls.sqlite_timeout_sec),
            db_upload_dir=os.getenv("DB_UPLOAD_DIR", cls.db_upload_dir),
            db_ttl_seconds=getenv_int("DB_TTL_SECONDS", cls.db_ttl_seconds),
            upload_max_bytes=getenv_int("UPLOAD_MAX_BYTES", cls.upload_max_bytes),
            cache_ttl_sec=getenv_int("SCHEMA_CACHE_TTL_SEC", cls.cache_ttl_sec),
            api_keys_raw=os.getenv("API_KEYS", cls.api_keys_raw),
            app_version=os.getenv("APP_VERSION", cls.app_version),
            app_env=os.getenv("APP_ENV", cls.app_env).lower(),
        )


@lru_cache()
def get_settings() -> Settings:
    return Settings.from_env()
