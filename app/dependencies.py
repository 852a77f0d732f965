from functools import lru_cache

from app.cache import SchemaCache
from app.services.schema_service import SchemaService
from app.settings import get_settings
from app.state import DbUploadStore


@lru_cache()
def get_upload_store() -> DbUploadStore:
    """Process-wide registry of uploaded SQLite files."""
    settings = get_settings()
    return DbUploadStore(
        upload_dir=settings.db_upload_dir, ttl_seconds=settings.db_ttl_seconds
    )


@lru_cache()
def get_cache() -> SchemaCache:
    """
    Singleton in-memory cache of parsed schemas.

    TTL is loaded from Settings (SCHEMA_CACHE_TTL_SEC).
    """
    settings = get_settings()
    return SchemaCache(ttl=float(settings.cache_ttl_sec))


@lru_cache()
def get_schema_service() -> SchemaService:
    """
    Singleton-ish SchemaService for the FastAPI app.

    Uses centralized Settings so configuration is loaded once and injected.
    """
    return SchemaService(
        settings=get_settings(), store=get_upload_store(), cache=get_cache()
    )
