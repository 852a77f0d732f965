from __future__ import annotations

# --- Stdlib ---
from typing import Optional
import logging

# --- Third-party ---
from fastapi import APIRouter, Depends, HTTPException, Security, UploadFile, File
from fastapi.security import APIKeyHeader

# --- Local ---
from app.schemas import SchemaResponse, TableModel, UploadResponse
from app.dependencies import get_schema_service
from app.services.schema_service import SchemaService
from app.settings import get_settings
from app.errors import AppError, SchemaServiceError
from sqlite_parser.errors.exceptions import SchemaParseError
from sqlite_parser.types import Schema

logger = logging.getLogger(__name__)

api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)


def require_api_key(key: Optional[str] = Security(api_key_header)):
    """
    Simple API key check using X-API-Key header and configured API keys.

    - Settings.api_keys_raw is a comma-separated list of keys.
    - If api_keys_raw is empty → auth disabled (dev mode).
    """
    allowed = get_settings().api_keys
    if not allowed:
        # No keys configured → treat as dev mode (auth off).
        return
    if not key or key not in allowed:
        raise HTTPException(status_code=401, detail="invalid API key")


router = APIRouter(prefix="/schema", tags=["schema"])


def _to_response(schema: Schema, *, db_id: Optional[str], cached: bool) -> SchemaResponse:
    return SchemaResponse(
        db_id=db_id,
        tables={
            name: TableModel.model_validate(t) for name, t in schema.to_dict().items()
        },
        table_count=len(schema.tables),
        column_count=schema.column_count(),
        cached=cached,
    )


@router.get(
    "",
    name="schema_handler",
    dependencies=[Depends(require_api_key)],
    response_model=SchemaResponse,
)
def schema_handler(
    db_id: Optional[str] = None,
    svc: SchemaService = Depends(get_schema_service),
) -> SchemaResponse:
    try:
        schema, cached = svc.get_schema(db_id)
    except (AppError, SchemaParseError):
        # Domain-level errors are handled by the global exception handlers.
        raise
    except Exception as exc:
        logger.exception("Unexpected error in schema_handler", exc_info=exc)
        raise SchemaServiceError(
            message="failed to parse schema",
            details=[str(exc)],
        ) from exc

    return _to_response(schema, db_id=db_id, cached=cached)


@router.get(
    "/tables/{table_name}",
    name="table_handler",
    dependencies=[Depends(require_api_key)],
    response_model=TableModel,
)
def table_handler(
    table_name: str,
    db_id: Optional[str] = None,
    svc: SchemaService = Depends(get_schema_service),
) -> TableModel:
    try:
        table = svc.get_table(db_id, table_name)
    except (AppError, SchemaParseError):
        raise
    except Exception as exc:
        logger.exception("Unexpected error in table_handler", exc_info=exc)
        raise SchemaServiceError(
            message="failed to parse schema",
            details=[str(exc)],
        ) from exc

    return TableModel.model_validate(table.to_dict())


# -------------------------------
# Upload endpoint
# -------------------------------


@router.post(
    "/upload_db",
    dependencies=[Depends(require_api_key)],
    response_model=UploadResponse,
)
async def upload_db(
    file: UploadFile = File(...),
    svc: SchemaService = Depends(get_schema_service),
) -> UploadResponse:
    """
    Upload a SQLite DB file and register it under a generated db_id.

    - Allowed extensions: .db, .sqlite, .sqlite3
    - File size capped by configured upload_max_bytes (default 20 MB)
    """
    data = await file.read()
    try:
        db_id = svc.save_upload(file.filename or "db.sqlite", data)
    except AppError:
        raise
    except OSError as exc:
        logger.exception("Failed to store uploaded DB file")
        raise SchemaServiceError(
            message="failed to store DB", details=[str(exc)]
        ) from exc
    return UploadResponse(db_id=db_id)


@router.get("/health")
def health():
    """Simple router-level health endpoint."""
    return {"status": "ok", "version": get_settings().app_version}
