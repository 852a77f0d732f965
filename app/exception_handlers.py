from __future__ import annotations

import uuid
from typing import Any, Dict, Optional, List

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.errors import AppError
from sqlite_parser.errors.exceptions import SchemaParseError
from sqlite_parser.errors.mapper import map_error


def _error_response(
    request: Request,
    *,
    status: int,
    code: str,
    message: str,
    retryable: bool,
    details: Optional[List[str]],
    extra: Dict[str, Any],
) -> JSONResponse:
    request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())

    payload = {
        "error": {
            "code": code,
            "message": message,
            "details": details,
            "retryable": retryable,
            "request_id": request_id,
            "extra": extra,
        }
    }

    headers = {"X-Request-ID": request_id}
    if retryable:
        headers["Retry-After"] = "2"

    return JSONResponse(status_code=status, content=payload, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """Register global exception handlers for the FastAPI application."""

    @app.exception_handler(AppError)
    async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
        return _error_response(
            request,
            status=getattr(exc, "http_status", 500),
            code=getattr(exc, "code", "app_error"),
            message=getattr(exc, "message", str(exc)),
            retryable=bool(getattr(exc, "retryable", False)),
            details=getattr(exc, "details", None),
            extra=getattr(exc, "extra", {}) or {},
        )

    @app.exception_handler(SchemaParseError)
    async def parse_error_handler(
        request: Request, exc: SchemaParseError
    ) -> JSONResponse:
        status, retryable = map_error(exc.code)
        return _error_response(
            request,
            status=status,
            code=exc.code.value if exc.code else "schema_parse_error",
            message=exc.message,
            retryable=retryable,
            details=exc.details,
            # the path of an uploaded DB is internal
            extra={k: v for k, v in (exc.extra or {}).items() if k != "path"},
        )
