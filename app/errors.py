from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, List


@dataclass
class AppError(Exception):
    """Base class for service-level errors."""

    message: str
    http_status: int = 500
    code: str = "internal_error"
    retryable: bool = False
    extra: Dict[str, Any] = field(default_factory=dict)
    details: Optional[List[str]] = None

    def __str__(self) -> str:
        return self.message


# 4xx
@dataclass
class BadRequestError(AppError):
    http_status: int = 400
    code: str = "bad_request"


@dataclass
class UploadRejected(BadRequestError):
    code: str = "upload_rejected"


@dataclass
class DbNotFound(AppError):
    http_status: int = 404
    code: str = "db_not_found"


@dataclass
class TableNotFound(AppError):
    http_status: int = 404
    code: str = "table_not_found"


# 5xx-ish
@dataclass
class SchemaServiceError(AppError):
    http_status: int = 500
    code: str = "schema_service_error"
