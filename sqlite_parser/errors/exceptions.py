from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from sqlite_parser.errors.codes import ErrorCode


@dataclass
class SchemaParseError(Exception):
    """Base class for every failure that aborts a parse."""

    message: str
    code: Optional[ErrorCode] = None
    details: Optional[List[str]] = None
    extra: Dict[str, Any] = field(default_factory=dict)

    def __str__(self) -> str:
        return self.message


@dataclass
class SourceAccessError(SchemaParseError):
    """The database could not be opened or an introspection query failed."""

    code: Optional[ErrorCode] = ErrorCode.SOURCE_READ_FAILED


@dataclass
class DataIntegrityError(SchemaParseError):
    """The source returned schema data that contradicts the model invariants."""

    code: Optional[ErrorCode] = ErrorCode.INTEGRITY_VIOLATION


@dataclass
class InvalidTablesQueryError(SchemaParseError):
    code: Optional[ErrorCode] = ErrorCode.TABLES_QUERY_REJECTED
