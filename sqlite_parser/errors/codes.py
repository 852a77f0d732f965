from enum import Enum


class ErrorCode(str, Enum):
    # --- Source access ---
    SOURCE_NOT_FOUND = "SOURCE_NOT_FOUND"
    SOURCE_READ_FAILED = "SOURCE_READ_FAILED"

    # --- Data integrity ---
    DUPLICATE_TABLE = "DUPLICATE_TABLE"
    FK_REFERENCED_TABLE_MISMATCH = "FK_REFERENCED_TABLE_MISMATCH"
    FK_EMPTY_COLUMNS = "FK_EMPTY_COLUMNS"
    FK_UNRESOLVED_COLUMN = "FK_UNRESOLVED_COLUMN"
    FK_DUPLICATE_SEQ = "FK_DUPLICATE_SEQ"
    UNKNOWN_REFERENCE = "UNKNOWN_REFERENCE"
    INTEGRITY_VIOLATION = "INTEGRITY_VIOLATION"

    # --- Caller input ---
    TABLES_QUERY_REJECTED = "TABLES_QUERY_REJECTED"
