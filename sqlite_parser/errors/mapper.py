from sqlite_parser.errors.codes import ErrorCode

ERROR_MAP = {
    ErrorCode.SOURCE_NOT_FOUND: (404, False),
    ErrorCode.SOURCE_READ_FAILED: (503, True),
    ErrorCode.DUPLICATE_TABLE: (422, False),
    ErrorCode.FK_REFERENCED_TABLE_MISMATCH: (422, False),
    ErrorCode.FK_EMPTY_COLUMNS: (422, False),
    ErrorCode.FK_UNRESOLVED_COLUMN: (422, False),
    ErrorCode.FK_DUPLICATE_SEQ: (422, False),
    ErrorCode.UNKNOWN_REFERENCE: (422, False),
    ErrorCode.INTEGRITY_VIOLATION: (422, False),
    ErrorCode.TABLES_QUERY_REJECTED: (400, False),
}

# CLI exit codes by error family
EXIT_SOURCE_ACCESS = 2
EXIT_DATA_INTEGRITY = 3
EXIT_BAD_INPUT = 4


def map_error(code: ErrorCode | None) -> tuple[int, bool]:
    if code is None:
        return (500, False)
    return ERROR_MAP.get(code, (500, False))


def exit_code_for(code: ErrorCode | None) -> int:
    if code in (ErrorCode.SOURCE_NOT_FOUND, ErrorCode.SOURCE_READ_FAILED):
        return EXIT_SOURCE_ACCESS
    if code == ErrorCode.TABLES_QUERY_REJECTED:
        return EXIT_BAD_INPUT
    if code is None:
        return 1
    return EXIT_DATA_INTEGRITY
