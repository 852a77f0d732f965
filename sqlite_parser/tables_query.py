from __future__ import annotations

import re
from typing import Any, List, Pattern, cast

import sqlglot
from sqlglot import exp

from sqlite_parser.errors.codes import ErrorCode
from sqlite_parser.errors.exceptions import InvalidTablesQueryError

# String / comment regexes
_STR_SINGLE_RE = re.compile(r"'([^'\\]|\\.)*'", re.DOTALL)
_STR_DOUBLE_RE = re.compile(r'"([^"\\]|\\.)*"', re.DOTALL)
_LINE_COMMENT_RE = re.compile(r"--[^\n]*")
_BLOCK_COMMENT_RE = re.compile(r"/\*.*?\*/", re.DOTALL)

_FORBIDDEN: Pattern[str] = re.compile(
    r"\b("
    r"delete|update|insert|drop|create|alter|truncate|merge|"
    r"attach|detach|pragma|reindex|vacuum"
    r")\b",
    re.IGNORECASE,
)

_FORBIDDEN_NODES = {
    "insert",
    "update",
    "delete",
    "drop",
    "create",
    "alter",
    "truncate",
    "merge",
    "command",
}

_MAX_SQL_LEN = 20_000


def _reject(reason: str, sql: str) -> InvalidTablesQueryError:
    return InvalidTablesQueryError(
        f"Tables query rejected: {reason}",
        code=ErrorCode.TABLES_QUERY_REJECTED,
        details=[reason],
        extra={"sql": sql[:200]},
    )


def _remove_comments(body: str) -> str:
    body = _BLOCK_COMMENT_RE.sub("", body)
    body = _LINE_COMMENT_RE.sub("", body)
    return body


def _strip_strings(body: str) -> str:
    body = _STR_SINGLE_RE.sub("''", body)
    body = _STR_DOUBLE_RE.sub('""', body)
    return body


def check_tables_query(sql: str) -> str:
    """
    Validate a caller-supplied table-listing query.

    Accepts exactly one read-only SELECT (or WITH ... SELECT). The first
    result column is read as the table name. Returns the trimmed query.
    """
    if not sql or not sql.strip():
        raise _reject("empty_sql", sql or "")
    if len(sql) > _MAX_SQL_LEN:
        raise _reject("sql_too_long", sql)

    body = _remove_comments(sql).strip()
    while body.endswith(";"):
        body = body[:-1].rstrip()

    m = _FORBIDDEN.search(_strip_strings(body))
    if m:
        raise _reject(f"forbidden_keyword:{m.group(0).lower()}", sql)

    try:
        trees: List[Any] = [t for t in sqlglot.parse(body, read="sqlite") if t is not None]
    except Exception as exc:
        raise _reject(f"parse_error:{exc}", sql) from exc

    if len(trees) != 1:
        raise _reject("multiple_statements", sql)

    root = cast(exp.Expression, trees[0])
    root_type = type(root).__name__.lower()
    if root_type not in {"select", "with", "union", "except", "intersect"}:
        raise _reject(f"non_select:{root_type}", sql)

    for node in root.walk():
        name = type(node).__name__.lower()
        if name in _FORBIDDEN_NODES:
            raise _reject(f"forbidden_node:{name}", sql)

    return body + ";"
