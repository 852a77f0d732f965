"""
Entry points: parse a SQLite file (or any SchemaSource) into a Schema.

The Schema is produced atomically after every table has been processed;
callers either receive it as a return value (``parse_schema``) or have it
pushed once to a result sink (``parse``).
"""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Protocol, Union

from adapters.db.base import SchemaSource
from adapters.db.sqlite_adapter import SQLiteAdapter
from adapters.metrics.base import Metrics
from sqlite_parser.assembler import SchemaAssembler
from sqlite_parser.tables_query import check_tables_query
from sqlite_parser.types import Schema

PathLike = Union[str, Path]


class ResultSink(Protocol):
    """Receives the finished Schema exactly once."""

    def __call__(self, schema: Schema) -> None: ...


def parse_source(source: SchemaSource, *, metrics: Optional[Metrics] = None) -> Schema:
    assembler = SchemaAssembler(metrics=metrics)
    return assembler.assemble(
        source.list_tables,
        source.table_info,
        source.foreign_key_list,
    )


def parse_schema(
    path: PathLike,
    *,
    tables_query: Optional[str] = None,
    metrics: Optional[Metrics] = None,
    timeout: float = 3.0,
) -> Schema:
    """
    Open ``path`` read-only and return its Schema.

    ``tables_query`` replaces the default table listing
    (``SELECT name FROM sqlite_master WHERE type='table';``); it must be a
    single read-only SELECT whose first column is the table name.
    """
    query = check_tables_query(tables_query) if tables_query else None
    with SQLiteAdapter(str(path), tables_query=query, timeout=timeout) as source:
        return parse_source(source, metrics=metrics)


def parse(
    path: PathLike,
    sink: ResultSink,
    *,
    tables_query: Optional[str] = None,
    metrics: Optional[Metrics] = None,
) -> None:
    """Parse ``path`` and push the Schema to ``sink``. On failure the sink is not called."""
    schema = parse_schema(path, tables_query=tables_query, metrics=metrics)
    sink(schema)
