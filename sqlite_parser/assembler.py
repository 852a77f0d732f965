from __future__ import annotations

import logging
import time
from typing import Callable, Dict, Iterable, Optional, Sequence, Union

from adapters.metrics.base import Metrics
from adapters.metrics.noop import NoOpMetrics
from sqlite_parser.columns import ColumnAssembler, ColumnIdCounter
from sqlite_parser.errors.codes import ErrorCode
from sqlite_parser.errors.exceptions import DataIntegrityError, SchemaParseError
from sqlite_parser.foreign_keys import ForeignKeyAssembler
from sqlite_parser.types import RawColumn, RawForeignKey, Schema, Table

log = logging.getLogger(__name__)

ColumnSource = Callable[[str], Sequence[RawColumn]]
ForeignKeySource = Callable[[str], Sequence[RawForeignKey]]
TableNames = Union[Iterable[str], Callable[[], Iterable[str]]]


class SchemaAssembler:
    """
    Build a Schema from raw introspection rows in one sequential pass.

    Tables are processed in the order given. Column ids come from a single
    counter created per ``assemble`` call, so they are contiguous from 0 in
    table-processing order.

    ``table_names`` may be a callable; it is then invoked inside the parse so
    that a failing listing is accounted like any other parse failure.
    """

    name = "schema"

    def __init__(
        self,
        *,
        columns: Optional[ColumnAssembler] = None,
        metrics: Optional[Metrics] = None,
    ) -> None:
        self.columns = columns or ColumnAssembler()
        self.metrics = metrics or NoOpMetrics()

    def _assemble_table(
        self,
        table_name: str,
        column_source: ColumnSource,
        fk_source: ForeignKeySource,
        counter: ColumnIdCounter,
    ) -> Table:
        columns = self.columns.assemble(column_source(table_name), counter)
        foreign_keys = ForeignKeyAssembler(table_name).assemble(fk_source(table_name))
        log.debug(
            "Assembled table",
            extra={
                "table": table_name,
                "columns": len(columns),
                "foreign_keys": len(foreign_keys),
                "next_column_id": counter.value,
            },
        )
        return Table(name=table_name, columns=columns, foreign_keys=foreign_keys)

    def assemble(
        self,
        table_names: TableNames,
        column_source: ColumnSource,
        fk_source: ForeignKeySource,
    ) -> Schema:
        t0 = time.perf_counter()
        counter = ColumnIdCounter()
        tables: Dict[str, Table] = {}

        try:
            names = table_names() if callable(table_names) else table_names
            for table_name in names:
                if table_name in tables:
                    raise DataIntegrityError(
                        f"Duplicate table name: {table_name!r}",
                        code=ErrorCode.DUPLICATE_TABLE,
                        extra={"table": table_name},
                    )
                tables[table_name] = self._assemble_table(
                    table_name, column_source, fk_source, counter
                )
        except SchemaParseError as exc:
            code = exc.code.value if exc.code else "unknown"
            self.metrics.inc_parse_error(error_code=code)
            self.metrics.inc_parse_run(status="error")
            log.info("Schema parse aborted: %s (%s)", exc, code)
            raise
        except Exception:
            self.metrics.inc_parse_error(error_code="unknown")
            self.metrics.inc_parse_run(status="error")
            raise

        schema = Schema(tables=tables)
        dt_ms = (time.perf_counter() - t0) * 1000
        fk_count = sum(len(t.foreign_keys) for t in tables.values())

        self.metrics.observe_parse_duration_ms(dt_ms=dt_ms)
        self.metrics.inc_parse_run(status="ok")
        self.metrics.add_parsed(
            tables=len(tables), columns=counter.value, foreign_keys=fk_count
        )
        log.info(
            "Schema parsed: %d tables, %d columns, %d foreign keys in %.1f ms",
            len(tables),
            counter.value,
            fk_count,
            dt_ms,
        )
        return schema
