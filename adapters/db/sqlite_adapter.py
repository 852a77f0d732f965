import sqlite3
import logging
from contextlib import contextmanager
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple
from urllib.parse import quote
from adapters.db.base import SchemaSource
from pathlib import Path

from sqlite_parser.errors.codes import ErrorCode
from sqlite_parser.errors.exceptions import SourceAccessError
from sqlite_parser.types import RawColumn, RawForeignKey

log = logging.getLogger(__name__)

DEFAULT_TABLES_QUERY = "SELECT name FROM sqlite_master WHERE type='table';"

_TABLE_INFO_SQL = 'SELECT cid, name, type, "notnull", pk FROM pragma_table_info(?);'
_INDEX_LIST_SQL = "SELECT origin FROM pragma_index_list(?);"
_FOREIGN_KEY_SQL = (
    'SELECT id, seq, "table", "from", "to" FROM pragma_foreign_key_list(?);'
)


class SQLiteAdapter(SchemaSource):
    """
    Read-only introspection of a single SQLite file.

    Used as a context manager, one connection (opened by the first query)
    serves the whole parse; otherwise every call opens and closes its own
    connection.
    """

    name = "sqlite"
    dialect = "sqlite"

    def __init__(
        self,
        path: str,
        tables_query: Optional[str] = None,
        timeout: float = 3.0,
    ):
        # resolve absolute path for safety
        self.path = Path(path).resolve()
        self.tables_query = tables_query or DEFAULT_TABLES_QUERY
        self.timeout = timeout
        self._conn: Optional[sqlite3.Connection] = None
        self._persistent = False
        log.info("SQLiteAdapter initialized with DB path: %s", self.path)

    def __enter__(self) -> "SQLiteAdapter":
        self._persistent = True
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self._persistent = False
        if self._conn is not None:
            self._conn.close()
            self._conn = None

    # ------------------------------ plumbing ------------------------------ #
    def _uri(self) -> str:
        return f"file:{quote(str(self.path))}?mode=ro"

    def _connect(self) -> sqlite3.Connection:
        if not self.path.exists():
            raise SourceAccessError(
                f"SQLite DB does not exist: {self.path}",
                code=ErrorCode.SOURCE_NOT_FOUND,
                extra={"path": str(self.path)},
            )
        uri = self._uri()
        log.debug("SQLiteAdapter opening read-only connection to: %s", uri)
        try:
            return sqlite3.connect(uri, uri=True, timeout=self.timeout)
        except sqlite3.Error as exc:
            raise SourceAccessError(
                f"Cannot open SQLite DB {self.path}: {exc}",
                code=ErrorCode.SOURCE_READ_FAILED,
                extra={"path": str(self.path)},
            ) from exc

    @contextmanager
    def _cursor(self) -> Iterator[sqlite3.Cursor]:
        if self._persistent:
            if self._conn is None:
                self._conn = self._connect()
            yield self._conn.cursor()
            return
        conn = self._connect()
        try:
            yield conn.cursor()
        finally:
            conn.close()

    def _fetch(self, sql: str, params: Sequence[Any] = ()) -> List[Tuple[Any, ...]]:
        try:
            with self._cursor() as cur:
                cur.execute(sql, tuple(params))
                return cur.fetchall()
        except sqlite3.Error as exc:
            raise SourceAccessError(
                f"Introspection query failed on {self.path}: {exc}",
                code=ErrorCode.SOURCE_READ_FAILED,
                details=[sql.strip()],
                extra={"path": str(self.path), "params": list(params)},
            ) from exc

    # ------------------------------ SchemaSource ------------------------------ #
    def list_tables(self) -> List[str]:
        rows = self._fetch(self.tables_query)
        tables = [str(r[0]) for r in rows if r and r[0] is not None]
        log.debug("Listed %d tables from %s", len(tables), self.path)
        return tables

    def table_info(self, table_name: str) -> List[RawColumn]:
        rows = self._fetch(_TABLE_INFO_SQL, (table_name,))
        pk_rows = [r for r in rows if r[4]]
        rowid_alias = None
        if len(pk_rows) == 1 and str(pk_rows[0][2] or "").upper() == "INTEGER":
            # A lone "INTEGER PRIMARY KEY" aliases the rowid and can never hold
            # NULL, although the pragma reports notnull=0 for it. DESC and
            # WITHOUT ROWID keys are backed by a separate pk index instead.
            if not self._has_pk_index(table_name):
                rowid_alias = pk_rows[0][1]
        return [
            RawColumn(
                ordinal=int(cid),
                name=str(name),
                declared_type=decl or "",
                not_null=bool(notnull) or name == rowid_alias,
                pk_rank=int(pk or 0),
            )
            for cid, name, decl, notnull, pk in rows
        ]

    def _has_pk_index(self, table_name: str) -> bool:
        return any(
            origin == "pk" for (origin,) in self._fetch(_INDEX_LIST_SQL, (table_name,))
        )

    def _primary_key_columns(self, table_name: str) -> Dict[int, str]:
        """pk rank (1-based) -> column name."""
        return {c.pk_rank: c.name for c in self.table_info(table_name) if c.pk_rank}

    def foreign_key_list(self, table_name: str) -> List[RawForeignKey]:
        rows = self._fetch(_FOREIGN_KEY_SQL, (table_name,))
        parent_keys: Dict[str, Dict[int, str]] = {}
        out: List[RawForeignKey] = []
        for fk_id, seq, ref_table, from_col, to_col in rows:
            if to_col is None:
                # "REFERENCES parent" without a column list targets the parent's primary key
                if ref_table not in parent_keys:
                    parent_keys[ref_table] = self._primary_key_columns(ref_table)
                to_col = parent_keys[ref_table].get(int(seq) + 1)
            out.append(
                RawForeignKey(
                    fk_id=int(fk_id),
                    seq=int(seq),
                    referenced_table=str(ref_table),
                    from_column=from_col,
                    to_column=to_col,
                )
            )
        return out

    def ping(self) -> None:
        """Raise if the database cannot be opened and listed."""
        self._fetch(self.tables_query)
