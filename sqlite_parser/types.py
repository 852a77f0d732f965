from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple

from sqlite_parser.errors.codes import ErrorCode
from sqlite_parser.errors.exceptions import DataIntegrityError


class TypeAffinity(str, Enum):
    TEXT = "TEXT"
    NUMERIC = "NUMERIC"
    BLOB = "BLOB"
    REAL = "REAL"
    INTEGER = "INTEGER"


# =====================
# Raw introspection rows
# =====================


@dataclass(frozen=True)
class RawColumn:
    """One row of ``pragma_table_info``."""

    ordinal: int
    name: str
    declared_type: Optional[str]
    not_null: bool
    pk_rank: int


@dataclass(frozen=True)
class RawForeignKey:
    """One row of ``pragma_foreign_key_list``."""

    fk_id: int
    seq: int
    referenced_table: str
    from_column: Optional[str]
    to_column: Optional[str]


# =====================
# Assembled model
# =====================


@dataclass(frozen=True)
class Column:
    id: int
    name: str
    affinity: TypeAffinity
    nullable: bool
    is_primary_key: bool


@dataclass(frozen=True)
class ForeignKey:
    # Scoped to the owning table; compound keys share one id.
    id: int
    referenced_table: str
    from_columns: Tuple[str, ...]
    to_columns: Tuple[str, ...]


@dataclass(frozen=True)
class Table:
    name: str
    columns: Tuple[Column, ...] = ()
    foreign_keys: Tuple[ForeignKey, ...] = ()

    def column(self, column_name: str) -> Optional[Column]:
        """Case-insensitive lookup, matching SQLite identifier rules."""
        wanted = column_name.lower()
        for col in self.columns:
            if col.name.lower() == wanted:
                return col
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "columns": [
                {
                    "id": c.id,
                    "name": c.name,
                    "affinity": c.affinity.value,
                    "nullable": c.nullable,
                    "is_primary_key": c.is_primary_key,
                }
                for c in self.columns
            ],
            "foreign_keys": [
                {
                    "id": fk.id,
                    "referenced_table": fk.referenced_table,
                    "from_columns": list(fk.from_columns),
                    "to_columns": list(fk.to_columns),
                }
                for fk in self.foreign_keys
            ],
        }


@dataclass(frozen=True)
class Schema:
    """
    Parsed metadata of one database: table name -> Table.

    Tables keep the order in which they were assembled.
    """

    tables: Dict[str, Table] = field(default_factory=dict)

    def table(self, table_name: str) -> Optional[Table]:
        return self.tables.get(table_name)

    def column_count(self) -> int:
        return sum(len(t.columns) for t in self.tables.values())

    def resolve_foreign_key(
        self, table_name: str, fk: ForeignKey
    ) -> Tuple[Tuple[Column, ...], Tuple[Column, ...]]:
        """
        Resolve the column names of ``fk`` (owned by ``table_name``) to the
        Column records on both sides of the relationship.
        """
        owner = self.table(table_name)
        if owner is None:
            raise DataIntegrityError(
                f"Unknown table {table_name!r}",
                code=ErrorCode.UNKNOWN_REFERENCE,
                extra={"table": table_name},
            )
        # REFERENCES clauses are not case-sensitive
        target = self.table(fk.referenced_table) or next(
            (
                t
                for name, t in self.tables.items()
                if name.lower() == fk.referenced_table.lower()
            ),
            None,
        )
        if target is None:
            raise DataIntegrityError(
                f"Foreign key {fk.id} of {table_name!r} references unknown table "
                f"{fk.referenced_table!r}",
                code=ErrorCode.UNKNOWN_REFERENCE,
                extra={"table": table_name, "fk_id": fk.id},
            )

        def _lookup(tbl: Table, names: Tuple[str, ...]) -> Tuple[Column, ...]:
            out = []
            for name in names:
                col = tbl.column(name)
                if col is None:
                    raise DataIntegrityError(
                        f"Column {name!r} not found in table {tbl.name!r}",
                        code=ErrorCode.UNKNOWN_REFERENCE,
                        extra={"table": tbl.name, "column": name, "fk_id": fk.id},
                    )
                out.append(col)
            return tuple(out)

        return _lookup(owner, fk.from_columns), _lookup(target, fk.to_columns)

    def to_dict(self) -> Dict[str, Any]:
        """Plain JSON/YAML-friendly representation."""
        return {name: t.to_dict() for name, t in self.tables.items()}
