from __future__ import annotations

from typing import Dict, Iterable, List, Tuple

from sqlite_parser.errors.codes import ErrorCode
from sqlite_parser.errors.exceptions import DataIntegrityError
from sqlite_parser.types import ForeignKey, RawForeignKey


class ForeignKeyAssembler:
    """
    Rebuild (possibly composite) foreign keys from row-per-column fk rows.

    SQLite reports one row per column pair; rows of one constraint share an
    ``fk_id`` and are positioned by ``seq``.
    """

    name = "foreign_keys"

    def __init__(self, table_name: str = "") -> None:
        self.table_name = table_name

    def _fail(self, message: str, code: ErrorCode, **extra) -> DataIntegrityError:
        return DataIntegrityError(
            message,
            code=code,
            extra={"table": self.table_name, **extra},
        )

    def _build(self, fk_id: int, rows: List[RawForeignKey]) -> ForeignKey:
        if not rows:
            raise self._fail(
                f"Foreign key {fk_id} has no columns",
                ErrorCode.FK_EMPTY_COLUMNS,
                fk_id=fk_id,
            )

        referenced = {r.referenced_table for r in rows}
        if len(referenced) != 1:
            raise self._fail(
                f"Foreign key {fk_id} references more than one table: "
                f"{sorted(referenced)}",
                ErrorCode.FK_REFERENCED_TABLE_MISMATCH,
                fk_id=fk_id,
            )

        ordered = sorted(rows, key=lambda r: r.seq)
        seqs = [r.seq for r in ordered]
        if len(set(seqs)) != len(seqs):
            raise self._fail(
                f"Foreign key {fk_id} repeats a sequence number: {seqs}",
                ErrorCode.FK_DUPLICATE_SEQ,
                fk_id=fk_id,
            )

        for r in ordered:
            if not r.from_column or not r.to_column:
                raise self._fail(
                    f"Foreign key {fk_id} (seq {r.seq}) has an unresolved column: "
                    f"{r.from_column!r} -> {r.to_column!r}",
                    ErrorCode.FK_UNRESOLVED_COLUMN,
                    fk_id=fk_id,
                    seq=r.seq,
                )

        return ForeignKey(
            id=fk_id,
            referenced_table=ordered[0].referenced_table,
            from_columns=tuple(r.from_column for r in ordered),  # type: ignore[misc]
            to_columns=tuple(r.to_column for r in ordered),  # type: ignore[misc]
        )

    def assemble(self, raw_fk_rows: Iterable[RawForeignKey]) -> Tuple[ForeignKey, ...]:
        # dict keeps first-seen order of fk ids
        groups: Dict[int, List[RawForeignKey]] = {}
        for row in raw_fk_rows:
            groups.setdefault(row.fk_id, []).append(row)

        return tuple(self._build(fk_id, rows) for fk_id, rows in groups.items())
