from __future__ import annotations

from typing import Iterable, Tuple

from sqlite_parser.affinity import resolve_affinity
from sqlite_parser.types import Column, RawColumn


class ColumnIdCounter:
    """Schema-wide column id source. Ids start at 0 and are never reused."""

    def __init__(self, start: int = 0) -> None:
        self._next = start

    @property
    def value(self) -> int:
        return self._next

    def next(self) -> int:
        current = self._next
        self._next += 1
        return current


class ColumnAssembler:
    name = "columns"

    def assemble(
        self, raw_columns: Iterable[RawColumn], counter: ColumnIdCounter
    ) -> Tuple[Column, ...]:
        # Source order is kept as-is; ordinals are not re-sorted.
        return tuple(
            Column(
                id=counter.next(),
                name=raw.name,
                affinity=resolve_affinity(raw.declared_type),
                nullable=not raw.not_null,
                is_primary_key=raw.pk_rank != 0,
            )
            for raw in raw_columns
        )
