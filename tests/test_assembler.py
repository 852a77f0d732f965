from __future__ import annotations

from typing import Dict, List

import pytest

from adapters.metrics.base import Metrics
from sqlite_parser.assembler import SchemaAssembler
from sqlite_parser.errors.codes import ErrorCode
from sqlite_parser.errors.exceptions import DataIntegrityError, SourceAccessError
from sqlite_parser.types import RawColumn, RawForeignKey, TypeAffinity


class FakeSource:
    """In-memory SchemaSource built from plain tuples."""

    name = "fake"
    dialect = "sqlite"

    def __init__(self, tables: List[str], columns: Dict, fks: Dict | None = None):
        self.tables = tables
        self.columns = columns
        self.fks = fks or {}
        self.calls: List[str] = []

    def list_tables(self) -> List[str]:
        return list(self.tables)

    def table_info(self, table_name: str) -> List[RawColumn]:
        self.calls.append(f"cols:{table_name}")
        return [RawColumn(*row) for row in self.columns.get(table_name, [])]

    def foreign_key_list(self, table_name: str) -> List[RawForeignKey]:
        self.calls.append(f"fks:{table_name}")
        return [RawForeignKey(*row) for row in self.fks.get(table_name, [])]


class RecordingMetrics(Metrics):
    def __init__(self) -> None:
        self.events: List[tuple] = []

    def observe_parse_duration_ms(self, *, dt_ms: float) -> None:
        self.events.append(("duration", dt_ms >= 0))

    def inc_parse_run(self, *, status) -> None:
        self.events.append(("run", status))

    def inc_parse_error(self, *, error_code: str) -> None:
        self.events.append(("error", error_code))

    def add_parsed(self, *, tables: int, columns: int, foreign_keys: int) -> None:
        self.events.append(("parsed", tables, columns, foreign_keys))


def _users_orders() -> FakeSource:
    return FakeSource(
        ["Users", "Orders"],
        {
            "Users": [
                (0, "id", "INTEGER", True, 1),
                (1, "name", "TEXT", False, 0),
                (2, "email", "TEXT", True, 0),
            ],
            "Orders": [
                (0, "id", "INTEGER", False, 1),
                (1, "user_id", "INTEGER", False, 0),
            ],
        },
        {"Orders": [(0, 0, "Users", "user_id", "id")]},
    )


def _assemble(src: FakeSource, metrics: Metrics | None = None):
    return SchemaAssembler(metrics=metrics).assemble(
        src.list_tables(), src.table_info, src.foreign_key_list
    )


def test_users_orders_end_to_end():
    schema = _assemble(_users_orders())

    users = schema.tables["Users"]
    assert [c.id for c in users.columns] == [0, 1, 2]
    uid = users.columns[0]
    assert uid.affinity is TypeAffinity.INTEGER
    assert uid.is_primary_key is True
    assert uid.nullable is False
    assert users.column("name").nullable is True
    assert users.column("email").nullable is False

    orders = schema.tables["Orders"]
    assert [c.id for c in orders.columns] == [3, 4]
    assert len(orders.foreign_keys) == 1
    fk = orders.foreign_keys[0]
    assert fk.referenced_table == "Users"
    assert fk.from_columns == ("user_id",)
    assert fk.to_columns == ("id",)

    assert users.foreign_keys == ()


def test_ids_are_contiguous_across_tables():
    src = FakeSource(
        ["a", "b", "c"],
        {
            "a": [(i, f"a{i}", "INT", False, 0) for i in range(4)],
            "b": [],
            "c": [(i, f"c{i}", "TEXT", False, 0) for i in range(3)],
        },
    )
    schema = _assemble(src)
    ids = [c.id for t in schema.tables.values() for c in t.columns]
    assert ids == list(range(7))


def test_table_order_is_preserved_and_processed_sequentially():
    src = _users_orders()
    src.tables = ["Orders", "Users"]
    schema = _assemble(src)

    assert list(schema.tables) == ["Orders", "Users"]
    assert [c.id for c in schema.tables["Orders"].columns] == [0, 1]
    assert src.calls == ["cols:Orders", "fks:Orders", "cols:Users", "fks:Users"]


def test_reparse_is_structurally_identical():
    assert _assemble(_users_orders()) == _assemble(_users_orders())


def test_duplicate_table_name_is_integrity_error():
    src = _users_orders()
    src.tables = ["Users", "Orders", "Users"]
    with pytest.raises(DataIntegrityError) as ei:
        _assemble(src)
    assert ei.value.code is ErrorCode.DUPLICATE_TABLE


def test_fk_mismatch_aborts_whole_parse():
    src = _users_orders()
    src.fks["Orders"] = [
        (0, 0, "Users", "user_id", "id"),
        (0, 1, "Accounts", "id", "id"),
    ]
    with pytest.raises(DataIntegrityError) as ei:
        _assemble(src)
    assert ei.value.code is ErrorCode.FK_REFERENCED_TABLE_MISMATCH


def test_source_failure_propagates_unchanged():
    src = _users_orders()

    def boom(table_name: str):
        raise SourceAccessError("disk gone", code=ErrorCode.SOURCE_READ_FAILED)

    with pytest.raises(SourceAccessError):
        SchemaAssembler().assemble(src.list_tables(), src.table_info, boom)


def test_metrics_on_success():
    m = RecordingMetrics()
    _assemble(_users_orders(), metrics=m)
    assert ("run", "ok") in m.events
    assert ("parsed", 2, 5, 1) in m.events
    assert ("duration", True) in m.events


def test_metrics_on_failure():
    m = RecordingMetrics()
    src = _users_orders()
    src.tables = ["Users", "Users"]
    with pytest.raises(DataIntegrityError):
        _assemble(src, metrics=m)
    assert m.events == [("error", "DUPLICATE_TABLE"), ("run", "error")]


def test_empty_database_yields_empty_schema():
    schema = _assemble(FakeSource([], {}))
    assert schema.tables == {}
    assert schema.column_count() == 0


def test_failing_table_listing_is_accounted():
    m = RecordingMetrics()
    src = _users_orders()

    def listing():
        raise SourceAccessError("no such file", code=ErrorCode.SOURCE_NOT_FOUND)

    with pytest.raises(SourceAccessError):
        SchemaAssembler(metrics=m).assemble(listing, src.table_info, src.foreign_key_list)
    assert m.events == [("error", "SOURCE_NOT_FOUND"), ("run", "error")]


def test_table_listing_may_be_a_callable():
    src = _users_orders()
    schema = SchemaAssembler().assemble(src.list_tables, src.table_info, src.foreign_key_list)
    assert list(schema.tables) == ["Users", "Orders"]
