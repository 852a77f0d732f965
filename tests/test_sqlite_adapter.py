from __future__ import annotations

import pytest

from adapters.db.sqlite_adapter import SQLiteAdapter
from sqlite_parser.errors.codes import ErrorCode
from sqlite_parser.errors.exceptions import SourceAccessError
from sqlite_parser.types import RawColumn


def test_list_tables_in_declaration_order(demo_db):
    assert SQLiteAdapter(str(demo_db)).list_tables() == ["user", "contacts", "book"]


def test_table_info_rows(demo_db):
    cols = SQLiteAdapter(str(demo_db)).table_info("contacts")
    assert cols == [
        RawColumn(ordinal=0, name="contact_id", declared_type="INTEGER", not_null=True, pk_rank=1),
        RawColumn(ordinal=1, name="first_name", declared_type="TEXT", not_null=True, pk_rank=2),
        RawColumn(ordinal=2, name="user_id", declared_type="INTEGER", not_null=False, pk_rank=0),
    ]


def test_integer_primary_key_is_reported_not_null(users_orders_db):
    cols = SQLiteAdapter(str(users_orders_db)).table_info("Orders")
    assert cols[0].name == "id"
    assert cols[0].not_null is True
    assert cols[1].not_null is False


def test_non_integer_single_pk_keeps_pragma_nullability(db_factory):
    db = db_factory("CREATE TABLE t (code TEXT PRIMARY KEY, n INT);")
    cols = SQLiteAdapter(str(db)).table_info("t")
    assert cols[0].pk_rank == 1
    assert cols[0].not_null is False


def test_descending_integer_pk_is_not_a_rowid_alias(db_factory):
    db = db_factory(
        """
        CREATE TABLE t (id INTEGER PRIMARY KEY DESC, v TEXT);
        INSERT INTO t VALUES (NULL, 'a');
        """
    )
    cols = SQLiteAdapter(str(db)).table_info("t")
    assert cols[0].pk_rank == 1
    assert cols[0].not_null is False


def test_without_rowid_pk_keeps_pragma_nullability(db_factory):
    db = db_factory("CREATE TABLE t (id INTEGER PRIMARY KEY, v TEXT) WITHOUT ROWID;")
    cols = SQLiteAdapter(str(db)).table_info("t")
    # WITHOUT ROWID primary keys are NOT NULL, and the pragma already says so
    assert cols[0].not_null is True


def test_ascending_integer_pk_is_a_rowid_alias(db_factory):
    db = db_factory("CREATE TABLE t (id INTEGER PRIMARY KEY ASC, v TEXT);")
    assert SQLiteAdapter(str(db)).table_info("t")[0].not_null is True


def test_untyped_column_has_empty_declared_type(db_factory):
    db = db_factory("CREATE TABLE t (anything);")
    assert SQLiteAdapter(str(db)).table_info("t")[0].declared_type == ""


def test_foreign_key_rows_for_composite_key(demo_db):
    rows = SQLiteAdapter(str(demo_db)).foreign_key_list("book")
    composite = [r for r in rows if r.referenced_table == "contacts"]
    assert sorted((r.seq, r.from_column, r.to_column) for r in composite) == [
        (0, "contact_id", "contact_id"),
        (1, "first_name", "first_name"),
    ]
    assert len({r.fk_id for r in composite}) == 1


def test_implicit_parent_key_is_resolved(db_factory):
    db = db_factory(
        """
        CREATE TABLE parent (a INTEGER, b TEXT, PRIMARY KEY (a, b));
        CREATE TABLE child (x INTEGER, y TEXT, FOREIGN KEY (x, y) REFERENCES parent);
        """
    )
    rows = SQLiteAdapter(str(db)).foreign_key_list("child")
    assert [(r.from_column, r.to_column) for r in sorted(rows, key=lambda r: r.seq)] == [
        ("x", "a"),
        ("y", "b"),
    ]


def test_implicit_key_to_missing_parent_stays_unresolved(db_factory):
    db = db_factory("CREATE TABLE child (x INTEGER REFERENCES ghost);")
    rows = SQLiteAdapter(str(db)).foreign_key_list("child")
    assert rows[0].referenced_table == "ghost"
    assert rows[0].to_column is None


def test_context_manager_reuses_one_connection(demo_db):
    with SQLiteAdapter(str(demo_db)) as src:
        assert src._conn is None
        src.list_tables()
        conn = src._conn
        assert conn is not None
        src.table_info("user")
        src.foreign_key_list("book")
        assert src._conn is conn
    assert src._conn is None


def test_custom_tables_query(demo_db):
    src = SQLiteAdapter(
        str(demo_db),
        tables_query="SELECT name FROM sqlite_master WHERE type='table' ORDER BY name;",
    )
    assert src.list_tables() == ["book", "contacts", "user"]


def test_missing_file_fails_on_first_query_not_on_enter(tmp_path):
    with SQLiteAdapter(str(tmp_path / "nope.sqlite")) as src:
        with pytest.raises(SourceAccessError) as ei:
            src.list_tables()
    assert ei.value.code is ErrorCode.SOURCE_NOT_FOUND


def test_missing_file_is_source_not_found(tmp_path):
    with pytest.raises(SourceAccessError) as ei:
        SQLiteAdapter(str(tmp_path / "nope.sqlite")).list_tables()
    assert ei.value.code is ErrorCode.SOURCE_NOT_FOUND


def test_not_a_database_is_read_failure(tmp_path):
    bogus = tmp_path / "bogus.sqlite"
    bogus.write_bytes(b"this is definitely not a sqlite database file" * 20)
    with pytest.raises(SourceAccessError) as ei:
        SQLiteAdapter(str(bogus)).list_tables()
    assert ei.value.code is ErrorCode.SOURCE_READ_FAILED


def test_connection_is_read_only(demo_db):
    import sqlite3

    with SQLiteAdapter(str(demo_db)) as src:
        src.list_tables()
        with pytest.raises(sqlite3.OperationalError):
            src._conn.execute("CREATE TABLE sneaky (x);")


def test_ping(demo_db, tmp_path):
    SQLiteAdapter(str(demo_db)).ping()
    with pytest.raises(SourceAccessError):
        SQLiteAdapter(str(tmp_path / "missing.db")).ping()
