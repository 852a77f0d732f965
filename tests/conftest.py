import os
import sqlite3
import tempfile
from pathlib import Path

import pytest

from scripts.make_demo_db import DEMO_DDL

# Isolated locations for the default DB and uploads, set before app import.
_TMP_ROOT = Path(tempfile.mkdtemp(prefix="sqlite_parser_tests_"))
DEFAULT_DB = _TMP_ROOT / "demo.db"

os.environ["DEFAULT_SQLITE_PATH"] = str(DEFAULT_DB)
os.environ["DB_UPLOAD_DIR"] = str(_TMP_ROOT / "uploads")
os.environ["API_KEYS"] = ""
os.environ["APP_ENV"] = "dev"
os.environ.pop("SCHEMA_TABLES_QUERY", None)


def make_db(path: Path, ddl: str) -> Path:
    """Create a SQLite file from a DDL script."""
    conn = sqlite3.connect(str(path))
    try:
        conn.executescript(ddl)
        conn.commit()
    finally:
        conn.close()
    return path


make_db(DEFAULT_DB, DEMO_DDL)


USERS_ORDERS_DDL = """
CREATE TABLE Users (
    id INTEGER PRIMARY KEY,
    name TEXT,
    email TEXT NOT NULL
);
CREATE TABLE Orders (
    id INTEGER PRIMARY KEY,
    user_id INTEGER,
    FOREIGN KEY(user_id) REFERENCES Users(id)
);
"""


@pytest.fixture
def demo_db() -> Path:
    return DEFAULT_DB


@pytest.fixture
def users_orders_db(tmp_path) -> Path:
    return make_db(tmp_path / "users_orders.sqlite", USERS_ORDERS_DDL)


@pytest.fixture
def db_factory(tmp_path):
    counter = {"n": 0}

    def _make(ddl: str) -> Path:
        counter["n"] += 1
        return make_db(tmp_path / f"db_{counter['n']}.sqlite", ddl)

    return _make
