"""
Create the demo SQLite DB used as the service default (data/demo.db).

The schema covers the interesting cases: a self-referencing key, a
composite primary key, and a composite foreign key.
"""

import sqlite3
import sys
from pathlib import Path

DEFAULT_PATH = Path(__file__).resolve().parents[1] / "data" / "demo.db"

DEMO_DDL = """
CREATE TABLE user (
    user_id INTEGER NOT NULL PRIMARY KEY,
    parent_id INTEGER,
    FOREIGN KEY(parent_id) REFERENCES user(user_id)
);

CREATE TABLE contacts (
    contact_id INTEGER NOT NULL,
    first_name TEXT NOT NULL,
    user_id INTEGER,
    FOREIGN KEY(user_id) REFERENCES user(user_id),
    PRIMARY KEY (contact_id, first_name)
);

CREATE TABLE book (
    contact_id INTEGER NOT NULL,
    first_name TEXT NOT NULL,
    real REAL NOT NULL,
    blob BLOB NOT NULL,
    user_id INTEGER,
    FOREIGN KEY(contact_id, first_name) REFERENCES contacts(contact_id, first_name),
    FOREIGN KEY(user_id) REFERENCES user(user_id),
    PRIMARY KEY (contact_id, first_name)
);
"""


def ensure_demo_db(path: Path) -> None:
    """Create demo SQLite DB if missing."""
    if path.exists():
        print(f"✅ Demo DB already exists at {path}")
        return

    path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(path)
    try:
        conn.executescript(DEMO_DDL)
        conn.commit()
    finally:
        conn.close()
    print(f"✅ Demo DB created at {path}")


if __name__ == "__main__":
    ensure_demo_db(Path(sys.argv[1]) if len(sys.argv) > 1 else DEFAULT_PATH)
