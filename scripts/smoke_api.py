"""Portable smoke requests for the SQLite Schema Parser API.

- Ensures a demo SQLite DB exists under /tmp/sqlite_parser_dbs/smoke_demo.sqlite
- Uploads it to the API
- Fetches the parsed schema and one table, checks the error contract
- Exits non-zero on failure (so Make/CI can trust it)

Env:
  API_BASE: base URL of API (default: http://127.0.0.1:8000)
  API_KEY:  API key header value (default: dev-key)
"""

from __future__ import annotations

import json
import os
import sys
import time
from pathlib import Path

import requests

from make_demo_db import ensure_demo_db  # type: ignore


API_BASE = os.getenv("API_BASE", "http://127.0.0.1:8000").rstrip("/")
API_KEY = os.getenv("API_KEY", "dev-key")
TIMEOUT_S = float(os.getenv("SMOKE_TIMEOUT", "30"))

DB_DIR = Path("/tmp/sqlite_parser_dbs")
DB_PATH = DB_DIR / "smoke_demo.sqlite"


def _upload_db_and_get_id(path: Path) -> str:
    url = f"{API_BASE}/api/v1/schema/upload_db"
    headers = {"X-API-Key": API_KEY}
    with path.open("rb") as f:
        resp = requests.post(
            url, headers=headers, files={"file": (path.name, f)}, timeout=TIMEOUT_S
        )
    if resp.status_code != 200:
        raise RuntimeError(f"Upload failed: {resp.status_code} {resp.text[:400]}")
    data = resp.json()
    db_id = data.get("db_id")
    if not db_id:
        raise RuntimeError(f"Invalid upload response: {data}")
    return str(db_id)


def _get(path: str, **params) -> dict:
    t0 = time.time()
    resp = requests.get(
        f"{API_BASE}{path}",
        headers={"X-API-Key": API_KEY},
        params=params,
        timeout=TIMEOUT_S,
    )
    dt_ms = int(round((time.time() - t0) * 1000))
    try:
        body = resp.json()
    except ValueError:
        body = {"raw": resp.text}
    return {"status": resp.status_code, "latency_ms": dt_ms, "body": body}


def main() -> int:
    ensure_demo_db(DB_PATH)
    db_id = _upload_db_and_get_id(DB_PATH)
    print(f"✅ Uploaded DB, got db_id={db_id}")

    failures = 0

    schema = _get("/api/v1/schema", db_id=db_id)
    tables = schema["body"].get("tables", {})
    if schema["status"] != 200 or set(tables) != {"user", "contacts", "book"}:
        failures += 1
        print(f"❌ schema ({schema['status']}): {json.dumps(schema['body'])[:400]}")
    else:
        print(f"✅ schema: {len(tables)} tables — {schema['latency_ms']} ms")

    book = _get("/api/v1/schema/tables/book", db_id=db_id)
    fks = book["body"].get("foreign_keys", [])
    composite = [fk for fk in fks if len(fk.get("from_columns", [])) == 2]
    if book["status"] != 200 or not composite:
        failures += 1
        print(f"❌ table book ({book['status']}): {json.dumps(book['body'])[:400]}")
    else:
        print(f"✅ table book: composite fk -> {composite[0]['referenced_table']}")

    missing = _get("/api/v1/schema", db_id="does-not-exist")
    code = (missing["body"].get("error") or {}).get("code")
    if missing["status"] != 404 or code != "db_not_found":
        failures += 1
        print(f"❌ unknown db_id ({missing['status']}): {code}")
    else:
        print("✅ unknown db_id → 404 db_not_found")

    if failures:
        print(f"⚠️  {failures} smoke check(s) failed.")
        return 1
    print("🎉 Smoke tests completed successfully.")
    return 0


if __name__ == "__main__":
    sys.exit(main())
