from __future__ import annotations

from fastapi.testclient import TestClient

from app.main import app
from app.dependencies import get_cache

client = TestClient(app)
path = app.url_path_for("schema_handler")


def _upload(data: bytes, filename: str = "upload.sqlite"):
    return client.post(
        "/api/v1/schema/upload_db",
        files={"file": (filename, data, "application/octet-stream")},
    )


def test_default_schema():
    get_cache().clear()
    resp = client.get(path)
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["db_id"] is None
    assert list(body["tables"]) == ["user", "contacts", "book"]
    assert body["table_count"] == 3
    assert body["column_count"] == 10
    assert body["cached"] is False

    again = client.get(path).json()
    assert again["cached"] is True
    assert again["tables"] == body["tables"]


def test_upload_then_fetch_by_db_id(users_orders_db):
    up = _upload(users_orders_db.read_bytes())
    assert up.status_code == 200, up.text
    db_id = up.json()["db_id"]

    resp = client.get(path, params={"db_id": db_id})
    assert resp.status_code == 200, resp.text
    tables = resp.json()["tables"]
    assert [c["id"] for c in tables["Users"]["columns"]] == [0, 1, 2]
    assert [c["id"] for c in tables["Orders"]["columns"]] == [3, 4]
    assert tables["Orders"]["foreign_keys"] == [
        {"id": 0, "referenced_table": "Users", "from_columns": ["user_id"], "to_columns": ["id"]}
    ]


def test_single_table_endpoint():
    resp = client.get("/api/v1/schema/tables/book")
    assert resp.status_code == 200, resp.text
    body = resp.json()
    assert body["name"] == "book"
    assert [c["affinity"] for c in body["columns"]] == [
        "INTEGER",
        "TEXT",
        "REAL",
        "BLOB",
        "INTEGER",
    ]
    assert len(body["foreign_keys"]) == 2


def test_router_health():
    resp = client.get("/api/v1/schema/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "ok"


def test_upload_rejects_bad_extension():
    resp = _upload(b"whatever", filename="notes.txt")
    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "upload_rejected"


def test_api_key_required_when_configured(monkeypatch):
    from app.settings import get_settings

    monkeypatch.setattr(get_settings(), "api_keys_raw", "secret")
    assert client.get(path).status_code == 401
    assert client.get(path, headers={"X-API-Key": "secret"}).status_code == 200
