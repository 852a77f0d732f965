from fastapi import APIRouter

from app.schemas import TablesQueryRequest
from sqlite_parser.tables_query import check_tables_query

router = APIRouter(prefix="/_dev", tags=["dev"])


@router.post("/tables_query")
def dev_tables_query_check(body: TablesQueryRequest):
    """
    Run the tables-query guard directly on a raw SQL string.
    Rejections surface through the standard error contract (400).
    """
    return {"ok": True, "sql": check_tables_query(body.sql)}
