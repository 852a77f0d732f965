from typing import List, Optional, Dict

from pydantic import BaseModel, ConfigDict, Field


class ColumnModel(BaseModel):
    id: int
    name: str
    affinity: str
    nullable: bool
    is_primary_key: bool


class ForeignKeyModel(BaseModel):
    id: int
    referenced_table: str
    from_columns: List[str]
    to_columns: List[str]


class TableModel(BaseModel):
    name: str
    columns: List[ColumnModel] = Field(default_factory=list)
    foreign_keys: List[ForeignKeyModel] = Field(default_factory=list)


class SchemaResponse(BaseModel):
    db_id: Optional[str] = None
    tables: Dict[str, TableModel] = Field(default_factory=dict)
    table_count: int = 0
    column_count: int = 0
    cached: bool = False


class UploadResponse(BaseModel):
    db_id: str


class TablesQueryRequest(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sql: str
