from typing import List, Protocol

from sqlite_parser.types import RawColumn, RawForeignKey


class SchemaSource(Protocol):
    """Read-only provider of raw schema-introspection rows."""

    name: str
    dialect: str

    def list_tables(self) -> List[str]:
        """Table names in the order the database reports them."""

    def table_info(self, table_name: str) -> List[RawColumn]:
        """Column descriptors of one table, in ordinal order."""

    def foreign_key_list(self, table_name: str) -> List[RawForeignKey]:
        """Foreign-key rows of one table, one row per column pair."""
