from __future__ import annotations

from typing import Optional

from sqlite_parser.types import TypeAffinity

# Ordered rules; the first substring hit wins (https://sqlite.org/datatype3.html 3.1).
_TEXT_MARKERS = ("CHAR", "CLOB", "TEXT")
_REAL_MARKERS = ("REAL", "FLOA", "DOUB")


def resolve_affinity(declared_type: Optional[str]) -> TypeAffinity:
    """
    Map a declared column type to its SQLite affinity.

    Total: every input, including an empty or missing type, yields a value.
    """
    text = (declared_type or "").upper()

    if "INT" in text:
        return TypeAffinity.INTEGER
    if any(m in text for m in _TEXT_MARKERS):
        return TypeAffinity.TEXT
    if "BLOB" in text or not text:
        return TypeAffinity.BLOB
    if any(m in text for m in _REAL_MARKERS):
        return TypeAffinity.REAL
    return TypeAffinity.NUMERIC
