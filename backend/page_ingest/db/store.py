"""Table-store boundary and store error translation."""

from __future__ import annotations

import re
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Protocol

# 42P01 comes from Postgres itself, PGRST205 from PostgREST's schema cache.
RELATION_MISSING_CODES = frozenset({"42P01", "PGRST205"})

_MISSING_COLUMN_RE = re.compile(
    r"column \"(?P<quoted>[^\"]+)\"|Could not find the '(?P<cached>[^']+)' column"
)


class StoreFault(str, Enum):
    RELATION_MISSING = "relation_missing"
    COLUMN_MISSING = "column_missing"
    OTHER = "other"


class StoreRequestError(Exception):
    """Error reported by the remote store, or by the transport reaching it."""

    def __init__(
        self,
        message: str,
        code: str | None = None,
        details: str | None = None,
        hint: str | None = None,
        status_code: int | None = None,
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details
        self.hint = hint
        self.status_code = status_code


class TableStore(Protocol):
    def select(self, table: str, limit: int = 1) -> list[dict[str, Any]]: ...

    def insert(self, table: str, record: Mapping[str, Any], returning: bool = True) -> dict[str, Any]: ...

    def delete(self, table: str, filters: Mapping[str, Any]) -> None: ...


def classify_store_error(error: StoreRequestError) -> tuple[StoreFault, str | None]:
    """Map a store error to a fault class and, for column faults, the column name."""
    if error.code in RELATION_MISSING_CODES:
        return StoreFault.RELATION_MISSING, None
    match = _MISSING_COLUMN_RE.search(error.message or "")
    if match:
        return StoreFault.COLUMN_MISSING, match.group("quoted") or match.group("cached")
    return StoreFault.OTHER, None


def create_table_sql(table: str, dim: int) -> str:
    """Render the DDL that creates the documents table."""
    template = Path(__file__).with_name("schema.sql").read_text(encoding="utf-8")
    return template.format(table=table, dim=dim).strip()


def add_column_sql(table: str, column: str, dim: int) -> str:
    column_type = f"vector({dim})" if column == "embedding" else "TEXT"
    return f"ALTER TABLE {table} ADD COLUMN {column} {column_type};"


def resize_vector_sql(table: str, column: str, dim: int) -> str:
    return f"ALTER TABLE {table} ALTER COLUMN {column} TYPE vector({dim});"


__all__ = [
    "RELATION_MISSING_CODES",
    "StoreFault",
    "StoreRequestError",
    "TableStore",
    "add_column_sql",
    "classify_store_error",
    "create_table_sql",
    "resize_vector_sql",
]
