"""Existence and shape checks for the remote documents table.

The store offers no metadata query, so the checks are made with ordinary
reads and writes:

* a one-row select tells whether the table exists;
* if rows come back, the first row's keys are compared with the required
  columns and its embedding length with the configured dimension;
* if the table is empty, a sentinel row is inserted so the store reports any
  missing column, and the sentinel is deleted again.

The sentinel insert and its cleanup are not transactional. When the delete
fails the sentinel row stays behind and the failure is reported as a store
error.
"""

from __future__ import annotations

from page_ingest.core.errors import ErrorKind, IngestError
from page_ingest.core.logging import get_logger
from page_ingest.db.store import (
    StoreFault,
    StoreRequestError,
    TableStore,
    add_column_sql,
    classify_store_error,
    create_table_sql,
    resize_vector_sql,
)
from page_ingest.ingest.embeddings import sentinel_vector
from page_ingest.models.entities import EMBEDDING_DIM

logger = get_logger(__name__)

REQUIRED_COLUMNS = ("content", "embedding", "url")
SENTINEL_URL = "http://test.com"
SENTINEL_CONTENT = "test"


class SchemaValidator:
    """Fail fast, with remediation SQL, when the documents table is unusable."""

    def __init__(self, store: TableStore, table: str = "documents", dim: int = EMBEDDING_DIM) -> None:
        self.store = store
        self.table = table
        self.dim = dim

    def validate_schema(self) -> None:
        try:
            rows = self.store.select(self.table, limit=1)
        except StoreRequestError as exc:
            fault, _ = classify_store_error(exc)
            if fault is StoreFault.RELATION_MISSING:
                raise IngestError(
                    ErrorKind.SCHEMA_MISSING,
                    f"Table '{self.table}' doesn't exist. Run this SQL:\n"
                    f"{create_table_sql(self.table, self.dim)}",
                ) from exc
            raise IngestError(ErrorKind.STORE_ERROR, exc.message) from exc

        if not rows:
            self._check_empty_table()
        else:
            self._check_row_columns(rows[0])
        logger.info("Schema of table %s verified", self.table)

    def _check_empty_table(self) -> None:
        logger.info("Table %s is empty; verifying columns with a sentinel row", self.table)
        sentinel = {
            "content": SENTINEL_CONTENT,
            "embedding": sentinel_vector(self.dim),
            "url": SENTINEL_URL,
        }
        try:
            self.store.insert(self.table, sentinel)
        except StoreRequestError as exc:
            fault, column = classify_store_error(exc)
            if fault is StoreFault.COLUMN_MISSING and column:
                raise IngestError(
                    ErrorKind.SCHEMA_INCOMPLETE,
                    f"Missing column: {column}. Run:\n{add_column_sql(self.table, column, self.dim)}",
                ) from exc
            raise IngestError(ErrorKind.STORE_ERROR, exc.message) from exc

        try:
            self.store.delete(self.table, {"url": SENTINEL_URL})
        except StoreRequestError as exc:
            logger.error("Sentinel row in %s could not be removed: %s", self.table, exc.message)
            raise IngestError(ErrorKind.STORE_ERROR, exc.message) from exc

    def _check_row_columns(self, row: dict) -> None:
        missing = [column for column in REQUIRED_COLUMNS if column not in row]
        if missing:
            statements = "\n".join(add_column_sql(self.table, column, self.dim) for column in missing)
            raise IngestError(
                ErrorKind.SCHEMA_INCOMPLETE,
                f"Missing columns: {', '.join(missing)}. Run:\n{statements}",
            )
        found = _vector_length(row["embedding"])
        if found is not None and found != self.dim:
            raise IngestError(
                ErrorKind.SCHEMA_INCOMPLETE,
                f"Column embedding holds {found}-dimensional vectors, expected {self.dim}. Run:\n"
                f"{resize_vector_sql(self.table, 'embedding', self.dim)}",
            )


def _vector_length(value: object) -> int | None:
    """Length of a stored vector; PostgREST returns pgvector values as ``"[a,b,...]"``."""
    if isinstance(value, (list, tuple)):
        return len(value)
    if isinstance(value, str):
        inner = value.strip()
        if not (inner.startswith("[") and inner.endswith("]")):
            return None
        inner = inner[1:-1].strip()
        return len(inner.split(",")) if inner else 0
    return None


__all__ = ["REQUIRED_COLUMNS", "SENTINEL_URL", "SchemaValidator"]
