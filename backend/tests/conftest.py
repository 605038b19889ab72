"""Test fixtures for page-ingest."""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Mapping

import pytest

BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))

from page_ingest.core.config import Settings  # noqa: E402
from page_ingest.db.store import StoreRequestError  # noqa: E402
from page_ingest.ingest.types import FetchedPage  # noqa: E402


class MemoryStore:
    """In-memory stand-in for the remote table store.

    ``columns`` limits which keys an insert may carry; anything else fails the
    way Postgres reports an unknown column. ``errors`` maps an operation name
    to the StoreRequestError it should raise.
    """

    def __init__(
        self,
        rows: list[dict[str, Any]] | None = None,
        columns: set[str] | None = None,
        table_exists: bool = True,
        errors: Mapping[str, StoreRequestError] | None = None,
    ) -> None:
        self.rows = [dict(row) for row in rows or []]
        self.columns = columns
        self.table_exists = table_exists
        self.errors = dict(errors or {})
        self.calls: list[tuple[str, str]] = []
        self.returning: list[bool] = []
        self._next_id = len(self.rows) + 1

    def select(self, table: str, limit: int = 1) -> list[dict[str, Any]]:
        self.calls.append(("select", table))
        self._check("select", table)
        return [dict(row) for row in self.rows[:limit]]

    def insert(self, table: str, record: Mapping[str, Any], returning: bool = True) -> dict[str, Any]:
        self.calls.append(("insert", table))
        self.returning.append(returning)
        self._check("insert", table)
        if self.columns is not None:
            for column in record:
                if column not in self.columns:
                    raise StoreRequestError(
                        f'column "{column}" of relation "{table}" does not exist',
                        code="42703",
                    )
        row = {
            "id": self._next_id,
            **record,
            "created_at": datetime.now(timezone.utc).isoformat(),
        }
        self._next_id += 1
        self.rows.append(row)
        return dict(row) if returning else {}

    def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        self.calls.append(("delete", table))
        self._check("delete", table)
        self.rows = [
            row for row in self.rows if not all(row.get(key) == value for key, value in filters.items())
        ]

    def _check(self, operation: str, table: str) -> None:
        if not self.table_exists:
            raise StoreRequestError(f'relation "public.{table}" does not exist', code="42P01")
        if operation in self.errors:
            raise self.errors[operation]

    @property
    def operations(self) -> list[str]:
        return [op for op, _ in self.calls]


class StaticFetcher:
    """Fetcher returning a fixed body and recording requested URLs."""

    def __init__(self, body: str = "<html><body>hello</body></html>") -> None:
        self.body = body
        self.requested: list[str] = []

    def __call__(self, url: str) -> FetchedPage:
        self.requested.append(url)
        return FetchedPage(url=url, status_code=200, body=self.body)


@pytest.fixture(autouse=True)
def reset_state(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    """Reset global singletons and environment between tests."""
    for name in ("SUPABASE_URL", "SUPABASE_KEY", "PGI_HOST"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("PGI_CONFIG", str(tmp_path / "missing.yaml"))
    monkeypatch.setenv("PGI_STORE_URL", "https://store.invalid")
    monkeypatch.setenv("PGI_STORE_KEY", "test-key")

    from page_ingest.api import dependencies as deps
    from page_ingest.core import config

    root_handlers = list(logging.getLogger().handlers)

    def _clear() -> None:
        config.get_settings.cache_clear()
        deps.get_app_settings.cache_clear()
        deps._STORE = None
        deps._RUNNER = None

    _clear()
    yield
    _clear()
    logging.getLogger().handlers = root_handlers


@pytest.fixture
def settings() -> Settings:
    return Settings(target_url="https://example.com/page", store_url="https://store.invalid")


@pytest.fixture
def memory_store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def fetcher() -> StaticFetcher:
    return StaticFetcher()
