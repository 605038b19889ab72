"""Shared FastAPI dependencies."""

from __future__ import annotations

from functools import lru_cache

from page_ingest.core.config import Settings, get_settings
from page_ingest.core.errors import ErrorKind, IngestError
from page_ingest.db.postgrest import PostgrestStore
from page_ingest.ingest.runner import IngestRunner

_STORE: PostgrestStore | None = None
_RUNNER: IngestRunner | None = None


@lru_cache(maxsize=1)
def get_app_settings() -> Settings:
    return get_settings()


def get_store() -> PostgrestStore:
    global _STORE
    if _STORE is None:
        settings = get_app_settings()
        if not settings.store_url:
            raise IngestError(
                ErrorKind.STORE_ERROR,
                "Store URL is not configured; set PGI_STORE_URL or SUPABASE_URL",
            )
        _STORE = PostgrestStore(
            settings.store_url,
            settings.store_key,
            timeout=settings.request_timeout,
        )
    return _STORE


def get_runner() -> IngestRunner:
    global _RUNNER
    if _RUNNER is None:
        _RUNNER = IngestRunner(store=get_store(), settings=get_app_settings())
    return _RUNNER


__all__ = [
    "get_app_settings",
    "get_runner",
    "get_store",
]
