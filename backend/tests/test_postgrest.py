"""Tests for the PostgREST store adapter."""

from __future__ import annotations

import json
import threading

import pytest
import requests

from page_ingest.core.config import Settings
from page_ingest.db.postgrest import PostgrestStore
from page_ingest.db.store import StoreFault, StoreRequestError, classify_store_error
from page_ingest.ingest.runner import IngestRunner
from page_ingest.ingest.types import FetchedPage


def _response(status: int, payload=None, text: str | None = None) -> requests.Response:
    resp = requests.Response()
    resp.status_code = status
    resp.url = "https://store.invalid/rest/v1/documents"
    resp.encoding = "utf-8"
    if payload is not None:
        resp._content = json.dumps(payload).encode("utf-8")
        resp.headers["Content-Type"] = "application/json"
    else:
        resp._content = (text or "").encode("utf-8")
    return resp


class FakeSession:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.calls: list[dict] = []

    def request(self, method, url, **kwargs):
        self.calls.append({"method": method, "url": url, **kwargs})
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self) -> None:
        pass


def _store(session: FakeSession) -> PostgrestStore:
    return PostgrestStore("https://store.invalid/", "key", timeout=7, session=session)


def test_select_limits_rows() -> None:
    session = FakeSession(_response(200, [{"id": 1, "content": "x"}]))
    rows = _store(session).select("documents", limit=1)
    assert rows == [{"id": 1, "content": "x"}]
    call = session.calls[0]
    assert call["method"] == "GET"
    assert call["url"] == "https://store.invalid/rest/v1/documents"
    assert call["params"] == {"select": "*", "limit": "1"}
    assert call["timeout"] == 7


def test_insert_returns_representation() -> None:
    session = FakeSession(_response(201, [{"id": 9, "content": "hello", "url": "https://a"}]))
    row = _store(session).insert("documents", {"content": "hello", "url": "https://a"})
    assert row["id"] == 9
    call = session.calls[0]
    assert call["method"] == "POST"
    assert call["json"] == {"content": "hello", "url": "https://a"}
    assert call["headers"] == {"Prefer": "return=representation"}


def test_insert_without_returning_asks_for_minimal() -> None:
    session = FakeSession(_response(201))
    row = _store(session).insert("documents", {"content": "hello"}, returning=False)
    assert row == {}
    assert session.calls[0]["headers"] == {"Prefer": "return=minimal"}


def test_run_insert_succeeds_when_select_back_is_forbidden() -> None:
    existing = {"id": 1, "content": "old", "embedding": "[0.1]", "url": "https://old"}

    class SelectForbiddingSession(FakeSession):
        def request(self, method, url, **kwargs):
            headers = kwargs.get("headers") or {}
            if method == "POST" and headers.get("Prefer") == "return=representation":
                self.calls.append({"method": method, "url": url, **kwargs})
                return _response(401, {"code": "42501", "message": "new row violates row-level security policy"})
            return super().request(method, url, **kwargs)

    session = SelectForbiddingSession(_response(200, [existing]), _response(201))
    settings = Settings(target_url="https://example.com/page", store_url="https://store.invalid", embedding_dim=1)
    runner = IngestRunner(_store(session), settings, fetcher=lambda url: FetchedPage(url, 200, "<body>hi</body>"))

    result = runner.run()

    assert result.ok, result.message
    assert [(c["method"], c["headers"]) for c in session.calls] == [
        ("GET", None),
        ("POST", {"Prefer": "return=minimal"}),
    ]


def test_delete_uses_equality_filter() -> None:
    session = FakeSession(_response(204))
    _store(session).delete("documents", {"url": "http://test.com"})
    call = session.calls[0]
    assert call["method"] == "DELETE"
    assert call["params"] == {"url": "eq.http://test.com"}


def test_delete_without_filter_is_refused() -> None:
    with pytest.raises(ValueError):
        _store(FakeSession()).delete("documents", {})


def test_error_body_is_parsed() -> None:
    body = {"code": "42P01", "message": 'relation "public.documents" does not exist', "details": None, "hint": None}
    session = FakeSession(_response(404, body))
    with pytest.raises(StoreRequestError) as excinfo:
        _store(session).select("documents")
    assert excinfo.value.code == "42P01"
    assert excinfo.value.status_code == 404
    assert classify_store_error(excinfo.value) == (StoreFault.RELATION_MISSING, None)


def test_non_json_error_keeps_text() -> None:
    session = FakeSession(_response(502, text="Bad Gateway"))
    with pytest.raises(StoreRequestError) as excinfo:
        _store(session).select("documents")
    assert excinfo.value.message == "Bad Gateway"
    assert excinfo.value.code is None


def test_transport_error_is_store_error() -> None:
    session = FakeSession(requests.ConnectionError("connection refused"))
    with pytest.raises(StoreRequestError, match="connection refused"):
        _store(session).select("documents")


def test_classify_column_errors() -> None:
    pg = StoreRequestError('column "url" of relation "documents" does not exist', code="42703")
    cache = StoreRequestError("Could not find the 'content' column of 'documents' in the schema cache", code="PGRST204")
    other = StoreRequestError("duplicate key value violates unique constraint", code="23505")
    assert classify_store_error(pg) == (StoreFault.COLUMN_MISSING, "url")
    assert classify_store_error(cache) == (StoreFault.COLUMN_MISSING, "content")
    assert classify_store_error(other) == (StoreFault.OTHER, None)


def test_default_session_carries_credentials() -> None:
    store = PostgrestStore("https://store.invalid", "secret")
    try:
        assert store.session.headers["apikey"] == "secret"
        assert store.session.headers["Authorization"] == "Bearer secret"
    finally:
        store.close()


def test_each_thread_gets_its_own_session() -> None:
    store = PostgrestStore("https://store.invalid", "secret")
    seen: list[requests.Session] = []
    worker = threading.Thread(target=lambda: seen.append(store.session))
    try:
        main_session = store.session
        worker.start()
        worker.join()
        assert store.session is main_session
        assert seen[0] is not main_session
        assert seen[0].headers["apikey"] == "secret"
    finally:
        store.close()
