"""PostgREST (Supabase) table access over HTTP."""

from __future__ import annotations

import threading
from typing import Any, Mapping

import requests

from page_ingest.db.store import StoreRequestError

REST_PATH = "/rest/v1"


class PostgrestStore:
    """Thin wrapper around a PostgREST endpoint providing pragmatic defaults.

    Each calling thread gets its own ``requests.Session``, so one store can
    serve overlapping runs from a threadpool. A session passed in is used
    as-is by every thread.
    """

    def __init__(
        self,
        base_url: str,
        api_key: str,
        timeout: float = 30.0,
        session: requests.Session | None = None,
    ) -> None:
        if not base_url:
            raise ValueError("base_url is required")
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self._shared_session = session
        self._local = threading.local()
        self._sessions: list[requests.Session] = []
        self._lock = threading.Lock()

    @property
    def session(self) -> requests.Session:
        if self._shared_session is not None:
            return self._shared_session
        session = getattr(self._local, "session", None)
        if session is None:
            session = requests.Session()
            session.headers.update(
                {
                    "apikey": self.api_key,
                    "Authorization": f"Bearer {self.api_key}",
                    "Accept": "application/json",
                }
            )
            self._local.session = session
            with self._lock:
                self._sessions.append(session)
        return session

    def close(self) -> None:
        with self._lock:
            sessions, self._sessions = self._sessions, []
        for session in sessions:
            session.close()
        self._local = threading.local()
        if self._shared_session is not None:
            self._shared_session.close()
            self._shared_session = None

    def __enter__(self) -> "PostgrestStore":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def select(self, table: str, limit: int = 1) -> list[dict[str, Any]]:
        return self._request("GET", table, params={"select": "*", "limit": str(limit)})

    def insert(self, table: str, record: Mapping[str, Any], returning: bool = True) -> dict[str, Any]:
        """Insert one row; with ``returning=False`` the store is not asked to read it back."""
        prefer = "return=representation" if returning else "return=minimal"
        rows = self._request("POST", table, json=dict(record), prefer=prefer)
        return rows[0] if rows else {}

    def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        if not filters:
            raise ValueError("delete requires at least one filter")
        params = {column: f"eq.{value}" for column, value in filters.items()}
        self._request("DELETE", table, params=params, prefer="return=minimal")

    def _request(
        self,
        method: str,
        table: str,
        params: Mapping[str, str] | None = None,
        json: Any = None,
        prefer: str | None = None,
    ) -> list[dict[str, Any]]:
        url = f"{self.base_url}{REST_PATH}/{table}"
        headers = {"Prefer": prefer} if prefer else None
        try:
            resp = self.session.request(
                method,
                url,
                params=params,
                json=json,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise StoreRequestError(str(exc)) from exc
        if not resp.ok:
            raise _error_from_response(resp)
        if resp.status_code == 204 or not resp.content:
            return []
        payload = resp.json()
        if isinstance(payload, dict):
            return [payload]
        return list(payload)


def _error_from_response(resp: requests.Response) -> StoreRequestError:
    try:
        body = resp.json()
    except ValueError:
        body = {}
    if not isinstance(body, dict):
        body = {}
    message = body.get("message") or resp.text or f"HTTP {resp.status_code}"
    return StoreRequestError(
        message,
        code=body.get("code"),
        details=body.get("details"),
        hint=body.get("hint"),
        status_code=resp.status_code,
    )


__all__ = ["PostgrestStore", "REST_PATH"]
