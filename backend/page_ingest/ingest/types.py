"""Common ingestion data structures."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from page_ingest.core.errors import ErrorKind
from page_ingest.models.entities import StoredDocument


@dataclass(slots=True)
class FetchedPage:
    """Body of a fetched page and the address it was fetched from."""

    url: str
    status_code: int
    body: str


@dataclass(slots=True)
class RunResult:
    """Outcome of one ingest run."""

    run_id: str
    started_at: datetime
    duration_s: float
    ok: bool
    kind: ErrorKind | None = None
    message: str | None = None
    document: StoredDocument | None = None
    content_chars: int = 0

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "run_id": self.run_id,
            "started_at": self.started_at.isoformat(),
            "duration_s": round(self.duration_s, 3),
            "ok": self.ok,
            "content_chars": self.content_chars,
        }
        if self.kind is not None:
            payload["kind"] = self.kind.value
        if self.message is not None:
            payload["message"] = self.message
        if self.document is not None:
            payload["document_id"] = self.document.id
            payload["url"] = self.document.url
        return payload


__all__ = ["FetchedPage", "RunResult"]
