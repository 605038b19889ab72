"""Internal dataclasses representing persisted entities."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Mapping

EMBEDDING_DIM = 384
MAX_CONTENT_CHARS = 2000


@dataclass(slots=True)
class DocumentRecord:
    """A row as written by the client; id and created_at are left to the store."""

    content: str
    embedding: list[float]
    url: str | None
    dim: int = field(default=EMBEDDING_DIM, repr=False)
    max_chars: int = field(default=MAX_CONTENT_CHARS, repr=False)

    def __post_init__(self) -> None:
        if not self.content:
            raise ValueError("content must not be empty")
        if len(self.content) > self.max_chars:
            raise ValueError(f"content exceeds {self.max_chars} characters")
        if len(self.embedding) != self.dim:
            raise ValueError(f"embedding must have {self.dim} elements, got {len(self.embedding)}")
        if any(value < 0 for value in self.embedding):
            raise ValueError("embedding elements must be non-negative")

    def to_payload(self) -> dict[str, Any]:
        return {"content": self.content, "embedding": list(self.embedding), "url": self.url}


@dataclass(slots=True)
class StoredDocument:
    id: int | None
    content: str
    url: str | None
    created_at: datetime | None

    @classmethod
    def from_row(cls, row: Mapping[str, Any]) -> "StoredDocument":
        created = row.get("created_at")
        if isinstance(created, str):
            created = datetime.fromisoformat(created)
        return cls(
            id=row.get("id"),
            content=row.get("content", ""),
            url=row.get("url"),
            created_at=created,
        )
