"""Placeholder embedding utilities."""

from __future__ import annotations

from page_ingest.models.entities import EMBEDDING_DIM


class PlaceholderEmbedder:
    """Fixed-value vectors standing in for a real embedding model.

    Every text maps to the same vector, so nothing stored with it is
    searchable by similarity.
    """

    def __init__(self, dim: int = EMBEDDING_DIM, fill_value: float = 0.1) -> None:
        if fill_value < 0:
            raise ValueError("fill_value must be non-negative")
        self.dim = dim
        self.fill_value = fill_value

    def embed(self, text: str) -> list[float]:
        return [self.fill_value] * self.dim


def sentinel_vector(dim: int = EMBEDDING_DIM) -> list[float]:
    """All-zero vector used for disposable sentinel rows."""
    return [0.0] * dim


__all__ = ["PlaceholderEmbedder", "sentinel_vector"]
