"""Failure taxonomy shared by the validator, runner and entry points."""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    SCHEMA_MISSING = "schema_missing"
    SCHEMA_INCOMPLETE = "schema_incomplete"
    STORE_ERROR = "store_error"
    FETCH_ERROR = "fetch_error"


class IngestError(Exception):
    """A classified failure that aborts the current run."""

    def __init__(self, kind: ErrorKind, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.message = message

    def __repr__(self) -> str:
        return f"IngestError(kind={self.kind.value!r}, message={self.message!r})"


__all__ = ["ErrorKind", "IngestError"]
