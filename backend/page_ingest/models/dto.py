"""Pydantic DTOs exposed via API."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel


class RunResponse(BaseModel):
    success: bool = True
    run_id: str
    started_at: datetime
    duration_s: float
    content_chars: int
    document_id: int | None = None
    url: str | None = None


class ErrorResponse(BaseModel):
    error: str
    kind: str | None = None
    run_id: str | None = None


class ScheduleResponse(BaseModel):
    schedule: str
    target_url: str


__all__ = [
    "ErrorResponse",
    "RunResponse",
    "ScheduleResponse",
]
