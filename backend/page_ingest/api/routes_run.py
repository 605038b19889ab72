"""Run API routes."""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from page_ingest.api.dependencies import get_runner
from page_ingest.ingest.runner import IngestRunner
from page_ingest.models.dto import ErrorResponse, RunResponse

router = APIRouter()


@router.api_route(
    "",
    methods=["GET", "POST"],
    response_model=RunResponse,
    responses={500: {"model": ErrorResponse}},
    summary="Run one ingest",
)
def trigger_run(runner: IngestRunner = Depends(get_runner)):
    result = runner.run()
    if not result.ok:
        body = ErrorResponse(
            error=result.message or "ingest failed",
            kind=result.kind.value if result.kind else None,
            run_id=result.run_id,
        )
        return JSONResponse(status_code=500, content=body.model_dump())
    return RunResponse(
        run_id=result.run_id,
        started_at=result.started_at,
        duration_s=result.duration_s,
        content_chars=result.content_chars,
        document_id=result.document.id if result.document else None,
        url=result.document.url if result.document else None,
    )


__all__ = ["router"]
