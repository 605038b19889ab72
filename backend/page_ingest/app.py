"""FastAPI application setup for page-ingest."""

from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from page_ingest.api.routes_admin import router as admin_router
from page_ingest.api.routes_run import router as run_router
from page_ingest.core.errors import IngestError
from page_ingest.core.logging import configure_logging, get_logger
from page_ingest.models.dto import ErrorResponse

configure_logging()
logger = get_logger(__name__)

app = FastAPI(
    title="page-ingest",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

app.include_router(run_router, prefix="/run", tags=["run"])
app.include_router(admin_router, prefix="", tags=["admin"])


@app.exception_handler(IngestError)
async def ingest_error_handler(request: Request, exc: IngestError) -> JSONResponse:
    logger.error("Request to %s failed (%s): %s", request.url.path, exc.kind.value, exc.message)
    body = ErrorResponse(error=exc.message, kind=exc.kind.value)
    return JSONResponse(status_code=500, content=body.model_dump())


@app.get("/health", tags=["admin"])
def health() -> dict[str, bool]:
    """Simple liveness check."""
    return {"ok": True}
