"""Administrative routes for page-ingest."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from page_ingest.api.dependencies import get_app_settings
from page_ingest.core.config import Settings
from page_ingest.core.metrics import metrics_response
from page_ingest.models.dto import ScheduleResponse

router = APIRouter()


@router.get("/schedule", response_model=ScheduleResponse, summary="Declared run cadence")
async def get_schedule(settings: Settings = Depends(get_app_settings)) -> ScheduleResponse:
    return ScheduleResponse(schedule=settings.schedule, target_url=settings.target_url)


@router.get("/metrics", summary="Prometheus metrics")
async def get_metrics():
    return metrics_response()


__all__ = ["router"]
