"""Growth OS — Dashboard Metrics API Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from growthos.config import settings
from growthos.core.logging import get_logger
from growthos.models.metrics_models import DashboardMetrics
from growthos.services.metrics_store import MetricsService, get_metrics_service

logger = get_logger("api.metrics")

router = APIRouter(prefix="/api/metrics", tags=["Metrics"])


@router.get("")
async def get_metrics(
    client_id: Optional[str] = Query(None),
    service: MetricsService = Depends(get_metrics_service),
):
    """Headline dashboard metrics; defaults when none are saved."""
    return service.load(client_id or settings.default_client_id).model_dump(mode="json")


@router.post("")
async def save_metrics(
    data: DashboardMetrics,
    client_id: Optional[str] = Query(None),
    service: MetricsService = Depends(get_metrics_service),
):
    """Save headline metrics.

    Answers 202 when the database refused the write; the metrics are then
    held in the write-ahead cache until the next sync.
    """
    view = service.save(client_id or settings.default_client_id, data)
    body = view.model_dump(mode="json")
    if view.save.persisted:
        return {"success": True, "message": "Dashboard metrics saved", **body}

    logger.warning(f"Metrics for {view.client_id} cached, not persisted")
    return JSONResponse(
        status_code=202,
        content=jsonable_encoder({
            "success": True,
            "fallback": True,
            "message": "Data received but not persisted - cached for retry",
            **body,
        }),
    )
