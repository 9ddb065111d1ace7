"""Growth OS — Marketing Funnel API Routes.

Every read reconciles stage totals against their sources. Writes return the
updated funnel even when the database save failed; ``save.error`` then says
so and the snapshot waits in the write-ahead cache.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, StrictInt

from growthos.config import settings
from growthos.core.errors import ValidationError
from growthos.core.logging import get_logger
from growthos.models.funnel_models import FunnelData
from growthos.services.funnel_store import FunnelService, get_funnel_service

logger = get_logger("api.funnel")

router = APIRouter(prefix="/api/funnel", tags=["Funnel"])


# ── Request Models ──


class StageValueUpdate(BaseModel):
    """Request body for PUT /api/funnel/stages/{stage}/value."""

    value: StrictInt


class SourceUpdate(BaseModel):
    """Request body for PATCH /api/funnel/stages/{stage}/sources/{index}."""

    name: Optional[str] = None
    value: Optional[StrictInt] = None

    model_config = {
        "json_schema_extra": {
            "examples": [{"value": 12400}, {"name": "Google Ads"}]
        }
    }


def _client(client_id: Optional[str]) -> str:
    return client_id or settings.default_client_id


# ── Endpoints ──


@router.get("")
async def get_funnel(
    client_id: Optional[str] = Query(None),
    history: bool = Query(False, description="Return saved snapshots instead"),
    days: int = Query(30, ge=1, le=365),
    service: FunnelService = Depends(get_funnel_service),
):
    """Current funnel for a client, reconciled, or its snapshot history."""
    cid = _client(client_id)
    if history:
        entries = service.history(cid, days)
        return {
            "status": "success",
            "client_id": cid,
            "count": len(entries),
            "history": [e.model_dump(mode="json") for e in entries],
        }
    return service.load(cid).model_dump(mode="json")


@router.post("")
async def save_funnel(
    data: FunnelData,
    client_id: Optional[str] = Query(None),
    service: FunnelService = Depends(get_funnel_service),
):
    """Replace the whole funnel."""
    return service.replace(_client(client_id), data).model_dump(mode="json")


@router.put("/stages/{stage}/value")
async def set_stage_value(
    stage: str,
    body: StageValueUpdate,
    client_id: Optional[str] = Query(None),
    service: FunnelService = Depends(get_funnel_service),
):
    """Set a stage total directly; sources are not touched."""
    return service.set_stage_total(_client(client_id), stage, body.value).model_dump(mode="json")


@router.patch("/stages/{stage}/sources/{index}")
async def update_source(
    stage: str,
    index: int,
    body: SourceUpdate,
    client_id: Optional[str] = Query(None),
    service: FunnelService = Depends(get_funnel_service),
):
    """Rename or revalue one source; the stage total follows."""
    if body.name is None and body.value is None:
        raise ValidationError("Provide a source name or value")
    view = service.update_source(
        _client(client_id), stage, index, value=body.value, name=body.name
    )
    return view.model_dump(mode="json")
