"""Growth OS — Google Business Profile API Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from growthos.api.deps import (
    demo_response,
    get_business_profile_service,
    live_response,
    lookup_client,
    pick_ref,
    server_error_response,
    vendor_error_response,
)
from growthos.config import settings
from growthos.connectors.business_profile.client import BusinessProfileService
from growthos.core.date_range import resolve_date_range
from growthos.core.errors import VendorError
from growthos.core.logging import get_logger
from growthos.database import get_session
from growthos.demo_data import demo_business_profile_data

logger = get_logger("api.business_profile")

router = APIRouter(prefix="/api", tags=["Business Profile"])


def _demo() -> dict:
    return {"data": demo_business_profile_data()}


@router.get("/google-business-profile")
async def get_business_profile(
    client_id: Optional[str] = Query(None),
    days: Optional[int] = Query(None),
    location_id: Optional[str] = Query(None, description="locations/123 or bare id"),
    service: BusinessProfileService = Depends(get_business_profile_service),
    session: Session = Depends(get_session),
):
    """Views, customer actions and peak days for one Business Profile location."""
    date_range = resolve_date_range(days=days)
    client = lookup_client(session, client_id)
    location = pick_ref(
        location_id,
        client.business_profile_location_id if client else None,
        settings.google_business_profile_location_id,
    )

    if not service.is_configured():
        return demo_response("Business Profile not configured - showing demo data", _demo())
    if location is None:
        return demo_response("No Business Profile location selected - showing demo data", _demo())

    try:
        insights = await service.get_restaurant_metrics(location, date_range)
    except VendorError as e:
        logger.warning(
            f"Business Profile request failed: {e.code} {e.details or e.message}",
            extra={"platform": "business_profile", "entity_id": location},
        )
        return vendor_error_response(e, _demo())
    except Exception as e:
        logger.error(f"Business Profile endpoint failed: {e}", extra={"platform": "business_profile"})
        return server_error_response(e, _demo())

    return live_response(
        "Live Business Profile data",
        {"location_id": location, "date_range": date_range, "data": insights},
    )
