"""Growth OS — Google Analytics 4 API Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from growthos.api.deps import (
    demo_response,
    get_analytics_service,
    live_response,
    lookup_client,
    pick_ref,
    server_error_response,
    vendor_error_response,
)
from growthos.config import settings
from growthos.connectors.base import is_placeholder_ref
from growthos.connectors.google_analytics.service import GoogleAnalyticsService
from growthos.core.date_range import resolve_date_range
from growthos.core.errors import ValidationError, VendorError
from growthos.core.logging import get_logger
from growthos.database import get_session
from growthos.demo_data import demo_analytics_data

logger = get_logger("api.analytics")

router = APIRouter(prefix="/api", tags=["Google Analytics"])


def _demo() -> dict:
    return {"insights": demo_analytics_data()}


@router.get("/google-analytics")
async def get_google_analytics(
    client_id: Optional[str] = Query(None, description="Restaurant client (required)"),
    days: Optional[int] = Query(None),
    property_id: Optional[str] = Query(None, description="GA4 property, bare or properties/123"),
    service: GoogleAnalyticsService = Depends(get_analytics_service),
    session: Session = Depends(get_session),
):
    """Website traffic sources, page performance and audience for a GA4 property."""
    if is_placeholder_ref(client_id):
        raise ValidationError("client_id is required")
    date_range = resolve_date_range(days=days)
    client = lookup_client(session, client_id)
    prop = pick_ref(
        property_id,
        client.google_analytics_property_id if client else None,
        settings.google_analytics_property_id,
    )

    if not service.is_configured():
        return demo_response("Google Analytics not configured - showing demo data", _demo())
    if prop is None:
        return demo_response("No Analytics property selected - showing demo data", _demo())

    try:
        insights = await service.get_restaurant_analytics_insights(prop, date_range)
    except VendorError as e:
        logger.warning(
            f"Google Analytics request failed: {e.code} {e.details or e.message}",
            extra={"platform": "google_analytics", "entity_id": prop},
        )
        return vendor_error_response(e, _demo())
    except Exception as e:
        logger.error(f"Google Analytics endpoint failed: {e}", extra={"platform": "google_analytics"})
        return server_error_response(e, _demo())

    return live_response(
        "Live Google Analytics data",
        {"property_id": prop, "date_range": date_range, "insights": insights},
    )


@router.get("/google-analytics/properties")
async def get_analytics_properties(
    service: GoogleAnalyticsService = Depends(get_analytics_service),
):
    """GA4 properties the OAuth user can read."""
    if not service.is_configured():
        return demo_response("Google Analytics not configured", {"properties": []})
    try:
        properties = await service.get_properties()
    except VendorError as e:
        logger.warning(f"Analytics properties failed: {e.code}")
        return vendor_error_response(e, {"properties": []})
    return live_response(f"{len(properties)} properties", {"properties": properties})
