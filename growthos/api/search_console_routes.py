"""Growth OS — Google Search Console API Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from growthos.api.deps import (
    brand_terms,
    demo_response,
    get_search_console_service,
    live_response,
    lookup_client,
    pick_ref,
    server_error_response,
    vendor_error_response,
)
from growthos.config import settings
from growthos.connectors.base import is_placeholder_ref
from growthos.connectors.search_console.service import SearchConsoleService
from growthos.core.date_range import resolve_date_range
from growthos.core.errors import ValidationError, VendorError
from growthos.core.logging import get_logger
from growthos.database import get_session
from growthos.demo_data import demo_search_console_data

logger = get_logger("api.search_console")

router = APIRouter(prefix="/api", tags=["Search Console"])


def _demo() -> dict:
    return {"data": demo_search_console_data()}


@router.get("/google-search-console")
async def get_search_console(
    client_id: Optional[str] = Query(None, description="Restaurant client (required)"),
    days: Optional[int] = Query(None),
    site_url: Optional[str] = Query(None, description="Property, e.g. sc-domain:example.com"),
    service: SearchConsoleService = Depends(get_search_console_service),
    session: Session = Depends(get_session),
):
    """Categorized search queries, pages, countries and devices for a property."""
    if is_placeholder_ref(client_id):
        raise ValidationError("client_id is required")
    date_range = resolve_date_range(days=days)
    client = lookup_client(session, client_id)
    site = pick_ref(
        site_url,
        client.search_console_site_url if client else None,
        settings.google_search_console_site_url,
    )

    if not service.is_configured():
        return demo_response("Search Console not configured - showing demo data", _demo())
    if site is None:
        return demo_response("No Search Console property selected - showing demo data", _demo())

    try:
        insights = await service.get_restaurant_search_insights(
            site, date_range, brand_terms(client)
        )
    except VendorError as e:
        logger.warning(
            f"Search Console request failed: {e.code} {e.details or e.message}",
            extra={"platform": "search_console", "entity_id": site},
        )
        return vendor_error_response(e, _demo())
    except Exception as e:
        logger.error(f"Search Console endpoint failed: {e}", extra={"platform": "search_console"})
        return server_error_response(e, _demo())

    return live_response(
        "Live Search Console data",
        {"site_url": site, "date_range": date_range, "data": insights},
    )


@router.get("/google-search-console/properties")
async def get_search_console_properties(
    service: SearchConsoleService = Depends(get_search_console_service),
):
    """Properties the OAuth user can read."""
    if not service.is_configured():
        return demo_response("Search Console not configured", {"properties": []})
    try:
        properties = await service.get_properties()
    except VendorError as e:
        logger.warning(f"Search Console properties failed: {e.code}")
        return vendor_error_response(e, {"properties": []})
    return live_response(f"{len(properties)} properties", {"properties": properties})
