"""Growth OS — Google Ads API Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from growthos.api.deps import (
    demo_response,
    get_google_ads_adapter,
    live_response,
    lookup_client,
    pick_ref,
    server_error_response,
    vendor_error_response,
)
from growthos.config import settings
from growthos.connectors.google_ads.adapter import GoogleAdsAdapter
from growthos.connectors.google_ads.client import normalize_customer_id
from growthos.core.date_range import resolve_date_range
from growthos.core.errors import VendorError
from growthos.core.logging import get_logger
from growthos.database import get_session
from growthos.demo_data import demo_google_ads_data

logger = get_logger("api.google_ads")

router = APIRouter(prefix="/api", tags=["Google Ads"])


@router.get("/google-ads")
async def get_google_ads(
    since: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    until: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    days: Optional[int] = Query(None),
    customer_id: Optional[str] = Query(None, description="Customer id, dashes allowed"),
    client_id: Optional[str] = Query(None),
    adapter: GoogleAdsAdapter = Depends(get_google_ads_adapter),
    session: Session = Depends(get_session),
):
    """Campaign performance and restaurant insights for one Google Ads customer."""
    date_range = resolve_date_range(since, until, days)
    client = lookup_client(session, client_id)
    account_ref = pick_ref(
        customer_id,
        client.google_ads_customer_id if client else None,
        settings.google_ads_customer_id,
    )

    if not adapter.is_configured():
        return demo_response("Google Ads not configured - showing demo data", demo_google_ads_data())
    if account_ref is None:
        return demo_response("No Google Ads customer selected - showing demo data", demo_google_ads_data())

    customer = normalize_customer_id(account_ref)
    try:
        result = await adapter.get_restaurant_insights(customer, date_range)
    except VendorError as e:
        logger.warning(
            f"Google Ads request failed: {e.code} {e.details or e.message}",
            extra={"platform": "google_ads", "entity_id": customer},
        )
        return vendor_error_response(e, demo_google_ads_data())
    except Exception as e:
        logger.error(f"Google Ads endpoint failed: {e}", extra={"platform": "google_ads"})
        return server_error_response(e, demo_google_ads_data())

    return live_response(
        "Live Google Ads data",
        {"customer_id": customer, "date_range": date_range, **result},
    )
