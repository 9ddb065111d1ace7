"""Growth OS — Meta Ads API Routes."""

from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session

from growthos.api.deps import (
    demo_response,
    get_meta_adapter,
    live_response,
    lookup_client,
    pick_ref,
    server_error_response,
    vendor_error_response,
)
from growthos.config import settings
from growthos.connectors.meta.adapter import MetaAdsAdapter
from growthos.core.date_range import resolve_date_range
from growthos.core.errors import VendorError
from growthos.core.logging import get_logger
from growthos.database import get_session
from growthos.demo_data import DEMO_PLATFORM_BREAKDOWN, demo_meta_data

logger = get_logger("api.meta")

router = APIRouter(prefix="/api", tags=["Meta"])


@router.get("/meta-ads")
async def get_meta_ads(
    since: Optional[str] = Query(None, description="Start date (YYYY-MM-DD)"),
    until: Optional[str] = Query(None, description="End date (YYYY-MM-DD)"),
    days: Optional[int] = Query(None, description="Trailing window when no dates are given"),
    account_id: Optional[str] = Query(None, description="Ad account, with or without act_"),
    client_id: Optional[str] = Query(None),
    adapter: MetaAdsAdapter = Depends(get_meta_adapter),
    session: Session = Depends(get_session),
):
    """Campaigns, ad sets and restaurant insights for one Meta ad account.

    Falls back to demo data when Meta is unconfigured, no account is known,
    or the Graph API rejects the request.
    """
    date_range = resolve_date_range(since, until, days)
    client = lookup_client(session, client_id)
    account_ref = pick_ref(
        account_id,
        client.meta_ads_account_id if client else None,
        settings.meta_ad_account_id,
    )

    if not adapter.is_configured():
        return demo_response("Meta Ads not configured - showing demo data", demo_meta_data())
    if account_ref is None:
        return demo_response("No Meta ad account selected - showing demo data", demo_meta_data())

    try:
        account = await adapter.get_account_info(account_ref)
        result = await adapter.get_restaurant_insights(account_ref, date_range)
    except VendorError as e:
        logger.warning(
            f"Meta request failed: {e.code} {e.details or e.message}",
            extra={"platform": "meta", "entity_id": account_ref},
        )
        return vendor_error_response(
            e, demo_meta_data(), platform_breakdown=DEMO_PLATFORM_BREAKDOWN
        )
    except Exception as e:
        logger.error(f"Meta Ads endpoint failed: {e}", extra={"platform": "meta"})
        return server_error_response(
            e, demo_meta_data(), platform_breakdown=DEMO_PLATFORM_BREAKDOWN
        )

    return live_response(
        "Live Meta Ads data",
        {"account": account, "date_range": date_range, **result},
    )


@router.get("/meta-ads/validate-token")
async def validate_meta_token(adapter: MetaAdsAdapter = Depends(get_meta_adapter)):
    """Check that the configured Meta access token is still accepted."""
    if not adapter.is_configured():
        raise HTTPException(status_code=400, detail="Meta Ads not configured")
    try:
        result = await adapter.validate_token()
    except VendorError as e:
        return {"status": "error", "valid": False, **e.to_dict()}
    return {"status": "success", **result}
