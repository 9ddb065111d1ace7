"""Growth OS — Shared route dependencies and response envelopes.

Vendor endpoints answer ``{demo, message, ...data}``. When a vendor call
fails the demo payload is served with HTTP 200 and annotated with the error
code, vendor details and a remediation hint.
"""

from typing import Any, Dict, List, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from sqlmodel import Session

from growthos.connectors.base import is_placeholder_ref
from growthos.connectors.business_profile.client import BusinessProfileService
from growthos.connectors.google_ads.adapter import GoogleAdsAdapter
from growthos.connectors.google_analytics.service import GoogleAnalyticsService
from growthos.connectors.meta.adapter import MetaAdsAdapter
from growthos.connectors.search_console.service import SearchConsoleService
from growthos.core.errors import GrowthOSError
from growthos.core.logging import get_logger
from growthos.models.client_models import Client

logger = get_logger("api")


# ── Vendor providers (overridden in tests) ──


def get_meta_adapter() -> MetaAdsAdapter:
    return MetaAdsAdapter()


def get_google_ads_adapter() -> GoogleAdsAdapter:
    return GoogleAdsAdapter()


def get_search_console_service() -> SearchConsoleService:
    return SearchConsoleService()


def get_business_profile_service() -> BusinessProfileService:
    return BusinessProfileService()


def get_analytics_service() -> GoogleAnalyticsService:
    return GoogleAnalyticsService()


# ── Client lookup ──


def lookup_client(session: Session, client_id: Optional[str]) -> Optional[Client]:
    if is_placeholder_ref(client_id):
        return None
    return session.get(Client, client_id)


def pick_ref(*candidates: Optional[str]) -> Optional[str]:
    """First candidate that is a real account reference, else None."""
    for ref in candidates:
        if not is_placeholder_ref(ref):
            return ref.strip()
    return None


def brand_terms(client: Optional[Client]) -> List[str]:
    """Client name as a brand term, plus its first word when that is distinctive."""
    if client is None or not client.name.strip():
        return []
    name = client.name.strip().lower()
    terms = [name]
    first = name.split()[0]
    if first != name and len(first) > 3:
        terms.append(first)
    return terms


# ── Envelopes ──


def live_response(message: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return jsonable_encoder({"demo": False, "message": message, **data})


def demo_response(message: str, data: Dict[str, Any]) -> Dict[str, Any]:
    return jsonable_encoder({"demo": True, "message": message, **data})


def vendor_error_response(
    error: GrowthOSError, data: Dict[str, Any], **extra: Any
) -> Dict[str, Any]:
    """Demo payload annotated with ``error``, ``details`` and ``solution``."""
    body = {"demo": True, **data, **extra, **error.to_dict()}
    body.setdefault("details", None)
    return jsonable_encoder(body)


def server_error_response(exc: Exception, data: Dict[str, Any], **extra: Any) -> JSONResponse:
    body = {
        "demo": True,
        **data,
        **extra,
        "error": "SERVER_ERROR",
        "message": "Internal server error",
        "details": str(exc),
    }
    return JSONResponse(status_code=500, content=jsonable_encoder(body))
