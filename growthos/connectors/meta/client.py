"""Growth OS — Meta Graph API Client.

Handles authentication, error classification, and pagination. Calls are made
once; there is no retry or backoff.
"""

import hashlib
import hmac
from typing import Any, Dict, List, Optional

import httpx

from growthos.config import settings
from growthos.core.errors import classify_vendor_error
from growthos.core.logging import get_logger

logger = get_logger("meta.client")

META_SOLUTIONS = {
    "PERMISSION_ERROR": "Regenerate access token with ads_read and ads_management permissions",
    "TOKEN_ERROR": "Generate new User Access Token from Graph API Explorer",
}


def meta_base() -> str:
    return f"{settings.meta_base_url}/{settings.meta_api_version}"


def account_path(account_id: str) -> str:
    """Graph API node for an ad account; accepts ids with or without ``act_``."""
    account_id = account_id.strip()
    if account_id.startswith("act_"):
        account_id = account_id[4:]
    return f"act_{account_id}"


class MetaClient:
    """Async HTTP client for the Meta Marketing API."""

    def __init__(
        self,
        access_token: str | None = None,
        app_secret: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = access_token or settings.meta_access_token
        self.app_secret = app_secret or settings.meta_app_secret
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                timeout=settings.http_timeout_seconds, transport=self._transport
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()

    def _auth_params(self) -> Dict[str, str]:
        params = {"access_token": self.access_token}
        if self.app_secret:
            params["appsecret_proof"] = hmac.new(
                self.app_secret.encode(), self.access_token.encode(), hashlib.sha256
            ).hexdigest()
        return params

    # ── Core Request Method ──

    async def _request(
        self,
        method: str,
        url: str,
        params: Dict[str, Any] | None = None,
    ) -> Dict[str, Any]:
        """Make a single request and translate Graph API errors.

        Params are merged into the URL's own query string so that
        ``paging.next`` links keep their cursor.
        """
        query = dict(params or {})
        query.update(self._auth_params())
        target = httpx.URL(url).copy_merge_params(query)

        client = await self._get_client()
        try:
            resp = await client.request(method, target)
        except httpx.RequestError as e:
            raise classify_vendor_error(
                f"Connection to Meta failed: {e}", platform="Meta", solutions=META_SOLUTIONS
            ) from e

        if resp.is_success:
            return resp.json()

        error = {}
        if resp.headers.get("content-type", "").startswith(("application/json", "text/javascript")):
            error = resp.json().get("error", {})
        error_type = error.get("type", "")
        error_msg = error.get("message", resp.text or f"HTTP {resp.status_code}")
        detail = f"{error_type}: {error_msg}" if error_type else error_msg
        logger.warning(
            f"Meta API error {resp.status_code}: {detail}",
            extra={"endpoint": url, "status_code": resp.status_code},
        )
        raise classify_vendor_error(
            detail, resp.status_code, platform="Meta", solutions=META_SOLUTIONS
        )

    # ── Pagination ──

    async def _paginated_get(
        self,
        url: str,
        params: Dict[str, Any] | None = None,
        max_pages: int = 50,
    ) -> List[Dict[str, Any]]:
        """Fetch all pages of a paginated endpoint."""
        all_data: List[Dict[str, Any]] = []
        params = params or {}
        current_url = url

        for page in range(max_pages):
            result = await self._request(
                "GET", current_url, params if page == 0 else None
            )
            all_data.extend(result.get("data", []))

            next_url = result.get("paging", {}).get("next")
            if not next_url:
                break
            current_url = next_url

        logger.info(f"Fetched {len(all_data)} records from {url}")
        return all_data

    # ── Token Validation ──

    async def validate_token(self) -> Dict[str, Any]:
        """Check the token by reading ``/me``."""
        result = await self._request("GET", f"{meta_base()}/me", {"fields": "id,name"})
        return {"valid": True, "user_id": result.get("id", ""), "name": result.get("name", "")}

    # ── Accounts ──

    async def get_account_info(self, account_id: str) -> Dict[str, Any]:
        """Fetch ad account details; fails fast when access is missing."""
        url = f"{meta_base()}/{account_path(account_id)}"
        params = {
            "fields": "account_id,name,currency,account_status,business,timezone_name"
        }
        return await self._request("GET", url, params)
