"""Growth OS — Google Ads REST Client (GAQL searchStream)."""

from typing import Any, Dict, List, Optional

import httpx

from growthos.config import settings
from growthos.connectors.google.oauth import GoogleAPIClient
from growthos.core.logging import get_logger

logger = get_logger("google_ads.client")

CAMPAIGN_QUERY = """
    SELECT
      campaign.id,
      campaign.name,
      campaign.advertising_channel_type,
      campaign.status,
      metrics.impressions,
      metrics.clicks,
      metrics.cost_micros,
      metrics.conversions,
      metrics.conversions_value,
      metrics.ctr,
      metrics.average_cpc
    FROM campaign
    WHERE segments.date BETWEEN '{since}' AND '{until}'
      AND campaign.status != 'REMOVED'
    ORDER BY metrics.cost_micros DESC
"""

DAILY_QUERY = """
    SELECT
      segments.date,
      metrics.impressions,
      metrics.clicks,
      metrics.cost_micros,
      metrics.conversions,
      metrics.conversions_value
    FROM customer
    WHERE segments.date BETWEEN '{since}' AND '{until}'
"""


def normalize_customer_id(customer_id: str) -> str:
    """Google Ads ids are shown as 123-456-7890 but sent without dashes."""
    return customer_id.replace("-", "").strip()


class GoogleAdsClient(GoogleAPIClient):
    """Async client for the Google Ads API REST interface."""

    platform = "Google Ads"
    solutions = {
        "PERMISSION_ERROR": "Grant the OAuth user access to this customer, or link it under the manager account",
        "TOKEN_ERROR": "Re-run the Google Ads OAuth flow and update GOOGLE_ADS_REFRESH_TOKEN",
    }

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        refresh_token: str,
        developer_token: str,
        login_customer_id: Optional[str] = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        super().__init__(client_id, client_secret, refresh_token, transport)
        self.developer_token = developer_token
        self.login_customer_id = login_customer_id

    async def search_stream(self, customer_id: str, query: str) -> List[Dict[str, Any]]:
        """Run a GAQL query and return the flattened result rows."""
        cid = normalize_customer_id(customer_id)
        url = (
            f"{settings.google_ads_base_url}/{settings.google_ads_api_version}"
            f"/customers/{cid}/googleAds:searchStream"
        )
        headers = {"developer-token": self.developer_token}
        if self.login_customer_id:
            headers["login-customer-id"] = normalize_customer_id(self.login_customer_id)

        resp = await self._request("POST", url, json={"query": query}, headers=headers)
        chunks = resp.json()
        if isinstance(chunks, dict):
            chunks = [chunks]
        rows = [row for chunk in chunks for row in chunk.get("results", [])]
        logger.info(f"Fetched {len(rows)} rows", extra={"entity_id": cid})
        return rows
