"""Growth OS — Google Ads Adapter."""

import asyncio
from typing import Any, Dict, List

import httpx

from growthos.config import settings
from growthos.connectors.base import AdPlatformAdapter, credentials_present
from growthos.connectors.google_ads.client import (
    CAMPAIGN_QUERY,
    DAILY_QUERY,
    GoogleAdsClient,
)
from growthos.connectors.google_ads import transformer
from growthos.core.date_range import DateRange
from growthos.core.logging import get_logger
from growthos.models.ad_models import GoogleAdsMetricRecord

logger = get_logger("google_ads.adapter")


class GoogleAdsAdapter(AdPlatformAdapter):
    """Google Ads API → ``GoogleAdsMetricRecord``."""

    platform = "google_ads"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        developer_token: str | None = None,
        login_customer_id: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = settings.google_ads_client_id if client_id is None else client_id
        self.client_secret = (
            settings.google_ads_client_secret if client_secret is None else client_secret
        )
        self.refresh_token = (
            settings.google_ads_refresh_token if refresh_token is None else refresh_token
        )
        self.developer_token = (
            settings.google_ads_developer_token if developer_token is None else developer_token
        )
        self.login_customer_id = login_customer_id or settings.google_ads_manager_customer_id
        self._transport = transport

    def is_configured(self) -> bool:
        return credentials_present(
            self.client_id, self.client_secret, self.refresh_token, self.developer_token
        )

    def _client(self) -> GoogleAdsClient:
        return GoogleAdsClient(
            self.client_id,
            self.client_secret,
            self.refresh_token,
            self.developer_token,
            login_customer_id=self.login_customer_id,
            transport=self._transport,
        )

    async def fetch_insights(
        self, account_ref: str, date_range: DateRange
    ) -> List[GoogleAdsMetricRecord]:
        client = self._client()
        try:
            rows = await client.search_stream(
                account_ref, CAMPAIGN_QUERY.format(since=date_range.since, until=date_range.until)
            )
        finally:
            await client.close()
        return [transformer.transform_campaign_row(row) for row in rows]

    async def get_restaurant_insights(
        self, account_ref: str, date_range: DateRange
    ) -> Dict[str, Any]:
        client = self._client()
        try:
            # Token first so the parallel queries share it
            await client.authorize()
            campaign_rows, daily_rows = await asyncio.gather(
                client.search_stream(
                    account_ref,
                    CAMPAIGN_QUERY.format(since=date_range.since, until=date_range.until),
                ),
                client.search_stream(
                    account_ref,
                    DAILY_QUERY.format(since=date_range.since, until=date_range.until),
                ),
            )
        finally:
            await client.close()

        campaigns = [transformer.transform_campaign_row(row) for row in campaign_rows]
        trends = transformer.transform_daily_rows(daily_rows)
        logger.info(
            f"Built Google Ads insights from {len(campaigns)} campaigns",
            extra={"platform": self.platform, "entity_id": account_ref},
        )
        return {
            "campaigns": campaigns,
            "insights": transformer.summarize_campaigns(campaigns, trends),
        }
