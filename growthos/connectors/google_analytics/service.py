"""Growth OS — Google Analytics 4 Service.

Runs the traffic, page and audience reports in parallel and rolls them up
into restaurant insights.
"""

import asyncio
from typing import List

import httpx

from growthos.config import settings
from growthos.connectors.base import credentials_present
from growthos.connectors.google_analytics.client import GoogleAnalyticsClient
from growthos.connectors.google_analytics import transformer
from growthos.connectors.google_analytics.transformer import CONVERSIONS
from growthos.core.date_range import DateRange
from growthos.core.logging import get_logger
from growthos.models.analytics_models import (
    AnalyticsProperty,
    AudienceOverview,
    PagePerformanceRecord,
    RestaurantAnalyticsInsights,
    TrafficSourceRecord,
)

logger = get_logger("google_analytics.service")

TRAFFIC_SOURCE_LIMIT = 20
PAGE_LIMIT = 50
LOCATION_LIMIT = 20


class GoogleAnalyticsService:
    """GA4 Data API → ``RestaurantAnalyticsInsights``."""

    platform = "google_analytics"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        default_id, default_secret, default_refresh = settings.analytics_credentials
        self.client_id = default_id if client_id is None else client_id
        self.client_secret = default_secret if client_secret is None else client_secret
        self.refresh_token = default_refresh if refresh_token is None else refresh_token
        self._transport = transport

    def is_configured(self) -> bool:
        return credentials_present(self.client_id, self.client_secret, self.refresh_token)

    def _client(self) -> GoogleAnalyticsClient:
        return GoogleAnalyticsClient(
            self.client_id, self.client_secret, self.refresh_token, transport=self._transport
        )

    async def get_properties(self) -> List[AnalyticsProperty]:
        """Every GA4 property under every account the OAuth user can see."""
        client = self._client()
        try:
            properties = []
            for account in await client.list_accounts():
                for prop in await client.list_properties(account.get("name", "")):
                    properties.append(AnalyticsProperty(
                        property_id=prop.get("name", "").split("/")[-1],
                        display_name=prop.get("displayName", ""),
                        time_zone=prop.get("timeZone", ""),
                        currency_code=prop.get("currencyCode") or "USD",
                    ))
        finally:
            await client.close()
        return properties

    # ── Reports ──

    async def _traffic_sources(
        self, client: GoogleAnalyticsClient, property_id: str, date_range: DateRange
    ) -> List[TrafficSourceRecord]:
        rows = await client.run_report(
            property_id,
            date_range,
            metrics=[
                "sessions", "activeUsers", "newUsers", "bounceRate",
                "averageSessionDuration", CONVERSIONS, "totalRevenue",
            ],
            dimensions=["sessionDefaultChannelGroup", "sessionSource", "sessionMedium"],
            order_by_metric="sessions",
            limit=TRAFFIC_SOURCE_LIMIT,
        )
        return [transformer.transform_traffic_source(r) for r in rows]

    async def _pages(
        self, client: GoogleAnalyticsClient, property_id: str, date_range: DateRange
    ) -> List[PagePerformanceRecord]:
        rows = await client.run_report(
            property_id,
            date_range,
            metrics=[
                "screenPageViews", "activeUsers", "userEngagementDuration",
                "bounceRate", CONVERSIONS, "totalRevenue",
            ],
            dimensions=["pagePath", "pageTitle"],
            order_by_metric="screenPageViews",
            limit=PAGE_LIMIT,
        )
        return [transformer.transform_page(r) for r in rows]

    async def _audience(
        self, client: GoogleAnalyticsClient, property_id: str, date_range: DateRange
    ) -> AudienceOverview:
        totals, demographics, locations, devices = await asyncio.gather(
            client.run_report(
                property_id,
                date_range,
                metrics=[
                    "activeUsers", "newUsers", "sessions", "averageSessionDuration",
                    "bounceRate", "screenPageViewsPerSession",
                ],
            ),
            client.run_report(
                property_id,
                date_range,
                metrics=["activeUsers"],
                dimensions=["userAgeBracket", "userGender"],
            ),
            client.run_report(
                property_id,
                date_range,
                metrics=["activeUsers", "sessions", CONVERSIONS],
                dimensions=["country", "city"],
                order_by_metric="activeUsers",
                limit=LOCATION_LIMIT,
            ),
            client.run_report(
                property_id,
                date_range,
                metrics=["activeUsers", "sessions", "bounceRate", CONVERSIONS],
                dimensions=["deviceCategory"],
            ),
        )
        return transformer.build_audience(totals, demographics, locations, devices)

    async def get_restaurant_analytics_insights(
        self, property_id: str, date_range: DateRange
    ) -> RestaurantAnalyticsInsights:
        client = self._client()
        try:
            await client.authorize()
            sources, pages, audience = await asyncio.gather(
                self._traffic_sources(client, property_id, date_range),
                self._pages(client, property_id, date_range),
                self._audience(client, property_id, date_range),
            )
        finally:
            await client.close()

        logger.info(
            f"Analytics rollup: {len(sources)} sources, {len(pages)} pages",
            extra={"platform": self.platform, "entity_id": property_id},
        )
        return transformer.build_restaurant_insights(sources, pages, audience)
