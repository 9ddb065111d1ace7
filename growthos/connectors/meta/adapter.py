"""Growth OS — Meta Ads Adapter.

Implements ``AdPlatformAdapter`` for Meta and builds the restaurant insight
summary shown on the Meta dashboard tab.
"""

import asyncio
from typing import Any, Awaitable, Dict, List

import httpx

from growthos.config import settings
from growthos.connectors.base import AdPlatformAdapter, credentials_present
from growthos.connectors.meta.client import MetaClient
from growthos.connectors.meta.endpoints import MetaEndpoints
from growthos.connectors.meta import transformer
from growthos.core.date_range import DateRange
from growthos.core.errors import VendorError
from growthos.core.logging import get_logger
from growthos.models.ad_models import (
    AudienceInsights,
    MetaAdMetricRecord,
    MetaRestaurantInsights,
    ReachFrequency,
)

logger = get_logger("meta.adapter")

TOP_CAMPAIGNS = 5


async def _optional(call: Awaitable[List[Dict[str, Any]]], label: str) -> List[Dict[str, Any]]:
    """Secondary breakdowns degrade to empty rather than failing the summary."""
    try:
        return await call
    except VendorError as e:
        logger.warning(f"Meta {label} unavailable: {e.details or e.message}")
        return []


class MetaAdsAdapter(AdPlatformAdapter):
    """Meta Marketing API → ``MetaAdMetricRecord``."""

    platform = "meta"

    def __init__(
        self,
        access_token: str | None = None,
        app_id: str | None = None,
        app_secret: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.access_token = settings.meta_access_token if access_token is None else access_token
        self.app_id = settings.meta_app_id if app_id is None else app_id
        self.app_secret = settings.meta_app_secret if app_secret is None else app_secret
        self._transport = transport

    def is_configured(self) -> bool:
        return credentials_present(self.access_token, self.app_id)

    def _client(self) -> MetaClient:
        return MetaClient(self.access_token, self.app_secret, transport=self._transport)

    async def validate_token(self) -> Dict[str, Any]:
        """``{valid, user_id, name}`` for the configured token."""
        client = self._client()
        try:
            return await client.validate_token()
        finally:
            await client.close()

    async def get_account_info(self, account_ref: str) -> Dict[str, Any]:
        client = self._client()
        try:
            return await client.get_account_info(account_ref)
        finally:
            await client.close()

    async def _campaign_records(
        self, endpoints: MetaEndpoints, date_range: DateRange
    ) -> List[MetaAdMetricRecord]:
        rows, campaigns = await asyncio.gather(
            endpoints.fetch_campaign_insights(date_range),
            endpoints.fetch_campaigns(),
        )
        status = {c.get("id"): c.get("status", "") for c in campaigns}
        return [
            transformer.transform_insight_row(
                row, "campaign", status=status.get(row.get("campaign_id"), "")
            )
            for row in rows
        ]

    async def _adset_records(
        self, endpoints: MetaEndpoints, date_range: DateRange
    ) -> List[MetaAdMetricRecord]:
        rows, adsets = await asyncio.gather(
            endpoints.fetch_adset_insights(date_range),
            endpoints.fetch_adsets(),
        )
        by_id = {a.get("id"): a for a in adsets}
        records = []
        for row in rows:
            adset = by_id.get(row.get("adset_id"), {})
            records.append(
                transformer.transform_insight_row(
                    row,
                    "adset",
                    status=adset.get("status", ""),
                    targeting=transformer.format_targeting(adset.get("targeting")),
                )
            )
        return records

    async def fetch_insights(
        self, account_ref: str, date_range: DateRange
    ) -> List[MetaAdMetricRecord]:
        client = self._client()
        try:
            return await self._campaign_records(MetaEndpoints(client, account_ref), date_range)
        finally:
            await client.close()

    async def get_restaurant_insights(
        self, account_ref: str, date_range: DateRange
    ) -> Dict[str, Any]:
        """Campaigns, ad sets and the rolled-up summary in one fan-out."""
        client = self._client()
        endpoints = MetaEndpoints(client, account_ref)
        try:
            campaigns, adsets, daily, platforms, ages, genders, ads = await asyncio.gather(
                self._campaign_records(endpoints, date_range),
                self._adset_records(endpoints, date_range),
                _optional(endpoints.fetch_account_daily(date_range), "daily trend"),
                _optional(endpoints.fetch_breakdown(date_range, "publisher_platform"), "platform breakdown"),
                _optional(endpoints.fetch_breakdown(date_range, "age"), "age breakdown"),
                _optional(endpoints.fetch_breakdown(date_range, "gender"), "gender breakdown"),
                _optional(endpoints.fetch_ad_insights(date_range), "ad insights"),
            )
        finally:
            await client.close()

        insights = summarize_campaigns(campaigns)
        insights = insights.model_copy(
            update={
                "platform_breakdown": transformer.transform_platform_breakdown(platforms),
                "audience_insights": AudienceInsights(
                    age=transformer.transform_age_breakdown(ages),
                    gender=transformer.transform_gender_breakdown(genders),
                ),
                "best_performing_content": transformer.transform_best_content(ads),
                "seasonal_trends": transformer.transform_daily(daily),
            }
        )
        logger.info(
            f"Built Meta insights from {len(campaigns)} campaigns",
            extra={"platform": self.platform, "entity_id": account_ref},
        )
        return {"campaigns": campaigns, "ad_sets": adsets, "insights": insights}


def summarize_campaigns(campaigns: List[MetaAdMetricRecord]) -> MetaRestaurantInsights:
    """Totals, cost per result, reach vs frequency and top campaigns."""
    total_spend = float(sum(c.spend for c in campaigns))
    total_conversions = sum(c.conversions for c in campaigns)
    total_reach = sum(c.reach or 0 for c in campaigns)
    total_impressions = sum(c.impressions for c in campaigns)

    top = sorted(
        (c for c in campaigns if c.conversions > 0),
        key=lambda c: c.conversions,
        reverse=True,
    )[:TOP_CAMPAIGNS]

    return MetaRestaurantInsights(
        total_spend=round(total_spend, 2),
        total_conversions=total_conversions,
        average_cost_per_result=round(total_spend / total_conversions, 2) if total_conversions else 0.0,
        reach_vs_frequency=ReachFrequency(
            reach=total_reach,
            frequency=round(total_impressions / total_reach, 2) if total_reach else 0.0,
        ),
        top_performing_campaigns=top,
    )
