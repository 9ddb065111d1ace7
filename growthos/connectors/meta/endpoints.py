"""Growth OS — Meta API Endpoints.

Fetch functions for each Meta Marketing API resource the dashboard reads.
Each returns the raw insight rows; normalization happens in the transformer.
"""

import json
from typing import Any, Dict, List

from growthos.connectors.meta.client import MetaClient, account_path, meta_base
from growthos.core.date_range import DateRange
from growthos.core.logging import get_logger

logger = get_logger("meta.endpoints")

METRIC_FIELDS = (
    "impressions,clicks,spend,ctr,cpc,frequency,reach,"
    "actions,cost_per_action_type,social_spend,video_play_actions"
)
CAMPAIGN_INSIGHT_FIELDS = f"campaign_id,campaign_name,objective,{METRIC_FIELDS}"
ADSET_INSIGHT_FIELDS = f"adset_id,adset_name,campaign_id,campaign_name,{METRIC_FIELDS}"
AD_INSIGHT_FIELDS = f"ad_id,ad_name,adset_name,campaign_name,inline_post_engagement,{METRIC_FIELDS}"
DAILY_FIELDS = "impressions,clicks,spend,actions"
BREAKDOWN_FIELDS = "impressions,spend,actions"

CAMPAIGN_FIELDS = "id,name,objective,status"
ADSET_FIELDS = "id,name,campaign_id,status,targeting"


class MetaEndpoints:
    """Fetch raw insight rows for one ad account."""

    def __init__(self, client: MetaClient, account_id: str):
        self.client = client
        self.account = account_path(account_id)

    def _insights_params(
        self, date_range: DateRange, level: str, fields: str
    ) -> Dict[str, Any]:
        return {
            "fields": fields,
            "time_range": json.dumps({"since": date_range.since, "until": date_range.until}),
            "level": level,
            "limit": 500,
        }

    # ── Level Insights ──

    async def fetch_campaign_insights(self, date_range: DateRange) -> List[Dict[str, Any]]:
        """Campaign-level totals over the window."""
        url = f"{meta_base()}/{self.account}/insights"
        data = await self.client._paginated_get(
            url, self._insights_params(date_range, "campaign", CAMPAIGN_INSIGHT_FIELDS)
        )
        logger.info(f"Fetched {len(data)} campaign insight records")
        return data

    async def fetch_adset_insights(self, date_range: DateRange) -> List[Dict[str, Any]]:
        """Ad-set-level totals over the window."""
        url = f"{meta_base()}/{self.account}/insights"
        data = await self.client._paginated_get(
            url, self._insights_params(date_range, "adset", ADSET_INSIGHT_FIELDS)
        )
        logger.info(f"Fetched {len(data)} adset insight records")
        return data

    async def fetch_ad_insights(self, date_range: DateRange) -> List[Dict[str, Any]]:
        """Ad-level totals over the window."""
        url = f"{meta_base()}/{self.account}/insights"
        data = await self.client._paginated_get(
            url, self._insights_params(date_range, "ad", AD_INSIGHT_FIELDS)
        )
        logger.info(f"Fetched {len(data)} ad insight records")
        return data

    async def fetch_account_daily(self, date_range: DateRange) -> List[Dict[str, Any]]:
        """Account-level insights broken down by day."""
        url = f"{meta_base()}/{self.account}/insights"
        params = self._insights_params(date_range, "account", DAILY_FIELDS)
        params["time_increment"] = "1"
        return await self.client._paginated_get(url, params)

    async def fetch_breakdown(
        self, date_range: DateRange, breakdown: str
    ) -> List[Dict[str, Any]]:
        """Account totals split by one breakdown (age, gender, publisher_platform…)."""
        url = f"{meta_base()}/{self.account}/insights"
        params = self._insights_params(date_range, "account", BREAKDOWN_FIELDS)
        params["breakdowns"] = breakdown
        return await self.client._paginated_get(url, params)

    # ── Structure ──

    async def fetch_campaigns(self) -> List[Dict[str, Any]]:
        url = f"{meta_base()}/{self.account}/campaigns"
        return await self.client._paginated_get(url, {"fields": CAMPAIGN_FIELDS, "limit": 500})

    async def fetch_adsets(self) -> List[Dict[str, Any]]:
        """Ad set structure, used for targeting descriptions."""
        url = f"{meta_base()}/{self.account}/adsets"
        return await self.client._paginated_get(url, {"fields": ADSET_FIELDS, "limit": 500})
