"""Growth OS — Google Business Profile Performance API Client."""

from datetime import date
from typing import Any, Dict, List

import httpx

from growthos.config import settings
from growthos.connectors.base import credentials_present
from growthos.connectors.google.oauth import GoogleAPIClient
from growthos.connectors.business_profile.transformer import (
    DAILY_METRICS,
    process_restaurant_metrics,
    transform_time_series,
)
from growthos.core.date_range import DateRange
from growthos.core.logging import get_logger
from growthos.models.search_models import BusinessProfileInsights

logger = get_logger("business_profile.client")


def _date_params(prefix: str, d: date) -> List[tuple]:
    return [
        (f"{prefix}.year", d.year),
        (f"{prefix}.month", d.month),
        (f"{prefix}.day", d.day),
    ]


def location_path(location_id: str) -> str:
    location_id = location_id.strip()
    return location_id if location_id.startswith("locations/") else f"locations/{location_id}"


class BusinessProfileClient(GoogleAPIClient):
    platform = "Business Profile"
    solutions = {
        "PERMISSION_ERROR": "Business Profile APIs need approved project access; request it in the Google Cloud console",
        "TOKEN_ERROR": "Re-authorize Business Profile and update GOOGLE_BUSINESS_PROFILE_REFRESH_TOKEN",
    }

    async def fetch_daily_metrics(
        self, location_id: str, date_range: DateRange
    ) -> List[Dict[str, Any]]:
        """Raw ``dailyMetricTimeSeries`` entries for the location."""
        url = (
            f"{settings.google_business_profile_base_url}/"
            f"{location_path(location_id)}:fetchMultiDailyMetricsTimeSeries"
        )
        params: List[tuple] = [("dailyMetrics", m) for m in DAILY_METRICS]
        params += _date_params("dailyRange.startDate", date.fromisoformat(date_range.since))
        params += _date_params("dailyRange.endDate", date.fromisoformat(date_range.until))

        resp = await self._request("GET", url, params=params)
        series = [
            entry
            for group in resp.json().get("multiDailyMetricTimeSeries", [])
            for entry in group.get("dailyMetricTimeSeries", [])
        ]
        logger.info(f"Fetched {len(series)} metric series", extra={"entity_id": location_id})
        return series


class BusinessProfileService:
    """Business Profile daily metrics → restaurant summary."""

    platform = "business_profile"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.client_id = (
            settings.google_business_profile_client_id if client_id is None else client_id
        )
        self.client_secret = (
            settings.google_business_profile_client_secret
            if client_secret is None
            else client_secret
        )
        self.refresh_token = (
            settings.google_business_profile_refresh_token
            if refresh_token is None
            else refresh_token
        )
        self._transport = transport

    def is_configured(self) -> bool:
        return credentials_present(self.client_id, self.client_secret, self.refresh_token)

    async def get_restaurant_metrics(
        self, location_id: str, date_range: DateRange
    ) -> BusinessProfileInsights:
        client = BusinessProfileClient(
            self.client_id, self.client_secret, self.refresh_token, transport=self._transport
        )
        try:
            series = await client.fetch_daily_metrics(location_id, date_range)
        finally:
            await client.close()
        return process_restaurant_metrics(transform_time_series(series))
