"""Growth OS — Search Console Service.

Fetches query/page/country/device rows in parallel and feeds them through the
query categorizer.
"""

import asyncio
from typing import Any, Dict, List, Sequence

import httpx

from growthos.analyzer.query_categorizer import build_search_insights
from growthos.config import settings
from growthos.connectors.base import credentials_present
from growthos.connectors.search_console.client import SearchConsoleClient
from growthos.core.date_range import DateRange
from growthos.core.logging import get_logger
from growthos.models.search_models import (
    RestaurantSearchInsights,
    SearchConsoleProperty,
    SearchDimensionRecord,
    SearchPageRecord,
    SearchQueryRecord,
)

logger = get_logger("search_console.service")

QUERY_ROW_LIMIT = 500
PAGE_ROW_LIMIT = 100
COUNTRY_ROW_LIMIT = 50
DEVICE_ROW_LIMIT = 10


def _metrics(row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "impressions": int(row.get("impressions") or 0),
        "clicks": int(row.get("clicks") or 0),
        "ctr": float(row.get("ctr") or 0),
        "position": float(row.get("position") or 0),
    }


def _key(row: Dict[str, Any]) -> str:
    keys = row.get("keys") or [""]
    return keys[0]


class SearchConsoleService:
    """Search Console → categorized restaurant search insights."""

    platform = "search_console"

    def __init__(
        self,
        client_id: str | None = None,
        client_secret: str | None = None,
        refresh_token: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        default_id, default_secret, default_refresh = settings.search_console_credentials
        self.client_id = default_id if client_id is None else client_id
        self.client_secret = default_secret if client_secret is None else client_secret
        self.refresh_token = default_refresh if refresh_token is None else refresh_token
        self._transport = transport

    def is_configured(self) -> bool:
        return credentials_present(self.client_id, self.client_secret, self.refresh_token)

    def _client(self) -> SearchConsoleClient:
        return SearchConsoleClient(
            self.client_id, self.client_secret, self.refresh_token, transport=self._transport
        )

    async def get_properties(self) -> List[SearchConsoleProperty]:
        client = self._client()
        try:
            sites = await client.list_sites()
        finally:
            await client.close()
        return [
            SearchConsoleProperty(
                site_url=s.get("siteUrl", ""), permission_level=s.get("permissionLevel", "")
            )
            for s in sites
        ]

    async def get_restaurant_search_insights(
        self,
        site_url: str,
        date_range: DateRange,
        brand_terms: Sequence[str] = (),
    ) -> RestaurantSearchInsights:
        client = self._client()
        try:
            await client.authorize()
            query_rows, page_rows, country_rows, device_rows = await asyncio.gather(
                client.query(site_url, date_range, "query", QUERY_ROW_LIMIT),
                client.query(site_url, date_range, "page", PAGE_ROW_LIMIT),
                client.query(site_url, date_range, "country", COUNTRY_ROW_LIMIT),
                client.query(site_url, date_range, "device", DEVICE_ROW_LIMIT),
            )
        finally:
            await client.close()

        queries = [SearchQueryRecord(query=_key(r), **_metrics(r)) for r in query_rows]
        pages = [SearchPageRecord(page=_key(r), **_metrics(r)) for r in page_rows]
        countries = [SearchDimensionRecord(key=_key(r), **_metrics(r)) for r in country_rows]
        devices = [SearchDimensionRecord(key=_key(r), **_metrics(r)) for r in device_rows]

        logger.info(
            f"Categorizing {len(queries)} queries",
            extra={"platform": self.platform, "entity_id": site_url},
        )
        return build_search_insights(queries, pages, countries, devices, brand_terms)
