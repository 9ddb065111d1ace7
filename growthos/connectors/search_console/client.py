"""Growth OS — Google Search Console REST Client."""

from typing import Any, Dict, List
from urllib.parse import quote

from growthos.config import settings
from growthos.connectors.google.oauth import GoogleAPIClient
from growthos.core.date_range import DateRange
from growthos.core.logging import get_logger

logger = get_logger("search_console.client")


class SearchConsoleClient(GoogleAPIClient):
    """Async client for the Search Console (webmasters v3) API."""

    platform = "Search Console"
    solutions = {
        "PERMISSION_ERROR": "Add the OAuth user as an owner or full user of the Search Console property",
        "TOKEN_ERROR": "Re-authorize Search Console and update GOOGLE_SEARCH_CONSOLE_REFRESH_TOKEN",
    }

    async def list_sites(self) -> List[Dict[str, Any]]:
        resp = await self._request("GET", f"{settings.google_search_console_base_url}/sites")
        return resp.json().get("siteEntry", [])

    async def query(
        self,
        site_url: str,
        date_range: DateRange,
        dimension: str,
        row_limit: int = 100,
    ) -> List[Dict[str, Any]]:
        """Search analytics rows for one dimension (query, page, country, device)."""
        url = (
            f"{settings.google_search_console_base_url}/sites/"
            f"{quote(site_url, safe='')}/searchAnalytics/query"
        )
        body = {
            "startDate": date_range.since,
            "endDate": date_range.until,
            "dimensions": [dimension],
            "rowLimit": row_limit,
            "startRow": 0,
        }
        resp = await self._request("POST", url, json=body)
        rows = resp.json().get("rows", [])
        logger.info(f"Fetched {len(rows)} {dimension} rows", extra={"entity_id": site_url})
        return rows
