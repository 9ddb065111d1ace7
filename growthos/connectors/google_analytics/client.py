"""Growth OS — Google Analytics 4 REST Client (Data API runReport, Admin API)."""

from typing import Any, Dict, List, Sequence

from growthos.config import settings
from growthos.connectors.google.oauth import GoogleAPIClient
from growthos.core.date_range import DateRange
from growthos.core.logging import get_logger

logger = get_logger("google_analytics.client")


def property_path(property_id: str) -> str:
    """``properties/123`` for a bare or prefixed GA4 property id."""
    property_id = property_id.strip()
    return property_id if property_id.startswith("properties/") else f"properties/{property_id}"


def report_rows(report: Dict[str, Any]) -> List[Dict[str, str]]:
    """Flatten a runReport response into one ``{header: value}`` dict per row."""
    dimensions = [h["name"] for h in report.get("dimensionHeaders", [])]
    metrics = [h["name"] for h in report.get("metricHeaders", [])]
    rows = []
    for row in report.get("rows", []):
        values = dict(zip(dimensions, (v.get("value", "") for v in row.get("dimensionValues", []))))
        values.update(zip(metrics, (v.get("value", "0") for v in row.get("metricValues", []))))
        rows.append(values)
    return rows


class GoogleAnalyticsClient(GoogleAPIClient):
    platform = "Google Analytics"
    solutions = {
        "PERMISSION_ERROR": "Add the OAuth user as a Viewer on the GA4 property",
        "TOKEN_ERROR": "Re-authorize Google Analytics and update GOOGLE_ANALYTICS_REFRESH_TOKEN",
    }

    async def run_report(
        self,
        property_id: str,
        date_range: DateRange,
        metrics: Sequence[str],
        dimensions: Sequence[str] = (),
        order_by_metric: str | None = None,
        limit: int | None = None,
    ) -> List[Dict[str, str]]:
        body: Dict[str, Any] = {
            "dateRanges": [{"startDate": date_range.since, "endDate": date_range.until}],
            "dimensions": [{"name": d} for d in dimensions],
            "metrics": [{"name": m} for m in metrics],
        }
        if order_by_metric:
            body["orderBys"] = [{"metric": {"metricName": order_by_metric}, "desc": True}]
        if limit:
            body["limit"] = limit

        url = f"{settings.google_analytics_data_base_url}/{property_path(property_id)}:runReport"
        resp = await self._request("POST", url, json=body)
        rows = report_rows(resp.json())
        logger.info(
            f"Fetched {len(rows)} rows for {', '.join(dimensions) or 'totals'}",
            extra={"entity_id": property_id},
        )
        return rows

    async def list_accounts(self) -> List[Dict[str, Any]]:
        resp = await self._request("GET", f"{settings.google_analytics_admin_base_url}/accounts")
        return resp.json().get("accounts", [])

    async def list_properties(self, account_name: str) -> List[Dict[str, Any]]:
        resp = await self._request(
            "GET",
            f"{settings.google_analytics_admin_base_url}/properties",
            params={"filter": f"parent:{account_name}"},
        )
        return resp.json().get("properties", [])
