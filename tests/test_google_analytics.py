"""Tests for the Google Analytics 4 connector."""

import json

import httpx
import pytest

from conftest import google_token_response
from growthos.connectors.google_analytics.client import property_path, report_rows
from growthos.connectors.google_analytics.service import GoogleAnalyticsService
from growthos.connectors.google_analytics import transformer
from growthos.core.errors import PlatformPermissionError
from growthos.models.analytics_models import AudienceOverview


def report(dimensions, metrics, rows):
    return {
        "dimensionHeaders": [{"name": d} for d in dimensions],
        "metricHeaders": [{"name": m, "type": "TYPE_INTEGER"} for m in metrics],
        "rows": [
            {
                "dimensionValues": [{"value": v} for v in dims],
                "metricValues": [{"value": str(v)} for v in values],
            }
            for dims, values in rows
        ],
        "rowCount": len(rows),
    }


SOURCE_METRICS = [
    "sessions", "activeUsers", "newUsers", "bounceRate",
    "averageSessionDuration", "keyEvents", "totalRevenue",
]
SOURCE_DIMENSIONS = ["sessionDefaultChannelGroup", "sessionSource", "sessionMedium"]
PAGE_METRICS = [
    "screenPageViews", "activeUsers", "userEngagementDuration",
    "bounceRate", "keyEvents", "totalRevenue",
]

REPORTS = {
    ("sessionDefaultChannelGroup", "sessionSource", "sessionMedium"): report(
        SOURCE_DIMENSIONS,
        SOURCE_METRICS,
        [
            (["Organic Search", "google", "organic"], [600, 500, 300, 0.42, 95.5, 30, 0]),
            (["Paid Search", "google", "cpc"], [300, 280, 200, 0.5, 60, 21, 450.0]),
            (["Organic Social", "instagram.com", "referral"], [100, 90, 80, 0.61, 40, 3, 0]),
        ],
    ),
    ("pagePath", "pageTitle"): report(
        ["pagePath", "pageTitle"],
        PAGE_METRICS,
        [
            (["/", "Home"], [900, 700, 27000, 0.35, 12, 0]),
            (["/menu", "Our Menu"], [400, 350, 20000, 0.2, 9, 0]),
            (["/contact", "Find Us"], [120, 110, 3600, 0.3, 2, 0]),
        ],
    ),
    (): report(
        [],
        ["activeUsers", "newUsers", "sessions", "averageSessionDuration", "bounceRate",
         "screenPageViewsPerSession"],
        [([], [850, 560, 1000, 88.2, 0.45, 2.3])],
    ),
    ("userAgeBracket", "userGender"): report(
        ["userAgeBracket", "userGender"],
        ["activeUsers"],
        [
            (["25-34", "female"], [300]),
            (["25-34", "male"], [200]),
            (["35-44", "female"], [100]),
            (["(not set)", "(not set)"], [250]),
        ],
    ),
    ("country", "city"): report(
        ["country", "city"],
        ["activeUsers", "sessions", "keyEvents"],
        [(["United States", "Austin"], [500, 600, 30])],
    ),
    ("deviceCategory",): report(
        ["deviceCategory"],
        ["activeUsers", "sessions", "bounceRate", "keyEvents"],
        [(["mobile"], [600, 700, 0.5, 35])],
    ),
}


def analytics_handler(request: httpx.Request) -> httpx.Response:
    if request.url.host == "oauth2.googleapis.com":
        return google_token_response()
    assert request.url.path == "/v1beta/properties/123456:runReport"
    body = json.loads(request.content)
    dimensions = tuple(d["name"] for d in body["dimensions"])
    return httpx.Response(200, json=REPORTS[dimensions])


def analytics_service(handler) -> GoogleAnalyticsService:
    return GoogleAnalyticsService("id", "secret", "refresh", transport=httpx.MockTransport(handler))


class TestReportRows:
    def test_rows_keyed_by_header(self):
        rows = report_rows(REPORTS[("deviceCategory",)])
        assert rows == [{
            "deviceCategory": "mobile",
            "activeUsers": "600",
            "sessions": "700",
            "bounceRate": "0.5",
            "keyEvents": "35",
        }]

    def test_empty_report(self):
        assert report_rows({"dimensionHeaders": [], "metricHeaders": []}) == []

    def test_property_path(self):
        assert property_path("123") == "properties/123"
        assert property_path(" properties/123 ") == "properties/123"


class TestTransformer:
    def test_traffic_source_rates_are_percent(self):
        rows = report_rows(REPORTS[tuple(SOURCE_DIMENSIONS)])
        source = transformer.transform_traffic_source(rows[0])
        assert source.source == "google"
        assert source.channel_group == "Organic Search"
        assert source.bounce_rate == 42.0
        assert source.conversion_rate == pytest.approx(5.0)

    def test_page_time_from_engagement(self):
        rows = report_rows(REPORTS[("pagePath", "pageTitle")])
        page = transformer.transform_page(rows[1])
        assert page.avg_time_on_page == 50.0
        assert page.bounce_rate == 20.0
        assert transformer.is_menu_page(page)
        assert not transformer.is_location_page(page)

    def test_demographics_drop_not_set(self):
        audience = transformer.build_audience(
            report_rows(REPORTS[()]),
            report_rows(REPORTS[("userAgeBracket", "userGender")]),
            [],
            [],
        )
        ages = {a.age_range: a for a in audience.demographics.age}
        assert set(ages) == {"25-34", "35-44"}
        assert ages["25-34"].users == 500
        assert ages["25-34"].percentage == pytest.approx(500 / 600 * 100)
        assert audience.returning_users == 290
        assert audience.bounce_rate == 45.0

    def test_no_revenue_means_no_ecommerce(self):
        source = transformer.transform_traffic_source(
            {"sessionSource": "bing", "sessionMedium": "organic", "sessions": "10"}
        )
        insights = transformer.build_restaurant_insights([source], [], AudienceOverview())
        assert insights.ecommerce_metrics is None
        assert insights.organic_search_performance.sessions == 10
        assert insights.paid_search_performance.sessions == 0


class TestService:
    async def test_restaurant_insights(self, date_range):
        insights = await analytics_service(analytics_handler).get_restaurant_analytics_insights(
            "123456", date_range
        )
        assert insights.total_sessions == 1000
        assert insights.total_users == 850
        assert insights.conversion_rate == pytest.approx(5.4)
        assert insights.organic_search_performance.sessions == 600
        assert insights.paid_search_performance.conversions == 21
        assert [p.platform for p in insights.social_media_performance.top_platforms] == ["instagram.com"]
        assert insights.menu_page_views == 400
        assert insights.location_page_views == 120
        assert insights.ecommerce_metrics.revenue == 450.0
        assert insights.ecommerce_metrics.avg_order_value == pytest.approx(450 / 54)
        assert insights.audience_overview.devices[0].conversion_rate == pytest.approx(5.0)
        assert insights.audience_overview.locations[0].city == "Austin"

    async def test_reports_share_one_token(self, date_range):
        token_calls = []

        def handler(request):
            if request.url.host == "oauth2.googleapis.com":
                token_calls.append(request)
            return analytics_handler(request)

        await analytics_service(handler).get_restaurant_analytics_insights("properties/123456", date_range)
        assert len(token_calls) == 1

    async def test_forbidden_property(self, date_range):
        def handler(request):
            if request.url.host == "oauth2.googleapis.com":
                return google_token_response()
            return httpx.Response(403, json={"error": {
                "code": 403,
                "message": "User does not have sufficient permissions for this property.",
                "status": "PERMISSION_DENIED",
            }})

        with pytest.raises(PlatformPermissionError) as exc:
            await analytics_service(handler).get_restaurant_analytics_insights("123456", date_range)
        assert "Viewer" in exc.value.solution

    async def test_properties_across_accounts(self):
        def handler(request):
            if request.url.host == "oauth2.googleapis.com":
                return google_token_response()
            if request.url.path == "/v1beta/accounts":
                return httpx.Response(200, json={"accounts": [{"name": "accounts/1"}, {"name": "accounts/2"}]})
            assert request.url.path == "/v1beta/properties"
            parent = request.url.params["filter"].split(":", 1)[1]
            if parent == "accounts/2":
                return httpx.Response(200, json={})
            return httpx.Response(200, json={"properties": [{
                "name": "properties/123456",
                "displayName": "Toboggan Brewing",
                "timeZone": "America/Chicago",
            }]})

        properties = await analytics_service(handler).get_properties()
        assert len(properties) == 1
        assert properties[0].property_id == "123456"
        assert properties[0].currency_code == "USD"

    def test_unconfigured(self):
        assert not GoogleAnalyticsService("", "", "").is_configured()
