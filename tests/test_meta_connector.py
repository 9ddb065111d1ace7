"""Tests for the Meta Marketing API adapter.

Vendor HTTP is served by ``httpx.MockTransport``; no real network calls.
"""

import httpx
import pytest

from growthos.connectors.meta.adapter import MetaAdsAdapter, summarize_campaigns
from growthos.connectors.meta.client import MetaClient, account_path
from growthos.connectors.meta import transformer
from growthos.core.errors import ApiError, AuthenticationError, PlatformPermissionError

CAMPAIGN_ROW = {
    "campaign_id": "c1",
    "campaign_name": "Weekend Special",
    "objective": "OUTCOME_SALES",
    "impressions": "8965",
    "clicks": "256",
    "spend": "189.34",
    "ctr": "2.855",
    "cpc": "0.7396",
    "reach": "4980",
    "frequency": "1.8",
    "actions": [
        {"action_type": "purchase", "value": "20"},
        {"action_type": "lead", "value": "4"},
        {"action_type": "link_click", "value": "256"},
    ],
}
QUIET_ROW = {
    "campaign_id": "c2",
    "campaign_name": "Brand Awareness",
    "impressions": "1000",
    "spend": "10.00",
    "reach": "500",
}


def meta_handler(request: httpx.Request) -> httpx.Response:
    path = request.url.path
    params = request.url.params
    if path.endswith("/act_123"):
        return httpx.Response(200, json={"account_id": "123", "name": "Pizza Palace", "currency": "USD"})
    if path.endswith("/campaigns"):
        return httpx.Response(200, json={"data": [{"id": "c1", "status": "ACTIVE"}, {"id": "c2", "status": "PAUSED"}]})
    if path.endswith("/adsets"):
        return httpx.Response(200, json={"data": [{
            "id": "s1",
            "status": "ACTIVE",
            "targeting": {"age_min": 25, "age_max": 45, "geo_locations": {"cities": [{}, {}]}},
        }]})
    if path.endswith("/insights"):
        if params.get("breakdowns") == "publisher_platform":
            return httpx.Response(200, json={"data": [
                {"publisher_platform": "facebook", "spend": "120.50", "actions": [{"action_type": "purchase", "value": "10"}]},
                {"publisher_platform": "instagram", "spend": "68.84", "actions": [{"action_type": "lead", "value": "4"}]},
                {"publisher_platform": "threads", "spend": "1.00"},
            ]})
        if params.get("breakdowns") == "age":
            return httpx.Response(200, json={"data": [
                {"age": "25-34", "impressions": "750"},
                {"age": "35-44", "impressions": "250"},
            ]})
        if params.get("breakdowns") == "gender":
            return httpx.Response(200, json={"data": [{"gender": "female", "impressions": "10"}]})
        level = params.get("level")
        if level == "campaign":
            return httpx.Response(200, json={"data": [CAMPAIGN_ROW, QUIET_ROW]})
        if level == "adset":
            return httpx.Response(200, json={"data": [{**CAMPAIGN_ROW, "adset_id": "s1", "adset_name": "Locals"}]})
        if level == "ad":
            return httpx.Response(200, json={"data": [{"ad_id": "a1", "ad_name": "Video", "inline_post_engagement": "245"}]})
        if level == "account":
            return httpx.Response(200, json={"data": [
                {"date_start": "2026-09-01", "impressions": "500", "clicks": "12", "spend": "9.10"},
            ]})
    return httpx.Response(404, json={"error": {"message": f"unhandled {path}"}})


def adapter_for(handler) -> MetaAdsAdapter:
    return MetaAdsAdapter(
        access_token="EAAB-test",
        app_id="1234",
        app_secret="shh",
        transport=httpx.MockTransport(handler),
    )


def error_handler(status: int, error: dict):
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(status, json={"error": error})

    return handler


class TestConfiguration:
    def test_requires_token_and_app_id(self):
        assert MetaAdsAdapter(access_token="t", app_id="a").is_configured()
        assert not MetaAdsAdapter(access_token="t", app_id="").is_configured()
        assert not MetaAdsAdapter(access_token="  ", app_id="a").is_configured()

    def test_app_secret_optional(self):
        assert MetaAdsAdapter(access_token="t", app_id="a", app_secret="").is_configured()

    @pytest.mark.parametrize("ref,expected", [("123", "act_123"), ("act_123", "act_123"), (" 123 ", "act_123")])
    def test_account_path(self, ref, expected):
        assert account_path(ref) == expected


class TestTransformer:
    def test_insight_row(self):
        record = transformer.transform_insight_row(CAMPAIGN_ROW, "campaign", status="ACTIVE")
        assert record.platform == "meta"
        assert record.entity_id == "c1"
        assert record.impressions == 8965
        assert str(record.spend) == "189.34"
        assert record.conversions == 24
        assert record.cost_per_result == pytest.approx(7.89)
        assert record.reach == 4980

    def test_record_is_immutable(self):
        record = transformer.transform_insight_row(CAMPAIGN_ROW)
        with pytest.raises(Exception):
            record.impressions = 1

    def test_spend_serializes_as_number(self):
        record = transformer.transform_insight_row(CAMPAIGN_ROW)
        assert record.model_dump(mode="json")["spend"] == pytest.approx(189.34)

    def test_targeting_summary(self):
        text = transformer.format_targeting(
            {"age_min": 25, "age_max": 45, "genders": [2], "geo_locations": {"cities": [{}]}}
        )
        assert text == "Ages 25-45 | Gender: Female | Cities: 1 locations"
        assert transformer.format_targeting({}) == "Unknown"
        assert transformer.format_targeting({"device_platforms": ["mobile"]}) == "Broad Targeting"


class TestMetaClient:
    async def test_appsecret_proof_sent(self):
        seen = {}

        def handler(request):
            seen.update(request.url.params)
            return httpx.Response(200, json={"id": "1", "name": "Tester"})

        client = MetaClient("token", "secret", transport=httpx.MockTransport(handler))
        try:
            result = await client.validate_token()
        finally:
            await client.close()
        assert result["valid"] is True
        assert seen["access_token"] == "token"
        assert len(seen["appsecret_proof"]) == 64

    async def test_pagination_follows_next(self):
        def handler(request):
            if request.url.params.get("after") == "p2":
                return httpx.Response(200, json={"data": [{"id": 2}]})
            return httpx.Response(200, json={
                "data": [{"id": 1}],
                "paging": {"next": "https://graph.facebook.com/v22.0/act_1/campaigns?after=p2"},
            })

        client = MetaClient("token", "", transport=httpx.MockTransport(handler))
        try:
            rows = await client._paginated_get("https://graph.facebook.com/v22.0/act_1/campaigns")
        finally:
            await client.close()
        assert [r["id"] for r in rows] == [1, 2]

    async def test_next_page_keeps_cursor_and_auth(self):
        seen = []

        def handler(request):
            seen.append(dict(request.url.params))
            after = request.url.params.get("after")
            if after is None:
                return httpx.Response(200, json={
                    "data": [{"id": 1}],
                    "paging": {"next": "https://graph.facebook.com/v22.0/act_1/insights?level=campaign&after=p2"},
                })
            if after == "p2":
                return httpx.Response(200, json={
                    "data": [{"id": 2}],
                    "paging": {"next": "https://graph.facebook.com/v22.0/act_1/insights?level=campaign&after=p3"},
                })
            return httpx.Response(200, json={"data": [{"id": 3}]})

        client = MetaClient("token", "secret", transport=httpx.MockTransport(handler))
        try:
            rows = await client._paginated_get(
                "https://graph.facebook.com/v22.0/act_1/insights", {"level": "campaign"}
            )
        finally:
            await client.close()

        assert [r["id"] for r in rows] == [1, 2, 3]
        assert [p.get("after") for p in seen] == [None, "p2", "p3"]
        assert all(p["access_token"] == "token" for p in seen)
        assert all(len(p["appsecret_proof"]) == 64 for p in seen)

    async def test_adapter_validate_token(self):
        def handler(request):
            assert request.url.path.endswith("/me")
            return httpx.Response(200, json={"id": "42", "name": "Agency Bot"})

        result = await adapter_for(handler).validate_token()
        assert result == {"valid": True, "user_id": "42", "name": "Agency Bot"}


class TestErrorClassification:
    async def test_missing_ads_management_is_permission_error(self, date_range):
        adapter = adapter_for(error_handler(400, {
            "type": "OAuthException",
            "message": "(#200) Ad account owner has NOT grant ads_management or ads_read permission",
        }))
        with pytest.raises(PlatformPermissionError) as exc:
            await adapter.fetch_insights("123", date_range)
        assert exc.value.code == "PERMISSION_ERROR"
        assert "ads_management" in exc.value.solution
        assert "ads_management" in exc.value.details

    async def test_expired_token_is_token_error(self, date_range):
        adapter = adapter_for(error_handler(400, {
            "type": "OAuthException",
            "message": "Error validating access token: Session has expired",
        }))
        with pytest.raises(AuthenticationError) as exc:
            await adapter.fetch_insights("123", date_range)
        assert exc.value.code == "TOKEN_ERROR"
        assert exc.value.solution

    async def test_other_failures_are_api_errors(self, date_range):
        adapter = adapter_for(error_handler(500, {"type": "FacebookApiException", "message": "Service temporarily unavailable"}))
        with pytest.raises(ApiError) as exc:
            await adapter.fetch_insights("123", date_range)
        assert exc.value.code == "API_ERROR"

    async def test_single_attempt_no_retry(self, date_range):
        calls = []

        def handler(request):
            calls.append(request.url.path)
            return httpx.Response(500, json={"error": {"message": "boom"}})

        adapter = adapter_for(handler)
        with pytest.raises(ApiError):
            await adapter.get_account_info("123")
        assert len(calls) == 1


class TestInsights:
    async def test_fetch_insights(self, date_range):
        records = await adapter_for(meta_handler).fetch_insights("123", date_range)
        assert [r.entity_id for r in records] == ["c1", "c2"]
        assert records[0].status == "ACTIVE"
        assert records[1].status == "PAUSED"
        assert records[1].conversions == 0

    async def test_restaurant_insights(self, date_range):
        result = await adapter_for(meta_handler).get_restaurant_insights("act_123", date_range)
        insights = result["insights"]

        assert len(result["campaigns"]) == 2
        assert result["ad_sets"][0].targeting == "Ages 25-45 | Cities: 2 locations"
        assert insights.total_spend == pytest.approx(199.34)
        assert insights.total_conversions == 24
        assert insights.reach_vs_frequency.reach == 5480
        assert [c.entity_id for c in insights.top_performing_campaigns] == ["c1"]
        assert insights.platform_breakdown.facebook.spend == pytest.approx(120.50)
        assert insights.platform_breakdown.instagram.conversions == 4
        assert insights.platform_breakdown.messenger.spend == 0
        assert insights.audience_insights.age[0].age_range == "25-34"
        assert insights.audience_insights.age[0].percentage == 75.0
        assert insights.audience_insights.gender[0].gender == "Female"
        assert insights.best_performing_content[0].engagement == 245
        assert insights.seasonal_trends[0].date == "2026-09-01"

    async def test_breakdown_failure_degrades_to_empty(self, date_range):
        def handler(request):
            if request.url.params.get("breakdowns"):
                return httpx.Response(400, json={"error": {"message": "Invalid breakdown"}})
            return meta_handler(request)

        result = await adapter_for(handler).get_restaurant_insights("123", date_range)
        assert result["insights"].platform_breakdown.facebook.spend == 0
        assert result["insights"].total_conversions == 24


class TestSummary:
    def test_empty(self):
        insights = summarize_campaigns([])
        assert insights.total_spend == 0
        assert insights.average_cost_per_result == 0
        assert insights.reach_vs_frequency.frequency == 0

    def test_top_five_by_conversions(self):
        campaigns = [
            transformer.transform_insight_row(
                {**CAMPAIGN_ROW, "campaign_id": str(i), "actions": [{"action_type": "purchase", "value": str(i)}]}
            )
            for i in range(8)
        ]
        top = summarize_campaigns(campaigns).top_performing_campaigns
        assert [c.entity_id for c in top] == ["7", "6", "5", "4", "3"]
