"""Tests for search query categorization and the search insight rollup."""

import pytest

from growthos.analyzer.query_categorizer import (
    QueryCategory,
    aggregate,
    build_search_insights,
    categorize,
    categorize_query,
)
from growthos.models.search_models import (
    SearchDimensionRecord,
    SearchPageRecord,
    SearchQueryRecord,
)


def q(query, impressions=100, clicks=10, ctr=0.1, position=5.0):
    return SearchQueryRecord(
        query=query, impressions=impressions, clicks=clicks, ctr=ctr, position=position
    )


class TestCategorizeQuery:
    def test_single_category(self):
        assert categorize_query("best sushi") == {QueryCategory.CUISINE}

    def test_no_category(self):
        assert categorize_query("weather tomorrow") == frozenset()

    def test_case_insensitive(self):
        assert QueryCategory.MENU in categorize_query("PIZZA MENU")

    def test_multi_category_membership(self):
        categories = categorize_query("pizza delivery near me")
        assert categories == {
            QueryCategory.CUISINE,
            QueryCategory.MENU,
            QueryCategory.LOCATION,
        }

    def test_local_detail_buckets_overlap_local_business(self):
        categories = categorize_query("toboggan hours phone number")
        assert {
            QueryCategory.LOCAL_BUSINESS,
            QueryCategory.HOURS,
            QueryCategory.PHONE,
        } <= categories

    def test_directions_also_counts_as_location(self):
        categories = categorize_query("directions to the brewery")
        assert QueryCategory.DIRECTIONS in categories
        assert QueryCategory.LOCATION in categories

    def test_brand_terms_extend_restaurant_name_only(self):
        assert QueryCategory.RESTAURANT_NAME not in categorize_query("toboggan brewing")
        categories = categorize_query("toboggan brewing", brand_terms=["Toboggan"])
        assert categories == {QueryCategory.RESTAURANT_NAME}

    def test_blank_brand_terms_ignored(self):
        assert categorize_query("anything", brand_terms=["", "  "]) == frozenset()

    @pytest.mark.parametrize(
        "query",
        ["pizza delivery near me", "toboggan brewing menu", "book a table", "xyz"],
    )
    def test_idempotent(self, query):
        assert categorize_query(query) == categorize_query(query)


class TestCategorize:
    def test_every_category_present(self):
        buckets = categorize([])
        assert set(buckets) == set(QueryCategory)
        assert all(v == [] for v in buckets.values())

    def test_keeps_input_order(self):
        records = [q("pizza near me"), q("sushi"), q("bbq place")]
        buckets = categorize(records)
        assert [r.query for r in buckets[QueryCategory.CUISINE]] == [
            "pizza near me",
            "sushi",
            "bbq place",
        ]

    def test_multi_match_in_every_bucket(self):
        record = q("pizza delivery near me")
        buckets = categorize([record])
        assert record in buckets[QueryCategory.CUISINE]
        assert record in buckets[QueryCategory.MENU]
        assert record in buckets[QueryCategory.LOCATION]

    def test_order_independent_membership(self):
        records = [q("pizza menu"), q("reserve a table"), q("cafe hours")]
        forward = categorize(records)
        backward = categorize(list(reversed(records)))
        for category in QueryCategory:
            assert set(forward[category]) == set(backward[category])


class TestAggregate:
    def test_empty(self):
        result = aggregate([])
        assert result.impressions == 0
        assert result.clicks == 0
        assert result.ctr == 0
        assert result.position == 0

    def test_sums_volume_and_averages_rates(self):
        result = aggregate([
            q("a", impressions=100, clicks=10, ctr=0.1, position=2.0),
            q("b", impressions=300, clicks=15, ctr=0.05, position=6.0),
        ])
        assert result.impressions == 400
        assert result.clicks == 25
        # unweighted mean, not clicks / impressions
        assert result.ctr == pytest.approx(0.075)
        assert result.position == pytest.approx(4.0)


class TestBuildSearchInsights:
    def test_empty_input(self):
        insights = build_search_insights([])
        assert insights.total_impressions == 0
        assert insights.average_ctr == 0
        assert insights.average_position == 0
        assert insights.menu_queries == []

    def test_totals_and_overall_ctr(self):
        insights = build_search_insights([
            q("pizza menu", impressions=1000, clicks=50, position=3.0),
            q("brewery near me", impressions=1000, clicks=150, position=9.0),
        ])
        assert insights.total_impressions == 2000
        assert insights.total_clicks == 200
        assert insights.average_ctr == pytest.approx(10.0)
        assert insights.average_position == pytest.approx(6.0)

    def test_category_limits(self):
        queries = [q(f"menu item {i} hours") for i in range(30)]
        insights = build_search_insights(queries)
        assert len(insights.menu_queries) == 20
        assert len(insights.hours_queries) == 10
        assert insights.menu_queries[0].query == "menu item 0 hours"

    def test_pages_and_dimensions(self):
        pages = [
            SearchPageRecord(page="https://x.com/menu"),
            SearchPageRecord(page="https://x.com/contact"),
            SearchPageRecord(page="https://x.com/location/downtown"),
            SearchPageRecord(page="https://x.com/about"),
        ]
        countries = [SearchDimensionRecord(key=f"c{i}") for i in range(15)]
        devices = [SearchDimensionRecord(key="mobile"), SearchDimensionRecord(key="desktop")]

        insights = build_search_insights([], pages, countries, devices)
        assert [p.page for p in insights.menu_pages] == ["https://x.com/menu"]
        assert [p.page for p in insights.location_pages] == [
            "https://x.com/contact",
            "https://x.com/location/downtown",
        ]
        assert len(insights.top_pages) == 4
        assert len(insights.top_countries) == 10
        assert [d.key for d in insights.device_breakdown] == ["mobile", "desktop"]

    def test_local_search_performance_aggregates_location_bucket(self):
        insights = build_search_insights([
            q("near me", impressions=100, clicks=10, ctr=0.1, position=4.0),
            q("nearby food", impressions=200, clicks=20, ctr=0.3, position=8.0),
            q("sushi", impressions=999, clicks=99, ctr=0.9, position=1.0),
        ])
        local = insights.local_search_performance
        assert local.impressions == 300
        assert local.clicks == 30
        assert local.ctr == pytest.approx(0.2)
        assert local.position == pytest.approx(6.0)
