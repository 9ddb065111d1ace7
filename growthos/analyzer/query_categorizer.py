"""Growth OS — Search Query Categorizer.

Buckets Search Console queries into restaurant intent categories by
case-insensitive substring matching. Membership is non-exclusive: a query
lands in every category whose keywords it contains, and derived aggregates
re-sum each filtered subset rather than partitioning the input.
"""

from enum import Enum
from typing import Dict, FrozenSet, Iterable, List, Sequence

from growthos.models.search_models import (
    RestaurantSearchInsights,
    SearchAggregate,
    SearchDimensionRecord,
    SearchPageRecord,
    SearchQueryRecord,
)


class QueryCategory(str, Enum):
    RESTAURANT_NAME = "restaurant-name"
    LOCATION = "location"
    MENU = "menu"
    CUISINE = "cuisine"
    RESERVATION = "reservation"
    LOCAL_BUSINESS = "local-business"
    DIRECTIONS = "directions"
    HOURS = "hours"
    PHONE = "phone"


CATEGORY_KEYWORDS: Dict[QueryCategory, tuple] = {
    QueryCategory.RESTAURANT_NAME: ("restaurant", "bistro", "cafe", "bar", "grill"),
    QueryCategory.LOCATION: (
        "near me", "location", "address", "directions", "map",
        "where", "find", "nearby", "close", "local",
    ),
    QueryCategory.MENU: (
        "menu", "food", "dish", "meal", "price", "cost",
        "order", "delivery", "takeout", "specials",
    ),
    QueryCategory.CUISINE: (
        "italian", "mexican", "chinese", "japanese", "indian",
        "american", "french", "thai", "mediterranean", "pizza",
        "burger", "sushi", "seafood", "steakhouse", "bbq",
    ),
    QueryCategory.RESERVATION: (
        "reservation", "book", "table", "booking", "reserve",
        "availability", "open table", "party",
    ),
    QueryCategory.LOCAL_BUSINESS: (
        "hours", "open", "closed", "phone", "number", "contact",
        "reviews", "rating", "yelp", "google reviews",
    ),
    QueryCategory.DIRECTIONS: ("directions", "address"),
    QueryCategory.HOURS: ("hours", "open"),
    QueryCategory.PHONE: ("phone", "number"),
}

CATEGORY_LIMIT = 20
LOCAL_DETAIL_LIMIT = 10
PAGE_LIMIT = 20
COUNTRY_LIMIT = 10


def _keywords(category: QueryCategory, brand_terms: Sequence[str]) -> Iterable[str]:
    keywords = CATEGORY_KEYWORDS[category]
    if category is QueryCategory.RESTAURANT_NAME and brand_terms:
        return keywords + tuple(t.lower() for t in brand_terms if t.strip())
    return keywords


def categorize_query(query: str, brand_terms: Sequence[str] = ()) -> FrozenSet[QueryCategory]:
    """Every category whose keyword list has a substring of ``query``."""
    text = query.lower()
    return frozenset(
        category
        for category in QueryCategory
        if any(keyword in text for keyword in _keywords(category, brand_terms))
    )


def categorize(
    records: Iterable[SearchQueryRecord], brand_terms: Sequence[str] = ()
) -> Dict[QueryCategory, List[SearchQueryRecord]]:
    """Group records by category, keeping input order within each bucket.

    Every category is present in the result, possibly empty.
    """
    buckets: Dict[QueryCategory, List[SearchQueryRecord]] = {c: [] for c in QueryCategory}
    for record in records:
        for category in categorize_query(record.query, brand_terms):
            buckets[category].append(record)
    return buckets


def aggregate(records: Sequence[SearchQueryRecord]) -> SearchAggregate:
    """Summed volume with unweighted mean ctr/position.

    The means are per-row averages, not clicks/impressions; reported
    "local search" numbers depend on this.
    """
    if not records:
        return SearchAggregate()
    count = len(records)
    return SearchAggregate(
        impressions=sum(r.impressions for r in records),
        clicks=sum(r.clicks for r in records),
        ctr=sum(r.ctr for r in records) / count,
        position=sum(r.position for r in records) / count,
    )


def _pages_matching(pages: Sequence[SearchPageRecord], *needles: str) -> List[SearchPageRecord]:
    return [p for p in pages if any(n in p.page.lower() for n in needles)]


def build_search_insights(
    queries: Sequence[SearchQueryRecord],
    pages: Sequence[SearchPageRecord] = (),
    countries: Sequence[SearchDimensionRecord] = (),
    devices: Sequence[SearchDimensionRecord] = (),
    brand_terms: Sequence[str] = (),
) -> RestaurantSearchInsights:
    """Roll Search Console rows up into the restaurant search dashboard."""
    total_impressions = sum(q.impressions for q in queries)
    total_clicks = sum(q.clicks for q in queries)
    buckets = categorize(queries, brand_terms)

    return RestaurantSearchInsights(
        total_impressions=total_impressions,
        total_clicks=total_clicks,
        average_ctr=(total_clicks / total_impressions * 100) if total_impressions else 0.0,
        average_position=(sum(q.position for q in queries) / len(queries)) if queries else 0.0,
        restaurant_name_queries=buckets[QueryCategory.RESTAURANT_NAME][:CATEGORY_LIMIT],
        location_queries=buckets[QueryCategory.LOCATION][:CATEGORY_LIMIT],
        menu_queries=buckets[QueryCategory.MENU][:CATEGORY_LIMIT],
        cuisine_queries=buckets[QueryCategory.CUISINE][:CATEGORY_LIMIT],
        reservation_queries=buckets[QueryCategory.RESERVATION][:CATEGORY_LIMIT],
        top_pages=list(pages[:PAGE_LIMIT]),
        menu_pages=_pages_matching(pages, "menu"),
        location_pages=_pages_matching(pages, "location", "contact"),
        top_countries=list(countries[:COUNTRY_LIMIT]),
        local_search_performance=aggregate(buckets[QueryCategory.LOCATION]),
        device_breakdown=list(devices),
        local_business_queries=buckets[QueryCategory.LOCAL_BUSINESS][:CATEGORY_LIMIT],
        directions_queries=buckets[QueryCategory.DIRECTIONS][:LOCAL_DETAIL_LIMIT],
        hours_queries=buckets[QueryCategory.HOURS][:LOCAL_DETAIL_LIMIT],
        phone_queries=buckets[QueryCategory.PHONE][:LOCAL_DETAIL_LIMIT],
    )
