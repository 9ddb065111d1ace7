"""Growth OS — Search Console & Business Profile Models."""

from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field


class SearchQueryRecord(BaseModel):
    """One Search Console query row."""

    model_config = ConfigDict(frozen=True)

    query: str
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    ctr: float = 0.0
    position: float = 0.0


class SearchPageRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    page: str
    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0
    position: float = 0.0


class SearchDimensionRecord(BaseModel):
    """Country or device row; ``key`` holds the dimension value."""

    model_config = ConfigDict(frozen=True)

    key: str
    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0
    position: float = 0.0


class SearchAggregate(BaseModel):
    impressions: int = 0
    clicks: int = 0
    ctr: float = 0.0
    position: float = 0.0


class IndexingStatus(BaseModel):
    indexed_pages: int = 0
    blocked_pages: int = 0
    error_pages: int = 0


class RestaurantSearchInsights(BaseModel):
    total_impressions: int = 0
    total_clicks: int = 0
    average_ctr: float = 0.0
    average_position: float = 0.0

    restaurant_name_queries: List[SearchQueryRecord] = []
    location_queries: List[SearchQueryRecord] = []
    menu_queries: List[SearchQueryRecord] = []
    cuisine_queries: List[SearchQueryRecord] = []
    reservation_queries: List[SearchQueryRecord] = []

    top_pages: List[SearchPageRecord] = []
    menu_pages: List[SearchPageRecord] = []
    location_pages: List[SearchPageRecord] = []

    top_countries: List[SearchDimensionRecord] = []
    local_search_performance: SearchAggregate = SearchAggregate()
    device_breakdown: List[SearchDimensionRecord] = []

    indexing_status: IndexingStatus = IndexingStatus()

    local_business_queries: List[SearchQueryRecord] = []
    directions_queries: List[SearchQueryRecord] = []
    hours_queries: List[SearchQueryRecord] = []
    phone_queries: List[SearchQueryRecord] = []


class SearchConsoleProperty(BaseModel):
    site_url: str
    permission_level: str = ""


# ── Business Profile ──


class DailyBusinessMetrics(BaseModel):
    """One day of Business Profile performance for a location."""

    date: str
    views_on_search: int = 0
    views_on_maps: int = 0
    actions_phone: int = 0
    actions_website: int = 0
    actions_directions: int = 0
    actions_menu_views: int = 0
    actions_reservations: int = 0
    actions_order_online: int = 0

    @property
    def views(self) -> int:
        return self.views_on_search + self.views_on_maps


class BusinessProfileSummary(BaseModel):
    total_views: int = 0
    total_directions: int = 0
    total_website_clicks: int = 0
    total_phone_calls: int = 0
    avg_daily_views: int = 0
    conversion_rate: float = 0.0


class BusinessProfileInsights(BaseModel):
    summary: BusinessProfileSummary = BusinessProfileSummary()
    daily_data: List[DailyBusinessMetrics] = []
    peak_days: List[str] = []
    search_vs_maps: Dict[str, int] = {"search": 0, "maps": 0}
    customer_actions: Dict[str, int] = {}
