"""Growth OS — Google Analytics 4 Models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class AnalyticsProperty(BaseModel):
    property_id: str
    display_name: str = ""
    time_zone: str = ""
    currency_code: str = "USD"


class TrafficSourceRecord(BaseModel):
    """Sessions from one source / medium pair."""

    model_config = ConfigDict(frozen=True)

    source: str
    medium: str
    channel_group: str = ""
    sessions: int = 0
    users: int = 0
    new_users: int = 0
    bounce_rate: float = 0.0
    avg_session_duration: float = 0.0
    conversions: int = 0
    conversion_rate: float = 0.0
    revenue: float = 0.0


class PagePerformanceRecord(BaseModel):
    model_config = ConfigDict(frozen=True)

    page_path: str
    page_title: str = ""
    page_views: int = 0
    users: int = 0
    avg_time_on_page: float = 0.0
    bounce_rate: float = 0.0
    conversions: int = 0
    conversion_value: float = 0.0


class AgeBracketShare(BaseModel):
    age_range: str
    users: int
    percentage: float


class GenderUsers(BaseModel):
    gender: str
    users: int
    percentage: float


class Demographics(BaseModel):
    age: List[AgeBracketShare] = []
    gender: List[GenderUsers] = []


class LocationUsers(BaseModel):
    country: str
    city: str
    users: int = 0
    sessions: int = 0
    conversion_rate: float = 0.0


class DeviceUsers(BaseModel):
    device_category: str
    users: int = 0
    sessions: int = 0
    bounce_rate: float = 0.0
    conversion_rate: float = 0.0


class AudienceOverview(BaseModel):
    total_users: int = 0
    new_users: int = 0
    returning_users: int = 0
    sessions: int = 0
    avg_session_duration: float = 0.0
    bounce_rate: float = 0.0
    page_views_per_session: float = 0.0
    demographics: Demographics = Demographics()
    locations: List[LocationUsers] = []
    devices: List[DeviceUsers] = []


class ChannelPerformance(BaseModel):
    sessions: int = 0
    users: int = 0
    conversions: int = 0
    conversion_rate: float = 0.0
    avg_session_duration: float = 0.0


class SocialPlatform(BaseModel):
    platform: str
    sessions: int = 0
    conversions: int = 0


class SocialPerformance(BaseModel):
    sessions: int = 0
    users: int = 0
    conversions: int = 0
    top_platforms: List[SocialPlatform] = []


class EcommerceMetrics(BaseModel):
    transactions: int = 0
    revenue: float = 0.0
    avg_order_value: float = 0.0
    revenue_per_user: float = 0.0


class RestaurantAnalyticsInsights(BaseModel):
    total_sessions: int = 0
    total_users: int = 0
    new_users: int = 0
    returning_users: int = 0
    avg_session_duration: float = 0.0
    bounce_rate: float = 0.0
    conversion_rate: float = 0.0
    total_revenue: float = 0.0

    menu_page_views: int = 0
    location_page_views: int = 0

    top_traffic_sources: List[TrafficSourceRecord] = []
    organic_search_performance: ChannelPerformance = ChannelPerformance()
    paid_search_performance: ChannelPerformance = ChannelPerformance()
    social_media_performance: SocialPerformance = SocialPerformance()

    top_performing_pages: List[PagePerformanceRecord] = []
    menu_performance: List[PagePerformanceRecord] = []
    location_performance: List[PagePerformanceRecord] = []

    audience_overview: AudienceOverview = AudienceOverview()
    ecommerce_metrics: Optional[EcommerceMetrics] = None
