"""Growth OS — Normalized Ad Metric Models.

Every ad platform adapter normalizes into ``AdMetricRecord``. The record is a
tagged union on ``platform`` so vendor-only fields stay typed instead of
living in loose dicts.
"""

from decimal import Decimal
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Spend is kept exact internally and emitted as a JSON number.
Money = Annotated[
    Decimal, PlainSerializer(lambda v: float(v), return_type=float, when_used="json")
]


class BaseAdMetric(BaseModel):
    """Vendor-agnostic performance snapshot for one account/campaign/adset/ad."""

    model_config = ConfigDict(frozen=True)

    level: str = "campaign"  # account | campaign | adset | ad
    entity_id: str = ""
    entity_name: str = ""
    impressions: int = Field(default=0, ge=0)
    clicks: int = Field(default=0, ge=0)
    spend: Money = Decimal("0")
    conversions: int = Field(default=0, ge=0)
    ctr: float = 0.0
    cpc: float = 0.0
    reach: Optional[int] = Field(default=None, ge=0)
    frequency: Optional[float] = None


class MetaAdMetricRecord(BaseAdMetric):
    platform: Literal["meta"] = "meta"
    campaign_name: str = ""
    objective: str = "UNKNOWN"
    status: str = ""
    targeting: str = ""
    cost_per_result: float = 0.0
    social_spend: float = 0.0
    video_views: int = 0


class GoogleAdsMetricRecord(BaseAdMetric):
    platform: Literal["google_ads"] = "google_ads"
    campaign_type: str = ""
    status: str = ""
    conversion_value: Money = Decimal("0")
    cpa: float = 0.0
    roas: float = 0.0


AdMetricRecord = Annotated[
    Union[MetaAdMetricRecord, GoogleAdsMetricRecord], Field(discriminator="platform")
]


class DailyTrend(BaseModel):
    """One day of account-level totals."""

    date: str
    impressions: int = 0
    clicks: int = 0
    spend: float = 0.0
    conversions: int = 0
    conversion_value: float = 0.0


class SpendConversions(BaseModel):
    spend: float = 0.0
    conversions: float = 0.0


class PlatformBreakdown(BaseModel):
    """Meta spend/conversions split by publisher platform."""

    facebook: SpendConversions = SpendConversions()
    instagram: SpendConversions = SpendConversions()
    messenger: SpendConversions = SpendConversions()
    audience_network: SpendConversions = SpendConversions()


class ReachFrequency(BaseModel):
    reach: int = 0
    frequency: float = 0.0


class AgeShare(BaseModel):
    age_range: str
    percentage: float


class GenderShare(BaseModel):
    gender: str
    percentage: float


class InterestAffinity(BaseModel):
    interest: str
    affinity: float


class PlacementPerformance(BaseModel):
    placement: str
    impressions: int = 0
    spend: float = 0.0


class LocationPerformance(BaseModel):
    location: str
    impressions: int = 0
    spend: float = 0.0


class AudienceInsights(BaseModel):
    age: List[AgeShare] = []
    gender: List[GenderShare] = []
    interests: List[InterestAffinity] = []
    placements: List[PlacementPerformance] = []
    locations: List[LocationPerformance] = []


class ContentPerformance(BaseModel):
    ad_id: str
    ad_name: str
    engagement: int = 0
    conversions: int = 0
    spend: float = 0.0


class MetaRestaurantInsights(BaseModel):
    total_spend: float = 0.0
    total_conversions: int = 0
    average_cost_per_result: float = 0.0
    reach_vs_frequency: ReachFrequency = ReachFrequency()
    top_performing_campaigns: List[MetaAdMetricRecord] = []
    audience_insights: AudienceInsights = AudienceInsights()
    platform_breakdown: PlatformBreakdown = PlatformBreakdown()
    best_performing_content: List[ContentPerformance] = []
    seasonal_trends: List[DailyTrend] = []


class PeakDay(BaseModel):
    day: str
    conversions: float = 0.0
    spend: float = 0.0


class GoogleAdsRestaurantInsights(BaseModel):
    total_spend: float = 0.0
    total_conversions: int = 0
    total_conversion_value: float = 0.0
    cost_per_conversion: float = 0.0
    roas: float = 0.0
    top_performing_campaigns: List[GoogleAdsMetricRecord] = []
    peak_days: List[PeakDay] = []
    seasonal_trends: List[DailyTrend] = []
