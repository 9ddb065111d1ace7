"""Growth OS — Demo Data.

Static datasets served when an integration is unconfigured, has no account,
or fails. Values are representative of a single-location restaurant.
"""

import random
from datetime import date, timedelta
from decimal import Decimal
from typing import Any, Dict, List, Optional

from growthos.models.ad_models import (
    AgeShare,
    AudienceInsights,
    ContentPerformance,
    DailyTrend,
    GenderShare,
    GoogleAdsMetricRecord,
    GoogleAdsRestaurantInsights,
    InterestAffinity,
    LocationPerformance,
    MetaAdMetricRecord,
    MetaRestaurantInsights,
    PeakDay,
    PlacementPerformance,
    PlatformBreakdown,
    ReachFrequency,
    SpendConversions,
)
from growthos.models.analytics_models import (
    AudienceOverview,
    ChannelPerformance,
    PagePerformanceRecord,
    RestaurantAnalyticsInsights,
    SocialPerformance,
    SocialPlatform,
    TrafficSourceRecord,
)
from growthos.models.funnel_models import (
    DataSource,
    FunnelData,
    FunnelSource,
    FunnelStage,
)
from growthos.models.metrics_models import DashboardMetric, DashboardMetrics, MetricTrend
from growthos.models.search_models import (
    BusinessProfileInsights,
    BusinessProfileSummary,
    IndexingStatus,
    RestaurantSearchInsights,
    SearchAggregate,
    SearchDimensionRecord,
    SearchPageRecord,
    SearchQueryRecord,
)

DEMO_SEED = 7


# ─────────────────────────────────────────────
# Shared time series
# ─────────────────────────────────────────────


def demo_time_series(days: int = 30, today: Optional[date] = None) -> List[DailyTrend]:
    """Daily series with weekend peaks; seeded so responses are stable."""
    rng = random.Random(DEMO_SEED)
    today = today or date.today()
    series = []
    for i in range(days - 1, -1, -1):
        day = today - timedelta(days=i)
        weekend = day.weekday() >= 5
        impressions = (800 + rng.random() * 400) if weekend else (400 + rng.random() * 300)
        clicks = int(impressions * (0.02 + rng.random() * 0.02))
        spend = clicks * (0.60 + rng.random() * 0.40)
        series.append(
            DailyTrend(
                date=day.isoformat(),
                impressions=int(impressions),
                clicks=clicks,
                spend=round(spend, 2),
                conversions=int(clicks * (0.08 + rng.random() * 0.12)),
            )
        )
    return series


# ─────────────────────────────────────────────
# Meta
# ─────────────────────────────────────────────

DEMO_PLATFORM_BREAKDOWN = PlatformBreakdown(
    facebook=SpendConversions(spend=355.07, conversions=32),
    instagram=SpendConversions(spend=207.54, conversions=19),
    messenger=SpendConversions(spend=17.75, conversions=2),
    audience_network=SpendConversions(spend=11.43, conversions=1),
)

_META_CAMPAIGNS = [
    dict(entity_id="demo_meta_1", entity_name="Pizza Palace - Local Awareness", objective="REACH",
         impressions=15420, clicks=342, spend="245.67", conversions=18, cost_per_result=13.65,
         ctr=2.22, cpc=0.72, frequency=2.1, reach=7350, social_spend=45.23, video_views=892),
    dict(entity_id="demo_meta_2", entity_name="Pizza Palace - Weekend Special", objective="CONVERSIONS",
         impressions=8965, clicks=256, spend="189.34", conversions=24, cost_per_result=7.89,
         ctr=2.86, cpc=0.74, frequency=1.8, reach=4980, social_spend=32.15, video_views=0),
    dict(entity_id="demo_meta_3", entity_name="Pizza Palace - Happy Hour", objective="TRAFFIC",
         impressions=12340, clicks=198, spend="156.78", conversions=12, cost_per_result=13.06,
         ctr=1.60, cpc=0.79, frequency=2.5, reach=4936, social_spend=28.90, video_views=445),
]

_META_ADSETS = [
    dict(entity_id="demo_adset_1", entity_name="Local Food Lovers",
         campaign_name="Pizza Palace - Local Awareness",
         targeting="Ages 25-45 | Gender: All | Cities: 3 locations",
         impressions=8200, clicks=185, spend="134.50", conversions=9,
         ctr=2.26, cpc=0.73, frequency=2.0, reach=4100),
    dict(entity_id="demo_adset_2", entity_name="Weekend Diners",
         campaign_name="Pizza Palace - Weekend Special",
         targeting="Ages 28-55 | Gender: All | Cities: 2 locations",
         impressions=5640, clicks=145, spend="112.25", conversions=15,
         ctr=2.57, cpc=0.77, frequency=1.7, reach=3318),
]


def demo_meta_data() -> Dict[str, Any]:
    campaigns = [
        MetaAdMetricRecord(status="ACTIVE", campaign_name=c["entity_name"], **c)
        for c in _META_CAMPAIGNS
    ]
    adsets = [MetaAdMetricRecord(level="adset", status="ACTIVE", **a) for a in _META_ADSETS]
    insights = MetaRestaurantInsights(
        total_spend=591.79,
        total_conversions=54,
        average_cost_per_result=10.96,
        reach_vs_frequency=ReachFrequency(reach=17266, frequency=2.1),
        top_performing_campaigns=[campaigns[1]],
        audience_insights=AudienceInsights(
            age=[
                AgeShare(age_range="25-34", percentage=38),
                AgeShare(age_range="35-44", percentage=31),
                AgeShare(age_range="45-54", percentage=20),
                AgeShare(age_range="18-24", percentage=11),
            ],
            gender=[
                GenderShare(gender="Female", percentage=56),
                GenderShare(gender="Male", percentage=44),
            ],
            interests=[
                InterestAffinity(interest="Food & Dining", affinity=2.3),
                InterestAffinity(interest="Local Events", affinity=1.9),
                InterestAffinity(interest="Family Activities", affinity=1.7),
                InterestAffinity(interest="Pizza", affinity=2.8),
            ],
            placements=[
                PlacementPerformance(placement="Facebook Feed", impressions=18500, spend=345.67),
                PlacementPerformance(placement="Instagram Feed", impressions=12200, spend=198.45),
                PlacementPerformance(placement="Instagram Stories", impressions=6025, spend=47.67),
            ],
            locations=[
                LocationPerformance(location="Downtown", impressions=15400, spend=289.34),
                LocationPerformance(location="Suburbs", impressions=12850, spend=201.12),
                LocationPerformance(location="University Area", impressions=8475, spend=101.33),
            ],
        ),
        platform_breakdown=DEMO_PLATFORM_BREAKDOWN,
        best_performing_content=[
            ContentPerformance(ad_id="demo_ad_1", ad_name="Weekend Pizza Special - Video",
                               engagement=245, conversions=15, spend=89.45),
            ContentPerformance(ad_id="demo_ad_2", ad_name="Happy Hour Deal - Image",
                               engagement=189, conversions=12, spend=67.30),
        ],
        seasonal_trends=demo_time_series(),
    )
    return {"campaigns": campaigns, "ad_sets": adsets, "insights": insights}


# ─────────────────────────────────────────────
# Google Ads
# ─────────────────────────────────────────────

_GOOGLE_CAMPAIGNS = [
    dict(entity_id="demo_gads_1", entity_name="Pizza Palace - Search Brand", campaign_type="SEARCH",
         impressions=12450, clicks=2156, spend="324.58", conversions=89, conversion_value="2670.00",
         ctr=17.32, cpc=1.51, cpa=3.65, roas=8.23),
    dict(entity_id="demo_gads_2", entity_name="Pizza Palace - Local Delivery", campaign_type="SEARCH",
         impressions=18920, clicks=1532, spend="245.12", conversions=67, conversion_value="2010.00",
         ctr=8.10, cpc=1.60, cpa=3.66, roas=8.20),
    dict(entity_id="demo_gads_3", entity_name="Pizza Palace - Performance Max", campaign_type="PERFORMANCE_MAX",
         impressions=32100, clicks=876, spend="132.45", conversions=34, conversion_value="1020.00",
         ctr=2.73, cpc=1.51, cpa=3.90, roas=7.70),
]


def demo_google_ads_data() -> Dict[str, Any]:
    campaigns = [GoogleAdsMetricRecord(status="ENABLED", **c) for c in _GOOGLE_CAMPAIGNS]
    total_spend = float(sum(c.spend for c in campaigns))
    total_conversions = sum(c.conversions for c in campaigns)
    total_value = float(sum((c.conversion_value for c in campaigns), Decimal("0")))
    insights = GoogleAdsRestaurantInsights(
        total_spend=round(total_spend, 2),
        total_conversions=total_conversions,
        total_conversion_value=round(total_value, 2),
        cost_per_conversion=round(total_spend / total_conversions, 2),
        roas=round(total_value / total_spend, 2),
        top_performing_campaigns=campaigns,
        peak_days=[
            PeakDay(day="Friday", conversions=42, spend=128.40),
            PeakDay(day="Saturday", conversions=39, spend=121.15),
            PeakDay(day="Sunday", conversions=28, spend=96.30),
        ],
        seasonal_trends=demo_time_series(),
    )
    return {"campaigns": campaigns, "insights": insights}


# ─────────────────────────────────────────────
# Search Console
# ─────────────────────────────────────────────


def _q(query: str, impressions: int, clicks: int, ctr: float, position: float) -> SearchQueryRecord:
    return SearchQueryRecord(query=query, impressions=impressions, clicks=clicks, ctr=ctr, position=position)


def _p(page: str, impressions: int, clicks: int, ctr: float, position: float) -> SearchPageRecord:
    return SearchPageRecord(page=page, impressions=impressions, clicks=clicks, ctr=ctr, position=position)


def _d(key: str, impressions: int, clicks: int, ctr: float, position: float) -> SearchDimensionRecord:
    return SearchDimensionRecord(key=key, impressions=impressions, clicks=clicks, ctr=ctr, position=position)


def demo_search_console_data() -> RestaurantSearchInsights:
    return RestaurantSearchInsights(
        total_impressions=45280,
        total_clicks=2890,
        average_ctr=6.4,
        average_position=12.8,
        restaurant_name_queries=[
            _q("toboggan brewing company", 3420, 890, 26.0, 2.1),
            _q("toboggan brewery", 1850, 420, 22.7, 3.2),
            _q("toboggan restaurant", 980, 180, 18.4, 4.8),
        ],
        location_queries=[
            _q("brewery near me", 8920, 320, 3.6, 18.5),
            _q("restaurants near me", 6750, 245, 3.6, 22.3),
            _q("toboggan brewing location", 1420, 185, 13.0, 5.2),
            _q("brewery downtown", 2340, 98, 4.2, 15.7),
        ],
        menu_queries=[
            _q("toboggan brewing menu", 2150, 285, 13.3, 4.1),
            _q("brewery food menu", 1890, 68, 3.6, 19.8),
            _q("craft beer food pairing", 980, 42, 4.3, 16.2),
            _q("brewery appetizers", 1250, 35, 2.8, 24.1),
        ],
        cuisine_queries=[
            _q("american brewery food", 3420, 89, 2.6, 28.5),
            _q("craft beer restaurant", 2890, 78, 2.7, 26.8),
            _q("pub food", 4250, 125, 2.9, 25.3),
        ],
        reservation_queries=[
            _q("toboggan brewing reservations", 890, 142, 16.0, 3.8),
            _q("brewery table booking", 650, 28, 4.3, 18.9),
            _q("restaurant reservations", 1420, 45, 3.2, 21.5),
        ],
        top_pages=[
            _p("https://tobogganbrew.com/", 12450, 890, 7.1, 8.5),
            _p("https://tobogganbrew.com/menu", 8920, 680, 7.6, 6.2),
            _p("https://tobogganbrew.com/location", 4250, 320, 7.5, 7.8),
            _p("https://tobogganbrew.com/events", 3180, 185, 5.8, 12.3),
            _p("https://tobogganbrew.com/about", 2890, 142, 4.9, 15.7),
        ],
        menu_pages=[
            _p("https://tobogganbrew.com/menu", 8920, 680, 7.6, 6.2),
            _p("https://tobogganbrew.com/menu/appetizers", 1850, 98, 5.3, 11.8),
            _p("https://tobogganbrew.com/menu/entrees", 1420, 78, 5.5, 10.9),
        ],
        location_pages=[
            _p("https://tobogganbrew.com/location", 4250, 320, 7.5, 7.8),
            _p("https://tobogganbrew.com/contact", 1890, 125, 6.6, 9.2),
        ],
        top_countries=[
            _d("usa", 38920, 2450, 6.3, 12.1),
            _d("can", 4250, 285, 6.7, 11.8),
            _d("gbr", 1890, 125, 6.6, 13.5),
            _d("aus", 220, 30, 13.6, 8.9),
        ],
        local_search_performance=SearchAggregate(impressions=18920, clicks=1285, ctr=6.8, position=8.9),
        device_breakdown=[
            _d("mobile", 28450, 1890, 6.6, 13.2),
            _d("desktop", 14250, 850, 6.0, 11.8),
            _d("tablet", 2580, 150, 5.8, 14.5),
        ],
        indexing_status=IndexingStatus(indexed_pages=45, blocked_pages=2, error_pages=1),
        local_business_queries=[
            _q("toboggan brewing hours", 1420, 185, 13.0, 4.2),
            _q("brewery phone number", 890, 98, 11.0, 5.8),
            _q("toboggan brewing reviews", 1250, 78, 6.2, 8.9),
        ],
        directions_queries=[
            _q("toboggan brewing directions", 980, 142, 14.5, 3.8),
            _q("how to get to toboggan brewery", 420, 35, 8.3, 7.2),
        ],
        hours_queries=[
            _q("toboggan brewing hours", 1420, 185, 13.0, 4.2),
            _q("brewery open hours", 650, 45, 6.9, 9.8),
        ],
        phone_queries=[
            _q("toboggan brewing phone", 520, 68, 13.1, 4.5),
            _q("brewery contact number", 380, 28, 7.4, 8.2),
        ],
    )


# ─────────────────────────────────────────────
# Business Profile
# ─────────────────────────────────────────────


def demo_business_profile_data() -> BusinessProfileInsights:
    return BusinessProfileInsights(
        summary=BusinessProfileSummary(
            total_views=15420,
            total_directions=892,
            total_website_clicks=654,
            total_phone_calls=234,
            avg_daily_views=514,
            conversion_rate=11.55,
        ),
        peak_days=[],
        search_vs_maps={"search": 62, "maps": 38},
        customer_actions={
            "directions": 892,
            "website": 654,
            "phone": 234,
            "menu_views": 1205,
            "reservations": 87,
            "online_orders": 143,
        },
    )


# ─────────────────────────────────────────────
# Funnel
# ─────────────────────────────────────────────


def default_funnel_data(today: Optional[date] = None) -> FunnelData:
    """Seed funnel: impressions → interest → opt-ins → redemptions."""
    stamp = (today or date.today()).isoformat()

    def stage(sources: List[tuple], notes: str) -> FunnelStage:
        items = [FunnelSource(name=n, value=v, color=c) for n, v, c in sources]
        return FunnelStage(
            value=sum(s.value for s in items),
            sources=items,
            last_updated=stamp,
            data_source=DataSource.MANUAL,
            notes=notes,
        )

    return FunnelData(
        stages={
            "impressions": stage(
                [("Google Ads", 12400, "bg-blue-500"),
                 ("Meta Ads", 8900, "bg-blue-600"),
                 ("Search/Organic", 3200, "bg-blue-400")],
                "Combined impressions across all channels",
            ),
            "interest": stage(
                [("Google Ads", 680, "bg-green-500"),
                 ("Meta Ads", 420, "bg-green-600"),
                 ("Search/Organic", 110, "bg-green-400")],
                "Clicks and engagement actions",
            ),
            "opt_ins": stage(
                [("Email Sign-ups", 280, "bg-yellow-500"),
                 ("SMS Sign-ups", 125, "bg-yellow-600"),
                 ("Offer Claims", 80, "bg-yellow-400")],
                "Guests who joined a list or claimed an offer",
            ),
            "redemptions": stage(
                [("Online Reservations", 52, "bg-orange-500"),
                 ("Phone Calls", 28, "bg-orange-600"),
                 ("Walk-ins (est)", 9, "bg-orange-400")],
                "Offers redeemed and visits booked",
            ),
        }
    )


def default_dashboard_metrics(today: Optional[date] = None) -> DashboardMetrics:
    """Headline numbers shown before anyone has edited them."""
    stamp = (today or date.today()).isoformat()
    return DashboardMetrics(
        metrics={
            "gac": DashboardMetric(
                value="$12.45",
                trend=MetricTrend.STABLE,
                last_updated=stamp,
                data_source=DataSource.API,
                time_period="Last 30 Days",
                notes="Combined from Google Ads + Meta Ads",
            ),
            "email_opt_ins": DashboardMetric(
                value="485",
                trend=MetricTrend.UP,
                last_updated=stamp,
                data_source=DataSource.MANUAL,
                time_period="Last 30 Days",
                notes="New email subscribers this period",
            ),
            "total_reach": DashboardMetric(
                value="24,500",
                trend=MetricTrend.UP,
                last_updated=stamp,
                data_source=DataSource.API,
                time_period="Last 30 Days",
                notes="Total impressions across all channels",
            ),
        }
    )


def _src(source, medium, sessions, users, new_users, bounce, duration, conversions, rate, revenue):
    return TrafficSourceRecord(
        source=source, medium=medium, sessions=sessions, users=users, new_users=new_users,
        bounce_rate=bounce, avg_session_duration=duration, conversions=conversions,
        conversion_rate=rate, revenue=revenue,
    )


def _page(path, title, views, users, time_on_page, bounce, conversions, value):
    return PagePerformanceRecord(
        page_path=path, page_title=f"{title} - Toboggan Brewing Company", page_views=views,
        users=users, avg_time_on_page=time_on_page, bounce_rate=bounce,
        conversions=conversions, conversion_value=value,
    )


def demo_analytics_data() -> RestaurantAnalyticsInsights:
    """Website traffic for a single-location brewpub."""
    sources = [
        _src("google", "organic", 6850, 5420, 3890, 42.1, 156.3, 195, 2.8, 12450.25),
        _src("direct", "(none)", 3200, 2180, 890, 35.2, 198.4, 142, 4.4, 8950.25),
        _src("facebook", "social", 2340, 1980, 1650, 52.8, 98.7, 78, 3.3, 4850.50),
        _src("google", "cpc", 1850, 1620, 1420, 38.5, 178.2, 89, 4.8, 6720.75),
        _src("instagram", "social", 1180, 980, 820, 58.3, 85.6, 32, 2.7, 1890.75),
    ]
    home = _page("/", "Home", 8920, 7450, 145.2, 42.1, 185, 8950.25)
    menu = _page("/menu", "Menu", 4820, 3890, 198.7, 35.8, 142, 6720.50)
    appetizers = _page("/menu/appetizers", "Appetizers", 1420, 1180, 125.4, 41.2, 52, 1950.25)
    location = _page("/location", "Location & Hours", 2150, 1890, 89.4, 48.2, 68, 2450.75)
    contact = _page("/contact", "Contact Us", 980, 820, 78.2, 55.8, 28, 890.50)
    events = _page("/events", "Events", 1820, 1520, 156.8, 52.3, 45, 1890.25)

    return RestaurantAnalyticsInsights(
        total_sessions=15420,
        total_users=12340,
        new_users=8920,
        returning_users=3420,
        avg_session_duration=142.5,
        bounce_rate=45.2,
        conversion_rate=3.8,
        total_revenue=28450.75,
        menu_page_views=4820,
        location_page_views=2150,
        top_traffic_sources=sources,
        organic_search_performance=ChannelPerformance(
            sessions=6850, users=5420, conversions=195, conversion_rate=2.8,
            avg_session_duration=156.3,
        ),
        paid_search_performance=ChannelPerformance(
            sessions=1850, users=1620, conversions=89, conversion_rate=4.8,
            avg_session_duration=178.2,
        ),
        social_media_performance=SocialPerformance(
            sessions=3520,
            users=2960,
            conversions=110,
            top_platforms=[
                SocialPlatform(platform="facebook", sessions=2340, conversions=78),
                SocialPlatform(platform="instagram", sessions=1180, conversions=32),
            ],
        ),
        top_performing_pages=[home, menu, location, events],
        menu_performance=[menu, appetizers],
        location_performance=[location, contact],
        audience_overview=AudienceOverview(
            total_users=12340,
            new_users=8920,
            returning_users=3420,
            sessions=15420,
            avg_session_duration=142.5,
            bounce_rate=45.2,
            page_views_per_session=2.4,
        ),
    )
