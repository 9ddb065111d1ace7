"""Growth OS — GA4 report rows → restaurant analytics insights."""

from typing import Dict, List, Optional

from growthos.models.analytics_models import (
    AgeBracketShare,
    AudienceOverview,
    ChannelPerformance,
    Demographics,
    DeviceUsers,
    EcommerceMetrics,
    GenderUsers,
    LocationUsers,
    PagePerformanceRecord,
    RestaurantAnalyticsInsights,
    SocialPerformance,
    SocialPlatform,
    TrafficSourceRecord,
)

SOCIAL_PLATFORMS = ("facebook", "instagram", "twitter", "tiktok", "youtube")
NOT_SET = "(not set)"
TOP_SOURCES = 10
TOP_PAGES = 10

# GA4 reports key events under the name the old "conversions" metric had
CONVERSIONS = "keyEvents"


def _int(row: Dict[str, str], name: str) -> int:
    return int(float(row.get(name) or 0))


def _float(row: Dict[str, str], name: str) -> float:
    return float(row.get(name) or 0)


def _rate(part: int, whole: int) -> float:
    return part / whole * 100 if whole else 0.0


def _percent(row: Dict[str, str], name: str) -> float:
    # GA4 returns rates as fractions; dashboards show percentages
    return round(_float(row, name) * 100, 2)


# ── Row transforms ──


def transform_traffic_source(row: Dict[str, str]) -> TrafficSourceRecord:
    sessions = _int(row, "sessions")
    conversions = _int(row, CONVERSIONS)
    return TrafficSourceRecord(
        source=row.get("sessionSource") or "Unknown",
        medium=row.get("sessionMedium") or "Unknown",
        channel_group=row.get("sessionDefaultChannelGroup", ""),
        sessions=sessions,
        users=_int(row, "activeUsers"),
        new_users=_int(row, "newUsers"),
        bounce_rate=_percent(row, "bounceRate"),
        avg_session_duration=_float(row, "averageSessionDuration"),
        conversions=conversions,
        conversion_rate=_rate(conversions, sessions),
        revenue=_float(row, "totalRevenue"),
    )


def transform_page(row: Dict[str, str]) -> PagePerformanceRecord:
    views = _int(row, "screenPageViews")
    engagement = _float(row, "userEngagementDuration")
    return PagePerformanceRecord(
        page_path=row.get("pagePath", ""),
        page_title=row.get("pageTitle", ""),
        page_views=views,
        users=_int(row, "activeUsers"),
        avg_time_on_page=engagement / views if views else 0.0,
        bounce_rate=_percent(row, "bounceRate"),
        conversions=_int(row, CONVERSIONS),
        conversion_value=_float(row, "totalRevenue"),
    )


def _demographic_shares(rows: List[Dict[str, str]], dimension: str) -> List[tuple]:
    """``(label, users, percentage)`` per value of one dimension, "(not set)" dropped."""
    users: Dict[str, int] = {}
    for row in rows:
        label = row.get(dimension, "")
        if not label or label == NOT_SET:
            continue
        users[label] = users.get(label, 0) + _int(row, "activeUsers")
    total = sum(users.values())
    return [(label, n, _rate(n, total)) for label, n in users.items()]


def build_audience(
    totals: List[Dict[str, str]],
    demographic_rows: List[Dict[str, str]],
    location_rows: List[Dict[str, str]],
    device_rows: List[Dict[str, str]],
) -> AudienceOverview:
    basic = totals[0] if totals else {}
    total_users = _int(basic, "activeUsers")
    new_users = _int(basic, "newUsers")

    locations = []
    for row in location_rows:
        sessions = _int(row, "sessions")
        locations.append(LocationUsers(
            country=row.get("country", ""),
            city=row.get("city", ""),
            users=_int(row, "activeUsers"),
            sessions=sessions,
            conversion_rate=_rate(_int(row, CONVERSIONS), sessions),
        ))

    devices = []
    for row in device_rows:
        sessions = _int(row, "sessions")
        devices.append(DeviceUsers(
            device_category=row.get("deviceCategory", ""),
            users=_int(row, "activeUsers"),
            sessions=sessions,
            bounce_rate=_percent(row, "bounceRate"),
            conversion_rate=_rate(_int(row, CONVERSIONS), sessions),
        ))

    return AudienceOverview(
        total_users=total_users,
        new_users=new_users,
        returning_users=max(total_users - new_users, 0),
        sessions=_int(basic, "sessions"),
        avg_session_duration=_float(basic, "averageSessionDuration"),
        bounce_rate=_percent(basic, "bounceRate"),
        page_views_per_session=_float(basic, "screenPageViewsPerSession"),
        demographics=Demographics(
            age=[
                AgeBracketShare(age_range=label, users=n, percentage=pct)
                for label, n, pct in _demographic_shares(demographic_rows, "userAgeBracket")
            ],
            gender=[
                GenderUsers(gender=label, users=n, percentage=pct)
                for label, n, pct in _demographic_shares(demographic_rows, "userGender")
            ],
        ),
        locations=locations,
        devices=devices,
    )


# ── Insight rollup ──


def _channel(source: Optional[TrafficSourceRecord]) -> ChannelPerformance:
    if source is None:
        return ChannelPerformance()
    return ChannelPerformance(
        sessions=source.sessions,
        users=source.users,
        conversions=source.conversions,
        conversion_rate=source.conversion_rate,
        avg_session_duration=source.avg_session_duration,
    )


def is_menu_page(page: PagePerformanceRecord) -> bool:
    return "menu" in page.page_path.lower() or "menu" in page.page_title.lower()


def is_location_page(page: PagePerformanceRecord) -> bool:
    path = page.page_path.lower()
    return "location" in path or "contact" in path or "location" in page.page_title.lower()


def build_restaurant_insights(
    sources: List[TrafficSourceRecord],
    pages: List[PagePerformanceRecord],
    audience: AudienceOverview,
) -> RestaurantAnalyticsInsights:
    """Totals, channel splits and menu/location page performance.

    ``sources`` and ``pages`` are expected busiest first; organic and paid
    search take the first matching source.
    """
    menu_pages = [p for p in pages if is_menu_page(p)]
    location_pages = [p for p in pages if is_location_page(p)]

    total_sessions = sum(s.sessions for s in sources)
    total_conversions = sum(s.conversions for s in sources)
    total_revenue = sum(s.revenue for s in sources)

    organic = next(
        (s for s in sources if "organic" in s.medium.lower() or "google" in s.source.lower()),
        None,
    )
    paid = next(
        (s for s in sources if "cpc" in s.medium.lower() or "paid" in s.medium.lower()),
        None,
    )
    social = [s for s in sources if any(p in s.source.lower() for p in SOCIAL_PLATFORMS)]

    ecommerce = None
    if total_revenue > 0:
        ecommerce = EcommerceMetrics(
            transactions=total_conversions,
            revenue=total_revenue,
            avg_order_value=total_revenue / total_conversions if total_conversions else 0.0,
            revenue_per_user=total_revenue / audience.total_users if audience.total_users else 0.0,
        )

    return RestaurantAnalyticsInsights(
        total_sessions=total_sessions,
        total_users=audience.total_users,
        new_users=audience.new_users,
        returning_users=audience.returning_users,
        avg_session_duration=audience.avg_session_duration,
        bounce_rate=audience.bounce_rate,
        conversion_rate=_rate(total_conversions, total_sessions),
        total_revenue=total_revenue,
        menu_page_views=sum(p.page_views for p in menu_pages),
        location_page_views=sum(p.page_views for p in location_pages),
        top_traffic_sources=sources[:TOP_SOURCES],
        organic_search_performance=_channel(organic),
        paid_search_performance=_channel(paid),
        social_media_performance=SocialPerformance(
            sessions=sum(s.sessions for s in social),
            users=sum(s.users for s in social),
            conversions=sum(s.conversions for s in social),
            top_platforms=[
                SocialPlatform(platform=s.source, sessions=s.sessions, conversions=s.conversions)
                for s in social
            ],
        ),
        top_performing_pages=pages[:TOP_PAGES],
        menu_performance=menu_pages,
        location_performance=location_pages,
        audience_overview=audience,
        ecommerce_metrics=ecommerce,
    )
