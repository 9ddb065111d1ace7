"""Growth OS — Business Profile time series → daily restaurant metrics."""

from collections import defaultdict
from typing import Any, Dict, List

from growthos.models.search_models import (
    BusinessProfileInsights,
    BusinessProfileSummary,
    DailyBusinessMetrics,
)

# API metric → DailyBusinessMetrics field
METRIC_FIELDS = {
    "BUSINESS_IMPRESSIONS_DESKTOP_SEARCH": "views_on_search",
    "BUSINESS_IMPRESSIONS_MOBILE_SEARCH": "views_on_search",
    "BUSINESS_IMPRESSIONS_DESKTOP_MAPS": "views_on_maps",
    "BUSINESS_IMPRESSIONS_MOBILE_MAPS": "views_on_maps",
    "CALL_CLICKS": "actions_phone",
    "WEBSITE_CLICKS": "actions_website",
    "BUSINESS_DIRECTION_REQUESTS": "actions_directions",
    "BUSINESS_FOOD_MENU_CLICKS": "actions_menu_views",
    "BUSINESS_BOOKINGS": "actions_reservations",
    "BUSINESS_FOOD_ORDERS": "actions_order_online",
}
DAILY_METRICS = tuple(METRIC_FIELDS)

PEAK_DAYS = 3


def transform_time_series(series: List[Dict[str, Any]]) -> List[DailyBusinessMetrics]:
    """Pivot per-metric series into one record per day, oldest first."""
    days: Dict[str, Dict[str, int]] = defaultdict(lambda: defaultdict(int))
    for entry in series:
        field = METRIC_FIELDS.get(entry.get("dailyMetric", ""))
        if field is None:
            continue
        for point in entry.get("timeSeries", {}).get("datedValues", []):
            d = point.get("date", {})
            key = f"{d.get('year', 0):04d}-{d.get('month', 0):02d}-{d.get('day', 0):02d}"
            # Zero days omit "value"
            days[key][field] += int(point.get("value") or 0)

    return [DailyBusinessMetrics(date=day, **fields) for day, fields in sorted(days.items())]


def process_restaurant_metrics(metrics: List[DailyBusinessMetrics]) -> BusinessProfileInsights:
    """Totals, conversion rate, peak days and search-vs-maps split."""
    total_views = sum(m.views for m in metrics)
    total_directions = sum(m.actions_directions for m in metrics)
    total_website = sum(m.actions_website for m in metrics)
    total_phone = sum(m.actions_phone for m in metrics)

    avg_daily_views = round(total_views / len(metrics)) if metrics else 0
    conversion_rate = (
        (total_directions + total_website + total_phone) / total_views * 100
        if total_views
        else 0.0
    )

    peak = sorted(metrics, key=lambda m: m.views, reverse=True)[:PEAK_DAYS]

    total_search = sum(m.views_on_search for m in metrics)
    total_maps = sum(m.views_on_maps for m in metrics)
    split_total = total_search + total_maps

    return BusinessProfileInsights(
        summary=BusinessProfileSummary(
            total_views=total_views,
            total_directions=total_directions,
            total_website_clicks=total_website,
            total_phone_calls=total_phone,
            avg_daily_views=avg_daily_views,
            conversion_rate=round(conversion_rate, 2),
        ),
        daily_data=metrics,
        peak_days=[m.date for m in peak],
        search_vs_maps={
            "search": round(total_search / split_total * 100) if split_total else 0,
            "maps": round(total_maps / split_total * 100) if split_total else 0,
        },
        customer_actions={
            "directions": total_directions,
            "website": total_website,
            "phone": total_phone,
            "menu_views": sum(m.actions_menu_views for m in metrics),
            "reservations": sum(m.actions_reservations for m in metrics),
            "online_orders": sum(m.actions_order_online for m in metrics),
        },
    )
