"""Growth OS — Google Ads Raw → Normalized Transformer."""

from collections import defaultdict
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List

from growthos.models.ad_models import (
    DailyTrend,
    GoogleAdsMetricRecord,
    GoogleAdsRestaurantInsights,
    PeakDay,
)

MICROS = Decimal(1_000_000)
WEEKDAYS = ["Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday", "Sunday"]
TOP_CAMPAIGNS = 5


def micros_to_currency(value: Any) -> Decimal:
    """``cost_micros`` and ``average_cpc`` come as micro-units, often as strings."""
    try:
        return (Decimal(str(value or 0)) / MICROS).quantize(Decimal("0.01"))
    except ArithmeticError:
        return Decimal("0.00")


def _num(value: Any) -> float:
    try:
        return float(value or 0)
    except (TypeError, ValueError):
        return 0.0


def transform_campaign_row(row: Dict[str, Any]) -> GoogleAdsMetricRecord:
    campaign = row.get("campaign", {})
    metrics = row.get("metrics", {})

    spend = micros_to_currency(metrics.get("costMicros"))
    conversions = int(round(_num(metrics.get("conversions"))))
    conversion_value = Decimal(str(round(_num(metrics.get("conversionsValue")), 2)))

    return GoogleAdsMetricRecord(
        entity_id=str(campaign.get("id", "")),
        entity_name=campaign.get("name", ""),
        campaign_type=campaign.get("advertisingChannelType", ""),
        status=campaign.get("status", ""),
        impressions=int(_num(metrics.get("impressions"))),
        clicks=int(_num(metrics.get("clicks"))),
        spend=spend,
        conversions=conversions,
        conversion_value=conversion_value,
        # API reports ctr as a fraction; the dashboard shows percent like Meta
        ctr=round(_num(metrics.get("ctr")) * 100, 2),
        cpc=float(micros_to_currency(metrics.get("averageCpc"))),
        cpa=round(float(spend) / conversions, 2) if conversions else 0.0,
        roas=round(float(conversion_value) / float(spend), 2) if spend else 0.0,
    )


def transform_daily_rows(rows: List[Dict[str, Any]]) -> List[DailyTrend]:
    """Group rows by ``segments.date`` (a customer query may return several per day)."""
    days: Dict[str, Dict[str, float]] = defaultdict(lambda: defaultdict(float))
    for row in rows:
        day = row.get("segments", {}).get("date", "")
        metrics = row.get("metrics", {})
        bucket = days[day]
        bucket["impressions"] += _num(metrics.get("impressions"))
        bucket["clicks"] += _num(metrics.get("clicks"))
        bucket["spend"] += float(micros_to_currency(metrics.get("costMicros")))
        bucket["conversions"] += _num(metrics.get("conversions"))
        bucket["conversion_value"] += _num(metrics.get("conversionsValue"))

    return [
        DailyTrend(
            date=day,
            impressions=int(b["impressions"]),
            clicks=int(b["clicks"]),
            spend=round(b["spend"], 2),
            conversions=int(round(b["conversions"])),
            conversion_value=round(b["conversion_value"], 2),
        )
        for day, b in sorted(days.items())
    ]


def peak_days(trends: List[DailyTrend]) -> List[PeakDay]:
    """Weekday totals, best converting first."""
    by_day: Dict[str, List[float]] = {name: [0.0, 0.0] for name in WEEKDAYS}
    for t in trends:
        name = WEEKDAYS[date.fromisoformat(t.date).weekday()]
        by_day[name][0] += t.conversions
        by_day[name][1] += t.spend
    ranked = sorted(by_day.items(), key=lambda kv: kv[1][0], reverse=True)
    return [
        PeakDay(day=name, conversions=conv, spend=round(spend, 2))
        for name, (conv, spend) in ranked
        if conv or spend
    ]


def summarize_campaigns(
    campaigns: List[GoogleAdsMetricRecord], trends: List[DailyTrend]
) -> GoogleAdsRestaurantInsights:
    total_spend = float(sum(c.spend for c in campaigns))
    total_conversions = sum(c.conversions for c in campaigns)
    total_value = float(sum(c.conversion_value for c in campaigns))
    top = sorted(
        (c for c in campaigns if c.conversions > 0),
        key=lambda c: c.conversions,
        reverse=True,
    )[:TOP_CAMPAIGNS]

    return GoogleAdsRestaurantInsights(
        total_spend=round(total_spend, 2),
        total_conversions=total_conversions,
        total_conversion_value=round(total_value, 2),
        cost_per_conversion=round(total_spend / total_conversions, 2) if total_conversions else 0.0,
        roas=round(total_value / total_spend, 2) if total_spend else 0.0,
        top_performing_campaigns=top,
        peak_days=peak_days(trends),
        seasonal_trends=trends,
    )
