"""Growth OS — Meta Raw → Normalized Transformer.

Converts raw Meta insight rows into ``MetaAdMetricRecord`` and rolls them up
into the restaurant insight summary.
"""

from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List, Optional

from growthos.models.ad_models import (
    AgeShare,
    ContentPerformance,
    DailyTrend,
    GenderShare,
    MetaAdMetricRecord,
    PlatformBreakdown,
    SpendConversions,
)

# Actions counted as restaurant conversions (orders, leads, bookings, chats)
CONVERSION_ACTIONS = {
    "purchase",
    "omni_purchase",
    "offsite_conversion.fb_pixel_purchase",
    "lead",
    "offsite_conversion.fb_pixel_lead",
    "onsite_conversion.lead_grouped",
    "schedule_total",
    "onsite_conversion.messaging_conversation_started_7d",
}

PUBLISHER_PLATFORMS = {
    "facebook": "facebook",
    "instagram": "instagram",
    "messenger": "messenger",
    "audience_network": "audience_network",
}

GENDER_LABELS = {"female": "Female", "male": "Male", "unknown": "Unknown"}


def _safe_float(value: Any) -> float:
    """Safely convert a value to float."""
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _safe_int(value: Any) -> int:
    return int(_safe_float(value))


def _safe_decimal(value: Any) -> Decimal:
    try:
        return Decimal(str(value)) if value not in (None, "") else Decimal("0")
    except InvalidOperation:
        return Decimal("0")


def _action_total(actions: Optional[List[Dict[str, Any]]], wanted: set) -> float:
    return sum(
        _safe_float(a.get("value", 0))
        for a in actions or []
        if a.get("action_type") in wanted
    )


def extract_conversions(row: Dict[str, Any]) -> int:
    """Sum the restaurant conversion actions of an insight row."""
    return int(_action_total(row.get("actions"), CONVERSION_ACTIONS))


def format_targeting(targeting: Optional[Dict[str, Any]]) -> str:
    """Readable one-liner for an ad set's targeting spec."""
    if not targeting:
        return "Unknown"

    parts = []
    if targeting.get("age_min") or targeting.get("age_max"):
        parts.append(f"Ages {targeting.get('age_min') or 13}-{targeting.get('age_max') or 65}")

    genders = targeting.get("genders") or []
    if genders:
        labels = ["Male" if g == 1 else "Female" for g in genders]
        parts.append(f"Gender: {', '.join(labels)}")

    cities = (targeting.get("geo_locations") or {}).get("cities")
    if cities:
        parts.append(f"Cities: {len(cities)} locations")

    return " | ".join(parts) if parts else "Broad Targeting"


def transform_insight_row(
    row: Dict[str, Any],
    level: str = "campaign",
    status: str = "",
    targeting: str = "",
) -> MetaAdMetricRecord:
    """Normalize one Meta insight row."""
    spend = _safe_decimal(row.get("spend"))
    conversions = extract_conversions(row)
    entity_id = row.get(f"{level}_id", "")
    entity_name = row.get(f"{level}_name", "")

    return MetaAdMetricRecord(
        level=level,
        entity_id=entity_id,
        entity_name=entity_name,
        campaign_name=row.get("campaign_name", ""),
        objective=row.get("objective") or "UNKNOWN",
        status=status,
        targeting=targeting,
        impressions=_safe_int(row.get("impressions")),
        clicks=_safe_int(row.get("clicks")),
        spend=spend,
        conversions=conversions,
        ctr=_safe_float(row.get("ctr")),
        cpc=_safe_float(row.get("cpc")),
        reach=_safe_int(row.get("reach")),
        frequency=_safe_float(row.get("frequency")),
        cost_per_result=round(float(spend) / conversions, 2) if conversions else 0.0,
        social_spend=_safe_float(row.get("social_spend")),
        video_views=int(_action_total(row.get("video_play_actions"), {"video_view"})),
    )


def transform_daily(rows: List[Dict[str, Any]]) -> List[DailyTrend]:
    return [
        DailyTrend(
            date=row.get("date_start", ""),
            impressions=_safe_int(row.get("impressions")),
            clicks=_safe_int(row.get("clicks")),
            spend=_safe_float(row.get("spend")),
            conversions=extract_conversions(row),
        )
        for row in rows
    ]


def transform_platform_breakdown(rows: List[Dict[str, Any]]) -> PlatformBreakdown:
    """Fold ``publisher_platform`` breakdown rows into the four known surfaces."""
    totals = {key: SpendConversions() for key in PUBLISHER_PLATFORMS.values()}
    for row in rows:
        key = PUBLISHER_PLATFORMS.get(row.get("publisher_platform", ""))
        if key is None:
            continue
        current = totals[key]
        totals[key] = SpendConversions(
            spend=round(current.spend + _safe_float(row.get("spend")), 2),
            conversions=current.conversions + extract_conversions(row),
        )
    return PlatformBreakdown(**totals)


def _shares(rows: List[Dict[str, Any]], key: str) -> Dict[str, float]:
    impressions: Dict[str, int] = {}
    for row in rows:
        label = row.get(key, "unknown")
        impressions[label] = impressions.get(label, 0) + _safe_int(row.get("impressions"))
    total = sum(impressions.values())
    if not total:
        return {}
    return {label: round(count / total * 100, 1) for label, count in impressions.items()}


def transform_age_breakdown(rows: List[Dict[str, Any]]) -> List[AgeShare]:
    shares = _shares(rows, "age")
    return [
        AgeShare(age_range=label, percentage=pct)
        for label, pct in sorted(shares.items(), key=lambda kv: kv[1], reverse=True)
    ]


def transform_gender_breakdown(rows: List[Dict[str, Any]]) -> List[GenderShare]:
    shares = _shares(rows, "gender")
    return [
        GenderShare(gender=GENDER_LABELS.get(label, label.title()), percentage=pct)
        for label, pct in sorted(shares.items(), key=lambda kv: kv[1], reverse=True)
    ]


def transform_best_content(rows: List[Dict[str, Any]], limit: int = 5) -> List[ContentPerformance]:
    """Top ads by conversions, then engagement."""
    content = [
        ContentPerformance(
            ad_id=row.get("ad_id", ""),
            ad_name=row.get("ad_name", ""),
            engagement=_safe_int(row.get("inline_post_engagement")),
            conversions=extract_conversions(row),
            spend=_safe_float(row.get("spend")),
        )
        for row in rows
    ]
    content.sort(key=lambda c: (c.conversions, c.engagement), reverse=True)
    return content[:limit]
