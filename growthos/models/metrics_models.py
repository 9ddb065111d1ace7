"""Growth OS — Dashboard Headline Metrics."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, Optional, Union

from pydantic import BaseModel, field_validator
from sqlmodel import SQLModel, Field as SQLField

from growthos.models.funnel_models import DataSource

REQUIRED_METRICS = ("gac", "email_opt_ins", "total_reach")


class MetricTrend(str, Enum):
    UP = "up"
    DOWN = "down"
    STABLE = "stable"


class DashboardMetric(BaseModel):
    """One headline number; ``value`` is either raw or already formatted ("$12.45")."""

    value: Union[int, float, str]
    change: Optional[float] = None
    trend: MetricTrend = MetricTrend.STABLE
    last_updated: Optional[str] = None
    data_source: DataSource
    notes: Optional[str] = None
    time_period: Optional[str] = None


class DashboardMetrics(BaseModel):
    """Guest acquisition cost, email opt-ins and total reach, plus any extras."""

    metrics: Dict[str, DashboardMetric]

    @field_validator("metrics")
    @classmethod
    def _required_present(cls, v: Dict[str, DashboardMetric]) -> Dict[str, DashboardMetric]:
        missing = [key for key in REQUIRED_METRICS if key not in v]
        if missing:
            raise ValueError(f"missing metrics: {', '.join(missing)}")
        return v


class DashboardMetricsSnapshot(SQLModel, table=True):
    """Every save appends a row; the newest row per client is current."""

    __tablename__ = "dashboard_metrics"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    client_id: str = SQLField(index=True)
    created_at: datetime = SQLField(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )
    data_json: str = SQLField(description="DashboardMetrics as JSON")
