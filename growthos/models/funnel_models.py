"""Growth OS — Marketing Funnel Models."""

from datetime import datetime, timezone
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator
from sqlmodel import SQLModel, Field as SQLField


class DataSource(str, Enum):
    """Where a stage's numbers came from."""

    API = "api"
    MANUAL = "manual"
    IMPORTED = "imported"


class FunnelSource(BaseModel):
    """A named contributor to a stage total, e.g. "Google Ads"."""

    name: str = Field(min_length=1)
    value: int = Field(ge=0)
    color: Optional[str] = None

    @field_validator("name")
    @classmethod
    def _name_not_blank(cls, v: str) -> str:
        if not v.strip():
            raise ValueError("source name must not be blank")
        return v


class FunnelStage(BaseModel):
    """One funnel step with its total and per-source breakdown."""

    value: int = Field(ge=0)
    sources: List[FunnelSource] = []
    last_updated: str
    data_source: DataSource = DataSource.MANUAL
    notes: Optional[str] = None

    @property
    def sources_total(self) -> int:
        return sum(s.value for s in self.sources)


class FunnelData(BaseModel):
    """Ordered stages: impressions → interest → opt-ins → redemptions."""

    stages: Dict[str, FunnelStage]

    @field_validator("stages")
    @classmethod
    def _at_least_one_stage(cls, v: Dict[str, FunnelStage]) -> Dict[str, FunnelStage]:
        if not v:
            raise ValueError("funnel must contain at least one stage")
        return v


# ─────────────────────────────────────────────
# DATABASE MODEL — append-only funnel snapshots
# ─────────────────────────────────────────────


class FunnelSnapshot(SQLModel, table=True):
    """Every save appends a row; the newest row per client is current."""

    __tablename__ = "funnel_snapshots"

    id: Optional[int] = SQLField(default=None, primary_key=True)
    client_id: str = SQLField(index=True)
    created_at: datetime = SQLField(
        default_factory=lambda: datetime.now(timezone.utc), index=True
    )
    data_json: str = SQLField(description="FunnelData as JSON")
