"""Growth OS — Dashboard Metrics Persistence.

Headline metrics use the same snapshot write path as the funnel. Reads fall
back to the default metrics when nothing usable is stored.
"""

from datetime import date
from typing import Optional

import pydantic
from pydantic import BaseModel

from growthos.config import settings
from growthos.core.logging import get_logger
from growthos.demo_data import default_dashboard_metrics
from growthos.models.metrics_models import DashboardMetrics, DashboardMetricsSnapshot
from growthos.services.snapshot_store import (
    SaveResult,
    SnapshotRepository,
    SnapshotService,
    WriteAheadCache,
)

logger = get_logger("services.metrics")


class MetricsView(BaseModel):
    client_id: str
    data: DashboardMetrics
    defaults: bool = False
    save: Optional[SaveResult] = None


class MetricsRepository(SnapshotRepository):
    table = DashboardMetricsSnapshot


def metrics_cache(path: Optional[str] = None) -> WriteAheadCache[DashboardMetrics]:
    return WriteAheadCache(path or settings.effective_metrics_cache_path, DashboardMetrics)


class MetricsService(SnapshotService[DashboardMetrics]):
    name = "metrics"
    model = DashboardMetrics

    def __init__(
        self,
        repository: Optional[MetricsRepository] = None,
        cache: Optional[WriteAheadCache[DashboardMetrics]] = None,
    ):
        super().__init__(repository or MetricsRepository(), cache or metrics_cache())

    def load(self, client_id: str, today: Optional[date] = None) -> MetricsView:
        """Latest saved metrics, or the defaults; defaults are not written back."""
        self.sync()
        try:
            stored = self._stored(client_id)
        except pydantic.ValidationError as e:
            logger.warning(
                f"Stored dashboard metrics invalid, using defaults: {e.error_count()} errors",
                extra={"entity_id": client_id},
            )
            stored = None

        if stored is None:
            return MetricsView(
                client_id=client_id, data=default_dashboard_metrics(today), defaults=True
            )
        self._state[client_id] = stored
        return MetricsView(client_id=client_id, data=stored)

    def save(self, client_id: str, data: DashboardMetrics) -> MetricsView:
        data = data.model_copy(deep=True)
        self._state[client_id] = data
        return MetricsView(client_id=client_id, data=data, save=self._persist(client_id, data))


_service: Optional[MetricsService] = None


def get_metrics_service() -> MetricsService:
    """Dependency — process-wide metrics service."""
    global _service
    if _service is None:
        _service = MetricsService()
    return _service
