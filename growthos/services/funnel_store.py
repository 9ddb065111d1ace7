"""Growth OS — Funnel Persistence.

Every load reconciles stage totals against their sources and saves any
correction. Edits go through the shared snapshot write path: memory first,
then the database, then the write-ahead cache when the database refuses.
"""

from datetime import date, datetime
from typing import List, Optional

from pydantic import BaseModel

from growthos.analyzer import funnel_reconciler
from growthos.config import settings
from growthos.core.logging import get_logger
from growthos.demo_data import default_funnel_data
from growthos.models.funnel_models import FunnelData, FunnelSnapshot
from growthos.services.snapshot_store import (
    SaveResult,
    SnapshotRepository,
    SnapshotService,
    WriteAheadCache,
    as_utc,
)

logger = get_logger("services.funnel")


class FunnelView(BaseModel):
    """A loaded funnel plus what reconciliation did to it."""

    client_id: str
    data: FunnelData
    corrected_stages: List[str] = []
    save: Optional[SaveResult] = None


class HistoryEntry(BaseModel):
    id: int
    created_at: datetime
    data: FunnelData


class FunnelRepository(SnapshotRepository):
    table = FunnelSnapshot


def funnel_cache(path: Optional[str] = None) -> WriteAheadCache[FunnelData]:
    return WriteAheadCache(path or settings.effective_funnel_cache_path, FunnelData)


class FunnelService(SnapshotService[FunnelData]):
    """Per-client funnel state with reconcile-on-load and optimistic writes."""

    name = "funnel"
    model = FunnelData

    def __init__(
        self,
        repository: Optional[FunnelRepository] = None,
        cache: Optional[WriteAheadCache[FunnelData]] = None,
    ):
        super().__init__(repository or FunnelRepository(), cache or funnel_cache())

    def load(self, client_id: str, today: Optional[date] = None) -> FunnelView:
        """Read the current funnel, reconcile it, and save any correction.

        Cached edits are replayed first so the read sees them.
        """
        self.sync()
        stored = self._stored(client_id)
        seeded = stored is None
        if seeded:
            stored = default_funnel_data(today)

        data, corrected = funnel_reconciler.reconcile(stored, today)
        self._state[client_id] = data

        save = None
        if seeded or corrected:
            save = self._persist(client_id, data)
        if corrected:
            logger.info(
                f"Reconciled stages: {', '.join(corrected)}", extra={"entity_id": client_id}
            )
        return FunnelView(client_id=client_id, data=data, corrected_stages=corrected, save=save)

    def current(self, client_id: str) -> FunnelData:
        if client_id not in self._state:
            return self.load(client_id).data
        return self._state[client_id]

    def _apply(self, client_id: str, data: FunnelData) -> FunnelView:
        self._state[client_id] = data
        return FunnelView(client_id=client_id, data=data, save=self._persist(client_id, data))

    def replace(self, client_id: str, data: FunnelData) -> FunnelView:
        """Store a whole funnel as given; totals are checked on the next load."""
        return self._apply(client_id, data.model_copy(deep=True))

    def set_stage_total(self, client_id: str, stage: str, value: int) -> FunnelView:
        updated = funnel_reconciler.set_stage_total(self.current(client_id), stage, value)
        return self._apply(client_id, updated)

    def update_source(
        self,
        client_id: str,
        stage: str,
        index: int,
        value: Optional[int] = None,
        name: Optional[str] = None,
    ) -> FunnelView:
        """Rename and/or revalue one source; both are validated before anything changes."""
        updated = self.current(client_id)
        if name is not None:
            updated = funnel_reconciler.rename_source(updated, stage, index, name)
        if value is not None:
            updated = funnel_reconciler.set_source_value(updated, stage, index, value)
        return self._apply(client_id, updated)

    def history(self, client_id: str, days: int = 30) -> List[HistoryEntry]:
        return [
            HistoryEntry(
                id=s.id,
                created_at=as_utc(s.created_at),
                data=self._decode(s.data_json),
            )
            for s in self.repository.history(client_id, days)
        ]


_service: Optional[FunnelService] = None


def get_funnel_service() -> FunnelService:
    """Dependency — process-wide funnel service."""
    global _service
    if _service is None:
        _service = FunnelService()
    return _service
