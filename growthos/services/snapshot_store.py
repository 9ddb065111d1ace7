"""Growth OS — Snapshot Persistence with a Write-Ahead Cache.

Funnels and dashboard metrics are both stored as append-only JSON snapshots
per client. Edits update memory first and are then written to the database;
a failed write lands in a JSON-lines cache that the scheduler drains back
into the database. Memory is never rolled back.
"""

import threading
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import Any, Callable, Dict, Generic, List, Optional, Tuple, Type, TypeVar

import pydantic
from pydantic import BaseModel
from sqlalchemy.engine import Engine
from sqlmodel import Session, SQLModel, select

from growthos.core.logging import get_logger

logger = get_logger("services.snapshots")

HISTORY_LIMIT = 50

DataT = TypeVar("DataT", bound=BaseModel)


def as_utc(value: datetime) -> datetime:
    # SQLite hands back naive datetimes; every stored value is UTC
    return value if value.tzinfo else value.replace(tzinfo=timezone.utc)


class SaveResult(BaseModel):
    """Outcome of one write; ``error`` is set when it went to the cache instead."""

    persisted: bool
    snapshot_id: Optional[int] = None
    cached: bool = False
    error: Optional[str] = None


# ─────────────────────────────────────────────
# Database
# ─────────────────────────────────────────────


class SnapshotRepository:
    """Append-only snapshot table; the row with the newest ``created_at`` is current.

    ``table`` must have ``id``, ``client_id``, ``created_at`` and ``data_json``
    columns. Replayed cache entries keep the time of the original edit, so a
    late replay never outranks a newer save.
    """

    table: Type[SQLModel]

    def __init__(self, engine: Optional[Engine] = None):
        if engine is None:
            from growthos.database import engine as default_engine

            engine = default_engine
        self.engine = engine

    def save(
        self, client_id: str, data: BaseModel, created_at: Optional[datetime] = None
    ):
        snapshot = self.table(client_id=client_id, data_json=data.model_dump_json())
        if created_at is not None:
            snapshot.created_at = created_at
        with Session(self.engine) as session:
            session.add(snapshot)
            session.commit()
            session.refresh(snapshot)
        return snapshot

    def latest(self, client_id: str):
        table = self.table
        with Session(self.engine) as session:
            return session.exec(
                select(table)
                .where(table.client_id == client_id)
                .order_by(table.created_at.desc(), table.id.desc())  # type: ignore
                .limit(1)
            ).first()

    def history(self, client_id: str, days: int = 30, limit: int = HISTORY_LIMIT) -> list:
        table = self.table
        cutoff = datetime.now(timezone.utc) - timedelta(days=days)
        with Session(self.engine) as session:
            return list(
                session.exec(
                    select(table)
                    .where(table.client_id == client_id)
                    .where(table.created_at >= cutoff)
                    .order_by(table.created_at.desc(), table.id.desc())  # type: ignore
                    .limit(limit)
                ).all()
            )


# ─────────────────────────────────────────────
# Write-ahead cache
# ─────────────────────────────────────────────


class CachedSnapshot(BaseModel):
    """One line of the write-ahead cache."""

    client_id: str
    cached_at: datetime
    data: Dict[str, Any]


class WriteAheadCache(Generic[DataT]):
    """JSON-lines file of snapshots that could not be written to the database.

    Lines that cannot be parsed as ``model`` are moved to a ``.rejected`` file
    next to the cache so they never block the entries behind them.
    """

    def __init__(self, path: str, model: Type[DataT]):
        self.path = Path(path)
        self.rejected_path = self.path.with_name(self.path.name + ".rejected")
        self.model = model
        self._lock = threading.Lock()

    def append(self, client_id: str, data: DataT) -> None:
        entry = CachedSnapshot(
            client_id=client_id,
            cached_at=datetime.now(timezone.utc),
            data=data.model_dump(mode="json"),
        )
        with self._lock:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with self.path.open("a", encoding="utf-8") as fh:
                fh.write(entry.model_dump_json() + "\n")

    def _read(self) -> List[str]:
        if not self.path.exists():
            return []
        return [line for line in self.path.read_text(encoding="utf-8").splitlines() if line.strip()]

    def _parse(self, line: str) -> Tuple[CachedSnapshot, DataT]:
        entry = CachedSnapshot.model_validate_json(line)
        return entry, self.model.model_validate(entry.data)

    def pending(self) -> int:
        with self._lock:
            return len(self._read())

    def latest(self, client_id: str) -> Optional[Tuple[datetime, DataT]]:
        """``(cached_at, data)`` of the newest readable entry for ``client_id``."""
        with self._lock:
            lines = self._read()
        for line in reversed(lines):
            try:
                entry, data = self._parse(line)
            except pydantic.ValidationError:
                continue
            if entry.client_id == client_id:
                return entry.cached_at, data
        return None

    def drain(self, writer: Callable[[str, DataT, datetime], object]) -> int:
        """Replay entries oldest first; stop at the first failed write.

        Returns the number of entries written. Unwritten entries stay cached.
        """
        with self._lock:
            lines = self._read()
            written = 0
            rejected: List[str] = []
            remaining: List[str] = []
            for i, line in enumerate(lines):
                try:
                    entry, data = self._parse(line)
                except pydantic.ValidationError as e:
                    logger.error(
                        f"Unreadable cache entry moved to {self.rejected_path.name}: "
                        f"{e.error_count()} errors"
                    )
                    rejected.append(line)
                    continue
                try:
                    writer(entry.client_id, data, entry.cached_at)
                except Exception as e:
                    logger.warning(f"Cache replay stopped after {written} entries: {e}")
                    remaining = lines[i:]
                    break
                written += 1

            if rejected:
                with self.rejected_path.open("a", encoding="utf-8") as fh:
                    fh.write("\n".join(rejected) + "\n")
            if remaining:
                self.path.write_text("\n".join(remaining) + "\n", encoding="utf-8")
            elif self.path.exists():
                self.path.unlink()
            return written


# ─────────────────────────────────────────────
# Service base
# ─────────────────────────────────────────────


class SnapshotService(Generic[DataT]):
    """In-memory state per client, persisted through repository or cache."""

    name = "snapshot"
    model: Type[DataT]

    def __init__(self, repository: SnapshotRepository, cache: WriteAheadCache[DataT]):
        self.repository = repository
        self.cache = cache
        self._state: Dict[str, DataT] = {}

    def _persist(self, client_id: str, data: DataT) -> SaveResult:
        try:
            snapshot = self.repository.save(client_id, data)
        except Exception as e:
            logger.error(
                f"{self.name} save failed, caching locally: {e}", extra={"entity_id": client_id}
            )
            self.cache.append(client_id, data)
            return SaveResult(persisted=False, cached=True, error=str(e))
        return SaveResult(persisted=True, snapshot_id=snapshot.id)

    def _decode(self, data_json: str) -> DataT:
        return self.model.model_validate_json(data_json)

    def _stored(self, client_id: str) -> Optional[DataT]:
        """Newest known data: the database row or a still-cached edit, whichever is later."""
        pending = self.cache.latest(client_id)
        try:
            snapshot = self.repository.latest(client_id)
        except Exception as e:
            logger.error(f"{self.name} read failed: {e}", extra={"entity_id": client_id})
            if client_id in self._state:
                return self._state[client_id]
            return pending[1] if pending else None
        if pending is not None and (
            snapshot is None or pending[0] > as_utc(snapshot.created_at)
        ):
            return pending[1]
        if snapshot is None:
            return None
        return self._decode(snapshot.data_json)

    def sync(self) -> int:
        """Drain the write-ahead cache; replayed rows keep their original edit time."""
        written = self.cache.drain(self.repository.save)
        if written:
            logger.info(f"Synced {written} cached {self.name} snapshots")
        return written
