"""
Time-ordered history of weekly score snapshots.
"""

from __future__ import annotations

from typing import Iterable

from kpiboard.core.logger import setup_logger
from kpiboard.interfaces.kpi_store import IKpiStore
from kpiboard.models.snapshot import WeeklySnapshot

logger = setup_logger(__name__)


def _ordered(snapshots: Iterable[WeeklySnapshot]) -> list[WeeklySnapshot]:
    return sorted(snapshots, key=lambda snapshot: snapshot.timestamp)


class SnapshotHistory:
    """Snapshots sorted by ascending timestamp, unique by id."""

    def __init__(self, store: IKpiStore):
        self._store = store
        self._snapshots: list[WeeklySnapshot] = []

    @property
    def snapshots(self) -> tuple[WeeklySnapshot, ...]:
        return tuple(self._snapshots)

    def load(self, snapshots: Iterable[WeeklySnapshot]) -> None:
        by_id = {snapshot.id: snapshot for snapshot in snapshots}
        self._snapshots = _ordered(by_id.values())

    def upsert(self, snapshot: WeeklySnapshot) -> None:
        others = [item for item in self._snapshots if item.id != snapshot.id]
        self._snapshots = _ordered([*others, snapshot])

    async def save_snapshot(self, snapshot: WeeklySnapshot) -> WeeklySnapshot:
        self.upsert(snapshot)
        await self._store.save_snapshot(snapshot)
        logger.info(f"Saved snapshot {snapshot.id} ({snapshot.week_label})")
        return snapshot
