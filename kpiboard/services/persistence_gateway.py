"""
Persistence gateway.

Bridges the in-memory state and the persistent store:
- bootstrap: init, seed missing entities, load, mark ready
- autosave: one debounced write per burst of changes (APScheduler date job)
- restore and export of the backup payload
"""

from __future__ import annotations

import asyncio
import time
from collections.abc import Mapping
from typing import Any, Callable, Optional

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.date import DateTrigger

from kpiboard.core.config import Settings, get_settings
from kpiboard.core.exceptions import InfrastructureError, KpiBoardError, ValidationError
from kpiboard.core.logger import setup_logger
from kpiboard.interfaces.kpi_store import IKpiStore
from kpiboard.models.app_config import AppConfig
from kpiboard.models.backup import BACKUP_CONTAINERS, BACKUP_FIELDS, BackupPayload
from kpiboard.models.department import Departments
from kpiboard.models.weights import Weights
from kpiboard.services.snapshot_history import SnapshotHistory
from kpiboard.services.state_store import StateChange, StateStore
from kpiboard.utils.datetime_utils import seconds_from_now

logger = setup_logger(__name__)

AUTOSAVE_JOB_ID = "autosave"
SAVING_INDICATOR_JOB_ID = "saving_indicator"


class PersistenceGateway:
    def __init__(
        self,
        store: IKpiStore,
        state: StateStore,
        history: SnapshotHistory,
        is_authenticated: Callable[[], bool],
        settings: Optional[Settings] = None,
        scheduler: Optional[AsyncIOScheduler] = None,
    ):
        self._store = store
        self._state = state
        self._history = history
        self._is_authenticated = is_authenticated
        self._settings = settings or get_settings()
        self._scheduler = scheduler or AsyncIOScheduler()
        self._write_lock = asyncio.Lock()
        self._ready = False
        self._saving = False

    @property
    def is_ready(self) -> bool:
        return self._ready

    @property
    def is_saving(self) -> bool:
        return self._saving

    @property
    def has_pending_autosave(self) -> bool:
        return self._scheduler.running and self._scheduler.get_job(AUTOSAVE_JOB_ID) is not None

    # ===========================================
    # Bootstrap
    # ===========================================

    async def bootstrap(
        self,
        initial_data: Departments,
        initial_weights: Weights,
        initial_config: AppConfig,
    ) -> None:
        """
        Initialize the store, seed missing entities and load the stored state.

        The in-memory state keeps the given defaults for anything the store
        does not return. Autosave is only armed once loading finished.

        Raises:
            InfrastructureError: If the store cannot be initialized or read
        """
        try:
            await self._store.init()
            await self._store.seed_data(initial_data, initial_weights, initial_config)
            data = await self._store.get_all_data()
            weights = await self._store.get_all_weights()
            config = await self._store.get_app_config()
            snapshots = await self._store.get_snapshots()
        except InfrastructureError:
            raise
        except Exception as e:
            raise InfrastructureError(f"Failed to bootstrap persistence: {e}") from e

        if data:
            self._state.replace(data=data)
        else:
            logger.warning("Store returned no departments, keeping default data")
        if weights:
            self._state.replace(weights=weights)
        if config is not None:
            self._state.replace(config=config)
        self._history.load(snapshots)

        if not self._scheduler.running:
            self._scheduler.start()
        self._ready = True
        logger.info(
            f"Persistence ready: {len(self._state.data)} department(s), "
            f"{len(self._history.snapshots)} snapshot(s)"
        )

    # ===========================================
    # Autosave
    # ===========================================

    def handle_change(self, change: StateChange) -> None:
        """State listener: every change re-arms the debounced write."""
        self.schedule_autosave()

    def schedule_autosave(self) -> bool:
        """(Re)arm the autosave job. Returns False when saving is not allowed yet."""
        if not self._ready or not self._is_authenticated():
            return False
        self._scheduler.add_job(
            self._autosave,
            DateTrigger(run_date=seconds_from_now(self._settings.AUTOSAVE_DEBOUNCE_SECONDS)),
            id=AUTOSAVE_JOB_ID,
            name="Debounced autosave",
            replace_existing=True,
            misfire_grace_time=None,
            max_instances=2,
        )
        return True

    async def _autosave(self) -> None:
        await self.save_now()

    async def save_now(self) -> bool:
        """
        Write data (when non-empty), weights and config from the current state.

        Failures are logged and reported as False; the next change retries.
        """
        async with self._write_lock:
            self._saving = True
            started = time.monotonic()
            data = self._state.data
            weights = self._state.weights
            config = self._state.config
            try:
                if data:
                    await self._store.save_data(data)
                await self._store.save_weights(weights)
                await self._store.save_app_config(config)
                saved = True
                logger.debug("Autosave completed")
            except Exception as e:
                saved = False
                logger.error(f"Autosave failed: {e}")
            finally:
                self._release_indicator(time.monotonic() - started)
            return saved

    def _release_indicator(self, elapsed: float) -> None:
        remaining = self._settings.SAVING_INDICATOR_SECONDS - elapsed
        if remaining <= 0 or not self._scheduler.running:
            self._saving = False
            return
        self._scheduler.add_job(
            self._clear_saving,
            DateTrigger(run_date=seconds_from_now(remaining)),
            id=SAVING_INDICATOR_JOB_ID,
            replace_existing=True,
            misfire_grace_time=None,
        )

    def _clear_saving(self) -> None:
        self._saving = False

    async def flush_pending(self) -> bool:
        """Run a pending autosave immediately. Returns False when none was pending."""
        if not self.cancel_pending():
            return False
        return await self.save_now()

    def cancel_pending(self) -> bool:
        if not self._scheduler.running:
            return False
        try:
            self._scheduler.remove_job(AUTOSAVE_JOB_ID)
        except JobLookupError:
            return False
        return True

    def shutdown(self) -> None:
        """Drop the pending write and stop the scheduler."""
        if self.cancel_pending():
            logger.info("Cancelled pending autosave on shutdown")
        if self._scheduler.running:
            self._scheduler.shutdown(wait=False)
        self._saving = False
        self._ready = False

    # ===========================================
    # Backup
    # ===========================================

    async def restore(self, payload: Any) -> list[str]:
        """
        Apply a backup payload to memory and the store.

        Only the top-level keys present in the payload are replaced.

        Returns:
            Names of the restored fields

        Raises:
            ValidationError: If the payload is not a non-empty object, holds
                none of the backup keys, or a key is not of its container
                type; nothing is changed in that case
        """
        if not isinstance(payload, Mapping) or not payload:
            raise ValidationError("Backup must be a non-empty JSON object")
        fields = [name for name in BACKUP_FIELDS if payload.get(name) is not None]
        if not fields:
            raise ValidationError(
                "Backup contains none of data, weights, config or snapshots"
            )
        for name in fields:
            container = BACKUP_CONTAINERS[name]
            if not isinstance(payload[name], container):
                raise ValidationError(
                    f"Backup field {name!r} must be a JSON "
                    f"{'array' if container is list else 'object'}"
                )

        # Entries are applied as given; deep validation would hook in here
        backup = BackupPayload.from_document(payload)

        self._state.replace(data=backup.data, weights=backup.weights, config=backup.config)
        if backup.snapshots is not None:
            self._history.load(backup.snapshots)

        try:
            if backup.data is not None:
                await self._store.save_data(backup.data)
            if backup.weights is not None:
                await self._store.save_weights(backup.weights)
            if backup.config is not None:
                await self._store.save_app_config(backup.config)
            for snapshot in backup.snapshots or []:
                await self._store.save_snapshot(snapshot)
        except KpiBoardError:
            raise
        except Exception as e:
            raise InfrastructureError(f"Restored state could not be persisted: {e}") from e

        logger.info(f"Restored backup fields: {', '.join(fields)}")
        return fields

    def export_backup(self) -> BackupPayload:
        return BackupPayload(
            data=dict(self._state.data),
            weights=dict(self._state.weights),
            config=self._state.config,
            snapshots=list(self._history.snapshots),
        )
