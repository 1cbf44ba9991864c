"""
Append-only audit trail of user mutations.

Entries are written to the store in insertion order without blocking the
caller. Only entries not yet written are held in memory; failed writes are
logged and dropped.
"""

from __future__ import annotations

import asyncio
import uuid
from collections import deque
from datetime import datetime
from typing import Callable, Optional

from kpiboard.core.logger import setup_logger
from kpiboard.interfaces.kpi_store import IKpiStore
from kpiboard.models.access_log import AccessLog
from kpiboard.models.enums import LogSeverity
from kpiboard.models.user import User
from kpiboard.services.state_store import StateChange
from kpiboard.utils.datetime_utils import now_utc, to_epoch_millis

logger = setup_logger(__name__)


class AuditLog:
    def __init__(self, store: IKpiStore, clock: Callable[[], datetime] = now_utc):
        self._store = store
        self._clock = clock
        self._pending: deque[AccessLog] = deque()
        self._flush_task: Optional[asyncio.Task] = None

    def log_action(
        self,
        user: User,
        action: str,
        details: Optional[str] = None,
        severity: LogSeverity = LogSeverity.INFO,
    ) -> AccessLog:
        now = self._clock()
        entry = AccessLog(
            id=str(uuid.uuid4()),
            user_id=user.id,
            user_name=user.name,
            action=action,
            details=details,
            type=severity,
            timestamp=to_epoch_millis(now),
            date=now.date().isoformat(),
            time=now.strftime("%H:%M:%S"),
        )
        self._pending.append(entry)
        self._schedule_flush()
        return entry

    def handle_change(self, change: StateChange) -> None:
        """State listener: audited changes become entries."""
        if change.is_audited:
            self.log_action(change.user, change.action, change.details, change.severity)

    async def flush(self) -> None:
        """Wait until every entry logged so far reached the store."""
        task = self._flush_task
        if task is not None and not task.done():
            await task
        await self._drain()

    def _schedule_flush(self) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            # No loop (sync caller); entries wait for the next flush()
            return
        if self._flush_task is None or self._flush_task.done():
            self._flush_task = loop.create_task(self._drain())

    async def _drain(self) -> None:
        while self._pending:
            entry = self._pending.popleft()
            try:
                await self._store.log_action(entry)
            except Exception as e:
                logger.error(f"Failed to write access log {entry.action!r}: {e}")
