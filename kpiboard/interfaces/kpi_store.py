"""
KPI store interface.

Defines the contract of the persistent key/value + object store behind the
persistence gateway. Every save is an upsert.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import Optional

from kpiboard.models.access_log import AccessLog
from kpiboard.models.app_config import AppConfig
from kpiboard.models.department import Departments
from kpiboard.models.snapshot import WeeklySnapshot
from kpiboard.models.weights import Weights


class IKpiStore(ABC):
    """Abstract interface for KPI board persistence."""

    @abstractmethod
    async def init(self) -> None:
        """
        Establish the underlying store (create tables, open files).

        Raises:
            InfrastructureError: If the store cannot be opened
        """
        pass

    @abstractmethod
    async def seed_data(
        self,
        data: Departments,
        weights: Weights,
        config: AppConfig,
    ) -> None:
        """
        Write the entities that do not exist yet. Existing entries are never
        overwritten, so calling this on every startup is safe.

        Args:
            data: Default departments
            weights: Default weight configuration per department
            config: Default organizational configuration
        """
        pass

    @abstractmethod
    async def get_all_data(self) -> Departments:
        """Return every stored department keyed by ID (empty dict if none)."""
        pass

    @abstractmethod
    async def get_all_weights(self) -> Weights:
        """Return every stored weight configuration keyed by department ID."""
        pass

    @abstractmethod
    async def get_app_config(self) -> Optional[AppConfig]:
        """Return the stored configuration, or None if absent."""
        pass

    @abstractmethod
    async def get_snapshots(self) -> list[WeeklySnapshot]:
        """Return stored snapshots ordered by ascending timestamp."""
        pass

    @abstractmethod
    async def save_data(self, data: Departments) -> None:
        """Upsert every department of the map."""
        pass

    @abstractmethod
    async def save_weights(self, weights: Weights) -> None:
        """Upsert every weight configuration of the map."""
        pass

    @abstractmethod
    async def save_app_config(self, config: AppConfig) -> None:
        """Upsert the configuration."""
        pass

    @abstractmethod
    async def save_snapshot(self, snapshot: WeeklySnapshot) -> None:
        """Upsert one snapshot by ID."""
        pass

    @abstractmethod
    async def log_action(self, entry: AccessLog) -> None:
        """Append one access log entry."""
        pass

    @abstractmethod
    async def get_logs(self, limit: int = 200) -> list[AccessLog]:
        """
        List access log entries, newest first.

        Args:
            limit: Maximum number of results
        """
        pass
