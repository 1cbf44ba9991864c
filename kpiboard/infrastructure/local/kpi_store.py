"""
SQLite implementation of the KPI store.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncEngine

from kpiboard.core.exceptions import InfrastructureError
from kpiboard.core.logger import setup_logger
from kpiboard.infrastructure.local.database import (
    AccessLogORM,
    AppConfigORM,
    DepartmentORM,
    SnapshotORM,
    WeightConfigORM,
    get_engine,
    get_session_factory,
    init_db,
)
from kpiboard.interfaces.kpi_store import IKpiStore
from kpiboard.models.access_log import AccessLog
from kpiboard.models.app_config import AppConfig
from kpiboard.models.department import Department, Departments
from kpiboard.models.enums import LogSeverity
from kpiboard.models.snapshot import WeeklySnapshot
from kpiboard.models.weights import WeightConfig, Weights

logger = setup_logger(__name__)

APP_CONFIG_KEY = "main"


class SqliteKpiStore(IKpiStore):
    """SQLite implementation of the KPI store."""

    def __init__(self, engine: AsyncEngine | None = None):
        """
        Initialize store.

        Args:
            engine: Optional async engine (for testing)
        """
        self._engine = engine or get_engine()
        self._session_factory = get_session_factory(self._engine)

    async def init(self) -> None:
        """Create tables if they do not exist."""
        try:
            await init_db(self._engine)
        except (SQLAlchemyError, OSError) as e:
            raise InfrastructureError(f"Failed to initialize store: {e}") from e

    async def seed_data(
        self,
        data: Departments,
        weights: Weights,
        config: AppConfig,
    ) -> None:
        """Insert missing departments, weights and configuration only."""
        async with self._session_factory() as session:
            seeded = 0
            for dept_id, department in data.items():
                if await session.get(DepartmentORM, dept_id) is None:
                    session.add(DepartmentORM(id=dept_id, payload=department.to_document()))
                    seeded += 1
            for dept_id, weight_config in weights.items():
                if await session.get(WeightConfigORM, dept_id) is None:
                    session.add(
                        WeightConfigORM(department_id=dept_id, payload=weight_config.to_document())
                    )
            if await session.get(AppConfigORM, APP_CONFIG_KEY) is None:
                session.add(AppConfigORM(key=APP_CONFIG_KEY, payload=config.to_document()))
            await session.commit()
            if seeded:
                logger.info(f"Seeded {seeded} department(s)")

    async def get_all_data(self) -> Departments:
        async with self._session_factory() as session:
            result = await session.execute(select(DepartmentORM))
            return {
                orm.id: Department.model_validate(orm.payload)
                for orm in result.scalars().all()
            }

    async def get_all_weights(self) -> Weights:
        async with self._session_factory() as session:
            result = await session.execute(select(WeightConfigORM))
            return {
                orm.department_id: WeightConfig.model_validate(orm.payload)
                for orm in result.scalars().all()
            }

    async def get_app_config(self) -> Optional[AppConfig]:
        async with self._session_factory() as session:
            orm = await session.get(AppConfigORM, APP_CONFIG_KEY)
            return AppConfig.model_validate(orm.payload) if orm else None

    async def get_snapshots(self) -> list[WeeklySnapshot]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(SnapshotORM).order_by(SnapshotORM.timestamp.asc())
            )
            return [WeeklySnapshot.model_validate(orm.payload) for orm in result.scalars().all()]

    async def save_data(self, data: Departments) -> None:
        async with self._session_factory() as session:
            for dept_id, department in data.items():
                await session.merge(DepartmentORM(id=dept_id, payload=department.to_document()))
            await session.commit()

    async def save_weights(self, weights: Weights) -> None:
        async with self._session_factory() as session:
            for dept_id, weight_config in weights.items():
                await session.merge(
                    WeightConfigORM(department_id=dept_id, payload=weight_config.to_document())
                )
            await session.commit()

    async def save_app_config(self, config: AppConfig) -> None:
        async with self._session_factory() as session:
            await session.merge(AppConfigORM(key=APP_CONFIG_KEY, payload=config.to_document()))
            await session.commit()

    async def save_snapshot(self, snapshot: WeeklySnapshot) -> None:
        async with self._session_factory() as session:
            await session.merge(
                SnapshotORM(
                    id=snapshot.id,
                    timestamp=snapshot.timestamp,
                    payload=snapshot.to_document(),
                )
            )
            await session.commit()

    async def log_action(self, entry: AccessLog) -> None:
        async with self._session_factory() as session:
            session.add(
                AccessLogORM(
                    id=entry.id,
                    user_id=entry.user_id,
                    user_name=entry.user_name,
                    action=entry.action,
                    details=entry.details,
                    type=entry.type.value,
                    timestamp=entry.timestamp,
                    date=entry.date,
                    time=entry.time,
                )
            )
            await session.commit()

    async def get_logs(self, limit: int = 200) -> list[AccessLog]:
        async with self._session_factory() as session:
            result = await session.execute(
                select(AccessLogORM)
                .order_by(AccessLogORM.timestamp.desc(), AccessLogORM.created_at.desc())
                .limit(limit)
            )
            return [self._log_to_model(orm) for orm in result.scalars().all()]

    def _log_to_model(self, orm: AccessLogORM) -> AccessLog:
        return AccessLog(
            id=orm.id,
            user_id=orm.user_id,
            user_name=orm.user_name,
            action=orm.action,
            details=orm.details,
            type=LogSeverity(orm.type),
            timestamp=orm.timestamp,
            date=orm.date,
            time=orm.time,
        )
