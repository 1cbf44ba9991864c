"""
Shared fixtures.
"""

from typing import Optional

import pytest
from sqlalchemy.ext.asyncio import create_async_engine

from kpiboard.core.config import Settings
from kpiboard.infrastructure.local.database import init_db
from kpiboard.infrastructure.local.kpi_store import SqliteKpiStore
from kpiboard.interfaces.kpi_store import IKpiStore
from kpiboard.models.access_log import AccessLog
from kpiboard.models.app_config import AppConfig
from kpiboard.models.department import Departments
from kpiboard.models.snapshot import WeeklySnapshot
from kpiboard.models.user import User
from kpiboard.models.weights import Weights
from kpiboard.services.permissions import ROLE_ADMIN, ROLE_MANAGER, ROLE_OPERATIONAL


class FakeKpiStore(IKpiStore):
    """In-memory store that records every write."""

    def __init__(self):
        self.data: Departments = {}
        self.weights: Weights = {}
        self.config: Optional[AppConfig] = None
        self.snapshots: dict[str, WeeklySnapshot] = {}
        self.logs: list[AccessLog] = []
        self.calls: list[str] = []
        self.fail_init = False
        self.fail_writes = False

    async def init(self) -> None:
        self.calls.append("init")
        if self.fail_init:
            raise OSError("disk unavailable")

    async def seed_data(self, data, weights, config) -> None:
        self.calls.append("seed_data")
        for dept_id, department in data.items():
            self.data.setdefault(dept_id, department)
        for dept_id, weight_config in weights.items():
            self.weights.setdefault(dept_id, weight_config)
        if self.config is None:
            self.config = config

    async def get_all_data(self) -> Departments:
        return dict(self.data)

    async def get_all_weights(self) -> Weights:
        return dict(self.weights)

    async def get_app_config(self) -> Optional[AppConfig]:
        return self.config

    async def get_snapshots(self) -> list[WeeklySnapshot]:
        return sorted(self.snapshots.values(), key=lambda s: s.timestamp)

    async def save_data(self, data: Departments) -> None:
        self._write("save_data")
        self.data.update(data)

    async def save_weights(self, weights: Weights) -> None:
        self._write("save_weights")
        self.weights.update(weights)

    async def save_app_config(self, config: AppConfig) -> None:
        self._write("save_app_config")
        self.config = config

    async def save_snapshot(self, snapshot: WeeklySnapshot) -> None:
        self._write("save_snapshot")
        self.snapshots[snapshot.id] = snapshot

    async def log_action(self, entry: AccessLog) -> None:
        self._write("log_action")
        self.logs.append(entry)

    async def get_logs(self, limit: int = 200) -> list[AccessLog]:
        return sorted(self.logs, key=lambda e: e.timestamp, reverse=True)[:limit]

    def count(self, call: str) -> int:
        return self.calls.count(call)

    def _write(self, call: str) -> None:
        self.calls.append(call)
        if self.fail_writes:
            raise OSError(f"{call} failed")


@pytest.fixture
def fake_store():
    return FakeKpiStore()


@pytest.fixture
def test_settings():
    """Settings with a short debounce so autosave tests run fast."""
    return Settings(
        ENVIRONMENT="test",
        AUTOSAVE_DEBOUNCE_SECONDS=0.05,
        SAVING_INDICATOR_SECONDS=0.0,
    )


@pytest.fixture
async def engine(tmp_path):
    """Async engine on a temporary SQLite file."""
    engine = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'kpiboard-test.db'}")
    await init_db(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
async def sqlite_store(engine):
    store = SqliteKpiStore(engine)
    await store.init()
    return store


@pytest.fixture
def admin_user():
    return User(id="u-admin", name="Ana Admin", role=ROLE_ADMIN, assigned_departments=["ALL"])


@pytest.fixture
def manager_user():
    return User(id="u-manager", name="Gil Gestor", role=ROLE_MANAGER, assigned_departments=["OPS"])


@pytest.fixture
def operational_user():
    return User(
        id="u-ops",
        name="Otto Operacional",
        role=ROLE_OPERATIONAL,
        assigned_departments=["OPS"],
    )
