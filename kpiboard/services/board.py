"""
KPI board controller.

Single owner of the application state (session user, selected view) and of
the components around it: the mutation pipeline, the audit trail, the
persistence gateway and the snapshot history. Routes talk to this class only.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable, Optional

from kpiboard.core.config import Settings, get_settings
from kpiboard.core.exceptions import AuthenticationError, ForbiddenError, NotFoundError
from kpiboard.core.logger import setup_logger
from kpiboard.interfaces.kpi_store import IKpiStore
from kpiboard.models.access_log import AccessLog
from kpiboard.models.app_config import AppConfig, DepartmentMeta
from kpiboard.models.backup import BackupPayload
from kpiboard.models.department import Checkpoint, Department, Goal, Kpi
from kpiboard.models.enums import HOME_VIEW, LogSeverity, Permission, UserStatus
from kpiboard.models.scores import ScoreOverview
from kpiboard.models.snapshot import WeeklySnapshot
from kpiboard.models.user import User
from kpiboard.models.views import DepartmentView, SessionInfo
from kpiboard.models.weights import WeightConfig
from kpiboard.services import score_engine
from kpiboard.services.audit_log import AuditLog
from kpiboard.services.permissions import (
    allowed_departments,
    can_open_department,
    ensure_permission,
    has_permission,
    permission_flags,
)
from kpiboard.services.persistence_gateway import PersistenceGateway
from kpiboard.services.seed_data import default_weights, initial_config, initial_data
from kpiboard.services.snapshot_history import SnapshotHistory
from kpiboard.services.state_store import GOAL_DELETE_DENIED, KPI_DELETE_DENIED, StateStore
from kpiboard.utils.datetime_utils import now_utc

logger = setup_logger(__name__)


@dataclass
class AppState:
    user: Optional[User] = None
    selected_view: str = HOME_VIEW


class KpiBoard:
    """Application controller for one session."""

    def __init__(
        self,
        store: IKpiStore,
        settings: Optional[Settings] = None,
        clock: Callable[[], datetime] = now_utc,
    ):
        self._settings = settings or get_settings()
        self._clock = clock
        self._store = store
        self.app_state = AppState()

        self.state = StateStore(initial_data(), default_weights(), initial_config())
        self.audit_log = AuditLog(store, clock=clock)
        self.history = SnapshotHistory(store)
        self.persistence = PersistenceGateway(
            store,
            self.state,
            self.history,
            is_authenticated=lambda: self.app_state.user is not None,
            settings=self._settings,
        )
        self.state.subscribe(self.audit_log.handle_change)
        self.state.subscribe(self.persistence.handle_change)

    # ===========================================
    # Lifecycle
    # ===========================================

    async def start(self) -> None:
        await self.persistence.bootstrap(initial_data(), default_weights(), initial_config())

    async def shutdown(self) -> None:
        self.persistence.shutdown()
        await self.audit_log.flush()

    # ===========================================
    # Session
    # ===========================================

    @property
    def user(self) -> Optional[User]:
        return self.app_state.user

    def require_user(self) -> User:
        if self.app_state.user is None:
            raise AuthenticationError("Not authenticated")
        return self.app_state.user

    def login(self, user: User) -> SessionInfo:
        """Start a session for a user resolved by the authentication provider."""
        if user.status == UserStatus.BLOCKED:
            raise AuthenticationError("User is blocked", details={"user_id": user.id})
        self.app_state = AppState(user=user)
        self.audit_log.log_action(user, "Login", f"Signed in as {user.role}", LogSeverity.INFO)
        self.persistence.schedule_autosave()
        logger.info(f"User {user.id} logged in ({user.role})")
        return self.session_info()

    async def logout(self) -> SessionInfo:
        """
        End the session.

        A pending autosave is written first, while the user is still
        authenticated.
        """
        user = self.require_user()
        self.audit_log.log_action(user, "Logout", None, LogSeverity.INFO)
        await self.persistence.flush_pending()
        self.app_state = AppState()
        logger.info(f"User {user.id} logged out")
        return self.session_info()

    def navigate(self, view: str) -> SessionInfo:
        user = self.require_user()
        if view != HOME_VIEW:
            self._require_department(view)
            if not can_open_department(user, view, self.state.config):
                raise ForbiddenError(
                    f"Access denied: department {view} is not assigned to you.",
                    permission=Permission.VIEW_ALL_DEPARTMENTS.value,
                )
        self.app_state.selected_view = view
        return self.session_info()

    def session_info(self) -> SessionInfo:
        user = self.app_state.user
        config = self.state.config
        return SessionInfo(
            user=user,
            selected_view=self.app_state.selected_view,
            permissions=[
                permission.value
                for permission in Permission
                if has_permission(user, permission, config.role_permissions)
            ],
            departments=allowed_departments(user, config),
            is_ready=self.persistence.is_ready,
            is_saving=self.persistence.is_saving,
        )

    # ===========================================
    # Mutations
    # ===========================================

    def add_kpi(self, department_id: str, kpi: Kpi) -> Optional[Department]:
        user = self.require_user()
        self._require_department(department_id)
        return self.state.add_kpi(user, department_id, kpi)

    def update_kpi(self, department_id: str, kpi: Kpi) -> Optional[Department]:
        user = self.require_user()
        self._require_department(department_id)
        return self.state.update_kpi(user, department_id, kpi)

    def delete_kpi(self, department_id: str, kpi_id: str) -> Optional[Department]:
        user = self.require_user()
        ensure_permission(user, Permission.KPI_DELETE, self.state.config.role_permissions, KPI_DELETE_DENIED)
        self._require_department(department_id)
        return self.state.delete_kpi(user, department_id, kpi_id)

    def add_goal(self, department_id: str, goal: Goal) -> Optional[Department]:
        user = self.require_user()
        self._require_department(department_id)
        return self.state.add_goal(user, department_id, goal)

    def update_goal(self, department_id: str, goal: Goal) -> Optional[Department]:
        user = self.require_user()
        self._require_department(department_id)
        return self.state.update_goal(user, department_id, goal)

    def delete_goal(self, department_id: str, goal_id: str) -> Optional[Department]:
        user = self.require_user()
        ensure_permission(user, Permission.GOAL_DELETE, self.state.config.role_permissions, GOAL_DELETE_DENIED)
        self._require_department(department_id)
        return self.state.delete_goal(user, department_id, goal_id)

    def update_checkpoint(self, department_id: str, checkpoint: Checkpoint) -> Optional[Department]:
        user = self.require_user()
        self._require_department(department_id)
        return self.state.update_checkpoint(user, department_id, checkpoint)

    def update_weights(self, department_id: str, weights: WeightConfig) -> Optional[WeightConfig]:
        user = self.require_user()
        self._require_department(department_id)
        return self.state.update_weights(user, department_id, weights)

    def update_config(self, config: AppConfig) -> AppConfig:
        user = self.require_user()
        return self.state.apply_config(user, config)

    # ===========================================
    # Snapshots
    # ===========================================

    @property
    def snapshots(self) -> tuple[WeeklySnapshot, ...]:
        return self.history.snapshots

    async def save_snapshot(self, snapshot: WeeklySnapshot) -> Optional[WeeklySnapshot]:
        user = self.require_user()
        if not has_permission(user, Permission.SNAPSHOT_CREATE, self.state.config.role_permissions):
            return None
        saved = await self.history.save_snapshot(snapshot)
        self.audit_log.log_action(
            user,
            "Check-in saved",
            f"Snapshot {snapshot.week_label} ({snapshot.overall_score:.1f}%)",
            LogSeverity.SUCCESS,
        )
        return saved

    async def create_snapshot(self, week_label: str) -> Optional[WeeklySnapshot]:
        """Freeze the current scores under ``week_label`` and save them."""
        snapshot = score_engine.build_snapshot(
            self.state.data,
            self.state.weights,
            self.state.config,
            week_label,
            self._clock(),
            self._settings.KPI_ACHIEVEMENT_CAP,
        )
        return await self.save_snapshot(snapshot)

    # ===========================================
    # Backup
    # ===========================================

    async def restore(self, payload: Any) -> list[str]:
        user = self.require_user()
        ensure_permission(
            user,
            Permission.SETTINGS_MANAGE,
            self.state.config.role_permissions,
            "Access denied: you are not allowed to restore backups.",
        )
        fields = await self.persistence.restore(payload)
        self.audit_log.log_action(
            user,
            "Backup restore",
            f"Restored {', '.join(fields)}",
            LogSeverity.WARNING,
        )
        return fields

    def export_backup(self) -> BackupPayload:
        user = self.require_user()
        ensure_permission(
            user,
            Permission.SETTINGS_MANAGE,
            self.state.config.role_permissions,
            "Access denied: you are not allowed to export backups.",
        )
        return self.persistence.export_backup()

    # ===========================================
    # Read views
    # ===========================================

    def list_departments(self) -> list[DepartmentMeta]:
        return allowed_departments(self.require_user(), self.state.config)

    def overview(self) -> ScoreOverview:
        self.require_user()
        return score_engine.score_overview(
            self.state.data,
            self.state.weights,
            self.state.config,
            self._settings.KPI_ACHIEVEMENT_CAP,
        )

    def department_view(self, department_id: str) -> DepartmentView:
        user = self.require_user()
        department = self._require_department(department_id)
        if not can_open_department(user, department_id, self.state.config):
            raise ForbiddenError(
                f"Access denied: department {department_id} is not assigned to you.",
                permission=Permission.VIEW_ALL_DEPARTMENTS.value,
            )
        weights = self.state.get_weights(department_id)
        return DepartmentView(
            department=department,
            weights=weights,
            score=score_engine.department_breakdown(
                department, weights, self._settings.KPI_ACHIEVEMENT_CAP
            ),
            permissions=permission_flags(user, self.state.config.role_permissions),
        )

    async def list_logs(self, limit: int = 200) -> list[AccessLog]:
        user = self.require_user()
        ensure_permission(
            user,
            Permission.LOGS_VIEW,
            self.state.config.role_permissions,
            "Access denied: you are not allowed to view access logs.",
        )
        await self.audit_log.flush()
        return await self._store.get_logs(limit)

    def _require_department(self, department_id: str) -> Department:
        department = self.state.get_department(department_id)
        if department is None:
            raise NotFoundError(f"Department {department_id} not found")
        return department
