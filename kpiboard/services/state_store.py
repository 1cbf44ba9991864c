"""
In-memory state of the board and its gated mutation pipeline.

The store owns the department, weight and configuration maps. Records are
never mutated in place: a mutation builds a copy of the affected department
(or weight entry), installs it in a fresh top-level map and leaves every other
entry as the same object, so consumers can detect changes by identity.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Optional

from kpiboard.core.logger import setup_logger
from kpiboard.models.app_config import AppConfig
from kpiboard.models.department import Checkpoint, Department, Departments, Goal, Kpi
from kpiboard.models.enums import LogSeverity, Permission
from kpiboard.models.user import User
from kpiboard.models.weights import WeightConfig, Weights
from kpiboard.services.permissions import ensure_permission, has_permission

logger = setup_logger(__name__)

DATA = "data"
WEIGHTS = "weights"
CONFIG = "config"

KPI_DELETE_DENIED = "Access denied: you are not allowed to delete KPIs."
GOAL_DELETE_DENIED = "Access denied: you are not allowed to delete goals."


@dataclass(frozen=True)
class StateChange:
    """
    Notification sent to listeners after the state changed.

    ``action`` is set for user mutations (those become audit entries) and
    left empty for bulk replaces done by loading or restore.
    """

    fields: frozenset[str]
    user: Optional[User] = None
    action: Optional[str] = None
    details: Optional[str] = None
    severity: LogSeverity = LogSeverity.INFO

    @property
    def is_audited(self) -> bool:
        return self.user is not None and self.action is not None


StateListener = Callable[[StateChange], None]


class StateStore:
    """Holds departments, weights and config; every mutation is permission-gated."""

    def __init__(
        self,
        data: Optional[Departments] = None,
        weights: Optional[Weights] = None,
        config: Optional[AppConfig] = None,
    ):
        self._data: Departments = dict(data or {})
        self._weights: Weights = dict(weights or {})
        self._config: AppConfig = config or AppConfig()
        self._listeners: list[StateListener] = []

    # ===========================================
    # Read access
    # ===========================================

    @property
    def data(self) -> Departments:
        return self._data

    @property
    def weights(self) -> Weights:
        return self._weights

    @property
    def config(self) -> AppConfig:
        return self._config

    def get_department(self, department_id: str) -> Optional[Department]:
        return self._data.get(department_id)

    def get_weights(self, department_id: str) -> WeightConfig:
        return self._weights.get(department_id) or WeightConfig()

    def subscribe(self, listener: StateListener) -> None:
        self._listeners.append(listener)

    # ===========================================
    # KPI mutations
    # ===========================================

    def add_kpi(self, user: Optional[User], department_id: str, kpi: Kpi) -> Optional[Department]:
        if not self._allowed(user, Permission.KPI_CREATE):
            return None
        department = self._data.get(department_id)
        if department is None:
            return self._missing(department_id)
        updated = department.model_copy(update={"kpis": [*department.kpis, kpi]})
        self._commit_department(
            updated,
            user,
            "Created KPI",
            f'Added "{kpi.name}" to {department_id}',
            LogSeverity.SUCCESS,
        )
        return updated

    def update_kpi(self, user: Optional[User], department_id: str, kpi: Kpi) -> Optional[Department]:
        if not self._allowed(user, Permission.KPI_EDIT):
            return None
        department = self._data.get(department_id)
        if department is None:
            return self._missing(department_id)
        if not any(item.id == kpi.id for item in department.kpis):
            return None
        kpis = [kpi if item.id == kpi.id else item for item in department.kpis]
        updated = department.model_copy(update={"kpis": kpis})
        self._commit_department(
            updated,
            user,
            "Updated KPI",
            f'Edited "{kpi.name}" in {department_id}',
            LogSeverity.INFO,
        )
        return updated

    def delete_kpi(self, user: Optional[User], department_id: str, kpi_id: str) -> Optional[Department]:
        ensure_permission(
            user,
            Permission.KPI_DELETE,
            self._config.role_permissions,
            KPI_DELETE_DENIED,
        )
        department = self._data.get(department_id)
        if department is None:
            return self._missing(department_id)
        name = next((item.name for item in department.kpis if item.id == kpi_id), "KPI")
        updated = department.model_copy(
            update={"kpis": [item for item in department.kpis if item.id != kpi_id]}
        )
        self._commit_department(
            updated,
            user,
            "Deleted KPI",
            f'Removed "{name}" from {department_id}',
            LogSeverity.WARNING,
        )
        return updated

    # ===========================================
    # Goal mutations
    # ===========================================

    def add_goal(self, user: Optional[User], department_id: str, goal: Goal) -> Optional[Department]:
        if not self._allowed(user, Permission.GOAL_CREATE):
            return None
        department = self._data.get(department_id)
        if department is None:
            return self._missing(department_id)
        updated = department.model_copy(update={"goals": [*department.goals, goal]})
        self._commit_department(
            updated,
            user,
            "Created goal",
            f'Added "{goal.title}" to {department_id}',
            LogSeverity.SUCCESS,
        )
        return updated

    def update_goal(self, user: Optional[User], department_id: str, goal: Goal) -> Optional[Department]:
        if not self._allowed(user, Permission.GOAL_EDIT):
            return None
        department = self._data.get(department_id)
        if department is None:
            return self._missing(department_id)
        if not any(item.id == goal.id for item in department.goals):
            return None
        goals = [goal if item.id == goal.id else item for item in department.goals]
        updated = department.model_copy(update={"goals": goals})
        self._commit_department(
            updated,
            user,
            "Updated goal",
            f'Edited "{goal.title}" in {department_id}',
            LogSeverity.INFO,
        )
        return updated

    def delete_goal(self, user: Optional[User], department_id: str, goal_id: str) -> Optional[Department]:
        ensure_permission(
            user,
            Permission.GOAL_DELETE,
            self._config.role_permissions,
            GOAL_DELETE_DENIED,
        )
        department = self._data.get(department_id)
        if department is None:
            return self._missing(department_id)
        title = next((item.title for item in department.goals if item.id == goal_id), "Goal")
        updated = department.model_copy(
            update={"goals": [item for item in department.goals if item.id != goal_id]}
        )
        self._commit_department(
            updated,
            user,
            "Deleted goal",
            f'Removed "{title}" from {department_id}',
            LogSeverity.WARNING,
        )
        return updated

    # ===========================================
    # Checkpoints and weights
    # ===========================================

    def update_checkpoint(
        self,
        user: Optional[User],
        department_id: str,
        checkpoint: Checkpoint,
    ) -> Optional[Department]:
        if not self._allowed(user, Permission.CHECKPOINT_EDIT):
            return None
        department = self._data.get(department_id)
        if department is None:
            return self._missing(department_id)
        if not any(item.id == checkpoint.id for item in department.checkpoints):
            return None
        checkpoints = [
            checkpoint if item.id == checkpoint.id else item for item in department.checkpoints
        ]
        updated = department.model_copy(update={"checkpoints": checkpoints})
        self._commit_department(
            updated,
            user,
            "Timeline",
            f"Updated checkpoint in {department_id}",
            LogSeverity.INFO,
        )
        return updated

    def update_weights(
        self,
        user: Optional[User],
        department_id: str,
        weights: WeightConfig,
    ) -> Optional[WeightConfig]:
        if not self._allowed(user, Permission.WEIGHTS_MANAGE):
            return None
        updated = weights.model_copy(deep=True)
        self._weights = {**self._weights, department_id: updated}
        self._emit(
            StateChange(
                fields=frozenset({WEIGHTS}),
                user=user,
                action="Weights",
                details=f"Reconfigured weights in {department_id}",
                severity=LogSeverity.WARNING,
            )
        )
        return updated

    # ===========================================
    # Structural changes
    # ===========================================

    def apply_config(self, user: Optional[User], config: AppConfig) -> AppConfig:
        """
        Install a new organizational configuration.

        Departments new to the configuration get an empty record and default
        weights; renamed departments get the new name as name and label.
        """
        ensure_permission(
            user,
            Permission.SETTINGS_MANAGE,
            self._config.role_permissions,
            "Access denied: you are not allowed to change global settings.",
        )
        data = dict(self._data)
        weights = dict(self._weights)
        for meta in config.departments:
            existing = data.get(meta.id)
            if existing is None:
                data[meta.id] = Department(id=meta.id, name=meta.name, label=meta.name)
                weights[meta.id] = WeightConfig()
            elif existing.name != meta.name:
                data[meta.id] = existing.model_copy(update={"name": meta.name, "label": meta.name})

        self._config = config
        self._data = data
        self._weights = weights
        self._emit(
            StateChange(
                fields=frozenset({DATA, WEIGHTS, CONFIG}),
                user=user,
                action="Global settings",
                details="Updated organizational structure",
                severity=LogSeverity.WARNING,
            )
        )
        return config

    def replace(
        self,
        *,
        data: Optional[Departments] = None,
        weights: Optional[Weights] = None,
        config: Optional[AppConfig] = None,
    ) -> frozenset[str]:
        """Bulk replace of the given maps (loading, restore). Not audited."""
        changed: set[str] = set()
        if data is not None:
            self._data = dict(data)
            changed.add(DATA)
        if weights is not None:
            self._weights = dict(weights)
            changed.add(WEIGHTS)
        if config is not None:
            self._config = config
            changed.add(CONFIG)
        if changed:
            self._emit(StateChange(fields=frozenset(changed)))
        return frozenset(changed)

    # ===========================================
    # Internals
    # ===========================================

    def _allowed(self, user: Optional[User], permission: Permission) -> bool:
        return has_permission(user, permission, self._config.role_permissions)

    def _missing(self, department_id: str) -> None:
        logger.warning(f"Ignoring mutation on unknown department {department_id!r}")
        return None

    def _commit_department(
        self,
        department: Department,
        user: Optional[User],
        action: str,
        details: str,
        severity: LogSeverity,
    ) -> None:
        self._data = {**self._data, department.id: department}
        self._emit(
            StateChange(
                fields=frozenset({DATA}),
                user=user,
                action=action,
                details=details,
                severity=severity,
            )
        )

    def _emit(self, change: StateChange) -> None:
        for listener in list(self._listeners):
            listener(change)
