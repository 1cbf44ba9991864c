"""
Backup payload model.

Every key is optional; absent keys leave the current state untouched.
"""

from collections.abc import Mapping
from typing import Any, Optional

from pydantic import BaseModel

from kpiboard.models.app_config import AppConfig, CategoryMeta, DepartmentMeta, RoleGrant, StatusMeta
from kpiboard.models.base import CamelModel
from kpiboard.models.department import (
    Checkpoint,
    Department,
    Kpi,
    ManualGoal,
    Milestone,
    MilestoneGoal,
    QuantitativeGoal,
    goal_kind,
)
from kpiboard.models.enums import CalculationType
from kpiboard.models.snapshot import WeeklySnapshot
from kpiboard.models.weights import WeightConfig

BACKUP_FIELDS = ("data", "weights", "config", "snapshots")

# Container type each top-level key must have for a restore to be attempted
BACKUP_CONTAINERS: dict[str, type] = {
    "data": Mapping,
    "weights": Mapping,
    "config": Mapping,
    "snapshots": list,
}

_GOAL_MODELS: dict[str, type[BaseModel]] = {
    CalculationType.MANUAL.value: ManualGoal,
    CalculationType.QUANTITATIVE.value: QuantitativeGoal,
    CalculationType.MILESTONE.value: MilestoneGoal,
}


class BackupPayload(CamelModel):
    """Exported/restored application state."""

    data: Optional[dict[str, Department]] = None
    weights: Optional[dict[str, WeightConfig]] = None
    config: Optional[AppConfig] = None
    snapshots: Optional[list[WeeklySnapshot]] = None

    def provided_fields(self) -> list[str]:
        return [name for name in BACKUP_FIELDS if getattr(self, name) is not None]

    @classmethod
    def from_document(cls, document: Mapping[str, Any]) -> "BackupPayload":
        """
        Build a payload from a raw backup document without validating it.

        Entries are taken as they are: nothing is rejected and fields missing
        from an entry stay missing (optional ones read as their defaults).
        The caller checks the top-level container types first.
        """
        data = document.get("data")
        weights = document.get("weights")
        config = document.get("config")
        snapshots = document.get("snapshots")
        return cls.model_construct(
            data=None if data is None else {key: _department(value) for key, value in data.items()},
            weights=None if weights is None else {key: _build(WeightConfig, value) for key, value in weights.items()},
            config=None if config is None else _app_config(config),
            snapshots=None if snapshots is None else [_build(WeeklySnapshot, item) for item in snapshots],
        )


def _build(model: type[BaseModel], value: Any, **nested: Any) -> Any:
    if not isinstance(value, Mapping):
        return value
    return model.model_construct(**{**value, **nested})


def _build_all(model: type[BaseModel], items: Any) -> Any:
    if not isinstance(items, list):
        return items
    return [_build(model, item) for item in items]


def _goal(value: Any) -> Any:
    if not isinstance(value, Mapping):
        return value
    # Unknown strategies read as manual goals: their stored progress is used
    model = _GOAL_MODELS.get(goal_kind(dict(value)), ManualGoal)
    if model is MilestoneGoal and "milestones" in value:
        return _build(model, value, milestones=_build_all(Milestone, value["milestones"]))
    return _build(model, value)


def _department(value: Any) -> Any:
    if not isinstance(value, Mapping):
        return value
    nested: dict[str, Any] = {}
    if "kpis" in value:
        nested["kpis"] = _build_all(Kpi, value["kpis"])
    if "goals" in value:
        goals = value["goals"]
        nested["goals"] = [_goal(goal) for goal in goals] if isinstance(goals, list) else goals
    if "checkpoints" in value:
        nested["checkpoints"] = _build_all(Checkpoint, value["checkpoints"])
    return _build(Department, value, **nested)


def _app_config(value: Mapping[str, Any]) -> AppConfig:
    nested: dict[str, Any] = {}
    if "departments" in value:
        nested["departments"] = _build_all(DepartmentMeta, value["departments"])
    for key, model in (("categories", CategoryMeta), ("statuses", StatusMeta)):
        entries = value.get(key)
        if isinstance(entries, Mapping):
            nested[key] = {entry_id: _build(model, entry) for entry_id, entry in entries.items()}
    grants = value.get("rolePermissions", value.get("role_permissions"))
    if isinstance(grants, Mapping):
        # Grants stay usable by the permission check; unknown ids are dropped
        nested["role_permissions"] = {
            role: RoleGrant.from_ids(ids) if isinstance(ids, list) else ids
            for role, ids in grants.items()
        }
    raw = {key: item for key, item in value.items() if key not in ("rolePermissions", "role_permissions")}
    return AppConfig.model_construct(**{**raw, **nested})
