"""
Organizational configuration models.

The configuration lists the departments, the goal categories and statuses,
and which permissions each role grants.
"""

from typing import Any, Iterable

from pydantic import BaseModel, ConfigDict, Field, model_serializer, model_validator

from kpiboard.core.logger import setup_logger
from kpiboard.models.base import CamelModel
from kpiboard.models.enums import ALL_PERMISSIONS_SENTINEL, Permission

logger = setup_logger(__name__)


class DepartmentMeta(CamelModel):
    """Configured department entry."""

    id: str = Field(..., min_length=1)
    name: str = Field(...)
    icon: str = Field("Folder")


class CategoryMeta(CamelModel):
    """Goal category."""

    id: str = Field(..., min_length=1)
    label: str = Field(...)
    color_theme: str = Field("slate")
    icon: str = Field("Tag")


class StatusMeta(CamelModel):
    """Goal status."""

    id: str = Field(..., min_length=1)
    label: str = Field(...)
    color_theme: str = Field("slate")
    icon: str = Field("Circle")


class RoleGrant(BaseModel):
    """
    Permissions granted to one role.

    Stored as a list of permission IDs where "ALL" grants everything; held in
    memory as an explicit flag plus a set of Permission members.
    """

    model_config = ConfigDict(frozen=True)

    grants_all: bool = False
    permissions: frozenset[Permission] = frozenset()

    @classmethod
    def from_ids(cls, ids: Iterable[str]) -> "RoleGrant":
        grants_all = False
        permissions: set[Permission] = set()
        for raw in ids:
            value = str(getattr(raw, "value", raw))
            if value == ALL_PERMISSIONS_SENTINEL:
                grants_all = True
                continue
            try:
                permissions.add(Permission(value))
            except ValueError:
                logger.warning(f"Dropping unknown permission id {value!r}")
        return cls(grants_all=grants_all, permissions=frozenset(permissions))

    @model_validator(mode="before")
    @classmethod
    def _parse_id_list(cls, value: Any) -> Any:
        if isinstance(value, (list, tuple, set, frozenset)):
            grant = cls.from_ids(value)
            return {"grants_all": grant.grants_all, "permissions": grant.permissions}
        return value

    @model_serializer
    def _to_id_list(self) -> list[str]:
        ids = [ALL_PERMISSIONS_SENTINEL] if self.grants_all else []
        ids.extend(p.value for p in Permission if p in self.permissions)
        return ids

    def allows(self, permission: Permission) -> bool:
        return self.grants_all or permission in self.permissions


class AppConfig(CamelModel):
    """Organization-wide configuration."""

    departments: list[DepartmentMeta] = Field(default_factory=list)
    categories: dict[str, CategoryMeta] = Field(default_factory=dict)
    statuses: dict[str, StatusMeta] = Field(default_factory=dict)
    role_permissions: dict[str, RoleGrant] = Field(default_factory=dict)

    def department_ids(self) -> list[str]:
        return [dept.id for dept in self.departments]
