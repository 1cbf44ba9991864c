from __future__ import annotations

from typing import Mapping, Optional

from kpiboard.core.exceptions import ForbiddenError
from kpiboard.models.app_config import AppConfig, DepartmentMeta, RoleGrant
from kpiboard.models.enums import Permission
from kpiboard.models.user import User

# Roles shipped with the default configuration
ROLE_ADMIN = "Administrador"
ROLE_MANAGER = "Gestor"
ROLE_OPERATIONAL = "Operacional"

MANAGER_PERMISSIONS: frozenset[Permission] = frozenset(
    {
        Permission.VIEW_GLOBAL_DASHBOARD,
        Permission.VIEW_ALL_DEPARTMENTS,
        Permission.KPI_CREATE,
        Permission.KPI_EDIT,
        Permission.KPI_DELETE,
        Permission.GOAL_CREATE,
        Permission.GOAL_EDIT,
        Permission.GOAL_DELETE,
        Permission.CHECKPOINT_EDIT,
        Permission.WEIGHTS_MANAGE,
        Permission.SNAPSHOT_CREATE,
        Permission.LOGS_VIEW,
    }
)
OPERATIONAL_PERMISSIONS: frozenset[Permission] = frozenset(
    {Permission.VIEW_GLOBAL_DASHBOARD, Permission.VIEW_ALL_DEPARTMENTS}
)

DEFAULT_ROLE_GRANTS: dict[str, RoleGrant] = {
    ROLE_ADMIN: RoleGrant(grants_all=True),
    ROLE_MANAGER: RoleGrant(permissions=MANAGER_PERMISSIONS),
    ROLE_OPERATIONAL: RoleGrant(permissions=OPERATIONAL_PERMISSIONS),
}

# Flags handed to a department view, keyed by the name the view expects
VIEW_PERMISSION_FLAGS: dict[str, Permission] = {
    "can_create_kpi": Permission.KPI_CREATE,
    "can_edit_kpi": Permission.KPI_EDIT,
    "can_delete_kpi": Permission.KPI_DELETE,
    "can_create_goal": Permission.GOAL_CREATE,
    "can_edit_goal": Permission.GOAL_EDIT,
    "can_delete_goal": Permission.GOAL_DELETE,
    "can_edit_checkpoint": Permission.CHECKPOINT_EDIT,
    "can_manage_weights": Permission.WEIGHTS_MANAGE,
}


def grant_for_role(role: str, role_permissions: Mapping[str, RoleGrant]) -> RoleGrant:
    return role_permissions.get(role) or RoleGrant()


def has_permission(
    user: Optional[User],
    permission: Permission,
    role_permissions: Mapping[str, RoleGrant],
) -> bool:
    """Fail closed: no user or unknown role grants nothing."""
    if user is None:
        return False
    return grant_for_role(user.role, role_permissions).allows(permission)


def ensure_permission(
    user: Optional[User],
    permission: Permission,
    role_permissions: Mapping[str, RoleGrant],
    message: str = "Access denied",
) -> User:
    if not has_permission(user, permission, role_permissions):
        raise ForbiddenError(message, permission=permission.value)
    return user


def permission_flags(
    user: Optional[User],
    role_permissions: Mapping[str, RoleGrant],
) -> dict[str, bool]:
    return {
        flag: has_permission(user, permission, role_permissions)
        for flag, permission in VIEW_PERMISSION_FLAGS.items()
    }


def allowed_departments(user: Optional[User], config: AppConfig) -> list[DepartmentMeta]:
    if user is None:
        return []
    if user.sees_all_departments:
        return list(config.departments)
    assigned = set(user.assigned_departments)
    return [dept for dept in config.departments if dept.id in assigned]


def can_open_department(user: Optional[User], department_id: str, config: AppConfig) -> bool:
    if any(dept.id == department_id for dept in allowed_departments(user, config)):
        return True
    return has_permission(user, Permission.VIEW_ALL_DEPARTMENTS, config.role_permissions)
