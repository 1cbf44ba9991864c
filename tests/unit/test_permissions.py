"""
Unit tests for role permission resolution.
"""

import pytest

from kpiboard.core.exceptions import ForbiddenError
from kpiboard.models.app_config import AppConfig, DepartmentMeta, RoleGrant
from kpiboard.models.enums import Permission
from kpiboard.models.user import User
from kpiboard.services.permissions import (
    DEFAULT_ROLE_GRANTS,
    allowed_departments,
    can_open_department,
    ensure_permission,
    has_permission,
    permission_flags,
)


@pytest.fixture
def config():
    return AppConfig(
        departments=[
            DepartmentMeta(id="OPS", name="Ops"),
            DepartmentMeta(id="FIN", name="Finance"),
        ],
        role_permissions=dict(DEFAULT_ROLE_GRANTS),
    )


def test_admin_has_every_permission(admin_user):
    for permission in Permission:
        assert has_permission(admin_user, permission, DEFAULT_ROLE_GRANTS)


def test_manager_cannot_manage_settings_or_users(manager_user):
    assert has_permission(manager_user, Permission.KPI_DELETE, DEFAULT_ROLE_GRANTS)
    assert not has_permission(manager_user, Permission.SETTINGS_MANAGE, DEFAULT_ROLE_GRANTS)
    assert not has_permission(manager_user, Permission.USERS_MANAGE, DEFAULT_ROLE_GRANTS)


def test_operational_is_read_only(operational_user):
    assert has_permission(operational_user, Permission.VIEW_GLOBAL_DASHBOARD, DEFAULT_ROLE_GRANTS)
    assert not has_permission(operational_user, Permission.KPI_CREATE, DEFAULT_ROLE_GRANTS)
    assert not has_permission(operational_user, Permission.KPI_DELETE, DEFAULT_ROLE_GRANTS)


def test_no_user_or_unknown_role_grants_nothing():
    stranger = User(id="u-x", name="Stranger", role="Visitante")
    assert not has_permission(None, Permission.VIEW_GLOBAL_DASHBOARD, DEFAULT_ROLE_GRANTS)
    assert not has_permission(stranger, Permission.VIEW_GLOBAL_DASHBOARD, DEFAULT_ROLE_GRANTS)


def test_ensure_permission_raises_with_permission_id(operational_user):
    with pytest.raises(ForbiddenError) as exc_info:
        ensure_permission(operational_user, Permission.GOAL_DELETE, DEFAULT_ROLE_GRANTS)
    assert exc_info.value.permission == "goal_delete"


def test_ensure_permission_returns_user(manager_user):
    assert ensure_permission(manager_user, Permission.GOAL_DELETE, DEFAULT_ROLE_GRANTS) is manager_user


def test_permission_flags_for_operational(operational_user):
    flags = permission_flags(operational_user, DEFAULT_ROLE_GRANTS)
    assert set(flags.values()) == {False}
    assert "can_manage_weights" in flags


def test_allowed_departments_follow_assignment(config, manager_user, admin_user):
    assert [d.id for d in allowed_departments(manager_user, config)] == ["OPS"]
    assert [d.id for d in allowed_departments(admin_user, config)] == ["OPS", "FIN"]
    assert allowed_departments(None, config) == []


def test_view_all_departments_opens_unassigned_department(config, operational_user):
    assert can_open_department(operational_user, "FIN", config)


def test_unassigned_department_is_closed_without_view_all(config):
    config = config.model_copy(
        update={"role_permissions": {"Leitor": RoleGrant(permissions=frozenset())}}
    )
    reader = User(id="u-r", name="Reader", role="Leitor", assigned_departments=["OPS"])

    assert can_open_department(reader, "OPS", config)
    assert not can_open_department(reader, "FIN", config)
