"""
Enum definitions for the application.

These enums are used across models and provide type-safe status/unit values.
"""

from enum import Enum


class Permission(str, Enum):
    """Capabilities a role can be granted. Consumed by the view layer."""

    KPI_CREATE = "kpi_create"
    KPI_EDIT = "kpi_edit"
    KPI_DELETE = "kpi_delete"
    GOAL_CREATE = "goal_create"
    GOAL_EDIT = "goal_edit"
    GOAL_DELETE = "goal_delete"
    CHECKPOINT_EDIT = "checkpoint_edit"
    WEIGHTS_MANAGE = "weights_manage"
    SETTINGS_MANAGE = "settings_manage"
    USERS_MANAGE = "users_manage"
    SNAPSHOT_CREATE = "snapshot_create"
    VIEW_ALL_DEPARTMENTS = "view_all_departments"
    VIEW_GLOBAL_DASHBOARD = "view_global_dashboard"
    LOGS_VIEW = "logs_view"


# Wire sentinel meaning "every permission"
ALL_PERMISSIONS_SENTINEL = "ALL"
# assignedDepartments sentinel meaning "every department"
ALL_DEPARTMENTS_SENTINEL = "ALL"
# View identifier of the organization-wide overview
HOME_VIEW = "HOME"


class KpiUnit(str, Enum):
    """Display unit of a KPI value."""

    CURRENCY = "currency"
    PERCENT = "percent"
    NUMBER = "number"
    RATING = "rating"


class KpiTrend(str, Enum):
    """
    Favorable direction of a KPI.

    UP = higher value is better (revenue)
    DOWN = lower value is better (churn)
    """

    UP = "up"
    DOWN = "down"


class CalculationType(str, Enum):
    """How a goal's progress is obtained."""

    MANUAL = "manual"
    QUANTITATIVE = "quantitative"
    MILESTONE = "milestone"


class LogSeverity(str, Enum):
    """Severity class of an access log entry."""

    INFO = "info"
    SUCCESS = "success"
    WARNING = "warning"
    ERROR = "error"


class UserStatus(str, Enum):
    """Account status."""

    ACTIVE = "active"
    BLOCKED = "blocked"
