"""Pydantic models (schemas) for the application."""

from kpiboard.models.access_log import AccessLog
from kpiboard.models.app_config import (
    AppConfig,
    CategoryMeta,
    DepartmentMeta,
    RoleGrant,
    StatusMeta,
)
from kpiboard.models.backup import BackupPayload
from kpiboard.models.department import (
    Checkpoint,
    Department,
    Departments,
    Goal,
    Kpi,
    ManualGoal,
    Milestone,
    MilestoneGoal,
    QuantitativeGoal,
    parse_goal,
)
from kpiboard.models.enums import (
    CalculationType,
    KpiTrend,
    KpiUnit,
    LogSeverity,
    Permission,
    UserStatus,
)
from kpiboard.models.scores import DepartmentScore, ScoreOverview
from kpiboard.models.snapshot import SnapshotCapture, WeeklySnapshot
from kpiboard.models.user import User
from kpiboard.models.views import DepartmentView, SessionInfo
from kpiboard.models.weights import WeightConfig, Weights

__all__ = [
    # Enums
    "CalculationType",
    "KpiTrend",
    "KpiUnit",
    "LogSeverity",
    "Permission",
    "UserStatus",
    # Department
    "Checkpoint",
    "Department",
    "Departments",
    "Goal",
    "Kpi",
    "ManualGoal",
    "Milestone",
    "MilestoneGoal",
    "QuantitativeGoal",
    "parse_goal",
    # Configuration
    "AppConfig",
    "CategoryMeta",
    "DepartmentMeta",
    "RoleGrant",
    "StatusMeta",
    "WeightConfig",
    "Weights",
    # History / session
    "AccessLog",
    "BackupPayload",
    "User",
    "SnapshotCapture",
    "WeeklySnapshot",
    # Read models
    "DepartmentScore",
    "DepartmentView",
    "ScoreOverview",
    "SessionInfo",
]
