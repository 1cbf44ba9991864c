"""
Read models handed to the presentation layer.
"""

from typing import Optional

from pydantic import Field

from kpiboard.models.app_config import DepartmentMeta
from kpiboard.models.base import CamelModel
from kpiboard.models.department import Department
from kpiboard.models.enums import HOME_VIEW
from kpiboard.models.scores import DepartmentScore
from kpiboard.models.user import User
from kpiboard.models.weights import WeightConfig


class DepartmentView(CamelModel):
    """One department with its weights, computed score and the caller's capabilities."""

    department: Department
    weights: WeightConfig
    score: DepartmentScore
    permissions: dict[str, bool] = Field(default_factory=dict)


class SessionInfo(CamelModel):
    user: Optional[User] = None
    selected_view: str = HOME_VIEW
    permissions: list[str] = Field(default_factory=list)
    departments: list[DepartmentMeta] = Field(default_factory=list)
    is_ready: bool = False
    is_saving: bool = False
