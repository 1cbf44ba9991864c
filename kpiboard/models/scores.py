"""
Computed score models.

These are derived on demand by the score engine and never persisted, except
as part of a weekly snapshot.
"""

from typing import Optional

from pydantic import Field

from kpiboard.models.base import CamelModel


class DepartmentScore(CamelModel):
    """Score of one department with its two weighted terms."""

    department_id: str
    score: float = Field(0, description="Combined score, 0-100 (or above with an over-achievement cap)")
    kpi_average: Optional[float] = Field(None, description="None when the department has no KPIs")
    goal_average: Optional[float] = Field(None, description="None when the department has no goals")
    is_empty: bool = Field(False, description="No KPIs and no goals: score forced to 0")


class ScoreOverview(CamelModel):
    """Organization-wide rollup."""

    overall_score: float = 0
    departments: dict[str, DepartmentScore] = Field(default_factory=dict)
    category_scores: dict[str, float] = Field(default_factory=dict)
