"""
Department model definitions.

A department owns its KPIs (recurring indicators), goals (initiatives tracked
to a 0-100 progress) and checkpoints (timeline entries).
"""

from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Discriminator, Field, Tag, TypeAdapter

from kpiboard.models.base import CamelModel
from kpiboard.models.enums import CalculationType, KpiTrend, KpiUnit


class Kpi(CamelModel):
    """Quantitative indicator compared against a target."""

    id: str = Field(..., min_length=1, description="KPI ID")
    name: str = Field(..., description="Display name")
    value: float = Field(0, description="Current (realized) value")
    target: float = Field(0, description="Target value")
    unit: KpiUnit = Field(KpiUnit.NUMBER, description="Display unit")
    trend: KpiTrend = Field(KpiTrend.UP, description="Favorable direction")
    icon: str = Field("Activity", description="Icon name")
    chart_visible: Optional[bool] = Field(None, description="Show in charts")


class Milestone(CamelModel):
    """Weighted sub-task of a milestone goal."""

    id: str = Field(..., min_length=1)
    label: str = Field(..., description="Milestone label")
    weight: float = Field(0, description="Contribution in percentage points")
    completed: bool = Field(False)


class GoalBase(CamelModel):
    """Fields shared by every goal variant."""

    id: str = Field(..., min_length=1, description="Goal ID")
    title: str = Field(..., description="Goal title")
    category: str = Field(..., description="Category ID (AppConfig.categories)")
    status: str = Field(..., description="Status ID (AppConfig.statuses)")
    progress: float = Field(0, description="Canonical progress, 0-100")
    description: str = Field("", description="Goal description")
    notes: Optional[str] = Field(None, description="Free-form notes")


class ManualGoal(GoalBase):
    """Progress is entered by hand."""

    calculation_type: Literal["manual"] = "manual"


class QuantitativeGoal(GoalBase):
    """Progress is current / target, linearly."""

    calculation_type: Literal["quantitative"] = "quantitative"
    current_value: float = Field(0, description="Realized amount")
    target_value: Optional[float] = Field(None, description="Amount to reach")
    metric_unit: Optional[str] = Field(None, description="Unit label")


class MilestoneGoal(GoalBase):
    """Progress is the summed weight of completed milestones."""

    calculation_type: Literal["milestone"] = "milestone"
    milestones: list[Milestone] = Field(default_factory=list)


def goal_kind(value: Any) -> str:
    # Stored goals may omit calculationType; those are manual.
    if isinstance(value, dict):
        kind = value.get("calculationType", value.get("calculation_type"))
    else:
        kind = getattr(value, "calculation_type", None)
    if not kind:
        return CalculationType.MANUAL.value
    return str(getattr(kind, "value", kind))


Goal = Annotated[
    Union[
        Annotated[ManualGoal, Tag(CalculationType.MANUAL.value)],
        Annotated[QuantitativeGoal, Tag(CalculationType.QUANTITATIVE.value)],
        Annotated[MilestoneGoal, Tag(CalculationType.MILESTONE.value)],
    ],
    Discriminator(goal_kind),
]

GOAL_ADAPTER: TypeAdapter[Goal] = TypeAdapter(Goal)


def parse_goal(payload: Any) -> Goal:
    """Validate a goal document (dict or model) into its variant."""
    return GOAL_ADAPTER.validate_python(payload)


class Checkpoint(CamelModel):
    """Timeline checkpoint of a department."""

    id: str = Field(..., min_length=1)
    date: str = Field(..., description="ISO date")
    completed: bool = Field(False)
    notes: str = Field("")


class Department(CamelModel):
    """Department with its KPIs, goals and checkpoints."""

    id: str = Field(..., min_length=1, description="Department ID")
    name: str = Field(..., description="Department name")
    label: str = Field("", description="Subtitle shown next to the name")
    kpis: list[Kpi] = Field(default_factory=list)
    goals: list[Goal] = Field(default_factory=list)
    checkpoints: list[Checkpoint] = Field(default_factory=list)


Departments = dict[str, Department]

DEPARTMENTS_ADAPTER: TypeAdapter[Departments] = TypeAdapter(Departments)
