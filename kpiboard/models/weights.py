"""
Weight configuration models.

Weights decide how KPI and goal contributions combine into a department score.
"""

from pydantic import Field, TypeAdapter

from kpiboard.models.base import CamelModel

DEFAULT_KPI_WEIGHT = 50.0
DEFAULT_GOAL_WEIGHT = 50.0


class WeightConfig(CamelModel):
    """Per-department weighting. Group weights should sum to 100 (not enforced)."""

    kpi_weight: float = Field(DEFAULT_KPI_WEIGHT, description="Share of the KPI term (%)")
    goal_weight: float = Field(DEFAULT_GOAL_WEIGHT, description="Share of the goal term (%)")
    kpis: dict[str, float] = Field(default_factory=dict, description="KPI ID -> item weight")
    goals: dict[str, float] = Field(default_factory=dict, description="Goal ID -> item weight")


Weights = dict[str, WeightConfig]

WEIGHTS_ADAPTER: TypeAdapter[Weights] = TypeAdapter(Weights)
