"""
Weekly snapshot model.

A snapshot freezes the computed scores at a point in time for trend reporting.
"""

from pydantic import Field

from kpiboard.models.base import CamelModel


class WeeklySnapshot(CamelModel):
    """Point-in-time score rollup. Replaced only by an upsert with the same ID."""

    id: str = Field(..., min_length=1, description="Snapshot ID")
    date: str = Field(..., description="ISO date of the check-in")
    timestamp: int = Field(..., description="Epoch milliseconds, sort key")
    week_label: str = Field(..., description="Human label of the week")
    overall_score: float = Field(0)
    department_scores: dict[str, float] = Field(default_factory=dict)
    category_scores: dict[str, float] = Field(default_factory=dict)


class SnapshotCapture(CamelModel):
    """Request to freeze the current scores under a week label."""

    week_label: str = Field(..., min_length=1, description="Human label of the week")
