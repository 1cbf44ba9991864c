"""
Score calculation utilities.

Turn KPI values and goal data into 0-100 progress values and roll them up
into department, category and organization-wide scores. Every function is
pure: same inputs, same output, no access to the store.
"""

from __future__ import annotations

import re
from datetime import datetime
from typing import Iterable, Mapping, Optional, assert_never

from kpiboard.core.logger import setup_logger
from kpiboard.models.app_config import AppConfig
from kpiboard.models.department import (
    Department,
    Departments,
    Goal,
    Kpi,
    ManualGoal,
    MilestoneGoal,
    QuantitativeGoal,
)
from kpiboard.models.enums import KpiTrend
from kpiboard.models.scores import DepartmentScore, ScoreOverview
from kpiboard.models.snapshot import WeeklySnapshot
from kpiboard.models.weights import WeightConfig, Weights

logger = setup_logger(__name__)

DEFAULT_ACHIEVEMENT_CAP = 1.0
FULL_ACHIEVEMENT = 100.0


def _clamp(value: float, lower: float, upper: float) -> float:
    return max(lower, min(value, upper))


def _round(value: float) -> float:
    return round(value, 1)


def weighted_average(items: Iterable[tuple[float, float]]) -> Optional[float]:
    """
    Average ``(value, weight)`` pairs.

    Returns None for no items, and 0 when every weight is 0.
    """
    pairs = list(items)
    if not pairs:
        return None
    total_weight = sum(weight for _, weight in pairs)
    if total_weight == 0:
        return 0.0
    return sum(value * weight for value, weight in pairs) / total_weight


def _item_weights(ids: list[str], overrides: Mapping[str, float]) -> list[float]:
    # Items without an override get an equal share of 100 within their group
    if not ids:
        return []
    equal_share = 100 / len(ids)
    return [overrides.get(item_id, equal_share) for item_id in ids]


# ===========================================
# Goals
# ===========================================


def goal_progress(goal: Goal) -> float:
    """Progress of a goal according to its calculation strategy."""
    if isinstance(goal, ManualGoal):
        return goal.progress
    if isinstance(goal, QuantitativeGoal):
        if not goal.target_value:
            return 0.0
        return _clamp(goal.current_value / goal.target_value * 100, 0.0, 100.0)
    if isinstance(goal, MilestoneGoal):
        completed = sum(m.weight for m in goal.milestones if m.completed)
        return _clamp(completed, 0.0, 100.0)
    assert_never(goal)


def with_computed_progress(goal: Goal) -> Goal:
    """Copy of the goal whose stored progress matches its strategy fields."""
    return goal.model_copy(update={"progress": goal_progress(goal)})


# ===========================================
# KPIs
# ===========================================


def kpi_achievement(kpi: Kpi, cap: float = DEFAULT_ACHIEVEMENT_CAP) -> float:
    """
    Achievement of a KPI as a percentage, between 0 and ``cap * 100``.

    Up-trend KPIs compare value / target, down-trend KPIs target / value.

    A down-trend value of zero or less scores the full cap rather than a flat
    100: above the default cap of 1.0 it counts as over-achievement (150 at a
    cap of 1.5), which keeps achievement from rising as the value grows.
    """
    upper = cap * 100
    if kpi.trend == KpiTrend.DOWN:
        # Nothing beats a value of zero when lower is better
        if kpi.value <= 0:
            return upper
        return _clamp(kpi.target / kpi.value * 100, 0.0, upper)
    if kpi.target == 0:
        return FULL_ACHIEVEMENT
    return _clamp(kpi.value / kpi.target * 100, 0.0, upper)


# ===========================================
# Departments
# ===========================================


def department_breakdown(
    department: Department,
    weights: Optional[WeightConfig] = None,
    cap: float = DEFAULT_ACHIEVEMENT_CAP,
) -> DepartmentScore:
    weights = weights or WeightConfig()

    kpi_weights = _item_weights([kpi.id for kpi in department.kpis], weights.kpis)
    kpi_average = weighted_average(
        (kpi_achievement(kpi, cap), weight)
        for kpi, weight in zip(department.kpis, kpi_weights)
    )
    goal_weights = _item_weights([goal.id for goal in department.goals], weights.goals)
    goal_average = weighted_average(
        (goal.progress, weight) for goal, weight in zip(department.goals, goal_weights)
    )

    if kpi_average is None and goal_average is None:
        logger.debug(f"Department {department.id} has no KPIs and no goals")
        return DepartmentScore(department_id=department.id, score=0.0, is_empty=True)
    if kpi_average is None:
        score = goal_average
    elif goal_average is None:
        score = kpi_average
    else:
        score = (kpi_average * weights.kpi_weight + goal_average * weights.goal_weight) / 100

    return DepartmentScore(
        department_id=department.id,
        score=score,
        kpi_average=kpi_average,
        goal_average=goal_average,
    )


def department_score(
    department: Department,
    weights: Optional[WeightConfig] = None,
    cap: float = DEFAULT_ACHIEVEMENT_CAP,
) -> float:
    return department_breakdown(department, weights, cap).score


def _scored_department_ids(data: Departments, config: Optional[AppConfig]) -> list[str]:
    if config is None:
        return list(data.keys())
    return [dept_id for dept_id in config.department_ids() if dept_id in data]


def department_breakdowns(
    data: Departments,
    weights: Weights,
    config: Optional[AppConfig] = None,
    cap: float = DEFAULT_ACHIEVEMENT_CAP,
) -> dict[str, DepartmentScore]:
    """Breakdown of every configured department (every department without a config)."""
    return {
        dept_id: department_breakdown(data[dept_id], weights.get(dept_id), cap)
        for dept_id in _scored_department_ids(data, config)
    }


# ===========================================
# Rollups
# ===========================================


def category_scores(
    departments: Iterable[Department],
    goal_weights: Optional[Mapping[str, float]] = None,
) -> dict[str, float]:
    """Average goal progress per category across all departments."""
    goals_by_category: dict[str, list[Goal]] = {}
    for department in departments:
        for goal in department.goals:
            goals_by_category.setdefault(goal.category, []).append(goal)

    overrides = goal_weights or {}
    scores: dict[str, float] = {}
    for category, goals in goals_by_category.items():
        item_weights = _item_weights([goal.id for goal in goals], overrides)
        scores[category] = weighted_average(
            (goal.progress, weight) for goal, weight in zip(goals, item_weights)
        )
    return scores


def overall_score(
    department_scores: Mapping[str, float],
    department_weights: Optional[Mapping[str, float]] = None,
) -> float:
    """Weighted average of department scores, equal weights by default."""
    weights = department_weights or {}
    average = weighted_average(
        (score, weights.get(dept_id, 1.0)) for dept_id, score in department_scores.items()
    )
    return average if average is not None else 0.0


def score_overview(
    data: Departments,
    weights: Weights,
    config: Optional[AppConfig] = None,
    cap: float = DEFAULT_ACHIEVEMENT_CAP,
) -> ScoreOverview:
    breakdowns = department_breakdowns(data, weights, config, cap)
    scored_departments = [data[dept_id] for dept_id in breakdowns]
    return ScoreOverview(
        overall_score=overall_score({k: v.score for k, v in breakdowns.items()}),
        departments=breakdowns,
        category_scores=category_scores(scored_departments),
    )


def snapshot_id_for(week_label: str) -> str:
    slug = re.sub(r"[^a-z0-9]+", "-", week_label.lower()).strip("-")
    return f"week-{slug or 'unlabeled'}"


def build_snapshot(
    data: Departments,
    weights: Weights,
    config: Optional[AppConfig],
    week_label: str,
    now: datetime,
    cap: float = DEFAULT_ACHIEVEMENT_CAP,
) -> WeeklySnapshot:
    """Freeze the current scores into a snapshot; the caller decides when to commit it."""
    overview = score_overview(data, weights, config, cap)
    return WeeklySnapshot(
        id=snapshot_id_for(week_label),
        date=now.date().isoformat(),
        timestamp=int(now.timestamp() * 1000),
        week_label=week_label,
        overall_score=_round(overview.overall_score),
        department_scores={k: _round(v.score) for k, v in overview.departments.items()},
        category_scores={k: _round(v) for k, v in overview.category_scores.items()},
    )
