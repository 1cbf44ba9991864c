"""
Unit tests for score calculation.
"""

from datetime import datetime, timezone

import pytest

from kpiboard.models.app_config import AppConfig, DepartmentMeta
from kpiboard.models.department import (
    Department,
    Kpi,
    ManualGoal,
    Milestone,
    MilestoneGoal,
    QuantitativeGoal,
)
from kpiboard.models.enums import KpiTrend
from kpiboard.models.weights import WeightConfig
from kpiboard.services.score_engine import (
    build_snapshot,
    category_scores,
    department_breakdown,
    department_score,
    goal_progress,
    kpi_achievement,
    overall_score,
    score_overview,
    snapshot_id_for,
    weighted_average,
    with_computed_progress,
)


def _goal(goal_id="g1", category="Sales Engine", progress=0.0):
    return ManualGoal(id=goal_id, title=goal_id, category=category, status="Planejado", progress=progress)


class TestGoalProgress:
    def test_milestone_progress_sums_completed_weights(self):
        goal = MilestoneGoal(
            id="g-m",
            title="Retention",
            category="Innovation & AI",
            status="Planejado",
            milestones=[
                Milestone(id="m1", label="a", weight=30, completed=True),
                Milestone(id="m2", label="b", weight=40, completed=False),
                Milestone(id="m3", label="c", weight=30, completed=True),
            ],
        )
        assert goal_progress(goal) == 60

    def test_milestone_progress_is_capped_at_100(self):
        goal = MilestoneGoal(
            id="g-m",
            title="Over",
            category="c",
            status="s",
            milestones=[
                Milestone(id="m1", label="a", weight=80, completed=True),
                Milestone(id="m2", label="b", weight=70, completed=True),
            ],
        )
        assert goal_progress(goal) == 100

    def test_quantitative_progress_is_linear(self):
        goal = QuantitativeGoal(
            id="g-q", title="Referrals", category="c", status="s", current_value=3, target_value=6
        )
        assert goal_progress(goal) == 50

    @pytest.mark.parametrize("target", [None, 0])
    def test_quantitative_without_target_is_zero(self, target):
        goal = QuantitativeGoal(
            id="g-q", title="t", category="c", status="s", current_value=10, target_value=target
        )
        assert goal_progress(goal) == 0

    def test_quantitative_clamps_overshoot(self):
        goal = QuantitativeGoal(
            id="g-q", title="t", category="c", status="s", current_value=12, target_value=6
        )
        assert goal_progress(goal) == 100

    def test_manual_progress_is_taken_as_is(self):
        assert goal_progress(_goal(progress=42.5)) == 42.5

    def test_with_computed_progress_returns_a_copy(self):
        goal = QuantitativeGoal(
            id="g-q", title="t", category="c", status="s", current_value=2, target_value=8
        )
        computed = with_computed_progress(goal)
        assert computed.progress == 25
        assert goal.progress == 0
        assert computed is not goal


class TestKpiAchievement:
    def test_up_trend_ratio(self):
        assert kpi_achievement(Kpi(id="k", name="NPS", value=40, target=80)) == 50

    def test_up_trend_is_capped(self):
        assert kpi_achievement(Kpi(id="k", name="NPS", value=160, target=80)) == 100

    def test_up_trend_cap_can_allow_overachievement(self):
        kpi = Kpi(id="k", name="NPS", value=160, target=80)
        assert kpi_achievement(kpi, cap=1.5) == 150

    def test_up_trend_zero_target_counts_as_met(self):
        assert kpi_achievement(Kpi(id="k", name="x", value=0, target=0)) == 100

    def test_down_trend_inverse_ratio(self):
        kpi = Kpi(id="k", name="Churn", value=120000, target=60000, trend=KpiTrend.DOWN)
        assert kpi_achievement(kpi) == 50

    def test_down_trend_zero_value_is_full_achievement(self):
        kpi = Kpi(id="k", name="Churn", value=0, target=60000, trend=KpiTrend.DOWN)
        assert kpi_achievement(kpi) == 100

    @pytest.mark.parametrize("cap", [1.0, 1.5])
    def test_down_trend_never_rewards_a_higher_value(self, cap):
        achievements = [
            kpi_achievement(
                Kpi(id="k", name="Churn", value=value, target=60000, trend=KpiTrend.DOWN),
                cap=cap,
            )
            for value in (0, 1000, 60000, 120000)
        ]

        assert achievements == sorted(achievements, reverse=True)
        assert achievements[0] == cap * 100
        assert achievements[2] == 100
        assert achievements[3] == 50

    def test_negative_value_never_goes_below_zero(self):
        assert kpi_achievement(Kpi(id="k", name="x", value=-5, target=10)) == 0


class TestDepartmentScore:
    def test_ops_example_scores_75(self):
        goal = with_computed_progress(
            QuantitativeGoal(
                id="g-q", title="t", category="c", status="s", current_value=3, target_value=6
            )
        )
        department = Department(
            id="OPS",
            name="Ops",
            kpis=[Kpi(id="k", name="NPS", value=85, target=85)],
            goals=[goal],
        )
        weights = WeightConfig(kpi_weight=50, goal_weight=50)

        assert department_score(department, weights) == 75

    def test_empty_department_scores_zero(self):
        breakdown = department_breakdown(Department(id="HR", name="HR"))
        assert breakdown.score == 0
        assert breakdown.is_empty is True

    def test_only_kpis_uses_kpi_average(self):
        department = Department(id="D", name="D", kpis=[Kpi(id="k", name="x", value=30, target=100)])
        breakdown = department_breakdown(department, WeightConfig(kpi_weight=20, goal_weight=80))
        assert breakdown.score == 30
        assert breakdown.goal_average is None

    def test_only_goals_uses_goal_average(self):
        department = Department(id="D", name="D", goals=[_goal(progress=70)])
        assert department_score(department, WeightConfig(kpi_weight=90, goal_weight=10)) == 70

    def test_item_overrides_weight_the_average(self):
        department = Department(
            id="D",
            name="D",
            goals=[_goal("g1", progress=100), _goal("g2", progress=0)],
        )
        weights = WeightConfig(goals={"g1": 75, "g2": 25})
        assert department_breakdown(department, weights).goal_average == 75

    def test_all_zero_item_weights_give_zero(self):
        department = Department(id="D", name="D", goals=[_goal("g1", progress=90)])
        weights = WeightConfig(goals={"g1": 0})
        assert department_breakdown(department, weights).goal_average == 0

    def test_missing_weights_default_to_half_and_half(self):
        department = Department(
            id="D",
            name="D",
            kpis=[Kpi(id="k", name="x", value=100, target=100)],
            goals=[_goal(progress=0)],
        )
        assert department_score(department, None) == 50


class TestRollups:
    def test_weighted_average_of_nothing_is_none(self):
        assert weighted_average([]) is None

    def test_overall_score_is_mean_of_departments(self):
        assert overall_score({"A": 80, "B": 40}) == 60

    def test_overall_score_without_departments_is_zero(self):
        assert overall_score({}) == 0

    def test_category_scores_group_goals_across_departments(self):
        departments = [
            Department(id="A", name="A", goals=[_goal("a1", "Growth", 100)]),
            Department(id="B", name="B", goals=[_goal("b1", "Growth", 50), _goal("b2", "People", 20)]),
        ]
        assert category_scores(departments) == {"Growth": 75, "People": 20}

    def test_overview_only_scores_configured_departments(self):
        data = {
            "A": Department(id="A", name="A", goals=[_goal(progress=80)]),
            "B": Department(id="B", name="B", goals=[_goal(progress=20)]),
        }
        config = AppConfig(departments=[DepartmentMeta(id="A", name="A")])

        overview = score_overview(data, {}, config)

        assert list(overview.departments) == ["A"]
        assert overview.overall_score == 80


class TestSnapshots:
    def test_snapshot_id_is_slug_of_label(self):
        assert snapshot_id_for("Week 12 / 2026") == "week-week-12-2026"

    def test_build_snapshot_rounds_scores(self):
        data = {"A": Department(id="A", name="A", goals=[_goal(progress=100 / 3)])}
        now = datetime(2026, 3, 20, 12, 0, tzinfo=timezone.utc)

        snapshot = build_snapshot(data, {}, None, "W12", now)

        assert snapshot.id == "week-w12"
        assert snapshot.date == "2026-03-20"
        assert snapshot.timestamp == int(now.timestamp() * 1000)
        assert snapshot.overall_score == 33.3
        assert snapshot.department_scores == {"A": 33.3}
        assert snapshot.category_scores == {"Sales Engine": 33.3}
