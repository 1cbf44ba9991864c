"""
Unit tests for the gated mutation pipeline.
"""

import pytest

from kpiboard.core.exceptions import ForbiddenError
from kpiboard.models.app_config import DepartmentMeta
from kpiboard.models.department import Checkpoint, Department, Kpi, ManualGoal
from kpiboard.models.enums import LogSeverity
from kpiboard.models.weights import WeightConfig
from kpiboard.services.seed_data import default_weights, initial_config, initial_data
from kpiboard.services.state_store import StateStore


@pytest.fixture
def store():
    state = StateStore(initial_data(), default_weights(), initial_config())
    state.changes = []
    state.subscribe(state.changes.append)
    return state


def _kpi(kpi_id="kpi-new", name="Leads"):
    return Kpi(id=kpi_id, name=name, value=10, target=20)


def _goal(goal_id="goal-new", title="Launch", progress=10):
    return ManualGoal(id=goal_id, title=title, category="Sales Engine", status="Planejado", progress=progress)


class TestKpiMutations:
    def test_add_kpi_replaces_only_the_department(self, store, manager_user):
        before = store.data
        untouched = before["FIN"]

        updated = store.add_kpi(manager_user, "OPS", _kpi())

        assert updated.kpis[-1].id == "kpi-new"
        assert store.data is not before
        assert store.data["OPS"] is updated
        assert before["OPS"] is not updated
        assert len(before["OPS"].kpis) == 5
        assert store.data["FIN"] is untouched

    def test_add_kpi_emits_audited_success(self, store, manager_user):
        store.add_kpi(manager_user, "OPS", _kpi(name="Leads"))

        change = store.changes[-1]
        assert change.is_audited
        assert change.action == "Created KPI"
        assert change.details == 'Added "Leads" to OPS'
        assert change.severity == LogSeverity.SUCCESS

    def test_denied_create_is_silent_noop(self, store, operational_user):
        before = store.data

        assert store.add_kpi(operational_user, "OPS", _kpi()) is None
        assert store.data is before
        assert store.changes == []

    def test_update_kpi_replaces_by_id(self, store, manager_user):
        edited = _kpi("kpi-ops-nps", "NPS").model_copy(update={"value": 70})

        updated = store.update_kpi(manager_user, "OPS", edited)

        nps = next(k for k in updated.kpis if k.id == "kpi-ops-nps")
        assert nps.value == 70
        assert [k.id for k in updated.kpis] == [k.id for k in initial_data()["OPS"].kpis]
        assert store.changes[-1].severity == LogSeverity.INFO

    def test_update_unknown_kpi_is_noop(self, store, manager_user):
        assert store.update_kpi(manager_user, "OPS", _kpi("kpi-missing")) is None
        assert store.changes == []

    def test_delete_denied_raises_and_keeps_kpis(self, store, operational_user):
        kpis_before = list(store.data["OPS"].kpis)

        with pytest.raises(ForbiddenError):
            store.delete_kpi(operational_user, "OPS", "kpi-ops-churn")

        assert store.data["OPS"].kpis == kpis_before
        assert store.changes == []

    def test_delete_reads_name_before_removal(self, store, manager_user):
        updated = store.delete_kpi(manager_user, "OPS", "kpi-ops-churn")

        assert all(k.id != "kpi-ops-churn" for k in updated.kpis)
        assert store.changes[-1].details == 'Removed "Churn" from OPS'
        assert store.changes[-1].severity == LogSeverity.WARNING

    def test_delete_unknown_id_uses_generic_name(self, store, manager_user):
        store.delete_kpi(manager_user, "OPS", "kpi-missing")
        assert store.changes[-1].details == 'Removed "KPI" from OPS'

    def test_unknown_department_is_noop(self, store, manager_user):
        assert store.add_kpi(manager_user, "NOPE", _kpi()) is None
        assert "NOPE" not in store.data
        assert store.changes == []


class TestGoalMutations:
    def test_add_update_delete_goal(self, store, manager_user):
        store.add_goal(manager_user, "VD", _goal())
        store.update_goal(manager_user, "VD", _goal(progress=80))
        assert store.data["VD"].goals[0].progress == 80

        store.delete_goal(manager_user, "VD", "goal-new")

        assert store.data["VD"].goals == []
        assert [c.action for c in store.changes] == ["Created goal", "Updated goal", "Deleted goal"]

    def test_delete_goal_denied(self, store, operational_user):
        with pytest.raises(ForbiddenError):
            store.delete_goal(operational_user, "OPS", "goal-ops-1")
        assert len(store.data["OPS"].goals) == 8


class TestCheckpointsAndWeights:
    def test_update_checkpoint(self, store, manager_user):
        department = store.data["OPS"].model_copy(
            update={"checkpoints": [Checkpoint(id="cp1", date="2026-01-15")]}
        )
        store.replace(data={**store.data, "OPS": department})

        updated = store.update_checkpoint(
            manager_user, "OPS", Checkpoint(id="cp1", date="2026-01-15", completed=True)
        )

        assert updated.checkpoints[0].completed is True
        assert store.changes[-1].action == "Timeline"

    def test_update_weights_copies_input(self, store, manager_user):
        weights = WeightConfig(kpi_weight=70, goal_weight=30)

        updated = store.update_weights(manager_user, "OPS", weights)

        assert store.weights["OPS"].kpi_weight == 70
        assert updated is not weights
        assert store.changes[-1].action == "Weights"
        assert store.changes[-1].severity == LogSeverity.WARNING

    def test_update_weights_denied(self, store, operational_user):
        assert store.update_weights(operational_user, "OPS", WeightConfig(kpi_weight=0)) is None
        assert store.weights["OPS"].kpi_weight == 50


class TestStructuralChanges:
    def test_apply_config_creates_and_renames_departments(self, store, admin_user):
        config = initial_config()
        departments = [
            meta.model_copy(update={"name": "Operations"}) if meta.id == "OPS" else meta
            for meta in config.departments
        ]
        departments.append(DepartmentMeta(id="LEGAL", name="Legal"))
        ops_goals = store.data["OPS"].goals

        store.apply_config(admin_user, config.model_copy(update={"departments": departments}))

        assert store.data["LEGAL"] == Department(id="LEGAL", name="Legal", label="Legal")
        assert store.weights["LEGAL"] == WeightConfig()
        assert store.data["OPS"].name == "Operations"
        assert store.data["OPS"].label == "Operations"
        assert store.data["OPS"].goals == ops_goals
        assert store.changes[-1].fields == frozenset({"config", "data", "weights"})

    def test_apply_config_requires_settings_manage(self, store, manager_user):
        with pytest.raises(ForbiddenError):
            store.apply_config(manager_user, initial_config())

    def test_replace_is_not_audited(self, store):
        fields = store.replace(weights={})

        assert fields == frozenset({"weights"})
        assert store.weights == {}
        assert not store.changes[-1].is_audited
