"""
Department API endpoints.

Covers KPIs, goals, checkpoints and weights of one department. A create or
update the user is not allowed to make answers with the unchanged resource;
denied deletes answer 403.
"""

from typing import Any

import pydantic
from fastapi import APIRouter, Body
from fastapi.exceptions import RequestValidationError

from kpiboard.api.deps import Board, http_error
from kpiboard.core.exceptions import KpiBoardError
from kpiboard.models.app_config import DepartmentMeta
from kpiboard.models.department import Checkpoint, Department, Goal, Kpi, parse_goal
from kpiboard.models.views import DepartmentView
from kpiboard.models.weights import WeightConfig
from kpiboard.services.score_engine import with_computed_progress

router = APIRouter()


def _goal_from_body(payload: dict[str, Any], goal_id: str | None = None) -> Goal:
    if goal_id is not None:
        payload = {**payload, "id": goal_id}
    try:
        goal = parse_goal(payload)
    except pydantic.ValidationError as e:
        raise RequestValidationError(e.errors()) from e
    return with_computed_progress(goal)


def _department_or_current(board, department_id: str, result):
    # Denied creates/updates leave the department untouched
    return result if result is not None else board.state.get_department(department_id)


@router.get("", response_model=list[DepartmentMeta])
async def list_departments(board: Board):
    """Departments the current user is assigned to."""
    try:
        return board.list_departments()
    except KpiBoardError as e:
        raise http_error(e) from e


@router.get("/{department_id}", response_model=DepartmentView)
async def get_department(department_id: str, board: Board):
    """Department with weights, score breakdown and permission flags."""
    try:
        return board.department_view(department_id)
    except KpiBoardError as e:
        raise http_error(e) from e


# ===========================================
# KPIs
# ===========================================


@router.post("/{department_id}/kpis", response_model=Department)
async def create_kpi(department_id: str, kpi: Kpi, board: Board):
    try:
        result = board.add_kpi(department_id, kpi)
    except KpiBoardError as e:
        raise http_error(e) from e
    return _department_or_current(board, department_id, result)


@router.put("/{department_id}/kpis/{kpi_id}", response_model=Department)
async def update_kpi(department_id: str, kpi_id: str, kpi: Kpi, board: Board):
    try:
        result = board.update_kpi(department_id, kpi.model_copy(update={"id": kpi_id}))
    except KpiBoardError as e:
        raise http_error(e) from e
    return _department_or_current(board, department_id, result)


@router.delete("/{department_id}/kpis/{kpi_id}", response_model=Department)
async def delete_kpi(department_id: str, kpi_id: str, board: Board):
    try:
        return board.delete_kpi(department_id, kpi_id)
    except KpiBoardError as e:
        raise http_error(e) from e


# ===========================================
# Goals
# ===========================================


@router.post("/{department_id}/goals", response_model=Department)
async def create_goal(department_id: str, board: Board, payload: dict[str, Any] = Body(...)):
    """Create a goal; its progress is recomputed from its calculation strategy."""
    goal = _goal_from_body(payload)
    try:
        result = board.add_goal(department_id, goal)
    except KpiBoardError as e:
        raise http_error(e) from e
    return _department_or_current(board, department_id, result)


@router.put("/{department_id}/goals/{goal_id}", response_model=Department)
async def update_goal(
    department_id: str,
    goal_id: str,
    board: Board,
    payload: dict[str, Any] = Body(...),
):
    goal = _goal_from_body(payload, goal_id)
    try:
        result = board.update_goal(department_id, goal)
    except KpiBoardError as e:
        raise http_error(e) from e
    return _department_or_current(board, department_id, result)


@router.delete("/{department_id}/goals/{goal_id}", response_model=Department)
async def delete_goal(department_id: str, goal_id: str, board: Board):
    try:
        return board.delete_goal(department_id, goal_id)
    except KpiBoardError as e:
        raise http_error(e) from e


# ===========================================
# Checkpoints / Weights
# ===========================================


@router.put("/{department_id}/checkpoints/{checkpoint_id}", response_model=Department)
async def update_checkpoint(
    department_id: str,
    checkpoint_id: str,
    checkpoint: Checkpoint,
    board: Board,
):
    try:
        result = board.update_checkpoint(
            department_id, checkpoint.model_copy(update={"id": checkpoint_id})
        )
    except KpiBoardError as e:
        raise http_error(e) from e
    return _department_or_current(board, department_id, result)


@router.put("/{department_id}/weights", response_model=WeightConfig)
async def update_weights(department_id: str, weights: WeightConfig, board: Board):
    try:
        result = board.update_weights(department_id, weights)
    except KpiBoardError as e:
        raise http_error(e) from e
    return result if result is not None else board.state.get_weights(department_id)
