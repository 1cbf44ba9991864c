"""
Backup API endpoints.
"""

from typing import Any

from fastapi import APIRouter, Body

from kpiboard.api.deps import Board, http_error
from kpiboard.core.exceptions import KpiBoardError
from kpiboard.models.backup import BackupPayload

router = APIRouter()


@router.get("", response_model=BackupPayload, response_model_exclude_none=True)
async def export_backup(board: Board):
    """Full state as a restorable JSON document."""
    try:
        return board.export_backup()
    except KpiBoardError as e:
        raise http_error(e) from e


@router.post("/restore")
async def restore_backup(board: Board, payload: Any = Body(...)):
    """
    Restore the top-level keys present in the payload.

    A payload that is not a non-empty object is rejected before anything
    changes.
    """
    try:
        fields = await board.restore(payload)
    except KpiBoardError as e:
        raise http_error(e) from e
    return {"restored": fields}
