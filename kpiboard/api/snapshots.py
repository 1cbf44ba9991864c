"""
Weekly snapshot API endpoints.
"""

from typing import Optional

from fastapi import APIRouter

from kpiboard.api.deps import Board, http_error
from kpiboard.core.exceptions import KpiBoardError
from kpiboard.models.snapshot import SnapshotCapture, WeeklySnapshot

router = APIRouter()


@router.get("", response_model=list[WeeklySnapshot])
async def list_snapshots(board: Board):
    """Snapshot history ordered by ascending timestamp."""
    try:
        board.require_user()
    except KpiBoardError as e:
        raise http_error(e) from e
    return list(board.snapshots)


@router.post("", response_model=Optional[WeeklySnapshot])
async def save_snapshot(snapshot: WeeklySnapshot, board: Board):
    """Upsert a snapshot by ID. Answers null when the user may not save check-ins."""
    try:
        return await board.save_snapshot(snapshot)
    except KpiBoardError as e:
        raise http_error(e) from e


@router.post("/capture", response_model=Optional[WeeklySnapshot])
async def capture_snapshot(request: SnapshotCapture, board: Board):
    """Freeze the current scores under the given week label."""
    try:
        return await board.create_snapshot(request.week_label)
    except KpiBoardError as e:
        raise http_error(e) from e
