"""
Access log API endpoint.
"""

from fastapi import APIRouter, Query

from kpiboard.api.deps import Board, http_error
from kpiboard.core.exceptions import KpiBoardError
from kpiboard.models.access_log import AccessLog

router = APIRouter()


@router.get("", response_model=list[AccessLog])
async def list_logs(board: Board, limit: int = Query(200, ge=1, le=1000)):
    """Access log entries, newest first."""
    try:
        return await board.list_logs(limit)
    except KpiBoardError as e:
        raise http_error(e) from e
