"""
Overview API endpoint.
"""

from fastapi import APIRouter

from kpiboard.api.deps import Board, http_error
from kpiboard.core.exceptions import KpiBoardError
from kpiboard.models.scores import ScoreOverview

router = APIRouter()


@router.get("", response_model=ScoreOverview)
async def get_overview(board: Board):
    """Organization, department and category scores, computed on demand."""
    try:
        return board.overview()
    except KpiBoardError as e:
        raise http_error(e) from e
