"""
Organizational configuration API endpoints.
"""

from fastapi import APIRouter

from kpiboard.api.deps import Board, http_error
from kpiboard.core.exceptions import KpiBoardError
from kpiboard.models.app_config import AppConfig

router = APIRouter()


@router.get("", response_model=AppConfig)
async def get_config(board: Board):
    try:
        board.require_user()
    except KpiBoardError as e:
        raise http_error(e) from e
    return board.state.config


@router.put("", response_model=AppConfig)
async def update_config(config: AppConfig, board: Board):
    """
    Replace the configuration.

    New departments are created empty with default weights; renamed ones keep
    their data.
    """
    try:
        return board.update_config(config)
    except KpiBoardError as e:
        raise http_error(e) from e
