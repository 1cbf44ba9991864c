"""
Session API endpoints.

The credential flow lives in the authentication provider; login receives the
user it resolved.
"""

from fastapi import APIRouter

from kpiboard.api.deps import Board, http_error
from kpiboard.core.exceptions import KpiBoardError
from kpiboard.models.user import User
from kpiboard.models.views import SessionInfo

router = APIRouter()


@router.get("", response_model=SessionInfo)
async def get_session(board: Board):
    """Current user, selected view and capabilities."""
    return board.session_info()


@router.post("/login", response_model=SessionInfo)
async def login(user: User, board: Board):
    try:
        return board.login(user)
    except KpiBoardError as e:
        raise http_error(e) from e


@router.post("/logout", response_model=SessionInfo)
async def logout(board: Board):
    try:
        return await board.logout()
    except KpiBoardError as e:
        raise http_error(e) from e


@router.post("/navigate/{view}", response_model=SessionInfo)
async def navigate(view: str, board: Board):
    """Select HOME or a department the user may open."""
    try:
        return board.navigate(view)
    except KpiBoardError as e:
        raise http_error(e) from e
