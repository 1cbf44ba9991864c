"""
Dependency injection for API endpoints.

One process serves one board session; the controller and its store are
created once and shared by every route.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends, HTTPException, status

from kpiboard.core.config import get_settings
from kpiboard.core.exceptions import (
    AuthenticationError,
    AuthorizationError,
    InfrastructureError,
    KpiBoardError,
    NotFoundError,
    ValidationError,
)
from kpiboard.interfaces.kpi_store import IKpiStore
from kpiboard.services.board import KpiBoard


# ===========================================
# Store / Controller Dependencies
# ===========================================


@lru_cache()
def get_kpi_store() -> IKpiStore:
    """Get KPI store instance."""
    from kpiboard.infrastructure.local.kpi_store import SqliteKpiStore

    return SqliteKpiStore()


@lru_cache()
def get_board() -> KpiBoard:
    """Get the board controller shared by all routes."""
    return KpiBoard(get_kpi_store(), settings=get_settings())


# ===========================================
# Error translation
# ===========================================

_STATUS_BY_ERROR: list[tuple[type[KpiBoardError], int]] = [
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ValidationError, status.HTTP_422_UNPROCESSABLE_CONTENT),
    (InfrastructureError, status.HTTP_503_SERVICE_UNAVAILABLE),
]


def http_error(exc: KpiBoardError) -> HTTPException:
    """Map a domain error to the HTTP response the routes answer with."""
    status_code = next(
        (code for error_type, code in _STATUS_BY_ERROR if isinstance(exc, error_type)),
        status.HTTP_400_BAD_REQUEST,
    )
    headers = {"WWW-Authenticate": "Bearer"} if status_code == status.HTTP_401_UNAUTHORIZED else None
    return HTTPException(status_code=status_code, detail=exc.message, headers=headers)


# Type aliases for cleaner dependency injection
Board = Annotated[KpiBoard, Depends(get_board)]
