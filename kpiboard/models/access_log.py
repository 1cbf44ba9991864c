"""
Access log model.
"""

from typing import Optional

from pydantic import Field

from kpiboard.models.base import CamelModel
from kpiboard.models.enums import LogSeverity


class AccessLog(CamelModel):
    """Append-only audit entry."""

    id: str = Field(..., min_length=1)
    user_id: str
    user_name: str
    action: str
    details: Optional[str] = None
    type: LogSeverity = Field(LogSeverity.INFO)
    timestamp: int = Field(..., description="Epoch milliseconds")
    date: str = Field(..., description="ISO date")
    time: str = Field(..., description="HH:MM:SS")
