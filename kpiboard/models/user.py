"""
User model definitions.

Users are resolved by the authentication collaborator and held only in the
session; this backend never persists them.
"""

from typing import Optional

from pydantic import Field

from kpiboard.models.base import CamelModel
from kpiboard.models.enums import ALL_DEPARTMENTS_SENTINEL, UserStatus


class User(CamelModel):
    """Authenticated session user."""

    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    email: Optional[str] = Field(None)
    role: str = Field(..., description="Role name, key of AppConfig.rolePermissions")
    status: UserStatus = Field(UserStatus.ACTIVE)
    assigned_departments: list[str] = Field(
        default_factory=list,
        description="Department IDs, or ['ALL']",
    )

    @property
    def sees_all_departments(self) -> bool:
        return ALL_DEPARTMENTS_SENTINEL in self.assigned_departments
