"""
Custom exceptions for the application.
"""

from typing import Any, Optional


class KpiBoardError(Exception):
    """Base exception for kpiboard."""

    def __init__(self, message: str, details: Optional[Any] = None):
        self.message = message
        self.details = details
        super().__init__(message)


class NotFoundError(KpiBoardError):
    """Resource not found."""

    pass


class ValidationError(KpiBoardError):
    """Validation error."""

    pass


class AuthenticationError(KpiBoardError):
    """No authenticated session, or the session user may not log in."""

    pass


class AuthorizationError(KpiBoardError):
    """Authorization failed."""

    pass


class ForbiddenError(AuthorizationError):
    """Forbidden operation (permission denied)."""

    def __init__(self, message: str, permission: Optional[str] = None):
        super().__init__(message, details={"permission": permission} if permission else None)
        self.permission = permission


class InfrastructureError(KpiBoardError):
    """Infrastructure-related error (persistent store, scheduler)."""

    pass
