# backend/pixelforge/exceptions.py
"""Application exception classes.

Every expected failure is raised as an ``AppException`` subclass and turned
into the ``{"success": false, "message": ...}`` envelope by the handlers
registered in ``main.py``.
"""
from typing import Any, Optional


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        code: str,
        message: str,
        status_code: int = 400,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(message)


# ========== Validation ==========
class ValidationError(AppException):
    """Malformed or missing input."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(
            code="VALIDATION_ERROR",
            message=message,
            status_code=400,
            details={"field": field} if field else None,
        )


class InvalidIdentifierError(ValidationError):
    """Identifier is not a 24 character hex string."""

    def __init__(self, label: str):
        super().__init__(f"Invalid {label} ID format", field=label)


# ========== Authentication ==========
class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(self, message: str = "Unauthorized - Authentication failed"):
        super().__init__(code="AUTHENTICATION_ERROR", message=message, status_code=401)


class InvalidCredentialsError(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid email or password")


class TokenExpiredError(AuthenticationError):
    def __init__(self):
        super().__init__("Token has expired")


class InvalidTokenError(AuthenticationError):
    def __init__(self):
        super().__init__("Invalid token")


# ========== Authorization ==========
class AuthorizationError(AppException):
    """Role or ownership check denied."""

    def __init__(self, message: str = "Forbidden - Insufficient permissions"):
        super().__init__(code="AUTHORIZATION_ERROR", message=message, status_code=403)


# ========== Resources ==========
class ResourceNotFoundError(AppException):
    def __init__(self, message: str):
        super().__init__(code="RESOURCE_NOT_FOUND", message=message, status_code=404)


class ConflictError(AppException):
    """Request conflicts with the current state of a resource."""

    def __init__(self, message: str, status_code: int = 409):
        super().__init__(code="CONFLICT", message=message, status_code=status_code)


class DuplicateAssignmentError(ConflictError):
    def __init__(self):
        super().__init__("Developer is already assigned to this project", status_code=400)


class ProjectAlreadyCompletedError(ConflictError):
    def __init__(self):
        super().__init__("Project is already completed", status_code=400)
