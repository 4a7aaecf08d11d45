# backend/pixelforge/schemas/__init__.py
from .base import ApiResponse
from .user import User, UserSummary, UserCreate, UserUpdate, LoginRequest, LoginResult
from .project import Project, ProjectCreate, ProjectUpdate, ProjectDocument, DeveloperAssignment, DashboardStats

__all__ = [
    "ApiResponse",
    "User", "UserSummary", "UserCreate", "UserUpdate", "LoginRequest", "LoginResult",
    "Project", "ProjectCreate", "ProjectUpdate", "ProjectDocument", "DeveloperAssignment", "DashboardStats"
]
