# backend/pixelforge/models/__init__.py
from ..database import Base
from .user import User, Role
from .project import Project, ProjectDocument, ProjectStatus, project_developers

__all__ = [
    "Base",
    "User",
    "Role",
    "Project",
    "ProjectDocument",
    "ProjectStatus",
    "project_developers"
]
