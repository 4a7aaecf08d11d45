# backend/pixelforge/services/__init__.py
from .auth import auth_service
from .cleanup import cleanup_service
from .documents import document_service
from .projects import project_service
from .users import user_service

__all__ = ["auth_service", "cleanup_service", "document_service", "project_service", "user_service"]
