# backend/pixelforge/api/__init__.py
from .auth import router as auth_router
from .projects import router as projects_router
from .documents import router as documents_router
from .users import router as users_router

__all__ = ["auth_router", "projects_router", "documents_router", "users_router"]
