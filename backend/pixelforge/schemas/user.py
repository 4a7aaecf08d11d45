# backend/pixelforge/schemas/user.py
from typing import Optional
from pydantic import Field
from .base import BaseSchema, TimestampMixin
from ..models.user import Role

EMAIL_PATTERN = r"^\S+@\S+\.\S+$"

class UserSummary(BaseSchema):
    """Embedded user reference on project payloads"""
    id: str
    name: str
    email: str
    role: Role

class User(UserSummary, TimestampMixin):
    pass

class UserCreate(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    password: str = Field(..., min_length=6, max_length=128)
    role: Role = Role.DEVELOPER

class UserUpdate(BaseSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    email: Optional[str] = Field(None, pattern=EMAIL_PATTERN, max_length=255)
    role: Optional[Role] = None

class LoginRequest(BaseSchema):
    email: str = Field(..., min_length=1)
    password: str = Field(..., min_length=1)

class LoginResult(BaseSchema):
    token: str
    user: User
