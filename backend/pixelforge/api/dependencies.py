# backend/pixelforge/api/dependencies.py
from typing import Optional

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import AuthenticationError
from ..models.user import User
from ..services.auth import decode_access_token
from ..services.policy import Caller
from ..utils.logging import auth_logger

security = HTTPBearer(auto_error=False)


async def get_current_caller(
        credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
        db: Session = Depends(get_db)
) -> Caller:
    """Resolve the bearer token into an immutable caller identity"""
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise AuthenticationError("Unauthorized - No token provided")

    user_id = decode_access_token(credentials.credentials)
    user = db.get(User, user_id)
    if not user:
        auth_logger.warning("Token refers to a missing user", extra={"user_id": user_id})
        raise AuthenticationError("Unauthorized - User not found")

    return Caller(id=user.id, role=user.role, name=user.name, email=user.email)
