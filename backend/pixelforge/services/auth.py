# backend/pixelforge/services/auth.py
from datetime import datetime, timedelta, timezone
from typing import Optional

import bcrypt
from jose import ExpiredSignatureError, JWTError, jwt
from sqlalchemy.orm import Session

from ..config import settings
from ..exceptions import InvalidCredentialsError, InvalidTokenError, TokenExpiredError
from ..models.user import User
from ..utils.logging import auth_logger


def _password_bytes(password: str) -> bytes:
    # bcrypt only looks at the first 72 bytes
    return password.encode("utf-8")[:72]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.BCRYPT_ROUNDS)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        auth_logger.warning("Stored password hash is malformed")
        return False


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (expires_delta or timedelta(minutes=settings.JWT_EXPIRE_MINUTES))
    payload = {"sub": user_id, "exp": expire, "type": "access"}
    return jwt.encode(payload, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_access_token(token: str) -> str:
    """Return the user id carried by a valid access token"""
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except ExpiredSignatureError:
        raise TokenExpiredError()
    except JWTError:
        raise InvalidTokenError()

    user_id = payload.get("sub")
    if payload.get("type") != "access" or not user_id:
        raise InvalidTokenError()
    return user_id


class AuthService:
    """Credential checks for the login endpoint"""

    @staticmethod
    def login(db: Session, email: str, password: str) -> tuple[str, User]:
        normalized = email.strip().lower()
        user = db.query(User).filter(User.email == normalized).first()

        if not user or not verify_password(password, user.password_hash):
            auth_logger.warning("Rejected login attempt", extra={"email": normalized})
            raise InvalidCredentialsError()

        token = create_access_token(user.id)
        auth_logger.info("User logged in", extra={"user_id": user.id, "role": user.role.value})
        return token, user


auth_service = AuthService()
