# backend/pixelforge/api/auth.py
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..schemas.base import ApiResponse
from ..schemas.user import LoginRequest, LoginResult, User as UserSchema, UserCreate
from ..services.auth import auth_service
from ..services.policy import Caller
from ..services.users import user_service
from ..utils.logging import api_logger
from .dependencies import get_current_caller

router = APIRouter(prefix="/api/auth", tags=["auth"])


@router.post("/login", response_model=ApiResponse[LoginResult], response_model_exclude_none=True)
async def login(credentials: LoginRequest, db: Session = Depends(get_db)):
    token, user = auth_service.login(db, credentials.email, credentials.password)
    return ApiResponse(
        message="Login successful",
        data=LoginResult(token=token, user=UserSchema.model_validate(user))
    )


@router.get("/me", response_model=ApiResponse[UserSchema], response_model_exclude_none=True)
async def me(caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    user = user_service.get(db, caller.id)
    return ApiResponse(data=UserSchema.model_validate(user))


@router.post(
    "/register",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserSchema],
    response_model_exclude_none=True
)
async def register(
        payload: UserCreate,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    """Admin-only registration, same as POST /api/users"""
    api_logger.info("Registering user", extra={"email": payload.email, "role": payload.role.value})
    user = user_service.create(db, caller, payload)
    return ApiResponse(message="User registered successfully", data=UserSchema.model_validate(user))
