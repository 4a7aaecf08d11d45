# backend/pixelforge/api/users.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import AppException
from ..schemas.base import ApiResponse
from ..schemas.user import User as UserSchema, UserCreate, UserUpdate
from ..services.policy import Caller
from ..services.users import user_service
from ..utils.logging import api_logger
from .dependencies import get_current_caller

router = APIRouter(prefix="/api/users", tags=["users"])


@router.get("/developers", response_model=ApiResponse[List[UserSchema]], response_model_exclude_none=True)
async def list_developers(caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    developers = user_service.list_developers(db, caller)
    api_logger.info(f"Found {len(developers)} developers")
    return ApiResponse(count=len(developers), data=[UserSchema.model_validate(u) for u in developers])


@router.get("", response_model=ApiResponse[List[UserSchema]], response_model_exclude_none=True)
async def list_users(caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    users = user_service.list_users(db, caller)
    return ApiResponse(count=len(users), data=[UserSchema.model_validate(u) for u in users])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ApiResponse[UserSchema],
    response_model_exclude_none=True
)
async def create_user(
        payload: UserCreate,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    api_logger.info("Creating new user", extra={"email": payload.email, "role": payload.role.value})

    try:
        user = user_service.create(db, caller, payload)
        return ApiResponse(message="User created successfully", data=UserSchema.model_validate(user))
    except AppException:
        raise
    except Exception as e:
        api_logger.error("Failed to create user", extra={"email": payload.email, "error": str(e)})
        db.rollback()
        raise


@router.put("/{user_id}", response_model=ApiResponse[UserSchema], response_model_exclude_none=True)
async def update_user(
        user_id: str,
        payload: UserUpdate,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    api_logger.info("Updating user", extra={
        "user_id": user_id,
        "update_fields": list(payload.model_dump(exclude_unset=True).keys())
    })

    try:
        user = user_service.update(db, caller, user_id, payload)
        return ApiResponse(message="User updated successfully", data=UserSchema.model_validate(user))
    except AppException:
        raise
    except Exception as e:
        api_logger.error("Failed to update user", extra={"user_id": user_id, "error": str(e)})
        db.rollback()
        raise


@router.delete("/{user_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_user(user_id: str, caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    api_logger.info("Deleting user", extra={"user_id": user_id})

    try:
        user_service.delete(db, caller, user_id)
        return ApiResponse(message="User deleted successfully")
    except AppException:
        raise
    except Exception as e:
        api_logger.error(f"Failed to delete user: {str(e)}", extra={"user_id": user_id})
        db.rollback()
        raise
