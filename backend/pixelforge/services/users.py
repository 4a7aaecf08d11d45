# backend/pixelforge/services/users.py
from typing import List

from sqlalchemy import delete, func, select
from sqlalchemy.orm import Session

from ..exceptions import AuthorizationError, ConflictError, ResourceNotFoundError, ValidationError
from ..models import Project, Role, User, project_developers
from ..schemas.user import UserCreate, UserUpdate
from ..utils.ids import ensure_object_id
from ..utils.logging import service_logger
from .auth import hash_password
from .policy import Action, Caller, authorize


class UserService:
    """Identity store operations, all Admin-only except the developer list"""

    @staticmethod
    def get(db: Session, user_id: str) -> User:
        user = db.get(User, user_id)
        if not user:
            raise ResourceNotFoundError("User not found")
        return user

    @staticmethod
    def list_developers(db: Session, caller: Caller) -> List[User]:
        authorize(Action.LIST_DEVELOPERS, caller)
        return db.query(User).filter(User.role == Role.DEVELOPER).order_by(User.name.asc()).all()

    @staticmethod
    def list_users(db: Session, caller: Caller) -> List[User]:
        authorize(Action.MANAGE_USERS, caller)
        return db.query(User).order_by(User.created_at.desc()).all()

    @staticmethod
    def _ensure_email_free(db: Session, email: str, exclude_id: str = None) -> None:
        query = db.query(User.id).filter(User.email == email)
        if exclude_id:
            query = query.filter(User.id != exclude_id)
        if query.first():
            raise ConflictError("User with this email already exists")

    @staticmethod
    def _admin_count(db: Session) -> int:
        return db.scalar(select(func.count(User.id)).where(User.role == Role.ADMIN))

    @staticmethod
    def create(db: Session, caller: Caller, payload: UserCreate) -> User:
        authorize(Action.MANAGE_USERS, caller)
        email = payload.email.lower()
        UserService._ensure_email_free(db, email)

        user = User(
            name=payload.name,
            email=email,
            password_hash=hash_password(payload.password),
            role=payload.role
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        service_logger.info("User created", extra={"user_id": user.id, "role": user.role.value})
        return user

    @staticmethod
    def update(db: Session, caller: Caller, user_id: str, payload: UserUpdate) -> User:
        authorize(Action.MANAGE_USERS, caller)
        user_id = ensure_object_id(user_id, "user")
        user = UserService.get(db, user_id)
        changes = payload.model_dump(exclude_unset=True)
        for field in ("name", "email", "role"):
            if field in changes and changes[field] is None:
                raise ValidationError(f"User {field} cannot be empty", field=field)

        new_role = changes.get("role")
        if new_role is not None and new_role != user.role:
            if user.role == Role.ADMIN:
                if user.id == caller.id:
                    raise AuthorizationError("Cannot change your own admin role")
                if UserService._admin_count(db) <= 1:
                    raise AuthorizationError("Cannot remove the last admin user")
            if new_role == Role.DEVELOPER and user.led_projects:
                raise ConflictError("User leads projects and cannot become a Developer")
            if user.role == Role.DEVELOPER and user.assigned_projects:
                raise ConflictError("User is assigned to projects as a Developer")
            user.role = new_role

        if "name" in changes:
            user.name = changes["name"]
        if "email" in changes:
            email = changes["email"].lower()
            UserService._ensure_email_free(db, email, exclude_id=user.id)
            user.email = email

        db.commit()
        db.refresh(user)
        service_logger.info("User updated", extra={"user_id": user.id, "fields": list(changes)})
        return user

    @staticmethod
    def delete(db: Session, caller: Caller, user_id: str) -> None:
        authorize(Action.MANAGE_USERS, caller)
        user_id = ensure_object_id(user_id, "user")
        if user_id == caller.id:
            raise AuthorizationError("Cannot delete your own account")

        user = UserService.get(db, user_id)
        if user.role == Role.ADMIN and UserService._admin_count(db) <= 1:
            raise AuthorizationError("Cannot delete the last admin user")

        led = db.scalar(select(func.count(Project.id)).where(Project.project_lead_id == user.id))
        if led:
            raise ConflictError("Cannot delete a user who still leads projects")

        db.execute(delete(project_developers).where(project_developers.c.user_id == user.id))
        db.delete(user)
        db.commit()
        service_logger.info("User deleted", extra={"user_id": user_id})


user_service = UserService()
