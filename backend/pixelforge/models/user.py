# backend/pixelforge/models/user.py
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, String, DateTime, Enum
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.ids import new_object_id


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Role(str, enum.Enum):
    ADMIN = "Admin"
    PROJECT_LEAD = "ProjectLead"
    DEVELOPER = "Developer"


class User(Base):
    __tablename__ = "users"

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(100), nullable=False)
    email = Column(String(255), nullable=False, unique=True, index=True)  # stored lower-cased
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(Role), nullable=False, default=Role.DEVELOPER, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    led_projects = relationship("Project", back_populates="project_lead")
    assigned_projects = relationship(
        "Project",
        secondary="project_developers",
        back_populates="assigned_developers"
    )
