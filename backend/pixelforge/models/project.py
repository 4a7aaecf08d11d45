# backend/pixelforge/models/project.py
import enum

from sqlalchemy import Column, Integer, String, Text, Date, DateTime, Enum, ForeignKey, Table, Index
from sqlalchemy.orm import relationship

from ..database import Base
from ..utils.ids import new_object_id
from .user import utcnow


class ProjectStatus(str, enum.Enum):
    ACTIVE = "Active"
    COMPLETED = "Completed"


# Composite primary key keeps a developer from appearing twice on a project
project_developers = Table(
    "project_developers",
    Base.metadata,
    Column("project_id", String(24), ForeignKey("projects.id", ondelete="CASCADE"), primary_key=True),
    Column("user_id", String(24), ForeignKey("users.id", ondelete="CASCADE"), primary_key=True),
)


class Project(Base):
    __tablename__ = "projects"
    __table_args__ = (
        Index("ix_projects_status_deadline", "status", "deadline"),
    )

    id = Column(String(24), primary_key=True, default=new_object_id)
    name = Column(String(100), nullable=False)
    description = Column(Text, nullable=False)
    deadline = Column(Date, nullable=False)
    status = Column(Enum(ProjectStatus), nullable=False, default=ProjectStatus.ACTIVE)
    project_lead_id = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, onupdate=utcnow)

    project_lead = relationship("User", back_populates="led_projects")
    assigned_developers = relationship(
        "User",
        secondary=project_developers,
        back_populates="assigned_projects",
        order_by="User.name"
    )
    documents = relationship(
        "ProjectDocument",
        back_populates="project",
        cascade="all, delete-orphan",
        order_by="ProjectDocument.uploaded_at"
    )


class ProjectDocument(Base):
    __tablename__ = "project_documents"

    id = Column(Integer, primary_key=True, index=True)
    project_id = Column(String(24), ForeignKey("projects.id", ondelete="CASCADE"), nullable=False, index=True)
    stored_filename = Column(String(255), nullable=False, unique=True)
    original_filename = Column(String(255), nullable=False)
    uploaded_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    project = relationship("Project", back_populates="documents")
