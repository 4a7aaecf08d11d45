# backend/pixelforge/schemas/project.py
from datetime import date, datetime
from typing import List, Optional
from pydantic import AliasChoices, Field
from .base import BaseSchema, TimestampMixin
from .user import UserSummary
from ..models.project import ProjectStatus

class ProjectDocument(BaseSchema):
    stored_filename: str
    original_filename: str
    upload_timestamp: datetime = Field(
        validation_alias=AliasChoices("uploaded_at", "uploadTimestamp", "upload_timestamp"),
        serialization_alias="uploadTimestamp"
    )

class ProjectBase(BaseSchema):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=2000)
    deadline: date

class ProjectCreate(ProjectBase):
    project_lead: str = Field(..., min_length=1)
    assigned_developers: Optional[List[str]] = None

class ProjectUpdate(BaseSchema):
    """Only fields present in the payload are applied"""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1, max_length=2000)
    deadline: Optional[date] = None
    status: Optional[ProjectStatus] = None
    assigned_developers: Optional[List[str]] = None

class DeveloperAssignment(BaseSchema):
    developer_id: Optional[str] = None

class Project(ProjectBase, TimestampMixin):
    id: str
    status: ProjectStatus
    project_lead: UserSummary
    assigned_developers: List[UserSummary] = []
    documents: List[ProjectDocument] = []

class DashboardStats(BaseSchema):
    total_users: int
    total_projects: int
    active_projects: int
    completed_projects: int
