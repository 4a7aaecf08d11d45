# backend/pixelforge/api/projects.py
from typing import List

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from ..database import get_db
from ..exceptions import AppException
from ..models.project import ProjectStatus
from ..schemas.base import ApiResponse
from ..schemas.project import (
    DashboardStats,
    DeveloperAssignment,
    Project as ProjectSchema,
    ProjectCreate,
    ProjectUpdate,
)
from ..services.policy import Caller
from ..services.projects import project_service
from ..utils.logging import api_logger
from .dependencies import get_current_caller

router = APIRouter(prefix="/api/projects", tags=["projects"])

ProjectResponse = ApiResponse[ProjectSchema]
ProjectListResponse = ApiResponse[List[ProjectSchema]]


def _listing(projects) -> ProjectListResponse:
    return ApiResponse(count=len(projects), data=[ProjectSchema.model_validate(p) for p in projects])


@router.post(
    "",
    status_code=status.HTTP_201_CREATED,
    response_model=ProjectResponse,
    response_model_exclude_none=True
)
async def create_project(
        payload: ProjectCreate,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    api_logger.info("Creating new project", extra={
        "project_name": payload.name,
        "lead_id": payload.project_lead,
        "caller_id": caller.id
    })

    try:
        project = project_service.create(db, caller, payload)
        return ApiResponse(message="Project created successfully", data=ProjectSchema.model_validate(project))
    except AppException:
        raise
    except Exception as e:
        api_logger.error("Failed to create project", extra={
            "project_name": payload.name,
            "error": str(e)
        })
        db.rollback()
        raise


@router.get("", response_model=ProjectListResponse, response_model_exclude_none=True)
async def list_projects(caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    """Projects visible to the caller, newest first"""
    api_logger.info("Starting projects list operation", extra={
        "endpoint": "/api/projects",
        "role": caller.role.value
    })
    projects = project_service.list_projects(db, caller)
    api_logger.info(f"Found {len(projects)} projects")
    return _listing(projects)


@router.get("/active", response_model=ProjectListResponse, response_model_exclude_none=True)
async def list_active_projects(caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    projects = project_service.list_projects(db, caller, status=ProjectStatus.ACTIVE)
    return _listing(projects)


@router.get("/admin/all", response_model=ProjectListResponse, response_model_exclude_none=True)
async def list_all_projects(caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    projects = project_service.list_all(db, caller)
    return _listing(projects)


@router.get(
    "/admin/dashboard-stats",
    response_model=ApiResponse[DashboardStats],
    response_model_exclude_none=True
)
async def dashboard_stats(caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    stats = project_service.dashboard_stats(db, caller)
    api_logger.debug("Dashboard stats computed", extra=stats)
    return ApiResponse(data=DashboardStats(**stats))


@router.get("/{project_id}", response_model=ProjectResponse, response_model_exclude_none=True)
async def get_project(project_id: str, caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    api_logger.info("Fetching project", extra={"project_id": project_id})
    project = project_service.get(db, caller, project_id)
    return ApiResponse(data=ProjectSchema.model_validate(project))


@router.put("/{project_id}", response_model=ProjectResponse, response_model_exclude_none=True)
async def update_project(
        project_id: str,
        payload: ProjectUpdate,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    api_logger.info("Updating project", extra={
        "project_id": project_id,
        "update_fields": list(payload.model_dump(exclude_unset=True).keys())
    })

    try:
        project = project_service.update(db, caller, project_id, payload)
        api_logger.info("Project updated successfully", extra={"project_id": project_id})
        return ApiResponse(message="Project updated successfully", data=ProjectSchema.model_validate(project))
    except AppException:
        raise
    except Exception as e:
        api_logger.error("Failed to update project", extra={
            "project_id": project_id,
            "error": str(e)
        })
        db.rollback()
        raise


@router.put("/{project_id}/complete", response_model=ProjectResponse, response_model_exclude_none=True)
@router.patch("/{project_id}/complete", response_model=ProjectResponse, response_model_exclude_none=True)
async def complete_project(
        project_id: str,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    api_logger.info("Completing project", extra={"project_id": project_id})
    project = project_service.complete(db, caller, project_id)
    return ApiResponse(message="Project marked as completed", data=ProjectSchema.model_validate(project))


@router.delete("/{project_id}", response_model=ApiResponse[None], response_model_exclude_none=True)
async def delete_project(project_id: str, caller: Caller = Depends(get_current_caller), db: Session = Depends(get_db)):
    api_logger.info("Deleting project", extra={"project_id": project_id})

    try:
        await project_service.delete(db, caller, project_id)
        api_logger.info(f"Successfully deleted project {project_id}")
        return ApiResponse(message="Project deleted successfully")
    except AppException:
        raise
    except Exception as e:
        db.rollback()
        api_logger.error(f"Failed to delete project: {str(e)}")
        raise


@router.post("/{project_id}/assign", response_model=ProjectResponse, response_model_exclude_none=True)
async def assign_developer(
        project_id: str,
        payload: DeveloperAssignment,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    api_logger.info("Assigning developer", extra={
        "project_id": project_id,
        "developer_id": payload.developer_id,
        "caller_id": caller.id
    })
    project = project_service.assign_developer(db, caller, project_id, payload.developer_id)
    return ApiResponse(message="Developer assigned successfully", data=ProjectSchema.model_validate(project))


@router.post("/{project_id}/remove-developer", response_model=ProjectResponse, response_model_exclude_none=True)
async def remove_developer(
        project_id: str,
        payload: DeveloperAssignment,
        caller: Caller = Depends(get_current_caller),
        db: Session = Depends(get_db)
):
    api_logger.info("Removing developer", extra={
        "project_id": project_id,
        "developer_id": payload.developer_id
    })
    project = project_service.remove_developer(db, caller, project_id, payload.developer_id)
    return ApiResponse(message="Developer removed successfully", data=ProjectSchema.model_validate(project))
