# backend/pixelforge/services/projects.py
"""Project lifecycle operations.

Every operation takes the caller explicitly and runs the authorization
policy before touching the store. Writes to the developer set and the
status column are single conditional statements so that concurrent
requests cannot produce duplicate assignments or double completion.
"""
from typing import Iterable, List, Optional

from sqlalchemy import delete, exists, func, insert, literal, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session, selectinload

from ..exceptions import (
    DuplicateAssignmentError,
    ProjectAlreadyCompletedError,
    ResourceNotFoundError,
    ValidationError,
)
from ..models import Project, ProjectStatus, Role, User, project_developers
from ..schemas.project import ProjectCreate, ProjectUpdate
from ..utils.ids import ensure_object_id, is_object_id
from ..utils.logging import service_logger
from .cleanup import cleanup_service
from .policy import Action, Caller, ProjectAccess, authorize

LEAD_ROLES = (Role.ADMIN, Role.PROJECT_LEAD)


class ProjectService:

    @staticmethod
    def _query(db: Session):
        return db.query(Project).options(
            selectinload(Project.project_lead),
            selectinload(Project.assigned_developers),
            selectinload(Project.documents)
        )

    @staticmethod
    def load(db: Session, project_id: str) -> Project:
        """Fetch a fully populated project or raise 404"""
        project_id = ensure_object_id(project_id, "project")
        project = ProjectService._query(db).filter(Project.id == project_id).first()
        if not project:
            raise ResourceNotFoundError("Project not found")
        return project

    @staticmethod
    def reload(db: Session, project_id: str) -> Project:
        db.expire_all()
        return ProjectService.load(db, project_id)

    @staticmethod
    def _resolve_lead(db: Session, lead_id) -> User:
        if not lead_id:
            raise ValidationError("Project lead is required", field="projectLead")
        if not is_object_id(lead_id):
            raise ValidationError("Valid project lead ID is required", field="projectLead")

        lead = db.get(User, lead_id.lower())
        if not lead:
            raise ResourceNotFoundError("Project lead user not found")
        if lead.role not in LEAD_ROLES:
            raise ValidationError("Project lead must be Admin or ProjectLead", field="projectLead")
        return lead

    @staticmethod
    def _resolve_developers(db: Session, developer_ids: Iterable[str]) -> List[User]:
        """Validate ids and collapse duplicates, keeping first-seen order"""
        unique_ids = []
        for dev_id in developer_ids:
            if not is_object_id(dev_id):
                raise ValidationError("Invalid developer ID format", field="assignedDevelopers")
            dev_id = dev_id.lower()
            if dev_id not in unique_ids:
                unique_ids.append(dev_id)

        if not unique_ids:
            return []

        developers = db.query(User).filter(User.id.in_(unique_ids), User.role == Role.DEVELOPER).all()
        if len(developers) != len(unique_ids):
            raise ValidationError("One or more assigned developers not found", field="assignedDevelopers")
        return developers

    @staticmethod
    def _scoped(db: Session, caller: Caller):
        query = ProjectService._query(db)
        if caller.role == Role.PROJECT_LEAD:
            query = query.filter(Project.project_lead_id == caller.id)
        elif caller.role == Role.DEVELOPER:
            query = query.filter(Project.assigned_developers.any(User.id == caller.id))
        return query

    # ----- reads -----

    @staticmethod
    def list_projects(db: Session, caller: Caller, status: Optional[ProjectStatus] = None) -> List[Project]:
        """Admin sees everything, a lead their own projects, a developer the ones they are on"""
        authorize(Action.LIST_PROJECTS, caller)
        query = ProjectService._scoped(db, caller)
        if status is not None:
            query = query.filter(Project.status == status)
        return query.order_by(Project.created_at.desc()).all()

    @staticmethod
    def list_all(db: Session, caller: Caller) -> List[Project]:
        authorize(Action.LIST_ALL_PROJECTS, caller)
        return ProjectService._query(db).order_by(Project.created_at.desc()).all()

    @staticmethod
    def get(db: Session, caller: Caller, project_id: str) -> Project:
        project = ProjectService.load(db, project_id)
        authorize(
            Action.VIEW_PROJECT, caller, ProjectAccess.of(project),
            message="Forbidden - You do not have access to this project"
        )
        return project

    @staticmethod
    def dashboard_stats(db: Session, caller: Caller) -> dict:
        authorize(Action.VIEW_DASHBOARD, caller)
        count_projects = select(func.count(Project.id))
        return {
            "total_users": db.scalar(select(func.count(User.id))),
            "total_projects": db.scalar(count_projects),
            "active_projects": db.scalar(count_projects.where(Project.status == ProjectStatus.ACTIVE)),
            "completed_projects": db.scalar(count_projects.where(Project.status == ProjectStatus.COMPLETED)),
        }

    # ----- writes -----

    @staticmethod
    def create(db: Session, caller: Caller, payload: ProjectCreate) -> Project:
        authorize(Action.CREATE_PROJECT, caller)
        lead = ProjectService._resolve_lead(db, payload.project_lead)
        developers = ProjectService._resolve_developers(db, payload.assigned_developers or [])

        project = Project(
            name=payload.name,
            description=payload.description,
            deadline=payload.deadline,
            status=ProjectStatus.ACTIVE,
            project_lead=lead,
            assigned_developers=developers
        )
        db.add(project)
        db.commit()
        service_logger.info("Project created", extra={
            "project_id": project.id,
            "lead_id": lead.id,
            "developer_count": len(developers)
        })
        return ProjectService.reload(db, project.id)

    @staticmethod
    def update(db: Session, caller: Caller, project_id: str, payload: ProjectUpdate) -> Project:
        project = ProjectService.load(db, project_id)
        access = ProjectAccess.of(project)
        authorize(
            Action.UPDATE_PROJECT, caller, access,
            message="Forbidden - You do not have permission to update this project"
        )

        changes = payload.model_dump(exclude_unset=True)
        for field in ("name", "description", "deadline"):
            if field in changes:
                if changes[field] is None:
                    raise ValidationError(f"Project {field} cannot be empty", field=field)
                setattr(project, field, changes[field])

        if "status" in changes:
            new_status = changes["status"]
            if new_status is None:
                raise ValidationError("Status must be one of: Active, Completed", field="status")
            if new_status != project.status:
                if project.status == ProjectStatus.COMPLETED:
                    raise ValidationError("A completed project cannot be reopened", field="status")
                authorize(
                    Action.COMPLETE_PROJECT, caller, access,
                    message="Forbidden - Only Admin can complete projects"
                )
                project.status = new_status

        if "assigned_developers" in changes:
            developers = ProjectService._resolve_developers(db, changes["assigned_developers"] or [])
            project.assigned_developers = developers

        db.commit()
        service_logger.info("Project updated", extra={"project_id": project.id, "fields": list(changes)})
        return ProjectService.reload(db, project.id)

    @staticmethod
    def _resolve_developer_id(developer_id) -> str:
        if not developer_id:
            raise ValidationError("Developer ID is required", field="developerId")
        return ensure_object_id(developer_id, "developer")

    @staticmethod
    def assign_developer(db: Session, caller: Caller, project_id: str, developer_id) -> Project:
        project_id = ensure_object_id(project_id, "project")
        developer_id = ProjectService._resolve_developer_id(developer_id)
        project = ProjectService.load(db, project_id)
        authorize(
            Action.ASSIGN_DEVELOPER, caller, ProjectAccess.of(project),
            message="Forbidden - You can only assign developers to your own projects"
        )

        developer = db.get(User, developer_id)
        if not developer:
            raise ResourceNotFoundError("Developer not found")
        if developer.role != Role.DEVELOPER:
            raise ValidationError("User must have Developer role", field="developerId")

        already_assigned = exists().where(
            project_developers.c.project_id == project.id,
            project_developers.c.user_id == developer.id
        )
        stmt = insert(project_developers).from_select(
            ["project_id", "user_id"],
            select(literal(project.id), literal(developer.id)).where(~already_assigned)
        )
        try:
            result = db.execute(stmt)
        except IntegrityError:
            # A concurrent request inserted the same pair after our existence check
            db.rollback()
            raise DuplicateAssignmentError()
        if result.rowcount == 0:
            raise DuplicateAssignmentError()

        db.commit()
        service_logger.info("Developer assigned", extra={"project_id": project.id, "developer_id": developer.id})
        return ProjectService.reload(db, project.id)

    @staticmethod
    def remove_developer(db: Session, caller: Caller, project_id: str, developer_id) -> Project:
        project_id = ensure_object_id(project_id, "project")
        developer_id = ProjectService._resolve_developer_id(developer_id)
        project = ProjectService.load(db, project_id)
        authorize(
            Action.REMOVE_DEVELOPER, caller, ProjectAccess.of(project),
            message="Forbidden - You do not have permission to modify this project"
        )

        # Removing someone who is not assigned deletes nothing and still succeeds
        result = db.execute(
            delete(project_developers).where(
                project_developers.c.project_id == project.id,
                project_developers.c.user_id == developer_id
            )
        )
        db.commit()
        service_logger.info("Developer removed", extra={
            "project_id": project.id,
            "developer_id": developer_id,
            "removed": result.rowcount
        })
        return ProjectService.reload(db, project.id)

    @staticmethod
    def complete(db: Session, caller: Caller, project_id: str) -> Project:
        authorize(Action.COMPLETE_PROJECT, caller)
        project = ProjectService.load(db, project_id)

        result = db.execute(
            update(Project)
            .where(Project.id == project.id, Project.status == ProjectStatus.ACTIVE)
            .values(status=ProjectStatus.COMPLETED)
        )
        if result.rowcount == 0:
            raise ProjectAlreadyCompletedError()

        db.commit()
        service_logger.info("Project completed", extra={"project_id": project.id})
        return ProjectService.reload(db, project.id)

    @staticmethod
    async def delete(db: Session, caller: Caller, project_id: str) -> None:
        authorize(Action.DELETE_PROJECT, caller)
        project = ProjectService.load(db, project_id)

        project_id = project.id
        stored_filenames = [doc.stored_filename for doc in project.documents]

        # Files go only once the rows are committed; a failed commit keeps both
        db.delete(project)
        db.commit()
        service_logger.info("Project deleted", extra={"project_id": project_id})

        await cleanup_service.delete_project_artifacts(project_id, stored_filenames)


project_service = ProjectService()
