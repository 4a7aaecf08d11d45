# tests/services/test_project_service.py
from types import SimpleNamespace
from unittest.mock import MagicMock

import pytest
from sqlalchemy.exc import IntegrityError

from pixelforge.config import settings
from pixelforge.exceptions import DuplicateAssignmentError, ProjectAlreadyCompletedError, ResourceNotFoundError
from pixelforge.models import ProjectStatus, Role, project_developers
from pixelforge.services.cleanup import cleanup_service
from pixelforge.services.policy import Caller
from pixelforge.services.projects import ProjectService, project_service
from pixelforge.utils.ids import new_object_id


@pytest.fixture
def admin_caller(admin):
    return Caller(id=admin.id, role=Role.ADMIN)


def assignment_rows(db_session, project_id):
    return db_session.execute(
        project_developers.select().where(project_developers.c.project_id == project_id)
    ).all()


def test_assign_is_add_if_absent(db_session, admin_caller, developer, second_developer, sample_project):
    project_service.assign_developer(db_session, admin_caller, sample_project.id, second_developer.id)

    with pytest.raises(DuplicateAssignmentError):
        project_service.assign_developer(db_session, admin_caller, sample_project.id, second_developer.id.upper())

    assert len(assignment_rows(db_session, sample_project.id)) == 2


def test_remove_is_idempotent(db_session, admin_caller, developer, sample_project):
    for _ in range(2):
        project = project_service.remove_developer(db_session, admin_caller, sample_project.id, developer.id)
        assert project.assigned_developers == []
    assert assignment_rows(db_session, sample_project.id) == []


def test_complete_only_from_active(db_session, admin_caller, sample_project):
    project = project_service.complete(db_session, admin_caller, sample_project.id)
    assert project.status == ProjectStatus.COMPLETED

    with pytest.raises(ProjectAlreadyCompletedError) as exc_info:
        project_service.complete(db_session, admin_caller, sample_project.id)
    assert exc_info.value.status_code == 400
    assert project_service.load(db_session, sample_project.id).status == ProjectStatus.COMPLETED


def test_lists_are_scoped_by_role(db_session, admin_caller, lead, other_lead, developer, sample_project):
    assert project_service.list_projects(db_session, admin_caller) == [sample_project]
    assert project_service.list_projects(db_session, Caller(id=lead.id, role=lead.role)) == [sample_project]
    assert project_service.list_projects(db_session, Caller(id=other_lead.id, role=other_lead.role)) == []
    assert project_service.list_projects(
        db_session, Caller(id=developer.id, role=developer.role), status=ProjectStatus.COMPLETED
    ) == []


def test_assign_maps_concurrent_insert_to_duplicate(monkeypatch, admin_caller):
    project = SimpleNamespace(id=new_object_id(), project_lead_id=new_object_id(), assigned_developers=[])
    developer_id = new_object_id()
    monkeypatch.setattr(ProjectService, "load", staticmethod(lambda db, project_id: project))

    db = MagicMock()
    db.get.return_value = SimpleNamespace(id=developer_id, role=Role.DEVELOPER)
    db.execute.side_effect = IntegrityError("INSERT", {}, Exception("UNIQUE constraint failed"))

    with pytest.raises(DuplicateAssignmentError):
        project_service.assign_developer(db, admin_caller, project.id, developer_id)

    db.rollback.assert_called_once()
    db.commit.assert_not_called()


@pytest.mark.asyncio
async def test_delete_removes_files_after_commit(db_session, admin_caller, sample_project, sample_document):
    file_path = settings.UPLOADS_PATH / sample_document.stored_filename

    await project_service.delete(db_session, admin_caller, sample_project.id)

    assert not file_path.exists()
    with pytest.raises(ResourceNotFoundError):
        project_service.load(db_session, sample_project.id)


@pytest.mark.asyncio
async def test_failed_delete_keeps_files(db_session, admin_caller, sample_project, sample_document, monkeypatch):
    def failing_commit():
        raise RuntimeError("database unavailable")

    monkeypatch.setattr(db_session, "commit", failing_commit)

    with pytest.raises(RuntimeError):
        await project_service.delete(db_session, admin_caller, sample_project.id)

    assert (settings.UPLOADS_PATH / sample_document.stored_filename).exists()


@pytest.mark.asyncio
async def test_artifact_cleanup_tolerates_missing_files(sample_document):
    removed = await cleanup_service.delete_project_artifacts(
        new_object_id(), [sample_document.stored_filename, "1700000000000-00000000.pdf"]
    )

    assert removed == 1
    assert not (settings.UPLOADS_PATH / sample_document.stored_filename).exists()
