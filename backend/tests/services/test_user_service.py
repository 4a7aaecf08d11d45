# tests/services/test_user_service.py
import pytest

from pixelforge.exceptions import AuthorizationError, ConflictError
from pixelforge.models import Role
from pixelforge.schemas.user import UserUpdate
from pixelforge.services.policy import Caller
from pixelforge.services.users import user_service
from pixelforge.utils.ids import new_object_id


@pytest.fixture
def detached_admin():
    """Admin identity that is not itself stored, e.g. a token for a since-removed account"""
    return Caller(id=new_object_id(), role=Role.ADMIN)


def test_last_admin_cannot_be_demoted(db_session, admin, detached_admin):
    with pytest.raises(AuthorizationError) as exc_info:
        user_service.update(db_session, detached_admin, admin.id, UserUpdate(role=Role.DEVELOPER))
    assert exc_info.value.message == "Cannot remove the last admin user"


def test_last_admin_cannot_be_deleted(db_session, admin, detached_admin):
    with pytest.raises(AuthorizationError) as exc_info:
        user_service.delete(db_session, detached_admin, admin.id)
    assert exc_info.value.message == "Cannot delete the last admin user"


def test_non_admin_cannot_manage_users(db_session, lead, outsider):
    caller = Caller(id=lead.id, role=lead.role)
    with pytest.raises(AuthorizationError):
        user_service.delete(db_session, caller, outsider.id)


def test_lead_of_projects_cannot_be_deleted(db_session, admin, lead, sample_project):
    caller = Caller(id=admin.id, role=Role.ADMIN)
    with pytest.raises(ConflictError) as exc_info:
        user_service.delete(db_session, caller, lead.id)
    assert exc_info.value.status_code == 409
