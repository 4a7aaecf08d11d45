# backend/pixelforge/services/policy.py
"""Authorization policy.

``decide`` is the single place that maps (action, caller, project) to a
decision. It is pure: it never touches the database, the request or any
global state, so the same inputs always give the same answer.
"""
import enum
from dataclasses import dataclass
from typing import FrozenSet, Optional

from ..exceptions import AuthorizationError
from ..models.user import Role


class Action(str, enum.Enum):
    CREATE_PROJECT = "CreateProject"
    VIEW_PROJECT = "ViewProject"
    UPDATE_PROJECT = "UpdateProject"
    COMPLETE_PROJECT = "CompleteProject"
    DELETE_PROJECT = "DeleteProject"
    ASSIGN_DEVELOPER = "AssignDeveloper"
    REMOVE_DEVELOPER = "RemoveDeveloper"
    UPLOAD_DOCUMENT = "UploadDocument"
    DOWNLOAD_DOCUMENT = "DownloadDocument"
    LIST_PROJECTS = "ListProjects"
    LIST_ALL_PROJECTS = "ListAllProjects"
    LIST_DEVELOPERS = "ListDevelopers"
    VIEW_DASHBOARD = "ViewDashboard"
    MANAGE_USERS = "ManageUsers"


class Decision(str, enum.Enum):
    ALLOW = "Allow"
    DENY = "Deny"


@dataclass(frozen=True)
class Caller:
    """Authenticated identity passed explicitly into every operation"""
    id: str
    role: Role
    name: str = ""
    email: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


@dataclass(frozen=True)
class ProjectAccess:
    """The ownership facts of a project that the policy looks at"""
    lead_id: str
    developer_ids: FrozenSet[str] = frozenset()

    @classmethod
    def of(cls, project) -> "ProjectAccess":
        return cls(
            lead_id=project.project_lead_id,
            developer_ids=frozenset(dev.id for dev in project.assigned_developers)
        )


# Actions a role may take without reference to a particular project
UNSCOPED_ACTIONS = {
    Role.PROJECT_LEAD: frozenset({Action.LIST_PROJECTS, Action.LIST_DEVELOPERS, Action.VIEW_DASHBOARD}),
    Role.DEVELOPER: frozenset({Action.LIST_PROJECTS}),
}

# Actions a role may take only on a project it owns (lead) or is assigned to (developer)
OWNED_ACTIONS = {
    Role.PROJECT_LEAD: frozenset({
        Action.VIEW_PROJECT,
        Action.UPDATE_PROJECT,
        Action.ASSIGN_DEVELOPER,
        Action.REMOVE_DEVELOPER,
        Action.UPLOAD_DOCUMENT,
        Action.DOWNLOAD_DOCUMENT,
    }),
    Role.DEVELOPER: frozenset({Action.VIEW_PROJECT, Action.DOWNLOAD_DOCUMENT}),
}


def _owns(caller: Caller, project: ProjectAccess) -> bool:
    if caller.role == Role.PROJECT_LEAD:
        return project.lead_id == caller.id
    if caller.role == Role.DEVELOPER:
        return caller.id in project.developer_ids
    return False


def decide(action: Action, caller: Caller, project: Optional[ProjectAccess] = None) -> Decision:
    if caller.role == Role.ADMIN:
        return Decision.ALLOW

    if action in UNSCOPED_ACTIONS.get(caller.role, frozenset()):
        return Decision.ALLOW

    if action in OWNED_ACTIONS.get(caller.role, frozenset()):
        if project is not None and _owns(caller, project):
            return Decision.ALLOW

    return Decision.DENY


def authorize(
    action: Action,
    caller: Caller,
    project: Optional[ProjectAccess] = None,
    message: str = "Forbidden - Insufficient permissions"
) -> None:
    """Raise AuthorizationError unless the policy allows the action"""
    if decide(action, caller, project) is Decision.DENY:
        raise AuthorizationError(message)
