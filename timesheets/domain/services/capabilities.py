"""Capability resolution.
Maps project roles to the actions they allow and defines the port used by the
workflow services to ask who holds which role on a project.
"""

from abc import ABC, abstractmethod
from typing import Dict, FrozenSet, Iterable
from enum import Enum

from timesheets.domain.models.approval_settings import ApprovalStage


class ProjectRole(str, Enum):
    """Role a member holds on a project."""
    OWNER = "owner"
    EXPERT = "expert"
    REVIEWER = "reviewer"
    CLIENT = "client"
    VIEWER = "viewer"


class EntryPermission(str, Enum):
    """Entry-level review actions."""
    APPROVE = "entries:approve"
    QUESTION = "entries:question"
    CHANGE_STATUS = "entries:change-status"


ROLE_PERMISSIONS: Dict[ProjectRole, FrozenSet[EntryPermission]] = {
    ProjectRole.OWNER: frozenset({
        EntryPermission.APPROVE,
        EntryPermission.QUESTION,
        EntryPermission.CHANGE_STATUS,
    }),
    ProjectRole.REVIEWER: frozenset({
        EntryPermission.APPROVE,
        EntryPermission.QUESTION,
        EntryPermission.CHANGE_STATUS,
    }),
    ProjectRole.CLIENT: frozenset({
        EntryPermission.APPROVE,
        EntryPermission.QUESTION,
    }),
    ProjectRole.EXPERT: frozenset(),
    ProjectRole.VIEWER: frozenset(),
}

# Role that signs off each stage of a multi-stage chain
STAGE_ROLES: Dict[ApprovalStage, ProjectRole] = {
    ApprovalStage.EXPERT: ProjectRole.EXPERT,
    ApprovalStage.REVIEWER: ProjectRole.REVIEWER,
    ApprovalStage.CLIENT: ProjectRole.CLIENT,
    ApprovalStage.OWNER: ProjectRole.OWNER,
}

# Roles allowed to approve or reject a sheet in single-stage modes
SHEET_APPROVER_ROLES = (ProjectRole.REVIEWER, ProjectRole.CLIENT, ProjectRole.OWNER)

# Roles allowed to send any sheet back to draft
SHEET_REVERT_ROLES = (ProjectRole.OWNER, ProjectRole.REVIEWER)


def roles_with_permission(permission: EntryPermission) -> FrozenSet[ProjectRole]:
    """All roles that grant ``permission``."""
    return frozenset(role for role, granted in ROLE_PERMISSIONS.items() if permission in granted)


class CapabilityResolver(ABC):
    """
    Answers role questions about a project's members.
    Implementations read membership from wherever projects live.
    """

    @abstractmethod
    def has_role(self, actor_id: str, project_id: str, role: ProjectRole) -> bool:
        """Whether ``actor_id`` holds ``role`` on the project."""
        pass

    @abstractmethod
    def has_assigned_client(self, project_id: str) -> bool:
        """Whether any member of the project holds the client role."""
        pass

    def has_any_role(self, actor_id: str, project_id: str, roles: Iterable[ProjectRole]) -> bool:
        return any(self.has_role(actor_id, project_id, role) for role in roles)

    def has_permission(self, actor_id: str, project_id: str, permission: EntryPermission) -> bool:
        return self.has_any_role(actor_id, project_id, roles_with_permission(permission))
