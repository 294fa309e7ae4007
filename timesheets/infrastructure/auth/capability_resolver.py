"""
Role-based capability resolver over the project_members table.
"""

from sqlalchemy.orm import Session, sessionmaker

from timesheets.domain.services.capabilities import CapabilityResolver, ProjectRole
from timesheets.infrastructure.db.models import ProjectMemberModel


class SQLAlchemyCapabilityResolver(CapabilityResolver):
    """
    Reads role assignments with a short-lived session per question, so
    answers never depend on a caller's uncommitted writes.
    """

    def __init__(self, session_factory: sessionmaker):
        self.session_factory = session_factory

    def has_role(self, actor_id: str, project_id: str, role: ProjectRole) -> bool:
        with self.session_factory() as session:
            return self._exists(session, project_id, actor_id, role)

    def has_assigned_client(self, project_id: str) -> bool:
        with self.session_factory() as session:
            return session.query(ProjectMemberModel.id).filter_by(
                project_id=project_id,
                role=ProjectRole.CLIENT.value,
            ).first() is not None

    def assign_role(self, project_id: str, user_id: str, role: ProjectRole) -> None:
        """Grant a role. Granting a role the user already holds is a no-op."""
        with self.session_factory() as session:
            if self._exists(session, project_id, user_id, role):
                return
            session.add(ProjectMemberModel(project_id=project_id, user_id=user_id, role=ProjectRole(role).value))
            session.commit()

    def revoke_role(self, project_id: str, user_id: str, role: ProjectRole) -> bool:
        with self.session_factory() as session:
            removed = session.query(ProjectMemberModel).filter_by(
                project_id=project_id,
                user_id=user_id,
                role=ProjectRole(role).value,
            ).delete(synchronize_session=False)
            session.commit()
            return removed > 0

    @staticmethod
    def _exists(session: Session, project_id: str, user_id: str, role: ProjectRole) -> bool:
        return session.query(ProjectMemberModel.id).filter_by(
            project_id=project_id,
            user_id=user_id,
            role=ProjectRole(role).value,
        ).first() is not None
