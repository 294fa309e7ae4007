"""
Project approval settings repository using SQLAlchemy.
"""

from typing import Optional, List
from sqlalchemy.orm import Session

from timesheets.domain.models.base import new_id
from timesheets.domain.models.approval_settings import ProjectApprovalSettings
from timesheets.domain.repositories.approval_settings_repository import (
    ApprovalSettingsRepository as ApprovalSettingsRepositoryInterface,
)
from timesheets.infrastructure.db.models import ProjectApprovalSettingsModel
from timesheets.infrastructure.mappers.approval_settings_mapper import ApprovalSettingsMapper


class SQLAlchemyApprovalSettingsRepository(ApprovalSettingsRepositoryInterface):
    """SQLAlchemy implementation of approval settings repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = ApprovalSettingsMapper()

    def get_for_project(self, project_id: str) -> Optional[ProjectApprovalSettings]:
        model = self.session.query(ProjectApprovalSettingsModel).filter_by(project_id=project_id).first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def save(self, settings: ProjectApprovalSettings) -> ProjectApprovalSettings:
        """Upsert keyed on the project."""
        model = self.session.query(ProjectApprovalSettingsModel).filter_by(
            project_id=settings.project_id
        ).first()

        if model is None:
            if settings.id is None:
                settings.id = new_id()
            self.session.add(self.mapper.domain_to_model(settings))
        else:
            settings.id = model.id
            self.mapper.apply_to_model(settings, model)

        self.session.flush()
        return settings

    def list_auto_approval_project_ids(self) -> List[str]:
        rows = self.session.query(ProjectApprovalSettingsModel.project_id).filter(
            ProjectApprovalSettingsModel.auto_approve_after_days > 0
        ).order_by(ProjectApprovalSettingsModel.project_id).all()
        return [row.project_id for row in rows]
