"""
Approval settings mapper.
The ordered stage chain is stored as a JSON array of stage names.
"""

import json
import logging
from typing import List, Optional

from timesheets.domain.models.approval_settings import ApprovalMode, ApprovalStage, ProjectApprovalSettings
from timesheets.infrastructure.db.models import ProjectApprovalSettingsModel


logger = logging.getLogger(__name__)


class ApprovalSettingsMapper:
    """Maps between ProjectApprovalSettings and ProjectApprovalSettingsModel."""

    def domain_to_model(self, settings: ProjectApprovalSettings) -> ProjectApprovalSettingsModel:
        model = ProjectApprovalSettingsModel(id=settings.id, project_id=settings.project_id)
        self.apply_to_model(settings, model)
        return model

    def apply_to_model(self, settings: ProjectApprovalSettings, model: ProjectApprovalSettingsModel) -> None:
        model.approval_mode = settings.approval_mode.value
        model.auto_approve_after_days = settings.auto_approve_after_days
        model.require_all_entries_approved = settings.require_all_entries_approved
        model.allow_self_approve_no_client = settings.allow_self_approve_no_client
        model.approval_stages = self.encode_stages(settings.approval_stages)
        model.created_at = settings.created_at
        model.updated_at = settings.updated_at

    def model_to_domain(self, model: ProjectApprovalSettingsModel) -> ProjectApprovalSettings:
        return ProjectApprovalSettings(
            id=model.id,
            project_id=model.project_id,
            approval_mode=ApprovalMode(model.approval_mode) if model.approval_mode else ApprovalMode.REQUIRED,
            auto_approve_after_days=model.auto_approve_after_days or 0,
            require_all_entries_approved=bool(model.require_all_entries_approved),
            allow_self_approve_no_client=bool(model.allow_self_approve_no_client),
            approval_stages=self.decode_stages(model.approval_stages),
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    @staticmethod
    def encode_stages(stages: Optional[List[ApprovalStage]]) -> Optional[str]:
        if stages is None:
            return None
        return json.dumps([stage.value for stage in stages])

    @staticmethod
    def decode_stages(raw: Optional[str]) -> Optional[List[ApprovalStage]]:
        """Parse the stored chain. Unknown stage names are dropped."""
        if not raw:
            return None
        try:
            names = json.loads(raw)
        except (json.JSONDecodeError, TypeError):
            logger.warning(f"Unreadable approval stage list: {raw!r}")
            return None

        stages = []
        for name in names:
            try:
                stages.append(ApprovalStage(name))
            except ValueError:
                logger.warning(f"Ignoring unknown approval stage {name!r}")
        return stages
