"""
Approval settings use cases.
"""

import logging

from timesheets.application.use_cases.base_use_case import AuthorizedUseCase, CommandUseCase
from timesheets.application.dto.approval_settings_dto import (
    GetApprovalSettingsRequestDTO, UpdateApprovalSettingsRequestDTO, ApprovalSettingsResponseDTO,
)
from timesheets.domain.models.base import UnauthorizedApproverError
from timesheets.domain.models.approval_settings import ProjectApprovalSettings
from timesheets.domain.services.capabilities import ProjectRole


logger = logging.getLogger(__name__)


class GetApprovalSettingsUseCase(CommandUseCase[GetApprovalSettingsRequestDTO, ApprovalSettingsResponseDTO]):
    """
    Read a project's approval settings, storing the defaults the first time
    a project is asked about.
    """

    async def _execute_command_logic(self, request: GetApprovalSettingsRequestDTO) -> ApprovalSettingsResponseDTO:
        settings = self.uow.settings.get_for_project(request.project_id)
        if settings is None:
            settings = self.uow.settings.save(ProjectApprovalSettings.default_for(request.project_id))
            logger.info(f"Created default approval settings for project {request.project_id}")
        return ApprovalSettingsResponseDTO.from_domain(settings)


class UpdateApprovalSettingsUseCase(AuthorizedUseCase, CommandUseCase[UpdateApprovalSettingsRequestDTO, ApprovalSettingsResponseDTO]):
    """Use case for changing a project's approval policy. Owners only."""

    async def _execute_command_logic(self, request: UpdateApprovalSettingsRequestDTO) -> ApprovalSettingsResponseDTO:
        if not self.context.capabilities.has_role(self.current_user_id, request.project_id, ProjectRole.OWNER):
            raise UnauthorizedApproverError(
                self.current_user_id,
                f"Only a project owner can change approval settings of project {request.project_id}",
            )

        settings = self.uow.settings.get_for_project(request.project_id)
        if settings is None:
            settings = ProjectApprovalSettings.default_for(request.project_id)

        settings.update(
            approval_mode=request.approval_mode,
            auto_approve_after_days=request.auto_approve_after_days,
            require_all_entries_approved=request.require_all_entries_approved,
            allow_self_approve_no_client=request.allow_self_approve_no_client,
            approval_stages=request.approval_stages,
            clear_stages=request.clear_stages,
        )
        settings = self.uow.settings.save(settings)
        logger.info(f"Approval settings of project {request.project_id} updated by {self.current_user_id}")
        return ApprovalSettingsResponseDTO.from_domain(settings)
