"""
Project approval settings router.
"""

from fastapi import APIRouter

from timesheets.infrastructure.auth.dependencies import CurrentUserId
from timesheets.infrastructure.web.dependencies import Context, raise_for_result
from timesheets.application.use_cases.approval_settings_use_cases import (
    GetApprovalSettingsUseCase,
    UpdateApprovalSettingsUseCase,
)
from timesheets.application.dto.approval_settings_dto import (
    GetApprovalSettingsRequestDTO,
    ApprovalSettingsChangesDTO,
    UpdateApprovalSettingsRequestDTO,
    ApprovalSettingsResponseDTO,
)

router = APIRouter()


@router.get("/{project_id}/approval-settings", response_model=ApprovalSettingsResponseDTO)
async def get_approval_settings(project_id: str, user_id: CurrentUserId, context: Context):
    """Approval settings of a project. Projects without settings get the defaults."""
    result = await GetApprovalSettingsUseCase(context).execute(
        GetApprovalSettingsRequestDTO(project_id=project_id)
    )
    raise_for_result(result)
    return result.data


@router.patch("/{project_id}/approval-settings", response_model=ApprovalSettingsResponseDTO)
async def update_approval_settings(
    project_id: str,
    changes: ApprovalSettingsChangesDTO,
    user_id: CurrentUserId,
    context: Context,
):
    """
    Change a project's approval policy. Project owners only.

    - **approval_mode**: required, optional, self_approve or multi_stage
    - **auto_approve_after_days**: idle days before the sweep approves, 0 disables
    - **approval_stages**: ordered stage chain for multi-stage mode
    - **clear_stages**: drop the configured stage chain
    """
    request = UpdateApprovalSettingsRequestDTO(project_id=project_id, **changes.model_dump(exclude_unset=True))
    result = await UpdateApprovalSettingsUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data
