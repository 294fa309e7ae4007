"""
Time sheet router.
Handles sheet membership, submission and the approval workflow.
"""

from typing import Optional

from fastapi import APIRouter, Body, Response, status

from timesheets.infrastructure.auth.dependencies import CurrentUserId
from timesheets.infrastructure.web.dependencies import Context, raise_for_result
from timesheets.application.use_cases.time_sheet_use_cases import (
    CreateTimeSheetUseCase,
    GetTimeSheetUseCase,
    DeleteTimeSheetUseCase,
    AddSheetEntriesUseCase,
    RemoveSheetEntryUseCase,
    SubmitTimeSheetUseCase,
    ApproveTimeSheetUseCase,
    RecordStageApprovalUseCase,
    RejectTimeSheetUseCase,
    RevertTimeSheetUseCase,
    GetApprovalStatusUseCase,
    GetSheetReadinessUseCase,
)
from timesheets.application.use_cases.audit_use_cases import GetSheetAuditTrailUseCase
from timesheets.application.dto.time_sheet_dto import (
    CreateTimeSheetRequestDTO,
    TimeSheetIdRequestDTO,
    SheetEntryIdsDTO,
    AddSheetEntriesRequestDTO,
    RemoveSheetEntryRequestDTO,
    StageApprovalDTO,
    RecordStageApprovalRequestDTO,
    RejectionDTO,
    RejectTimeSheetRequestDTO,
    TimeSheetResponseDTO,
    StageApprovalResultDTO,
    ApprovalStatusResponseDTO,
    SheetReadinessResponseDTO,
    SheetAuditTrailResponseDTO,
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TimeSheetResponseDTO)
async def create_time_sheet(
    request: CreateTimeSheetRequestDTO,
    user_id: CurrentUserId,
    context: Context,
):
    """
    Create a draft time sheet.

    - **project_id**: Project the sheet belongs to
    - **title**: Sheet title
    - **entry_ids**: Entries to put on the sheet right away
    """
    result = await CreateTimeSheetUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.get("/{sheet_id}", response_model=TimeSheetResponseDTO)
async def get_time_sheet(sheet_id: str, user_id: CurrentUserId, context: Context):
    """Get a time sheet by ID."""
    result = await GetTimeSheetUseCase(context).execute(TimeSheetIdRequestDTO(sheet_id=sheet_id))
    raise_for_result(result)
    return result.data


@router.delete("/{sheet_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_sheet(sheet_id: str, user_id: CurrentUserId, context: Context):
    """Delete a time sheet. Its entries stay."""
    result = await DeleteTimeSheetUseCase(context).set_current_user(user_id).execute(
        TimeSheetIdRequestDTO(sheet_id=sheet_id)
    )
    raise_for_result(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{sheet_id}/entries", response_model=TimeSheetResponseDTO)
async def add_sheet_entries(
    sheet_id: str,
    body: SheetEntryIdsDTO,
    user_id: CurrentUserId,
    context: Context,
):
    """Add entries to a draft sheet."""
    request = AddSheetEntriesRequestDTO(sheet_id=sheet_id, entry_ids=body.entry_ids)
    result = await AddSheetEntriesUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.delete("/{sheet_id}/entries/{entry_id}", response_model=TimeSheetResponseDTO)
async def remove_sheet_entry(
    sheet_id: str,
    entry_id: str,
    user_id: CurrentUserId,
    context: Context,
):
    """Take an entry off a draft sheet. Approved entries stay."""
    request = RemoveSheetEntryRequestDTO(sheet_id=sheet_id, entry_id=entry_id)
    result = await RemoveSheetEntryUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.post("/{sheet_id}/submit", response_model=TimeSheetResponseDTO)
async def submit_time_sheet(sheet_id: str, user_id: CurrentUserId, context: Context):
    """Submit a draft sheet for review. Its entries lock."""
    result = await SubmitTimeSheetUseCase(context).set_current_user(user_id).execute(
        TimeSheetIdRequestDTO(sheet_id=sheet_id)
    )
    raise_for_result(result)
    return result.data


@router.post("/{sheet_id}/approve", response_model=TimeSheetResponseDTO)
async def approve_time_sheet(sheet_id: str, user_id: CurrentUserId, context: Context):
    """Approve a submitted sheet in one step. Not available in multi-stage mode."""
    result = await ApproveTimeSheetUseCase(context).set_current_user(user_id).execute(
        TimeSheetIdRequestDTO(sheet_id=sheet_id)
    )
    raise_for_result(result)
    return result.data


@router.post("/{sheet_id}/stage-approvals", response_model=StageApprovalResultDTO)
async def record_stage_approval(
    sheet_id: str,
    approval: StageApprovalDTO,
    user_id: CurrentUserId,
    context: Context,
):
    """
    Sign off one stage of a multi-stage approval.

    Recording a stage that is already signed off returns the existing
    approval with `created` false. The sheet becomes approved once every
    configured stage is signed off.
    """
    request = RecordStageApprovalRequestDTO(sheet_id=sheet_id, **approval.model_dump())
    result = await RecordStageApprovalUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.post("/{sheet_id}/reject", response_model=TimeSheetResponseDTO)
async def reject_time_sheet(
    sheet_id: str,
    user_id: CurrentUserId,
    context: Context,
    rejection: Optional[RejectionDTO] = Body(default=None),
):
    """Reject a submitted sheet, with an optional reason."""
    reason = rejection.reason if rejection else None
    request = RejectTimeSheetRequestDTO(sheet_id=sheet_id, reason=reason)
    result = await RejectTimeSheetUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.post("/{sheet_id}/revert", response_model=TimeSheetResponseDTO)
async def revert_time_sheet(sheet_id: str, user_id: CurrentUserId, context: Context):
    """Send a sheet back to draft and clear its stage approvals."""
    result = await RevertTimeSheetUseCase(context).set_current_user(user_id).execute(
        TimeSheetIdRequestDTO(sheet_id=sheet_id)
    )
    raise_for_result(result)
    return result.data


@router.get("/{sheet_id}/approval-status", response_model=ApprovalStatusResponseDTO)
async def get_approval_status(sheet_id: str, user_id: CurrentUserId, context: Context):
    """Stage progress of a sheet."""
    result = await GetApprovalStatusUseCase(context).execute(TimeSheetIdRequestDTO(sheet_id=sheet_id))
    raise_for_result(result)
    return result.data


@router.get("/{sheet_id}/readiness", response_model=SheetReadinessResponseDTO)
async def get_sheet_readiness(sheet_id: str, user_id: CurrentUserId, context: Context):
    """Entry counts by status and whether the sheet can be approved now."""
    result = await GetSheetReadinessUseCase(context).execute(TimeSheetIdRequestDTO(sheet_id=sheet_id))
    raise_for_result(result)
    return result.data


@router.get("/{sheet_id}/audit-trail", response_model=SheetAuditTrailResponseDTO)
async def get_sheet_audit_trail(sheet_id: str, user_id: CurrentUserId, context: Context):
    """Stage approvals and entry status history of a sheet."""
    result = await GetSheetAuditTrailUseCase(context).execute(TimeSheetIdRequestDTO(sheet_id=sheet_id))
    raise_for_result(result)
    return result.data
