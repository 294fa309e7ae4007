"""
Time Sheet DTOs for the application layer.
Data Transfer Objects for sheet lifecycle and approval operations.
"""

from typing import Optional, List, Dict
from datetime import datetime
from pydantic import Field

from timesheets.domain.models.approval import TimeSheetApproval
from timesheets.domain.models.approval_settings import ApprovalMode, ApprovalStage
from timesheets.domain.models.time_sheet import TimeSheet, TimeSheetStatus
from timesheets.domain.services.sheet_workflow import SheetApprovalStatus, SheetReadiness
from .base_dto import BaseDTO, RequestDTO, ResponseDTO
from .time_entry_dto import EntryStatusChangeResponseDTO


# Request DTOs
class CreateTimeSheetRequestDTO(RequestDTO):
    """DTO for creating a draft time sheet."""

    project_id: str = Field(min_length=1, description="Project ID")
    title: str = Field(min_length=1, max_length=255)
    description: str = Field(default="", max_length=5000)
    entry_ids: List[str] = Field(default_factory=list, description="Entries to put on the sheet")


class TimeSheetIdRequestDTO(RequestDTO):
    """DTO addressing a single time sheet."""

    sheet_id: str = Field(min_length=1)


class SheetEntryIdsDTO(RequestDTO):
    """Entries to add to a sheet."""

    entry_ids: List[str] = Field(min_length=1, max_length=500)


class AddSheetEntriesRequestDTO(SheetEntryIdsDTO):
    """DTO for adding entries to a draft sheet."""

    sheet_id: str = Field(min_length=1)


class RemoveSheetEntryRequestDTO(RequestDTO):
    """DTO for removing an entry from a draft sheet."""

    sheet_id: str = Field(min_length=1)
    entry_id: str = Field(min_length=1)


class StageApprovalDTO(RequestDTO):
    """A stage sign-off."""

    stage: ApprovalStage
    notes: Optional[str] = Field(default=None, max_length=2000)


class RecordStageApprovalRequestDTO(StageApprovalDTO):
    """DTO for recording one stage of a multi-stage approval."""

    sheet_id: str = Field(min_length=1)


class RejectionDTO(RequestDTO):
    """Why a sheet was rejected."""

    reason: Optional[str] = Field(default=None, max_length=2000)


class RejectTimeSheetRequestDTO(RejectionDTO):
    """DTO for rejecting a submitted sheet."""

    sheet_id: str = Field(min_length=1)


# Response DTOs
class TimeSheetResponseDTO(ResponseDTO):
    """DTO for time sheet responses."""

    project_id: str
    author_id: str
    title: str
    description: str = ""
    status: TimeSheetStatus
    submitted_at: Optional[datetime] = None
    approved_at: Optional[datetime] = None
    rejected_at: Optional[datetime] = None
    rejection_reason: Optional[str] = None
    status_changed_by: Optional[str] = None
    entry_ids: List[str] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, sheet: TimeSheet, entry_ids: Optional[List[str]] = None) -> "TimeSheetResponseDTO":
        return cls(
            id=sheet.id,
            project_id=sheet.project_id,
            author_id=sheet.author_id,
            title=sheet.title,
            description=sheet.description,
            status=sheet.status,
            submitted_at=sheet.submitted_at,
            approved_at=sheet.approved_at,
            rejected_at=sheet.rejected_at,
            rejection_reason=sheet.rejection_reason,
            status_changed_by=sheet.status_changed_by,
            entry_ids=entry_ids or [],
            created_at=sheet.created_at,
            updated_at=sheet.updated_at,
        )


class StageApprovalResponseDTO(ResponseDTO):
    """DTO for one recorded stage approval."""

    time_sheet_id: str
    stage: ApprovalStage
    approved_by: str
    approved_at: datetime
    notes: Optional[str] = None

    @classmethod
    def from_domain(cls, approval: TimeSheetApproval) -> "StageApprovalResponseDTO":
        return cls(
            id=approval.id,
            time_sheet_id=approval.time_sheet_id,
            stage=approval.stage,
            approved_by=approval.approved_by,
            approved_at=approval.approved_at,
            notes=approval.notes,
            created_at=approval.created_at,
        )


class StageProgressDTO(BaseDTO):
    """Position of a sheet in its stage chain."""

    stages: List[ApprovalStage] = Field(default_factory=list)
    completed_stages: List[ApprovalStage] = Field(default_factory=list)
    next_stage: Optional[ApprovalStage] = None
    is_complete: bool = True


class ApprovalStatusResponseDTO(BaseDTO):
    """DTO for a sheet's approval status."""

    time_sheet_id: str
    status: TimeSheetStatus
    approval_mode: ApprovalMode
    progress: StageProgressDTO
    approvals: List[StageApprovalResponseDTO] = Field(default_factory=list)

    @classmethod
    def from_domain(cls, status: SheetApprovalStatus) -> "ApprovalStatusResponseDTO":
        return cls(
            time_sheet_id=status.sheet.id,
            status=status.sheet.status,
            approval_mode=status.mode,
            progress=StageProgressDTO(**status.progress.to_dict()),
            approvals=[StageApprovalResponseDTO.from_domain(a) for a in status.approvals],
        )


class StageApprovalResultDTO(BaseDTO):
    """DTO returned after recording a stage approval."""

    sheet: TimeSheetResponseDTO
    approval: StageApprovalResponseDTO
    progress: StageProgressDTO
    created: bool = Field(description="False when the stage had already been approved")


class SheetReadinessResponseDTO(BaseDTO):
    """DTO for sheet approval readiness."""

    time_sheet_id: str
    total_entries: int
    entries_by_status: Dict[str, int]
    can_approve: bool
    reason: Optional[str] = None

    @classmethod
    def from_domain(cls, readiness: SheetReadiness) -> "SheetReadinessResponseDTO":
        return cls(
            time_sheet_id=readiness.sheet_id,
            total_entries=readiness.total_entries,
            entries_by_status=readiness.entries_by_status,
            can_approve=readiness.can_approve,
            reason=readiness.reason,
        )


class SheetAuditTrailResponseDTO(BaseDTO):
    """Stage approvals of a sheet and status history of its entries."""

    time_sheet_id: str
    stage_approvals: List[StageApprovalResponseDTO] = Field(default_factory=list)
    entry_status_changes: List[EntryStatusChangeResponseDTO] = Field(default_factory=list)
