"""
Data Transfer Objects for the application layer.
"""

from .base_dto import BaseDTO, RequestDTO, ResponseDTO, HealthCheckResponseDTO, ErrorResponseDTO
from .approval_settings_dto import (
    GetApprovalSettingsRequestDTO,
    ApprovalSettingsChangesDTO,
    UpdateApprovalSettingsRequestDTO,
    ApprovalSettingsResponseDTO,
)
from .time_entry_dto import (
    CreateTimeEntryRequestDTO,
    TimeEntryChangesDTO,
    UpdateTimeEntryRequestDTO,
    TimeEntryIdRequestDTO,
    EntryStatusChangeDTO,
    SetEntryStatusRequestDTO,
    EntryMessageContentDTO,
    PostEntryMessageRequestDTO,
    TimeEntryResponseDTO,
    EntryMessageResponseDTO,
    PostEntryMessageResponseDTO,
    EntryStatusChangeResponseDTO,
    EntryMessageListResponseDTO,
)
from .time_sheet_dto import (
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
    StageApprovalResponseDTO,
    StageProgressDTO,
    ApprovalStatusResponseDTO,
    StageApprovalResultDTO,
    SheetReadinessResponseDTO,
    SheetAuditTrailResponseDTO,
)
from .auto_approval_dto import RunSweepRequestDTO, SweepFailureDTO, SweepReportDTO
