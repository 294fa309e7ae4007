"""
Use cases for the application layer.
"""

from .base_use_case import (
    UseCaseResult,
    WorkflowContext,
    BaseUseCase,
    QueryUseCase,
    CommandUseCase,
    AuthorizedUseCase,
)
from .time_entry_use_cases import (
    CreateTimeEntryUseCase,
    GetTimeEntryUseCase,
    UpdateTimeEntryUseCase,
    DeleteTimeEntryUseCase,
    SetEntryStatusUseCase,
    PostEntryMessageUseCase,
    ListEntryMessagesUseCase,
)
from .time_sheet_use_cases import (
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
from .audit_use_cases import GetSheetAuditTrailUseCase
from .approval_settings_use_cases import GetApprovalSettingsUseCase, UpdateApprovalSettingsUseCase
from .auto_approval_use_cases import RunAutoApprovalSweepUseCase
