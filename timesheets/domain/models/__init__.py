"""
Domain models for the time sheet approval workflow.
"""

from .base import (
    BaseEntity,
    DomainException,
    ValidationError,
    BusinessRuleViolation,
    EntityNotFoundError,
    EntryLockedError,
    EntriesNotApprovedError,
    EmptyTimeSheetError,
    InvalidStageForModeError,
    SheetNotSubmittedError,
    SheetNotDraftError,
    UnauthorizedApproverError,
)
from .approval_settings import ApprovalMode, ApprovalStage, ProjectApprovalSettings
from .time_entry import EntryStatus, TimeEntry
from .time_sheet import TimeSheetStatus, TimeSheet, TimeSheetEntry
from .approval import StatusChangeSource, TimeSheetApproval, EntryStatusChange, EntryMessage

__all__ = [
    "BaseEntity",
    "DomainException",
    "ValidationError",
    "BusinessRuleViolation",
    "EntityNotFoundError",
    "EntryLockedError",
    "EntriesNotApprovedError",
    "EmptyTimeSheetError",
    "InvalidStageForModeError",
    "SheetNotSubmittedError",
    "SheetNotDraftError",
    "UnauthorizedApproverError",
    "ApprovalMode",
    "ApprovalStage",
    "ProjectApprovalSettings",
    "EntryStatus",
    "TimeEntry",
    "TimeSheetStatus",
    "TimeSheet",
    "TimeSheetEntry",
    "StatusChangeSource",
    "TimeSheetApproval",
    "EntryStatusChange",
    "EntryMessage",
]
