"""
Repository interfaces for the domain layer.
This module exports all repository interfaces (ports) for dependency injection.
"""

from .time_entry_repository import TimeEntryRepository
from .time_sheet_repository import TimeSheetRepository
from .approval_repository import (
    TimeSheetApprovalRepository,
    EntryStatusChangeRepository,
    EntryMessageRepository,
)
from .approval_settings_repository import ApprovalSettingsRepository
from .unit_of_work import UnitOfWork

__all__ = [
    "TimeEntryRepository",
    "TimeSheetRepository",
    "TimeSheetApprovalRepository",
    "EntryStatusChangeRepository",
    "EntryMessageRepository",
    "ApprovalSettingsRepository",
    "UnitOfWork",
]
