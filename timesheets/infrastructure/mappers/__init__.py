"""
Mappers between domain entities and database models.
"""

from .time_entry_mapper import TimeEntryMapper
from .time_sheet_mapper import TimeSheetMapper
from .approval_mapper import TimeSheetApprovalMapper, EntryStatusChangeMapper, EntryMessageMapper
from .approval_settings_mapper import ApprovalSettingsMapper

__all__ = [
    "TimeEntryMapper",
    "TimeSheetMapper",
    "TimeSheetApprovalMapper",
    "EntryStatusChangeMapper",
    "EntryMessageMapper",
    "ApprovalSettingsMapper",
]
