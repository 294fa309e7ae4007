"""
Infrastructure repositories module.
Contains SQLAlchemy implementations of domain repositories.
"""

from .time_entry_repository import SQLAlchemyTimeEntryRepository
from .time_sheet_repository import SQLAlchemyTimeSheetRepository
from .approval_repository import (
    SQLAlchemyTimeSheetApprovalRepository,
    SQLAlchemyEntryStatusChangeRepository,
    SQLAlchemyEntryMessageRepository,
)
from .approval_settings_repository import SQLAlchemyApprovalSettingsRepository
from .unit_of_work import SQLAlchemyUnitOfWork

__all__ = [
    "SQLAlchemyTimeEntryRepository",
    "SQLAlchemyTimeSheetRepository",
    "SQLAlchemyTimeSheetApprovalRepository",
    "SQLAlchemyEntryStatusChangeRepository",
    "SQLAlchemyEntryMessageRepository",
    "SQLAlchemyApprovalSettingsRepository",
    "SQLAlchemyUnitOfWork",
]
