"""Unit of work interface.
Groups the repositories touched by one workflow transition so the
transition is applied atomically.
"""

from abc import ABC, abstractmethod

from .time_entry_repository import TimeEntryRepository
from .time_sheet_repository import TimeSheetRepository
from .approval_repository import (
    TimeSheetApprovalRepository,
    EntryStatusChangeRepository,
    EntryMessageRepository,
)
from .approval_settings_repository import ApprovalSettingsRepository


class UnitOfWork(ABC):
    """
    Transaction boundary. Leaving the ``with`` block without ``commit()``
    (or because of an exception) discards every write.
    """

    time_entries: TimeEntryRepository
    time_sheets: TimeSheetRepository
    approvals: TimeSheetApprovalRepository
    status_changes: EntryStatusChangeRepository
    messages: EntryMessageRepository
    settings: ApprovalSettingsRepository

    def __enter__(self) -> "UnitOfWork":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.rollback()

    @abstractmethod
    def commit(self) -> None:
        """Make every write of this unit visible."""
        pass

    @abstractmethod
    def rollback(self) -> None:
        """Discard uncommitted writes."""
        pass
