"""Approval audit trail repository interfaces.
Stage approvals and entry status history are append-only.
"""

from abc import ABC, abstractmethod
from typing import List, Iterable

from timesheets.domain.models.approval import TimeSheetApproval, EntryStatusChange, EntryMessage


class TimeSheetApprovalRepository(ABC):
    """
    Stage approvals recorded against time sheets.
    """

    @abstractmethod
    def list_for_sheet(self, sheet_id: str) -> List[TimeSheetApproval]:
        """
        Approvals of a sheet, oldest first.
        """
        pass

    @abstractmethod
    def append(self, approval: TimeSheetApproval) -> TimeSheetApproval:
        """
        Insert a new approval row; existing rows are never touched.
        If the store already holds an approval for the same sheet and stage
        (a concurrent writer won), that stored row is returned instead.
        """
        pass

    @abstractmethod
    def delete_for_sheet(self, sheet_id: str) -> int:
        """
        Remove every approval of a sheet. Returns the number removed.
        """
        pass


class EntryStatusChangeRepository(ABC):
    """
    History of entry status transitions.
    """

    @abstractmethod
    def append(self, change: EntryStatusChange) -> EntryStatusChange:
        """
        Insert a status change record.
        """
        pass

    @abstractmethod
    def list_for_entry(self, entry_id: str) -> List[EntryStatusChange]:
        """
        Status changes of one entry, oldest first.
        """
        pass

    @abstractmethod
    def list_for_entries(self, entry_ids: Iterable[str]) -> List[EntryStatusChange]:
        """
        Status changes of the given entries, oldest first.
        """
        pass


class EntryMessageRepository(ABC):
    """
    Comment threads on time entries.
    """

    @abstractmethod
    def add(self, message: EntryMessage) -> EntryMessage:
        """
        Insert a message.
        """
        pass

    @abstractmethod
    def list_for_entry(self, entry_id: str) -> List[EntryMessage]:
        """
        Messages of an entry, oldest first.
        """
        pass
