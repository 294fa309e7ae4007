"""Time Sheet repository interface.
Defines the contract for time sheet persistence, including the sheet/entry links.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Iterable

from timesheets.domain.models.time_sheet import TimeSheet, TimeSheetStatus


class TimeSheetRepository(ABC):
    """
    Repository interface for TimeSheet aggregates.
    """

    @abstractmethod
    def save(self, time_sheet: TimeSheet) -> TimeSheet:
        """
        Insert or overwrite a time sheet (last writer wins).
        """
        pass

    @abstractmethod
    def compare_and_set_status(self, time_sheet: TimeSheet, expected_status: TimeSheetStatus) -> bool:
        """
        Persist the sheet only if the stored status still equals
        ``expected_status``. Returns False, writing nothing, when another
        writer changed the status first.
        """
        pass

    @abstractmethod
    def get_by_id(self, sheet_id: str) -> Optional[TimeSheet]:
        """
        Find a time sheet by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    def list_ids_by_status(self, project_id: str, status: TimeSheetStatus) -> List[str]:
        """
        IDs of a project's sheets in the given status.
        """
        pass

    @abstractmethod
    def delete(self, sheet_id: str) -> bool:
        """
        Delete a sheet together with its entry links and stage approvals.
        """
        pass

    # Entry links

    @abstractmethod
    def get_entry_ids(self, sheet_id: str) -> List[str]:
        """
        IDs of the entries linked to a sheet.
        """
        pass

    @abstractmethod
    def add_entry_links(self, sheet_id: str, entry_ids: Iterable[str]) -> None:
        """
        Link entries to a sheet. Already linked entries are ignored.
        """
        pass

    @abstractmethod
    def remove_entry_link(self, sheet_id: str, entry_id: str) -> bool:
        """
        Unlink an entry from a sheet. Returns False when it was not linked.
        """
        pass

    @abstractmethod
    def find_sheets_for_entry(self, entry_id: str) -> List[TimeSheet]:
        """
        Every sheet the entry is linked to.
        """
        pass
