"""Time Entry repository interface.
Defines the contract for time entry data persistence operations.
"""

from abc import ABC, abstractmethod
from typing import List, Optional, Iterable

from timesheets.domain.models.time_entry import TimeEntry


class TimeEntryRepository(ABC):
    """
    Repository interface for TimeEntry entity.
    """

    @abstractmethod
    def save(self, time_entry: TimeEntry) -> TimeEntry:
        """
        Insert or update a time entry.
        New entries receive their ID here.
        """
        pass

    @abstractmethod
    def get_by_id(self, entry_id: str) -> Optional[TimeEntry]:
        """
        Find a time entry by its ID.
        Returns None if not found.
        """
        pass

    @abstractmethod
    def list_by_ids(self, entry_ids: Iterable[str]) -> List[TimeEntry]:
        """
        Load several entries at once. Missing IDs are skipped.
        """
        pass

    @abstractmethod
    def list_unresolved_ids(self, project_id: str) -> List[str]:
        """
        IDs of a project's entries whose status is pending or questioned.
        """
        pass

    @abstractmethod
    def delete(self, entry_id: str) -> bool:
        """
        Delete an entry. Returns False when it did not exist.
        """
        pass
