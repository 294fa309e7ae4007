"""Project approval settings repository interface."""

from abc import ABC, abstractmethod
from typing import List, Optional

from timesheets.domain.models.approval_settings import ProjectApprovalSettings


class ApprovalSettingsRepository(ABC):
    """
    One settings record per project.
    """

    @abstractmethod
    def get_for_project(self, project_id: str) -> Optional[ProjectApprovalSettings]:
        """
        Settings of a project, or None if never configured.
        """
        pass

    @abstractmethod
    def save(self, settings: ProjectApprovalSettings) -> ProjectApprovalSettings:
        """
        Insert or replace the settings of ``settings.project_id``.
        """
        pass

    @abstractmethod
    def list_auto_approval_project_ids(self) -> List[str]:
        """
        Projects whose auto-approve window is above zero.
        """
        pass
