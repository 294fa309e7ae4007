"""
Auto-approval sweep DTOs.
"""

from typing import Optional, List
from pydantic import Field

from .base_dto import BaseDTO, RequestDTO


class RunSweepRequestDTO(RequestDTO):
    """DTO for one auto-approval pass."""

    project_id: Optional[str] = Field(default=None, description="Limit the pass to one project")


class SweepFailureDTO(BaseDTO):
    """A record the sweep could not approve."""

    record_type: str
    record_id: str
    error_code: str
    message: str


class SweepReportDTO(BaseDTO):
    """Outcome of one auto-approval pass."""

    entries_approved: int = 0
    sheets_approved: int = 0
    stages_recorded: int = 0
    failures: List[SweepFailureDTO] = Field(default_factory=list)

    @property
    def total_changes(self) -> int:
        return self.entries_approved + self.sheets_approved + self.stages_recorded
