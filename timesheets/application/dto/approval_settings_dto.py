"""
Approval settings DTOs for the application layer.
"""

from typing import Optional, List
from pydantic import Field, model_validator

from timesheets.domain.models.approval_settings import ApprovalMode, ApprovalStage, ProjectApprovalSettings
from .base_dto import RequestDTO, ResponseDTO


class GetApprovalSettingsRequestDTO(RequestDTO):
    """DTO for reading a project's approval settings."""

    project_id: str = Field(min_length=1, description="Project ID")


class ApprovalSettingsChangesDTO(RequestDTO):
    """Partial update of approval settings. Omitted fields keep their value."""

    approval_mode: Optional[ApprovalMode] = Field(default=None, description="Approval mode")
    auto_approve_after_days: Optional[int] = Field(default=None, ge=0, description="Idle days before auto-approval, 0 disables")
    require_all_entries_approved: Optional[bool] = Field(default=None)
    allow_self_approve_no_client: Optional[bool] = Field(default=None)
    approval_stages: Optional[List[ApprovalStage]] = Field(default=None, description="Ordered stage chain for multi-stage mode")
    clear_stages: bool = Field(default=False, description="Remove the configured stage chain")

    @model_validator(mode="after")
    def validate_stage_changes(self):
        """Stages cannot be replaced and cleared at once."""
        if self.clear_stages and self.approval_stages is not None:
            raise ValueError("approval_stages and clear_stages are mutually exclusive")
        return self


class UpdateApprovalSettingsRequestDTO(ApprovalSettingsChangesDTO):
    """DTO for updating a project's approval settings."""

    project_id: str = Field(min_length=1, description="Project ID")


class ApprovalSettingsResponseDTO(ResponseDTO):
    """DTO for approval settings responses."""

    project_id: str
    approval_mode: ApprovalMode
    auto_approve_after_days: int
    require_all_entries_approved: bool
    allow_self_approve_no_client: bool
    approval_stages: Optional[List[ApprovalStage]] = None

    @classmethod
    def from_domain(cls, settings: ProjectApprovalSettings) -> "ApprovalSettingsResponseDTO":
        return cls(
            id=settings.id,
            project_id=settings.project_id,
            approval_mode=settings.approval_mode,
            auto_approve_after_days=settings.auto_approve_after_days,
            require_all_entries_approved=settings.require_all_entries_approved,
            allow_self_approve_no_client=settings.allow_self_approve_no_client,
            approval_stages=settings.approval_stages,
            created_at=settings.created_at,
            updated_at=settings.updated_at,
        )
