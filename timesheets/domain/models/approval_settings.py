"""
ProjectApprovalSettings domain model.
Per-project approval policy: mode, stage chain, auto-approval window and
self-approval flag. Pure data plus validation, no workflow behavior.
"""

from datetime import datetime
from typing import Optional, List, Iterable
from enum import Enum

from timesheets.domain.models.base import BaseEntity, ValidationError


class ApprovalMode(str, Enum):
    """How time sheets of a project get approved."""
    REQUIRED = "required"
    OPTIONAL = "optional"
    SELF_APPROVE = "self_approve"
    MULTI_STAGE = "multi_stage"


class ApprovalStage(str, Enum):
    """A named step in a multi-stage approval chain."""
    EXPERT = "expert"
    REVIEWER = "reviewer"
    CLIENT = "client"
    OWNER = "owner"


class ProjectApprovalSettings(BaseEntity):
    """
    Approval configuration for one project.
    Exactly one record exists per project.
    """

    def __init__(
        self,
        project_id: str,
        approval_mode: ApprovalMode = ApprovalMode.REQUIRED,
        auto_approve_after_days: int = 0,
        require_all_entries_approved: bool = True,
        allow_self_approve_no_client: bool = False,
        approval_stages: Optional[Iterable[ApprovalStage]] = None,
        id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        super().__init__(id=id, created_at=created_at, updated_at=updated_at)
        self.project_id = project_id
        self.approval_mode = ApprovalMode(approval_mode)
        self.auto_approve_after_days = auto_approve_after_days
        self.require_all_entries_approved = require_all_entries_approved
        self.allow_self_approve_no_client = allow_self_approve_no_client
        self.approval_stages: Optional[List[ApprovalStage]] = (
            [ApprovalStage(stage) for stage in approval_stages]
            if approval_stages is not None
            else None
        )
        self.validate()

    @classmethod
    def default_for(cls, project_id: str) -> "ProjectApprovalSettings":
        """Settings a project gets before anyone configures approvals."""
        return cls(project_id=project_id)

    def validate(self) -> None:
        """Validate approval settings."""
        if not self.project_id:
            raise ValidationError("Project ID is required", "project_id")

        if self.auto_approve_after_days is None or self.auto_approve_after_days < 0:
            raise ValidationError("Auto-approve window cannot be negative", "auto_approve_after_days")

        if self.approval_mode == ApprovalMode.MULTI_STAGE and not self.approval_stages:
            raise ValidationError(
                "Multi-stage approval requires at least one stage",
                "approval_stages"
            )

        if self.approval_stages and len(set(self.approval_stages)) != len(self.approval_stages):
            raise ValidationError("Approval stages must not repeat", "approval_stages")

    @property
    def is_multi_stage(self) -> bool:
        return self.approval_mode == ApprovalMode.MULTI_STAGE

    @property
    def auto_approval_enabled(self) -> bool:
        return self.auto_approve_after_days > 0

    @property
    def stages_in_effect(self) -> List[ApprovalStage]:
        """The ordered stage chain, empty unless the project is multi-stage."""
        if not self.is_multi_stage or not self.approval_stages:
            return []
        return list(self.approval_stages)

    @property
    def submission_requires_approved_entries(self) -> bool:
        """Optional mode never blocks submission on entry approval."""
        return self.require_all_entries_approved and self.approval_mode != ApprovalMode.OPTIONAL

    def update(
        self,
        approval_mode: Optional[ApprovalMode] = None,
        auto_approve_after_days: Optional[int] = None,
        require_all_entries_approved: Optional[bool] = None,
        allow_self_approve_no_client: Optional[bool] = None,
        approval_stages: Optional[Iterable[ApprovalStage]] = None,
        clear_stages: bool = False,
    ) -> None:
        """Apply a partial update and re-validate."""
        if approval_mode is not None:
            self.approval_mode = ApprovalMode(approval_mode)
        if auto_approve_after_days is not None:
            self.auto_approve_after_days = auto_approve_after_days
        if require_all_entries_approved is not None:
            self.require_all_entries_approved = require_all_entries_approved
        if allow_self_approve_no_client is not None:
            self.allow_self_approve_no_client = allow_self_approve_no_client
        if clear_stages:
            self.approval_stages = None
        elif approval_stages is not None:
            self.approval_stages = [ApprovalStage(stage) for stage in approval_stages]

        self.validate()
        self.mark_as_updated()
