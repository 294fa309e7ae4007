"""
TimeSheet domain model.
An aggregation of time entries submitted together for review.
"""

from datetime import datetime
from typing import Optional
from enum import Enum

from timesheets.domain.models.base import BaseEntity, ValidationError, utc_now


class TimeSheetStatus(str, Enum):
    """Lifecycle status of a time sheet."""
    DRAFT = "draft"
    SUBMITTED = "submitted"
    APPROVED = "approved"
    REJECTED = "rejected"


class TimeSheet(BaseEntity):
    """
    TimeSheet entity.

    Status moves forward draft -> submitted -> approved | rejected and can be
    sent back to draft explicitly. While the sheet is not a draft, its
    entries are edit-locked.
    """

    def __init__(
        self,
        project_id: str,
        author_id: str,
        title: str,
        description: str = "",
        status: TimeSheetStatus = TimeSheetStatus.DRAFT,
        submitted_at: Optional[datetime] = None,
        approved_at: Optional[datetime] = None,
        rejected_at: Optional[datetime] = None,
        rejection_reason: Optional[str] = None,
        status_changed_by: Optional[str] = None,
        id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        super().__init__(id=id, created_at=created_at, updated_at=updated_at)
        self.project_id = project_id
        self.author_id = author_id
        self.title = title
        self.description = description or ""
        self.status = TimeSheetStatus(status)
        self.submitted_at = submitted_at
        self.approved_at = approved_at
        self.rejected_at = rejected_at
        self.rejection_reason = rejection_reason
        self.status_changed_by = status_changed_by
        self.validate()

    def validate(self) -> None:
        """Validate time sheet state."""
        if not self.project_id:
            raise ValidationError("Project ID is required", "project_id")

        if not self.author_id:
            raise ValidationError("Author ID is required", "author_id")

        if not self.title or not self.title.strip():
            raise ValidationError("Title is required", "title")

        if self.rejection_reason and len(self.rejection_reason) > 2000:
            raise ValidationError("Rejection reason too long (max 2000 characters)", "rejection_reason")

    @property
    def is_draft(self) -> bool:
        return self.status == TimeSheetStatus.DRAFT

    @property
    def is_submitted(self) -> bool:
        return self.status == TimeSheetStatus.SUBMITTED

    @property
    def is_locked(self) -> bool:
        """Entries of a non-draft sheet cannot be edited."""
        return self.status != TimeSheetStatus.DRAFT

    # State changes below only mutate fields; preconditions and
    # authorization are checked by the sheet workflow service.

    def mark_submitted(self, actor_id: str, at: Optional[datetime] = None) -> None:
        now = at or utc_now()
        self.status = TimeSheetStatus.SUBMITTED
        self.submitted_at = now
        self.approved_at = None
        self.rejected_at = None
        self.rejection_reason = None
        self.status_changed_by = actor_id
        self.mark_as_updated(now)

    def mark_approved(self, actor_id: str, at: Optional[datetime] = None) -> None:
        now = at or utc_now()
        self.status = TimeSheetStatus.APPROVED
        self.approved_at = now
        self.status_changed_by = actor_id
        self.mark_as_updated(now)

    def mark_rejected(self, actor_id: str, reason: Optional[str] = None, at: Optional[datetime] = None) -> None:
        now = at or utc_now()
        self.status = TimeSheetStatus.REJECTED
        self.rejected_at = now
        self.rejection_reason = reason
        self.status_changed_by = actor_id
        self.validate()
        self.mark_as_updated(now)

    def mark_draft(self, actor_id: str, at: Optional[datetime] = None) -> None:
        now = at or utc_now()
        self.status = TimeSheetStatus.DRAFT
        self.submitted_at = None
        self.approved_at = None
        self.rejected_at = None
        self.rejection_reason = None
        self.status_changed_by = actor_id
        self.mark_as_updated(now)


class TimeSheetEntry:
    """Link between a sheet and one of its entries."""

    def __init__(
        self,
        time_sheet_id: str,
        time_entry_id: str,
        created_at: Optional[datetime] = None,
        id: Optional[str] = None,
    ):
        self.id = id
        self.time_sheet_id = time_sheet_id
        self.time_entry_id = time_entry_id
        self.created_at = created_at or utc_now()

    def __repr__(self) -> str:
        return f"TimeSheetEntry(sheet={self.time_sheet_id!r}, entry={self.time_entry_id!r})"
