"""
Append-only approval records: stage sign-offs, entry status history and
entry messages.
"""

from datetime import datetime
from typing import Optional
from enum import Enum

from timesheets.domain.models.base import BaseEntity, ValidationError, utc_now
from timesheets.domain.models.approval_settings import ApprovalStage
from timesheets.domain.models.time_entry import EntryStatus


class StatusChangeSource(str, Enum):
    """What triggered an entry status change."""
    MANUAL = "manual"
    MESSAGE = "message"
    AUTO_APPROVAL = "auto_approval"
    ADMIN_RESET = "admin_reset"


class TimeSheetApproval(BaseEntity):
    """
    One completed stage of a sheet's approval chain.
    Never updated after creation.
    """

    def __init__(
        self,
        time_sheet_id: str,
        stage: ApprovalStage,
        approved_by: str,
        approved_at: Optional[datetime] = None,
        notes: Optional[str] = None,
        id: Optional[str] = None,
    ):
        approved_at = approved_at or utc_now()
        super().__init__(id=id, created_at=approved_at, updated_at=approved_at)
        self.time_sheet_id = time_sheet_id
        self.stage = ApprovalStage(stage)
        self.approved_by = approved_by
        self.approved_at = approved_at
        self.notes = notes
        self.validate()

    def validate(self) -> None:
        if not self.time_sheet_id:
            raise ValidationError("Time sheet ID is required", "time_sheet_id")
        if not self.approved_by:
            raise ValidationError("Approver is required", "approved_by")
        if self.notes and len(self.notes) > 2000:
            raise ValidationError("Notes too long (max 2000 characters)", "notes")


class EntryStatusChange(BaseEntity):
    """Audit record of one entry status transition."""

    def __init__(
        self,
        time_entry_id: str,
        from_status: EntryStatus,
        to_status: EntryStatus,
        changed_by: str,
        changed_at: Optional[datetime] = None,
        source: StatusChangeSource = StatusChangeSource.MANUAL,
        id: Optional[str] = None,
    ):
        changed_at = changed_at or utc_now()
        super().__init__(id=id, created_at=changed_at, updated_at=changed_at)
        self.time_entry_id = time_entry_id
        self.from_status = EntryStatus(from_status)
        self.to_status = EntryStatus(to_status)
        self.changed_by = changed_by
        self.changed_at = changed_at
        self.source = StatusChangeSource(source)


class EntryMessage(BaseEntity):
    """
    A comment on a time entry. A message carrying ``status_change`` is how
    reviewers question, approve or reopen an entry from the thread.
    """

    def __init__(
        self,
        time_entry_id: str,
        author_id: str,
        content: str,
        status_change: Optional[EntryStatus] = None,
        parent_message_id: Optional[str] = None,
        id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        super().__init__(id=id, created_at=created_at, updated_at=updated_at)
        self.time_entry_id = time_entry_id
        self.author_id = author_id
        self.content = (content or "").strip()
        self.status_change = EntryStatus(status_change) if status_change else None
        self.parent_message_id = parent_message_id
        self.validate()

    def validate(self) -> None:
        if not self.time_entry_id:
            raise ValidationError("Time entry ID is required", "time_entry_id")
        if not self.author_id:
            raise ValidationError("Author ID is required", "author_id")
        if not self.content:
            raise ValidationError("Message content is required", "content")
        if len(self.content) > 5000:
            raise ValidationError("Message too long (max 5000 characters)", "content")
