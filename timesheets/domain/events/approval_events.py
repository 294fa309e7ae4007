"""
Domain events raised by the approval workflow.
"""

from typing import Optional
from dataclasses import dataclass

from .base import DomainEvent


@dataclass
class EntryStatusChanged(DomainEvent):
    """Event fired whenever a time entry changes status."""

    time_entry_id: str
    project_id: str
    from_status: str
    to_status: str
    changed_by: str
    source: str = "manual"


@dataclass
class EntryMessagePosted(DomainEvent):
    """Event fired when a comment is added to a time entry."""

    message_id: str
    time_entry_id: str
    author_id: str
    status_change: Optional[str] = None


@dataclass
class TimeSheetSubmitted(DomainEvent):
    """Event fired when a draft sheet is submitted for review."""

    time_sheet_id: str
    project_id: str
    submitted_by: str
    entry_count: int = 0


@dataclass
class StageApprovalRecorded(DomainEvent):
    """Event fired when one stage of a multi-stage chain signs off."""

    time_sheet_id: str
    stage: str
    approved_by: str
    next_stage: Optional[str] = None


@dataclass
class TimeSheetApproved(DomainEvent):
    """Event fired when a sheet reaches the approved state."""

    time_sheet_id: str
    project_id: str
    approved_by: str
    via_stages: bool = False


@dataclass
class TimeSheetRejected(DomainEvent):
    """Event fired when a reviewer rejects a sheet."""

    time_sheet_id: str
    project_id: str
    rejected_by: str
    reason: Optional[str] = None


@dataclass
class TimeSheetRevertedToDraft(DomainEvent):
    """Event fired when a sheet is sent back to draft."""

    time_sheet_id: str
    project_id: str
    reverted_by: str
    previous_status: str
    cleared_approvals: int = 0
