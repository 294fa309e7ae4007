"""
Domain events for the application.
Event-driven architecture components for audit logging and integrations.
"""

from .base import DomainEvent, EventHandler, EventDispatcher, get_event_dispatcher, publish_event
from .approval_events import (
    EntryStatusChanged,
    EntryMessagePosted,
    TimeSheetSubmitted,
    StageApprovalRecorded,
    TimeSheetApproved,
    TimeSheetRejected,
    TimeSheetRevertedToDraft,
)

__all__ = [
    "DomainEvent",
    "EventHandler",
    "EventDispatcher",
    "get_event_dispatcher",
    "publish_event",
    "EntryStatusChanged",
    "EntryMessagePosted",
    "TimeSheetSubmitted",
    "StageApprovalRecorded",
    "TimeSheetApproved",
    "TimeSheetRejected",
    "TimeSheetRevertedToDraft",
]
