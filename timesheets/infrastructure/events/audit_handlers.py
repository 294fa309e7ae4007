"""
Event handlers that write the approval workflow to the application log.
"""

import logging

from timesheets.domain.events.base import EventHandler, DomainEvent
from timesheets.domain.events.approval_events import (
    EntryStatusChanged,
    TimeSheetSubmitted,
    StageApprovalRecorded,
    TimeSheetApproved,
    TimeSheetRejected,
    TimeSheetRevertedToDraft,
)


logger = logging.getLogger("timesheets.audit")


class AuditLogHandler(EventHandler):
    """Logs every domain event as one structured line."""

    def can_handle(self, event: DomainEvent) -> bool:
        return True

    async def handle(self, event: DomainEvent) -> None:
        logger.info(
            f"{event.event_type} {event.event_id}",
            extra={"event": event.to_dict()},
        )


class SheetLifecycleHandler(EventHandler):
    """Human-readable summary of sheet transitions."""

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, (
            TimeSheetSubmitted,
            StageApprovalRecorded,
            TimeSheetApproved,
            TimeSheetRejected,
            TimeSheetRevertedToDraft,
        ))

    async def handle(self, event: DomainEvent) -> None:
        if isinstance(event, TimeSheetSubmitted):
            logger.info(f"Sheet {event.time_sheet_id} awaiting review ({event.entry_count} entries)")
        elif isinstance(event, StageApprovalRecorded):
            remaining = event.next_stage or "none"
            logger.info(f"Sheet {event.time_sheet_id}: {event.stage} signed off, next stage {remaining}")
        elif isinstance(event, TimeSheetApproved):
            logger.info(f"Sheet {event.time_sheet_id} approved by {event.approved_by}")
        elif isinstance(event, TimeSheetRejected):
            logger.info(f"Sheet {event.time_sheet_id} rejected by {event.rejected_by}: {event.reason or 'no reason given'}")
        elif isinstance(event, TimeSheetRevertedToDraft):
            logger.info(
                f"Sheet {event.time_sheet_id} back to draft from {event.previous_status}, "
                f"{event.cleared_approvals} stage approvals cleared"
            )


class EntryReviewHandler(EventHandler):
    """Flags entries sent back to their author."""

    def can_handle(self, event: DomainEvent) -> bool:
        return isinstance(event, EntryStatusChanged)

    async def handle(self, event: DomainEvent) -> None:
        if event.to_status == "questioned":
            logger.info(f"Entry {event.time_entry_id} questioned by {event.changed_by}")
