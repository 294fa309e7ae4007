"""
Event system setup and configuration.
Registers all event handlers with the event dispatcher.
"""

import logging
from typing import Optional

from timesheets.domain.events.base import EventDispatcher, get_event_dispatcher
from .audit_handlers import AuditLogHandler, SheetLifecycleHandler, EntryReviewHandler

logger = logging.getLogger(__name__)


def setup_event_handlers(dispatcher: Optional[EventDispatcher] = None) -> EventDispatcher:
    """Set up and register all event handlers."""

    dispatcher = dispatcher or get_event_dispatcher()
    dispatcher.clear_handlers()

    # Global handler for the audit log
    dispatcher.register_global_handler(AuditLogHandler())

    sheet_handler = SheetLifecycleHandler()
    dispatcher.register_handler("TimeSheetSubmitted", sheet_handler)
    dispatcher.register_handler("StageApprovalRecorded", sheet_handler)
    dispatcher.register_handler("TimeSheetApproved", sheet_handler)
    dispatcher.register_handler("TimeSheetRejected", sheet_handler)
    dispatcher.register_handler("TimeSheetRevertedToDraft", sheet_handler)

    dispatcher.register_handler("EntryStatusChanged", EntryReviewHandler())

    logger.info("Event handlers registered successfully")

    registered = dispatcher.get_registered_handlers()
    for event_type, handlers in registered.items():
        logger.info(f"Event {event_type}: {', '.join(handlers)} handlers")

    return dispatcher


def initialize_event_system(dispatcher: Optional[EventDispatcher] = None) -> EventDispatcher:
    """Initialize the complete event system."""
    try:
        dispatcher = setup_event_handlers(dispatcher)
        logger.info("Event system initialized successfully")
        return dispatcher
    except Exception as e:
        logger.error(f"Failed to initialize event system: {str(e)}")
        raise
