"""
Unit tests for event handler registration and dispatch.
"""

import logging

import pytest

from timesheets.domain.events.base import EventDispatcher, EventHandler
from timesheets.domain.events.approval_events import EntryStatusChanged, TimeSheetApproved
from timesheets.infrastructure.events.event_setup import setup_event_handlers


class ExplodingHandler(EventHandler):

    def can_handle(self, event):
        return True

    async def handle(self, event):
        raise RuntimeError("handler down")


class TestEventSetup:
    """Test cases for the event system wiring."""

    def test_handlers_registered(self):
        """Test sheet and entry handlers plus the audit log are registered."""
        dispatcher = setup_event_handlers(EventDispatcher())

        registered = dispatcher.get_registered_handlers()

        assert registered["global"] == ["AuditLogHandler"]
        assert registered["TimeSheetApproved"] == ["SheetLifecycleHandler"]
        assert registered["EntryStatusChanged"] == ["EntryReviewHandler"]

    def test_setup_is_repeatable(self):
        """Test setting up twice does not register handlers twice."""
        dispatcher = EventDispatcher()
        setup_event_handlers(dispatcher)
        setup_event_handlers(dispatcher)

        assert dispatcher.get_registered_handlers()["global"] == ["AuditLogHandler"]

    @pytest.mark.asyncio
    async def test_audit_log_written(self, caplog):
        """Test dispatched events reach the audit logger."""
        caplog.set_level(logging.INFO, logger="timesheets.audit")
        dispatcher = setup_event_handlers(EventDispatcher())

        await dispatcher.dispatch(EntryStatusChanged(
            time_entry_id="entry-1",
            project_id="project-1",
            from_status="pending",
            to_status="questioned",
            changed_by="client-1",
        ))

        messages = [record.getMessage() for record in caplog.records if record.name == "timesheets.audit"]
        assert any(m.startswith("EntryStatusChanged") for m in messages)
        assert "Entry entry-1 questioned by client-1" in messages

    @pytest.mark.asyncio
    async def test_failing_handler_isolated(self, recorder):
        """Test one failing handler does not stop the others."""
        dispatcher = EventDispatcher()
        dispatcher.register_global_handler(ExplodingHandler())
        dispatcher.register_global_handler(recorder)

        await dispatcher.dispatch(TimeSheetApproved(
            time_sheet_id="sheet-1", project_id="project-1", approved_by="owner-1",
        ))

        assert recorder.event_types == ["TimeSheetApproved"]
        assert dispatcher.get_event_log(limit=1)[0]["data"]["time_sheet_id"] == "sheet-1"
