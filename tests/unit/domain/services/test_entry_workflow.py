"""
Unit tests for EntryWorkflowService.
"""

import pytest

from timesheets.domain.models.base import EntityNotFoundError, EntryLockedError, UnauthorizedApproverError
from timesheets.domain.models.time_entry import EntryStatus
from timesheets.domain.models.time_sheet import TimeSheetStatus
from timesheets.domain.models.approval import StatusChangeSource
from timesheets.domain.services.capabilities import ProjectRole
from timesheets.domain.services.entry_workflow import EntryWorkflowService, StatusOverride
from tests.fakes import (
    InMemoryStore, FakeCapabilityResolver, FixedClock, seed_entry, seed_sheet, PROJECT_ID,
)


class TestEntryWorkflowService:
    """Test cases for entry status changes and the edit-lock."""

    def setup_method(self):
        """Set up test fixtures."""
        self.store = InMemoryStore()
        self.clock = FixedClock()
        self.capabilities = FakeCapabilityResolver()
        self.capabilities.grant(PROJECT_ID, "reviewer-1", ProjectRole.REVIEWER)
        self.capabilities.grant(PROJECT_ID, "client-1", ProjectRole.CLIENT)
        self.capabilities.grant(PROJECT_ID, "viewer-1", ProjectRole.VIEWER)
        self.entry = seed_entry(self.store)

    def _service(self, uow):
        return EntryWorkflowService(uow, capabilities=self.capabilities, clock=self.clock)

    def test_set_status_writes_audit_row(self):
        """Test a status change persists the entry and one history row."""
        with self.store.unit_of_work() as uow:
            entry = self._service(uow).set_entry_status(self.entry.id, EntryStatus.APPROVED, "reviewer-1")
            uow.commit()

        assert entry.status == EntryStatus.APPROVED
        assert entry.approved_date == self.clock.now()

        with self.store.unit_of_work() as uow:
            stored = uow.time_entries.get_by_id(self.entry.id)
            history = uow.status_changes.list_for_entry(self.entry.id)

        assert stored.status == EntryStatus.APPROVED
        assert len(history) == 1
        assert history[0].from_status == EntryStatus.PENDING
        assert history[0].to_status == EntryStatus.APPROVED
        assert history[0].changed_by == "reviewer-1"
        assert history[0].source == StatusChangeSource.MANUAL

    def test_same_status_is_noop(self):
        """Test setting the current status writes nothing."""
        with self.store.unit_of_work() as uow:
            entry = self._service(uow).set_entry_status(self.entry.id, EntryStatus.PENDING, "reviewer-1")

            assert entry.pull_events() == []
            assert uow.status_changes.list_for_entry(self.entry.id) == []

    def test_unknown_entry(self):
        """Test a missing entry raises not found."""
        with self.store.unit_of_work() as uow:
            with pytest.raises(EntityNotFoundError):
                self._service(uow).set_entry_status("missing", EntryStatus.APPROVED, "reviewer-1")

    @pytest.mark.parametrize("status", [TimeSheetStatus.SUBMITTED, TimeSheetStatus.APPROVED, TimeSheetStatus.REJECTED])
    def test_locked_by_non_draft_sheet(self, status):
        """Test entries on a non-draft sheet cannot change status."""
        sheet = seed_sheet(self.store, entries=[self.entry], status=status)

        with self.store.unit_of_work() as uow:
            with pytest.raises(EntryLockedError) as exc_info:
                self._service(uow).set_entry_status(self.entry.id, EntryStatus.QUESTIONED, "reviewer-1")

        assert exc_info.value.code == "ENTRY_LOCKED"
        assert exc_info.value.sheet_id == sheet.id

    def test_draft_sheet_does_not_lock(self):
        """Test entries on a draft sheet stay editable."""
        seed_sheet(self.store, entries=[self.entry])

        with self.store.unit_of_work() as uow:
            entry = self._service(uow).edit_entry(self.entry.id, hours=4.0)

        assert entry.hours == 4.0

    def test_edit_and_delete_locked(self):
        """Test editing and deleting respect the lock."""
        seed_sheet(self.store, entries=[self.entry], status=TimeSheetStatus.SUBMITTED)

        with self.store.unit_of_work() as uow:
            service = self._service(uow)
            with pytest.raises(EntryLockedError):
                service.edit_entry(self.entry.id, title="Changed")
            with pytest.raises(EntryLockedError):
                service.delete_entry(self.entry.id)

    def test_auto_approval_bypasses_lock(self):
        """Test the sweep may approve a locked entry."""
        seed_sheet(self.store, entries=[self.entry], status=TimeSheetStatus.SUBMITTED)

        with self.store.unit_of_work() as uow:
            entry = self._service(uow).set_entry_status(
                self.entry.id, EntryStatus.APPROVED, "system", override=StatusOverride.AUTO_APPROVAL
            )
            history = uow.status_changes.list_for_entry(self.entry.id)

        assert entry.status == EntryStatus.APPROVED
        assert history[0].source == StatusChangeSource.AUTO_APPROVAL

    def test_admin_reset_only_to_pending(self):
        """Test the admin reset unlocks a return to pending and nothing else."""
        questioned = seed_entry(self.store, status=EntryStatus.QUESTIONED)
        seed_sheet(self.store, entries=[questioned], status=TimeSheetStatus.APPROVED)

        with self.store.unit_of_work() as uow:
            service = self._service(uow)
            entry = service.set_entry_status(
                questioned.id, EntryStatus.PENDING, "owner-1", override=StatusOverride.ADMIN_RESET
            )
            assert entry.status == EntryStatus.PENDING

            with pytest.raises(EntryLockedError):
                service.set_entry_status(
                    questioned.id, EntryStatus.APPROVED, "owner-1", override=StatusOverride.ADMIN_RESET
                )

    def test_permission_table(self):
        """Test which roles may move an entry to which status."""
        with self.store.unit_of_work() as uow:
            service = self._service(uow)
            entry = service.get_entry(self.entry.id)

            service.ensure_can_set_status(entry, EntryStatus.APPROVED, "client-1")
            service.ensure_can_set_status(entry, EntryStatus.QUESTIONED, "client-1")
            service.ensure_can_set_status(entry, EntryStatus.PENDING, "reviewer-1")
            service.ensure_can_set_status(entry, EntryStatus.PENDING, "system")

            with pytest.raises(UnauthorizedApproverError):
                service.ensure_can_set_status(entry, EntryStatus.PENDING, "client-1")
            with pytest.raises(UnauthorizedApproverError):
                service.ensure_can_set_status(entry, EntryStatus.APPROVED, "viewer-1")

    def test_message_with_status_change(self):
        """Test a message carrying a status moves the entry."""
        with self.store.unit_of_work() as uow:
            message, entry = self._service(uow).post_message(
                self.entry.id, "client-1", "Which ticket is this?", status_change=EntryStatus.QUESTIONED
            )
            history = uow.status_changes.list_for_entry(self.entry.id)
            thread = uow.messages.list_for_entry(self.entry.id)

        assert entry.status == EntryStatus.QUESTIONED
        assert history[0].source == StatusChangeSource.MESSAGE
        assert [m.id for m in thread] == [message.id]
        assert message.pull_events()[0].event_type == "EntryMessagePosted"

    def test_plain_message_leaves_status(self):
        """Test a message without a status change only adds to the thread."""
        with self.store.unit_of_work() as uow:
            message, entry = self._service(uow).post_message(self.entry.id, "author-1", "Pairing session")

        assert entry is None
        assert message.status_change is None

    def test_message_status_change_on_locked_entry(self):
        """Test a locked entry rejects status-changing messages."""
        seed_sheet(self.store, entries=[self.entry], status=TimeSheetStatus.SUBMITTED)

        with self.store.unit_of_work() as uow:
            with pytest.raises(EntryLockedError):
                self._service(uow).post_message(
                    self.entry.id, "reviewer-1", "Looks wrong", status_change=EntryStatus.QUESTIONED
                )

    def test_message_status_change_needs_permission(self):
        """Test a viewer cannot question an entry through a message."""
        with self.store.unit_of_work() as uow:
            with pytest.raises(UnauthorizedApproverError):
                self._service(uow).post_message(
                    self.entry.id, "viewer-1", "Hmm", status_change=EntryStatus.QUESTIONED
                )

    def test_delete_unlinks_from_draft_sheet(self):
        """Test deleting an entry removes it from its draft sheet."""
        sheet = seed_sheet(self.store, entries=[self.entry])

        with self.store.unit_of_work() as uow:
            self._service(uow).delete_entry(self.entry.id)

            assert uow.time_entries.get_by_id(self.entry.id) is None
            assert uow.time_sheets.get_entry_ids(sheet.id) == []
