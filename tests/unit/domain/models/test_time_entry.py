"""
Unit tests for TimeEntry domain model.
"""

import pytest
from datetime import datetime, timezone, date

from timesheets.domain.models.time_entry import TimeEntry, EntryStatus
from timesheets.domain.models.base import ValidationError


class TestTimeEntry:
    """Test cases for TimeEntry entity."""

    def setup_method(self):
        """Set up test fixtures."""
        self.now = datetime(2024, 3, 1, 9, 0, tzinfo=timezone.utc)
        self.entry = TimeEntry(
            project_id="project-1",
            author_id="author-1",
            title="Design review",
            hours=2.5,
            created_at=self.now,
        )

    def test_new_entry_is_pending(self):
        """Test a new entry starts pending with no approval date."""
        assert self.entry.status == EntryStatus.PENDING
        assert self.entry.approved_date is None
        assert self.entry.is_unresolved is True
        assert self.entry.entry_date == date(2024, 3, 1)

    def test_hours_validation(self):
        """Test hours must be between 0 and 24."""
        with pytest.raises(ValidationError, match="negative"):
            TimeEntry(project_id="p", author_id="a", title="t", hours=-1)

        with pytest.raises(ValidationError, match="exceed 24"):
            TimeEntry(project_id="p", author_id="a", title="t", hours=25)

    def test_title_required(self):
        """Test blank titles are rejected."""
        with pytest.raises(ValidationError, match="Title is required"):
            TimeEntry(project_id="p", author_id="a", title="  ", hours=1)

    def test_approved_date_tracks_status(self):
        """Test approved_date is set exactly while the entry is approved."""
        approved_at = datetime(2024, 3, 2, tzinfo=timezone.utc)
        self.entry.change_status(EntryStatus.APPROVED, "reviewer-1", at=approved_at)

        assert self.entry.status == EntryStatus.APPROVED
        assert self.entry.approved_date == approved_at
        assert self.entry.status_changed_by == "reviewer-1"

        self.entry.change_status(EntryStatus.QUESTIONED, "reviewer-1", at=approved_at)
        assert self.entry.approved_date is None

        self.entry.change_status(EntryStatus.PENDING, "owner-1", at=approved_at)
        assert self.entry.approved_date is None

    def test_any_status_reachable_from_any_other(self):
        """Test every status pair is a legal transition."""
        for source in EntryStatus:
            for target in EntryStatus:
                entry = TimeEntry(project_id="p", author_id="a", title="t", hours=1)
                entry.change_status(source, "x", at=self.now)
                entry.change_status(target, "x", at=self.now)
                assert entry.status == target
                assert (entry.approved_date is not None) == (target == EntryStatus.APPROVED)

    def test_change_status_returns_previous_and_raises_event(self):
        """Test change_status reports the previous status and records an event."""
        self.entry.id = "entry-1"
        previous = self.entry.change_status(EntryStatus.QUESTIONED, "client-1", source="message")

        assert previous == EntryStatus.PENDING
        events = self.entry.pull_events()
        assert len(events) == 1
        assert events[0].event_type == "EntryStatusChanged"
        assert events[0].from_status == "pending"
        assert events[0].to_status == "questioned"
        assert events[0].source == "message"
        assert self.entry.pull_events() == []

    def test_change_status_requires_actor(self):
        """Test a status change without an actor is rejected."""
        with pytest.raises(ValidationError, match="Actor ID is required"):
            self.entry.change_status(EntryStatus.APPROVED, "")

    def test_inconsistent_approved_date_rejected(self):
        """Test loading an approved entry without an approval date fails."""
        with pytest.raises(ValidationError, match="Approved date"):
            TimeEntry(project_id="p", author_id="a", title="t", hours=1, status=EntryStatus.APPROVED)

    def test_idle_since_falls_back_to_creation(self):
        """Test idle_since uses the last status change, else creation time."""
        assert self.entry.idle_since == self.now

        later = datetime(2024, 3, 5, tzinfo=timezone.utc)
        self.entry.change_status(EntryStatus.QUESTIONED, "client-1", at=later)
        assert self.entry.idle_since == later

    def test_edit_keeps_unchanged_fields(self):
        """Test partial edits."""
        self.entry.edit(hours=3.0)

        assert self.entry.hours == 3.0
        assert self.entry.title == "Design review"
