"""
Unit tests for the auto-approval sweep.
"""

from datetime import timedelta

import pytest

from timesheets.application.dto.auto_approval_dto import RunSweepRequestDTO
from timesheets.application.use_cases.auto_approval_use_cases import RunAutoApprovalSweepUseCase
from timesheets.domain.models.approval import StatusChangeSource, TimeSheetApproval
from timesheets.domain.models.approval_settings import ApprovalMode, ApprovalStage
from timesheets.domain.models.time_entry import EntryStatus
from timesheets.domain.models.base import ValidationError, new_id
from timesheets.domain.models.time_sheet import TimeSheetStatus
from tests.fakes import seed_entry, seed_sheet, seed_settings


class TestAutoApprovalSweep:
    """Test cases for RunAutoApprovalSweepUseCase."""

    def days_ago(self, clock, days):
        return clock.now() - timedelta(days=days)

    @pytest.mark.asyncio
    async def test_idle_entries_approved(self, context, store, clock, recorder):
        """Test only entries idle past the window are approved, as the system actor."""
        seed_settings(store, auto_approve_after_days=7)
        stale = seed_entry(store, created_at=self.days_ago(clock, 10))
        fresh = seed_entry(store, created_at=self.days_ago(clock, 2))

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.entries_approved == 1
        assert store.state.entries[stale.id].status == EntryStatus.APPROVED
        assert store.state.entries[stale.id].status_changed_by == "system"
        assert store.state.entries[fresh.id].status == EntryStatus.PENDING
        [change] = store.state.status_changes
        assert change.source == StatusChangeSource.AUTO_APPROVAL
        assert change.changed_by == "system"
        assert recorder.event_types == ["EntryStatusChanged"]

    @pytest.mark.asyncio
    async def test_disabled_project_untouched(self, context, store, clock):
        """Test projects without a window are skipped."""
        entry = seed_entry(store, created_at=self.days_ago(clock, 100))

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.total_changes == 0
        assert store.state.entries[entry.id].status == EntryStatus.PENDING

    @pytest.mark.asyncio
    async def test_locked_entry_approved(self, context, store, clock):
        """Test the sweep reaches entries on submitted sheets."""
        seed_settings(store, auto_approve_after_days=7, approval_mode=ApprovalMode.OPTIONAL)
        entry = seed_entry(store, created_at=self.days_ago(clock, 10))
        seed_sheet(
            store,
            entries=[entry],
            status=TimeSheetStatus.SUBMITTED,
            submitted_at=self.days_ago(clock, 1),
        )

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.entries_approved == 1
        assert report.sheets_approved == 0
        assert store.state.entries[entry.id].status == EntryStatus.APPROVED

    @pytest.mark.asyncio
    async def test_idle_sheet_approved(self, context, store, clock, recorder):
        """Test a single-stage sheet idle past the window is approved."""
        seed_settings(store, auto_approve_after_days=7)
        entry = seed_entry(store, status=EntryStatus.APPROVED, created_at=self.days_ago(clock, 20))
        sheet = seed_sheet(
            store,
            entries=[entry],
            status=TimeSheetStatus.SUBMITTED,
            submitted_at=self.days_ago(clock, 8),
        )

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.sheets_approved == 1
        stored = store.state.sheets[sheet.id]
        assert stored.status == TimeSheetStatus.APPROVED
        assert stored.status_changed_by == "system"
        assert recorder.event_types == ["TimeSheetApproved"]

    @pytest.mark.asyncio
    async def test_multi_stage_one_stage_per_window(self, context, store, clock):
        """Test each idle window advances the chain by one stage."""
        seed_settings(
            store,
            auto_approve_after_days=7,
            approval_mode=ApprovalMode.MULTI_STAGE,
            approval_stages=[ApprovalStage.REVIEWER, ApprovalStage.CLIENT],
        )
        entry = seed_entry(store, status=EntryStatus.APPROVED, created_at=self.days_ago(clock, 20))
        sheet = seed_sheet(
            store,
            entries=[entry],
            status=TimeSheetStatus.SUBMITTED,
            submitted_at=self.days_ago(clock, 8),
        )

        first = await RunAutoApprovalSweepUseCase(context).run()

        assert first.stages_recorded == 1
        assert first.sheets_approved == 0
        assert [a.stage for a in store.state.approvals] == [ApprovalStage.REVIEWER]
        assert store.state.sheets[sheet.id].status == TimeSheetStatus.SUBMITTED

        same_window = await RunAutoApprovalSweepUseCase(context).run()
        assert same_window.total_changes == 0

        clock.advance(days=8)
        second = await RunAutoApprovalSweepUseCase(context).run()

        assert second.stages_recorded == 1
        assert second.sheets_approved == 1
        assert [a.stage for a in store.state.approvals] == [ApprovalStage.REVIEWER, ApprovalStage.CLIENT]
        assert store.state.sheets[sheet.id].status == TimeSheetStatus.APPROVED

    @pytest.mark.asyncio
    async def test_second_pass_changes_nothing(self, context, store, clock, recorder):
        """Test running the sweep twice leaves the same state and audit rows."""
        seed_settings(store, auto_approve_after_days=7)
        for days in (9, 12):
            seed_entry(store, created_at=self.days_ago(clock, days))
        approved = seed_entry(store, status=EntryStatus.APPROVED, created_at=self.days_ago(clock, 20))
        seed_sheet(store, entries=[approved], status=TimeSheetStatus.SUBMITTED, submitted_at=self.days_ago(clock, 10))

        await RunAutoApprovalSweepUseCase(context).run()
        audit_rows = len(store.state.status_changes)
        statuses = {entry_id: entry.status for entry_id, entry in store.state.entries.items()}
        published = len(recorder.events)

        again = await RunAutoApprovalSweepUseCase(context).run()

        assert again.total_changes == 0
        assert again.failures == []
        assert len(store.state.status_changes) == audit_rows
        assert {entry_id: entry.status for entry_id, entry in store.state.entries.items()} == statuses
        assert len(recorder.events) == published

    @pytest.mark.asyncio
    async def test_refused_sheet_reported(self, context, store, clock):
        """Test a sheet the workflow refuses is reported and the pass continues."""
        seed_settings(store, auto_approve_after_days=7)
        questioned = seed_entry(
            store,
            status=EntryStatus.QUESTIONED,
            created_at=self.days_ago(clock, 20),
            status_changed_at=self.days_ago(clock, 1),
        )
        blocked = seed_sheet(
            store,
            entries=[questioned],
            status=TimeSheetStatus.SUBMITTED,
            submitted_at=self.days_ago(clock, 10),
        )
        approved = seed_entry(store, status=EntryStatus.APPROVED, created_at=self.days_ago(clock, 20))
        clean = seed_sheet(
            store,
            entries=[approved],
            status=TimeSheetStatus.SUBMITTED,
            submitted_at=self.days_ago(clock, 10),
        )

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.sheets_approved == 1
        [failure] = report.failures
        assert failure.record_type == "time_sheet"
        assert failure.record_id == blocked.id
        assert failure.error_code == "ENTRIES_NOT_APPROVED"
        assert store.state.sheets[blocked.id].status == TimeSheetStatus.SUBMITTED
        assert store.state.sheets[clean.id].status == TimeSheetStatus.APPROVED

    @pytest.mark.asyncio
    async def test_lost_race_reported(self, context, store, clock):
        """Test a sheet moved by another writer is reported, not approved twice."""
        seed_settings(store, auto_approve_after_days=7)
        entry = seed_entry(store, status=EntryStatus.APPROVED, created_at=self.days_ago(clock, 20))
        sheet = seed_sheet(store, entries=[entry], status=TimeSheetStatus.SUBMITTED, submitted_at=self.days_ago(clock, 10))
        store.lost_races.add(sheet.id)

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.sheets_approved == 0
        assert [f.error_code for f in report.failures] == ["SHEET_NOT_SUBMITTED"]

    @pytest.mark.asyncio
    async def test_unreadable_entry_does_not_stop_pass(self, context, store, clock):
        """Test an entry that fails to load is reported and the others are still approved."""
        seed_settings(store, auto_approve_after_days=7)
        broken = seed_entry(store, created_at=self.days_ago(clock, 30))
        good = seed_entry(store, created_at=self.days_ago(clock, 30))
        store.unreadable[broken.id] = ValidationError("Hours cannot exceed 24 per entry", "hours")

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.entries_approved == 1
        assert store.state.entries[good.id].status == EntryStatus.APPROVED
        [failure] = report.failures
        assert failure.record_type == "time_entry"
        assert failure.record_id == broken.id
        assert failure.error_code == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_unreadable_settings_skip_one_project(self, context, store, clock):
        """Test a project whose settings fail to load is reported and the rest are swept."""
        seed_settings(store, auto_approve_after_days=7)
        seed_settings(store, project_id="project-2", auto_approve_after_days=7)
        store.unreadable["project-2"] = ValueError("'partner' is not a valid ApprovalStage")
        entry = seed_entry(store, created_at=self.days_ago(clock, 10))

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.entries_approved == 1
        assert store.state.entries[entry.id].status == EntryStatus.APPROVED
        [failure] = report.failures
        assert failure.record_type == "approval_settings"
        assert failure.record_id == "project-2"
        assert failure.error_code == "INVALID_RECORD"

    @pytest.mark.asyncio
    async def test_unreadable_sheet_reported(self, context, store, clock):
        """Test a sheet that fails to load does not hold back the next one."""
        seed_settings(store, auto_approve_after_days=7)
        first = seed_entry(store, status=EntryStatus.APPROVED, created_at=self.days_ago(clock, 20))
        second = seed_entry(store, status=EntryStatus.APPROVED, created_at=self.days_ago(clock, 20))
        broken = seed_sheet(store, entries=[first], status=TimeSheetStatus.SUBMITTED, submitted_at=self.days_ago(clock, 10))
        clean = seed_sheet(store, entries=[second], status=TimeSheetStatus.SUBMITTED, submitted_at=self.days_ago(clock, 10))
        store.unreadable[broken.id] = ValueError("'archived' is not a valid TimeSheetStatus")

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.sheets_approved == 1
        assert store.state.sheets[clean.id].status == TimeSheetStatus.APPROVED
        assert [(f.record_id, f.error_code) for f in report.failures] == [(broken.id, "INVALID_RECORD")]

    @pytest.mark.asyncio
    async def test_completed_chain_promoted(self, context, store, clock, recorder):
        """Test a submitted sheet with no stage left is approved without waiting for the window."""
        seed_settings(
            store,
            auto_approve_after_days=7,
            approval_mode=ApprovalMode.MULTI_STAGE,
            approval_stages=[ApprovalStage.REVIEWER],
        )
        entry = seed_entry(store, status=EntryStatus.APPROVED, created_at=self.days_ago(clock, 20))
        sheet = seed_sheet(store, entries=[entry], status=TimeSheetStatus.SUBMITTED, submitted_at=self.days_ago(clock, 2))
        store.state.approvals.append(TimeSheetApproval(
            time_sheet_id=sheet.id,
            stage=ApprovalStage.REVIEWER,
            approved_by="reviewer-1",
            approved_at=self.days_ago(clock, 1),
            id=new_id(),
        ))

        report = await RunAutoApprovalSweepUseCase(context).run()

        assert report.sheets_approved == 1
        assert report.stages_recorded == 0
        assert store.state.sheets[sheet.id].status == TimeSheetStatus.APPROVED
        assert recorder.event_types == ["TimeSheetApproved"]

    @pytest.mark.asyncio
    async def test_single_project_pass(self, context, store, clock):
        """Test a pass limited to one project leaves the others alone."""
        seed_settings(store, auto_approve_after_days=7)
        seed_settings(store, project_id="project-2", auto_approve_after_days=7)
        mine = seed_entry(store, created_at=self.days_ago(clock, 10))
        other = seed_entry(store, project_id="project-2", created_at=self.days_ago(clock, 10))

        report = await RunAutoApprovalSweepUseCase(context).run("project-2")

        assert report.entries_approved == 1
        assert store.state.entries[mine.id].status == EntryStatus.PENDING
        assert store.state.entries[other.id].status == EntryStatus.APPROVED

    @pytest.mark.asyncio
    async def test_execute_wraps_report(self, context, store, clock):
        """Test the sweep also runs through the common use case interface."""
        seed_settings(store, auto_approve_after_days=7)
        seed_entry(store, created_at=self.days_ago(clock, 10))

        result = await RunAutoApprovalSweepUseCase(context).execute(RunSweepRequestDTO())

        assert result.success is True
        assert result.data.entries_approved == 1
