"""
Unit tests for time sheet use cases.
"""

import pytest

from timesheets.application.dto.time_sheet_dto import (
    CreateTimeSheetRequestDTO,
    TimeSheetIdRequestDTO,
    AddSheetEntriesRequestDTO,
    RemoveSheetEntryRequestDTO,
    RecordStageApprovalRequestDTO,
    RejectTimeSheetRequestDTO,
)
from timesheets.application.use_cases.time_sheet_use_cases import (
    CreateTimeSheetUseCase,
    GetTimeSheetUseCase,
    DeleteTimeSheetUseCase,
    AddSheetEntriesUseCase,
    RemoveSheetEntryUseCase,
    SubmitTimeSheetUseCase,
    ApproveTimeSheetUseCase,
    RecordStageApprovalUseCase,
    RejectTimeSheetUseCase,
    RevertTimeSheetUseCase,
    GetApprovalStatusUseCase,
    GetSheetReadinessUseCase,
)
from timesheets.application.use_cases.audit_use_cases import GetSheetAuditTrailUseCase
from timesheets.domain.models.approval_settings import ApprovalMode, ApprovalStage
from timesheets.domain.models.time_entry import EntryStatus
from timesheets.domain.models.time_sheet import TimeSheetStatus
from timesheets.domain.services.capabilities import ProjectRole
from tests.fakes import seed_entry, seed_sheet, seed_settings, PROJECT_ID, AUTHOR_ID


def sheet_request(sheet_id):
    return TimeSheetIdRequestDTO(sheet_id=sheet_id)


class TestSheetLifecycleUseCases:
    """Test cases for creating and submitting sheets."""

    @pytest.mark.asyncio
    async def test_create_with_entries(self, context, store):
        """Test a sheet is created as a draft holding the given entries."""
        entries = [seed_entry(store), seed_entry(store)]

        result = await CreateTimeSheetUseCase(context).set_current_user(AUTHOR_ID).execute(
            CreateTimeSheetRequestDTO(project_id=PROJECT_ID, title="March", entry_ids=[e.id for e in entries])
        )

        assert result.success is True
        assert result.data.status == "draft"
        assert result.data.entry_ids == [e.id for e in entries]

    @pytest.mark.asyncio
    async def test_create_with_foreign_entry_creates_nothing(self, context, store):
        """Test a refused entry rolls back the new sheet."""
        foreign = seed_entry(store, project_id="project-2")

        result = await CreateTimeSheetUseCase(context).set_current_user(AUTHOR_ID).execute(
            CreateTimeSheetRequestDTO(project_id=PROJECT_ID, title="March", entry_ids=[foreign.id])
        )

        assert result.error_code == "ENTRY_PROJECT_MISMATCH"
        assert store.state.sheets == {}

    @pytest.mark.asyncio
    async def test_submit_refused_keeps_draft(self, context, store, recorder):
        """Test a pending entry blocks submission and nothing is published."""
        sheet = seed_sheet(store, entries=[seed_entry(store)])

        result = await SubmitTimeSheetUseCase(context).set_current_user(AUTHOR_ID).execute(sheet_request(sheet.id))

        assert result.success is False
        assert result.error_code == "ENTRIES_NOT_APPROVED"
        assert store.state.sheets[sheet.id].status == TimeSheetStatus.DRAFT
        assert recorder.events == []

    @pytest.mark.asyncio
    async def test_submit_and_approve(self, context, store, capabilities, recorder):
        """Test the one-step approval path end to end."""
        capabilities.grant(PROJECT_ID, "reviewer-1", ProjectRole.REVIEWER)
        sheet = seed_sheet(store, entries=[seed_entry(store, status=EntryStatus.APPROVED)])

        submitted = await SubmitTimeSheetUseCase(context).set_current_user(AUTHOR_ID).execute(sheet_request(sheet.id))
        approved = await ApproveTimeSheetUseCase(context).set_current_user("reviewer-1").execute(sheet_request(sheet.id))

        assert submitted.data.status == "submitted"
        assert approved.data.status == "approved"
        assert approved.data.approved_at is not None
        assert recorder.event_types == ["TimeSheetSubmitted", "TimeSheetApproved"]

    @pytest.mark.asyncio
    async def test_reject(self, context, store, capabilities):
        """Test rejection with a reason."""
        capabilities.grant(PROJECT_ID, "client-1", ProjectRole.CLIENT)
        sheet = seed_sheet(store, entries=[seed_entry(store)], status=TimeSheetStatus.SUBMITTED)

        result = await RejectTimeSheetUseCase(context).set_current_user("client-1").execute(
            RejectTimeSheetRequestDTO(sheet_id=sheet.id, reason="Not in scope")
        )

        assert result.data.status == "rejected"
        assert result.data.rejection_reason == "Not in scope"

    @pytest.mark.asyncio
    async def test_get_sheet(self, context, store):
        """Test reading a sheet with its entries."""
        entry = seed_entry(store)
        sheet = seed_sheet(store, entries=[entry])

        result = await GetTimeSheetUseCase(context).execute(sheet_request(sheet.id))

        assert result.data.id == sheet.id
        assert result.data.entry_ids == [entry.id]

    @pytest.mark.asyncio
    async def test_delete_rules(self, context, store, capabilities):
        """Test authors delete drafts and owners delete anything."""
        capabilities.grant(PROJECT_ID, "owner-1", ProjectRole.OWNER)
        submitted = seed_sheet(store, entries=[seed_entry(store)], status=TimeSheetStatus.SUBMITTED)
        draft = seed_sheet(store)

        by_author = await DeleteTimeSheetUseCase(context).set_current_user(AUTHOR_ID).execute(sheet_request(submitted.id))
        draft_by_author = await DeleteTimeSheetUseCase(context).set_current_user(AUTHOR_ID).execute(sheet_request(draft.id))
        by_owner = await DeleteTimeSheetUseCase(context).set_current_user("owner-1").execute(sheet_request(submitted.id))

        assert by_author.error_code == "UNAUTHORIZED_APPROVER"
        assert draft_by_author.success is True
        assert by_owner.success is True
        assert store.state.sheets == {}
        assert store.state.links == []

    @pytest.mark.asyncio
    async def test_add_and_remove_entries(self, context, store):
        """Test editing the membership of a draft."""
        first = seed_entry(store)
        second = seed_entry(store)
        sheet = seed_sheet(store, entries=[first])

        added = await AddSheetEntriesUseCase(context).set_current_user(AUTHOR_ID).execute(
            AddSheetEntriesRequestDTO(sheet_id=sheet.id, entry_ids=[second.id])
        )
        removed = await RemoveSheetEntryUseCase(context).set_current_user(AUTHOR_ID).execute(
            RemoveSheetEntryRequestDTO(sheet_id=sheet.id, entry_id=first.id)
        )

        assert added.data.entry_ids == [first.id, second.id]
        assert removed.data.entry_ids == [second.id]

    @pytest.mark.asyncio
    async def test_readiness(self, context, store):
        """Test the readiness query."""
        sheet = seed_sheet(store, entries=[seed_entry(store, status=EntryStatus.QUESTIONED)], status=TimeSheetStatus.SUBMITTED)

        result = await GetSheetReadinessUseCase(context).execute(sheet_request(sheet.id))

        assert result.data.can_approve is False
        assert result.data.entries_by_status["questioned"] == 1


class TestMultiStageUseCases:
    """Test cases for stage approvals through the use cases."""

    @pytest.fixture(autouse=True)
    def multi_stage_project(self, store, capabilities):
        capabilities.grant(PROJECT_ID, "reviewer-1", ProjectRole.REVIEWER)
        capabilities.grant(PROJECT_ID, "client-1", ProjectRole.CLIENT)
        capabilities.grant(PROJECT_ID, "owner-1", ProjectRole.OWNER)
        seed_settings(
            store,
            approval_mode=ApprovalMode.MULTI_STAGE,
            approval_stages=[ApprovalStage.REVIEWER, ApprovalStage.CLIENT],
        )
        self.entry = seed_entry(store, status=EntryStatus.APPROVED)
        self.sheet = seed_sheet(store, entries=[self.entry], status=TimeSheetStatus.SUBMITTED)

    async def _record(self, context, stage, actor):
        return await RecordStageApprovalUseCase(context).set_current_user(actor).execute(
            RecordStageApprovalRequestDTO(sheet_id=self.sheet.id, stage=stage)
        )

    @pytest.mark.asyncio
    async def test_reviewer_then_client(self, context, store, recorder):
        """Test the second stage approves the sheet."""
        first = await self._record(context, ApprovalStage.REVIEWER, "reviewer-1")

        assert first.data.sheet.status == "submitted"
        assert first.data.progress.next_stage == "client"

        second = await self._record(context, ApprovalStage.CLIENT, "client-1")

        assert second.data.sheet.status == "approved"
        assert second.data.progress.is_complete is True
        assert store.state.sheets[self.sheet.id].status == TimeSheetStatus.APPROVED
        assert recorder.event_types == ["StageApprovalRecorded", "StageApprovalRecorded", "TimeSheetApproved"]

    @pytest.mark.asyncio
    async def test_repeat_stage(self, context, store):
        """Test a repeated stage reports created False and keeps one row."""
        await self._record(context, ApprovalStage.REVIEWER, "reviewer-1")
        again = await self._record(context, ApprovalStage.REVIEWER, "reviewer-1")

        assert again.success is True
        assert again.data.created is False
        assert again.data.progress.next_stage == "client"
        assert len(store.state.approvals) == 1

    @pytest.mark.asyncio
    async def test_approval_status(self, context):
        """Test the stage progress query."""
        await self._record(context, ApprovalStage.REVIEWER, "reviewer-1")

        result = await GetApprovalStatusUseCase(context).execute(sheet_request(self.sheet.id))

        assert result.data.approval_mode == "multi_stage"
        assert result.data.progress.completed_stages == ["reviewer"]
        assert [a.stage for a in result.data.approvals] == ["reviewer"]

    @pytest.mark.asyncio
    async def test_revert_then_audit_trail(self, context, clock):
        """Test a revert leaves only the new attempt in the audit trail."""
        await self._record(context, ApprovalStage.REVIEWER, "reviewer-1")
        await self._record(context, ApprovalStage.CLIENT, "client-1")

        reverted = await RevertTimeSheetUseCase(context).set_current_user("owner-1").execute(sheet_request(self.sheet.id))
        assert reverted.data.status == "draft"

        clock.advance(days=1)
        await SubmitTimeSheetUseCase(context).set_current_user(AUTHOR_ID).execute(sheet_request(self.sheet.id))
        await self._record(context, ApprovalStage.REVIEWER, "reviewer-1")
        final = await self._record(context, ApprovalStage.CLIENT, "client-1")

        assert final.data.sheet.status == "approved"

        trail = await GetSheetAuditTrailUseCase(context).execute(sheet_request(self.sheet.id))
        assert [a.stage for a in trail.data.stage_approvals] == ["reviewer", "client"]
        assert all(a.approved_at >= clock.now() for a in trail.data.stage_approvals)

    @pytest.mark.asyncio
    async def test_single_step_approve_refused(self, context):
        """Test multi-stage sheets cannot be approved in one step."""
        result = await ApproveTimeSheetUseCase(context).set_current_user("owner-1").execute(sheet_request(self.sheet.id))

        assert result.error_code == "INVALID_STAGE_FOR_MODE"
