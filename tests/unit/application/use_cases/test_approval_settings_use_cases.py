"""
Unit tests for approval settings use cases.
"""

import pytest
from pydantic import ValidationError

from timesheets.application.dto.approval_settings_dto import (
    GetApprovalSettingsRequestDTO,
    UpdateApprovalSettingsRequestDTO,
)
from timesheets.application.use_cases.approval_settings_use_cases import (
    GetApprovalSettingsUseCase,
    UpdateApprovalSettingsUseCase,
)
from timesheets.domain.models.approval_settings import ApprovalMode, ApprovalStage
from timesheets.domain.services.capabilities import ProjectRole
from tests.fakes import seed_settings, PROJECT_ID


class TestApprovalSettingsUseCases:
    """Test cases for reading and changing approval settings."""

    @pytest.mark.asyncio
    async def test_first_read_stores_defaults(self, context, store):
        """Test an unconfigured project gets default settings persisted."""
        result = await GetApprovalSettingsUseCase(context).execute(
            GetApprovalSettingsRequestDTO(project_id=PROJECT_ID)
        )

        assert result.success is True
        assert result.data.approval_mode == "required"
        assert result.data.auto_approve_after_days == 0
        assert result.data.require_all_entries_approved is True
        assert PROJECT_ID in store.state.settings

    @pytest.mark.asyncio
    async def test_update_owner_only(self, context, store, capabilities):
        """Test non-owners cannot change the policy."""
        capabilities.grant(PROJECT_ID, "reviewer-1", ProjectRole.REVIEWER)

        result = await UpdateApprovalSettingsUseCase(context).set_current_user("reviewer-1").execute(
            UpdateApprovalSettingsRequestDTO(project_id=PROJECT_ID, auto_approve_after_days=3)
        )

        assert result.error_code == "UNAUTHORIZED_APPROVER"
        assert store.state.settings == {}

    @pytest.mark.asyncio
    async def test_switch_to_multi_stage(self, context, store, capabilities):
        """Test an owner configures a stage chain."""
        capabilities.grant(PROJECT_ID, "owner-1", ProjectRole.OWNER)

        result = await UpdateApprovalSettingsUseCase(context).set_current_user("owner-1").execute(
            UpdateApprovalSettingsRequestDTO(
                project_id=PROJECT_ID,
                approval_mode=ApprovalMode.MULTI_STAGE,
                approval_stages=[ApprovalStage.REVIEWER, ApprovalStage.CLIENT],
                auto_approve_after_days=5,
            )
        )

        assert result.success is True
        assert result.data.approval_mode == "multi_stage"
        assert result.data.approval_stages == ["reviewer", "client"]
        stored = store.state.settings[PROJECT_ID]
        assert stored.approval_stages == [ApprovalStage.REVIEWER, ApprovalStage.CLIENT]
        assert stored.auto_approve_after_days == 5

    @pytest.mark.asyncio
    async def test_partial_update_keeps_other_fields(self, context, store, capabilities):
        """Test omitted fields keep their stored values."""
        capabilities.grant(PROJECT_ID, "owner-1", ProjectRole.OWNER)
        seed_settings(store, approval_mode=ApprovalMode.OPTIONAL, auto_approve_after_days=10)

        result = await UpdateApprovalSettingsUseCase(context).set_current_user("owner-1").execute(
            UpdateApprovalSettingsRequestDTO(project_id=PROJECT_ID, require_all_entries_approved=False)
        )

        assert result.data.approval_mode == "optional"
        assert result.data.auto_approve_after_days == 10
        assert result.data.require_all_entries_approved is False

    @pytest.mark.asyncio
    async def test_clear_stages(self, context, store, capabilities):
        """Test the stage chain can be removed."""
        capabilities.grant(PROJECT_ID, "owner-1", ProjectRole.OWNER)
        seed_settings(
            store,
            approval_mode=ApprovalMode.MULTI_STAGE,
            approval_stages=[ApprovalStage.CLIENT],
        )

        result = await UpdateApprovalSettingsUseCase(context).set_current_user("owner-1").execute(
            UpdateApprovalSettingsRequestDTO(
                project_id=PROJECT_ID, approval_mode=ApprovalMode.REQUIRED, clear_stages=True
            )
        )

        assert result.success is True
        assert result.data.approval_stages is None

    @pytest.mark.asyncio
    async def test_multi_stage_needs_stages(self, context, store, capabilities):
        """Test a multi-stage project cannot lose its whole chain."""
        capabilities.grant(PROJECT_ID, "owner-1", ProjectRole.OWNER)
        seed_settings(
            store,
            approval_mode=ApprovalMode.MULTI_STAGE,
            approval_stages=[ApprovalStage.CLIENT],
        )

        result = await UpdateApprovalSettingsUseCase(context).set_current_user("owner-1").execute(
            UpdateApprovalSettingsRequestDTO(project_id=PROJECT_ID, clear_stages=True)
        )

        assert result.error_code == "VALIDATION_ERROR"
        assert store.state.settings[PROJECT_ID].approval_stages == [ApprovalStage.CLIENT]

    def test_clear_and_replace_rejected(self):
        """Test stages cannot be cleared and replaced in one request."""
        with pytest.raises(ValidationError):
            UpdateApprovalSettingsRequestDTO(
                project_id=PROJECT_ID,
                approval_stages=[ApprovalStage.CLIENT],
                clear_stages=True,
            )
