"""
Unit tests for ProjectApprovalSettings.
"""

import pytest

from timesheets.domain.models.approval_settings import (
    ProjectApprovalSettings, ApprovalMode, ApprovalStage,
)
from timesheets.domain.models.base import ValidationError


class TestProjectApprovalSettings:
    """Test cases for ProjectApprovalSettings."""

    def test_defaults(self):
        """Test the settings a project gets before configuration."""
        settings = ProjectApprovalSettings.default_for("project-1")

        assert settings.approval_mode == ApprovalMode.REQUIRED
        assert settings.auto_approve_after_days == 0
        assert settings.auto_approval_enabled is False
        assert settings.require_all_entries_approved is True
        assert settings.allow_self_approve_no_client is False
        assert settings.approval_stages is None
        assert settings.stages_in_effect == []

    def test_multi_stage_needs_stages(self):
        """Test multi-stage mode without a stage chain is rejected."""
        with pytest.raises(ValidationError, match="at least one stage"):
            ProjectApprovalSettings(project_id="p", approval_mode=ApprovalMode.MULTI_STAGE)

        with pytest.raises(ValidationError, match="at least one stage"):
            ProjectApprovalSettings(project_id="p", approval_mode=ApprovalMode.MULTI_STAGE, approval_stages=[])

    def test_stages_must_not_repeat(self):
        """Test duplicate stages are rejected."""
        with pytest.raises(ValidationError, match="must not repeat"):
            ProjectApprovalSettings(
                project_id="p",
                approval_mode=ApprovalMode.MULTI_STAGE,
                approval_stages=[ApprovalStage.REVIEWER, ApprovalStage.REVIEWER],
            )

    def test_stages_ignored_outside_multi_stage(self):
        """Test a stored chain has no effect in single-stage modes."""
        settings = ProjectApprovalSettings(
            project_id="p",
            approval_mode=ApprovalMode.REQUIRED,
            approval_stages=["reviewer", "client"],
        )

        assert settings.approval_stages == [ApprovalStage.REVIEWER, ApprovalStage.CLIENT]
        assert settings.stages_in_effect == []

    def test_negative_window_rejected(self):
        """Test the auto-approve window cannot be negative."""
        with pytest.raises(ValidationError, match="cannot be negative"):
            ProjectApprovalSettings(project_id="p", auto_approve_after_days=-1)

    def test_optional_mode_never_requires_approved_entries(self):
        """Test optional mode lets sheets be submitted with pending entries."""
        settings = ProjectApprovalSettings(project_id="p", approval_mode=ApprovalMode.OPTIONAL)

        assert settings.require_all_entries_approved is True
        assert settings.submission_requires_approved_entries is False

    def test_update_partial(self):
        """Test update changes only the given fields."""
        settings = ProjectApprovalSettings.default_for("p")
        settings.update(
            approval_mode=ApprovalMode.MULTI_STAGE,
            approval_stages=[ApprovalStage.EXPERT, ApprovalStage.CLIENT],
        )

        assert settings.is_multi_stage is True
        assert settings.stages_in_effect == [ApprovalStage.EXPERT, ApprovalStage.CLIENT]
        assert settings.auto_approve_after_days == 0

    def test_update_clear_stages_revalidates(self):
        """Test clearing the chain of a multi-stage project fails validation."""
        settings = ProjectApprovalSettings(
            project_id="p",
            approval_mode=ApprovalMode.MULTI_STAGE,
            approval_stages=[ApprovalStage.REVIEWER],
        )

        with pytest.raises(ValidationError):
            settings.update(clear_stages=True)
