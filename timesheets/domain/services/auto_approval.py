"""Auto-approval eligibility.

Decides which entries and sheets have sat idle past a project's
auto-approve window. Pure functions of settings, records and the current
time; applying the approvals is the sweep use case's job.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import List, Optional, Iterable

from timesheets.domain.models.approval import TimeSheetApproval
from timesheets.domain.models.approval_settings import ApprovalStage, ProjectApprovalSettings
from timesheets.domain.models.time_entry import TimeEntry
from timesheets.domain.models.time_sheet import TimeSheet
from timesheets.domain.services.stage_sequencer import StageSequencer


@dataclass(frozen=True)
class SheetAutoAction:
    """What the sweep should do to one sheet."""
    sheet_id: str
    stage: Optional[ApprovalStage] = None
    completes_chain: bool = False

    @property
    def is_stage_approval(self) -> bool:
        return self.stage is not None


class AutoApprovalPolicy:
    """
    Eligibility rules for the auto-approval sweep.
    """

    def __init__(self, sequencer: Optional[StageSequencer] = None):
        self.sequencer = sequencer or StageSequencer()

    def cutoff(self, settings: ProjectApprovalSettings, now: datetime) -> Optional[datetime]:
        """Records idle at or before this instant are due. None when disabled."""
        if not settings.auto_approval_enabled:
            return None
        return now - timedelta(days=settings.auto_approve_after_days)

    def eligible_entries(
        self,
        settings: ProjectApprovalSettings,
        entries: Iterable[TimeEntry],
        now: datetime,
    ) -> List[TimeEntry]:
        cutoff = self.cutoff(settings, now)
        if cutoff is None:
            return []
        return [
            entry for entry in entries
            if entry.is_unresolved and entry.idle_since <= cutoff
        ]

    def sheet_action(
        self,
        settings: ProjectApprovalSettings,
        sheet: TimeSheet,
        approvals: List[TimeSheetApproval],
        now: datetime,
    ) -> Optional[SheetAutoAction]:
        """
        Action due for a submitted sheet, or None.

        Single-stage sheets are due once ``submitted_at`` is past the cutoff.
        Multi-stage sheets are due when neither the submission nor the most
        recent stage approval is newer than the cutoff; only the stage
        currently required is recorded, so each window advances one stage.
        A multi-stage sheet with no stage left is due at once.
        """
        cutoff = self.cutoff(settings, now)
        if cutoff is None or not sheet.is_submitted or sheet.submitted_at is None:
            return None

        if not settings.is_multi_stage:
            if sheet.submitted_at <= cutoff:
                return SheetAutoAction(sheet_id=sheet.id)
            return None

        next_stage = self.sequencer.get_next_required_stage(settings, approvals)
        if next_stage is None:
            return SheetAutoAction(sheet_id=sheet.id, completes_chain=True)

        last_activity = max([sheet.submitted_at] + [approval.approved_at for approval in approvals])
        if last_activity > cutoff:
            return None
        return SheetAutoAction(sheet_id=sheet.id, stage=next_stage)
