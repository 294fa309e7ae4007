"""Stage sequencer for multi-stage time sheet approval.

Computes, from a project's configured stage chain and the approvals recorded
so far, which stages are done and which one is required next. Order always
follows the configuration; approval timestamps are never consulted, so the
result is the same whatever order approvals were inserted in.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Iterable

from timesheets.domain.models.approval import TimeSheetApproval
from timesheets.domain.models.approval_settings import ApprovalStage, ProjectApprovalSettings


@dataclass(frozen=True)
class StageProgress:
    """Snapshot of a sheet's position in its stage chain."""
    stages: List[ApprovalStage] = field(default_factory=list)
    completed: List[ApprovalStage] = field(default_factory=list)
    next_stage: Optional[ApprovalStage] = None

    @property
    def is_fully_approved(self) -> bool:
        return self.next_stage is None

    def to_dict(self) -> dict:
        return {
            "stages": [stage.value for stage in self.stages],
            "completed_stages": [stage.value for stage in self.completed],
            "next_stage": self.next_stage.value if self.next_stage else None,
            "is_complete": self.is_fully_approved,
        }


class StageSequencer:
    """
    Stateless evaluator of stage progress.
    """

    def evaluate(
        self,
        settings: ProjectApprovalSettings,
        approvals: Iterable[TimeSheetApproval],
    ) -> StageProgress:
        """
        Single scan over the configured stages.

        Approvals for stages outside the configuration are ignored and
        duplicate approvals of a stage count once.
        """
        stages = settings.stages_in_effect
        if not stages:
            return StageProgress()

        recorded = {approval.stage for approval in approvals}
        completed = [stage for stage in stages if stage in recorded]
        next_stage = next((stage for stage in stages if stage not in recorded), None)

        return StageProgress(stages=list(stages), completed=completed, next_stage=next_stage)

    def get_next_required_stage(
        self,
        settings: ProjectApprovalSettings,
        approvals: Iterable[TimeSheetApproval],
    ) -> Optional[ApprovalStage]:
        return self.evaluate(settings, approvals).next_stage

    def is_fully_approved(
        self,
        settings: ProjectApprovalSettings,
        approvals: Iterable[TimeSheetApproval],
    ) -> bool:
        return self.evaluate(settings, approvals).is_fully_approved
