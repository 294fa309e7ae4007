"""Sheet workflow service.

Lifecycle of a time sheet: draft -> submitted -> approved | rejected, with an
explicit revert back to draft. Multi-stage projects reach ``approved`` by
recording one approval per configured stage; the other modes approve in a
single step.

Forward transitions are written with a compare-and-set on the status the
transition started from, so two reviewers racing on the same sheet cannot
both win. Revert to draft is a plain write.
"""

import logging
from dataclasses import dataclass, field
from typing import Optional, List, Dict, Iterable

from timesheets.domain.models.base import (
    new_id,
    BusinessRuleViolation,
    EntityNotFoundError,
    EntriesNotApprovedError,
    EmptyTimeSheetError,
    InvalidStageForModeError,
    SheetNotDraftError,
    SheetNotSubmittedError,
    UnauthorizedApproverError,
)
from timesheets.domain.models.approval import TimeSheetApproval
from timesheets.domain.models.approval_settings import (
    ApprovalMode,
    ApprovalStage,
    ProjectApprovalSettings,
)
from timesheets.domain.models.time_entry import EntryStatus, TimeEntry
from timesheets.domain.models.time_sheet import TimeSheet, TimeSheetStatus
from timesheets.domain.repositories.unit_of_work import UnitOfWork
from timesheets.domain.services.capabilities import (
    CapabilityResolver,
    ProjectRole,
    STAGE_ROLES,
    SHEET_APPROVER_ROLES,
    SHEET_REVERT_ROLES,
)
from timesheets.domain.services.clock import Clock, SystemClock
from timesheets.domain.services.stage_sequencer import StageSequencer, StageProgress
from timesheets.domain.events.approval_events import (
    TimeSheetSubmitted,
    StageApprovalRecorded,
    TimeSheetApproved,
    TimeSheetRejected,
    TimeSheetRevertedToDraft,
)


logger = logging.getLogger(__name__)


@dataclass
class StageApprovalOutcome:
    """Result of recording a stage approval."""
    sheet: TimeSheet
    approval: TimeSheetApproval
    progress: StageProgress
    created: bool = True


@dataclass
class SheetApprovalStatus:
    """Stage progress of a sheet together with its approval records."""
    sheet: TimeSheet
    mode: ApprovalMode
    progress: StageProgress
    approvals: List[TimeSheetApproval] = field(default_factory=list)


@dataclass
class SheetReadiness:
    """Whether a submitted sheet can be approved, and why not."""
    sheet_id: str
    total_entries: int
    entries_by_status: Dict[str, int]
    can_approve: bool
    reason: Optional[str] = None


class SheetWorkflowService:
    """
    Domain service for time sheet transitions.
    Works inside the caller's unit of work and never commits.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        capabilities: CapabilityResolver,
        clock: Optional[Clock] = None,
        sequencer: Optional[StageSequencer] = None,
        system_actor_id: str = "system",
    ):
        self.uow = uow
        self.capabilities = capabilities
        self.clock = clock or SystemClock()
        self.sequencer = sequencer or StageSequencer()
        self.system_actor_id = system_actor_id

    # Lookups

    def get_sheet(self, sheet_id: str) -> TimeSheet:
        sheet = self.uow.time_sheets.get_by_id(sheet_id)
        if not sheet:
            raise EntityNotFoundError("TimeSheet", sheet_id)
        return sheet

    def get_settings(self, project_id: str) -> ProjectApprovalSettings:
        settings = self.uow.settings.get_for_project(project_id)
        return settings or ProjectApprovalSettings.default_for(project_id)

    def get_entries(self, sheet_id: str) -> List[TimeEntry]:
        entry_ids = self.uow.time_sheets.get_entry_ids(sheet_id)
        return self.uow.time_entries.list_by_ids(entry_ids)

    # Transitions

    def submit(self, sheet_id: str, actor_id: str) -> TimeSheet:
        """
        Submit a draft sheet for review.
        """
        sheet = self.get_sheet(sheet_id)
        if not sheet.is_draft:
            raise SheetNotDraftError(sheet_id, sheet.status)

        self._ensure_author_or_owner(sheet, actor_id)

        entries = self.get_entries(sheet_id)
        if not entries:
            raise EmptyTimeSheetError(sheet_id)

        settings = self.get_settings(sheet.project_id)
        if settings.submission_requires_approved_entries:
            unapproved = [entry.id for entry in entries if not entry.is_approved]
            if unapproved:
                raise EntriesNotApprovedError(
                    sheet_id,
                    unapproved,
                    f"All entries must be approved before submitting time sheet {sheet_id}",
                )

        sheet.mark_submitted(actor_id, at=self.clock.now())
        self._write_forward(sheet, TimeSheetStatus.DRAFT)

        sheet.add_event(TimeSheetSubmitted(
            time_sheet_id=sheet.id,
            project_id=sheet.project_id,
            submitted_by=actor_id,
            entry_count=len(entries),
        ))
        logger.info("Time sheet %s submitted by %s with %d entries", sheet.id, actor_id, len(entries))
        return sheet

    def record_stage_approval(
        self,
        sheet_id: str,
        stage: ApprovalStage,
        actor_id: str,
        notes: Optional[str] = None,
    ) -> StageApprovalOutcome:
        """
        Record one stage of a multi-stage approval chain.

        Stages may be recorded in any order. Recording a stage that is
        already complete returns the stored approval and changes nothing.
        When the last missing stage is recorded the sheet becomes approved.
        """
        sheet = self.get_sheet(sheet_id)
        settings = self.get_settings(sheet.project_id)

        if not settings.is_multi_stage:
            raise InvalidStageForModeError(
                f"Project {sheet.project_id} uses {settings.approval_mode.value} approval, not multi-stage"
            )

        try:
            stage = ApprovalStage(stage)
        except ValueError:
            raise InvalidStageForModeError(f"Unknown approval stage: {stage}")

        if stage not in settings.stages_in_effect:
            raise InvalidStageForModeError(
                f"Stage {stage.value} is not configured for project {sheet.project_id}"
            )

        if not sheet.is_submitted:
            raise SheetNotSubmittedError(sheet_id, sheet.status)

        if actor_id != self.system_actor_id:
            role = STAGE_ROLES[stage]
            if not self.capabilities.has_role(actor_id, sheet.project_id, role):
                raise UnauthorizedApproverError(
                    actor_id,
                    f"Stage {stage.value} must be approved by a project {role.value}",
                )

        existing = next(
            (approval for approval in self.uow.approvals.list_for_sheet(sheet_id) if approval.stage == stage),
            None,
        )
        if existing:
            progress = self.sequencer.evaluate(settings, self.uow.approvals.list_for_sheet(sheet_id))
            if progress.is_fully_approved:
                sheet = self._finish_chain(sheet, actor_id)
            return StageApprovalOutcome(sheet=sheet, approval=existing, progress=progress, created=False)

        candidate = TimeSheetApproval(
            time_sheet_id=sheet_id,
            stage=stage,
            approved_by=actor_id,
            approved_at=self.clock.now(),
            notes=notes,
            id=new_id(),
        )
        stored = self.uow.approvals.append(candidate)
        created = stored.id == candidate.id

        progress = self.sequencer.evaluate(settings, self.uow.approvals.list_for_sheet(sheet_id))

        if created:
            sheet.add_event(StageApprovalRecorded(
                time_sheet_id=sheet_id,
                stage=stage.value,
                approved_by=actor_id,
                next_stage=progress.next_stage.value if progress.next_stage else None,
            ))
            logger.info("Time sheet %s: stage %s approved by %s", sheet_id, stage.value, actor_id)

        if progress.is_fully_approved:
            sheet = self._finish_chain(sheet, actor_id)

        return StageApprovalOutcome(sheet=sheet, approval=stored, progress=progress, created=created)

    def complete_stages(self, sheet_id: str, actor_id: str) -> TimeSheet:
        """
        Approve a submitted multi-stage sheet whose stage chain is already
        complete, e.g. after the project dropped the stage it was waiting on.
        """
        sheet = self.get_sheet(sheet_id)
        settings = self.get_settings(sheet.project_id)

        if not settings.is_multi_stage:
            raise InvalidStageForModeError(
                f"Project {sheet.project_id} uses {settings.approval_mode.value} approval, not multi-stage"
            )

        if not sheet.is_submitted:
            raise SheetNotSubmittedError(sheet_id, sheet.status)

        if actor_id != self.system_actor_id and not self.capabilities.has_role(
            actor_id, sheet.project_id, ProjectRole.OWNER
        ):
            raise UnauthorizedApproverError(
                actor_id,
                f"Only a project owner may complete the stage chain of time sheet {sheet_id}",
            )

        progress = self.sequencer.evaluate(settings, self.uow.approvals.list_for_sheet(sheet_id))
        if not progress.is_fully_approved:
            raise InvalidStageForModeError(
                f"Time sheet {sheet_id} still needs stage {progress.next_stage.value}"
            )

        if not self._approve_chain(sheet, actor_id):
            current = self.uow.time_sheets.get_by_id(sheet_id)
            raise SheetNotSubmittedError(sheet_id, current.status if current else None)
        return sheet

    def approve(self, sheet_id: str, actor_id: str) -> TimeSheet:
        """
        Approve a submitted sheet in one step (single-stage modes).
        """
        sheet = self.get_sheet(sheet_id)
        settings = self.get_settings(sheet.project_id)

        if settings.is_multi_stage:
            raise InvalidStageForModeError(
                f"Project {sheet.project_id} uses multi-stage approval; record stage approvals instead"
            )

        if not sheet.is_submitted:
            raise SheetNotSubmittedError(sheet_id, sheet.status)

        self._ensure_can_approve(sheet, settings, actor_id)

        entries = self.get_entries(sheet_id)
        if not entries:
            raise EmptyTimeSheetError(sheet_id)

        questioned = [entry.id for entry in entries if entry.status == EntryStatus.QUESTIONED]
        if questioned:
            raise EntriesNotApprovedError(
                sheet_id,
                questioned,
                f"Time sheet {sheet_id} has {len(questioned)} questioned entries",
            )

        sheet.mark_approved(actor_id, at=self.clock.now())
        self._write_forward(sheet, TimeSheetStatus.SUBMITTED)

        sheet.add_event(TimeSheetApproved(
            time_sheet_id=sheet.id,
            project_id=sheet.project_id,
            approved_by=actor_id,
        ))
        logger.info("Time sheet %s approved by %s", sheet.id, actor_id)
        return sheet

    def reject(self, sheet_id: str, actor_id: str, reason: Optional[str] = None) -> TimeSheet:
        sheet = self.get_sheet(sheet_id)
        if not sheet.is_submitted:
            raise SheetNotSubmittedError(sheet_id, sheet.status)

        settings = self.get_settings(sheet.project_id)
        if actor_id != self.system_actor_id:
            if settings.is_multi_stage:
                roles = {STAGE_ROLES[stage] for stage in settings.stages_in_effect}
                roles.add(ProjectRole.OWNER)
            else:
                roles = set(SHEET_APPROVER_ROLES)
            if not self.capabilities.has_any_role(actor_id, sheet.project_id, roles):
                raise UnauthorizedApproverError(actor_id, f"Actor {actor_id} may not reject time sheet {sheet_id}")

        sheet.mark_rejected(actor_id, reason=reason, at=self.clock.now())
        self._write_forward(sheet, TimeSheetStatus.SUBMITTED)

        sheet.add_event(TimeSheetRejected(
            time_sheet_id=sheet.id,
            project_id=sheet.project_id,
            rejected_by=actor_id,
            reason=reason,
        ))
        logger.info("Time sheet %s rejected by %s", sheet.id, actor_id)
        return sheet

    def revert_to_draft(self, sheet_id: str, actor_id: str) -> TimeSheet:
        """
        Send a sheet back to draft and discard its stage approvals.

        Owners and reviewers may revert any non-draft sheet. The author may
        withdraw a submitted sheet as long as no stage has signed off yet.
        """
        sheet = self.get_sheet(sheet_id)
        if sheet.is_draft:
            raise SheetNotSubmittedError(sheet_id, sheet.status)

        approvals = self.uow.approvals.list_for_sheet(sheet_id)
        if not self.capabilities.has_any_role(actor_id, sheet.project_id, SHEET_REVERT_ROLES):
            author_withdrawal = actor_id == sheet.author_id and sheet.is_submitted and not approvals
            if not author_withdrawal:
                raise UnauthorizedApproverError(
                    actor_id,
                    f"Actor {actor_id} may not revert time sheet {sheet_id} to draft",
                )

        previous = sheet.status
        sheet.mark_draft(actor_id, at=self.clock.now())
        self.uow.time_sheets.save(sheet)
        cleared = self.uow.approvals.delete_for_sheet(sheet_id)

        sheet.add_event(TimeSheetRevertedToDraft(
            time_sheet_id=sheet.id,
            project_id=sheet.project_id,
            reverted_by=actor_id,
            previous_status=previous.value,
            cleared_approvals=cleared,
        ))
        logger.info(
            "Time sheet %s reverted from %s to draft by %s (%d approvals cleared)",
            sheet.id, previous.value, actor_id, cleared,
        )
        return sheet

    # Entry membership

    def add_entries(self, sheet_id: str, entry_ids: Iterable[str], actor_id: str) -> List[str]:
        """
        Link entries to a draft sheet. Returns the sheet's entry IDs.
        """
        sheet = self.get_sheet(sheet_id)
        if not sheet.is_draft:
            raise SheetNotDraftError(sheet_id, sheet.status)
        self._ensure_author_or_owner(sheet, actor_id)

        entry_ids = list(dict.fromkeys(entry_ids))
        entries = {entry.id: entry for entry in self.uow.time_entries.list_by_ids(entry_ids)}
        for entry_id in entry_ids:
            entry = entries.get(entry_id)
            if entry is None:
                raise EntityNotFoundError("TimeEntry", entry_id)
            if entry.project_id != sheet.project_id:
                raise BusinessRuleViolation(
                    f"Time entry {entry_id} belongs to another project",
                    "ENTRY_PROJECT_MISMATCH",
                )
            others = [s.id for s in self.uow.time_sheets.find_sheets_for_entry(entry_id) if s.id != sheet_id]
            if others:
                raise BusinessRuleViolation(
                    f"Time entry {entry_id} is already on time sheet {others[0]}",
                    "ENTRY_ALREADY_ON_SHEET",
                )

        self.uow.time_sheets.add_entry_links(sheet_id, entry_ids)
        return self.uow.time_sheets.get_entry_ids(sheet_id)

    def remove_entry(self, sheet_id: str, entry_id: str, actor_id: str) -> None:
        sheet = self.get_sheet(sheet_id)
        if not sheet.is_draft:
            raise SheetNotDraftError(sheet_id, sheet.status)
        self._ensure_author_or_owner(sheet, actor_id)

        if entry_id not in self.uow.time_sheets.get_entry_ids(sheet_id):
            raise EntityNotFoundError("TimeSheetEntry", entry_id)

        entry = self.uow.time_entries.get_by_id(entry_id)
        if entry and entry.is_approved:
            raise BusinessRuleViolation(
                f"Approved time entry {entry_id} cannot be removed from a sheet",
                "ENTRY_APPROVED",
            )

        self.uow.time_sheets.remove_entry_link(sheet_id, entry_id)

    # Queries

    def get_approval_status(self, sheet_id: str) -> SheetApprovalStatus:
        sheet = self.get_sheet(sheet_id)
        settings = self.get_settings(sheet.project_id)
        approvals = self.uow.approvals.list_for_sheet(sheet_id)
        return SheetApprovalStatus(
            sheet=sheet,
            mode=settings.approval_mode,
            progress=self.sequencer.evaluate(settings, approvals),
            approvals=approvals,
        )

    def get_readiness(self, sheet_id: str) -> SheetReadiness:
        sheet = self.get_sheet(sheet_id)
        entries = self.get_entries(sheet_id)

        counts = {status.value: 0 for status in EntryStatus}
        for entry in entries:
            counts[entry.status.value] += 1

        reason = None
        if not entries:
            reason = "Time sheet has no entries"
        elif counts[EntryStatus.QUESTIONED.value]:
            reason = f"{counts[EntryStatus.QUESTIONED.value]} entries are questioned"
        elif not sheet.is_submitted:
            reason = f"Time sheet is {sheet.status.value}"

        return SheetReadiness(
            sheet_id=sheet_id,
            total_entries=len(entries),
            entries_by_status=counts,
            can_approve=reason is None,
            reason=reason,
        )

    # Helpers

    def _write_forward(self, sheet: TimeSheet, expected: TimeSheetStatus) -> None:
        if not self.uow.time_sheets.compare_and_set_status(sheet, expected):
            current = self.uow.time_sheets.get_by_id(sheet.id)
            status = current.status if current else None
            if expected == TimeSheetStatus.DRAFT:
                raise SheetNotDraftError(sheet.id, status)
            raise SheetNotSubmittedError(sheet.id, status)

    def _approve_chain(self, sheet: TimeSheet, actor_id: str) -> bool:
        sheet.mark_approved(actor_id, at=self.clock.now())
        if not self.uow.time_sheets.compare_and_set_status(sheet, TimeSheetStatus.SUBMITTED):
            return False
        sheet.add_event(TimeSheetApproved(
            time_sheet_id=sheet.id,
            project_id=sheet.project_id,
            approved_by=actor_id,
            via_stages=True,
        ))
        logger.info("Time sheet %s approved after all stages", sheet.id)
        return True

    def _finish_chain(self, sheet: TimeSheet, actor_id: str) -> TimeSheet:
        if self._approve_chain(sheet, actor_id):
            return sheet

        # Another writer moved the sheet first; keep the stage events
        current = self.get_sheet(sheet.id)
        for event in sheet.pull_events():
            current.add_event(event)
        logger.info("Time sheet %s already left submitted; final approval skipped", sheet.id)
        return current

    def _ensure_author_or_owner(self, sheet: TimeSheet, actor_id: str) -> None:
        if actor_id == sheet.author_id:
            return
        if self.capabilities.has_role(actor_id, sheet.project_id, ProjectRole.OWNER):
            return
        raise UnauthorizedApproverError(
            actor_id,
            f"Only the author or a project owner may change time sheet {sheet.id}",
        )

    def _ensure_can_approve(self, sheet: TimeSheet, settings: ProjectApprovalSettings, actor_id: str) -> None:
        if actor_id == self.system_actor_id:
            return

        if settings.approval_mode == ApprovalMode.SELF_APPROVE and actor_id == sheet.author_id:
            if settings.allow_self_approve_no_client and not self.capabilities.has_assigned_client(sheet.project_id):
                return

        if not self.capabilities.has_any_role(actor_id, sheet.project_id, SHEET_APPROVER_ROLES):
            raise UnauthorizedApproverError(
                actor_id,
                f"Actor {actor_id} may not approve time sheet {sheet.id}",
            )
