"""
Auto-approval sweep.

Approves entries and sheets that have sat idle past their project's
auto-approve window. Each record is handled in its own unit of work and
goes through the same workflow transition a human reviewer would use,
attributed to the system actor. Eligibility is re-checked inside that unit
of work, so a second pass over the same data changes nothing.
"""

import logging
from typing import List, Optional

from timesheets.application.use_cases.base_use_case import BaseUseCase, WorkflowContext
from timesheets.application.dto.auto_approval_dto import RunSweepRequestDTO, SweepFailureDTO, SweepReportDTO
from timesheets.domain.models.base import DomainException
from timesheets.domain.models.approval_settings import ProjectApprovalSettings
from timesheets.domain.models.time_entry import EntryStatus
from timesheets.domain.models.time_sheet import TimeSheetStatus
from timesheets.domain.services.auto_approval import AutoApprovalPolicy
from timesheets.domain.services.entry_workflow import StatusOverride


logger = logging.getLogger(__name__)

# Failures confined to one stored row; store errors still propagate
ROW_ERRORS = (DomainException, ValueError)


class RunAutoApprovalSweepUseCase(BaseUseCase[RunSweepRequestDTO, SweepReportDTO]):
    """
    One pass of the auto-approval sweep.

    ``run`` lets store failures propagate to the caller; ``execute`` wraps
    them in a UseCaseResult like every other use case.
    """

    def __init__(self, context: WorkflowContext, policy: Optional[AutoApprovalPolicy] = None):
        super().__init__(context)
        self.policy = policy or AutoApprovalPolicy()

    async def _execute_business_logic(self, request: RunSweepRequestDTO) -> SweepReportDTO:
        return await self.run(request.project_id)

    async def run(self, project_id: Optional[str] = None) -> SweepReportDTO:
        report = SweepReportDTO()

        for settings in self._projects(project_id, report):
            await self._sweep_entries(settings, report)
            await self._sweep_sheets(settings, report)

        logger.info(
            "Auto-approval sweep finished: %d entries approved, %d sheets approved, "
            "%d stages recorded, %d failures",
            report.entries_approved,
            report.sheets_approved,
            report.stages_recorded,
            len(report.failures),
        )
        return report

    def _projects(self, project_id: Optional[str], report: SweepReportDTO) -> List[ProjectApprovalSettings]:
        if project_id is None:
            with self.context.uow_factory() as uow:
                project_ids = uow.settings.list_auto_approval_project_ids()
        else:
            project_ids = [project_id]

        projects = []
        for current_id in project_ids:
            try:
                with self.context.uow_factory() as uow:
                    settings = uow.settings.get_for_project(current_id)
            except ROW_ERRORS as exc:
                self._record_failure(report, "approval_settings", current_id, exc)
                continue
            if settings is not None and settings.auto_approval_enabled:
                projects.append(settings)
        return projects

    async def _sweep_entries(self, settings: ProjectApprovalSettings, report: SweepReportDTO) -> None:
        now = self.context.clock.now()
        with self.context.uow_factory() as uow:
            entry_ids = uow.time_entries.list_unresolved_ids(settings.project_id)

        for entry_id in entry_ids:
            try:
                with self.context.uow_factory() as uow:
                    entry = uow.time_entries.get_by_id(entry_id)
                    if entry is None or not self.policy.eligible_entries(settings, [entry], now):
                        continue
                    entry = self.context.entry_workflow(uow).set_entry_status(
                        entry_id,
                        EntryStatus.APPROVED,
                        self.context.system_actor_id,
                        override=StatusOverride.AUTO_APPROVAL,
                    )
                    uow.commit()
            except ROW_ERRORS as exc:
                self._record_failure(report, "time_entry", entry_id, exc)
                continue

            report.entries_approved += 1
            await self.context.event_dispatcher.dispatch_all(entry.pull_events())

    async def _sweep_sheets(self, settings: ProjectApprovalSettings, report: SweepReportDTO) -> None:
        now = self.context.clock.now()
        with self.context.uow_factory() as uow:
            sheet_ids = uow.time_sheets.list_ids_by_status(settings.project_id, TimeSheetStatus.SUBMITTED)

        for sheet_id in sheet_ids:
            try:
                with self.context.uow_factory() as uow:
                    workflow = self.context.sheet_workflow(uow)
                    sheet = uow.time_sheets.get_by_id(sheet_id)
                    if sheet is None:
                        continue
                    current = workflow.get_settings(sheet.project_id)
                    action = self.policy.sheet_action(current, sheet, uow.approvals.list_for_sheet(sheet_id), now)
                    if action is None:
                        continue

                    if action.completes_chain:
                        sheet = workflow.complete_stages(sheet_id, self.context.system_actor_id)
                    elif action.is_stage_approval:
                        outcome = workflow.record_stage_approval(
                            sheet_id,
                            action.stage,
                            self.context.system_actor_id,
                            notes="Auto-approved after inactivity",
                        )
                        sheet = outcome.sheet
                        if outcome.created:
                            report.stages_recorded += 1
                    else:
                        sheet = workflow.approve(sheet_id, self.context.system_actor_id)
                    uow.commit()
            except ROW_ERRORS as exc:
                self._record_failure(report, "time_sheet", sheet_id, exc)
                continue

            if sheet.status == TimeSheetStatus.APPROVED:
                report.sheets_approved += 1
            await self.context.event_dispatcher.dispatch_all(sheet.pull_events())

    def _record_failure(self, report: SweepReportDTO, record_type: str, record_id: str, exc: Exception) -> None:
        if isinstance(exc, DomainException):
            code, message = exc.code, exc.message
        else:
            code, message = "INVALID_RECORD", str(exc)

        logger.warning(
            "Auto-approval skipped %s %s: %s (%s)",
            record_type, record_id, message, code,
            exc_info=True,
        )
        report.failures.append(SweepFailureDTO(
            record_type=record_type,
            record_id=record_id,
            error_code=code,
            message=message,
        ))
