"""
Time Sheet use cases for the application layer.
Sheet lifecycle: creation, entry membership, submission and review.
"""

from timesheets.application.use_cases.base_use_case import (
    AuthorizedUseCase, CommandUseCase, QueryUseCase,
)
from timesheets.application.dto.time_sheet_dto import (
    CreateTimeSheetRequestDTO, TimeSheetIdRequestDTO, AddSheetEntriesRequestDTO,
    RemoveSheetEntryRequestDTO, RecordStageApprovalRequestDTO, RejectTimeSheetRequestDTO,
    TimeSheetResponseDTO, StageApprovalResponseDTO, StageProgressDTO, StageApprovalResultDTO,
    ApprovalStatusResponseDTO, SheetReadinessResponseDTO,
)
from timesheets.domain.models.base import UnauthorizedApproverError
from timesheets.domain.models.time_sheet import TimeSheet
from timesheets.domain.services.capabilities import ProjectRole


class CreateTimeSheetUseCase(AuthorizedUseCase, CommandUseCase[CreateTimeSheetRequestDTO, TimeSheetResponseDTO]):
    """Use case for creating a draft time sheet."""

    async def _execute_command_logic(self, request: CreateTimeSheetRequestDTO) -> TimeSheetResponseDTO:
        sheet = TimeSheet(
            project_id=request.project_id,
            author_id=self.current_user_id,
            title=request.title,
            description=request.description,
            created_at=self.context.clock.now(),
        )
        sheet = self.uow.time_sheets.save(sheet)

        entry_ids = []
        if request.entry_ids:
            entry_ids = self.context.sheet_workflow(self.uow).add_entries(
                sheet.id, request.entry_ids, self.current_user_id
            )
        return TimeSheetResponseDTO.from_domain(sheet, entry_ids)


class GetTimeSheetUseCase(QueryUseCase[TimeSheetIdRequestDTO, TimeSheetResponseDTO]):
    """Use case for reading a time sheet with its entry IDs."""

    async def _execute_query_logic(self, request: TimeSheetIdRequestDTO) -> TimeSheetResponseDTO:
        sheet = self.context.sheet_workflow(self.uow).get_sheet(request.sheet_id)
        return TimeSheetResponseDTO.from_domain(sheet, self.uow.time_sheets.get_entry_ids(sheet.id))


class DeleteTimeSheetUseCase(AuthorizedUseCase, CommandUseCase[TimeSheetIdRequestDTO, bool]):
    """
    Use case for deleting a time sheet. Drafts may be deleted by their
    author; any sheet may be deleted by a project owner.
    """

    async def _execute_command_logic(self, request: TimeSheetIdRequestDTO) -> bool:
        sheet = self.context.sheet_workflow(self.uow).get_sheet(request.sheet_id)
        is_owner = self.context.capabilities.has_role(self.current_user_id, sheet.project_id, ProjectRole.OWNER)
        is_author_draft = sheet.author_id == self.current_user_id and sheet.is_draft
        if not (is_owner or is_author_draft):
            raise UnauthorizedApproverError(self.current_user_id, f"Actor may not delete time sheet {sheet.id}")

        self.uow.time_sheets.delete(sheet.id)
        return True


class AddSheetEntriesUseCase(AuthorizedUseCase, CommandUseCase[AddSheetEntriesRequestDTO, TimeSheetResponseDTO]):
    """Use case for putting entries on a draft sheet."""

    async def _execute_command_logic(self, request: AddSheetEntriesRequestDTO) -> TimeSheetResponseDTO:
        workflow = self.context.sheet_workflow(self.uow)
        entry_ids = workflow.add_entries(request.sheet_id, request.entry_ids, self.current_user_id)
        return TimeSheetResponseDTO.from_domain(workflow.get_sheet(request.sheet_id), entry_ids)


class RemoveSheetEntryUseCase(AuthorizedUseCase, CommandUseCase[RemoveSheetEntryRequestDTO, TimeSheetResponseDTO]):
    """Use case for taking an entry off a draft sheet."""

    async def _execute_command_logic(self, request: RemoveSheetEntryRequestDTO) -> TimeSheetResponseDTO:
        workflow = self.context.sheet_workflow(self.uow)
        workflow.remove_entry(request.sheet_id, request.entry_id, self.current_user_id)
        sheet = workflow.get_sheet(request.sheet_id)
        return TimeSheetResponseDTO.from_domain(sheet, self.uow.time_sheets.get_entry_ids(sheet.id))


class _SheetTransitionUseCase(AuthorizedUseCase, CommandUseCase):
    """Shared response building for sheet transitions."""

    def _sheet_response(self, sheet: TimeSheet) -> TimeSheetResponseDTO:
        self._collect_events(sheet)
        return TimeSheetResponseDTO.from_domain(sheet, self.uow.time_sheets.get_entry_ids(sheet.id))


class SubmitTimeSheetUseCase(_SheetTransitionUseCase):
    """Use case for submitting a draft sheet for review."""

    async def _execute_command_logic(self, request: TimeSheetIdRequestDTO) -> TimeSheetResponseDTO:
        sheet = self.context.sheet_workflow(self.uow).submit(request.sheet_id, self.current_user_id)
        return self._sheet_response(sheet)


class ApproveTimeSheetUseCase(_SheetTransitionUseCase):
    """Use case for single-step approval of a submitted sheet."""

    async def _execute_command_logic(self, request: TimeSheetIdRequestDTO) -> TimeSheetResponseDTO:
        sheet = self.context.sheet_workflow(self.uow).approve(request.sheet_id, self.current_user_id)
        return self._sheet_response(sheet)


class RecordStageApprovalUseCase(_SheetTransitionUseCase):
    """Use case for signing off one stage of a multi-stage approval."""

    async def _execute_command_logic(self, request: RecordStageApprovalRequestDTO) -> StageApprovalResultDTO:
        outcome = self.context.sheet_workflow(self.uow).record_stage_approval(
            request.sheet_id,
            request.stage,
            self.current_user_id,
            notes=request.notes,
        )
        return StageApprovalResultDTO(
            sheet=self._sheet_response(outcome.sheet),
            approval=StageApprovalResponseDTO.from_domain(outcome.approval),
            progress=StageProgressDTO(**outcome.progress.to_dict()),
            created=outcome.created,
        )


class RejectTimeSheetUseCase(_SheetTransitionUseCase):
    """Use case for rejecting a submitted sheet."""

    async def _execute_command_logic(self, request: RejectTimeSheetRequestDTO) -> TimeSheetResponseDTO:
        sheet = self.context.sheet_workflow(self.uow).reject(
            request.sheet_id, self.current_user_id, reason=request.reason
        )
        return self._sheet_response(sheet)


class RevertTimeSheetUseCase(_SheetTransitionUseCase):
    """Use case for sending a sheet back to draft."""

    async def _execute_command_logic(self, request: TimeSheetIdRequestDTO) -> TimeSheetResponseDTO:
        sheet = self.context.sheet_workflow(self.uow).revert_to_draft(request.sheet_id, self.current_user_id)
        return self._sheet_response(sheet)


class GetApprovalStatusUseCase(QueryUseCase[TimeSheetIdRequestDTO, ApprovalStatusResponseDTO]):
    """Use case for reading a sheet's stage progress."""

    async def _execute_query_logic(self, request: TimeSheetIdRequestDTO) -> ApprovalStatusResponseDTO:
        status = self.context.sheet_workflow(self.uow).get_approval_status(request.sheet_id)
        return ApprovalStatusResponseDTO.from_domain(status)


class GetSheetReadinessUseCase(QueryUseCase[TimeSheetIdRequestDTO, SheetReadinessResponseDTO]):
    """Use case for checking whether a sheet can be approved."""

    async def _execute_query_logic(self, request: TimeSheetIdRequestDTO) -> SheetReadinessResponseDTO:
        readiness = self.context.sheet_workflow(self.uow).get_readiness(request.sheet_id)
        return SheetReadinessResponseDTO.from_domain(readiness)
