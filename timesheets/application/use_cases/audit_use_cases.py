"""
Audit trail use cases.
"""

from timesheets.application.use_cases.base_use_case import QueryUseCase
from timesheets.application.dto.time_entry_dto import EntryStatusChangeResponseDTO
from timesheets.application.dto.time_sheet_dto import (
    TimeSheetIdRequestDTO, StageApprovalResponseDTO, SheetAuditTrailResponseDTO,
)


class GetSheetAuditTrailUseCase(QueryUseCase[TimeSheetIdRequestDTO, SheetAuditTrailResponseDTO]):
    """
    Stage approvals of the sheet's current attempt plus the status history
    of every entry on the sheet.
    """

    async def _execute_query_logic(self, request: TimeSheetIdRequestDTO) -> SheetAuditTrailResponseDTO:
        sheet = self.context.sheet_workflow(self.uow).get_sheet(request.sheet_id)
        approvals = self.uow.approvals.list_for_sheet(sheet.id)
        changes = self.uow.status_changes.list_for_entries(self.uow.time_sheets.get_entry_ids(sheet.id))

        return SheetAuditTrailResponseDTO(
            time_sheet_id=sheet.id,
            stage_approvals=[StageApprovalResponseDTO.from_domain(a) for a in approvals],
            entry_status_changes=[EntryStatusChangeResponseDTO.from_domain(c) for c in changes],
        )
