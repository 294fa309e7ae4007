"""
Time sheet mapper for converting between domain entities and database models.
"""

from typing import Any, Dict

from timesheets.domain.models.time_sheet import TimeSheet, TimeSheetStatus
from timesheets.infrastructure.db.models import TimeSheetModel


class TimeSheetMapper:
    """Maps between TimeSheet domain entity and TimeSheetModel database model."""

    def to_row(self, time_sheet: TimeSheet) -> Dict[str, Any]:
        """Column values of the sheet, without the primary key."""
        return {
            "project_id": time_sheet.project_id,
            "author_id": time_sheet.author_id,
            "title": time_sheet.title,
            "description": time_sheet.description,
            "status": time_sheet.status.value,
            "submitted_at": time_sheet.submitted_at,
            "approved_at": time_sheet.approved_at,
            "rejected_at": time_sheet.rejected_at,
            "rejection_reason": time_sheet.rejection_reason,
            "status_changed_by": time_sheet.status_changed_by,
            "created_at": time_sheet.created_at,
            "updated_at": time_sheet.updated_at,
        }

    def domain_to_model(self, time_sheet: TimeSheet) -> TimeSheetModel:
        """Convert TimeSheet domain entity to TimeSheetModel."""
        return TimeSheetModel(id=time_sheet.id, **self.to_row(time_sheet))

    def apply_to_model(self, time_sheet: TimeSheet, model: TimeSheetModel) -> None:
        for attr, value in self.to_row(time_sheet).items():
            setattr(model, attr, value)

    def model_to_domain(self, model: TimeSheetModel) -> TimeSheet:
        """Convert TimeSheetModel to TimeSheet domain entity."""
        return TimeSheet(
            id=model.id,
            project_id=model.project_id,
            author_id=model.author_id,
            title=model.title,
            description=model.description or "",
            status=TimeSheetStatus(model.status) if model.status else TimeSheetStatus.DRAFT,
            submitted_at=model.submitted_at,
            approved_at=model.approved_at,
            rejected_at=model.rejected_at,
            rejection_reason=model.rejection_reason,
            status_changed_by=model.status_changed_by,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
