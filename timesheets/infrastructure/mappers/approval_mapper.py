"""
Mappers for the approval audit records.
"""

from timesheets.domain.models.approval import (
    TimeSheetApproval, EntryStatusChange, EntryMessage, StatusChangeSource,
)
from timesheets.domain.models.approval_settings import ApprovalStage
from timesheets.domain.models.time_entry import EntryStatus
from timesheets.infrastructure.db.models import (
    TimeSheetApprovalModel, EntryStatusChangeModel, EntryMessageModel,
)


class TimeSheetApprovalMapper:
    """Maps between TimeSheetApproval and TimeSheetApprovalModel."""

    def domain_to_model(self, approval: TimeSheetApproval) -> TimeSheetApprovalModel:
        return TimeSheetApprovalModel(
            id=approval.id,
            time_sheet_id=approval.time_sheet_id,
            stage=approval.stage.value,
            approved_by=approval.approved_by,
            approved_at=approval.approved_at,
            notes=approval.notes,
        )

    def model_to_domain(self, model: TimeSheetApprovalModel) -> TimeSheetApproval:
        return TimeSheetApproval(
            id=model.id,
            time_sheet_id=model.time_sheet_id,
            stage=ApprovalStage(model.stage),
            approved_by=model.approved_by,
            approved_at=model.approved_at,
            notes=model.notes,
        )


class EntryStatusChangeMapper:
    """Maps between EntryStatusChange and EntryStatusChangeModel."""

    def domain_to_model(self, change: EntryStatusChange) -> EntryStatusChangeModel:
        return EntryStatusChangeModel(
            id=change.id,
            time_entry_id=change.time_entry_id,
            from_status=change.from_status.value,
            to_status=change.to_status.value,
            changed_by=change.changed_by,
            changed_at=change.changed_at,
            source=change.source.value,
        )

    def model_to_domain(self, model: EntryStatusChangeModel) -> EntryStatusChange:
        return EntryStatusChange(
            id=model.id,
            time_entry_id=model.time_entry_id,
            from_status=EntryStatus(model.from_status),
            to_status=EntryStatus(model.to_status),
            changed_by=model.changed_by,
            changed_at=model.changed_at,
            source=StatusChangeSource(model.source) if model.source else StatusChangeSource.MANUAL,
        )


class EntryMessageMapper:
    """Maps between EntryMessage and EntryMessageModel."""

    def domain_to_model(self, message: EntryMessage) -> EntryMessageModel:
        return EntryMessageModel(
            id=message.id,
            time_entry_id=message.time_entry_id,
            author_id=message.author_id,
            content=message.content,
            status_change=message.status_change.value if message.status_change else None,
            parent_message_id=message.parent_message_id,
            created_at=message.created_at,
            updated_at=message.updated_at,
        )

    def model_to_domain(self, model: EntryMessageModel) -> EntryMessage:
        return EntryMessage(
            id=model.id,
            time_entry_id=model.time_entry_id,
            author_id=model.author_id,
            content=model.content,
            status_change=EntryStatus(model.status_change) if model.status_change else None,
            parent_message_id=model.parent_message_id,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
