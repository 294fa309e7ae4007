"""
Approval audit trail repositories using SQLAlchemy.
"""

import logging
from typing import List, Iterable
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from timesheets.domain.models.base import new_id
from timesheets.domain.models.approval import TimeSheetApproval, EntryStatusChange, EntryMessage
from timesheets.domain.repositories.approval_repository import (
    TimeSheetApprovalRepository as TimeSheetApprovalRepositoryInterface,
    EntryStatusChangeRepository as EntryStatusChangeRepositoryInterface,
    EntryMessageRepository as EntryMessageRepositoryInterface,
)
from timesheets.infrastructure.db.models import (
    TimeSheetApprovalModel, EntryStatusChangeModel, EntryMessageModel,
)
from timesheets.infrastructure.mappers.approval_mapper import (
    TimeSheetApprovalMapper, EntryStatusChangeMapper, EntryMessageMapper,
)


logger = logging.getLogger(__name__)


class SQLAlchemyTimeSheetApprovalRepository(TimeSheetApprovalRepositoryInterface):
    """Insert-only store of stage approvals, unique per sheet and stage."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = TimeSheetApprovalMapper()

    def list_for_sheet(self, sheet_id: str) -> List[TimeSheetApproval]:
        models = self.session.query(TimeSheetApprovalModel).filter_by(
            time_sheet_id=sheet_id
        ).order_by(TimeSheetApprovalModel.approved_at, TimeSheetApprovalModel.id).all()
        return [self.mapper.model_to_domain(model) for model in models]

    def append(self, approval: TimeSheetApproval) -> TimeSheetApproval:
        if approval.id is None:
            approval.id = new_id()

        try:
            with self.session.begin_nested():
                self.session.add(self.mapper.domain_to_model(approval))
        except IntegrityError:
            existing = self.session.query(TimeSheetApprovalModel).filter_by(
                time_sheet_id=approval.time_sheet_id,
                stage=approval.stage.value,
            ).first()
            if existing is None:
                raise
            logger.info(
                f"Stage {approval.stage.value} of time sheet {approval.time_sheet_id} "
                f"was already approved; keeping the stored approval"
            )
            return self.mapper.model_to_domain(existing)

        return approval

    def delete_for_sheet(self, sheet_id: str) -> int:
        removed = self.session.query(TimeSheetApprovalModel).filter_by(
            time_sheet_id=sheet_id
        ).delete(synchronize_session=False)
        self.session.flush()
        return removed


class SQLAlchemyEntryStatusChangeRepository(EntryStatusChangeRepositoryInterface):
    """Store of entry status history."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = EntryStatusChangeMapper()

    def append(self, change: EntryStatusChange) -> EntryStatusChange:
        if change.id is None:
            change.id = new_id()
        self.session.add(self.mapper.domain_to_model(change))
        self.session.flush()
        return change

    def list_for_entry(self, entry_id: str) -> List[EntryStatusChange]:
        return self.list_for_entries([entry_id])

    def list_for_entries(self, entry_ids: Iterable[str]) -> List[EntryStatusChange]:
        entry_ids = list(entry_ids)
        if not entry_ids:
            return []
        models = self.session.query(EntryStatusChangeModel).filter(
            EntryStatusChangeModel.time_entry_id.in_(entry_ids)
        ).order_by(EntryStatusChangeModel.changed_at, EntryStatusChangeModel.id).all()
        return [self.mapper.model_to_domain(model) for model in models]


class SQLAlchemyEntryMessageRepository(EntryMessageRepositoryInterface):
    """Store of entry comment threads."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = EntryMessageMapper()

    def add(self, message: EntryMessage) -> EntryMessage:
        if message.id is None:
            message.id = new_id()
        self.session.add(self.mapper.domain_to_model(message))
        self.session.flush()
        return message

    def list_for_entry(self, entry_id: str) -> List[EntryMessage]:
        models = self.session.query(EntryMessageModel).filter_by(
            time_entry_id=entry_id
        ).order_by(EntryMessageModel.created_at, EntryMessageModel.id).all()
        return [self.mapper.model_to_domain(model) for model in models]
