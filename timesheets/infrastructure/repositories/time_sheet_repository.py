"""
Time sheet repository implementation using SQLAlchemy.
"""

import logging
from typing import Optional, List, Iterable
from sqlalchemy.orm import Session

from timesheets.domain.models.base import new_id, utc_now, EntityNotFoundError
from timesheets.domain.models.time_sheet import TimeSheet, TimeSheetStatus
from timesheets.domain.repositories.time_sheet_repository import TimeSheetRepository as TimeSheetRepositoryInterface
from timesheets.infrastructure.db.models import (
    TimeSheetModel, TimeSheetEntryModel, TimeSheetApprovalModel,
)
from timesheets.infrastructure.mappers.time_sheet_mapper import TimeSheetMapper


logger = logging.getLogger(__name__)


class SQLAlchemyTimeSheetRepository(TimeSheetRepositoryInterface):
    """SQLAlchemy implementation of time sheet repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = TimeSheetMapper()

    def save(self, time_sheet: TimeSheet) -> TimeSheet:
        """Save a time sheet; an existing row is overwritten."""
        if time_sheet.is_new:
            time_sheet.id = new_id()
            self.session.add(self.mapper.domain_to_model(time_sheet))
        else:
            model = self.session.get(TimeSheetModel, time_sheet.id)
            if not model:
                raise EntityNotFoundError("TimeSheet", time_sheet.id)
            self.mapper.apply_to_model(time_sheet, model)

        self.session.flush()
        return time_sheet

    def compare_and_set_status(self, time_sheet: TimeSheet, expected_status: TimeSheetStatus) -> bool:
        """
        UPDATE ... WHERE id = :id AND status = :expected. A concurrent writer
        that changed the status first leaves zero matching rows.
        """
        self.session.flush()
        updated = self.session.query(TimeSheetModel).filter(
            TimeSheetModel.id == time_sheet.id,
            TimeSheetModel.status == TimeSheetStatus(expected_status).value,
        ).update(self.mapper.to_row(time_sheet), synchronize_session="fetch")

        if updated != 1:
            logger.info(
                f"Time sheet {time_sheet.id} was no longer {TimeSheetStatus(expected_status).value}; "
                f"write to {time_sheet.status.value} skipped"
            )
            return False
        return True

    def get_by_id(self, sheet_id: str) -> Optional[TimeSheet]:
        """Get time sheet by ID."""
        model = self.session.query(TimeSheetModel).populate_existing().filter_by(id=sheet_id).first()
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def list_ids_by_status(self, project_id: str, status: TimeSheetStatus) -> List[str]:
        rows = self.session.query(TimeSheetModel.id).filter(
            TimeSheetModel.project_id == project_id,
            TimeSheetModel.status == TimeSheetStatus(status).value,
        ).order_by(TimeSheetModel.created_at).all()
        return [row.id for row in rows]

    def delete(self, sheet_id: str) -> bool:
        """Delete time sheet by ID together with its links and approvals."""
        model = self.session.get(TimeSheetModel, sheet_id)
        if not model:
            return False

        self.session.query(TimeSheetApprovalModel).filter_by(time_sheet_id=sheet_id).delete(synchronize_session=False)
        self.session.query(TimeSheetEntryModel).filter_by(time_sheet_id=sheet_id).delete(synchronize_session=False)
        self.session.delete(model)
        self.session.flush()
        return True

    # Entry links

    def get_entry_ids(self, sheet_id: str) -> List[str]:
        rows = self.session.query(TimeSheetEntryModel.time_entry_id).filter_by(
            time_sheet_id=sheet_id
        ).order_by(TimeSheetEntryModel.id).all()
        return [row.time_entry_id for row in rows]

    def add_entry_links(self, sheet_id: str, entry_ids: Iterable[str]) -> None:
        existing = set(self.get_entry_ids(sheet_id))
        now = utc_now()
        for entry_id in entry_ids:
            if entry_id in existing:
                continue
            self.session.add(TimeSheetEntryModel(
                time_sheet_id=sheet_id,
                time_entry_id=entry_id,
                created_at=now,
            ))
            existing.add(entry_id)
        self.session.flush()

    def remove_entry_link(self, sheet_id: str, entry_id: str) -> bool:
        removed = self.session.query(TimeSheetEntryModel).filter_by(
            time_sheet_id=sheet_id,
            time_entry_id=entry_id,
        ).delete(synchronize_session=False)
        self.session.flush()
        return removed > 0

    def find_sheets_for_entry(self, entry_id: str) -> List[TimeSheet]:
        models = self.session.query(TimeSheetModel).join(
            TimeSheetEntryModel, TimeSheetEntryModel.time_sheet_id == TimeSheetModel.id
        ).filter(TimeSheetEntryModel.time_entry_id == entry_id).all()
        return [self.mapper.model_to_domain(model) for model in models]
