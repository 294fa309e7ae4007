"""
Time entry repository implementation using SQLAlchemy.
"""

from typing import Optional, List, Iterable
from sqlalchemy.orm import Session

from timesheets.domain.models.base import new_id, EntityNotFoundError
from timesheets.domain.models.time_entry import TimeEntry, UNRESOLVED_ENTRY_STATUSES
from timesheets.domain.repositories.time_entry_repository import TimeEntryRepository as TimeEntryRepositoryInterface
from timesheets.infrastructure.db.models import TimeEntryModel
from timesheets.infrastructure.mappers.time_entry_mapper import TimeEntryMapper


class SQLAlchemyTimeEntryRepository(TimeEntryRepositoryInterface):
    """SQLAlchemy implementation of time entry repository."""

    def __init__(self, session: Session):
        self.session = session
        self.mapper = TimeEntryMapper()

    def save(self, time_entry: TimeEntry) -> TimeEntry:
        """Save a time entry entity."""
        if time_entry.is_new:
            time_entry.id = new_id()
            self.session.add(self.mapper.domain_to_model(time_entry))
        else:
            model = self.session.get(TimeEntryModel, time_entry.id)
            if not model:
                raise EntityNotFoundError("TimeEntry", time_entry.id)
            self.mapper.apply_to_model(time_entry, model)

        self.session.flush()
        return time_entry

    def get_by_id(self, entry_id: str) -> Optional[TimeEntry]:
        """Get time entry by ID."""
        model = self.session.get(TimeEntryModel, entry_id)
        if not model:
            return None
        return self.mapper.model_to_domain(model)

    def list_by_ids(self, entry_ids: Iterable[str]) -> List[TimeEntry]:
        entry_ids = list(entry_ids)
        if not entry_ids:
            return []
        models = self.session.query(TimeEntryModel).filter(
            TimeEntryModel.id.in_(entry_ids)
        ).order_by(TimeEntryModel.entry_date, TimeEntryModel.created_at).all()
        return [self.mapper.model_to_domain(model) for model in models]

    def list_unresolved_ids(self, project_id: str) -> List[str]:
        rows = self.session.query(TimeEntryModel.id).filter(
            TimeEntryModel.project_id == project_id,
            TimeEntryModel.status.in_([status.value for status in UNRESOLVED_ENTRY_STATUSES]),
        ).order_by(TimeEntryModel.created_at).all()
        return [row.id for row in rows]

    def delete(self, entry_id: str) -> bool:
        """Delete time entry by ID."""
        model = self.session.get(TimeEntryModel, entry_id)
        if not model:
            return False

        self.session.delete(model)
        self.session.flush()
        return True
