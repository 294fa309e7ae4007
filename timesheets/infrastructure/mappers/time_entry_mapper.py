"""
Time entry mapper for converting between domain entities and database models.
"""

from timesheets.domain.models.time_entry import TimeEntry, EntryStatus
from timesheets.infrastructure.db.models import TimeEntryModel


class TimeEntryMapper:
    """Maps between TimeEntry domain entity and TimeEntryModel database model."""

    def domain_to_model(self, time_entry: TimeEntry) -> TimeEntryModel:
        """Convert TimeEntry domain entity to TimeEntryModel."""
        model = TimeEntryModel(id=time_entry.id)
        self.apply_to_model(time_entry, model)
        return model

    def apply_to_model(self, time_entry: TimeEntry, model: TimeEntryModel) -> None:
        """Copy every mutable field of the entity onto an existing row."""
        model.project_id = time_entry.project_id
        model.author_id = time_entry.author_id
        model.title = time_entry.title
        model.description = time_entry.description
        model.hours = time_entry.hours
        model.entry_date = time_entry.entry_date
        model.status = time_entry.status.value
        model.status_changed_at = time_entry.status_changed_at
        model.status_changed_by = time_entry.status_changed_by
        model.approved_date = time_entry.approved_date
        model.created_at = time_entry.created_at
        model.updated_at = time_entry.updated_at

    def model_to_domain(self, model: TimeEntryModel) -> TimeEntry:
        """Convert TimeEntryModel to TimeEntry domain entity."""
        return TimeEntry(
            id=model.id,
            project_id=model.project_id,
            author_id=model.author_id,
            title=model.title,
            description=model.description or "",
            hours=model.hours,
            entry_date=model.entry_date,
            status=EntryStatus(model.status) if model.status else EntryStatus.PENDING,
            status_changed_at=model.status_changed_at,
            status_changed_by=model.status_changed_by,
            approved_date=model.approved_date,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
