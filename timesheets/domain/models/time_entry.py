"""
TimeEntry domain model.
Represents one logged unit of work and its review status.
"""

from datetime import datetime, date
from typing import Optional
from enum import Enum

from timesheets.domain.models.base import BaseEntity, ValidationError, utc_now
from timesheets.domain.events.approval_events import EntryStatusChanged


class EntryStatus(str, Enum):
    """Review status of a time entry."""
    PENDING = "pending"
    QUESTIONED = "questioned"
    APPROVED = "approved"


UNRESOLVED_ENTRY_STATUSES = frozenset({EntryStatus.PENDING, EntryStatus.QUESTIONED})


class TimeEntry(BaseEntity):
    """
    TimeEntry entity.

    ``approved_date`` mirrors ``status_changed_at`` while the entry is
    approved and is cleared otherwise; reports built before entry statuses
    existed still read it.
    """

    def __init__(
        self,
        project_id: str,
        author_id: str,
        title: str,
        hours: float,
        entry_date: Optional[date] = None,
        description: str = "",
        status: EntryStatus = EntryStatus.PENDING,
        status_changed_at: Optional[datetime] = None,
        status_changed_by: Optional[str] = None,
        approved_date: Optional[datetime] = None,
        id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        super().__init__(id=id, created_at=created_at, updated_at=updated_at)
        self.project_id = project_id
        self.author_id = author_id
        self.title = title
        self.description = description or ""
        self.hours = hours
        self.entry_date = entry_date or self.created_at.date()
        self.status = EntryStatus(status)
        self.status_changed_at = status_changed_at
        self.status_changed_by = status_changed_by
        self.approved_date = approved_date
        self.validate()

    def validate(self) -> None:
        """Validate time entry state."""
        if not self.project_id:
            raise ValidationError("Project ID is required", "project_id")

        if not self.author_id:
            raise ValidationError("Author ID is required", "author_id")

        if not self.title or not self.title.strip():
            raise ValidationError("Title is required", "title")

        if self.hours is None or self.hours < 0:
            raise ValidationError("Hours cannot be negative", "hours")

        if self.hours > 24:
            raise ValidationError("Hours cannot exceed 24 per entry", "hours")

        if (self.approved_date is not None) != (self.status == EntryStatus.APPROVED):
            raise ValidationError(
                "Approved date must be set exactly when the entry is approved",
                "approved_date"
            )

    @property
    def is_approved(self) -> bool:
        return self.status == EntryStatus.APPROVED

    @property
    def is_unresolved(self) -> bool:
        return self.status in UNRESOLVED_ENTRY_STATUSES

    @property
    def idle_since(self) -> datetime:
        """When the entry last changed status (creation if it never did)."""
        return self.status_changed_at or self.created_at

    def change_status(
        self,
        new_status: EntryStatus,
        actor_id: str,
        at: Optional[datetime] = None,
        source: str = "manual",
    ) -> EntryStatus:
        """
        Move the entry to ``new_status``. Every status is reachable from every
        other one; lock checks belong to the workflow service.
        Returns the previous status.
        """
        if not actor_id:
            raise ValidationError("Actor ID is required", "actor_id")

        new_status = EntryStatus(new_status)
        now = at or utc_now()
        previous = self.status

        self.status = new_status
        self.status_changed_at = now
        self.status_changed_by = actor_id
        self.approved_date = now if new_status == EntryStatus.APPROVED else None
        self.mark_as_updated(now)

        self.add_event(EntryStatusChanged(
            time_entry_id=self.id or "",
            project_id=self.project_id,
            from_status=previous.value,
            to_status=new_status.value,
            changed_by=actor_id,
            source=source,
        ))
        return previous

    def edit(
        self,
        title: Optional[str] = None,
        description: Optional[str] = None,
        hours: Optional[float] = None,
        entry_date: Optional[date] = None,
    ) -> None:
        """Edit the logged work. Callers must check the edit-lock first."""
        if title is not None:
            self.title = title
        if description is not None:
            self.description = description
        if hours is not None:
            self.hours = hours
        if entry_date is not None:
            self.entry_date = entry_date
        self.validate()
        self.mark_as_updated()
