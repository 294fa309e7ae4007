"""
Time Entry DTOs for the application layer.
Data Transfer Objects for time entry review operations.
"""

from typing import Optional, List
from datetime import datetime, date
from pydantic import Field, field_validator

from timesheets.domain.models.time_entry import EntryStatus, TimeEntry
from timesheets.domain.models.approval import EntryMessage, EntryStatusChange, StatusChangeSource
from timesheets.domain.services.entry_workflow import StatusOverride
from .base_dto import RequestDTO, ResponseDTO


# Request DTOs
class CreateTimeEntryRequestDTO(RequestDTO):
    """DTO for logging a time entry."""

    project_id: str = Field(min_length=1, description="Project ID")
    title: str = Field(min_length=1, max_length=255, description="What was worked on")
    description: str = Field(default="", max_length=5000)
    hours: float = Field(ge=0, le=24, description="Hours worked")
    entry_date: Optional[date] = Field(default=None, description="Day the work happened")

    @field_validator("title")
    @classmethod
    def validate_title(cls, v):
        """Reject blank titles."""
        if not v.strip():
            raise ValueError("Title cannot be blank")
        return v.strip()


class TimeEntryChangesDTO(RequestDTO):
    """Editable fields of a time entry. Omitted fields keep their value."""

    title: Optional[str] = Field(default=None, min_length=1, max_length=255)
    description: Optional[str] = Field(default=None, max_length=5000)
    hours: Optional[float] = Field(default=None, ge=0, le=24)
    entry_date: Optional[date] = None


class UpdateTimeEntryRequestDTO(TimeEntryChangesDTO):
    """DTO for editing a time entry."""

    entry_id: str = Field(min_length=1)


class TimeEntryIdRequestDTO(RequestDTO):
    """DTO addressing a single time entry."""

    entry_id: str = Field(min_length=1)


class EntryStatusChangeDTO(RequestDTO):
    """Requested status for an entry."""

    status: EntryStatus = Field(description="Target status")
    override: StatusOverride = Field(default=StatusOverride.NONE, description="Lock override")


class SetEntryStatusRequestDTO(EntryStatusChangeDTO):
    """DTO for changing an entry's status."""

    entry_id: str = Field(min_length=1)


class EntryMessageContentDTO(RequestDTO):
    """A message posted to an entry thread."""

    content: str = Field(min_length=1, max_length=5000)
    status_change: Optional[EntryStatus] = Field(default=None, description="Status the message moves the entry to")
    parent_message_id: Optional[str] = None


class PostEntryMessageRequestDTO(EntryMessageContentDTO):
    """DTO for posting a message to an entry."""

    entry_id: str = Field(min_length=1)


# Response DTOs
class TimeEntryResponseDTO(ResponseDTO):
    """DTO for time entry responses."""

    project_id: str
    author_id: str
    title: str
    description: str = ""
    hours: float
    entry_date: date
    status: EntryStatus
    status_changed_at: Optional[datetime] = None
    status_changed_by: Optional[str] = None
    approved_date: Optional[datetime] = None

    @classmethod
    def from_domain(cls, entry: TimeEntry) -> "TimeEntryResponseDTO":
        return cls(
            id=entry.id,
            project_id=entry.project_id,
            author_id=entry.author_id,
            title=entry.title,
            description=entry.description,
            hours=entry.hours,
            entry_date=entry.entry_date,
            status=entry.status,
            status_changed_at=entry.status_changed_at,
            status_changed_by=entry.status_changed_by,
            approved_date=entry.approved_date,
            created_at=entry.created_at,
            updated_at=entry.updated_at,
        )


class EntryMessageResponseDTO(ResponseDTO):
    """DTO for entry message responses."""

    time_entry_id: str
    author_id: str
    content: str
    status_change: Optional[EntryStatus] = None
    parent_message_id: Optional[str] = None

    @classmethod
    def from_domain(cls, message: EntryMessage) -> "EntryMessageResponseDTO":
        return cls(
            id=message.id,
            time_entry_id=message.time_entry_id,
            author_id=message.author_id,
            content=message.content,
            status_change=message.status_change,
            parent_message_id=message.parent_message_id,
            created_at=message.created_at,
            updated_at=message.updated_at,
        )


class PostEntryMessageResponseDTO(ResponseDTO):
    """A posted message and, when it carried a status change, the updated entry."""

    message: EntryMessageResponseDTO
    entry: Optional[TimeEntryResponseDTO] = None


class EntryStatusChangeResponseDTO(ResponseDTO):
    """DTO for one entry status history record."""

    time_entry_id: str
    from_status: EntryStatus
    to_status: EntryStatus
    changed_by: str
    changed_at: datetime
    source: StatusChangeSource

    @classmethod
    def from_domain(cls, change: EntryStatusChange) -> "EntryStatusChangeResponseDTO":
        return cls(
            id=change.id,
            time_entry_id=change.time_entry_id,
            from_status=change.from_status,
            to_status=change.to_status,
            changed_by=change.changed_by,
            changed_at=change.changed_at,
            source=change.source,
            created_at=change.created_at,
        )


class EntryMessageListResponseDTO(ResponseDTO):
    """Messages of one entry."""

    time_entry_id: str
    items: List[EntryMessageResponseDTO] = Field(default_factory=list)
