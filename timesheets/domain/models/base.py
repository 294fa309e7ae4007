"""
Base entity and domain exceptions for the domain layer.
This module contains the foundational classes for all domain entities.
"""

from datetime import datetime, timezone
from typing import Optional, Any, Dict, List
from abc import ABC
from enum import Enum
import uuid

from timesheets.domain.events.base import DomainEvent


def utc_now() -> datetime:
    """Current time as an aware UTC datetime."""
    return datetime.now(timezone.utc)


def new_id() -> str:
    """Generate an opaque entity identifier."""
    return uuid.uuid4().hex


class BaseEntity(ABC):
    """
    Base class for all domain entities.
    Provides identity, timestamps and domain event collection.
    """

    def __init__(
        self,
        id: Optional[str] = None,
        created_at: Optional[datetime] = None,
        updated_at: Optional[datetime] = None,
    ):
        self.id = id
        self.created_at = created_at or utc_now()
        self.updated_at = updated_at or self.created_at
        self._events: List[DomainEvent] = []

    def __eq__(self, other: Any) -> bool:
        """Entities are equal if they have the same ID and are of the same type."""
        if not isinstance(other, self.__class__):
            return False
        if self.id is None or other.id is None:
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on entity ID."""
        if self.id is None:
            return hash(id(self))
        return hash((self.__class__.__name__, self.id))

    def mark_as_updated(self, at: Optional[datetime] = None) -> None:
        """Update the updated_at timestamp."""
        self.updated_at = at or utc_now()

    def add_event(self, event: DomainEvent) -> None:
        """Add a domain event."""
        self._events.append(event)

    def pull_events(self) -> List[DomainEvent]:
        """Get and clear all domain events."""
        events = self._events.copy()
        self._events.clear()
        return events

    @property
    def is_new(self) -> bool:
        """Check if entity is new (not persisted)."""
        return self.id is None

    def validate(self) -> None:
        """
        Validate the entity's state.
        Should be overridden by subclasses to implement specific validation rules.
        Raises ValidationError if the entity is in an invalid state.
        """
        pass

    def to_dict(self) -> Dict[str, Any]:
        """Convert entity to dictionary representation."""
        data = {}
        for key, value in self.__dict__.items():
            if key.startswith('_'):
                continue
            if isinstance(value, datetime):
                data[key] = value.isoformat()
            elif isinstance(value, Enum):
                data[key] = value.value
            elif isinstance(value, list):
                data[key] = [
                    item.value if isinstance(item, Enum) else item
                    for item in value
                ]
            else:
                data[key] = value
        return data


class DomainException(Exception):
    """Base exception for domain errors."""

    def __init__(self, message: str, code: Optional[str] = None):
        self.message = message
        self.code = code or self.__class__.__name__
        super().__init__(self.message)


class ValidationError(DomainException):
    """Exception raised when entity validation fails."""

    def __init__(self, message: str, field: Optional[str] = None):
        super().__init__(message, "VALIDATION_ERROR")
        self.field = field


class BusinessRuleViolation(DomainException):
    """Exception raised when a business rule is violated."""

    def __init__(self, message: str, code: str = "BUSINESS_RULE_VIOLATION"):
        super().__init__(message, code)


class EntityNotFoundError(DomainException):
    """Exception raised when an entity is not found."""

    def __init__(self, entity_type: str, entity_id: Any):
        message = f"{entity_type} with id {entity_id} not found"
        super().__init__(message, "NOT_FOUND")
        self.entity_type = entity_type
        self.entity_id = entity_id


# Approval workflow errors

class EntryLockedError(BusinessRuleViolation):
    """Entry belongs to a time sheet that is no longer a draft."""

    def __init__(self, entry_id: str, sheet_id: Optional[str] = None):
        message = f"Time entry {entry_id} is locked"
        if sheet_id:
            message += f" by time sheet {sheet_id}"
        super().__init__(message, "ENTRY_LOCKED")
        self.entry_id = entry_id
        self.sheet_id = sheet_id


class EntriesNotApprovedError(BusinessRuleViolation):
    """Sheet entries are not in the status the transition requires."""

    def __init__(self, sheet_id: str, entry_ids: List[str], message: Optional[str] = None):
        super().__init__(
            message or f"Time sheet {sheet_id} has {len(entry_ids)} unapproved entries",
            "ENTRIES_NOT_APPROVED",
        )
        self.sheet_id = sheet_id
        self.entry_ids = entry_ids


class EmptyTimeSheetError(BusinessRuleViolation):
    """Sheet has no entries to submit."""

    def __init__(self, sheet_id: str):
        super().__init__(f"Time sheet {sheet_id} has no entries", "EMPTY_TIME_SHEET")
        self.sheet_id = sheet_id


class InvalidStageForModeError(BusinessRuleViolation):
    """Stage approval does not match the project's approval mode or stage list."""

    def __init__(self, message: str):
        super().__init__(message, "INVALID_STAGE_FOR_MODE")


class SheetNotSubmittedError(BusinessRuleViolation):
    """Review action attempted on a sheet that is not awaiting review."""

    def __init__(self, sheet_id: str, status: Any):
        status_value = getattr(status, "value", status)
        super().__init__(
            f"Time sheet {sheet_id} is {status_value}, not submitted",
            "SHEET_NOT_SUBMITTED",
        )
        self.sheet_id = sheet_id
        self.status = status


class SheetNotDraftError(BusinessRuleViolation):
    """Draft-only action attempted on a sheet that has left draft."""

    def __init__(self, sheet_id: str, status: Any):
        status_value = getattr(status, "value", status)
        super().__init__(
            f"Time sheet {sheet_id} is {status_value}, not draft",
            "SHEET_NOT_DRAFT",
        )
        self.sheet_id = sheet_id
        self.status = status


class UnauthorizedApproverError(DomainException):
    """Actor lacks the role the transition requires."""

    def __init__(self, actor_id: str, message: str):
        super().__init__(message, "UNAUTHORIZED_APPROVER")
        self.actor_id = actor_id
