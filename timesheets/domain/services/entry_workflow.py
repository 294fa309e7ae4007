"""Entry workflow service.

Status transitions of individual time entries. Every status can be reached
from every other status; the only guard is the edit-lock held by submitted,
approved or rejected time sheets.
"""

import logging
from typing import Optional, Tuple
from datetime import date
from enum import Enum

from timesheets.domain.models.base import EntityNotFoundError, EntryLockedError, UnauthorizedApproverError
from timesheets.domain.models.time_entry import EntryStatus, TimeEntry
from timesheets.domain.models.approval import EntryStatusChange, EntryMessage, StatusChangeSource
from timesheets.domain.repositories.unit_of_work import UnitOfWork
from timesheets.domain.services.capabilities import CapabilityResolver, EntryPermission
from timesheets.domain.services.clock import Clock, SystemClock
from timesheets.domain.events.approval_events import EntryMessagePosted


logger = logging.getLogger(__name__)


class StatusOverride(str, Enum):
    """Ways a status change may bypass the sheet edit-lock."""
    NONE = "none"
    AUTO_APPROVAL = "auto_approval"
    ADMIN_RESET = "admin_reset"


# Permission needed to move an entry into each status
STATUS_PERMISSIONS = {
    EntryStatus.APPROVED: EntryPermission.APPROVE,
    EntryStatus.QUESTIONED: EntryPermission.QUESTION,
    EntryStatus.PENDING: EntryPermission.CHANGE_STATUS,
}


class EntryWorkflowService:
    """
    Domain service for time entry status changes and lock checks.
    Works inside the caller's unit of work and never commits.
    """

    def __init__(
        self,
        uow: UnitOfWork,
        capabilities: Optional[CapabilityResolver] = None,
        clock: Optional[Clock] = None,
        system_actor_id: str = "system",
    ):
        self.uow = uow
        self.capabilities = capabilities
        self.clock = clock or SystemClock()
        self.system_actor_id = system_actor_id

    def get_entry(self, entry_id: str) -> TimeEntry:
        entry = self.uow.time_entries.get_by_id(entry_id)
        if not entry:
            raise EntityNotFoundError("TimeEntry", entry_id)
        return entry

    def locking_sheet_id(self, entry_id: str) -> Optional[str]:
        """ID of the non-draft sheet holding the entry, if any."""
        for sheet in self.uow.time_sheets.find_sheets_for_entry(entry_id):
            if sheet.is_locked:
                return sheet.id
        return None

    def ensure_editable(self, entry_id: str) -> None:
        """
        Raise EntryLockedError when the entry belongs to a sheet that is not
        a draft.
        """
        sheet_id = self.locking_sheet_id(entry_id)
        if sheet_id:
            raise EntryLockedError(entry_id, sheet_id)

    def ensure_can_set_status(self, entry: TimeEntry, new_status: EntryStatus, actor_id: str) -> None:
        """
        Check the actor's project role against the permission the target
        status needs. The system actor is always allowed.
        """
        if actor_id == self.system_actor_id or self.capabilities is None:
            return

        permission = STATUS_PERMISSIONS[EntryStatus(new_status)]
        if not self.capabilities.has_permission(actor_id, entry.project_id, permission):
            raise UnauthorizedApproverError(
                actor_id,
                f"Actor {actor_id} lacks {permission.value} on project {entry.project_id}",
            )

    def set_entry_status(
        self,
        entry_id: str,
        new_status: EntryStatus,
        actor_id: str,
        override: StatusOverride = StatusOverride.NONE,
        source: StatusChangeSource = StatusChangeSource.MANUAL,
    ) -> TimeEntry:
        """
        Move an entry to ``new_status``.

        The lock is bypassed by the auto-approval sweep, and by an admin
        reset that returns the entry to pending. Setting the status the
        entry already has changes nothing.
        """
        new_status = EntryStatus(new_status)
        override = StatusOverride(override)
        entry = self.get_entry(entry_id)

        bypass_lock = (
            override == StatusOverride.AUTO_APPROVAL
            or (override == StatusOverride.ADMIN_RESET and new_status == EntryStatus.PENDING)
        )
        if not bypass_lock:
            self.ensure_editable(entry_id)

        if entry.status == new_status:
            return entry

        if override == StatusOverride.AUTO_APPROVAL:
            source = StatusChangeSource.AUTO_APPROVAL
        elif override == StatusOverride.ADMIN_RESET:
            source = StatusChangeSource.ADMIN_RESET
        source = StatusChangeSource(source)

        now = self.clock.now()
        previous = entry.change_status(new_status, actor_id, at=now, source=source.value)
        self.uow.time_entries.save(entry)
        self.uow.status_changes.append(EntryStatusChange(
            time_entry_id=entry.id,
            from_status=previous,
            to_status=new_status,
            changed_by=actor_id,
            changed_at=now,
            source=source,
        ))

        logger.info(
            "Time entry %s: %s -> %s by %s (%s)",
            entry.id, previous.value, new_status.value, actor_id, source.value,
        )
        return entry

    def edit_entry(
        self,
        entry_id: str,
        title: Optional[str] = None,
        description: Optional[str] = None,
        hours: Optional[float] = None,
        entry_date: Optional[date] = None,
    ) -> TimeEntry:
        entry = self.get_entry(entry_id)
        self.ensure_editable(entry_id)
        entry.edit(title=title, description=description, hours=hours, entry_date=entry_date)
        return self.uow.time_entries.save(entry)

    def delete_entry(self, entry_id: str) -> None:
        self.get_entry(entry_id)
        self.ensure_editable(entry_id)
        for sheet in self.uow.time_sheets.find_sheets_for_entry(entry_id):
            self.uow.time_sheets.remove_entry_link(sheet.id, entry_id)
        self.uow.time_entries.delete(entry_id)
        logger.info("Deleted time entry %s", entry_id)

    def post_message(
        self,
        entry_id: str,
        author_id: str,
        content: str,
        status_change: Optional[EntryStatus] = None,
        parent_message_id: Optional[str] = None,
    ) -> Tuple[EntryMessage, Optional[TimeEntry]]:
        """
        Add a message to an entry's thread. A message carrying a status
        change also moves the entry; a locked entry rejects both.
        Returns the message and, when the status changed, the entry.
        """
        entry = self.get_entry(entry_id)
        message = EntryMessage(
            time_entry_id=entry_id,
            author_id=author_id,
            content=content,
            status_change=status_change,
            parent_message_id=parent_message_id,
            created_at=self.clock.now(),
        )

        updated_entry = None
        if message.status_change is not None:
            self.ensure_can_set_status(entry, message.status_change, author_id)
            updated_entry = self.set_entry_status(
                entry_id,
                message.status_change,
                author_id,
                source=StatusChangeSource.MESSAGE,
            )

        message = self.uow.messages.add(message)
        message.add_event(EntryMessagePosted(
            message_id=message.id,
            time_entry_id=entry_id,
            author_id=author_id,
            status_change=message.status_change.value if message.status_change else None,
        ))
        return message, updated_entry
