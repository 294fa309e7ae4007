"""
Time Entry use cases for the application layer.
Logging work, editing it while it is unlocked, and reviewing it.
"""

from timesheets.application.use_cases.base_use_case import (
    AuthorizedUseCase, CommandUseCase, QueryUseCase,
)
from timesheets.application.dto.time_entry_dto import (
    CreateTimeEntryRequestDTO, UpdateTimeEntryRequestDTO, TimeEntryIdRequestDTO,
    SetEntryStatusRequestDTO, PostEntryMessageRequestDTO, TimeEntryResponseDTO,
    EntryMessageResponseDTO, PostEntryMessageResponseDTO, EntryMessageListResponseDTO,
)
from timesheets.domain.models.base import UnauthorizedApproverError, ValidationError
from timesheets.domain.models.time_entry import TimeEntry
from timesheets.domain.services.capabilities import ProjectRole
from timesheets.domain.services.entry_workflow import StatusOverride


class CreateTimeEntryUseCase(AuthorizedUseCase, CommandUseCase[CreateTimeEntryRequestDTO, TimeEntryResponseDTO]):
    """Use case for logging a time entry."""

    async def _execute_command_logic(self, request: CreateTimeEntryRequestDTO) -> TimeEntryResponseDTO:
        now = self.context.clock.now()
        entry = TimeEntry(
            project_id=request.project_id,
            author_id=self.current_user_id,
            title=request.title,
            description=request.description,
            hours=request.hours,
            entry_date=request.entry_date,
            created_at=now,
        )
        saved = self.uow.time_entries.save(entry)
        return TimeEntryResponseDTO.from_domain(saved)


class GetTimeEntryUseCase(QueryUseCase[TimeEntryIdRequestDTO, TimeEntryResponseDTO]):
    """Use case for reading one time entry."""

    async def _execute_query_logic(self, request: TimeEntryIdRequestDTO) -> TimeEntryResponseDTO:
        entry = self.context.entry_workflow(self.uow).get_entry(request.entry_id)
        return TimeEntryResponseDTO.from_domain(entry)


class UpdateTimeEntryUseCase(AuthorizedUseCase, CommandUseCase[UpdateTimeEntryRequestDTO, TimeEntryResponseDTO]):
    """Use case for editing an unlocked time entry."""

    async def _execute_command_logic(self, request: UpdateTimeEntryRequestDTO) -> TimeEntryResponseDTO:
        workflow = self.context.entry_workflow(self.uow)
        entry = workflow.get_entry(request.entry_id)
        if entry.author_id != self.current_user_id:
            raise UnauthorizedApproverError(self.current_user_id, "Only the author can edit a time entry")

        entry = workflow.edit_entry(
            request.entry_id,
            title=request.title,
            description=request.description,
            hours=request.hours,
            entry_date=request.entry_date,
        )
        return TimeEntryResponseDTO.from_domain(entry)


class DeleteTimeEntryUseCase(AuthorizedUseCase, CommandUseCase[TimeEntryIdRequestDTO, bool]):
    """Use case for deleting an unlocked time entry."""

    async def _execute_command_logic(self, request: TimeEntryIdRequestDTO) -> bool:
        workflow = self.context.entry_workflow(self.uow)
        entry = workflow.get_entry(request.entry_id)
        is_owner = self.context.capabilities.has_role(self.current_user_id, entry.project_id, ProjectRole.OWNER)
        if entry.author_id != self.current_user_id and not is_owner:
            raise UnauthorizedApproverError(self.current_user_id, "Only the author or a project owner can delete a time entry")

        workflow.delete_entry(request.entry_id)
        return True


class SetEntryStatusUseCase(AuthorizedUseCase, CommandUseCase[SetEntryStatusRequestDTO, TimeEntryResponseDTO]):
    """
    Use case for approving, questioning or reopening a time entry.

    The auto-approval override is reserved for the system actor; the admin
    reset override needs a project owner.
    """

    async def _execute_command_logic(self, request: SetEntryStatusRequestDTO) -> TimeEntryResponseDTO:
        workflow = self.context.entry_workflow(self.uow)
        entry = workflow.get_entry(request.entry_id)
        override = StatusOverride(request.override)

        if override == StatusOverride.AUTO_APPROVAL and self.current_user_id != self.context.system_actor_id:
            raise ValidationError("The auto-approval override is reserved for the system", "override")

        if override == StatusOverride.ADMIN_RESET and not self.context.capabilities.has_role(
            self.current_user_id, entry.project_id, ProjectRole.OWNER
        ):
            raise UnauthorizedApproverError(self.current_user_id, "Only a project owner can reset a locked entry")

        workflow.ensure_can_set_status(entry, request.status, self.current_user_id)
        entry = workflow.set_entry_status(
            request.entry_id,
            request.status,
            self.current_user_id,
            override=override,
        )
        self._collect_events(entry)
        return TimeEntryResponseDTO.from_domain(entry)


class PostEntryMessageUseCase(AuthorizedUseCase, CommandUseCase[PostEntryMessageRequestDTO, PostEntryMessageResponseDTO]):
    """Use case for commenting on a time entry, optionally changing its status."""

    async def _execute_command_logic(self, request: PostEntryMessageRequestDTO) -> PostEntryMessageResponseDTO:
        workflow = self.context.entry_workflow(self.uow)
        message, entry = workflow.post_message(
            request.entry_id,
            self.current_user_id,
            request.content,
            status_change=request.status_change,
            parent_message_id=request.parent_message_id,
        )
        self._collect_events(entry, message)
        return PostEntryMessageResponseDTO(
            message=EntryMessageResponseDTO.from_domain(message),
            entry=TimeEntryResponseDTO.from_domain(entry) if entry else None,
        )


class ListEntryMessagesUseCase(QueryUseCase[TimeEntryIdRequestDTO, EntryMessageListResponseDTO]):
    """Use case for reading an entry's message thread."""

    async def _execute_query_logic(self, request: TimeEntryIdRequestDTO) -> EntryMessageListResponseDTO:
        self.context.entry_workflow(self.uow).get_entry(request.entry_id)
        messages = self.uow.messages.list_for_entry(request.entry_id)
        return EntryMessageListResponseDTO(
            time_entry_id=request.entry_id,
            items=[EntryMessageResponseDTO.from_domain(m) for m in messages],
        )
