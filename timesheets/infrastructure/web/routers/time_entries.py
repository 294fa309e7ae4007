"""
Time entry router.
Handles logging, editing and reviewing time entries.
"""

from fastapi import APIRouter, Response, status

from timesheets.infrastructure.auth.dependencies import CurrentUserId
from timesheets.infrastructure.web.dependencies import Context, raise_for_result
from timesheets.application.use_cases.time_entry_use_cases import (
    CreateTimeEntryUseCase,
    GetTimeEntryUseCase,
    UpdateTimeEntryUseCase,
    DeleteTimeEntryUseCase,
    SetEntryStatusUseCase,
    PostEntryMessageUseCase,
    ListEntryMessagesUseCase,
)
from timesheets.application.dto.time_entry_dto import (
    CreateTimeEntryRequestDTO,
    TimeEntryChangesDTO,
    UpdateTimeEntryRequestDTO,
    TimeEntryIdRequestDTO,
    EntryStatusChangeDTO,
    SetEntryStatusRequestDTO,
    EntryMessageContentDTO,
    PostEntryMessageRequestDTO,
    TimeEntryResponseDTO,
    PostEntryMessageResponseDTO,
    EntryMessageListResponseDTO,
)


router = APIRouter()


@router.post("", status_code=status.HTTP_201_CREATED, response_model=TimeEntryResponseDTO)
async def create_time_entry(
    request: CreateTimeEntryRequestDTO,
    user_id: CurrentUserId,
    context: Context,
):
    """
    Log a new time entry. It starts out pending.

    - **project_id**: Project the work belongs to
    - **title**: What was worked on
    - **hours**: Hours worked (0-24)
    - **entry_date**: Day the work happened, defaults to today
    """
    result = await CreateTimeEntryUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.get("/{entry_id}", response_model=TimeEntryResponseDTO)
async def get_time_entry(entry_id: str, user_id: CurrentUserId, context: Context):
    """Get a time entry by ID."""
    result = await GetTimeEntryUseCase(context).execute(TimeEntryIdRequestDTO(entry_id=entry_id))
    raise_for_result(result)
    return result.data


@router.patch("/{entry_id}", response_model=TimeEntryResponseDTO)
async def update_time_entry(
    entry_id: str,
    changes: TimeEntryChangesDTO,
    user_id: CurrentUserId,
    context: Context,
):
    """
    Edit a time entry. Entries on a submitted or approved sheet are locked.
    """
    request = UpdateTimeEntryRequestDTO(entry_id=entry_id, **changes.model_dump(exclude_unset=True))
    result = await UpdateTimeEntryUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.delete("/{entry_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_time_entry(entry_id: str, user_id: CurrentUserId, context: Context):
    """Delete an unlocked time entry."""
    result = await DeleteTimeEntryUseCase(context).set_current_user(user_id).execute(
        TimeEntryIdRequestDTO(entry_id=entry_id)
    )
    raise_for_result(result)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/{entry_id}/status", response_model=TimeEntryResponseDTO)
async def set_entry_status(
    entry_id: str,
    change: EntryStatusChangeDTO,
    user_id: CurrentUserId,
    context: Context,
):
    """
    Approve, question or reopen a time entry.

    - **status**: pending, approved or questioned
    - **override**: `admin_reset` lets a project owner move a locked entry back to pending
    """
    request = SetEntryStatusRequestDTO(entry_id=entry_id, **change.model_dump())
    result = await SetEntryStatusUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.post(
    "/{entry_id}/messages",
    status_code=status.HTTP_201_CREATED,
    response_model=PostEntryMessageResponseDTO,
)
async def post_entry_message(
    entry_id: str,
    message: EntryMessageContentDTO,
    user_id: CurrentUserId,
    context: Context,
):
    """
    Comment on a time entry.

    - **content**: Message text
    - **status_change**: Optional status the entry moves to with this message
    - **parent_message_id**: Message being replied to
    """
    request = PostEntryMessageRequestDTO(entry_id=entry_id, **message.model_dump())
    result = await PostEntryMessageUseCase(context).set_current_user(user_id).execute(request)
    raise_for_result(result)
    return result.data


@router.get("/{entry_id}/messages", response_model=EntryMessageListResponseDTO)
async def list_entry_messages(entry_id: str, user_id: CurrentUserId, context: Context):
    """List the message thread of a time entry, oldest first."""
    result = await ListEntryMessagesUseCase(context).execute(TimeEntryIdRequestDTO(entry_id=entry_id))
    raise_for_result(result)
    return result.data
