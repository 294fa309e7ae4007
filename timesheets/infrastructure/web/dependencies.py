"""
FastAPI dependencies wiring the use cases to their collaborators.
"""

from typing import Annotated, NoReturn

from fastapi import Depends, HTTPException

from timesheets.config import get_settings
from timesheets.application.use_cases.base_use_case import UseCaseResult, WorkflowContext
from timesheets.domain.events.base import get_event_dispatcher
from timesheets.infrastructure.auth.capability_resolver import SQLAlchemyCapabilityResolver
from timesheets.infrastructure.db.database import get_session_factory
from timesheets.infrastructure.repositories.unit_of_work import SQLAlchemyUnitOfWork
from timesheets.infrastructure.web.middleware.error_handler import status_for_error_code


def build_workflow_context(session_factory, system_actor_id: str = "system") -> WorkflowContext:
    """Context whose units of work and capability checks share ``session_factory``."""
    return WorkflowContext(
        uow_factory=lambda: SQLAlchemyUnitOfWork(session_factory),
        capabilities=SQLAlchemyCapabilityResolver(session_factory),
        event_dispatcher=get_event_dispatcher(),
        system_actor_id=system_actor_id,
    )


def get_workflow_context() -> WorkflowContext:
    """Dependency to get the workflow context for the configured database."""
    return build_workflow_context(get_session_factory(), get_settings().system_actor_id)


Context = Annotated[WorkflowContext, Depends(get_workflow_context)]


def raise_for_result(result: UseCaseResult) -> None:
    """Turn a failed use case result into an HTTPException."""
    if result.success:
        return
    _raise_error(result.error_code or "UNKNOWN_ERROR", result.error or "Request failed")


def _raise_error(code: str, message: str) -> NoReturn:
    raise HTTPException(
        status_code=status_for_error_code(code),
        detail={"code": code, "message": message},
    )
