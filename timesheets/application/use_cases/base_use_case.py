"""
Base use case classes for the application layer.
Provides common patterns and structure for use case implementations.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, Optional, TypeVar, Generic, List
from dataclasses import dataclass, field
from datetime import datetime, timezone

from timesheets.domain.models.base import BaseEntity, DomainException, ValidationError
from timesheets.domain.events.base import DomainEvent, EventDispatcher, get_event_dispatcher
from timesheets.domain.repositories.unit_of_work import UnitOfWork
from timesheets.domain.services.capabilities import CapabilityResolver
from timesheets.domain.services.clock import Clock, SystemClock
from timesheets.domain.services.entry_workflow import EntryWorkflowService
from timesheets.domain.services.sheet_workflow import SheetWorkflowService


logger = logging.getLogger(__name__)

T = TypeVar('T')
R = TypeVar('R')


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class UseCaseResult(Generic[T]):
    """Result wrapper for use case operations."""

    success: bool
    data: Optional[T] = None
    error: Optional[str] = None
    error_code: Optional[str] = None
    metadata: Optional[Dict[str, Any]] = None

    @classmethod
    def success_result(cls, data: T, metadata: Optional[Dict[str, Any]] = None) -> "UseCaseResult[T]":
        """Create a successful result."""
        return cls(success=True, data=data, metadata=metadata)

    @classmethod
    def error_result(
        cls,
        error: str,
        error_code: Optional[str] = None,
        metadata: Optional[Dict[str, Any]] = None
    ) -> "UseCaseResult[T]":
        """Create an error result."""
        return cls(
            success=False,
            error=error,
            error_code=error_code,
            metadata=metadata
        )

    @classmethod
    def from_exception(cls, exc: Exception) -> "UseCaseResult[T]":
        """Create error result from exception."""
        if isinstance(exc, DomainException):
            return cls.error_result(exc.message, exc.code)
        elif isinstance(exc, ValueError):
            return cls.error_result(str(exc), "VALIDATION_ERROR")
        else:
            return cls.error_result(str(exc), "UNKNOWN_ERROR")


@dataclass
class WorkflowContext:
    """
    Collaborators shared by the approval use cases.
    ``uow_factory`` opens a fresh unit of work per call.
    """

    uow_factory: Callable[[], UnitOfWork]
    capabilities: CapabilityResolver
    clock: Clock = field(default_factory=SystemClock)
    event_dispatcher: EventDispatcher = field(default_factory=get_event_dispatcher)
    system_actor_id: str = "system"

    def entry_workflow(self, uow: UnitOfWork) -> EntryWorkflowService:
        return EntryWorkflowService(
            uow,
            capabilities=self.capabilities,
            clock=self.clock,
            system_actor_id=self.system_actor_id,
        )

    def sheet_workflow(self, uow: UnitOfWork) -> SheetWorkflowService:
        return SheetWorkflowService(
            uow,
            capabilities=self.capabilities,
            clock=self.clock,
            system_actor_id=self.system_actor_id,
        )


class BaseUseCase(ABC, Generic[T, R]):
    """
    Base class for all use cases.
    Provides common structure and error handling.
    """

    def __init__(self, context: WorkflowContext):
        self.context = context
        self.uow: Optional[UnitOfWork] = None
        self.execution_start: Optional[datetime] = None
        self.execution_end: Optional[datetime] = None

    async def execute(self, request: T) -> UseCaseResult[R]:
        """
        Execute the use case with proper error handling and logging.
        """
        self.execution_start = _utc_now()

        try:
            # Validate input
            await self._validate_request(request)

            # Execute business logic
            result = await self._execute_business_logic(request)

            self.execution_end = _utc_now()
            execution_time = (self.execution_end - self.execution_start).total_seconds()

            return UseCaseResult.success_result(
                result,
                metadata={
                    "execution_time_seconds": execution_time,
                    "executed_at": self.execution_end.isoformat()
                }
            )

        except Exception as exc:
            self.execution_end = _utc_now()
            execution_time = (self.execution_end - self.execution_start).total_seconds()

            if isinstance(exc, DomainException):
                logger.info(f"{self.__class__.__name__} refused: {exc.code} {exc.message}")
            else:
                logger.exception(f"{self.__class__.__name__} failed unexpectedly")

            error_result = UseCaseResult.from_exception(exc)
            error_result.metadata = {
                "execution_time_seconds": execution_time,
                "failed_at": self.execution_end.isoformat(),
                "exception_type": type(exc).__name__
            }

            return error_result

    async def _validate_request(self, request: T) -> None:
        """
        Validate the request. Override in subclasses if needed.
        """
        if hasattr(request, 'model_validate'):
            # Pydantic models
            request.model_validate(request.model_dump())
        elif hasattr(request, 'validate'):
            # Custom validation
            request.validate()

    @abstractmethod
    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute the core business logic. Must be implemented by subclasses.
        """
        pass


class QueryUseCase(BaseUseCase[T, R]):
    """
    Base class for query use cases (read operations).
    Runs inside a unit of work that is never committed.
    """

    async def _execute_business_logic(self, request: T) -> R:
        with self.context.uow_factory() as uow:
            self.uow = uow
            try:
                return await self._execute_query_logic(request)
            finally:
                self.uow = None

    @abstractmethod
    async def _execute_query_logic(self, request: T) -> R:
        """Execute the query logic. Must be implemented by subclasses."""
        pass


class CommandUseCase(BaseUseCase[T, R]):
    """
    Base class for command use cases (write operations).
    Includes transaction handling and event publishing.
    """

    def __init__(self, context: WorkflowContext):
        super().__init__(context)
        self.events: List[DomainEvent] = []

    async def _execute_business_logic(self, request: T) -> R:
        """
        Execute command in one unit of work. Events are only published once
        the unit of work has committed.
        """
        self.events.clear()
        with self.context.uow_factory() as uow:
            self.uow = uow
            try:
                result = await self._execute_command_logic(request)
                uow.commit()
            except Exception:
                self.events.clear()
                raise
            finally:
                self.uow = None

        await self._publish_events()
        return result

    @abstractmethod
    async def _execute_command_logic(self, request: T) -> R:
        """Execute the command logic. Must be implemented by subclasses."""
        pass

    def _collect_events(self, *entities: Optional[BaseEntity]) -> None:
        """Take the pending events of the given entities for publishing."""
        for entity in entities:
            if entity is not None:
                self.events.extend(entity.pull_events())

    async def _publish_events(self) -> None:
        """Publish collected domain events."""
        events = list(self.events)
        self.events.clear()
        await self.context.event_dispatcher.dispatch_all(events)


class AuthorizedUseCase(BaseUseCase[T, R]):
    """
    Mixin for use cases acting on behalf of an actor.
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.current_user_id: Optional[str] = None

    def set_current_user(self, user_id: str) -> "AuthorizedUseCase":
        """Set the actor the use case runs as."""
        self.current_user_id = user_id
        return self

    async def _validate_request(self, request: T) -> None:
        """Validate request with authentication check."""
        await super()._validate_request(request)

        if not self.current_user_id:
            raise ValidationError("User authentication required", "actor_id")
