"""
Base classes for domain events and event handling.
Provides the foundation for event-driven architecture.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from typing import Dict, Any, List, Optional
from datetime import datetime, timezone
from dataclasses import dataclass, field, fields
from enum import Enum
import uuid


logger = logging.getLogger(__name__)


@dataclass(kw_only=True)
class DomainEvent(ABC):
    """Base class for all domain events."""

    event_id: str = field(default_factory=lambda: str(uuid.uuid4()))
    occurred_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_type: str = field(init=False, default="")
    version: int = field(default=1)

    def __post_init__(self):
        """Set event type based on class name."""
        if not self.event_type:
            self.event_type = self.__class__.__name__

    def to_dict(self) -> Dict[str, Any]:
        """Convert event to dictionary for serialization."""
        return {
            "event_id": self.event_id,
            "event_type": self.event_type,
            "occurred_at": self.occurred_at.isoformat(),
            "version": self.version,
            "data": self._get_event_data()
        }

    def _get_event_data(self) -> Dict[str, Any]:
        """Get event-specific data for serialization."""
        base_fields = {f.name for f in fields(DomainEvent)}
        data = {}
        for f in fields(self):
            if f.name in base_fields:
                continue
            value = getattr(self, f.name)
            if isinstance(value, datetime):
                value = value.isoformat()
            elif isinstance(value, Enum):
                value = value.value
            data[f.name] = value
        return data


class EventHandler(ABC):
    """Base class for event handlers."""

    @abstractmethod
    async def handle(self, event: DomainEvent) -> None:
        """Handle a domain event."""
        pass

    @abstractmethod
    def can_handle(self, event: DomainEvent) -> bool:
        """Check if this handler can process the given event."""
        pass


class EventDispatcher:
    """Dispatches domain events to registered handlers."""

    def __init__(self, max_log_size: int = 1000):
        """Initialize event dispatcher."""
        self._handlers: Dict[str, List[EventHandler]] = {}
        self._global_handlers: List[EventHandler] = []
        self._event_log: List[Dict[str, Any]] = []
        self._max_log_size = max_log_size

    def register_handler(self, event_type: str, handler: EventHandler) -> None:
        """Register an event handler for specific event type."""
        self._handlers.setdefault(event_type, []).append(handler)
        logger.info(f"Registered handler {handler.__class__.__name__} for {event_type}")

    def register_global_handler(self, handler: EventHandler) -> None:
        """Register a handler that receives all events."""
        self._global_handlers.append(handler)
        logger.info(f"Registered global handler {handler.__class__.__name__}")

    def clear_handlers(self) -> None:
        """Remove every registered handler."""
        self._handlers.clear()
        self._global_handlers.clear()

    async def dispatch(self, event: DomainEvent) -> None:
        """Dispatch event to all registered handlers."""
        self._event_log.append(event.to_dict())
        if len(self._event_log) > self._max_log_size:
            del self._event_log[: len(self._event_log) - self._max_log_size]

        logger.debug(f"Dispatching event: {event.event_type} (ID: {event.event_id})")

        specific_handlers = self._handlers.get(event.event_type, [])
        all_handlers = specific_handlers + [
            h for h in self._global_handlers
            if h.can_handle(event)
        ]

        if not all_handlers:
            logger.debug(f"No handlers registered for event: {event.event_type}")
            return

        await asyncio.gather(*(self._safe_handle(handler, event) for handler in all_handlers))

    async def dispatch_all(self, events: List[DomainEvent]) -> None:
        """Dispatch events in the order they were raised."""
        for event in events:
            await self.dispatch(event)

    async def _safe_handle(self, handler: EventHandler, event: DomainEvent) -> None:
        """Safely execute event handler with error handling."""
        try:
            await handler.handle(event)
            logger.debug(f"Handler {handler.__class__.__name__} processed {event.event_type}")
        except Exception:
            # One failing handler must not affect the others
            logger.error(
                f"Handler {handler.__class__.__name__} failed to process {event.event_type}",
                exc_info=True,
            )

    def get_event_log(self, limit: Optional[int] = None) -> List[Dict[str, Any]]:
        """Get recent events from the log, newest first."""
        events = list(reversed(self._event_log))
        return events[:limit] if limit else events

    def clear_event_log(self) -> None:
        """Clear the event log."""
        self._event_log.clear()

    def get_registered_handlers(self) -> Dict[str, List[str]]:
        """Get information about registered handlers."""
        result = {
            event_type: [h.__class__.__name__ for h in handlers]
            for event_type, handlers in self._handlers.items()
        }
        if self._global_handlers:
            result["global"] = [h.__class__.__name__ for h in self._global_handlers]
        return result


# Singleton instance
_event_dispatcher: Optional[EventDispatcher] = None


def get_event_dispatcher() -> EventDispatcher:
    """Get singleton event dispatcher instance."""
    global _event_dispatcher
    if _event_dispatcher is None:
        _event_dispatcher = EventDispatcher()
    return _event_dispatcher


async def publish_event(event: DomainEvent) -> None:
    """Publish a domain event."""
    await get_event_dispatcher().dispatch(event)
