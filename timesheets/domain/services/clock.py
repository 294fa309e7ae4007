"""Time source used by the workflow services."""

from abc import ABC, abstractmethod
from datetime import datetime, timezone


class Clock(ABC):
    """Provides the current time."""

    @abstractmethod
    def now(self) -> datetime:
        """Current time as an aware UTC datetime."""
        pass


class SystemClock(Clock):
    """Wall clock."""

    def now(self) -> datetime:
        return datetime.now(timezone.utc)
