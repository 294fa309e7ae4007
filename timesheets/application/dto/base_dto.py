"""
Base DTOs for the application layer.
Provides common patterns for request/response data transfer objects.
"""

from typing import Any, Dict, Optional
from datetime import datetime, timezone
from pydantic import BaseModel, Field, ConfigDict


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class BaseDTO(BaseModel):
    """Base DTO with common configuration."""

    model_config = ConfigDict(
        # Allow population by field name or alias
        populate_by_name=True,
        # Convert enum values to their values
        use_enum_values=True,
        # Validate assignment
        validate_assignment=True,
        extra="forbid",
    )


class RequestDTO(BaseDTO):
    """Base class for request DTOs."""
    pass


class ResponseDTO(BaseDTO):
    """Base class for response DTOs."""

    id: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class HealthCheckResponseDTO(BaseDTO):
    """Health check response DTO."""

    status: str = Field(description="Service status")
    timestamp: datetime = Field(default_factory=_utc_now, description="Check timestamp")
    version: Optional[str] = Field(default=None, description="Application version")
    dependencies: Optional[Dict[str, str]] = Field(default=None, description="Dependency statuses")


class ErrorResponseDTO(BaseDTO):
    """Error response DTO."""

    error: str = Field(description="Error code")
    message: str = Field(description="Error message")
    details: Optional[Dict[str, Any]] = Field(default=None, description="Additional error details")
    timestamp: datetime = Field(default_factory=_utc_now, description="Error timestamp")
