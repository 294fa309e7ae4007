"""
Authentication dependencies for FastAPI.
Resolves the acting user from the bearer token.
"""

from typing import Annotated
from functools import lru_cache
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from timesheets.infrastructure.auth.jwt_handler import JWTHandler
from timesheets.domain.models.base import ValidationError


# Security scheme
security = HTTPBearer()


@lru_cache()
def get_jwt_handler() -> JWTHandler:
    """Dependency to get JWT handler."""
    return JWTHandler()


async def get_current_user_id(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    jwt_handler: Annotated[JWTHandler, Depends(get_jwt_handler)]
) -> str:
    """
    FastAPI dependency to get current authenticated user ID.

    Raises:
        HTTPException: If authentication fails
    """
    try:
        return jwt_handler.get_user_id(credentials.credentials)
    except ValidationError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=e.message,
            headers={"WWW-Authenticate": "Bearer"},
        )


CurrentUserId = Annotated[str, Depends(get_current_user_id)]
