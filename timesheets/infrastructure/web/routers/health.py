"""
Health check router.
"""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import sessionmaker

from timesheets.config import get_settings
from timesheets.application.dto.base_dto import HealthCheckResponseDTO
from timesheets.infrastructure.db.database import get_session_factory


logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("", response_model=HealthCheckResponseDTO)
async def health_check(session_factory: Annotated[sessionmaker, Depends(get_session_factory)]):
    """Health check endpoint for monitoring."""
    database = "ok"
    try:
        with session_factory() as session:
            session.execute(text("SELECT 1"))
    except SQLAlchemyError as e:
        logger.warning(f"Database health check failed: {str(e)}")
        database = "unavailable"

    return HealthCheckResponseDTO(
        status="healthy" if database == "ok" else "degraded",
        version=get_settings().api_version,
        dependencies={"database": database},
    )
