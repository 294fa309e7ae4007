"""
Global error handler middleware for the FastAPI application.
Catches and formats all exceptions consistently.
"""

import logging
import traceback
from typing import Any, Dict
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from fastapi import status
from sqlalchemy.exc import OperationalError
import json

from timesheets.config import get_settings
from timesheets.domain.models.base import DomainException

logger = logging.getLogger(__name__)


# Domain error codes that are not plain 422s
ERROR_CODE_STATUS: Dict[str, int] = {
    "NOT_FOUND": status.HTTP_404_NOT_FOUND,
    "UNAUTHORIZED_APPROVER": status.HTTP_403_FORBIDDEN,
    "ENTRY_LOCKED": status.HTTP_409_CONFLICT,
    "SHEET_NOT_DRAFT": status.HTTP_409_CONFLICT,
    "SHEET_NOT_SUBMITTED": status.HTTP_409_CONFLICT,
    "ENTRY_ALREADY_ON_SHEET": status.HTTP_409_CONFLICT,
    "UNKNOWN_ERROR": status.HTTP_500_INTERNAL_SERVER_ERROR,
}

ERROR_STATUS_TITLES: Dict[int, str] = {
    status.HTTP_400_BAD_REQUEST: "Bad Request",
    status.HTTP_403_FORBIDDEN: "Forbidden",
    status.HTTP_404_NOT_FOUND: "Not Found",
    status.HTTP_409_CONFLICT: "Conflict",
    status.HTTP_422_UNPROCESSABLE_ENTITY: "Unprocessable Entity",
    status.HTTP_500_INTERNAL_SERVER_ERROR: "Internal Server Error",
    status.HTTP_503_SERVICE_UNAVAILABLE: "Service Unavailable",
}


def status_for_error_code(code: str) -> int:
    """HTTP status for a domain error code."""
    return ERROR_CODE_STATUS.get(code, status.HTTP_422_UNPROCESSABLE_ENTITY)


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Middleware to handle all uncaught exceptions and format error responses.
    """

    async def dispatch(self, request: Request, call_next):
        """
        Process the request and handle any exceptions.
        """
        try:
            response = await call_next(request)
            return response
        except Exception as exc:
            return await self.handle_exception(request, exc)

    async def handle_exception(self, request: Request, exc: Exception) -> JSONResponse:
        """
        Handle different types of exceptions and return appropriate responses.
        """
        # Log the full exception with traceback
        logger.error(
            f"Unhandled exception: {type(exc).__name__}: {str(exc)}",
            exc_info=True,
            extra={
                "request_path": request.url.path,
                "request_method": request.method,
                "client_host": request.client.host if request.client else None
            }
        )

        # Prepare error response
        error_response = self.format_error_response(exc)

        # In development, add more debug information
        if get_settings().debug:
            error_response["debug"] = {
                "exception_type": type(exc).__name__,
                "traceback": traceback.format_exc().split("\n")
            }

        return JSONResponse(
            status_code=error_response.get("status_code", 500),
            content=error_response
        )

    def format_error_response(self, exc: Exception) -> Dict[str, Any]:
        """
        Format exception into a consistent error response structure.
        """
        # Default error response
        error_response = {
            "error": "Internal Server Error",
            "message": "An unexpected error occurred",
            "status_code": status.HTTP_500_INTERNAL_SERVER_ERROR
        }

        if isinstance(exc, DomainException):
            status_code = status_for_error_code(exc.code)
            error_response.update({
                "error": ERROR_STATUS_TITLES.get(status_code, "Error"),
                "code": exc.code,
                "message": exc.message,
                "status_code": status_code
            })
        elif isinstance(exc, OperationalError):
            error_response.update({
                "error": "Service Unavailable",
                "message": "The record store is not reachable",
                "status_code": status.HTTP_503_SERVICE_UNAVAILABLE
            })
        elif isinstance(exc, json.JSONDecodeError):
            error_response.update({
                "error": "Invalid JSON",
                "message": "The request body contains invalid JSON",
                "status_code": status.HTTP_400_BAD_REQUEST
            })
        elif isinstance(exc, ValueError):
            error_response.update({
                "error": "Bad Request",
                "message": str(exc),
                "status_code": status.HTTP_400_BAD_REQUEST
            })

        return error_response
