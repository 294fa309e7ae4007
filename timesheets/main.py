"""
Main FastAPI application entry point.
Configures the app, middleware, routers, and startup/shutdown events.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
import logging
from typing import Dict, Any

from timesheets.config import get_settings
from timesheets.infrastructure.db.database import get_engine, create_tables
from timesheets.infrastructure.events.event_setup import initialize_event_system
from timesheets.infrastructure.scheduling.sweep_runner import AutoApprovalSweepRunner
from timesheets.infrastructure.web.dependencies import get_workflow_context
from timesheets.infrastructure.web.middleware.error_handler import ErrorHandlerMiddleware
from timesheets.infrastructure.web.routers import (
    health,
    time_entries,
    time_sheets,
    approval_settings,
)


settings = get_settings()

# Configure logging
logging.basicConfig(
    level=logging.DEBUG if settings.debug else settings.log_level.upper(),
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Manage application lifecycle.
    Setup and teardown operations.
    """
    # Startup
    logger.info(f"Starting {settings.api_title} v{settings.api_version}")
    logger.info(f"Environment: {settings.environment}")

    create_tables(get_engine())
    initialize_event_system()

    sweep_runner = None
    if settings.auto_approval_enabled:
        sweep_runner = AutoApprovalSweepRunner(
            get_workflow_context(),
            interval_seconds=settings.auto_approval_interval_seconds,
        )
        sweep_runner.start()
    app.state.sweep_runner = sweep_runner

    yield

    # Shutdown
    logger.info("Shutting down application")
    if sweep_runner is not None:
        await sweep_runner.stop()
    get_engine().dispose()


def create_application() -> FastAPI:
    """
    Create and configure the FastAPI application.
    """
    app = FastAPI(
        title=settings.api_title,
        version=settings.api_version,
        debug=settings.debug,
        docs_url=f"{settings.api_prefix}/docs" if settings.debug else None,
        redoc_url=f"{settings.api_prefix}/redoc" if settings.debug else None,
        openapi_url=f"{settings.api_prefix}/openapi.json" if settings.debug else None,
        lifespan=lifespan
    )

    # Add CORS middleware
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=settings.cors_allow_credentials,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Add custom error handler middleware
    app.add_middleware(ErrorHandlerMiddleware)

    # Include routers
    app.include_router(
        health.router,
        prefix=f"{settings.api_prefix}/health",
        tags=["Health"]
    )
    app.include_router(
        time_entries.router,
        prefix=f"{settings.api_prefix}/time-entries",
        tags=["Time Entries"]
    )
    app.include_router(
        time_sheets.router,
        prefix=f"{settings.api_prefix}/time-sheets",
        tags=["Time Sheets"]
    )
    app.include_router(
        approval_settings.router,
        prefix=f"{settings.api_prefix}/projects",
        tags=["Approval Settings"]
    )

    # Root endpoint
    @app.get("/")
    async def root() -> Dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": settings.api_title,
            "version": settings.api_version,
            "environment": settings.environment,
            "docs": f"{settings.api_prefix}/docs" if settings.debug else None,
            "health": f"{settings.api_prefix}/health"
        }

    # Custom 404 handler
    @app.exception_handler(404)
    async def not_found_handler(request: Request, exc):
        """Custom 404 error handler."""
        detail = getattr(exc, "detail", None)
        if isinstance(detail, dict):
            return JSONResponse(status_code=404, content={"detail": detail})
        return JSONResponse(
            status_code=404,
            content={
                "error": "Not Found",
                "message": f"The path {request.url.path} was not found",
                "path": request.url.path
            }
        )

    return app


# Create the FastAPI app instance
app = create_application()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "timesheets.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.is_development,
    )
