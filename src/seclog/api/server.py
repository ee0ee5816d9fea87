"""FastAPI server for the security log API.

Implements:
- Security log API (/api/security-logs) - active pages, archives, statistics

The app lifespan runs the daily RetentionScheduler when scheduler.enabled
is set in config. Authorization is not handled here; deploy behind a
gateway that enforces it.

Usage:
    seclog serve --host 127.0.0.1 --port 8780

    For development with auto-reload:
        uvicorn seclog.api.server:create_api_app \\
            --factory --host 127.0.0.1 --port 8780
"""

from __future__ import annotations

__all__ = ["create_api_app"]

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

from seclog import __version__
from seclog.config import AppConfig, get_config_path
from seclog.engine.scheduler import RetentionScheduler
from seclog.engine.service import SecurityLogService
from seclog.telemetry.system import configure_system_logger_file

from .errors import (
    APIError,
    api_error_handler,
    http_exception_handler,
    validation_error_handler,
)
from .routes import security_logs


@asynccontextmanager
async def _lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Start the daily scheduler for the lifetime of the server."""
    config: AppConfig = app.state.config
    scheduler: RetentionScheduler | None = None
    if config.scheduler.enabled:
        scheduler = RetentionScheduler(
            app.state.service,
            config.scheduler.daily_at,
            retention_months=config.archive.retention_months,
        )
        await scheduler.start()
    app.state.scheduler = scheduler
    try:
        yield
    finally:
        if scheduler is not None:
            await scheduler.stop()
        app.state.scheduler = None


def create_api_app(
    config: AppConfig | None = None,
    service: SecurityLogService | None = None,
) -> FastAPI:
    """Create the FastAPI application with all routes.

    Args:
        config: Application configuration. If None, loaded from the default
            config path (defaults apply when the file is absent).
        service: Pre-built service, mainly for tests. Built from config if None.

    Returns:
        Configured FastAPI application.

    Raises:
        ConfigurationError: If the config file exists but is invalid.
    """
    if config is None:
        config = AppConfig.load_or_default(get_config_path())
        configure_system_logger_file(
            config.logging.system_log_path,
            log_level=config.logging.log_level,
        )

    app = FastAPI(
        title="seclog",
        description="Security log archival and retrieval API",
        version=__version__,
        lifespan=_lifespan,
    )

    app.state.config = config
    app.state.service = service if service is not None else SecurityLogService.from_config(config)
    app.state.scheduler = None

    # Register exception handlers for structured error responses
    app.add_exception_handler(APIError, api_error_handler)
    app.add_exception_handler(RequestValidationError, validation_error_handler)
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)

    # Mount API routes
    app.include_router(security_logs.router, prefix="/api/security-logs", tags=["security-logs"])

    return app
