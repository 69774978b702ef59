"""FastAPI application factory.

This module provides the application factory pattern for creating
configured FastAPI instances with all middleware and routes.
"""

import asyncio
from collections.abc import Awaitable, Callable
from contextlib import asynccontextmanager
from typing import Any, AsyncGenerator
from uuid import uuid4

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from src.config import (
    ConfigurationError,
    Settings,
    get_settings,
    get_settings_override,
    load_board_geometry,
    load_palette,
    resolve_path,
)
from src.heatmap.exceptions import DatasetLoadError
from src.heatmap.loader import load_board_data
from src.logging_config import REQUEST_ID_CTX, configure_logging, get_logger
from src.routes import health_router, heatmap_router, page_router

logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan context manager.

    Loads the board configuration and both datasets before the first
    request. A failure here aborts startup.

    Args:
        app: The FastAPI application instance.

    Yields:
        None during application lifetime.

    Raises:
        ConfigurationError: If the board configuration is invalid.
        DatasetLoadError: If either dataset cannot be loaded.
    """
    settings: Settings = app.state.settings
    logger.info(
        "Application starting",
        extra={"app_name": settings.app_name, "version": settings.app_version},
    )

    try:
        app.state.geometry = load_board_geometry(settings.board_config_path)
        app.state.palette = load_palette(settings.board_config_path)
        app.state.board_data = await asyncio.to_thread(
            load_board_data,
            resolve_path(settings.hold_map_path),
            resolve_path(settings.usage_map_path),
        )
    except (ConfigurationError, DatasetLoadError) as exc:
        logger.error(
            "Failed to load board data",
            extra={"error": str(exc), "error_type": type(exc).__name__},
        )
        raise

    yield

    app.state.board_data = None
    logger.info("Application shutting down")


def create_app(config_override: dict[str, Any] | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        config_override: Optional dictionary to override default
            configuration values. Used primarily for testing.

    Returns:
        Configured FastAPI application instance ready to serve requests.

    Example:
        >>> app = create_app()
        >>> test_app = create_app({"testing": True, "usage_map_path": "/tmp/usage.json"})
    """
    if config_override:
        settings = get_settings_override(config_override)
    else:
        settings = get_settings()

    configure_logging(settings.log_level, json_output=not settings.debug)

    app = FastAPI(
        title=settings.app_name,
        version=settings.app_version,
        description="Climbing board hold usage heatmap",
        docs_url="/docs" if settings.debug or settings.testing else None,
        redoc_url="/redoc" if settings.debug or settings.testing else None,
        openapi_url="/openapi.json" if settings.debug or settings.testing else None,
        lifespan=lifespan,
    )

    # Routes read settings and loaded data from app state
    app.state.settings = settings
    app.state.board_data = None

    _configure_middleware(app, settings)
    _register_routes(app)

    return app


def _configure_middleware(app: FastAPI, settings: Settings) -> None:
    """Configure application middleware.

    Args:
        app: FastAPI application instance.
        settings: Application settings.
    """
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=False,
        allow_methods=["GET", "OPTIONS"],
        allow_headers=["*"],
    )

    @app.middleware("http")
    async def add_request_id(
        request: Request,
        call_next: Callable[[Request], Awaitable[Response]],
    ) -> Response:
        """Add a request ID to each response for tracing.

        An incoming X-Request-ID header is preserved; otherwise a new
        UUID is generated. The id is attached to every log record emitted
        while the request is served.
        """
        request_id = request.headers.get("X-Request-ID", str(uuid4()))
        request.state.request_id = request_id

        token = REQUEST_ID_CTX.set(request_id)
        try:
            response: Response = await call_next(request)
        finally:
            REQUEST_ID_CTX.reset(token)
        response.headers["X-Request-ID"] = request_id

        return response


def _register_routes(app: FastAPI) -> None:
    """Register all routes.

    Args:
        app: FastAPI application instance.
    """
    app.include_router(health_router, tags=["health"])
    app.include_router(health_router, prefix="/api/v1", tags=["health-v1"])
    app.include_router(heatmap_router)
    app.include_router(page_router)


# Create default app instance for uvicorn
# Usage: uvicorn src.app:application --reload
# Or with factory: uvicorn src.app:create_app --factory --reload
application = create_app()
