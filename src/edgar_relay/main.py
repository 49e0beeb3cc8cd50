# src/edgar_relay/main.py
# Copyright (c) Edgar Relay.
# SPDX-License-Identifier: MIT
"""
Application Entry (Adapters Bootstrap)

Synopsis:
    FastAPI bootstrap that wires CORS, the structured exception handlers and
    the routers. Provides an application factory (`create_app`); run it with
    ``uvicorn --factory edgar_relay.main:create_app``.

Design:
    • Bootstrap only (no business logic): routers + middleware + handlers.
    • Lifespan builds the relay runtime once and tears it down safely.
    • No eager module-level app: settings are required at construction time.
"""

from __future__ import annotations

from collections.abc import AsyncGenerator, Callable
from contextlib import AbstractAsyncContextManager, asynccontextmanager

import httpx
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from starlette.exceptions import HTTPException
from starlette.requests import Request
from starlette.responses import Response as StarletteResponse

from edgar_relay import __version__
from edgar_relay.adapters.routers import mcp_router
from edgar_relay.adapters.routers.metrics_router import router as metrics_router
from edgar_relay.config.settings import Settings, get_settings
from edgar_relay.dependencies.core.bootstrap import bootstrap
from edgar_relay.domain.exceptions.errors import RelayError
from edgar_relay.infrastructure.http.errors import (
    handle_http_exception,
    handle_relay_error,
    handle_unhandled_exception,
    handle_validation_error,
)
from edgar_relay.infrastructure.logging.logger import (
    configure_root_logging,
    get_json_logger,
)

logger = get_json_logger(__name__)


# -----------------------------------------------------------------------------
# Lifespan
# -----------------------------------------------------------------------------
def _runtime_lifespan(
    settings: Settings,
    http: httpx.AsyncClient | None,
) -> Callable[[FastAPI], AbstractAsyncContextManager[None]]:
    """Build the lifespan that exposes the relay runtime on ``app.state.relay``.

    Args:
        settings: Resolved settings.
        http: Optional upstream HTTP client handed to the bootstrap.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        async with bootstrap(settings, http=http) as state:
            app.state.settings = state.settings
            app.state.relay = state
            yield

    return lifespan


# -----------------------------------------------------------------------------
# Middleware & CORS
# -----------------------------------------------------------------------------
def _attach_cors(app: FastAPI, settings: Settings) -> None:
    """Attach CORS middleware based on settings.

    Args:
        app: FastAPI application.
        settings: Runtime settings containing CORS config.
    """
    allow_origins = settings.cors_allow_origins or ["*"]

    app.add_middleware(
        CORSMiddleware,
        allow_origins=allow_origins,
        allow_credentials="*" not in allow_origins,
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["X-Session-ID"],
    )


def _patch_exception_handlers(app: FastAPI) -> None:
    """Patch default exception handlers with structured envelope equivalents.

    Args:
        app: FastAPI application.
    """

    async def _relay_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, RelayError):
            raise exc
        return await handle_relay_error(request, exc)

    async def _http_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, HTTPException):
            raise exc
        return await handle_http_exception(request, exc)

    async def _validation_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        if not isinstance(exc, RequestValidationError):
            raise exc
        return await handle_validation_error(request, exc)

    async def _unhandled_error_handler(request: Request, exc: Exception) -> StarletteResponse:
        return await handle_unhandled_exception(request, exc)

    app.add_exception_handler(RelayError, _relay_error_handler)
    app.add_exception_handler(HTTPException, _http_error_handler)
    app.add_exception_handler(RequestValidationError, _validation_error_handler)
    app.add_exception_handler(Exception, _unhandled_error_handler)


# -----------------------------------------------------------------------------
# App factory
# -----------------------------------------------------------------------------
def create_app(
    settings: Settings | None = None,
    *,
    http: httpx.AsyncClient | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    Args:
        settings: Explicit settings; defaults to :func:`get_settings`.
        http: Optional upstream HTTP client (tests inject a mock transport).

    Returns:
        FastAPI: Fully configured application instance.

    Raises:
        FatalConfigError: If settings are missing or invalid.
    """
    settings = settings or get_settings()
    configure_root_logging(settings.log_level)

    app = FastAPI(
        title="Edgar Relay",
        version=__version__,
        description="SEC EDGAR data exposed as MCP tools and resources.",
        lifespan=_runtime_lifespan(settings, http),
    )

    _patch_exception_handlers(app)
    _attach_cors(app, settings)

    app.include_router(mcp_router.router)
    app.include_router(metrics_router)

    logger.info(
        "service_startup",
        extra={
            "extra": {
                "service": "edgar-relay",
                "env": settings.environment.value,
                "version": __version__,
            }
        },
    )
    return app


if __name__ == "__main__":  # pragma: no cover
    import uvicorn

    _settings = get_settings()
    uvicorn.run(
        "edgar_relay.main:create_app",
        factory=True,
        host=_settings.host,
        port=_settings.port,
    )
