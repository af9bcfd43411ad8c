"""FastAPI application with lifespan management."""

from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager
from typing import Annotated

import httpx
import structlog
from fastapi import Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from study_bridge.api.deps import get_bridge
from study_bridge.api.middleware import RequestLoggingMiddleware
from study_bridge.api.routes.capabilities import router as capabilities_router
from study_bridge.api.routes.diagnostics import router as diagnostics_router
from study_bridge.capabilities import CapabilityRunner
from study_bridge.config import settings
from study_bridge.errors import (
    BridgeError,
    MissingApiKeyError,
    MissingPromptParametersError,
    UnknownCapabilityError,
    UnknownProviderError,
)
from study_bridge.llm import ProviderBridge, create_bridge, create_gateway
from study_bridge.logging_config import configure_logging

logger = structlog.get_logger()

# BridgeError subclass -> HTTP status; anything unlisted maps to 502
ERROR_STATUS: dict[type[BridgeError], int] = {
    UnknownCapabilityError: 404,
    MissingPromptParametersError: 400,
    UnknownProviderError: 400,
    MissingApiKeyError: 500,
}


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None]:
    """Manage application startup and shutdown.

    Startup:
        - Create one shared HTTP client for direct providers.
        - Assemble ProviderBridge, Gemini gateway and CapabilityRunner.
    Shutdown:
        - Close the HTTP client.
    """
    configure_logging(
        environment=str(settings.environment),
        log_level=settings.log_level,
    )
    async with httpx.AsyncClient(
        timeout=httpx.Timeout(settings.request_timeout_seconds)
    ) as http_client:
        bridge = create_bridge(settings, http_client=http_client)
        gateway = create_gateway(settings, bridge.config)
        app.state.bridge = bridge
        app.state.gateway = gateway
        app.state.capability_runner = CapabilityRunner(bridge, gateway)

        logger.info("app_started", environment=str(settings.environment))
        yield

    logger.info("app_stopped")


app = FastAPI(
    title="Study Bridge",
    description="AI study tools over a multi-provider LLM bridge",
    version="0.1.0",
    lifespan=lifespan,
    debug=settings.is_dev,
)

app.add_middleware(RequestLoggingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_allowed_origins,
    allow_credentials=settings.cors_allow_credentials,
    allow_methods=settings.cors_allowed_methods,
    allow_headers=settings.cors_allowed_headers,
)


@app.get("/health")
async def health(
    bridge: Annotated[ProviderBridge, Depends(get_bridge)],
) -> JSONResponse:
    """Report bridge configuration; no provider is contacted."""
    config = bridge.config
    return JSONResponse(
        content={
            "status": "ok",
            "gateway": config.gateway.provider,
            "direct_providers": config.direct_providers,
            "rescue": {"provider": config.rescue.provider, "model": config.rescue.model},
        },
    )


@app.exception_handler(BridgeError)
async def bridge_error_handler(request: Request, exc: BridgeError) -> JSONResponse:
    """Surface bridge failures with their diagnostic message verbatim."""
    status_code = ERROR_STATUS.get(type(exc), 502)
    logger.warning(
        "bridge_error",
        path=request.url.path,
        error_type=type(exc).__name__,
        status_code=status_code,
        error=str(exc),
    )
    return JSONResponse(status_code=status_code, content={"detail": str(exc)})


@app.exception_handler(Exception)
async def unhandled_exception_handler(
    request: Request,
    exc: Exception,
) -> JSONResponse:
    """Catch-all handler for unhandled exceptions."""
    logger.error("unhandled_exception", exc_info=exc, path=request.url.path)
    return JSONResponse(
        status_code=500,
        content={"detail": "Internal server error"},
    )


app.include_router(capabilities_router, prefix="/api/v1")
app.include_router(diagnostics_router, prefix="/api/v1")
