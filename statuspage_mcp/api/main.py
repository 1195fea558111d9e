"""
FastAPI Application
==================

HTTP transport of the MCP bridge: JSON-RPC over ``POST /mcp``, the SSE
keep-alive stream on ``GET /mcp`` and health/metadata endpoints.
"""

from contextlib import asynccontextmanager
import uuid
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware
import uvicorn

from statuspage_mcp.api.jsonrpc.dispatcher import MCPDispatcher
from statuspage_mcp.api.routes.health import router as health_router
from statuspage_mcp.api.routes.mcp import router as mcp_router, sse_router
from statuspage_mcp.api.sse.manager import SSESessionManager
from statuspage_mcp.config.credentials import CredentialStore
from statuspage_mcp.config.logging import get_logger, setup_logging
from statuspage_mcp.config.settings import Settings, get_settings
from statuspage_mcp.mcp_server.handlers import ClientFactory, ToolExecutor
from statuspage_mcp.mcp_server.registry import ToolRegistry
from statuspage_mcp.mcp_server.tools import create_tool_registry

logger = get_logger(__name__)

CORS_ALLOW_METHODS = ["GET", "POST", "OPTIONS"]
CORS_MAX_AGE = 86400


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Application lifespan manager."""
    settings: Settings = app.state.settings
    logger.info(
        "Starting StatusPage MCP HTTP server",
        tools=app.state.registry.names(),
        sse_enabled=settings.sse_enabled,
    )

    try:
        yield
    finally:
        logger.info("Shutting down StatusPage MCP HTTP server")
        await app.state.sse_manager.close_all("server_shutdown")


def create_app(
    settings: Optional[Settings] = None,
    registry: Optional[ToolRegistry] = None,
    client_factory: Optional[ClientFactory] = None,
) -> FastAPI:
    """
    Application factory.

    Args:
        settings: Settings to use instead of the environment
        registry: Tool registry; defaults to all Statuspage tools
        client_factory: Builds the upstream client per tool call

    Returns:
        FastAPI application instance
    """
    settings = settings or get_settings()
    registry = registry or create_tool_registry()
    credential_store = CredentialStore.from_settings(settings)
    executor = ToolExecutor(registry, settings, client_factory=client_factory)

    app = FastAPI(
        title=settings.app_name,
        description="Model Context Protocol bridge for Atlassian Statuspage",
        version=settings.app_version,
        lifespan=lifespan,
        docs_url="/docs" if settings.debug else None,
        redoc_url="/redoc" if settings.debug else None,
    )

    app.state.settings = settings
    app.state.registry = registry
    app.state.credential_store = credential_store
    app.state.dispatcher = MCPDispatcher(registry, executor, credential_store, settings)
    app.state.sse_manager = SSESessionManager(registry, settings)

    app.include_router(health_router)
    app.include_router(mcp_router)

    # Include SSE routes if enabled
    if settings.sse_enabled:
        app.include_router(sse_router)

    # CORS middleware for cross-origin requests
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=CORS_ALLOW_METHODS,
        allow_headers=settings.cors_allow_headers,
        max_age=CORS_MAX_AGE,
    )

    preflight_headers = {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": ", ".join(CORS_ALLOW_METHODS),
        "Access-Control-Allow-Headers": ", ".join(settings.cors_allow_headers),
        "Access-Control-Max-Age": str(CORS_MAX_AGE),
    }

    # Outermost middleware: every OPTIONS request is answered here with 204
    @app.middleware("http")
    async def add_preflight_and_request_id(request: Request, call_next) -> Response:  # type: ignore
        """Answer every OPTIONS request with 204 and tag other responses with a request ID."""
        if request.method == "OPTIONS":
            return Response(status_code=204, headers=preflight_headers)

        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        # CORSMiddleware only sets this when the request carries an Origin header
        response.headers.setdefault("Access-Control-Allow-Origin", "*")
        response.headers["X-Request-ID"] = request_id
        return response

    return app


def run_http_server(settings: Optional[Settings] = None) -> None:
    """Run the HTTP server with uvicorn."""
    settings = settings or get_settings()
    uvicorn.run(
        create_app(settings),
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
        log_config=None,
        access_log=True,
    )


if __name__ == "__main__":
    setup_logging()
    run_http_server()
