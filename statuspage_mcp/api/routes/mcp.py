"""
MCP Routes
==========

FastAPI routes for the MCP bridge: JSON-RPC over ``POST /mcp`` and the
Server-Sent Events keep-alive stream on ``GET /mcp``.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse, StreamingResponse

from statuspage_mcp.api.dependencies import get_current_settings, get_dispatcher, get_sse_manager
from statuspage_mcp.api.jsonrpc.dispatcher import MCPDispatcher
from statuspage_mcp.api.sse.manager import SSESessionManager
from statuspage_mcp.config.logging import get_logger
from statuspage_mcp.config.settings import Settings

logger = get_logger(__name__)

router = APIRouter(tags=["MCP"])

sse_router = APIRouter(tags=["SSE"])


@router.post("/mcp")
async def handle_mcp_request(
    request: Request, dispatcher: MCPDispatcher = Depends(get_dispatcher)
) -> JSONResponse:
    """
    Handle a JSON-RPC request.

    The body is read raw so malformed JSON is answered with a JSON-RPC error
    rather than a validation response. The HTTP status is always 200.
    """
    body = await request.body()
    response = await dispatcher.handle(body, request.headers)
    return JSONResponse(status_code=200, content=response.to_wire())


@sse_router.get("/mcp")
async def open_sse_stream(
    sse_manager: SSESessionManager = Depends(get_sse_manager),
    settings: Settings = Depends(get_current_settings),
) -> StreamingResponse:
    """
    Establish an SSE connection.

    Returns:
        Streaming response carrying the handshake events and heartbeats
    """
    session = sse_manager.create_session()
    logger.info("SSE connection requested", connection_id=session.connection_id)

    return StreamingResponse(
        session.stream(),
        media_type="text/event-stream",
        headers={
            "Cache-Control": "no-cache",
            "Connection": "keep-alive",
            "Access-Control-Allow-Headers": ", ".join(settings.cors_allow_headers),
            "X-Accel-Buffering": "no",  # Disable Nginx buffering
            "X-Connection-ID": session.connection_id,
        },
    )
