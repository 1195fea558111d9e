"""
API Dependencies
================

FastAPI dependencies resolving the components built by ``create_app``.
"""

from fastapi import Request

from statuspage_mcp.api.jsonrpc.dispatcher import MCPDispatcher
from statuspage_mcp.api.sse.manager import SSESessionManager
from statuspage_mcp.config.settings import Settings
from statuspage_mcp.mcp_server.registry import ToolRegistry


def get_current_settings(request: Request) -> Settings:
    """Dependency to get the application settings."""
    return request.app.state.settings


def get_tool_registry(request: Request) -> ToolRegistry:
    return request.app.state.registry


def get_dispatcher(request: Request) -> MCPDispatcher:
    return request.app.state.dispatcher


def get_sse_manager(request: Request) -> SSESessionManager:
    return request.app.state.sse_manager
