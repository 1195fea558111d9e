"""
Health Routes
=============

FastAPI routes for health checks and tool metadata.
"""

from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import APIRouter, Depends

from statuspage_mcp.api.dependencies import get_current_settings, get_tool_registry
from statuspage_mcp.config.settings import Settings
from statuspage_mcp.mcp_server.registry import ToolRegistry

router = APIRouter(tags=["Health"])


@router.get("/")
async def health_check(settings: Settings = Depends(get_current_settings)) -> Dict[str, Any]:
    """Basic health check endpoint."""
    return {
        "status": "ok",
        "service": settings.service_name,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }


@router.get("/tools")
async def list_tools(registry: ToolRegistry = Depends(get_tool_registry)) -> Dict[str, Any]:
    """Names of the registered tools."""
    names = registry.names()
    return {"status": "ok", "tools": names, "count": len(names)}


@router.get("/mcp/metadata")
async def mcp_metadata(
    registry: ToolRegistry = Depends(get_tool_registry),
    settings: Settings = Depends(get_current_settings),
) -> Dict[str, Any]:
    """Server name, version and the full tool catalogue."""
    return {
        "status": "ok",
        "server_name": settings.app_name,
        "version": settings.app_version,
        "tools": [descriptor.discovery_entry("schema") for descriptor in registry],
    }
