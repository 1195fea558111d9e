"""
SSE Events
==========

Server-Sent Events type definitions and formatting functions.
Events pushed on the MCP stream are JSON-RPC notifications sent as ``data``
lines; keep-alive pings are SSE comments.
"""

from typing import Dict, Any, List
from enum import Enum
import json

JSONRPC_VERSION = "2.0"


class SSEEventType(str, Enum):
    """Notification methods pushed on the MCP stream."""

    READY = "mcp.ready"
    DISCOVER_TOOLS = "mcp.discover_tools"


class SSENotification:
    """JSON-RPC notification delivered as an SSE event."""

    def __init__(self, method: SSEEventType, params: Dict[str, Any]):
        self.method = method
        self.params = params

    def to_dict(self) -> Dict[str, Any]:
        return {"jsonrpc": JSONRPC_VERSION, "method": self.method.value, "params": self.params}

    def format_sse(self) -> str:
        """Format notification for SSE protocol."""
        return format_sse_event(self.to_dict())


def format_sse_event(data: Dict[str, Any]) -> str:
    """
    Format data for Server-Sent Events protocol.

    Args:
        data: Event data dictionary, sent as one compact JSON ``data`` line

    Returns:
        Formatted SSE message string
    """
    data_json = json.dumps(data, default=str, separators=(",", ":"))

    # SSE protocol requires double newline at end
    return f"data: {data_json}\n\n"


def format_sse_comment(comment: str = "") -> str:
    """Format an SSE comment line, ignored by clients and used as a keep-alive."""
    return f":{comment}\n\n"


def create_ready_event(version: str) -> SSENotification:
    """Create the notification announcing that the stream is ready."""
    return SSENotification(SSEEventType.READY, {"version": version})


def create_discover_tools_event(tools: List[Dict[str, Any]]) -> SSENotification:
    """Create the notification pushing the tool catalogue."""
    return SSENotification(SSEEventType.DISCOVER_TOOLS, {"tools": tools})
