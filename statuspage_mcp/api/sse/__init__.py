"""
SSE Support
===========

Server-Sent Events sessions for the ``GET /mcp`` keep-alive stream.
"""

from .events import SSEEventType, format_sse_comment, format_sse_event
from .manager import SSESessionManager
from .session import SSESession, SSESessionState

__all__ = [
    "SSEEventType",
    "SSESession",
    "SSESessionManager",
    "SSESessionState",
    "format_sse_comment",
    "format_sse_event",
]
