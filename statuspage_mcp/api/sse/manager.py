"""
SSE Session Manager
===================

Tracks the open SSE sessions of this process so they can be closed together
on shutdown.
"""

from typing import Any, Dict, List, Optional
import asyncio

from statuspage_mcp.config.logging import get_logger
from statuspage_mcp.config.settings import Settings, get_settings
from statuspage_mcp.mcp_server.registry import ToolRegistry

from .session import SSESession

logger = get_logger(__name__)


class SSESessionManager:
    """
    Manages SSE sessions.

    Handles:
    - Session creation with the configured heartbeat and discovery push
    - Tracking sessions from the moment their stream opens
    - Removal of sessions when they close
    - Closing every session at server shutdown
    """

    def __init__(self, registry: ToolRegistry, settings: Optional[Settings] = None) -> None:
        self.registry = registry
        self.settings = settings or get_settings()
        self.sessions: Dict[str, SSESession] = {}
        self.logger: Any = logger.bind(component="sse_manager")

    def _discovery_tools(self) -> Optional[List[Dict[str, Any]]]:
        if not self.settings.sse_discovery_push:
            return None
        schema_key = self.settings.mcp_discovery_schema_key
        return [descriptor.discovery_entry(schema_key) for descriptor in self.registry]

    def create_session(self) -> SSESession:
        """
        Create a session for a new stream.

        The session is tracked and its heartbeat started once the stream is
        first iterated.
        """
        session = SSESession(
            heartbeat_interval=self.settings.sse_heartbeat_interval_seconds,
            protocol_version=self.settings.mcp_protocol_version,
            discovery_tools=self._discovery_tools(),
            on_open=self._add_session,
            on_close=self._remove_session,
        )
        self.logger.debug("SSE session created", connection_id=session.connection_id)
        return session

    def get_session(self, connection_id: str) -> Optional[SSESession]:
        return self.sessions.get(connection_id)

    def _add_session(self, session: SSESession) -> None:
        self.sessions[session.connection_id] = session
        self.logger.info(
            "SSE session opened",
            connection_id=session.connection_id,
            active_sessions=len(self.sessions),
        )

    def _remove_session(self, session: SSESession) -> None:
        self.sessions.pop(session.connection_id, None)

    async def close_all(self, reason: str = "server_shutdown") -> int:
        """
        Close every open session and wait for their heartbeats to stop.

        Returns:
            Number of sessions closed
        """
        sessions = list(self.sessions.values())
        closed = sum(1 for session in sessions if session.close(reason))
        if sessions:
            await asyncio.gather(*(session.wait_closed() for session in sessions))
        self.logger.info("SSE sessions closed", count=closed, reason=reason)
        return closed

    @property
    def active_count(self) -> int:
        return len(self.sessions)

    def __len__(self) -> int:
        return len(self.sessions)
