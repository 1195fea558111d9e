"""
SSE Session
===========

One Server-Sent Events stream: the initial handshake events, a heartbeat task
and an idempotent close. Events are queued and drained by ``stream()``, which
feeds the HTTP response.
"""

from typing import Any, AsyncIterator, Callable, Dict, List, Optional
from enum import Enum
import asyncio
import time
import uuid

from statuspage_mcp.config.logging import get_logger

from .events import create_discover_tools_event, create_ready_event, format_sse_comment

logger = get_logger(__name__)

DEFAULT_HEARTBEAT_INTERVAL = 15.0


class SSESessionState(str, Enum):
    """Lifecycle state of an SSE session."""

    CONNECTING = "connecting"
    OPEN = "open"
    CLOSED = "closed"


class SSESession:
    """
    A single SSE connection.

    ``open()`` queues the ``:`` comment, the ``mcp.ready`` notification and the
    optional tool discovery push, then starts the heartbeat. ``stream()`` opens a
    session that is still connecting, so a response that is never iterated
    never starts a heartbeat. ``close()`` stops the heartbeat exactly once;
    later calls return ``False``.
    """

    def __init__(
        self,
        connection_id: Optional[str] = None,
        heartbeat_interval: float = DEFAULT_HEARTBEAT_INTERVAL,
        protocol_version: str = "1.0",
        discovery_tools: Optional[List[Dict[str, Any]]] = None,
        on_open: Optional[Callable[["SSESession"], None]] = None,
        on_close: Optional[Callable[["SSESession"], None]] = None,
    ) -> None:
        self.connection_id = connection_id or str(uuid.uuid4())
        self.heartbeat_interval = heartbeat_interval
        self.protocol_version = protocol_version
        self.discovery_tools = discovery_tools
        self.state = SSESessionState.CONNECTING
        self.created_at = time.time()
        self.heartbeats_sent = 0
        self.close_reason: Optional[str] = None
        self.logger: Any = logger.bind(component="sse_session", connection_id=self.connection_id)

        self._on_open = on_open
        self._on_close = on_close
        self._queue: asyncio.Queue[Optional[str]] = asyncio.Queue()
        self._heartbeat_task: Optional[asyncio.Task[None]] = None

    @property
    def is_open(self) -> bool:
        return self.state == SSESessionState.OPEN

    @property
    def heartbeat_task(self) -> Optional["asyncio.Task[None]"]:
        return self._heartbeat_task

    def open(self) -> None:
        """Queue the handshake events and start the heartbeat. Needs a running loop."""
        if self.state != SSESessionState.CONNECTING:
            raise RuntimeError(f"SSE session {self.connection_id} is already {self.state.value}")

        self._queue.put_nowait(format_sse_comment())
        self._queue.put_nowait(create_ready_event(self.protocol_version).format_sse())
        if self.discovery_tools is not None:
            self._queue.put_nowait(create_discover_tools_event(self.discovery_tools).format_sse())

        self.state = SSESessionState.OPEN
        self._heartbeat_task = asyncio.create_task(
            self._heartbeat_loop(), name=f"sse-heartbeat-{self.connection_id}"
        )
        if self._on_open is not None:
            self._on_open(self)
        self.logger.info("SSE connection opened", heartbeat_interval=self.heartbeat_interval)

    async def _heartbeat_loop(self) -> None:
        """Queue a comment line every heartbeat interval while open."""
        while self.state == SSESessionState.OPEN:
            await asyncio.sleep(self.heartbeat_interval)
            if self.state != SSESessionState.OPEN:
                break
            self._queue.put_nowait(format_sse_comment())
            self.heartbeats_sent += 1
            self.logger.debug("Heartbeat sent", heartbeats_sent=self.heartbeats_sent)

    def close(self, reason: str = "closed") -> bool:
        """
        Close the session and cancel its heartbeat.

        Args:
            reason: Reason for closing, kept for logging

        Returns:
            True if this call closed the session, False if it was already closed
        """
        if self.state == SSESessionState.CLOSED:
            return False

        self.state = SSESessionState.CLOSED
        self.close_reason = reason

        if self._heartbeat_task is not None and not self._heartbeat_task.done():
            self._heartbeat_task.cancel()

        # None is the stop signal for stream()
        self._queue.put_nowait(None)

        if self._on_close is not None:
            self._on_close(self)

        self.logger.info(
            "SSE connection closed",
            reason=reason,
            heartbeats_sent=self.heartbeats_sent,
            duration=round(time.time() - self.created_at, 3),
        )
        return True

    async def wait_closed(self) -> None:
        """Wait for the heartbeat task to finish after ``close()``."""
        if self._heartbeat_task is not None:
            await asyncio.wait([self._heartbeat_task])

    async def stream(self) -> AsyncIterator[str]:
        """
        Yield queued SSE messages until the session closes.

        A session still connecting is opened on first iteration. Leaving the
        generator for any reason, including client disconnect, closes the
        session.
        """
        try:
            if self.state == SSESessionState.CONNECTING:
                self.open()
            while True:
                message = await self._queue.get()
                if message is None:
                    break
                yield message
        finally:
            self.close("stream_ended")
