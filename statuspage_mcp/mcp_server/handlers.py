"""
MCP Tool Execution
==================

Runs registered tools with per-request credentials. Used by both the stdio
server and the HTTP JSON-RPC dispatcher so the two transports share one
execution path.
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, Optional
import time

from statuspage_mcp.config.credentials import StatusPageCredentials
from statuspage_mcp.config.logging import get_logger
from statuspage_mcp.config.settings import Settings, get_settings
from statuspage_mcp.core.statuspage.client import StatusPageClient
from statuspage_mcp.models.schemas import ToolResult

from .registry import ToolRegistry

logger = get_logger(__name__)

ClientFactory = Callable[[StatusPageCredentials, Settings], StatusPageClient]


@dataclass(frozen=True)
class ToolContext:
    """Everything a tool handler needs for one invocation."""

    credentials: StatusPageCredentials
    client: StatusPageClient
    settings: Settings


class ToolExecutor:
    """Looks up a tool, checks credentials and runs the handler."""

    def __init__(
        self,
        registry: ToolRegistry,
        settings: Optional[Settings] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.registry = registry
        self.settings = settings or get_settings()
        self.client_factory: ClientFactory = client_factory or StatusPageClient
        self.logger: Any = logger.bind(component="tool_executor")

    async def execute(
        self,
        name: str,
        arguments: Optional[Dict[str, Any]],
        credentials: StatusPageCredentials,
    ) -> ToolResult:
        """
        Execute a tool.

        Args:
            name: Registered tool name
            arguments: Tool arguments
            credentials: Credentials resolved for this request

        Returns:
            Tool result produced by the handler

        Raises:
            ToolNotFoundError: Unknown tool name
            MissingCredentialsError: API key or page id missing
            ToolArgumentsError: Arguments rejected by the handler
        """
        descriptor = self.registry.lookup(name)
        credentials.validate_complete()

        start_time = time.time()
        self.logger.info("Tool called", tool=name, page_id=credentials.page_id)

        async with self.client_factory(credentials, self.settings) as client:
            context = ToolContext(credentials=credentials, client=client, settings=self.settings)
            result = await descriptor.handler(dict(arguments or {}), context)

        self.logger.info(
            "Tool finished",
            tool=name,
            is_error=result.is_error,
            execution_time=round(time.time() - start_time, 4),
        )
        return result
